"""
App layer: 웹 서버 (FastAPI + Jinja2).

역할:
- 페이지 렌더링, 폼 처리, 세션 쿠키
- 인증 게이트 (미인증 → /login)
- 영속화 로직 없음 (core에 위임)

주의: 폴더 구분
- src/app/templates/ → Jinja2 HTML
- public/uploads/ (루트) → 업로드 저장소 (/uploads/ 로 서빙)
"""
