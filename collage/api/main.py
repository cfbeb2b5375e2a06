import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from collage.api import collages
from collage.core.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Collage PDF API",
        description="멀티 페이지 사진/텍스트 콜라주 → A4 PDF",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_origins_list(),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    # PDF 생성 API
    app.include_router(collages.router, tags=["collages"])

    # Health check 엔드포인트
    @app.get("/healthz")
    @app.get("/health")
    def healthz():
        return {"status": "ok"}

    return app


app = create_app()
# python -m uvicorn collage.api.main:app --reload
