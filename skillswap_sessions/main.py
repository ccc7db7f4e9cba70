# skillswap_sessions/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from skillswap_sessions.api import admin, review, session
from skillswap_sessions.config import settings
from skillswap_sessions.errors import SkillSwapError

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(SkillSwapError)
    async def handle_skillswap_error(request: Request, err: SkillSwapError):
        if err.status_code >= 500:
            logger.error("%s on %s: %s", type(err).__name__, request.url.path, err.message)
        return JSONResponse(
            status_code=err.status_code,
            content={"detail": err.message, "error": type(err).__name__},
        )


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="SkillSwap Sessions API")
    register_error_handlers(app)

    # API routers
    app.include_router(session.router)  # /sessions/*
    app.include_router(review.router)   # /reviews/*
    app.include_router(admin.router)    # /admin/*

    @app.get("/health")
    def health_check():
        return {
            "status": "healthy",
            "message": "SkillSwap Sessions API is running",
            "environment": settings.APP_ENV,
        }

    return app


app = create_app()
