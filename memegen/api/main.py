# python -m uvicorn memegen.api.main:app --reload
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from memegen.api import feed, memes, suggestions, templates
from memegen.api.deps import get_remote_store
from memegen.core.config import settings
from memegen.core.errors import (
    EncodingError,
    ImageLoadError,
    MemeGenError,
    MemeNotFoundError,
    StoreUnavailableError,
    SurfaceUnavailableError,
    TemplateNotFoundError,
)
from memegen.core.logging import get_logger, setup_logging
from memegen.services.community.health import HealthChecker

logger = get_logger(__name__)

_ERROR_STATUS = {
    TemplateNotFoundError: 404,
    MemeNotFoundError: 404,
    ImageLoadError: 422,
    StoreUnavailableError: 503,
    EncodingError: 500,
    SurfaceUnavailableError: 500,
}


async def _memegen_error_handler(request: Request, exc: MemeGenError) -> JSONResponse:
    status = next((code for cls, code in _ERROR_STATUS.items() if isinstance(exc, cls)), 500)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status, content={"detail": str(exc), "error": type(exc).__name__})


def create_app(*, health_checks: bool = True) -> FastAPI:
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        checker = HealthChecker(get_remote_store(), settings.health_check_interval)
        if health_checks and checker.store is not None:
            checker.start()
        yield
        checker.stop()

    app = FastAPI(
        title="MemeGen API",
        description="템플릿/업로드 이미지 → 캡션 밈 생성 서비스",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(templates.router, tags=["templates"])
    app.include_router(memes.router, tags=["memes"])
    app.include_router(suggestions.router, tags=["suggestions"])
    app.include_router(feed.router, tags=["feed"])
    app.add_exception_handler(MemeGenError, _memegen_error_handler)

    # Health check 엔드포인트
    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    return app


app = create_app()
