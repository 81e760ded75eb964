from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from app.core.config import get_settings
from app.core.lifespan import lifespan
from app.core.limits import BodySizeLimitMiddleware
from app.core.logging import configure_logging
from app.api.errors import register_error_handlers
from app.api.v1.routers.health import router as health_router
from app.api.v1.routers.products import router as products_router
from app.api.v1.routers.moderators import router as moderators_router
from app.api.v1.routers.user_role import router as user_role_router

logger = logging.getLogger(__name__)


def create_app(*, with_lifespan: bool = True) -> FastAPI:
    settings = get_settings()
    configure_logging(level=logging.DEBUG if settings.DEBUG else logging.INFO)

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan if with_lifespan else None)

    # ------- Body size -------
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)

    # ------- CORS -------
    # ALLOWED_ORIGINS is a CSV list; unset means any origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,                        # "*" + credentials is rejected by browsers
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        max_age=86400,
    )

    register_error_handlers(app)

    # ------- Routes -------
    app.include_router(health_router)                                    # / and /health
    app.include_router(products_router, prefix=settings.api_prefix)      # /api/products
    app.include_router(moderators_router, prefix=settings.api_prefix)    # /api/moderators
    app.include_router(user_role_router, prefix=settings.api_prefix)     # /api/user/role
    return app


app = create_app()


def run():
    import uvicorn

    settings = get_settings()
    # log_config=None keeps the colorlog handler installed by configure_logging
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
