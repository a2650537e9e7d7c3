import logging
from dotenv import load_dotenv
from fastapi import FastAPI
from mangum import Mangum
from starlette.middleware.cors import CORSMiddleware

from promptcoin import containers
from promptcoin.config import settings
from promptcoin.core.exception_handlers import register_exception_handlers
from promptcoin.core.logging_middleware import LoggingMiddleware
from promptcoin.logging_config import setup_logging
from promptcoin.routers import (
    checkout_router,
    coin_router,
    daily_bonus_router,
    gift_router,
    health_router,
    template_router,
    view_earnings_router,
)

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    load_dotenv("promptcoin/.env")
    setup_logging(log_level=settings.LOG_LEVEL, log_format=settings.LOG_FORMAT)

    app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)
    app.container = containers.Container()  # type: ignore

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    register_exception_handlers(app)

    @app.get("/")
    def hello() -> dict:
        return {"message": settings.PROJECT_NAME}

    app.include_router(health_router.router)
    for module in (
        coin_router,
        gift_router,
        template_router,
        daily_bonus_router,
        view_earnings_router,
        checkout_router,
    ):
        app.include_router(module.router, prefix=settings.API_V1_STR)

    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")
    return app


app = create_app()

handler = Mangum(app)
