import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from mangum import Mangum
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

from gachaapi import containers
from gachaapi.config import settings
from gachaapi.core.exception_handlers import (
    handle_base_api_exception,
    handle_http_exception,
    handle_unexpected_error,
    handle_validation_error,
)
from gachaapi.core.exceptions import BaseAPIException
from gachaapi.core.logging_middleware import LoggingMiddleware
from gachaapi.logging_config import setup_logging
from gachaapi.routers import gacha_router, health_router, point_router, user_item_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    load_dotenv("gachaapi/.env")
    setup_logging(settings.LOG_LEVEL, sql_echo=settings.DEBUG)

    app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)
    app.container = containers.Container()  # type: ignore

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type", "Idempotency-Key"],
    )

    app.add_exception_handler(BaseAPIException, handle_base_api_exception)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(health_router.router)
    app.include_router(gacha_router.router)
    app.include_router(user_item_router.router)
    app.include_router(point_router.router)

    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")
    return app


app = create_app()

handler = Mangum(app)
