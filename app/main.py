import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.router import api_router
from app.core.app_logging import configure_logging
from app.core.config import settings
from app.core.database import init_database
from app.core.db import AsyncSessionLocal
from app.core.exceptions import AppError, AuthError
from app.core.test_data import create_test_user

logger = logging.getLogger(__name__)


async def app_error_handler(request: Request, exc: AppError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    # the raw input is left out: it may be a non-finite float that JSON cannot carry
    errors = jsonable_encoder([
        {"loc": error.get("loc", ()), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ])
    messages = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return JSONResponse(
        status_code=400,
        content={"detail": "; ".join(messages) or "Invalid request", "errors": errors},
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    content = {"detail": "Internal server error"}
    if not settings.is_production:
        content["error"] = str(exc)
        content["traceback"] = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return JSONResponse(status_code=500, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


def create_app() -> FastAPI:
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title="NutriTrack - meal logging and daily nutrition progress")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info("%s %s -> %s", request.method, request.url.path, response.status_code)
        return response

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.on_event("startup")
    async def startup_event():
        await init_database()
        if settings.SEED_TEST_USER:
            async with AsyncSessionLocal() as session:
                await create_test_user(session)
        logger.info("NutriTrack API started (%s)", settings.ENVIRONMENT)

    @app.get("/")
    async def root():
        return {
            "app": "NutriTrack",
            "message": "Meal logging and daily nutrition progress",
            "links": {
                "health": f"{settings.API_PREFIX}/health",
                "meals": f"{settings.API_PREFIX}/meals",
                "progress": f"{settings.API_PREFIX}/progress",
                "docs": "/docs",
            },
        }

    return app


app = create_app()
