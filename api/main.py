import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth import router as auth_router
from blogs import router as blogs_router
from contact import router as contact_router
from core import config
from core.db import Database
from core.log import configure_logging
from core.responses import failure
from core.validation import describe_errors
from events import router as events_router
from festival_events import router as festival_events_router
from festival_highlights import router as festival_highlights_router
from media.storage import ObjectStorage
from news import router as news_router
from newsletter import router as newsletter_router
from notifications.mailer import Mailer, SmtpSettings
from transportation import router as transportation_router
from users import router as users_router

API_PREFIX = "/api/v1/users"

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One pool, one mailer, one storage client per process.
    app.state.db = Database()
    await app.state.db.connect()
    app.state.mailer = Mailer(SmtpSettings.from_env())
    app.state.storage = ObjectStorage.from_env()
    logger.info("app_started env=%s", config.app_env())
    try:
        yield
    finally:
        await app.state.db.close()


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=failure(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=failure(describe_errors(exc.errors())),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=failure(
            "Something went wrong. Please try again.",
            error=None if config.is_production() else str(exc),
        ),
    )


def create_app(*, use_lifespan: bool = True) -> FastAPI:
    app = FastAPI(title=config.app_name(), lifespan=lifespan if use_lifespan else None)

    # Browser frontends send the session cookie, so origins must be explicit.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(auth_router.router, prefix=API_PREFIX, tags=["auth"])
    app.include_router(users_router.router, prefix=API_PREFIX, tags=["users"])
    app.include_router(news_router.router, prefix=API_PREFIX, tags=["news"])
    app.include_router(blogs_router.router, prefix=API_PREFIX, tags=["blogs"])
    app.include_router(events_router.router, prefix=API_PREFIX, tags=["events"])
    app.include_router(festival_events_router.router, prefix=API_PREFIX, tags=["festival-events"])
    app.include_router(festival_highlights_router.router, prefix=API_PREFIX, tags=["festival-highlights"])
    app.include_router(transportation_router.router, prefix=API_PREFIX, tags=["transportation"])
    app.include_router(newsletter_router.router, prefix=API_PREFIX, tags=["newsletter"])
    app.include_router(contact_router.router, prefix=API_PREFIX, tags=["contact"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/")
    def root() -> dict:
        return {"message": f"Welcome to the {config.app_name()} API"}

    return app


app = create_app()
