from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ember.api.focus import router as focus_router
from ember.config import settings
from ember.crud.answers import AnswersCRUD
from ember.db.base import async_session_factory, init_models
from ember.db.base import engine as db_engine
from ember.logging import log_exception, setup_logger
from ember.services.content.generator import SuggestionGenerator
from ember.services.focus.engine import FocusSessionEngine
from ember.services.focus.errors import (
    FocusSessionError,
    GenerationFailedError,
    InvalidArgumentError,
    NotFoundError,
    UnconfiguredError,
)
from ember.services.focus.ratings import NeutralRatingProvider, SupabaseRatingProvider
from ember.services.focus.sql_store import SqlSessionStore
from ember.services.focus.store import InMemorySessionStore, SessionStore

logger = setup_logger(__name__)

ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidArgumentError: status.HTTP_400_BAD_REQUEST,
    GenerationFailedError: status.HTTP_502_BAD_GATEWAY,
    UnconfiguredError: status.HTTP_503_SERVICE_UNAVAILABLE,
}


async def create_session_store() -> SessionStore:
    if settings.FOCUS_STORE_BACKEND == "sql":
        await init_models()
        logger.info(f"Using SQL focus session store at {settings.DATABASE_PATH}")
        return SqlSessionStore(async_session_factory, settings.FOCUS_SESSION_TTL_SECONDS)

    logger.info("Using in-memory focus session store")
    return InMemorySessionStore(
        settings.FOCUS_SESSION_TTL_SECONDS, settings.FOCUS_SESSION_MAX_RECORDS
    )


def create_rating_provider():
    if settings.supabase_configured:
        logger.info("Reading wheel ratings from Supabase")
        return SupabaseRatingProvider(AnswersCRUD())
    return NeutralRatingProvider()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application startup and shutdown events handler
    - Builds the focus session store and engine
    - Drops focus sessions that expired while the service was down
    """
    store = await create_session_store()
    purged = await store.purge_expired()
    logger.info(f"Startup purge removed {purged} expired focus sessions")

    app.state.engine = FocusSessionEngine(
        store=store,
        generator=SuggestionGenerator.from_settings(),
        rating_provider=create_rating_provider(),
    )

    yield
    if settings.FOCUS_STORE_BACKEND == "sql":
        await db_engine.dispose()
    logger.info("Application shutdown")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=settings.PROJECT_DESCRIPTION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(focus_router, prefix="/api")


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": message}
    )


@app.exception_handler(FocusSessionError)
async def focus_session_error_handler(request: Request, exc: FocusSessionError):
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        log_exception(logger, f"{request.method} {request.url.path} failed", exc)
    else:
        logger.info(f"{request.method} {request.url.path}: {exc}")
    return error_response(status_code, str(exc))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    message = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, message)


@app.get("/", tags=["root"])
async def root():
    return JSONResponse(content={"status": "ok"}, status_code=status.HTTP_200_OK)
