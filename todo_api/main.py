import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from redis import asyncio as aioredis
from starlette.exceptions import HTTPException as StarletteHTTPException

from todo_api.api.v1.auth_route import auth_router
from todo_api.api.v1.category_route import categories_router
from todo_api.api.v1.tag_route import tags_router
from todo_api.api.v1.todo_route import todos_router
from todo_api.core import messages
from todo_api.core.config import settings
from todo_api.core.errors import AppError, PersistenceError, UnauthorizedError
from todo_api.core.log import configure_logging, log_error
from todo_api.db.session import init_db
from todo_api.services.session_service import SessionStore


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Creates database tables, connects the session store on startup and
    closes the Redis connection on shutdown.
    """
    # Startup: create tables
    await init_db()

    redis_client = aioredis.from_url(settings.redis_url, decode_responses=True)
    await redis_client.ping()
    logger.info("Redis connected successfully")
    app.state.session_store = SessionStore(
        redis_client,
        ttl_seconds=settings.session_max_age_seconds,
        key_prefix=settings.session_key_prefix,
    )
    yield

    await redis_client.aclose()


def _error_body(message: str, error=None) -> dict:
    return {"message": message, "error": error}


async def app_error_handler(request: Request, exc: AppError):
    """Translate domain errors into JSON responses."""
    error = exc.detail
    if isinstance(exc, PersistenceError):
        log_error(exc, f"{request.method} {request.url.path}")
        if settings.is_production:
            error = None
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, error))


async def unauthorized_handler(request: Request, exc: UnauthorizedError):
    """Send unauthenticated callers to the landing path."""
    return RedirectResponse(url=settings.unauthenticated_redirect_path, status_code=status.HTTP_302_FOUND)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        logger.info(f"Route not found: {request.method} {request.url.path}")
        return JSONResponse(status_code=exc.status_code, content=_error_body(messages.NOT_FOUND))
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content=_error_body(messages.REQUIRED_DATA, errors),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Last resort: every failure still gets a structured JSON body."""
    log_error(exc, f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(messages.INTERNAL_SERVER_ERROR, None if settings.is_production else str(exc)),
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Sets up logging, CORS, error handlers and the ``/api`` routers.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    configure_logging()

    app = FastAPI(
        title="Todo API",
        description="Todo lists with Google sign-in",
        version="1.0.0",
        lifespan=lifespan
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "PUT", "DELETE"],
        allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept"],
    )

    # Error handlers
    app.add_exception_handler(UnauthorizedError, unauthorized_handler)
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    api_router = APIRouter()

    # Unauthenticated landing path
    @api_router.get("")
    async def root():
        """
        Root endpoint providing basic API information.

        Returns:
            dict: Welcome message.
        """
        return {"message": "Todo API"}

    api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
    api_router.include_router(todos_router, prefix="/todos", tags=["todos"])
    api_router.include_router(categories_router, prefix="/categories", tags=["categories"])
    api_router.include_router(tags_router, prefix="/tags", tags=["tags"])
    app.include_router(api_router, prefix="/api")

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        """
        Health check endpoint for load balancers and monitoring.

        Returns:
            dict: Health status response.
        """
        return {"status": "healthy"}

    return app
