# app/api/__init__.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from app.api.middleware import RequestTimeoutMiddleware
from app.api.routers import auth, cards, carts, health
from app.domain.errors import InternalError, ServiceError, ValidationError
from app.utils.settings import REQUEST_TIMEOUT_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)


def _error_response(exc: ServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "detail": exc.detail},
    )


async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.error} {exc.detail}")
    return _error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = [
        f"{'.'.join(str(p) for p in err['loc'][1:]) or err['loc'][0]}: {err['msg']}"
        for err in exc.errors()
    ]
    return _error_response(ValidationError("; ".join(messages)))


async def backend_error_handler(request: Request, exc: Exception):
    #bledy bazy/redisa - terminalne dla requestu, bez retry
    logger.exception(f"{request.method} {request.url.path} failed: {exc}")
    return _error_response(InternalError("Internal Server Error"))


def create_app(request_timeout: float = REQUEST_TIMEOUT_SECONDS) -> FastAPI:
    app = FastAPI(
        title="Card Shop Service",
        version="1.0.0",
    )

    app.add_middleware(RequestTimeoutMiddleware, timeout=request_timeout)

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, backend_error_handler)
    app.add_exception_handler(RedisError, backend_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(cards.router)
    app.include_router(carts.router)

    return app
