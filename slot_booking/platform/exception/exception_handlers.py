"""
HTTP mapping for booking errors.

Every CustomBaseError carries its own status code. Store-level failures
that escape a use case are mapped here: a violated uniqueness constraint
means another request won the slot, an unreachable Redis means the lock
service is down.
"""

from typing import Any, Callable, Coroutine

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from sqlalchemy.exc import IntegrityError
from starlette.responses import Response

from slot_booking.platform.exception.exceptions import CustomBaseError
from slot_booking.platform.logging.loguru_io import Logger


ExceptionHandler = Callable[[Request, Exception], Coroutine[Any, Any, Response]]


def _detail(status_code: int, detail: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'detail': detail})


async def custom_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = exc if isinstance(exc, CustomBaseError) else CustomBaseError(str(exc), 500)
    return _detail(error.status_code, error.message)


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    return _detail(status.HTTP_400_BAD_REQUEST, errors)


async def integrity_error_handler(request: Request, exc: Exception) -> JSONResponse:
    Logger.base.warning(f'⚠️ [DB] Constraint violated on {request.url.path}: {exc}')
    return _detail(status.HTTP_409_CONFLICT, 'Slot already has an active session')


async def redis_error_handler(request: Request, exc: Exception) -> JSONResponse:
    Logger.base.error(f'❌ [REDIS] {request.url.path}: {exc}')
    return _detail(status.HTTP_503_SERVICE_UNAVAILABLE, 'Booking temporarily unavailable')


async def general_500_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    Logger.base.exception(f'💥 [HTTP] Unhandled error on {request.url.path}')
    return _detail(status.HTTP_500_INTERNAL_SERVER_ERROR, 'Internal server error')


EXCEPTION_HANDLERS: dict[type[Exception], ExceptionHandler] = {
    CustomBaseError: custom_error_handler,
    RequestValidationError: validation_error_handler,
    IntegrityError: integrity_error_handler,
    RedisError: redis_error_handler,
    Exception: general_500_exception_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
