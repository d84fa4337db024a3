from typing import Any, Callable, Coroutine

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from src.platform.exception.exceptions import CustomBaseError, ErrorCode

# Type alias for exception handlers (compatible with Starlette's expected signature)
ExceptionHandler = Callable[[Request, Exception], Coroutine[Any, Any, Response]]

INTERNAL_ERROR_DETAIL = 'Internal server error'


def error_response(*, status_code: int, detail: Any, code: ErrorCode) -> JSONResponse:
    """REST error body, `code` matches the GraphQL `extensions.code` of the same error"""
    return JSONResponse(status_code=status_code, content={'detail': detail, 'code': code})


async def custom_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = exc if isinstance(exc, CustomBaseError) else CustomBaseError(str(exc))
    return error_response(
        status_code=error.status_code,
        detail=error.message if error.is_user_facing else INTERNAL_ERROR_DETAIL,
        code=error.code if error.is_user_facing else ErrorCode.INTERNAL_SERVER_ERROR,
    )


async def value_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(
        status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc), code=ErrorCode.BAD_USER_INPUT
    )


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = exc if isinstance(exc, RequestValidationError) else RequestValidationError([])
    return error_response(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=error.errors(),
        code=ErrorCode.BAD_REQUEST,
    )


async def general_500_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=INTERNAL_ERROR_DETAIL,
        code=ErrorCode.INTERNAL_SERVER_ERROR,
    )


# Exception handler mapping
EXCEPTION_HANDLERS: dict[type[Exception], ExceptionHandler] = {
    CustomBaseError: custom_error_handler,
    ValueError: value_error_handler,
    RequestValidationError: validation_error_handler,
    Exception: general_500_exception_handler,  # Catch-all for unhandled exceptions
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
