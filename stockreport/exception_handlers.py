from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from stockreport.exceptions import (
    AppError,
    BackendUnavailableError,
    ServiceUnavailableError,
    ValidationError,
)


def _error_response(status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, "code": code},
    )


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error_response(500, exc.message, exc.code)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _error_response(400, exc.message, exc.code)


async def unavailable_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error_response(503, exc.message, exc.code)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'] if part != 'body')}: {err['msg']}"
        for err in exc.errors()
    )
    return _error_response(400, details or "Invalid request body", "VALIDATION_ERROR")


def register_exception_handlers(app):
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(BackendUnavailableError, unavailable_handler)
    app.add_exception_handler(ServiceUnavailableError, unavailable_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(AppError, app_error_handler)
