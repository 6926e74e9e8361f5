from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shopledger.common.exceptions import LedgerError
from shopledger.common.response import ErrorResponse
from shopledger.logger_config import logger


def register_error_handlers(app: FastAPI):
    @app.exception_handler(LedgerError)
    async def handle_ledger_error(request: Request, e: LedgerError):
        if e.status_code >= 500:
            logger.error(f"{type(e).__name__} on {request.method} {request.url.path}: {e.message}")
        else:
            logger.warning(f"{type(e).__name__} on {request.method} {request.url.path}: {e.message}")

        details = e.to_dict()
        return JSONResponse(
            status_code=e.status_code,
            content=ErrorResponse.send(
                message=e.message,
                errors=[details],
                error=details["error"],
                status_code=e.status_code,
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, e: RequestValidationError):
        errors = [
            {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"], "type": err["type"]}
            for err in e.errors()
        ]
        return JSONResponse(
            status_code=422,
            content=ErrorResponse.send(message="Validation error", errors=errors, status_code=422),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, e: StarletteHTTPException):
        return JSONResponse(
            status_code=e.status_code,
            content=ErrorResponse.send(message=str(e.detail), status_code=e.status_code),
        )

    @app.exception_handler(Exception)
    async def handle_exception(request: Request, e: Exception):
        logger.exception("Unhandled exception occurred")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse.send(message="Internal Server Error", details=str(e), status_code=500),
        )
