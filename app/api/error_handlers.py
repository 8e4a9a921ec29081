# app/api/error_handlers.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.domain.errors import ShopError, BadRequest, ServerError
from app.utils.logging import get_logger

logger = get_logger(__name__)


def setup_error_handlers(app: FastAPI):
    """Maps every failure to {"success": false, "error": CODE, "message": text}."""

    @app.exception_handler(ShopError)
    async def shop_error_handler(request: Request, exc: ShopError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": " -> ".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        logger.info(f"Validation error on {request.method} {request.url.path}: {errors}")

        error = BadRequest("Request validation failed")
        body = error.to_response()
        body["details"] = errors
        return JSONResponse(status_code=error.status_code, content=body)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": f"HTTP_{exc.status_code}", "message": str(exc.detail)},
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        # details stay in the server log, never in the response body
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        error = ServerError()
        return JSONResponse(status_code=error.status_code, content=error.to_response())
