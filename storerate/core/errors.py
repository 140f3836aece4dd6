import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register the error handlers that shape every failure as JSON for the SPA.

    ``{"message": ...}`` for HTTP errors and crashes, ``{"errors": [...]}`` for
    request validation.
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=build_validation_error_response(exc),
        )

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        # Never leak internals to the client
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Something went wrong!"},
        )


def build_validation_error_response(exc: RequestValidationError) -> dict:
    return {
        "errors": [
            {
                "type": e["type"],
                "msg": _clean_message(e["msg"]),
                "path": ".".join(str(loc) for loc in e["loc"][1:]),
                "location": str(e["loc"][0]) if e["loc"] else "",
            }
            for e in exc.errors()
        ],
    }


def _clean_message(msg: str) -> str:
    # pydantic prefixes messages raised from validators
    return msg.removeprefix("Value error, ")
