"""
Exception handlers turning application errors into JSON responses.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from domain.errors import AppError, ValidationError

logger = logging.getLogger(__name__)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    body = {"error": exc.message}
    if isinstance(exc, ValidationError):
        body["field"] = exc.field
        body["fields"] = [e.to_dict() for e in exc.errors]
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
    else:
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
