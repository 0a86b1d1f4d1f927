"""
FastAPI exception handlers: the only place where errors become status codes.

Services raise `idm.exceptions` classes; each class carries its own canonical
code, so the handlers stay tiny and never re-interpret business logic. Every
failure leaves as the same Envelope shape as a success:

    {"success": false, "data": null, "error": "<message>"}
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError as FastAPIRequestValidationError
from fastapi.responses import JSONResponse

from idm.exceptions import IdmError
from idm.schemas.common import Envelope

logger = logging.getLogger(__name__)


def envelope_error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=Envelope.fail(message).model_dump(mode="json"))


async def idm_error_handler(request: Request, exc: IdmError) -> JSONResponse:
    """
    Status comes from exc.http_status(): 400 for validation / already exists /
    empty argument, 401, 403, 404, and 500 for infrastructure faults.
    """
    status_code = exc.http_status()
    if status_code >= 500:
        # Cause chain holds the driver error; keep it in the logs only.
        logger.error(
            "IdmError for %s %s: %s", request.method, request.url.path, str(exc),
            exc_info=exc.__cause__,
            extra={"status": status_code, **exc.to_payload()},
        )
    else:
        logger.info(
            "IdmError for %s %s: %s", request.method, request.url.path, str(exc),
            extra={"status": status_code, **exc.to_payload()},
        )
    return envelope_error(status_code, exc.message)


async def timeout_handler(request: Request, exc: TimeoutError) -> JSONResponse:
    logger.warning("Request timed out: %s %s", request.method, request.url.path)
    return envelope_error(status.HTTP_408_REQUEST_TIMEOUT, "request timed out")


async def request_validation_handler(request: Request, exc: FastAPIRequestValidationError) -> JSONResponse:
    """
    Unparseable JSON, wrong body types or non-integer path ids. Answered with
    400 like every other validation failure, not FastAPI's default 422.
    """
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    logger.info("Invalid request for %s %s: %s", request.method, request.url.path, details)
    return envelope_error(status.HTTP_400_BAD_REQUEST, f"invalid request: {details}")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error for %s %s", request.method, request.url.path)
    return envelope_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal server error")


# Helper to register all handlers on an app (called from the app factory)
def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(IdmError, idm_error_handler)
    app.add_exception_handler(TimeoutError, timeout_handler)
    app.add_exception_handler(FastAPIRequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
