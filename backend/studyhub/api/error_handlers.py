"""Error Handlers: every failure leaves the API in the StudyHubError envelope.

Invariants:
    - StudyHubError subclasses render through their own to_response()
    - Schema failures (RequestValidationError) become InputValidationError + details, 400
    - Anything else becomes a bare StudyHubError, 500, with no internal text
    - 401 responses carry WWW-Authenticate: Bearer
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from studyhub.core.errors import InputValidationError, StudyHubError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StudyHubError, handle_studyhub_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)


def _render(exc: StudyHubError, **extra) -> JSONResponse:
    body = exc.to_response()
    body["error"].update(extra)
    headers = {"WWW-Authenticate": "Bearer"} if exc.http_status == 401 else None
    return JSONResponse(status_code=exc.http_status, content=body, headers=headers)


async def handle_studyhub_error(request: Request, exc: StudyHubError) -> JSONResponse:
    logger.log(
        logging.ERROR if exc.http_status >= 500 else logging.WARNING,
        "%s %s: %s", request.method, request.url.path, exc.message,
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "user_id": exc.context.user_id,
            "group_id": exc.context.group_id,
        },
    )
    return _render(exc)


async def handle_request_validation(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            # drop the "body"/"query"/"path" prefix so field names match the payload
            "field": ".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in exc.errors()
    ]
    first = details[0] if details else {"field": "", "message": "Invalid request"}
    logger.warning(
        "Rejected %s %s: %s", request.method, request.url.path, first["message"],
        extra={"error_code": InputValidationError.code, "path": request.url.path},
    )
    error = InputValidationError(f"Invalid {first['field'] or 'request'}", first["field"])
    return _render(error, details=details)


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled %s on %s %s", type(exc).__name__, request.method, request.url.path,
        exc_info=exc, extra={"path": request.url.path},
    )
    return _render(StudyHubError("An unexpected error occurred"))
