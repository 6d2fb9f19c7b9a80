"""Map request failures to a uniform 400 `{"response": message}` body."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.errors import ErrorKind, VideoProcessingError
from app.core.logger import get_logger

log = get_logger(__name__)

ERROR_CODE_HEADER = "X-Error-Code"


def error_response(kind: ErrorKind, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"response": message},
        headers={ERROR_CODE_HEADER: kind.value},
    )


async def handle_video_processing_error(request: Request, exc: VideoProcessingError) -> JSONResponse:
    log.warning("%s %s rejected (%s): %s", request.method, request.url.path, exc.kind.value, exc.message)
    return error_response(exc.kind, exc.message)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    detail = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', 'invalid')}" for err in errors
    )
    log.warning("%s %s failed validation: %s", request.method, request.url.path, detail)
    return error_response(ErrorKind.INVALID_REQUEST, f"Invalid request: {detail or 'malformed body'}")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(VideoProcessingError, handle_video_processing_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
