from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from typing import Iterable
import traceback
from .logger import logger


class SiteRelayBaseException(Exception):
    """Base exception for the site relay"""
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500):
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(self.message)


class ServerMisconfiguredError(SiteRelayBaseException):
    """Raised when a required secret or credential is not configured"""
    def __init__(self, setting_name: str):
        super().__init__(f"{setting_name} not set on server", "SERVER_MISCONFIGURED", 500)


class InvalidApiKeyError(SiteRelayBaseException):
    def __init__(self):
        super().__init__("Invalid API key", "INVALID_API_KEY", 401)


class MissingFieldsError(SiteRelayBaseException):
    """Raised when required request fields are absent or blank"""
    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(f"Missing {', '.join(self.fields)}", "MISSING_FIELDS", 400)


class JobNotFoundError(SiteRelayBaseException):
    """Raised when job is not found"""
    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__("Job not found", "JOB_NOT_FOUND", 404)


class DuplicateJobError(SiteRelayBaseException):
    def __init__(self, job_id: str):
        super().__init__(f"Job {job_id} already exists", "DUPLICATE_JOB", 409)


class InvalidJobStateError(SiteRelayBaseException):
    """Raised when a job update breaks the queued -> running -> done|error lifecycle"""
    def __init__(self, job_id: str, current_state: str, detail: str):
        super().__init__(
            f"Job {job_id} is in state '{current_state}': {detail}",
            "INVALID_JOB_STATE",
            409,
        )


class ImageGenerationError(SiteRelayBaseException):
    """Raised when the image collaborator fails or returns no image"""
    def __init__(self, message: str = "Failed to generate image"):
        super().__init__(message, "IMAGE_GENERATION_ERROR", 502)


class SiteGenerationError(SiteRelayBaseException):
    """Raised when the site builder collaborator fails"""
    def __init__(self, message: str = "Failed to generate site"):
        super().__init__(message, "SITE_GENERATION_ERROR", 502)


def _error_body(message: str, code: str) -> dict:
    return {"status": "error", "error": message, "code": code}


async def siterelay_exception_handler(request: Request, exc: SiteRelayBaseException):
    """Handle custom application exceptions"""
    logger.error(
        f"Application exception: {exc.code} - {exc.message}",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "request_path": request.url.path,
        }
    )
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message, exc.code))


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions"""
    logger.warning(
        f"HTTP {exc.status_code}: {exc.detail}",
        extra={
            "http_status_code": exc.status_code,
            "http_detail": exc.detail,
            "request_path": request.url.path,
        }
    )
    return JSONResponse(status_code=exc.status_code, content=_error_body(str(exc.detail), "HTTP_ERROR"))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors, reported as 400"""
    logger.warning(
        "Request validation failed",
        extra={
            "validation_errors": str(exc.errors()),
            "request_path": request.url.path,
        }
    )
    return JSONResponse(status_code=400, content=_error_body("Invalid request body", "INVALID_REQUEST"))


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle all other exceptions"""
    logger.error(
        f"Unhandled exception: {type(exc).__name__} - {str(exc)}",
        extra={
            "exc_type": type(exc).__name__,
            "exc_message": str(exc),
            "request_path": request.url.path,
            "exc_traceback": traceback.format_exc(),
        }
    )
    return JSONResponse(
        status_code=500,
        content=_error_body("An internal error occurred. Please try again later.", "INTERNAL_SERVER_ERROR"),
    )
