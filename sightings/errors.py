"""
API error codes, exception classes and the DRF exception handler.

Error code ranges:
  1000-1999: Authentication errors
  2000-2999: Validation errors
  3000-3999: Resource errors
  4000-4999: External service errors
  5000-5999: Server errors

Every error leaving the API is rendered as
``{"error": {"code": int, "message": str, "details": object?}}``.
"""

import logging

from django.utils.translation import gettext as _
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ErrorCodes:
    # Authentication errors (1000-1999)
    INVALID_EMAIL = 1001
    INVALID_PASSWORD = 1002
    NOT_AUTHORIZED = 1003
    ACCOUNT_LOCKED = 1004
    EMAIL_NOT_CONFIRMED = 1005
    INVALID_TOKEN = 1006

    # Validation errors (2000-2999)
    REQUIRED_FIELD_MISSING = 2001
    CHARACTER_LIMIT_EXCEEDED = 2002
    VALIDATION_FAILED = 2003

    # Resource errors (3000-3999)
    PHOTO_NOT_FOUND = 3001
    USER_NOT_FOUND = 3002
    RESOURCE_NOT_FOUND = 3003
    ALREADY_PROCESSED = 3004

    # External service errors (4000-4999)
    PUSH_DELIVERY_ERROR = 4001
    RATE_LIMIT_ERROR = 4003

    # Server errors (5000-5999)
    DATABASE_ERROR = 5001
    INTERNAL_ERROR = 5002
    TIMEOUT_ERROR = 5003


class ApiError(Exception):
    """Base class for errors that carry their own code and HTTP status."""

    def __init__(self, code, message, details=None, http_status=status.HTTP_500_INTERNAL_SERVER_ERROR):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details
        self.http_status = http_status

    def as_dict(self):
        payload = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class AuthenticationError(ApiError):
    def __init__(self, message="Authentication failed", code=ErrorCodes.NOT_AUTHORIZED, details=None):
        super().__init__(code, message, details, status.HTTP_401_UNAUTHORIZED)


class AuthorizationError(ApiError):
    def __init__(self, message="Permission denied", code=ErrorCodes.NOT_AUTHORIZED, details=None):
        super().__init__(code, message, details, status.HTTP_403_FORBIDDEN)


class ValidationFailed(ApiError):
    def __init__(self, message="Validation failed", code=ErrorCodes.VALIDATION_FAILED, details=None):
        super().__init__(code, message, details, status.HTTP_422_UNPROCESSABLE_ENTITY)


class ResourceNotFound(ApiError):
    def __init__(self, message="Resource not found", code=ErrorCodes.RESOURCE_NOT_FOUND, details=None):
        super().__init__(code, message, details, status.HTTP_404_NOT_FOUND)


class ConflictError(ApiError):
    def __init__(self, message="Resource already processed", code=ErrorCodes.ALREADY_PROCESSED, details=None):
        super().__init__(code, message, details, status.HTTP_409_CONFLICT)


class ModerationError(Exception):
    """Base exception for moderation errors."""


class ReportAlreadyReviewed(ModerationError):
    """The report left the pending state before this transition ran."""


class ReportableMissing(ModerationError):
    """The content a report points at no longer exists."""


def _error_response(code, message, details=None, http_status=status.HTTP_500_INTERNAL_SERVER_ERROR, headers=None):
    payload = {"code": code, "message": message}
    if details:
        payload["details"] = details
    return Response({"error": payload}, status=http_status, headers=headers)


def _describe(exc, response):
    """Map a response produced by DRF's default handler onto (code, message, details)."""
    if isinstance(exc, exceptions.ValidationError):
        return ErrorCodes.VALIDATION_FAILED, _("Validation failed"), response.data
    if isinstance(exc, exceptions.AuthenticationFailed):
        return ErrorCodes.INVALID_TOKEN, str(exc.detail), None

    detail = response.data.get("detail") if isinstance(response.data, dict) else None
    message = str(detail) if detail else _("Request failed")
    code_by_status = {
        status.HTTP_401_UNAUTHORIZED: ErrorCodes.NOT_AUTHORIZED,
        status.HTTP_403_FORBIDDEN: ErrorCodes.NOT_AUTHORIZED,
        status.HTTP_404_NOT_FOUND: ErrorCodes.RESOURCE_NOT_FOUND,
        status.HTTP_429_TOO_MANY_REQUESTS: ErrorCodes.RATE_LIMIT_ERROR,
    }
    return code_by_status.get(response.status_code, ErrorCodes.VALIDATION_FAILED), message, None


def api_exception_handler(exc, context):
    """DRF EXCEPTION_HANDLER wrapping every error in the shared envelope."""
    if isinstance(exc, ApiError):
        return _error_response(exc.code, exc.message, exc.details, exc.http_status)

    response = exception_handler(exc, context)
    if response is None:
        view = context.get("view")
        logger.exception("Unhandled error in %s", type(view).__name__ if view else "request")
        return _error_response(ErrorCodes.INTERNAL_ERROR, _("An unexpected error occurred"))

    code, message, details = _describe(exc, response)
    http_status = response.status_code
    if isinstance(exc, exceptions.ValidationError):
        http_status = status.HTTP_422_UNPROCESSABLE_ENTITY

    headers = {}
    for header in ("WWW-Authenticate", "Retry-After"):
        if header in response:
            headers[header] = response[header]
    return _error_response(code, message, details, http_status, headers=headers or None)
