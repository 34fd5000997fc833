"""Custom exceptions for the resume builder API."""

from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base exception for service-related errors."""

    code = "SERVER_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        payload = {"status": "error", "code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(ServiceError):
    """Raised when request data is malformed or incomplete."""

    code = "VALIDATION_ERROR"
    status_code = 400


class ConfigError(ServiceError):
    """Raised when a credential or task configuration is missing."""

    code = "CONFIG_ERROR"
    status_code = 500


class AIProcessingError(ServiceError):
    """Raised when the generative AI service call itself fails."""

    code = "AI_PROCESSING_ERROR"
    status_code = 500


class ResponseParseError(ServiceError):
    """Raised when the AI service returns text that is not valid JSON."""

    code = "RESPONSE_PARSE_ERROR"
    status_code = 500

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["rawResponse"] = self.raw_text
        return payload


class DuplicateError(ServiceError):
    """Raised when a uniqueness constraint would be violated."""

    code = "DUPLICATE"
    status_code = 400


class NotFoundError(ServiceError):
    """Raised when a requested record does not exist."""

    code = "NOT_FOUND"
    status_code = 404


class PermissionDeniedError(ServiceError):
    """Raised when the caller does not own the requested record."""

    code = "FORBIDDEN"
    status_code = 403


class AuthenticationError(ServiceError):
    """Raised when credentials or a bearer token are missing or invalid."""

    code = "UNAUTHORIZED"
    status_code = 401
