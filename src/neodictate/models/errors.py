"""
Domain errors

Every failure the dictate protocol can report is a DomainError carrying a
machine-readable code and the HTTP status it maps to. The API layer renders
them through api/middleware/error_handler.py; the idle refresher catches them
per endpoint.
"""

from typing import Optional


class DomainError(Exception):
    """Base class for domain-specific errors"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
        status_code: int = 400
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        self.status_code = status_code
        super().__init__(message)


# ============================================================================
# Client errors (4xx) - bad request, nothing mutated
# ============================================================================

class ClientError(DomainError):
    """Request is invalid; no state was mutated"""
    def __init__(self, code: str, message: str, details: Optional[dict] = None, status_code: int = 400):
        super().__init__(code=code, message=message, details=details, status_code=status_code)


class EndpointNotFoundError(ClientError):
    """Endpoint id isn't in the registry"""
    def __init__(self, endpoint_id: str):
        super().__init__(
            code="ENDPOINT_NOT_FOUND",
            message=f"Unknown endpoint id '{endpoint_id}'",
            details={"endpoint_id": endpoint_id}
        )


class MalformedPathError(ClientError):
    """Update path has the wrong shape"""
    def __init__(self, path: str, reason: str = "invalid url"):
        super().__init__(
            code="MALFORMED_PATH",
            message=f"{reason}: {path}",
            details={"path": path}
        )


class InvalidParameterError(ClientError):
    """Query parameter missing or unparsable"""
    def __init__(self, name: str, value: Optional[str], reason: str):
        super().__init__(
            code="INVALID_PARAMETER",
            message=f"Invalid parameter '{name}': {reason}",
            details={"parameter": name, "value": value}
        )


class MalformedBodyError(ClientError):
    """Request body can't be decoded into an update"""
    def __init__(self, reason: str, errors: Optional[list] = None):
        super().__init__(
            code="MALFORMED_BODY",
            message=f"Failed to decode request body: {reason}",
            details={"errors": errors} if errors else None
        )


class EmptySequenceError(ClientError):
    """A color sequence needs at least one step"""
    def __init__(self):
        super().__init__(
            code="EMPTY_SEQUENCE",
            message="Color sequence must contain at least one step"
        )


class UnsupportedMediaTypeError(ClientError):
    """Update body isn't JSON"""
    def __init__(self, content_type: str):
        super().__init__(
            code="UNSUPPORTED_MEDIA_TYPE",
            message=f"Content-Type '{content_type}' is not supported, use application/json",
            details={"content_type": content_type},
            status_code=415
        )


# ============================================================================
# Server-side errors
# ============================================================================

class SerializationError(DomainError):
    """Dictate couldn't be serialized; the previous dictate stays in effect"""
    def __init__(self, endpoint_id: str, reason: str):
        super().__init__(
            code="SERIALIZATION_ERROR",
            message=f"Failed to serialize dictate for '{endpoint_id}': {reason}",
            details={"endpoint_id": endpoint_id},
            status_code=500
        )


class ConfigurationError(DomainError):
    """Endpoint or server configuration can't satisfy the request"""
    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            code="CONFIGURATION_ERROR",
            message=message,
            details=details,
            status_code=409
        )
