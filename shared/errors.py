"""
Shared error handling for the BrowserID access service.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""
    
    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class BrowserIDException(Exception):
    """Base exception for BrowserID authentication."""
    
    status_code: int = 500
    
    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None,
                 status_code: Optional[int] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)
    
    def to_response(self, request_id: Optional[str] = None) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class ConfigurationError(BrowserIDException):
    """Invalid strategy or service configuration."""
    
    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details, status_code=500)


class BadRequestError(BrowserIDException):
    """The request did not carry what authentication needs."""
    
    def __init__(self, message: str = "Bad request", details: Optional[Dict[str, Any]] = None):
        super().__init__("BAD_REQUEST", message, details, status_code=400)


class VerificationError(BrowserIDException):
    """The verifier rejected the assertion."""
    
    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            "VERIFICATION_ERROR",
            message or "Assertion verification failed",
            details,
            status_code=401
        )


class AudienceMismatchError(BrowserIDException):
    """The verifier vouched for an assertion scoped to another audience."""
    
    def __init__(self, expected: str, actual: Optional[str]):
        super().__init__(
            "AUDIENCE_MISMATCH",
            f"Assertion audience {actual!r} does not match {expected!r}",
            {"expected": expected, "actual": actual},
            status_code=401
        )


class TransportError(BrowserIDException):
    """The verifier could not be reached or did not answer in time."""
    
    def __init__(self, message: str = "Verifier unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("VERIFIER_UNAVAILABLE", message, details, status_code=502)


class MalformedResponseError(BrowserIDException):
    """The verifier answered with something other than the documented JSON."""
    
    def __init__(self, message: str = "Malformed verifier response", details: Optional[Dict[str, Any]] = None):
        super().__init__("MALFORMED_RESPONSE", message, details, status_code=502)
