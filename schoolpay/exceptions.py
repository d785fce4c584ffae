"""
Payment lifecycle error taxonomy.

Every error carries the HTTP status the API layer reports it with, so the
same exception can be raised from the service layer, logged to the webhook
audit trail, and rendered by the exception handler in ``schoolpay.main``.
"""

from typing import Any, Optional


class PaymentError(Exception):
    """Base class for payment lifecycle errors."""
    
    status_code: int = 400
    
    def __init__(self, message: str, detail: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail
    
    def to_dict(self) -> dict:
        body = {
            "status": "error",
            "error": type(self).__name__,
            "message": self.message,
        }
        if self.detail is not None:
            body["detail"] = self.detail
        return body


class ValidationError(PaymentError):
    """Malformed or missing input fields."""
    
    status_code = 422


class ConfigurationError(PaymentError):
    """Gateway credentials or signing secret missing."""
    
    status_code = 500


class GatewayError(PaymentError):
    """Gateway call failed or returned an unusable response."""
    
    status_code = 502
    
    def __init__(
        self,
        message: str,
        detail: Optional[Any] = None,
        upstream_status: Optional[int] = None,
    ):
        super().__init__(message, detail)
        self.upstream_status = upstream_status


class NotFoundError(PaymentError):
    """Referenced order or status record does not exist."""
    
    status_code = 404


class ConflictError(PaymentError):
    """Uniqueness or ordering conflict."""
    
    status_code = 409
