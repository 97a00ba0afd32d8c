"""
API Error Types

Exceptions raised by routes and services. The application error handler
turns them into JSON responses with the matching HTTP status.
"""


class APIError(Exception):
    """Base class for errors that map directly onto an HTTP response."""
    status_code = 500

    def __init__(self, message, status_code=None, details=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_dict(self):
        payload = {'success': False, 'error': self.message}
        if self.details is not None:
            payload['details'] = self.details
        return payload


class ValidationError(APIError):
    """Raised when request data fails validation."""
    status_code = 400


class AuthenticationError(APIError):
    """Raised when an endpoint needs a signed-in user."""
    status_code = 401


class PermissionDeniedError(APIError):
    """Raised when the signed-in user may not touch a resource."""
    status_code = 403


class NotFoundError(APIError):
    """Raised when a resource does not exist (or is hidden from the caller)."""
    status_code = 404


class ConflictError(APIError):
    """Raised when a create would duplicate an existing resource."""
    status_code = 409


class PaymentError(APIError):
    """Raised when Stripe rejects or fails an operation."""
    status_code = 400


class StorageError(APIError):
    """Raised when object storage is misconfigured or unreachable."""
    status_code = 500
