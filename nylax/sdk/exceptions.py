class NylaxError(Exception):
    """Base class for all NYLAX exceptions."""
    pass

class ValidationError(NylaxError):
    """Base class for validation errors."""
    pass

class MissingFieldError(ValidationError):
    """Raised when a resource is created without a field the API requires."""
    pass

class InvalidProfileNameError(ValidationError):
    """Raised when a profile name does not match the allowed pattern."""
    pass

class NotConfiguredError(NylaxError):
    """Raised when no access token or app credentials can be resolved."""
    pass

class ProfileNotFoundError(NylaxError):
    """Raised when a named profile does not exist."""
    pass

class TransportError(NylaxError):
    """Raised when the API server could not be reached."""
    pass

class APIError(NylaxError):
    """Raised when the API answers with an error status."""

    def __init__(self, message, status_code=None, error_type=None, body=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_type = error_type
        self.body = body

    def __str__(self):
        if self.status_code:
            return f"{self.status_code}: {self.message}"
        return self.message

class AuthenticationError(APIError):
    """Raised on 401/403 responses."""
    pass

class NotFoundError(APIError):
    """Raised on 404 responses."""
    pass
