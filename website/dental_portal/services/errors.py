class ApiError(Exception):
    """Base class for failed calls to the clinic API."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NetworkError(ApiError):
    """The request never produced a response (connection refused, DNS, timeout)."""


class ValidationError(ApiError):
    """The API answered with a non-2xx status or ``success: false``."""
