"""
Service Exceptions

Errors raised by the stores and mapped to HTTP responses by the
exception handlers in ``app.main``:

    - NotFoundError      -> 404
    - ValidationFailure  -> 400
    - anything else      -> 500 (logged, generic message)
"""


class ServiceError(Exception):
    """Base class for expected, request-scoped failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError, LookupError):
    """No record matches the requested identity."""

    status_code = 404


class RestaurantNotFoundError(NotFoundError):
    """Raised when no restaurant has the given durable identity."""

    def __init__(self, identifier: str, message: str = "Restaurant not found"):
        super().__init__(message)
        self.identifier = identifier


class MenuNotFoundError(NotFoundError):
    """Raised when a restaurant exists but has no menu document."""

    def __init__(self, restaurant_id: str):
        super().__init__("Menu not found for the given restaurant.")
        self.restaurant_id = restaurant_id


class ValidationFailure(ServiceError, ValueError):
    """A required field is missing or malformed."""

    status_code = 400
