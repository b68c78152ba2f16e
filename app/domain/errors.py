# app/domain/errors.py


class ServiceError(Exception):
    """Bazowy blad domenowy, niesie status HTTP i nazwe bledu dla klienta."""

    status_code = 500
    error = "InternalError"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(ServiceError):
    status_code = 400
    error = "ValidationError"


class ConflictError(ServiceError):
    status_code = 400
    error = "ConflictError"


class AuthError(ServiceError):
    status_code = 401
    error = "AuthError"


class NotFoundError(ServiceError):
    status_code = 404
    error = "NotFoundError"


class InsufficientStockError(ServiceError):
    status_code = 409
    error = "InsufficientStockError"

    def __init__(self, detail: str, requested: int, available: int):
        super().__init__(detail)
        self.requested = requested
        self.available = available


class InternalError(ServiceError):
    status_code = 500
    error = "InternalError"


class RequestTimeoutError(ServiceError):
    status_code = 504
    error = "TimeoutError"
