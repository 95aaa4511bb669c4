# user_service/core/errors.py

from fastapi import status


# -------------------------------
# Service Error Taxonomy
# -------------------------------

class ServiceError(Exception):
    """
    Base class for every error the service turns into an APIError body.
    `error` is the short category shown to clients, `message` the detail.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "Internal server error"

    def __init__(self, message: str = "", error: str | None = None):
        super().__init__(message or self.error)
        self.message = message
        if error is not None:
            self.error = error

    def to_dict(self) -> dict:
        return {"error": self.error, "message": self.message, "code": self.status_code}


class ValidationError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Invalid request"


class UnauthorizedError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not found"


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"


class RequestTimeoutError(ServiceError):
    status_code = status.HTTP_504_GATEWAY_TIMEOUT
    error = "Request timeout"


class StoreError(ServiceError):
    """
    Persistence failure. The wrapped detail is for server logs only;
    clients always see the generic message.
    """
    error = "Internal server error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail
        self.message = "An unexpected error occurred"


def api_error(status_code: int, error: str, message: str = "") -> dict:
    return {"error": error, "message": message, "code": status_code}
