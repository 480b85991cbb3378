from fastapi import HTTPException


class ApiError(HTTPException):
    """Error with a message and an HTTP status, rendered as ``{"error": {...}}``."""

    status = 500

    def __init__(self, message="Internal Server Error", status: int | None = None):
        status = status or self.status
        super().__init__(status_code=status, detail=message)
        self.message = message
        self.status = status

    def to_dict(self) -> dict:
        return {"error": {"message": self.message, "status": self.status}}


class BadRequestError(ApiError):
    status = 400

    def __init__(self, message="Bad Request"):
        super().__init__(message)


class UnauthorizedError(ApiError):
    status = 401

    def __init__(self, message="Unauthorized"):
        super().__init__(message)


class ForbiddenError(ApiError):
    status = 403

    def __init__(self, message="Forbidden"):
        super().__init__(message)


class NotFoundError(ApiError):
    status = 404

    def __init__(self, message="Not Found"):
        super().__init__(message)
