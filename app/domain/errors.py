# app/domain/errors.py
from typing import Any, Dict


class ShopError(Exception):
    """Base class for errors that map onto an API response."""

    code = "SERVER_ERROR"
    status_code = 500

    def __init__(self, message: str = "Server error"):
        self.message = message
        super().__init__(message)

    def to_response(self) -> Dict[str, Any]:
        return {"success": False, "error": self.code, "message": self.message}


class BadRequest(ShopError):
    code = "BAD_REQUEST"
    status_code = 400


class Unauthorized(ShopError):
    code = "UNAUTHORIZED"
    status_code = 401


class Forbidden(ShopError):
    code = "FORBIDDEN"
    status_code = 403


class NotFound(ShopError):
    code = "NOT_FOUND"
    status_code = 404


class Conflict(ShopError):
    code = "CONFLICT"
    status_code = 409


class CartConflict(Conflict):
    """Cart changed between read and write; the caller may retry."""

    code = "CART_CONFLICT"

    def __init__(self, message: str = "Cart was modified by another request, retry"):
        super().__init__(message)

    def to_response(self) -> Dict[str, Any]:
        body = super().to_response()
        body["retryable"] = True
        return body


class ServerError(ShopError):
    pass
