"""Exception taxonomy shared by services and routes.

Every error carries the HTTP status it maps to and a short machine-readable
``code``. Authentication failures all render the same public message so a
client cannot tell which check failed.
"""

from __future__ import annotations


class StorefrontError(Exception):
    status_code = 500
    code = "internal_error"
    public_message = None

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.public_message or self.message}


class Unauthenticated(StorefrontError):
    status_code = 401
    code = "unauthenticated"
    public_message = "Authentication required."


class MissingToken(Unauthenticated):
    pass


class MalformedToken(Unauthenticated):
    pass


class ExpiredToken(Unauthenticated):
    pass


class InvalidSignature(Unauthenticated):
    pass


class InvalidCredentials(Unauthenticated):
    public_message = "Invalid credentials."


class Forbidden(StorefrontError):
    status_code = 403
    code = "forbidden"
    public_message = "Insufficient permissions."


class NotFound(StorefrontError):
    status_code = 404
    code = "not_found"


class ProductNotFound(NotFound):
    pass


class ItemNotFound(NotFound):
    pass


class OrderNotFound(NotFound):
    pass


class ValidationFailed(StorefrontError, ValueError):
    status_code = 400
    code = "validation_failed"


class EmptyCart(StorefrontError):
    status_code = 400
    code = "empty_cart"


class NoValidItems(EmptyCart):
    code = "no_valid_items"


class InvalidPrice(StorefrontError):
    status_code = 400
    code = "invalid_price"


class Conflict(StorefrontError):
    status_code = 409
    code = "conflict"
