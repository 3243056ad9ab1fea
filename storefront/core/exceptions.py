"""
Error taxonomy for the storefront core

Every business error raised by a service derives from StoreError and belongs
to exactly one category. The category decides the HTTP status the API layer
answers with:

- ValidationError      400  caller input malformed or missing
- AuthenticationError  401  bad credentials or token
- PermissionDenied     403  authenticated but not allowed
- NotFoundError        404  referenced resource does not exist
- ConflictError        409  request clashes with current state
- RepositoryError      500  wrapped persistence failure (cause kept in __cause__)

Author: TM3
"""


class StoreError(Exception):
    """Base class for all storefront errors"""

    status_code = 500
    message = "internal server error"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        self.message = message or self.message


# =============================================================================
# Categories
# =============================================================================

class ValidationError(StoreError):
    status_code = 400
    message = "invalid request"


class AuthenticationError(StoreError):
    status_code = 401
    message = "authentication required"


class PermissionDenied(StoreError):
    status_code = 403
    message = "access denied"


class NotFoundError(StoreError):
    status_code = 404
    message = "resource not found"


class ConflictError(StoreError):
    status_code = 409
    message = "request conflicts with current state"


class RepositoryError(StoreError):
    """Persistence failure. Never shown to clients verbatim."""

    status_code = 500
    message = "database operation failed"


# =============================================================================
# Validation errors
# =============================================================================

class UserIDRequired(ValidationError):
    message = "user id is required"


class ProductIDRequired(ValidationError):
    message = "product id is required"


class ItemIDRequired(ValidationError):
    message = "item id is required"


class OrderIDRequired(ValidationError):
    message = "order id is required"


class InvalidQuantity(ValidationError):
    message = "quantity must be greater than 0"


class ShippingAddressRequired(ValidationError):
    message = "shipping address is required"


class PaymentMethodInvalid(ValidationError):
    message = "invalid payment method"


class OrderMustContainItem(ValidationError):
    message = "order must contain at least one item"


class StatusRequired(ValidationError):
    message = "status is required"


class InvalidStatus(ValidationError):
    message = "invalid order status"


class ProductNameRequired(ValidationError):
    message = "product name is required (3-255 characters)"


class InvalidPrice(ValidationError):
    message = "invalid price value"


class InvalidStock(ValidationError):
    message = "stock cannot be negative"


class NoFieldsToUpdate(ValidationError):
    message = "no fields to update"


class InvalidRole(ValidationError):
    message = "invalid role value"


class EmailRequired(ValidationError):
    message = "user email is required"


class PasswordRequired(ValidationError):
    message = "user password is required"


class WeakPassword(ValidationError):
    message = "password must be at least 8 characters"


# =============================================================================
# Not-found errors
# =============================================================================

class OrderNotFound(NotFoundError):
    message = "order not found"


class ItemNotFound(NotFoundError):
    message = "cart item not found"


class ProductNotFound(NotFoundError):
    message = "product not found"


class UserNotFound(NotFoundError):
    message = "user not found"


# =============================================================================
# Conflict errors
# =============================================================================

class OrderAlreadyCanceled(ConflictError):
    message = "order already canceled"


class CannotCancelDelivered(ConflictError):
    message = "cannot cancel a delivered order"


class InsufficientStock(ConflictError):
    message = "insufficient stock for product"


class EmailAlreadyExists(ConflictError):
    message = "email already exists"


class InvalidStatusTransition(ConflictError):
    message = "order status transition not allowed"

    def __init__(self, current: str = None, target: str = None):
        if current and target:
            super().__init__(f"cannot change order status from {current} to {target}")
        else:
            super().__init__()


class OrderStatusChanged(ConflictError):
    message = "order status was changed by another request"


class CartItemConflict(ConflictError):
    message = "product is already in the cart"


class CartChanged(ConflictError):
    message = "cart changed during checkout, please review it and try again"


# =============================================================================
# Authentication errors
# =============================================================================

class InvalidCredentials(AuthenticationError):
    message = "invalid credentials"


class InvalidToken(AuthenticationError):
    message = "invalid token"


class TokenExpired(AuthenticationError):
    message = "token has expired"
