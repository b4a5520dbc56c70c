# lucent_shop/core/exceptions.py
"""
Error taxonomy shared by services and routers.

Every error is an HTTPException, so a service can raise it directly and
FastAPI turns it into a response. The handler in main.py adds `error_code`
to the body.
"""

from fastapi import HTTPException, status

from lucent_shop.core import locales


class ApiError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "INTERNAL_ERROR"
    default_message = locales.ERROR_INTERNAL

    def __init__(self, message: str | None = None, status_code: int | None = None, error_code: str | None = None):
        super().__init__(
            status_code=status_code or self.status_code,
            detail=message or self.default_message,
        )
        if error_code:
            self.error_code = error_code

    @property
    def message(self) -> str:
        return self.detail


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_ERROR"
    default_message = locales.ERROR_VALIDATION


class AuthenticationError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = "UNAUTHENTICATED"
    default_message = locales.ERROR_UNAUTHENTICATED

    def __init__(self, message: str | None = None, error_code: str | None = None):
        super().__init__(message, error_code=error_code)
        self.headers = {"WWW-Authenticate": "Bearer"}


class AuthorizationError(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "UNAUTHORIZED"
    default_message = locales.ERROR_FORBIDDEN


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"
    default_message = locales.ERROR_NOT_FOUND


class ProductNotFound(NotFoundError):
    error_code = "PRODUCT_NOT_FOUND"
    default_message = locales.ERROR_PRODUCT_NOT_FOUND


class InactiveProduct(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "PRODUCT_INACTIVE"
    default_message = locales.ERROR_PRODUCT_INACTIVE


class InvalidQuantity(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_QUANTITY"
    default_message = locales.ERROR_INVALID_QUANTITY


class OutOfStock(ApiError):
    """Raised by the cart when the requested quantity exceeds live stock."""
    status_code = status.HTTP_409_CONFLICT
    error_code = "OUT_OF_STOCK"
    default_message = locales.ERROR_PRODUCT_SOLD_OUT


class InsufficientStock(ApiError):
    """Raised by order creation; the whole order is rolled back."""
    status_code = status.HTTP_409_CONFLICT
    error_code = "INSUFFICIENT_STOCK"


class OrderCannotCancel(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "ORDER_CANNOT_CANCEL"
    default_message = locales.ERROR_ORDER_CANNOT_CANCEL


class InvalidStatusTransition(ApiError):
    status_code = status.HTTP_409_CONFLICT
    error_code = "INVALID_STATUS_TRANSITION"


class DownloadNotAvailable(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    error_code = "DOWNLOAD_NOT_AVAILABLE"
    default_message = locales.ERROR_DOWNLOAD_FORBIDDEN


class SampleGenerationError(ApiError):
    error_code = "SAMPLE_GENERATION_FAILED"
    default_message = locales.ERROR_SAMPLE_FAILED
