"""
Ошибки приложения.

У каждой ошибки есть стабильный ``code`` для клиентов, понятное человеку
``message`` и HTTP-статус, с которым она отдаётся.
"""

from typing import Iterable, List, Optional


class ApiError(Exception):
    code = "UNEXPECTED_ERROR"
    message = "Unexpected error"
    status_code = 500

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code, "errors": []}


class UnexpectedError(ApiError):
    pass


class ValidationFailed(ApiError):
    code = "VALIDATION_FAILED"
    message = "Validation failed"
    status_code = 400

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors: List[str] = [e for e in errors if e is not None]
        super().__init__()

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code, "errors": self.errors}


class ActionNotAllowed(ApiError):
    code = "ACTION_NOT_ALLOWED"
    message = "Action not allowed"
    status_code = 403


class OrderDoesNotExist(ApiError):
    code = "ORDER_DOES_NOT_EXIST"
    message = "Order does not exist"
    status_code = 404


class OrderAlreadyCompleted(ApiError):
    code = "ORDER_ALREADY_COMPLETED"
    message = "Order is already completed"
    status_code = 400


class ProductDoesNotExist(ApiError):
    code = "PRODUCT_DOES_NOT_EXIST"
    message = "Product does not exist"
    status_code = 404


class VariationItemDoesNotExist(ApiError):
    code = "VARIATION_ITEM_DOES_NOT_EXIST"
    message = "Variation item does not exist"
    status_code = 404


class ProductNotInOrder(ApiError):
    code = "PRODUCT_NOT_IN_ORDER"
    message = "Product is not in the order"
    status_code = 400


class OrderItemDoesNotExist(ApiError):
    code = "ORDER_ITEM_DOES_NOT_EXIST"
    message = "Order item does not exist"
    status_code = 404


class OrderItemVariationDoesNotExist(ApiError):
    code = "ORDER_ITEM_VARIATION_DOES_NOT_EXIST"
    message = "Order item variation does not exist"
    status_code = 404


def raise_validation_errors(*errors: Optional[str]) -> None:
    """Выбрасывает ``ValidationFailed``, если задана хотя бы одна ошибка."""
    collected = [e for e in errors if e is not None]
    if collected:
        raise ValidationFailed(collected)
