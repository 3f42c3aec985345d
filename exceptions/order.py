"""
Order-related exceptions.
"""

from .base import FoodHubException


class OrderException(FoodHubException):
    """Base exception for order-related errors."""
    pass


class OrderNotFoundException(OrderException):
    """Raised when order is not found in database."""

    def __init__(self, order_id: int):
        super().__init__(
            f"Order {order_id} not found",
            details={'order_id': order_id}
        )
        self.order_id = order_id


class OrderPlacementException(OrderException):
    """
    Raised when an order cannot be placed.

    The message is shown to the customer as-is; the cart is left untouched
    so the order can be retried.
    """

    def __init__(self, reason: str, user_id: str | None = None):
        super().__init__(
            f"Failed to place order. Please try again.\nError: {reason}",
            details={'user_id': user_id, 'reason': reason}
        )
        self.user_id = user_id
        self.reason = reason
