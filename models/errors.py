"""
Domain exceptions for the kiosk order engine
"""


class KioskError(Exception):
    """Base exception for kiosk order engine errors"""
    pass


class ProductNotFoundError(KioskError):
    """Raised when a product id does not exist"""

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class OrderNotFoundError(KioskError):
    """Raised when an order id does not exist"""

    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class InvalidQuantityError(KioskError, ValueError):
    """Raised when an order line quantity is not a positive integer"""

    def __init__(self, quantity):
        self.quantity = quantity
        super().__init__(f"Quantity must be a positive integer, got {quantity!r}")


class InvalidStatusError(KioskError, ValueError):
    """Raised when a status code cannot be decoded"""

    def __init__(self, status):
        self.status = status
        super().__init__(f"Unknown item status: {status!r}")


class InvalidSelectionError(KioskError, ValueError):
    """Raised when a customization or order request body has the wrong shape"""
    pass
