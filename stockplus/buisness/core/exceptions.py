"""
Domain exceptions raised by the business layer.

Messages are user-facing: routes flash them as-is and the JSON API returns
them in its "error" field.
"""


class ValidationError(ValueError):
    """Raised when input validation fails."""
    pass


class StockError(ValidationError):
    """Raised when a stock operation cannot be applied to an item."""
    pass


class InsufficientStockError(StockError):
    """Raised when an outbound transaction asks for more than is in stock."""

    def __init__(self, item_name, available, requested):
        self.item_name = item_name
        self.available = available
        self.requested = requested
        super().__init__(f"Insufficient stock. Available: {available}")


class ItemInUseError(StockError):
    """Raised when deleting an item that transactions or production still reference."""
    pass
