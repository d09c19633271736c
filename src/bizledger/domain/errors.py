class AppError(Exception):
    """Base app error."""


class ValidationError(AppError):
    pass


class NotFoundError(AppError):
    pass


class InsufficientStockError(AppError):
    def __init__(self, product_name: str, available: int):
        super().__init__(f"Not enough stock for {product_name}. Available: {available}")
        self.product_name = product_name
        self.available = available


class PersistenceError(AppError):
    pass
