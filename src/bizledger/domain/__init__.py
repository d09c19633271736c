from .models import (
    CompanyProfile,
    Customer,
    Expense,
    ExpenseType,
    Invoice,
    InvoiceItem,
    Notification,
    NotificationKind,
    Product,
    Sale,
    SaleItem,
)
from .errors import AppError, ValidationError, NotFoundError, InsufficientStockError, PersistenceError

__all__ = [
    "CompanyProfile",
    "Customer",
    "Expense",
    "ExpenseType",
    "Invoice",
    "InvoiceItem",
    "Notification",
    "NotificationKind",
    "Product",
    "Sale",
    "SaleItem",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "InsufficientStockError",
    "PersistenceError",
]
