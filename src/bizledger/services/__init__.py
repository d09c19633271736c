from .notification_service import NotificationBus
from .inventory_service import InventoryService
from .sales_service import SalesService
from .expense_service import ExpenseService
from .customer_service import CustomerService
from .company_service import CompanyService
from .invoice_service import InvoiceService
from .reporting_service import ReportingService
from .backup_service import BackupService

__all__ = [
    "NotificationBus",
    "InventoryService",
    "SalesService",
    "ExpenseService",
    "CustomerService",
    "CompanyService",
    "InvoiceService",
    "ReportingService",
    "BackupService",
]
