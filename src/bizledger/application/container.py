from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from bizledger.config import Settings, load_settings
from bizledger.repositories.kv_store import SqliteKeyValueStore
from bizledger.repositories.ledger_repo import LedgerRepository
from bizledger.services.backup_service import BackupService
from bizledger.services.company_service import CompanyService, default_company_profile
from bizledger.services.customer_service import CustomerService
from bizledger.services.expense_service import ExpenseService
from bizledger.services.inventory_service import InventoryService
from bizledger.services.invoice_service import InvoiceService
from bizledger.services.notification_service import NotificationBus
from bizledger.services.reporting_service import ReportingService
from bizledger.services.sales_service import SalesService


@dataclass(frozen=True)
class AppContainer:
    settings: Settings
    store: SqliteKeyValueStore
    repo: LedgerRepository
    notifications: NotificationBus
    inventory: InventoryService
    sales: SalesService
    expenses: ExpenseService
    customers: CustomerService
    company: CompanyService
    invoices: InvoiceService
    reporting: ReportingService
    backup: BackupService


def build_container(
    db_path: Path | str,
    settings: Optional[Settings] = None,
    clock: Callable[[], float] = time.monotonic,
    backup_dir: Path | str | None = None,
) -> AppContainer:
    settings = settings or load_settings()

    store = SqliteKeyValueStore(db_path)
    store.init_db()
    repo = LedgerRepository(store, default_company_profile(settings.company_name))
    repo.load()

    notifications = NotificationBus(ttl_seconds=settings.notification_ttl, clock=clock)
    inventory = InventoryService(repo, notifications)
    sales = SalesService(repo, notifications)
    expenses = ExpenseService(repo, notifications)
    customers = CustomerService(repo, notifications)
    company = CompanyService(repo, notifications)
    invoices = InvoiceService(repo, notifications, customers, company)
    reporting = ReportingService(
        repo,
        low_stock_threshold=settings.low_stock_threshold,
        currency_symbol=settings.currency_symbol,
    )
    backup = BackupService(store, repo, backup_dir or Path(db_path).parent / "backups")

    return AppContainer(
        settings=settings,
        store=store,
        repo=repo,
        notifications=notifications,
        inventory=inventory,
        sales=sales,
        expenses=expenses,
        customers=customers,
        company=company,
        invoices=invoices,
        reporting=reporting,
        backup=backup,
    )
