from __future__ import annotations

from collections import Counter
from dataclasses import replace
from typing import Callable, Iterable
import logging

from bizledger.domain.errors import InsufficientStockError, NotFoundError, ValidationError
from bizledger.domain.formatting import now_timestamp, parse_business_date
from bizledger.domain.models import NotificationKind, Sale, SaleItem, new_id
from bizledger.domain.validation import whole_number
from bizledger.repositories.unit_of_work import RepositoryUnitOfWork, UnitOfWork
from bizledger.services.inventory_service import sort_products
from bizledger.services.notification_service import reports_failures

log = logging.getLogger("bizledger.sales")


def sort_sales(sales: Iterable[Sale]) -> list[Sale]:
    return sorted(sales, key=lambda s: s.created_at, reverse=True)


class SalesService:
    def __init__(
        self,
        repo,
        notifier,
        uow_factory: Callable[[], UnitOfWork] | None = None,
    ):
        self.repo = repo
        self.notifier = notifier
        self.uow_factory = uow_factory or (lambda: RepositoryUnitOfWork(repo))

    @reports_failures
    def add_sale(self, date: str, items: Iterable[dict]) -> Sale:
        """
        items: [{product_id, quantity}]

        Prices and costs are copied from the products at this moment. Either
        every line is committed together with its stock decrement or nothing is.
        """
        sale_date = parse_business_date(date, "Sale date").isoformat()
        items = list(items)
        if not items:
            raise ValidationError("Cart is empty.")

        products = {p.id: p for p in self.repo.products}

        # Aggregate qty by product so repeated lines cannot oversell
        qty_by_product: Counter[str] = Counter()
        lines: list[SaleItem] = []
        total_amount = 0.0
        total_cost = 0.0
        for it in items:
            product_id = str(it.get("product_id") or "")
            qty = whole_number(it.get("quantity"), "Quantity", minimum=1)

            prod = products.get(product_id)
            if not prod:
                raise NotFoundError(f"Product with id {product_id} not found. Sale not recorded.")
            qty_by_product[product_id] += qty
            if qty_by_product[product_id] > prod.stock:
                raise InsufficientStockError(prod.name, prod.stock)

            lines.append(
                SaleItem(
                    product_id=prod.id,
                    product_name=prod.name,
                    quantity=qty,
                    unit_price=prod.selling_price,
                    unit_cost=prod.purchase_price,
                )
            )
            total_amount += prod.selling_price * qty
            total_cost += prod.purchase_price * qty

        sale = Sale(
            id=new_id(),
            date=sale_date,
            items=tuple(lines),
            total_amount=total_amount,
            total_cost=total_cost,
            created_at=now_timestamp(),
        )
        updated_products = [
            replace(p, stock=p.stock - qty_by_product[p.id]) if p.id in qty_by_product else p
            for p in self.repo.products
        ]

        with self.uow_factory() as uow:
            uow.stage(products=sort_products(updated_products), sales=sort_sales([sale, *self.repo.sales]))

        log.info(
            "sale_created sale_id=%s items=%s total=%.2f cost=%.2f",
            sale.id, len(lines), sale.total_amount, sale.total_cost,
        )
        self.notifier.show("Sale recorded successfully.", NotificationKind.SUCCESS)
        return sale

    @reports_failures
    def delete_sales(self, sale_ids: Iterable[str]) -> int:
        """Purge sale records. Stock sold by them is not put back."""
        ids = set(sale_ids)
        if not ids:
            raise ValidationError("No sales selected.")
        kept = [s for s in self.repo.sales if s.id not in ids]
        removed = len(self.repo.sales) - len(kept)
        self.repo.commit(sales=kept)
        log.info("sales_deleted count=%s", removed)
        self.notifier.show(f"{removed} sales record(s) deleted.", NotificationKind.DELETE)
        return removed

    def list_sales(self) -> list[Sale]:
        return list(self.repo.sales)

    def get_sale(self, sale_id: str) -> Sale:
        sale = next((s for s in self.repo.sales if s.id == sale_id), None)
        if not sale:
            raise NotFoundError("Sale not found.")
        return sale

    def sales_on(self, date: str) -> list[Sale]:
        return [s for s in self.repo.sales if s.date == date]
