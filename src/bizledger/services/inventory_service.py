from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Optional

from bizledger.domain.errors import NotFoundError
from bizledger.domain.formatting import now_timestamp
from bizledger.domain.models import NotificationKind, Product, new_id
from bizledger.domain.validation import non_negative, require_text, whole_number
from bizledger.services.notification_service import reports_failures

log = logging.getLogger(__name__)


def sort_products(products: Iterable[Product]) -> list[Product]:
    return sorted(products, key=lambda p: p.name.casefold())


class InventoryService:
    def __init__(self, repo, notifier):
        self.repo = repo
        self.notifier = notifier

    def list_products(self) -> list[Product]:
        return list(self.repo.products)

    def get_product(self, product_id: str) -> Product:
        p = self.repo.find_product(product_id)
        if not p:
            raise NotFoundError("Product not found.")
        return p

    def low_stock_products(self, threshold: int = 5) -> list[Product]:
        return [p for p in self.repo.products if p.stock < threshold]

    @reports_failures
    def add_product(
        self,
        name: str,
        purchase_price: float,
        selling_price: float,
        stock: int,
        description: Optional[str] = "",
    ) -> Product:
        product = Product(
            id=new_id(),
            name=require_text(name, "Name"),
            description=(description or "").strip(),
            purchase_price=non_negative(purchase_price, "Purchase price"),
            selling_price=non_negative(selling_price, "Selling price"),
            stock=whole_number(stock, "Stock"),
            created_at=now_timestamp(),
        )
        self.repo.commit(products=sort_products([product, *self.repo.products]))
        log.info("product_added id=%s name=%s stock=%s", product.id, product.name, product.stock)
        self.notifier.show("Product added successfully.", NotificationKind.SUCCESS)
        return product

    @reports_failures
    def update_product(
        self,
        product_id: str,
        name: str,
        purchase_price: float,
        selling_price: float,
        stock: int,
        description: Optional[str] = "",
    ) -> Product:
        current = self.get_product(product_id)
        updated = replace(
            current,
            name=require_text(name, "Name"),
            description=(description or "").strip(),
            purchase_price=non_negative(purchase_price, "Purchase price"),
            selling_price=non_negative(selling_price, "Selling price"),
            stock=whole_number(stock, "Stock"),
        )
        self.repo.commit(products=sort_products(updated if p.id == product_id else p for p in self.repo.products))
        log.info("product_updated id=%s", product_id)
        self.notifier.show("Product updated successfully.", NotificationKind.SUCCESS)
        return updated

    @reports_failures
    def delete_product(self, product_id: str) -> None:
        self.get_product(product_id)
        self.repo.commit(products=[p for p in self.repo.products if p.id != product_id])
        log.info("product_deleted id=%s", product_id)
        self.notifier.show("Product deleted.", NotificationKind.DELETE)
