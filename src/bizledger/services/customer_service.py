from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Optional

from bizledger.domain.errors import NotFoundError, ValidationError
from bizledger.domain.formatting import now_timestamp
from bizledger.domain.models import Customer, NotificationKind, new_id
from bizledger.domain.validation import optional_text, require_text
from bizledger.services.notification_service import reports_failures

log = logging.getLogger(__name__)


def sort_customers(customers: Iterable[Customer]) -> list[Customer]:
    return sorted(customers, key=lambda c: c.name.casefold())


def _email(value: Optional[str]) -> Optional[str]:
    email = optional_text(value)
    if email and "@" not in email:
        raise ValidationError("Email address is not valid.")
    return email


class CustomerService:
    def __init__(self, repo, notifier):
        self.repo = repo
        self.notifier = notifier

    def list_customers(self) -> list[Customer]:
        return list(self.repo.customers)

    def get_customer(self, customer_id: str) -> Customer:
        c = self.repo.find_customer(customer_id)
        if not c:
            raise NotFoundError("Customer not found.")
        return c

    @staticmethod
    def validate_fields(name, phone, address, city, district, email=None) -> dict:
        return {
            "name": require_text(name, "Name"),
            "phone": require_text(phone, "Phone"),
            "address": require_text(address, "Address"),
            "city": require_text(city, "City"),
            "district": require_text(district, "District"),
            "email": _email(email),
        }

    @reports_failures
    def add_customer(
        self,
        name: str,
        phone: str,
        address: str,
        city: str,
        district: str,
        email: Optional[str] = None,
    ) -> Customer:
        fields = self.validate_fields(name, phone, address, city, district, email)
        customer = Customer(id=new_id(), created_at=now_timestamp(), **fields)
        self.repo.commit(customers=sort_customers([customer, *self.repo.customers]))
        log.info("customer_added id=%s", customer.id)
        self.notifier.show("Customer added successfully.", NotificationKind.SUCCESS)
        return customer

    @reports_failures
    def update_customer(
        self,
        customer_id: str,
        name: str,
        phone: str,
        address: str,
        city: str,
        district: str,
        email: Optional[str] = None,
    ) -> Customer:
        current = self.get_customer(customer_id)
        updated = replace(current, **self.validate_fields(name, phone, address, city, district, email))
        self.repo.commit(customers=sort_customers(updated if c.id == customer_id else c for c in self.repo.customers))
        log.info("customer_updated id=%s", customer_id)
        self.notifier.show("Customer updated successfully.", NotificationKind.SUCCESS)
        return updated

    @reports_failures
    def delete_customer(self, customer_id: str) -> None:
        self.get_customer(customer_id)
        # Invoices keep their own customer snapshot, so they stay intact.
        self.repo.commit(customers=[c for c in self.repo.customers if c.id != customer_id])
        log.info("customer_deleted id=%s", customer_id)
        self.notifier.show("Customer deleted.", NotificationKind.DELETE)
