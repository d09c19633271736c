from __future__ import annotations

import json
import logging
from typing import Iterable, Optional

from bizledger.domain.errors import NotFoundError, ValidationError
from bizledger.domain.formatting import now_timestamp, parse_business_date
from bizledger.domain.invoice_numbering import next_invoice_number, parse_suffix
from bizledger.domain.models import Customer, Invoice, InvoiceItem, NotificationKind, new_id
from bizledger.domain.validation import non_negative, positive, require_text
from bizledger.repositories.unit_of_work import RepositoryUnitOfWork
from bizledger.services.customer_service import sort_customers
from bizledger.services.notification_service import reports_failures

log = logging.getLogger("bizledger.invoices")


def sort_invoices(invoices: Iterable[Invoice]) -> list[Invoice]:
    return sorted(invoices, key=lambda inv: inv.created_at, reverse=True)


def discount_amount(discount, subtotal: float) -> float:
    """``50`` is an absolute amount, ``"5%"`` is a share of the subtotal."""
    if discount is None or discount == "":
        return 0.0
    if isinstance(discount, str) and discount.strip().endswith("%"):
        pct = non_negative(discount.strip()[:-1], "Discount")
        amount = subtotal * pct / 100
    else:
        amount = non_negative(discount, "Discount")
    if amount > subtotal:
        raise ValidationError("Discount cannot exceed the subtotal.")
    return amount


def qr_payload(invoice_number: str, customer_name: str, amount: float, date: str) -> str:
    return json.dumps(
        {"invoiceId": invoice_number, "customerName": customer_name, "amount": amount, "date": date},
        ensure_ascii=False,
        separators=(",", ":"),
    )


class InvoiceService:
    def __init__(self, repo, notifier, customers, company):
        self.repo = repo
        self.notifier = notifier
        self.customers = customers
        self.company = company

    def list_invoices(self) -> list[Invoice]:
        return list(self.repo.invoices)

    def get_invoice(self, invoice_id: str) -> Invoice:
        inv = self.repo.find_invoice(invoice_id)
        if not inv:
            raise NotFoundError("Invoice not found.")
        return inv

    def invoices_for_customer(self, customer_id: str) -> list[Invoice]:
        return [inv for inv in self.repo.invoices if inv.customer_id == customer_id]

    def next_invoice_number(self) -> str:
        return next_invoice_number((inv.invoice_number for inv in self.repo.invoices), self.repo.invoice_sequence)

    def _build_items(self, items: Iterable[dict]) -> list[InvoiceItem]:
        built = []
        for it in items:
            qty = positive(it.get("quantity"), "Quantity")
            unit_price = non_negative(it.get("unit_price"), "Unit price")
            built.append(
                InvoiceItem(
                    id=new_id(),
                    description=require_text(it.get("description"), "Item description"),
                    quantity=qty,
                    unit_price=unit_price,
                    total=round(qty * unit_price, 2),
                )
            )
        if not built:
            raise ValidationError("An invoice needs at least one item.")
        return built

    @reports_failures
    def add_invoice(
        self,
        date: str,
        items: Iterable[dict],
        customer_id: Optional[str] = None,
        new_customer: Optional[dict] = None,
        due_date: Optional[str] = None,
        discount: float | str | None = 0,
        tax_rate: float = 0,
        notes: Optional[str] = None,
    ) -> Invoice:
        """
        items: [{description, quantity, unit_price}]

        Bill either an existing customer (customer_id) or create one inline
        from new_customer (name, phone, address, city, district, email).
        The customer and company profile are copied into the invoice.
        """
        invoice_date = parse_business_date(date, "Invoice date").isoformat()
        due = None
        if due_date:
            due = parse_business_date(due_date, "Due date").isoformat()
            if due < invoice_date:
                raise ValidationError("Due date cannot be before the invoice date.")

        lines = self._build_items(items)
        subtotal = round(sum(it.total for it in lines), 2)
        discount_value = round(discount_amount(discount, subtotal), 2)
        rate = non_negative(tax_rate or 0, "Tax rate")
        tax_value = round((subtotal - discount_value) * rate / 100, 2)
        grand_total = round(subtotal - discount_value + tax_value, 2)

        if customer_id and new_customer:
            raise ValidationError("Choose an existing customer or a new one, not both.")
        created_customer = None
        if customer_id:
            customer = self.customers.get_customer(customer_id)
        elif new_customer:
            # Committed together with the invoice below.
            fields = self.customers.validate_fields(**new_customer)
            created_customer = Customer(id=new_id(), created_at=now_timestamp(), **fields)
            customer = created_customer
        else:
            raise ValidationError("A customer is required.")

        number = self.next_invoice_number()
        invoice = Invoice(
            id=new_id(),
            invoice_number=number,
            customer_id=customer.id,
            customer_snapshot=customer,
            company_profile_snapshot=self.company.get_profile(),
            date=invoice_date,
            due_date=due,
            items=tuple(lines),
            subtotal=subtotal,
            discount_amount=discount_value,
            tax_amount=tax_value,
            grand_total=grand_total,
            notes=(notes or "").strip() or None,
            qr_code_data=qr_payload(number, customer.name, grand_total, invoice_date),
            created_at=now_timestamp(),
        )

        with RepositoryUnitOfWork(self.repo) as uow:
            if created_customer:
                uow.stage(customers=sort_customers([created_customer, *self.repo.customers]))
            uow.stage(
                invoices=sort_invoices([invoice, *self.repo.invoices]),
                invoice_sequence=max(self.repo.invoice_sequence, parse_suffix(number)),
            )

        if created_customer:
            log.info("customer_added id=%s via_invoice=%s", created_customer.id, number)
            self.notifier.show("Customer added successfully.", NotificationKind.SUCCESS)

        log.info("invoice_created number=%s customer_id=%s total=%.2f", number, customer.id, grand_total)
        self.notifier.show(f"Invoice {number} generated successfully.", NotificationKind.SUCCESS)
        return invoice

    @reports_failures
    def delete_invoice(self, invoice_id: str) -> None:
        inv = self.get_invoice(invoice_id)
        self.repo.commit(invoices=[i for i in self.repo.invoices if i.id != invoice_id])
        log.info("invoice_deleted number=%s", inv.invoice_number)
        self.notifier.show(f"Invoice {inv.invoice_number} deleted.", NotificationKind.DELETE)
