from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional
import uuid


class ExpenseType(str, Enum):
    SALARY = "Salary"
    ADVERTISING = "Advertising"
    DELIVERY = "Delivery"
    OTHER = "Other"


class NotificationKind(str, Enum):
    SUCCESS = "success"
    DELETE = "delete"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


THEMES = ("light", "dark")


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    description: str
    purchase_price: float
    selling_price: float
    stock: int
    created_at: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "purchasePrice": self.purchase_price,
            "sellingPrice": self.selling_price,
            "stock": self.stock,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Product":
        return cls(
            id=str(d["id"]),
            name=str(d["name"]),
            description=str(d.get("description") or ""),
            purchase_price=float(d["purchasePrice"]),
            selling_price=float(d["sellingPrice"]),
            stock=int(d["stock"]),
            created_at=str(d["createdAt"]),
        )


@dataclass(frozen=True)
class SaleItem:
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    unit_cost: float

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity

    @property
    def line_cost(self) -> float:
        return self.unit_cost * self.quantity

    def to_dict(self) -> dict:
        return {
            "productId": self.product_id,
            "productName": self.product_name,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "unitCost": self.unit_cost,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "SaleItem":
        return cls(
            product_id=str(d["productId"]),
            product_name=str(d["productName"]),
            quantity=int(d["quantity"]),
            unit_price=float(d["unitPrice"]),
            unit_cost=float(d["unitCost"]),
        )


@dataclass(frozen=True)
class Sale:
    id: str
    date: str
    items: tuple[SaleItem, ...]
    total_amount: float
    total_cost: float
    created_at: str

    @property
    def quantity_sold(self) -> int:
        return sum(it.quantity for it in self.items)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date,
            "items": [it.to_dict() for it in self.items],
            "totalAmount": self.total_amount,
            "totalCost": self.total_cost,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Sale":
        return cls(
            id=str(d["id"]),
            date=str(d["date"]),
            items=tuple(SaleItem.from_dict(it) for it in d.get("items", [])),
            total_amount=float(d["totalAmount"]),
            total_cost=float(d["totalCost"]),
            created_at=str(d["createdAt"]),
        )


@dataclass(frozen=True)
class Expense:
    id: str
    type: ExpenseType
    description: str
    amount: float
    date: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "description": self.description,
            "amount": self.amount,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Expense":
        return cls(
            id=str(d["id"]),
            type=ExpenseType(d["type"]),
            description=str(d.get("description") or ""),
            amount=float(d["amount"]),
            date=str(d["date"]),
        )


@dataclass(frozen=True)
class Customer:
    id: str
    name: str
    district: str
    city: str
    address: str
    phone: str
    email: Optional[str]
    created_at: str

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "name": self.name,
            "district": self.district,
            "city": self.city,
            "address": self.address,
            "phone": self.phone,
            "createdAt": self.created_at,
        }
        if self.email:
            d["email"] = self.email
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "Customer":
        return cls(
            id=str(d["id"]),
            name=str(d["name"]),
            district=str(d.get("district") or ""),
            city=str(d.get("city") or ""),
            address=str(d.get("address") or ""),
            phone=str(d.get("phone") or ""),
            email=d.get("email") or None,
            created_at=str(d["createdAt"]),
        )


@dataclass(frozen=True)
class CompanyProfile:
    company_name: str
    address: str
    phone: str
    email: str
    logo: Optional[str] = None  # data URL / base64 text

    def to_dict(self) -> dict:
        return {
            "companyName": self.company_name,
            "address": self.address,
            "phone": self.phone,
            "email": self.email,
            "logo": self.logo or "",
        }

    @classmethod
    def from_dict(cls, d: dict) -> "CompanyProfile":
        return cls(
            company_name=str(d.get("companyName") or ""),
            address=str(d.get("address") or ""),
            phone=str(d.get("phone") or ""),
            email=str(d.get("email") or ""),
            logo=d.get("logo") or None,
        )


@dataclass(frozen=True)
class InvoiceItem:
    id: str
    description: str
    quantity: float
    unit_price: float
    total: float

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "description": self.description,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "total": self.total,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "InvoiceItem":
        return cls(
            id=str(d["id"]),
            description=str(d["description"]),
            quantity=float(d["quantity"]),
            unit_price=float(d["unitPrice"]),
            total=float(d["total"]),
        )


@dataclass(frozen=True)
class Invoice:
    id: str
    invoice_number: str
    customer_id: str
    customer_snapshot: Customer
    company_profile_snapshot: CompanyProfile
    date: str
    due_date: Optional[str]
    items: tuple[InvoiceItem, ...]
    subtotal: float
    discount_amount: float
    tax_amount: float
    grand_total: float
    notes: Optional[str]
    qr_code_data: str
    created_at: str

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "invoiceNumber": self.invoice_number,
            "customerId": self.customer_id,
            "customerSnapshot": self.customer_snapshot.to_dict(),
            "companyProfileSnapshot": self.company_profile_snapshot.to_dict(),
            "date": self.date,
            "items": [it.to_dict() for it in self.items],
            "subtotal": self.subtotal,
            "discountAmount": self.discount_amount,
            "taxAmount": self.tax_amount,
            "grandTotal": self.grand_total,
            "qrCodeData": self.qr_code_data,
            "createdAt": self.created_at,
        }
        if self.due_date:
            d["dueDate"] = self.due_date
        if self.notes:
            d["notes"] = self.notes
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "Invoice":
        return cls(
            id=str(d["id"]),
            invoice_number=str(d["invoiceNumber"]),
            customer_id=str(d["customerId"]),
            customer_snapshot=Customer.from_dict(d["customerSnapshot"]),
            company_profile_snapshot=CompanyProfile.from_dict(d["companyProfileSnapshot"]),
            date=str(d["date"]),
            due_date=d.get("dueDate") or None,
            items=tuple(InvoiceItem.from_dict(it) for it in d.get("items", [])),
            subtotal=float(d["subtotal"]),
            discount_amount=float(d.get("discountAmount") or 0.0),
            tax_amount=float(d.get("taxAmount") or 0.0),
            grand_total=float(d["grandTotal"]),
            notes=d.get("notes") or None,
            qr_code_data=str(d.get("qrCodeData") or ""),
            created_at=str(d["createdAt"]),
        )


@dataclass(frozen=True)
class Notification:
    id: str
    message: str
    kind: NotificationKind
    created_at: float


def new_id() -> str:
    return uuid.uuid4().hex
