from __future__ import annotations

import json
import logging
from typing import Any, Callable, Mapping, Optional

from bizledger.domain.errors import PersistenceError
from bizledger.domain.models import THEMES, CompanyProfile, Customer, Expense, Invoice, Product, Sale
from bizledger.repositories.contracts import KeyValueStore

log = logging.getLogger(__name__)

# attribute name -> storage key
STORAGE_KEYS = {
    "products": "products",
    "sales": "sales",
    "expenses": "expenses",
    "customers": "customers",
    "company_profile": "companyProfile",
    "invoices": "invoices",
    "theme": "theme",
    "invoice_sequence": "invoiceSequence",
}


def _encode(name: str, value: Any) -> str:
    if name in ("products", "sales", "expenses", "customers", "invoices"):
        return json.dumps([item.to_dict() for item in value], ensure_ascii=False)
    if name == "company_profile":
        return json.dumps(value.to_dict(), ensure_ascii=False)
    return json.dumps(value)


class LedgerRepository:
    """Owns the in-memory collections and mirrors each one to its own store key.

    Collections are replaced wholesale on commit; readers get tuples so a
    caller can never mutate state behind the repository's back.
    """

    def __init__(self, store: KeyValueStore, default_profile: CompanyProfile):
        self.store = store
        self.default_profile = default_profile
        self.products: tuple[Product, ...] = ()
        self.sales: tuple[Sale, ...] = ()
        self.expenses: tuple[Expense, ...] = ()
        self.customers: tuple[Customer, ...] = ()
        self.invoices: tuple[Invoice, ...] = ()
        self.company_profile: CompanyProfile = default_profile
        self.theme: str = "light"
        self.invoice_sequence: int = 0

    def load(self) -> None:
        raw = {name: self.store.get(key) for name, key in STORAGE_KEYS.items()}
        state = self.decode(raw)
        if state["company_profile"] is self.default_profile:
            # Default profile is written back so storage matches memory.
            self.store.set_many({STORAGE_KEYS["company_profile"]: _encode("company_profile", self.default_profile)})
        self._apply(state)

    def restore(self, entries: Mapping[str, str]) -> None:
        """Replace the whole store with ``entries``.

        Every collection is decoded before anything is written, and memory is
        swapped only after the store write succeeds.
        """
        state = self.decode({name: entries.get(key) for name, key in STORAGE_KEYS.items()})
        to_write = dict(entries)
        to_write[STORAGE_KEYS["company_profile"]] = _encode("company_profile", state["company_profile"])
        self.store.replace_all(to_write)
        self._apply(state)

    def decode(self, raw: Mapping[str, Optional[str]]) -> dict[str, Any]:
        """Turn raw stored JSON (by collection name) into domain values; assigns nothing."""
        profile_data = self._parse_json("company_profile", raw.get("company_profile"))
        theme = self._parse_json("theme", raw.get("theme"))
        seq = self._parse_json("invoice_sequence", raw.get("invoice_sequence"))
        return {
            "products": self._decode_list("products", raw.get("products"), Product.from_dict),
            "sales": self._decode_list("sales", raw.get("sales"), Sale.from_dict),
            "expenses": self._decode_list("expenses", raw.get("expenses"), Expense.from_dict),
            "customers": self._decode_list("customers", raw.get("customers"), Customer.from_dict),
            "invoices": self._decode_list("invoices", raw.get("invoices"), Invoice.from_dict),
            "company_profile": (
                self._decode("company_profile", profile_data, CompanyProfile.from_dict)
                if profile_data else self.default_profile
            ),
            "theme": theme if theme in THEMES else "light",
            "invoice_sequence": int(seq) if isinstance(seq, int) else 0,
        }

    def _apply(self, state: dict[str, Any]) -> None:
        for name, value in state.items():
            setattr(self, name, value)
        log.info(
            "ledger_loaded products=%s sales=%s expenses=%s customers=%s invoices=%s",
            len(self.products), len(self.sales), len(self.expenses), len(self.customers), len(self.invoices),
        )

    def _parse_json(self, name: str, raw: Optional[str]) -> Any:
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError) as exc:
            raise PersistenceError(f"Stored '{STORAGE_KEYS[name]}' is not valid JSON.") from exc

    def _decode(self, name: str, data: Any, factory: Callable[[dict], Any]) -> Any:
        try:
            return factory(data)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Stored '{STORAGE_KEYS[name]}' has an unexpected shape.") from exc

    def _decode_list(self, name: str, raw: Optional[str], factory: Callable[[dict], Any]) -> tuple:
        data = self._parse_json(name, raw)
        if data is None:
            return ()
        if not isinstance(data, list):
            raise PersistenceError(f"Stored '{STORAGE_KEYS[name]}' must be a list.")
        return tuple(self._decode(name, item, factory) for item in data)

    def commit(self, **changes: Any) -> None:
        """Persist the given collections as one batch, then swap them in memory.

        If the store write fails nothing in memory changes.
        """
        unknown = set(changes) - set(STORAGE_KEYS)
        if unknown:
            raise KeyError(f"Unknown collections: {sorted(unknown)}")

        normalized = {
            name: tuple(value) if isinstance(value, (list, tuple)) else value
            for name, value in changes.items()
        }
        self.store.set_many({STORAGE_KEYS[name]: _encode(name, value) for name, value in normalized.items()})
        for name, value in normalized.items():
            setattr(self, name, value)

    def find_product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    def find_customer(self, customer_id: str) -> Optional[Customer]:
        return next((c for c in self.customers if c.id == customer_id), None)

    def find_invoice(self, invoice_id: str) -> Optional[Invoice]:
        return next((inv for inv in self.invoices if inv.id == invoice_id), None)

    def find_expense(self, expense_id: str) -> Optional[Expense]:
        return next((e for e in self.expenses if e.id == expense_id), None)
