import json
from pathlib import Path

import pytest

from bizledger.domain.errors import PersistenceError, ValidationError
from bizledger.domain.models import CompanyProfile, ExpenseType
from bizledger.repositories.kv_store import SqliteKeyValueStore
from conftest import reload


def test_state_round_trips_through_store(container, tmp_path: Path):
    p = container.inventory.add_product("Widget", 60, 100, 10, description="Blue")
    container.sales.add_sale("2024-03-05", [{"product_id": p.id, "quantity": 2}])
    container.expenses.add_expense(ExpenseType.DELIVERY, 40, "2024-03-05", "Courier")
    c = container.customers.add_customer("Karim", "0171", "Road 1", "Dhaka", "Dhaka", email="k@example.com")
    container.invoices.add_invoice("2024-03-05", [{"description": "Fix", "quantity": 1, "unit_price": 10}], customer_id=c.id)
    container.company.set_theme("dark")

    again = reload(tmp_path / "ledger.db")

    assert again.inventory.list_products() == container.inventory.list_products()
    assert again.sales.list_sales() == container.sales.list_sales()
    assert again.expenses.list_expenses() == container.expenses.list_expenses()
    assert again.customers.list_customers() == container.customers.list_customers()
    assert again.invoices.list_invoices() == container.invoices.list_invoices()
    assert again.company.get_theme() == "dark"
    assert again.invoices.next_invoice_number() == "INV-0002"


def test_each_collection_has_its_own_camel_case_key(container):
    p = container.inventory.add_product("Widget", 60, 100, 10)
    container.sales.add_sale("2024-03-05", [{"product_id": p.id, "quantity": 1}])

    keys = set(container.store.keys())
    assert {"products", "sales", "companyProfile"} <= keys

    stored = json.loads(container.store.get("products"))
    assert stored[0]["purchasePrice"] == 60
    assert stored[0]["sellingPrice"] == 100
    assert stored[0]["stock"] == 9
    sale = json.loads(container.store.get("sales"))[0]
    assert sale["items"][0]["unitCost"] == 60
    assert sale["totalAmount"] == 100


def test_empty_store_yields_empty_collections_and_default_profile(container):
    assert container.inventory.list_products() == []
    assert container.sales.list_sales() == []
    assert container.invoices.list_invoices() == []
    assert container.company.get_theme() == "light"

    profile = container.company.get_profile()
    assert profile.company_name == "BizLedger"
    assert json.loads(container.store.get("companyProfile"))["companyName"] == "BizLedger"


def test_null_company_profile_falls_back_to_default(tmp_path: Path):
    store = SqliteKeyValueStore(tmp_path / "ledger.db")
    store.init_db()
    store.set("companyProfile", "null")

    assert reload(tmp_path / "ledger.db").company.get_profile().company_name == "BizLedger"


def test_browser_storage_dump_loads_as_is(tmp_path: Path):
    store = SqliteKeyValueStore(tmp_path / "ledger.db")
    store.init_db()
    store.set_many({
        "products": json.dumps([{
            "id": "abc123xyz", "name": "Tea", "description": "", "purchasePrice": 5,
            "sellingPrice": 8, "stock": 4, "createdAt": "2024-01-01T10:00:00.000Z",
        }]),
        "invoices": json.dumps([{
            "id": "i1", "invoiceNumber": "INV-0041", "customerId": "c1",
            "customerSnapshot": {"id": "c1", "name": "A", "district": "D", "city": "C", "address": "X",
                                 "phone": "1", "createdAt": "2024-01-01T10:00:00.000Z"},
            "companyProfileSnapshot": {"companyName": "Co", "address": "", "phone": "", "email": ""},
            "date": "2024-01-01", "items": [], "subtotal": 0, "discountAmount": 0, "taxAmount": 0,
            "grandTotal": 0, "createdAt": "2024-01-01T10:00:00.000Z",
        }]),
    })

    c = reload(tmp_path / "ledger.db")
    assert c.inventory.get_product("abc123xyz").stock == 4
    assert c.invoices.next_invoice_number() == "INV-0042"


def test_corrupt_json_is_reported(tmp_path: Path):
    store = SqliteKeyValueStore(tmp_path / "ledger.db")
    store.init_db()
    store.set("sales", "{not json")

    with pytest.raises(PersistenceError, match="sales"):
        reload(tmp_path / "ledger.db")


def test_wrong_shape_is_reported(tmp_path: Path):
    store = SqliteKeyValueStore(tmp_path / "ledger.db")
    store.init_db()
    store.set("products", json.dumps([{"id": "x"}]))

    with pytest.raises(PersistenceError, match="unexpected shape"):
        reload(tmp_path / "ledger.db")


def test_set_many_is_all_or_nothing(tmp_path: Path):
    store = SqliteKeyValueStore(tmp_path / "kv.db")
    store.init_db()
    store.set("a", "1")

    with pytest.raises(PersistenceError):
        store.set_many({"a": "2", "b": None})

    assert store.get("a") == "1"
    assert store.get("b") is None
    assert store.integrity_check() == "ok"


def test_migrations_are_idempotent(tmp_path: Path):
    store = SqliteKeyValueStore(tmp_path / "kv.db")
    store.init_db()
    store.set("k", "v")
    store.init_db()
    assert store.get("k") == "v"


def test_theme_must_be_known(container):
    with pytest.raises(ValidationError):
        container.company.set_theme("blue")


def test_company_profile_is_replaced_wholesale(container, tmp_path: Path):
    container.company.update_profile(CompanyProfile("Acme", "1 Road", "0171", "a@acme.test", logo="data:image/png;base64,AAA"))
    container.company.update_profile(CompanyProfile("Acme", "1 Road", "0171", "a@acme.test"))

    profile = reload(tmp_path / "ledger.db").company.get_profile()
    assert profile.company_name == "Acme"
    assert profile.logo is None

    with pytest.raises(ValidationError):
        container.company.update_profile(CompanyProfile(" ", "", "", ""))


def test_unit_of_work_discards_staged_changes_on_error(container):
    from bizledger.repositories.unit_of_work import RepositoryUnitOfWork

    with pytest.raises(RuntimeError):
        with RepositoryUnitOfWork(container.repo) as uow:
            uow.stage(theme="dark")
            raise RuntimeError("abort")

    assert container.company.get_theme() == "light"
    assert container.store.get("theme") is None
