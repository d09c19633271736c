import pytest

from bizledger.domain.errors import NotFoundError, ValidationError
from bizledger.domain.models import ExpenseType


def test_products_are_sorted_by_name_case_insensitively(container):
    for name in ("banana", "Apple", "cherry"):
        container.inventory.add_product(name, 1, 2, 3)

    assert [p.name for p in container.inventory.list_products()] == ["Apple", "banana", "cherry"]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"name": " ", "purchase_price": 1, "selling_price": 2, "stock": 1},
        {"name": "X", "purchase_price": -1, "selling_price": 2, "stock": 1},
        {"name": "X", "purchase_price": 1, "selling_price": "abc", "stock": 1},
        {"name": "X", "purchase_price": 1, "selling_price": 2, "stock": -3},
        {"name": "X", "purchase_price": 1, "selling_price": 2, "stock": 2.5},
    ],
)
def test_product_fields_are_validated(container, kwargs):
    with pytest.raises(ValidationError):
        container.inventory.add_product(**kwargs)
    assert container.inventory.list_products() == []


def test_product_update_keeps_identity_and_creation_time(container):
    p = container.inventory.add_product("Widget", 1, 2, 3)
    updated = container.inventory.update_product(p.id, "Gadget", 2, 4, 8, description="New")

    assert updated.id == p.id
    assert updated.created_at == p.created_at
    assert container.inventory.get_product(p.id).stock == 8

    with pytest.raises(NotFoundError):
        container.inventory.update_product("missing", "Gadget", 2, 4, 8)


def test_low_stock_products_use_threshold(container):
    container.inventory.add_product("Low", 1, 2, 4)
    container.inventory.add_product("Fine", 1, 2, 5)

    assert [p.name for p in container.inventory.low_stock_products(5)] == ["Low"]


def test_expenses_sorted_by_date_descending(container):
    container.expenses.add_expense("Salary", 100, "2024-01-10")
    container.expenses.add_expense(ExpenseType.ADVERTISING, 50, "2024-02-01", "Flyers")
    container.expenses.add_expense("Other", 5, "2023-12-31")

    assert [e.date for e in container.expenses.list_expenses()] == ["2024-02-01", "2024-01-10", "2023-12-31"]


@pytest.mark.parametrize(
    "type_, amount, date",
    [("Bribes", 10, "2024-01-01"), ("Salary", 0, "2024-01-01"), ("Salary", 10, "2024-13-01")],
)
def test_expense_fields_are_validated(container, type_, amount, date):
    with pytest.raises(ValidationError):
        container.expenses.add_expense(type_, amount, date)


def test_expense_update_and_delete(container):
    e = container.expenses.add_expense("Delivery", 10, "2024-01-01")
    container.expenses.update_expense(e.id, "Other", 12.5, "2024-01-02", "Parcel")

    stored = container.expenses.get_expense(e.id)
    assert stored.type is ExpenseType.OTHER
    assert stored.amount == 12.5
    assert container.expenses.expenses_on("2024-01-02") == [stored]

    container.expenses.delete_expense(e.id)
    assert container.expenses.list_expenses() == []
    with pytest.raises(NotFoundError):
        container.expenses.delete_expense(e.id)


def test_customer_required_fields_and_optional_email(container):
    c = container.customers.add_customer(" Zed ", "0171", "Road", "Dhaka", "Dhaka", email="  ")
    assert c.name == "Zed"
    assert c.email is None

    for missing in ("name", "phone", "address", "city", "district"):
        fields = {"name": "A", "phone": "1", "address": "R", "city": "C", "district": "D", missing: ""}
        with pytest.raises(ValidationError):
            container.customers.add_customer(**fields)

    with pytest.raises(ValidationError, match="Email"):
        container.customers.add_customer("A", "1", "R", "C", "D", email="not-an-email")


def test_customers_sorted_and_deletable(container):
    b = container.customers.add_customer("bella", "1", "R", "C", "D")
    a = container.customers.add_customer("Adam", "1", "R", "C", "D")
    assert [c.id for c in container.customers.list_customers()] == [a.id, b.id]

    container.customers.delete_customer(a.id)
    assert [c.id for c in container.customers.list_customers()] == [b.id]
    with pytest.raises(NotFoundError):
        container.customers.get_customer(a.id)
