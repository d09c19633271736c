from __future__ import annotations

import logging
from typing import Iterable

from bizledger.domain.errors import NotFoundError, ValidationError
from bizledger.domain.formatting import parse_business_date
from bizledger.domain.models import Expense, ExpenseType, NotificationKind, new_id
from bizledger.domain.validation import positive
from bizledger.services.notification_service import reports_failures

log = logging.getLogger(__name__)


def sort_expenses(expenses: Iterable[Expense]) -> list[Expense]:
    return sorted(expenses, key=lambda e: e.date, reverse=True)


def _expense_type(value) -> ExpenseType:
    try:
        return ExpenseType(value)
    except ValueError as e:
        allowed = ", ".join(t.value for t in ExpenseType)
        raise ValidationError(f"Expense type must be one of: {allowed}.") from e


class ExpenseService:
    def __init__(self, repo, notifier):
        self.repo = repo
        self.notifier = notifier

    def list_expenses(self) -> list[Expense]:
        return list(self.repo.expenses)

    def expenses_on(self, date: str) -> list[Expense]:
        return [e for e in self.repo.expenses if e.date == date]

    def get_expense(self, expense_id: str) -> Expense:
        e = self.repo.find_expense(expense_id)
        if not e:
            raise NotFoundError("Expense not found.")
        return e

    def _build(self, expense_id: str, type, description, amount, date) -> Expense:
        return Expense(
            id=expense_id,
            type=_expense_type(type),
            description=(description or "").strip(),
            amount=positive(amount, "Amount"),
            date=parse_business_date(date, "Expense date").isoformat(),
        )

    @reports_failures
    def add_expense(self, type: ExpenseType | str, amount: float, date: str, description: str = "") -> Expense:
        expense = self._build(new_id(), type, description, amount, date)
        self.repo.commit(expenses=sort_expenses([expense, *self.repo.expenses]))
        log.info("expense_added id=%s type=%s amount=%.2f", expense.id, expense.type.value, expense.amount)
        self.notifier.show("Expense added successfully.", NotificationKind.SUCCESS)
        return expense

    @reports_failures
    def update_expense(
        self, expense_id: str, type: ExpenseType | str, amount: float, date: str, description: str = ""
    ) -> Expense:
        self.get_expense(expense_id)
        updated = self._build(expense_id, type, description, amount, date)
        self.repo.commit(expenses=sort_expenses(updated if e.id == expense_id else e for e in self.repo.expenses))
        log.info("expense_updated id=%s", expense_id)
        self.notifier.show("Expense updated successfully.", NotificationKind.SUCCESS)
        return updated

    @reports_failures
    def delete_expense(self, expense_id: str) -> None:
        self.get_expense(expense_id)
        self.repo.commit(expenses=[e for e in self.repo.expenses if e.id != expense_id])
        log.info("expense_deleted id=%s", expense_id)
        self.notifier.show("Expense deleted.", NotificationKind.DELETE)
