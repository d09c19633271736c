from __future__ import annotations

import calendar
from collections import defaultdict
from dataclasses import dataclass
from datetime import date as date_cls
from typing import Optional

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from bizledger.domain.formatting import DEFAULT_CURRENCY_SYMBOL, format_currency, month_abbr, today_iso
from bizledger.domain.models import Expense, ExpenseType, Sale


@dataclass(frozen=True)
class DashboardStats:
    date: str
    sales_total: float
    cogs_total: float
    items_sold: int
    expenses_total: float
    net_profit: float
    product_count: int
    low_stock_count: int


@dataclass(frozen=True)
class DailyReport:
    date: str
    sales_total: float
    cogs_total: float
    expenses_total: float
    net_profit: float
    sales: list[Sale]
    expenses: list[Expense]


@dataclass(frozen=True)
class MonthlyRow:
    month_year: str
    sales: float
    cogs: float
    expenses: float

    @property
    def profit(self) -> float:
        return self.sales - self.cogs - self.expenses


@dataclass(frozen=True)
class MonthlyReport:
    year: int
    rows: list[MonthlyRow]

    @property
    def total_revenue(self) -> float:
        return sum(r.sales for r in self.rows)

    @property
    def total_cogs(self) -> float:
        return sum(r.cogs for r in self.rows)

    @property
    def total_other_expenses(self) -> float:
        return sum(r.expenses for r in self.rows)

    @property
    def gross_profit(self) -> float:
        return self.total_revenue - self.total_cogs

    @property
    def net_profit(self) -> float:
        return self.gross_profit - self.total_other_expenses


@dataclass(frozen=True)
class DailyPoint:
    day: int
    sales: float
    costs: float  # COGS + other expenses

    @property
    def profit(self) -> float:
        return self.sales - self.costs


class ReportingService:
    def __init__(self, repo, low_stock_threshold: int = 5, currency_symbol: str = DEFAULT_CURRENCY_SYMBOL):
        self.repo = repo
        self.low_stock_threshold = low_stock_threshold
        self.currency_symbol = currency_symbol

    def money(self, amount: float) -> str:
        return format_currency(amount, self.currency_symbol)

    def dashboard(self, today: Optional[str] = None) -> DashboardStats:
        day = today or today_iso()
        sales = [s for s in self.repo.sales if s.date == day]
        expenses = [e for e in self.repo.expenses if e.date == day]
        sales_total = sum(s.total_amount for s in sales)
        cogs_total = sum(s.total_cost for s in sales)
        expenses_total = sum(e.amount for e in expenses)
        return DashboardStats(
            date=day,
            sales_total=sales_total,
            cogs_total=cogs_total,
            items_sold=sum(s.quantity_sold for s in sales),
            expenses_total=expenses_total,
            net_profit=sales_total - cogs_total - expenses_total,
            product_count=len(self.repo.products),
            low_stock_count=sum(1 for p in self.repo.products if p.stock < self.low_stock_threshold),
        )

    def daily_report(self, day: str) -> DailyReport:
        sales = [s for s in self.repo.sales if s.date == day]
        expenses = [e for e in self.repo.expenses if e.date == day]
        sales_total = sum(s.total_amount for s in sales)
        cogs_total = sum(s.total_cost for s in sales)
        expenses_total = sum(e.amount for e in expenses)
        return DailyReport(
            date=day,
            sales_total=sales_total,
            cogs_total=cogs_total,
            expenses_total=expenses_total,
            net_profit=sales_total - cogs_total - expenses_total,
            sales=sales,
            expenses=expenses,
        )

    def monthly_report(self, year: int) -> MonthlyReport:
        prefix = f"{int(year):04d}-"
        totals: dict[int, list[float]] = defaultdict(lambda: [0.0, 0.0, 0.0])
        for s in self.repo.sales:
            if s.date.startswith(prefix):
                month = int(s.date[5:7])
                totals[month][0] += s.total_amount
                totals[month][1] += s.total_cost
        for e in self.repo.expenses:
            if e.date.startswith(prefix):
                totals[int(e.date[5:7])][2] += e.amount

        rows = [
            MonthlyRow(month_year=f"{month_abbr(m)} {int(year)}", sales=v[0], cogs=v[1], expenses=v[2])
            for m, v in sorted(totals.items())
        ]
        return MonthlyReport(year=int(year), rows=rows)

    def daily_series(self, year: int, month: int) -> list[DailyPoint]:
        points = []
        for day in range(1, calendar.monthrange(year, month)[1] + 1):
            iso = date_cls(year, month, day).isoformat()
            sales = [s for s in self.repo.sales if s.date == iso]
            other = sum(e.amount for e in self.repo.expenses if e.date == iso)
            point = DailyPoint(
                day=day,
                sales=sum(s.total_amount for s in sales),
                costs=sum(s.total_cost for s in sales) + other,
            )
            if point.sales > 0 or point.costs > 0:
                points.append(point)
        return points

    def expense_breakdown(self, year: int, day: Optional[str] = None) -> list[tuple[ExpenseType, float]]:
        if day:
            expenses = [e for e in self.repo.expenses if e.date == day]
        else:
            expenses = [e for e in self.repo.expenses if e.date.startswith(f"{int(year):04d}-")]
        totals = {t: 0.0 for t in ExpenseType}
        for e in expenses:
            totals[e.type] += e.amount
        return [(t, v) for t, v in totals.items() if v > 0]

    def available_years(self, today: Optional[str] = None) -> list[int]:
        years = {int(s.date[:4]) for s in self.repo.sales}
        years.update(int(e.date[:4]) for e in self.repo.expenses)
        years.add(int((today or today_iso())[:4]))
        return sorted(years, reverse=True)

    def export_report_excel(self, path: str, year: int) -> None:
        wb = Workbook()

        def money(cell):
            cell.number_format = "#,##0.00"

        def bold_row(ws, r):
            for c in ws[r]:
                c.font = Font(bold=True)

        def set_widths(ws, widths: dict[str, int]):
            for col, w in widths.items():
                ws.column_dimensions[col].width = w

        def add_table(ws, name: str, start_row: int, end_row: int, end_col: int):
            ref = f"A{start_row}:{get_column_letter(end_col)}{end_row}"
            tab = Table(displayName=name, ref=ref)
            tab.tableStyleInfo = TableStyleInfo(
                name="TableStyleMedium9",
                showRowStripes=True,
                showColumnStripes=False,
            )
            ws.add_table(tab)

        report = self.monthly_report(year)
        prefix = f"{int(year):04d}-"
        sales_rows = sorted((s for s in self.repo.sales if s.date.startswith(prefix)), key=lambda s: (s.date, s.created_at))
        expense_rows = sorted((e for e in self.repo.expenses if e.date.startswith(prefix)), key=lambda e: e.date)

        # -------- 1) Summary --------
        ws = wb.active
        ws.title = "Summary"
        ws["A1"] = f"Summary {int(year)}"
        ws["A1"].font = Font(bold=True, size=14)

        rows = [
            ("Sales count", len(sales_rows), "int"),
            ("Total Revenue", report.total_revenue, "money"),
            ("Total COGS", report.total_cogs, "money"),
            ("Gross Profit", report.gross_profit, "money"),
            ("Total Other Expenses", report.total_other_expenses, "money"),
            ("Net Profit", report.net_profit, "money"),
        ]
        for i, (label, val, kind) in enumerate(rows):
            r = 3 + i
            ws[f"A{r}"] = label
            ws[f"B{r}"] = val
            if kind == "money":
                money(ws[f"B{r}"])
        set_widths(ws, {"A": 26, "B": 18})

        # -------- 2) Monthly --------
        ws2 = wb.create_sheet("Monthly")
        ws2.append(["Month-Year", "Sales", "COGS", "Other Expenses", "Net Profit"])
        bold_row(ws2, 1)
        for r in report.rows:
            ws2.append([r.month_year, r.sales, r.cogs, r.expenses, r.profit])
            for col in "BCDE":
                money(ws2[f"{col}{ws2.max_row}"])
        set_widths(ws2, {"A": 14, "B": 16, "C": 16, "D": 16, "E": 16})
        if ws2.max_row >= 2:
            add_table(ws2, "MonthlySummary", 1, ws2.max_row, 5)

        # -------- 3) Sales Detail --------
        ws3 = wb.create_sheet("Sales Detail")
        ws3.append(["Sale ID", "Date", "Product", "Qty", "Unit Price", "Unit Cost", "Line Total", "Line Profit"])
        bold_row(ws3, 1)
        for s in sales_rows:
            for it in s.items:
                ws3.append([
                    s.id, s.date, it.product_name, it.quantity,
                    it.unit_price, it.unit_cost, it.line_total, it.line_total - it.line_cost,
                ])
                for col in "EFGH":
                    money(ws3[f"{col}{ws3.max_row}"])
        ws3.freeze_panes = "A2"
        set_widths(ws3, {"A": 34, "B": 12, "C": 30, "D": 6, "E": 14, "F": 14, "G": 14, "H": 14})
        if ws3.max_row >= 2:
            add_table(ws3, "SalesDetail", 1, ws3.max_row, 8)

        # -------- 4) Expenses --------
        ws4 = wb.create_sheet("Expenses")
        ws4.append(["Date", "Type", "Description", "Amount"])
        bold_row(ws4, 1)
        for e in expense_rows:
            ws4.append([e.date, e.type.value, e.description, e.amount])
            money(ws4[f"D{ws4.max_row}"])
        ws4.freeze_panes = "A2"
        set_widths(ws4, {"A": 12, "B": 14, "C": 34, "D": 14})
        if ws4.max_row >= 2:
            add_table(ws4, "ExpensesDetail", 1, ws4.max_row, 4)

        wb.save(path)
