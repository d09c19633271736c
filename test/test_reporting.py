from pathlib import Path

from openpyxl import load_workbook

from bizledger.domain.models import ExpenseType


def _seed(container):
    p = container.inventory.add_product("Widget", purchase_price=60, selling_price=100, stock=50)
    q = container.inventory.add_product("Gizmo", purchase_price=5, selling_price=20, stock=3)
    container.sales.add_sale("2024-03-05", [{"product_id": p.id, "quantity": 2}, {"product_id": q.id, "quantity": 1}])
    container.sales.add_sale("2024-03-20", [{"product_id": p.id, "quantity": 1}])
    container.sales.add_sale("2024-01-15", [{"product_id": p.id, "quantity": 1}])
    container.expenses.add_expense(ExpenseType.SALARY, 30, "2024-03-05")
    container.expenses.add_expense(ExpenseType.DELIVERY, 10, "2024-02-02")
    container.expenses.add_expense(ExpenseType.DELIVERY, 5, "2023-12-31")
    return p, q


def test_dashboard_for_a_day(container):
    _seed(container)
    stats = container.reporting.dashboard("2024-03-05")

    assert stats.sales_total == 220
    assert stats.cogs_total == 125
    assert stats.items_sold == 3
    assert stats.expenses_total == 30
    assert stats.net_profit == 65
    assert stats.product_count == 2
    assert stats.low_stock_count == 1


def test_daily_report_lists_records(container):
    _seed(container)
    report = container.reporting.daily_report("2024-03-05")

    assert len(report.sales) == 1
    assert len(report.expenses) == 1
    assert report.net_profit == 220 - 125 - 30


def test_monthly_report_orders_months_and_skips_empty_ones(container):
    _seed(container)
    report = container.reporting.monthly_report(2024)

    assert [r.month_year for r in report.rows] == ["Jan 2024", "Feb 2024", "Mar 2024"]
    march = report.rows[-1]
    assert (march.sales, march.cogs, march.expenses) == (320, 185, 30)
    assert march.profit == 105
    assert report.total_revenue == 420
    assert report.gross_profit == 420 - 245
    assert report.net_profit == 420 - 245 - 40


def test_daily_series_and_expense_breakdown(container):
    _seed(container)

    points = container.reporting.daily_series(2024, 3)
    assert [(pt.day, pt.sales, pt.costs) for pt in points] == [(5, 220, 155), (20, 100, 60)]
    assert points[0].profit == 65

    assert container.reporting.expense_breakdown(2024) == [(ExpenseType.SALARY, 30), (ExpenseType.DELIVERY, 10)]
    assert container.reporting.expense_breakdown(2024, day="2024-02-02") == [(ExpenseType.DELIVERY, 10)]


def test_available_years_include_current(container):
    _seed(container)
    assert container.reporting.available_years(today="2026-10-18") == [2026, 2024, 2023]


def test_money_uses_configured_symbol(container):
    assert container.reporting.money(12.5) == "৳ 12.50"


def test_excel_export_contains_summary_and_details(container, tmp_path: Path):
    _seed(container)
    path = tmp_path / "report.xlsx"

    container.reporting.export_report_excel(str(path), 2024)

    wb = load_workbook(path)
    assert wb.sheetnames == ["Summary", "Monthly", "Sales Detail", "Expenses"]
    summary = {row[0]: row[1] for row in wb["Summary"].iter_rows(min_row=3, values_only=True)}
    assert summary["Sales count"] == 3
    assert summary["Net Profit"] == 135
    assert wb["Sales Detail"].max_row == 1 + 4
    assert wb["Expenses"].max_row == 1 + 2


def test_excel_export_with_no_data(container, tmp_path: Path):
    path = tmp_path / "empty.xlsx"
    container.reporting.export_report_excel(str(path), 2030)

    wb = load_workbook(path)
    assert wb["Monthly"].max_row == 1
