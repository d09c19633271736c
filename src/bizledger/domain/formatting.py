from __future__ import annotations

from datetime import date, datetime, timezone

from bizledger.domain.errors import ValidationError

DEFAULT_CURRENCY_SYMBOL = "৳"

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_currency(amount: float, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    return f"{symbol} {float(amount):.2f}"


def today_iso() -> str:
    return date.today().isoformat()


def now_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_business_date(value: str, field: str = "Date") -> date:
    raw = (value or "").strip()
    try:
        if len(raw) != 10:
            raise ValueError(raw)
        return date.fromisoformat(raw)
    except ValueError as e:
        raise ValidationError(f"{field} must be YYYY-MM-DD. Received: {value!r}") from e


def format_date(value: str) -> str:
    """``2024-03-05`` -> ``05 Mar 2024``; full timestamps use their date part."""
    if not value:
        return ""
    try:
        d = date.fromisoformat(value[:10])
    except ValueError:
        return value
    return f"{d.day:02d} {_MONTHS[d.month - 1]} {d.year}"


def month_year(value: str) -> str:
    if not value:
        return "Unknown Date"
    try:
        d = date.fromisoformat(value[:10])
    except ValueError:
        return value
    return f"{_MONTHS[d.month - 1]} {d.year}"


def month_abbr(month: int) -> str:
    return _MONTHS[month - 1]
