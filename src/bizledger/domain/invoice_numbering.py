"""Sequential invoice numbers of the form ``INV-0001``."""
from __future__ import annotations

import re
from typing import Iterable

PREFIX = "INV"
WIDTH = 4

_LEADING_DIGITS = re.compile(r"\s*(\d+)")


def parse_suffix(invoice_number: str) -> int:
    """Numeric part after the last ``-``; anything unparseable counts as 0."""
    suffix = (invoice_number or "").rsplit("-", 1)[-1]
    m = _LEADING_DIGITS.match(suffix)
    return int(m.group(1)) if m else 0


def format_invoice_number(n: int) -> str:
    return f"{PREFIX}-{n:0{WIDTH}d}"


def next_invoice_number(existing: Iterable[str], issued_high_water: int = 0) -> str:
    """Highest suffix among ``existing`` plus one.

    ``issued_high_water`` is the largest number ever handed out. Taking it into
    account means deleting the newest invoice does not free its number for
    reuse, which plain ``max(suffix) + 1`` would do.
    """
    highest = max((parse_suffix(num) for num in existing), default=0)
    return format_invoice_number(max(highest, issued_high_water) + 1)
