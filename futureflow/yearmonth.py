"""Year-month ("YYYY-MM") helpers."""

from datetime import date


def parse_year_month(ym: str) -> date:
    """Parse "YYYY-MM" into the first day of that month.

    No range check: a malformed string raises ValueError from int()/date().
    """
    year, month = (int(part) for part in ym.split("-"))
    return date(year, month, 1)


def format_date_to_ym(d: date) -> str:
    return f"{d.year}-{d.month:02d}"


def add_month(d: date) -> date:
    """Return the first day of the following calendar month."""
    if d.month == 12:
        return date(d.year + 1, 1, 1)
    return date(d.year, d.month + 1, 1)


def diff_months(later_ym: str, earlier_ym: str) -> int:
    """Signed month count later - earlier."""
    later = parse_year_month(later_ym)
    earlier = parse_year_month(earlier_ym)
    return (later.year - earlier.year) * 12 + (later.month - earlier.month)


def split_ym(ym: str) -> tuple[int, int]:
    """"2025-03" → (2025, 3)."""
    d = parse_year_month(ym)
    return d.year, d.month


def current_ym(today: date | None = None) -> str:
    if today is None:
        today = date.today()
    return format_date_to_ym(today)
