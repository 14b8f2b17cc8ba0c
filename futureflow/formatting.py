"""Display formatting for yen amounts."""

import math

MAN = 10_000
OKU = 100_000_000


def format_currency(value: float | None) -> str:
    """Format as ￥1,234,567 (rounded to 円). None/NaN → "N/A"."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "N/A"
    rounded = round(value)
    sign = "-" if rounded < 0 else ""
    return f"{sign}￥{abs(rounded):,}"


def format_compact(value: float) -> str:
    """Abbreviate large magnitudes: 1.2億 / 350万; small values as currency."""
    if abs(value) >= OKU:
        return f"{value / OKU:.1f}億"
    if abs(value) >= MAN:
        return f"{value / MAN:.0f}万"
    return format_currency(value)


def format_duration(months: int) -> str:
    years, rest = divmod(months, 12)
    return f"{years}年 {rest}ヶ月"


BREAKDOWN_LABELS = {
    "living": "基本生活費",
    "education": "教育費",
    "loan": "住宅・ローン",
    "recurring": "その他定期支出",
    "investment": "資産運用(積立)",
}
