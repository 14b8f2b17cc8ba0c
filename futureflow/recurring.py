"""Multi-year recurring expense evaluation."""

from futureflow.models import RecurringExpense
from futureflow.yearmonth import split_ym

# 旧データ（カテゴリ未設定）の車両費判定に使う名称キーワード
VEHICLE_NAME_KEYWORDS = ("車", "Car", "保険")


def is_due(expense: RecurringExpense, target_ym: str) -> bool:
    """True if the expense fires in target_ym.

    Fires only in the calendar month of start_ym, every interval_years years,
    never before start_ym.
    """
    if target_ym < expense.start_ym:
        return False
    if expense.interval_years <= 0:
        return False
    target_year, target_month = split_ym(target_ym)
    start_year, start_month = split_ym(expense.start_ym)
    if target_month != start_month:
        return False
    return (target_year - start_year) % expense.interval_years == 0


def recurring_due(target_ym: str, expenses: list[RecurringExpense]) -> int:
    """Sum of recurring expenses due in target_ym."""
    return sum(e.amount for e in expenses if is_due(e, target_ym))


def is_vehicle_expense(expense: RecurringExpense) -> bool:
    """Vehicle classification: the category tag wins; untagged records match by name."""
    if expense.category is not None:
        return expense.category == "vehicle"
    return any(keyword in expense.name for keyword in VEHICLE_NAME_KEYWORDS)
