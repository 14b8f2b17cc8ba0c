"""Baseline cash-generation indicators derived from observed balances and plans."""

import math
from datetime import date

from futureflow.models import (
    AppData,
    FamilyMember,
    Found,
    FutureEvent,
    Loan,
    MonthlyBalance,
    RecurringExpense,
    find_member,
)
from futureflow.params import DEFAULT_RETIREMENT_AGE
from futureflow.recurring import recurring_due
from futureflow.yearmonth import current_ym, split_ym

MIN_BALANCES_FOR_ESTIMATE = 2
SUGGESTED_INVESTMENT_RATIO = 0.5  # 余剰の50%を積立に提案
SUGGESTION_ROUNDING = 1000


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def event_year(event: FutureEvent, member: FamilyMember, today: date) -> int:
    """Calendar year of the event, derived from the member's birth year."""
    return (today.year - member.age) + event.target_age


def _loans_due(ym: str, loans: list[Loan]) -> int:
    return sum(loan.monthly_amount for loan in loans if loan.is_active(ym))


def _events_due(
    ym: str, events: list[FutureEvent], families: list[FamilyMember], today: date,
) -> int:
    year, month = split_ym(ym)
    total = 0
    for event in events:
        lookup = find_member(families, event.family_id)
        if not isinstance(lookup, Found):
            continue
        if event_year(event, lookup.member, today) == year and event.target_month == month:
            total += event.amount
    return total


def estimate_core_balance(
    balances: list[MonthlyBalance],
    recurring: list[RecurringExpense],
    loans: list[Loan],
    events: list[FutureEvent],
    families: list[FamilyMember],
    today: date | None = None,
) -> int | None:
    """Average monthly surplus with tracked drains added back.

    For each consecutive pair: (total_n - total_n-1) + recurring + loans + events
    paid in month n. Returns None with fewer than two balances.
    """
    if len(balances) < MIN_BALANCES_FOR_ESTIMATE:
        return None
    if today is None:
        today = date.today()
    ordered = sorted(balances, key=lambda b: b.month)

    surpluses = []
    for prev, cur in zip(ordered, ordered[1:]):
        actual_change = cur.total - prev.total
        paid_recurring = recurring_due(cur.month, recurring)
        paid_loans = _loans_due(cur.month, loans)
        paid_events = _events_due(cur.month, events, families, today)
        surpluses.append(actual_change + paid_recurring + paid_loans + paid_events)

    return round_half_up(sum(surpluses) / len(surpluses))


def estimate_core_balance_for(data: AppData, today: date | None = None) -> int | None:
    return estimate_core_balance(
        data.sorted_balances(), data.recurring_expenses, data.loans,
        data.future_events, data.families, today,
    )


def estimate_current_surplus(data: AppData, today: date | None = None) -> tuple[float, float]:
    """Estimate this month's (income, expense) from plans, living cost and active loans.

    Members at or past retirement age count their pension; others monthly + bonus/12.
    """
    settings = data.settings
    income = 0.0
    for member_id, plan in settings.family_incomes.items():
        lookup = find_member(data.families, member_id)
        if not isinstance(lookup, Found):
            continue
        if lookup.member.age < (plan.retirement_age or DEFAULT_RETIREMENT_AGE):
            income += plan.monthly + plan.bonus / 12
        else:
            income += plan.pension
    expense = settings.current_living_cost + _loans_due(current_ym(today), data.loans)
    return income, expense


def suggest_investment_monthly(data: AppData, today: date | None = None) -> tuple[int, float]:
    """Suggest a monthly contribution: half the surplus, floored to 1,000円.

    Income counts every plan's monthly + bonus/12 regardless of retirement.
    Returns (suggestion, surplus).
    """
    settings = data.settings
    income = 0.0
    for member_id, plan in settings.family_incomes.items():
        if isinstance(find_member(data.families, member_id), Found):
            income += plan.monthly + plan.bonus / 12
    surplus = income - settings.current_living_cost - _loans_due(current_ym(today), data.loans)
    raw = math.floor(surplus * SUGGESTED_INVESTMENT_RATIO / SUGGESTION_ROUNDING) * SUGGESTION_ROUNDING
    return max(0, raw), surplus
