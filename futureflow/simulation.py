"""Core projection engine."""

import copy
from dataclasses import dataclass, field
from datetime import date

from futureflow.core_balance import round_half_up
from futureflow.costs import education_cost, growth_expense, is_university_age
from futureflow.models import (
    AppData,
    FamilyMember,
    Found,
    FutureEvent,
    Loan,
    MonthlyBalance,
    RecurringExpense,
    Scenario,
    find_member,
)
from futureflow.params import DEFAULT_RETIREMENT_AGE, IncomePlan, SimulationSettings
from futureflow.recurring import is_due, is_vehicle_expense
from futureflow.yearmonth import add_month, current_ym, format_date_to_ym, parse_year_month

BREAKDOWN_KEYS = ("living", "education", "loan", "recurring", "investment")


@dataclass
class ProjectionResult:
    """Projected series. Index 0 is the seed (latest observed) month."""

    months: list[str] = field(default_factory=list)
    net_worth: list[float] = field(default_factory=list)
    investment_balance: list[float] = field(default_factory=list)
    breakdown: dict[str, int] = field(default_factory=dict)
    crash_month: str | None = None

    @property
    def final_net_worth(self) -> float:
        return self.net_worth[-1]


def inflation_factor(settings: SimulationSettings, month_index: int) -> float:
    """Step inflation factor: updates once per elapsed simulated year."""
    years_passed = month_index // 12
    return (1 + settings.inflation_rate / 100) ** years_passed


def _calc_member_income(
    plan: IncomePlan,
    sim_age: int,
    calendar_month: int,
    years_passed: int,
    inflation: float,
    salary_increase: float,
) -> float:
    """Monthly income for one member. Returns salary+bonus or pension, plus severance."""
    retirement_age = plan.retirement_age or DEFAULT_RETIREMENT_AGE
    if sim_age >= retirement_age:
        income = plan.pension * inflation
        # 退職年齢に達した年の1月のみ退職金
        if sim_age == retirement_age and calendar_month == 1:
            income += plan.severance * inflation
        return income

    # 定額昇給: 月給に (昇給額 × 経過年数) を加算、ボーナスは月給の伸び率に連動
    adjusted_monthly = plan.monthly + salary_increase * years_passed
    income = adjusted_monthly
    if plan.bonus > 0:
        ratio = adjusted_monthly / plan.monthly if plan.monthly > 0 else 1
        income += plan.bonus * ratio / 12
    return income


def _calc_income(
    settings: SimulationSettings,
    sim_families: list[FamilyMember],
    calendar_month: int,
    years_passed: int,
    inflation: float,
) -> float:
    total = 0.0
    for member_id, plan in settings.family_incomes.items():
        lookup = find_member(sim_families, member_id)
        if not isinstance(lookup, Found):
            continue
        total += _calc_member_income(
            plan, lookup.member.age, calendar_month, years_passed, inflation,
            settings.salary_increase_amount,
        )
    return total


def initial_growth_cost(settings: SimulationSettings, families: list[FamilyMember]) -> int:
    """Growth expense of current dependents (household head excluded) at simulation start."""
    return sum(
        growth_expense(member.age)
        for member in families[1:]
        if member.age <= settings.child_independence_age
    )


def adult_base_living_cost(settings: SimulationSettings, families: list[FamilyMember]) -> float:
    """Living cost without the dependents' growth expense, floored at zero."""
    return max(0, settings.current_living_cost - initial_growth_cost(settings, families))


def _calc_dependent_costs(
    settings: SimulationSettings,
    sim_families: list[FamilyMember],
    inflation: float,
) -> tuple[float, float, int]:
    """Returns (education, living_extra, active_dependents).

    living_extra is inflated growth expense plus the university allowance.
    """
    education = 0.0
    living_extra = 0.0
    active = 0
    for member in sim_families:
        if member.age > settings.child_independence_age:
            continue
        education += education_cost(member.age, settings.education_mode)
        living_extra += growth_expense(member.age) * inflation
        if is_university_age(member.age) and settings.univ_housing_type == "away":
            living_extra += settings.univ_allowance * inflation
        active += 1
    return education, living_extra, active


def _calc_recurring(
    ym: str,
    expenses: list[RecurringExpense],
    head: FamilyMember | None,
    license_return_age: int,
) -> int:
    """Recurring expenses due this month; vehicle expenses stop once the head returns the licence."""
    license_returned = head is not None and head.age >= license_return_age
    total = 0
    for expense in expenses:
        if license_returned and is_vehicle_expense(expense):
            continue
        if is_due(expense, ym):
            total += expense.amount
    return total


def _calc_loans(ym: str, loans: list[Loan]) -> int:
    return sum(loan.monthly_amount for loan in loans if loan.is_active(ym))


def _calc_events(
    calendar_month: int, events: list[FutureEvent], sim_families: list[FamilyMember],
) -> int:
    total = 0
    for event in events:
        lookup = find_member(sim_families, event.family_id)
        if not isinstance(lookup, Found):
            continue
        if lookup.member.age == event.target_age and event.target_month == calendar_month:
            total += event.amount
    return total


def _seed(balances: list[MonthlyBalance], today: date | None) -> tuple[str, float]:
    """Return (seed_month, seed_total): latest observed balance, or now with 0."""
    if balances:
        latest = max(balances, key=lambda b: b.month)
        return latest.month, latest.total
    return current_ym(today), 0


def project(
    settings: SimulationSettings,
    families: list[FamilyMember],
    loans: list[Loan],
    recurring_expenses: list[RecurringExpense],
    *,
    future_events: list[FutureEvent] = (),
    balances: list[MonthlyBalance] = (),
    today: date | None = None,
) -> ProjectionResult:
    """Roll net worth forward month by month from the latest observed balance.

    Pure with respect to its inputs: the family roster is deep-copied and its
    ages advance every simulated January after the first month.
    """
    sim_families = copy.deepcopy(list(families))
    head = sim_families[0] if sim_families else None
    household_size = len(sim_families)

    seed_month, net_worth = _seed(list(balances), today)
    result = ProjectionResult(
        months=[seed_month],
        net_worth=[net_worth],
        investment_balance=[0],
    )

    base_living = adult_base_living_cost(settings, sim_families)
    monthly_rate = settings.investment_yield / 100 / 12
    contribution = settings.investment_monthly

    totals = dict.fromkeys(BREAKDOWN_KEYS, 0.0)
    investment = 0.0
    month_date = add_month(parse_year_month(seed_month))

    for i in range(settings.horizon_months()):
        ym = format_date_to_ym(month_date)
        calendar_month = month_date.month
        years_passed = i // 12
        inflation = inflation_factor(settings, i)

        # 1月に年齢を加算（初月を除く）。以降の判定はすべて加算後の年齢
        if calendar_month == 1 and i > 0:
            for member in sim_families:
                member.age += 1

        income = _calc_income(settings, sim_families, calendar_month, years_passed, inflation)

        living_cost = base_living * inflation
        education, living_extra, active_dependents = _calc_dependent_costs(
            settings, sim_families, inflation,
        )
        if household_size > 1 and active_dependents == 0:
            living_cost -= living_cost * (settings.cost_reduction_rate / 100)

        recurring = _calc_recurring(ym, recurring_expenses, head, settings.license_return_age)
        loan = _calc_loans(ym, loans)
        event = _calc_events(calendar_month, future_events, sim_families)

        # 積立は現金→運用資産の移動なので総資産は運用益分だけ増える
        if i == 0:
            investment += contribution
        else:
            investment = investment * (1 + monthly_rate) + contribution
        profit = (investment - contribution) * monthly_rate

        cash_flow = (
            income
            - living_cost
            - living_extra
            - education
            - recurring
            - loan
            - event
            - contribution
        )
        net_worth += cash_flow + contribution + profit

        result.months.append(ym)
        result.net_worth.append(net_worth)
        result.investment_balance.append(investment)

        if net_worth < 0 and result.crash_month is None:
            result.crash_month = ym

        totals["living"] += living_cost + living_extra
        totals["education"] += education
        totals["loan"] += loan
        totals["recurring"] += recurring
        totals["investment"] += contribution

        month_date = add_month(month_date)

    result.breakdown = {key: round_half_up(value) for key, value in totals.items()}
    return result


def project_app_data(
    data: AppData, scenario: Scenario | None = None, today: date | None = None,
) -> ProjectionResult:
    """Run the engine on the store, or on a saved scenario's plan inputs.

    Balances and future events always come from the store.
    """
    if scenario is None:
        settings = data.settings
        families = data.families
        loans = data.loans
        recurring = data.recurring_expenses
    else:
        settings = scenario.settings
        families = list(scenario.families)
        loans = list(scenario.loans)
        recurring = list(scenario.recurring)
    return project(
        settings, families, loans, recurring,
        future_events=data.future_events,
        balances=data.monthly_balances,
        today=today,
    )


def yearly_rows(result: ProjectionResult) -> list[dict]:
    """One row per projected January (plus the seed month) for tabular reports."""
    rows = []
    for idx, ym in enumerate(result.months):
        if idx == 0 or ym.endswith("-01"):
            rows.append({
                "month": ym,
                "net_worth": result.net_worth[idx],
                "investment": result.investment_balance[idx],
                "cash": result.net_worth[idx] - result.investment_balance[idx],
            })
    return rows
