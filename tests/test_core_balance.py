"""Tests for core balance estimation and surplus indicators."""

from datetime import date

from futureflow.core_balance import (
    estimate_core_balance,
    estimate_core_balance_for,
    estimate_current_surplus,
    event_year,
    round_half_up,
    suggest_investment_monthly,
)
from futureflow.models import (
    AppData,
    FamilyMember,
    FutureEvent,
    Loan,
    MonthlyBalance,
    RecurringExpense,
)
from futureflow.params import IncomePlan

TODAY = date(2025, 1, 15)


def _balances(*pairs):
    return [MonthlyBalance(month=m, total=t) for m, t in pairs]


class TestEstimateCoreBalance:
    def test_two_balances(self):
        balances = _balances(("2025-01", 1000000), ("2025-02", 1100000))
        assert estimate_core_balance(balances, [], [], [], [], TODAY) == 100000

    def test_fewer_than_two(self):
        assert estimate_core_balance([], [], [], [], [], TODAY) is None
        assert estimate_core_balance(_balances(("2025-01", 1)), [], [], [], [], TODAY) is None

    def test_unsorted_input(self):
        balances = _balances(("2025-02", 1100000), ("2025-01", 1000000))
        assert estimate_core_balance(balances, [], [], [], [], TODAY) == 100000

    def test_average_of_pairs(self):
        balances = _balances(("2025-01", 1000000), ("2025-02", 1100000), ("2025-03", 1300000))
        assert estimate_core_balance(balances, [], [], [], [], TODAY) == 150000

    def test_adds_back_recurring(self):
        balances = _balances(("2025-02", 1000000), ("2025-03", 950000))
        recurring = [RecurringExpense("r", "車検", 100000, 1, "2025-03", "vehicle")]
        assert estimate_core_balance(balances, recurring, [], [], [], TODAY) == 50000

    def test_adds_back_loans(self):
        balances = _balances(("2025-01", 1000000), ("2025-02", 980000))
        loans = [Loan("l", "住宅ローン", 80000, "2025-01", "2030-12")]
        assert estimate_core_balance(balances, [], loans, [], [], TODAY) == 60000

    def test_adds_back_events(self):
        """Event year is derived from the member's current age and today."""
        member = FamilyMember("m", "太郎", 40)
        event = FutureEvent("e", "リフォーム", 200000, "m", 40, 3)
        balances = _balances(("2025-02", 1000000), ("2025-03", 900000))
        assert estimate_core_balance(balances, [], [], [event], [member], TODAY) == 100000

    def test_dangling_event_skipped(self):
        event = FutureEvent("e", "リフォーム", 200000, "ghost", 40, 3)
        balances = _balances(("2025-02", 1000000), ("2025-03", 900000))
        assert estimate_core_balance(balances, [], [], [event], [], TODAY) == -100000

    def test_rounds_half_up(self):
        balances = _balances(("2025-01", 0), ("2025-02", 1), ("2025-03", 3))
        assert estimate_core_balance(balances, [], [], [], [], TODAY) == 2

    def test_for_app_data(self):
        data = AppData(monthly_balances=_balances(("2025-01", 1000000), ("2025-02", 1100000)))
        assert estimate_core_balance_for(data, TODAY) == 100000


class TestHelpers:
    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(-2.5) == -2
        assert round_half_up(1.49) == 1

    def test_event_year(self):
        member = FamilyMember("c", "花子", 5)
        event = FutureEvent("e", "入学", 300000, "c", 6, 4)
        assert event_year(event, member, TODAY) == 2026


class TestCurrentSurplus:
    def setup_method(self):
        self.data = AppData(
            families=[FamilyMember("h", "太郎", 40), FamilyMember("w", "花子", 65)],
            loans=[Loan("l", "住宅ローン", 50000, "2024-01", "2040-12")],
        )
        self.data.settings.current_living_cost = 250000
        self.data.settings.family_incomes = {
            "h": IncomePlan(monthly=300000, bonus=600000, retirement_age=60),
            "w": IncomePlan(monthly=200000, retirement_age=60, pension=100000),
            "ghost": IncomePlan(monthly=999999),
        }

    def test_income_and_expense(self):
        income, expense = estimate_current_surplus(self.data, TODAY)
        # 太郎: 300000 + 600000/12, 花子: 退職済みなので年金
        assert income == 450000
        assert expense == 300000

    def test_zero_retirement_age_means_sixty(self):
        self.data.settings.family_incomes = {"w": IncomePlan(monthly=200000, retirement_age=0, pension=100000)}
        self.data.families[1].age = 59
        income, _ = estimate_current_surplus(self.data, TODAY)
        assert income == 200000

    def test_inactive_loan_excluded(self):
        _, expense = estimate_current_surplus(self.data, date(2041, 1, 1))
        assert expense == 250000


class TestSuggestInvestment:
    def setup_method(self):
        self.data = AppData(families=[FamilyMember("h", "太郎", 40)])
        self.data.settings.current_living_cost = 250000

    def test_half_of_surplus(self):
        self.data.settings.family_incomes = {"h": IncomePlan(monthly=350000)}
        suggestion, surplus = suggest_investment_monthly(self.data, TODAY)
        assert surplus == 100000
        assert suggestion == 50000

    def test_floored_to_thousand(self):
        self.data.settings.family_incomes = {"h": IncomePlan(monthly=373456)}
        suggestion, _ = suggest_investment_monthly(self.data, TODAY)
        assert suggestion == 61000

    def test_never_negative(self):
        self.data.settings.family_incomes = {"h": IncomePlan(monthly=100000)}
        suggestion, surplus = suggest_investment_monthly(self.data, TODAY)
        assert surplus < 0
        assert suggestion == 0
