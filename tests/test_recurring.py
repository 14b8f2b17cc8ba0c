"""Tests for multi-year recurring expense evaluation."""

from futureflow.models import RecurringExpense
from futureflow.recurring import is_due, is_vehicle_expense, recurring_due


def _expense(start="2025-03", interval=2, amount=100000, name="車検", category="vehicle"):
    return RecurringExpense(
        id="r1", name=name, amount=amount, interval_years=interval,
        start_ym=start, category=category,
    )


class TestIsDue:
    """Fires in start month every interval years, never before start."""

    def setup_method(self):
        self.expense = _expense()

    def test_fires_on_schedule(self):
        for ym in ("2025-03", "2027-03", "2029-03"):
            assert is_due(self.expense, ym), ym

    def test_not_before_start(self):
        assert not is_due(self.expense, "2024-03")
        assert not is_due(self.expense, "2023-03")

    def test_not_off_cycle_year(self):
        assert not is_due(self.expense, "2026-03")
        assert not is_due(self.expense, "2028-03")

    def test_not_other_months(self):
        for month in range(1, 13):
            if month == 3:
                continue
            assert not is_due(self.expense, f"2027-{month:02d}")

    def test_exhaustive_window(self):
        """Across 2024-2029 only the three scheduled months fire."""
        fired = [
            f"{y}-{m:02d}"
            for y in range(2024, 2030)
            for m in range(1, 13)
            if is_due(self.expense, f"{y}-{m:02d}")
        ]
        assert fired == ["2025-03", "2027-03", "2029-03"]

    def test_annual(self):
        e = _expense(start="2020-06", interval=1)
        assert is_due(e, "2020-06")
        assert is_due(e, "2031-06")
        assert not is_due(e, "2031-07")

    def test_zero_interval_never_fires(self):
        assert not is_due(_expense(interval=0), "2025-03")


class TestRecurringDue:
    def test_sums_due_expenses(self):
        expenses = [
            _expense(start="2025-03", interval=1, amount=50000),
            _expense(start="2024-03", interval=2, amount=30000),
            _expense(start="2025-04", interval=1, amount=70000),
        ]
        # 2025-03: 1本目のみ（2本目は2024/2026周期）
        assert recurring_due("2025-03", expenses) == 50000
        assert recurring_due("2026-03", expenses) == 80000
        assert recurring_due("2026-04", expenses) == 70000

    def test_empty(self):
        assert recurring_due("2025-03", []) == 0


class TestIsVehicleExpense:
    def test_vehicle_tag(self):
        assert is_vehicle_expense(_expense(name="メンテナンス", category="vehicle"))

    def test_other_tag_wins_over_name(self):
        assert not is_vehicle_expense(_expense(name="自動車税", category="other"))

    def test_untagged_name_match(self):
        assert is_vehicle_expense(_expense(name="車検", category=None))
        assert is_vehicle_expense(_expense(name="Car inspection", category=None))
        assert is_vehicle_expense(_expense(name="自動車保険", category=None))

    def test_untagged_no_match(self):
        assert not is_vehicle_expense(_expense(name="更新料", category=None))
