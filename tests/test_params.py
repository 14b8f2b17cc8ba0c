"""Tests for SimulationSettings, IncomePlan and settings validation."""

import pytest
from futureflow.params import (
    DEFAULT_RETIREMENT_AGE,
    MAX_PREDICTION_MONTHS,
    IncomePlan,
    SimulationSettings,
    validate_settings,
)


class TestHorizonMonths:
    def test_years_to_months(self):
        assert SimulationSettings(prediction_years=30).horizon_months() == 360

    def test_capped(self):
        assert SimulationSettings(prediction_years=500).horizon_months() == MAX_PREDICTION_MONTHS


class TestIncomePlanDict:
    def test_missing_retirement_age_defaults(self):
        """Older documents without retirementAge (or 0) fall back to 60."""
        assert IncomePlan.from_dict({"monthly": 300000}).retirement_age == DEFAULT_RETIREMENT_AGE
        assert IncomePlan.from_dict({"retirementAge": 0}).retirement_age == DEFAULT_RETIREMENT_AGE

    def test_camel_case_keys(self):
        plan = IncomePlan.from_dict({
            "monthly": 300000, "bonus": 1000000, "retirementAge": 65,
            "severance": 20000000, "pension": 150000,
        })
        assert plan == IncomePlan(300000, 1000000, 65, 20000000, 150000)
        assert plan.to_dict()["retirementAge"] == 65


class TestSettingsDict:
    def test_absent_keys_keep_defaults(self):
        s = SimulationSettings.from_dict({"predictionYears": 20})
        defaults = SimulationSettings()
        assert s.prediction_years == 20
        assert s.current_living_cost == defaults.current_living_cost
        assert s.investment_yield == defaults.investment_yield
        assert s.family_incomes == {}

    def test_null_keeps_default(self):
        s = SimulationSettings.from_dict({"inflationRate": None, "predictionYears": None})
        assert s.inflation_rate == SimulationSettings().inflation_rate
        assert s.prediction_years == SimulationSettings().prediction_years

    def test_non_object_rejected(self):
        with pytest.raises(ValueError):
            SimulationSettings.from_dict("oops")
        with pytest.raises(ValueError):
            IncomePlan.from_dict(None)

    def test_family_incomes_decoded(self):
        s = SimulationSettings.from_dict({"familyIncomes": {"h": {"monthly": 1}}})
        assert s.family_incomes["h"] == IncomePlan(monthly=1)

    def test_to_dict_keys(self):
        raw = SimulationSettings().to_dict()
        assert raw["childIndependenceAge"] == 22
        assert raw["univHousingType"] == "home"
        assert SimulationSettings.from_dict(raw) == SimulationSettings()


class TestValidateSettings:
    def test_defaults_valid(self):
        assert validate_settings(SimulationSettings()) == []

    def test_prediction_years_range(self):
        assert len(validate_settings(SimulationSettings(prediction_years=0))) == 1
        assert len(validate_settings(SimulationSettings(prediction_years=51))) == 1
        assert validate_settings(SimulationSettings(prediction_years=50)) == []

    def test_unknown_modes(self):
        errors = validate_settings(SimulationSettings(education_mode="abroad", univ_housing_type="dorm"))
        assert len(errors) == 2
        assert "abroad" in errors[0]
