"""Household Net-Worth Projection Package."""

from futureflow.params import (
    IncomePlan,
    SimulationSettings,
    validate_settings,
    MAX_PREDICTION_MONTHS,
    DEFAULT_RETIREMENT_AGE,
    EDUCATION_MODES,
    UNIV_HOUSING_TYPES,
)
from futureflow.models import (
    Account,
    AppData,
    FamilyMember,
    FutureEvent,
    Loan,
    MonthlyBalance,
    RecurringExpense,
    Scenario,
    Found,
    Missing,
    find_member,
    parse_account_amounts,
)
from futureflow.yearmonth import (
    parse_year_month,
    format_date_to_ym,
    add_month,
    diff_months,
)
from futureflow.recurring import is_due, recurring_due
from futureflow.costs import education_cost, growth_expense
from futureflow.core_balance import (
    estimate_core_balance,
    estimate_current_surplus,
    suggest_investment_monthly,
)
from futureflow.simulation import ProjectionResult, project, project_app_data
from futureflow.scenarios import create_scenario, run_scenarios
from futureflow.storage import (
    ImportValidationError,
    load_data,
    save_data,
    export_data,
    import_data,
)

__all__ = [
    "IncomePlan",
    "SimulationSettings",
    "validate_settings",
    "MAX_PREDICTION_MONTHS",
    "DEFAULT_RETIREMENT_AGE",
    "EDUCATION_MODES",
    "UNIV_HOUSING_TYPES",
    "Account",
    "AppData",
    "FamilyMember",
    "FutureEvent",
    "Loan",
    "MonthlyBalance",
    "RecurringExpense",
    "Scenario",
    "Found",
    "Missing",
    "find_member",
    "parse_account_amounts",
    "parse_year_month",
    "format_date_to_ym",
    "add_month",
    "diff_months",
    "is_due",
    "recurring_due",
    "education_cost",
    "growth_expense",
    "estimate_core_balance",
    "estimate_current_surplus",
    "suggest_investment_monthly",
    "ProjectionResult",
    "project",
    "project_app_data",
    "create_scenario",
    "run_scenarios",
    "ImportValidationError",
    "load_data",
    "save_data",
    "export_data",
    "import_data",
]
