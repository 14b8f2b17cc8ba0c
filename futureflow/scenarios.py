"""Scenario snapshots and multi-scenario execution."""

import copy
from datetime import date

from futureflow.models import AppData, Scenario, generate_id
from futureflow.simulation import ProjectionResult, project_app_data

BASELINE_NAME = "現在の設定"


def create_scenario(data: AppData, name: str) -> Scenario:
    """Snapshot the current settings, family, loans and recurring expenses.

    The snapshot is a deep copy; later edits to the store do not affect it.
    """
    name = name.strip()
    if not name:
        raise ValueError("シナリオ名を入力してください")
    return Scenario(
        id=generate_id(),
        name=name,
        settings=copy.deepcopy(data.settings),
        families=tuple(copy.deepcopy(data.families)),
        loans=tuple(copy.deepcopy(data.loans)),
        recurring=tuple(copy.deepcopy(data.recurring_expenses)),
    )


def save_scenario(data: AppData, name: str) -> Scenario:
    scenario = create_scenario(data, name)
    data.scenarios.append(scenario)
    return scenario


def delete_scenario(data: AppData, scenario_id: str) -> bool:
    return data.delete("scenarios", scenario_id)


def run_scenarios(data: AppData, today: date | None = None) -> dict[str, ProjectionResult]:
    """Project the current settings and every saved scenario.

    Keys: BASELINE_NAME first, then scenario names in saved order
    (duplicate names get a " (2)", " (3)", ... suffix).
    """
    all_results = {BASELINE_NAME: project_app_data(data, today=today)}
    for scenario in data.scenarios:
        key = scenario.name
        n = 2
        while key in all_results:
            key = f"{scenario.name} ({n})"
            n += 1
        all_results[key] = project_app_data(data, scenario=scenario, today=today)
    return all_results
