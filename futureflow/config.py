"""TOML config loader with CLI > config > stored-settings resolution."""

import argparse
import dataclasses
import sys
import tomllib
from datetime import date
from pathlib import Path
from typing import Callable

from futureflow.params import EDUCATION_MODES, UNIV_HOUSING_TYPES, SimulationSettings, validate_settings
from futureflow.storage import DEFAULT_DATA_PATH

DEFAULT_CONFIG_PATH = Path("config.toml")

# 設定キー → 型。キー名は SimulationSettings の属性名
SETTING_KEYS: dict[str, type] = {
    "prediction_years": int,
    "current_living_cost": int,
    "inflation_rate": float,
    "investment_monthly": int,
    "investment_yield": float,
    "salary_increase_amount": int,
    "education_mode": str,
    "child_independence_age": int,
    "cost_reduction_rate": float,
    "license_return_age": int,
    "univ_housing_type": str,
    "univ_allowance": int,
}

# 旧アプリ（camelCase）のキー名 → 属性名
_CAMEL_KEYS = {
    "predictionYears": "prediction_years",
    "currentLivingCost": "current_living_cost",
    "inflationRate": "inflation_rate",
    "investmentMonthly": "investment_monthly",
    "investmentYield": "investment_yield",
    "salaryIncreaseAmount": "salary_increase_amount",
    "educationMode": "education_mode",
    "childIndependenceAge": "child_independence_age",
    "costReductionRate": "cost_reduction_rate",
    "licenseReturnAge": "license_return_age",
    "univHousingType": "univ_housing_type",
    "univAllowance": "univ_allowance",
}


def load_config(path: Path | None = None) -> dict:
    """Load TOML config file. Returns empty dict if file doesn't exist.

    Accepts top-level keys or a [settings] table, in snake_case or camelCase.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        print(f"設定ファイルの読み込みに失敗: {path}: {e}", file=sys.stderr)
        raise SystemExit(1)
    settings_table = raw.pop("settings", {})
    if isinstance(settings_table, dict):
        raw.update(settings_table)
    else:
        print(f"警告: {path}: settings はテーブルで指定してください（無視します）", file=sys.stderr)
    normalized = {}
    for key, value in raw.items():
        normalized[_CAMEL_KEYS.get(key, key)] = value
    return normalized


def add_setting_args(parser: argparse.ArgumentParser):
    """Add one optional flag per simulation setting (dest = settings attribute)."""
    parser.add_argument("--years", dest="prediction_years", type=int, default=None, help="予測期間（年, 1-50）")
    parser.add_argument("--living-cost", dest="current_living_cost", type=int, default=None, help="現在の生活費（円/月）")
    parser.add_argument("--inflation", dest="inflation_rate", type=float, default=None, help="インフレ率（年%%）")
    parser.add_argument("--invest-monthly", dest="investment_monthly", type=int, default=None, help="毎月の積立額（円）")
    parser.add_argument("--invest-yield", dest="investment_yield", type=float, default=None, help="想定利回り（年%%）")
    parser.add_argument("--salary-increase", dest="salary_increase_amount", type=int, default=None, help="毎年の定期昇給額（月額・円）")
    parser.add_argument("--education-mode", dest="education_mode", choices=EDUCATION_MODES, default=None, help="教育費プラン")
    parser.add_argument("--child-independence-age", dest="child_independence_age", type=int, default=None, help="子供の自立年齢")
    parser.add_argument("--cost-reduction", dest="cost_reduction_rate", type=float, default=None, help="自立後の生活費削減率（%%）")
    parser.add_argument("--license-return-age", dest="license_return_age", type=int, default=None, help="免許返納年齢（車両費停止）")
    parser.add_argument("--univ-housing", dest="univ_housing_type", choices=UNIV_HOUSING_TYPES, default=None, help="大学時の居住形態")
    parser.add_argument("--univ-allowance", dest="univ_allowance", type=int, default=None, help="自宅外通学時の仕送り（月額・円）")


def create_parser(description: str) -> argparse.ArgumentParser:
    """Create argparse parser with shared data/settings flags."""
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--config", type=Path, default=None, help="設定ファイルパス (default: config.toml)")
    parser.add_argument("--data", type=Path, default=None, help=f"家計データJSON (default: {DEFAULT_DATA_PATH})")
    parser.add_argument("--today", type=date.fromisoformat, default=None, help="基準日 YYYY-MM-DD (default: 今日)")
    add_setting_args(parser)
    return parser


def resolve(args: argparse.Namespace, config: dict, settings: SimulationSettings) -> dict:
    """Resolve values with priority: CLI flag > config.toml > stored settings."""
    resolved = {}
    for key, cast in SETTING_KEYS.items():
        cli_val = getattr(args, key, None)
        if cli_val is not None:
            resolved[key] = cli_val
        elif key in config:
            resolved[key] = cast(config[key])
        else:
            resolved[key] = getattr(settings, key)
    return resolved


def apply_overrides(settings: SimulationSettings, resolved: dict) -> SimulationSettings:
    """Return a new settings object; the stored one is left untouched."""
    return dataclasses.replace(settings, **resolved)


def resolve_data_path(args: argparse.Namespace, config: dict) -> Path:
    if args.data is not None:
        return args.data
    if "data" in config:
        return Path(config["data"])
    return DEFAULT_DATA_PATH


def parse_args(
    description: str,
    add_args_fn: Callable[[argparse.ArgumentParser], None] | None = None,
    argv: list[str] | None = None,
) -> tuple[argparse.Namespace, dict]:
    """Parse CLI args and load the config file. Returns (namespace, config)."""
    parser = create_parser(description)
    if add_args_fn:
        add_args_fn(parser)
    args = parser.parse_args(argv)
    config = load_config(args.config)
    return args, config


def effective_settings(
    args: argparse.Namespace, config: dict, settings: SimulationSettings,
) -> SimulationSettings:
    """Apply CLI/config overrides and validate. Raises ValueError on invalid values."""
    result = apply_overrides(settings, resolve(args, config, settings))
    errors = validate_settings(result)
    if errors:
        raise ValueError("\n".join(errors))
    return result
