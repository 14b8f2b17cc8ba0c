"""CLI entry point for the dashboard summary and projection report."""

import sys

from futureflow.config import effective_settings, parse_args, resolve_data_path
from futureflow.core_balance import estimate_core_balance_for, estimate_current_surplus
from futureflow.formatting import BREAKDOWN_LABELS, format_compact, format_currency, format_duration
from futureflow.models import AppData
from futureflow.scenarios import BASELINE_NAME, run_scenarios
from futureflow.simulation import ProjectionResult, yearly_rows
from futureflow.storage import load_data
from futureflow.yearmonth import current_ym, diff_months


def _print_header(data: AppData):
    s = data.settings
    print("=" * 80)
    print(f"FutureFlow 資産推移予測（{s.prediction_years}年間）")
    print(
        f"  生活費: {format_currency(s.current_living_cost)}/月 / インフレ率: {s.inflation_rate}%"
        f" / 積立: {format_currency(s.investment_monthly)}/月（利回り{s.investment_yield}%）"
    )
    if data.families:
        parts = [f"{m.name}({m.age}歳)" for m in data.families]
        print(f"  家族: {', '.join(parts)}（子供の自立: {s.child_independence_age}歳）")
    print("=" * 80)


def _print_dashboard(data: AppData, today):
    latest = data.latest_balance()
    print("\n【現在の状況】")
    if latest is not None:
        print(f"  最新総資産: {format_currency(latest.total)}（{latest.month}）")
    else:
        print("  最新総資産: 実績データなし")

    income, expense = estimate_current_surplus(data, today)
    print(
        f"  今月の収支見込み: {format_currency(income - expense)}"
        f"（収入 {format_currency(income)} / 支出 {format_currency(expense)}）"
    )

    core = estimate_core_balance_for(data, today)
    if core is None:
        print("  基礎収支: 予測の精度向上には2ヶ月以上の実績が必要です")
    else:
        print(f"  基礎収支（月平均）: {format_currency(core)}")


def _print_crash(result: ProjectionResult):
    print("\n【破産リスク】")
    if result.crash_month is None:
        print("  予測期間中に破産リスクはありません")
        return
    months = diff_months(result.crash_month, result.months[0])
    print(f"  ⚠ 破産リスクあり: {result.crash_month}（{format_duration(months)}後）に総資産がマイナス")


def _print_breakdown(result: ProjectionResult):
    total = sum(result.breakdown.values())
    print("\n【予測期間の支出内訳】")
    print("-" * 60)
    for key, label in BREAKDOWN_LABELS.items():
        value = result.breakdown.get(key, 0)
        share = value / total * 100 if total > 0 else 0
        print(f"  {label:<16} {format_currency(value):>18} {share:>6.1f}%")
    print("-" * 60)
    print(f"  {'合計':<16} {format_currency(total):>18}")


def _print_accounts(data: AppData):
    latest = data.latest_balance()
    if latest is None or not data.accounts:
        return
    print(f"\n【口座別残高（{latest.month}）】")
    for account in data.accounts:
        amount = latest.accounts.get(account.id, 0)
        print(f"  {account.name:<16} {format_currency(amount):>18}")


def _print_scenarios(results: dict[str, ProjectionResult]):
    print("\n【シナリオ比較（最終総資産）】")
    print("-" * 60)
    for name, result in results.items():
        crash = f" ⚠ {result.crash_month} 破産" if result.crash_month else ""
        print(f"  {name:<20} {format_currency(result.final_net_worth):>18} ({format_compact(result.final_net_worth)}){crash}")
    print("-" * 60)


def _print_yearly(result: ProjectionResult):
    print("\n【年次推移】")
    print("-" * 80)
    print(f"{'年月':<10} {'総資産':>20} {'運用資産':>20} {'現預金等':>20}")
    print("-" * 80)
    for row in yearly_rows(result):
        print(
            f"{row['month']:<10} "
            f"{format_currency(row['net_worth']):>20} "
            f"{format_currency(row['investment']):>20} "
            f"{format_currency(row['cash']):>20}"
        )
    print("-" * 80)


def _add_report_args(parser):
    parser.add_argument("--yearly", action="store_true", help="年次推移テーブルを表示")


def main(argv: list[str] | None = None):
    """Print the dashboard and projection summary for the stored household data."""
    args, config = parse_args("FutureFlow 資産推移予測", _add_report_args, argv)
    data, warnings = load_data(resolve_data_path(args, config))
    for w in warnings:
        print(w, file=sys.stderr)

    try:
        data.settings = effective_settings(args, config, data.settings)
    except ValueError as e:
        print(e, file=sys.stderr)
        raise SystemExit(1)

    today = args.today
    results = run_scenarios(data, today=today)
    baseline = results[BASELINE_NAME]

    _print_header(data)
    _print_dashboard(data, today)
    if not data.monthly_balances:
        print(f"  ※ 実績がないため {current_ym(today)} の総資産0円から予測します")
    _print_crash(baseline)
    print(f"\n  {baseline.months[-1]} 時点の予測総資産: {format_currency(baseline.final_net_worth)}")
    _print_breakdown(baseline)
    _print_accounts(data)
    if len(results) > 1:
        _print_scenarios(results)
    if args.yearly:
        _print_yearly(baseline)


if __name__ == "__main__":
    main()
