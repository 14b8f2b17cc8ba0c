"""CLI entry point for chart generation."""

import sys
from pathlib import Path

from futureflow.charts import plot_breakdown, plot_projection
from futureflow.config import effective_settings, parse_args, resolve_data_path
from futureflow.scenarios import BASELINE_NAME, run_scenarios
from futureflow.storage import load_data


def _add_chart_args(parser):
    parser.add_argument(
        "--output", type=Path, default=Path("reports/charts"),
        help="出力ディレクトリ (default: reports/charts)",
    )
    parser.add_argument(
        "--name", type=str, default="",
        help="出力ファイル名のサフィックス（例: a → projection-a.png）",
    )
    parser.add_argument(
        "--no-scenarios", action="store_true",
        help="保存済みシナリオを重ねて描画しない",
    )


def main(argv: list[str] | None = None):
    args, config = parse_args("FutureFlow チャート生成", _add_chart_args, argv)
    data, warnings = load_data(resolve_data_path(args, config))
    for w in warnings:
        print(w, file=sys.stderr)

    try:
        data.settings = effective_settings(args, config, data.settings)
    except ValueError as e:
        print(e, file=sys.stderr)
        raise SystemExit(1)

    print(f"シミュレーション（{data.settings.prediction_years}年）...", file=sys.stderr)
    results = run_scenarios(data, today=args.today)
    baseline = results.pop(BASELINE_NAME)
    scenario_results = {} if args.no_scenarios else results

    path = plot_projection(
        baseline, data.monthly_balances, args.output,
        name=args.name, scenario_results=scenario_results,
    )
    print(f"  → {path}", file=sys.stderr)

    try:
        path = plot_breakdown(baseline.breakdown, args.output, name=args.name)
        print(f"  → {path}", file=sys.stderr)
    except ValueError as e:
        print(f"  内訳: {e}（スキップ）", file=sys.stderr)

    print("完了", file=sys.stderr)


if __name__ == "__main__":
    main()
