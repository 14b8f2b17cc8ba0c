"""Chart generation for net-worth projections."""

import platform
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as ticker

from futureflow.formatting import BREAKDOWN_LABELS, format_compact
from futureflow.models import MonthlyBalance
from futureflow.simulation import ProjectionResult
from futureflow.yearmonth import parse_year_month

COLOR_HISTORY = "#2c3e50"
COLOR_PROJECTION = "#1f77b4"
COLOR_INVESTMENT = "#2ca02c"
COLOR_CRASH = "#d62728"

SCENARIO_COLORS = ["#ff7f0e", "#9467bd", "#8c564b", "#e377c2", "#17becf", "#bcbd22"]

BREAKDOWN_COLORS = {
    "living": "#66c2a5",
    "education": "#fc8d62",
    "loan": "#8da0cb",
    "recurring": "#e78ac3",
    "investment": "#a6d854",
}


def _setup_japanese_font():
    """Configure matplotlib to use a Japanese font."""
    system = platform.system()
    if system == "Darwin":
        font_family = "Hiragino Sans"
    elif system == "Linux":
        font_family = "Noto Sans CJK JP"
    else:
        font_family = "sans-serif"
    plt.rcParams["font.family"] = font_family
    plt.rcParams["axes.unicode_minus"] = False


def _yen_tick(x: float, _pos=None) -> str:
    if abs(x) >= 100_000_000:
        return f"{x / 100_000_000:.1f}億"
    if x == 0:
        return "0"
    return f"{x / 10_000:,.0f}万"


def _format_yen_axis(ax: plt.Axes):
    ax.yaxis.set_major_formatter(ticker.FuncFormatter(_yen_tick))


def _save(fig, output_path: Path, stem: str, name: str) -> Path:
    output_path.mkdir(parents=True, exist_ok=True)
    suffix = f"-{name}" if name else ""
    filepath = output_path / f"{stem}{suffix}.png"
    fig.tight_layout()
    fig.savefig(filepath, dpi=150)
    plt.close(fig)
    return filepath


def plot_projection(
    result: ProjectionResult,
    history: list[MonthlyBalance],
    output_path: Path,
    name: str = "",
    scenario_results: dict[str, ProjectionResult] | None = None,
) -> Path:
    """Line chart of observed history, projected net worth and investment balance.

    Args:
        result: projection of the current settings.
        history: observed monthly balances (drawn as a solid dark line).
        output_path: directory to save the PNG.
        name: optional suffix for the output filename (e.g. "a" → "projection-a.png").
        scenario_results: extra projections drawn as dashed lines.

    Returns:
        Path to the generated PNG file.
    """
    _setup_japanese_font()

    fig, ax = plt.subplots(figsize=(14, 8))

    if history:
        ordered = sorted(history, key=lambda b: b.month)
        ax.plot(
            [parse_year_month(b.month) for b in ordered],
            [b.total for b in ordered],
            label="実績", color=COLOR_HISTORY, linewidth=2.5, marker="o", markersize=3,
        )

    dates = [parse_year_month(m) for m in result.months]
    ax.plot(dates, result.net_worth, label="予測総資産", color=COLOR_PROJECTION, linewidth=2)
    ax.plot(
        dates, result.investment_balance,
        label="運用資産（積立分）", color=COLOR_INVESTMENT, linewidth=1.5, alpha=0.8,
    )

    for idx, (sname, sresult) in enumerate((scenario_results or {}).items()):
        ax.plot(
            [parse_year_month(m) for m in sresult.months], sresult.net_worth,
            label=f"シナリオ: {sname}",
            color=SCENARIO_COLORS[idx % len(SCENARIO_COLORS)],
            linewidth=1.5, linestyle="--",
        )

    # 破産以降のマイナス区間を赤で強調
    if result.crash_month is not None:
        start = result.months.index(result.crash_month)
        ax.plot(dates[start:], result.net_worth[start:], color=COLOR_CRASH, linewidth=2.5)
        crash_date = dates[start]
        ax.axvline(crash_date, color=COLOR_CRASH, linewidth=1.5, linestyle=":")
        ax.annotate(
            f"{result.crash_month} 破産",
            xy=(crash_date, result.net_worth[start]),
            fontsize=11, fontweight="bold", color=COLOR_CRASH,
            ha="right", va="bottom",
            bbox=dict(boxstyle="round,pad=0.3", fc="white", ec=COLOR_CRASH, alpha=0.9),
        )

    ax.axhline(0, color="black", linewidth=1.0)
    ax.set_xlabel("年月")
    ax.set_ylabel("資産（円）")
    ax.set_title("資産推移予測")
    ax.legend(loc="upper left")
    ax.grid(True, alpha=0.3)
    _format_yen_axis(ax)

    return _save(fig, output_path, "projection", name)


def plot_breakdown(breakdown: dict[str, int], output_path: Path, name: str = "") -> Path:
    """Doughnut chart of cumulative outflows by category over the projection."""
    _setup_japanese_font()

    keys = [k for k in BREAKDOWN_LABELS if breakdown.get(k, 0) > 0]
    total = sum(breakdown.get(k, 0) for k in keys)
    if total <= 0:
        raise ValueError("内訳の合計が0のためチャートを生成できません")

    labels = [BREAKDOWN_LABELS[k] for k in keys]
    colors = [BREAKDOWN_COLORS[k] for k in keys]
    values = [breakdown[k] for k in keys]

    fig, ax = plt.subplots(figsize=(9, 9))
    ax.pie(
        values, labels=labels, colors=colors,
        autopct="%1.1f%%", startangle=90, counterclock=False,
        wedgeprops=dict(width=0.4, edgecolor="white"),
    )
    ax.text(0, 0, f"総支出\n{format_compact(total)}", ha="center", va="center", fontsize=14)
    ax.set_title("予測期間の支出内訳")
    ax.axis("equal")

    return _save(fig, output_path, "breakdown", name)
