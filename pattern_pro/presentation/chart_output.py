"""Chart output: candlesticks, swing points and the strongest pattern's levels."""

from typing import List, Optional, Sequence, Tuple

from ..application.services.geometry_service import GeometryService
from ..domain.entities import LevelPattern, NecklinePattern, PatternReport
from ..domain.enums import PatternDirection
from ..domain.value_objects import Candle

# ── Chart Theme ──────────────────────────────────────────────
PATTERN_CHART_STYLE = {
    "figure_size": (16, 9),
    "background": "#131722",
    "text": "#D1D4DC",
    "up": "#26A69A",
    "down": "#EF5350",
    "neutral": "#B39DDB",
    "wick_width": 0.7,
    "body_width": 0.65,
    "swing_high": "#FFB74D",
    "swing_low": "#4FC3F7",
    "swing_size": 18,
    "breakout": "#FFD54F",
    "target": "#64B5F6",
    "neckline": "#F06292",
    "level_width": 1.1,
    "volume_alpha": 0.45,
    "grid": "#2A2E39",
    "font_size": 8,
    "title_size": 13,
}

_DIRECTION_STYLE = {
    PatternDirection.BULLISH: ("up", "▲"),
    PatternDirection.BEARISH: ("down", "▼"),
    PatternDirection.NEUTRAL: ("neutral", "●"),
}


def pattern_levels(report: PatternReport) -> List[Tuple[str, float, str]]:
    """(label, price, style key) for each price level of the strongest pattern."""
    strongest = report.strongest
    if not isinstance(strongest, LevelPattern):
        return []
    levels = [
        ("Breakout", strongest.breakout_level, "breakout"),
        ("Target", strongest.target, "target"),
    ]
    if isinstance(strongest, NecklinePattern):
        levels.append(("Neckline", strongest.neckline, "neckline"))
    return levels


def pattern_legend(report: PatternReport) -> str:
    lines = []
    for p in report.patterns:
        marker = _DIRECTION_STYLE[p.direction][1]
        lines.append(f"{marker} {p.name:<28} {p.confidence:>3}")
    return "\n".join(lines)


def plot_chart(
    candles: Sequence[Candle],
    report: PatternReport,
    title: str = "Pattern Detection Pro",
    save_path: Optional[str] = None,
    show: bool = True,
) -> None:
    """
    Price panel with candles, swing highs/lows and the strongest pattern's
    breakout/target/neckline, over a volume panel. Closed after saving
    unless ``show`` is set.
    """
    import matplotlib.pyplot as plt

    style = PATTERN_CHART_STYLE
    fig, (price_ax, volume_ax) = plt.subplots(
        2, 1, sharex=True, figsize=style["figure_size"],
        gridspec_kw={"height_ratios": [4, 1]},
    )
    fig.patch.set_facecolor(style["background"])

    # ── Candles and volume ───────────────────────────────────────
    for i, c in enumerate(candles):
        color = style["up"] if c.close >= c.open else style["down"]
        price_ax.vlines(i, c.low, c.high, colors=color, linewidth=style["wick_width"])
        price_ax.bar(i, max(c.body, 1e-9), bottom=min(c.open, c.close),
                     width=style["body_width"], color=color)
        volume_ax.bar(i, c.volume, width=style["body_width"], color=color,
                      alpha=style["volume_alpha"])

    # ── Swing points ─────────────────────────────────────────────
    for points, key, marker in (
        (GeometryService.find_peaks(candles), "swing_high", "v"),
        (GeometryService.find_troughs(candles), "swing_low", "^"),
    ):
        if points:
            price_ax.scatter([p.index for p in points], [p.price for p in points],
                             marker=marker, s=style["swing_size"], color=style[key], zorder=3)

    # ── Pattern levels ───────────────────────────────────────────
    levels = pattern_levels(report)
    for label, price, key in levels:
        price_ax.axhline(price, color=style[key], linewidth=style["level_width"],
                         linestyle="--", label=f"{label} {price:,.2f}")

    legend_text = pattern_legend(report)
    if legend_text:
        color_key = _DIRECTION_STYLE[report.bias][0]
        price_ax.text(0.99, 0.98, legend_text, transform=price_ax.transAxes,
                      ha="right", va="top", family="monospace",
                      fontsize=style["font_size"], color=style[color_key])

    # ── Axes ─────────────────────────────────────────────────────
    price_ax.set_title(f"{title}  |  confidence {report.confidence}",
                       color=style["text"], fontsize=style["title_size"])
    for ax in (price_ax, volume_ax):
        ax.set_facecolor(style["background"])
        ax.tick_params(colors=style["text"])
        ax.grid(True, color=style["grid"], linewidth=0.4)
        for spine in ax.spines.values():
            spine.set_color(style["grid"])
    volume_ax.set_ylabel("Volume", color=style["text"])
    if levels:
        price_ax.legend(loc="upper left", fontsize=style["font_size"],
                        facecolor=style["background"], labelcolor=style["text"])

    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, facecolor=fig.get_facecolor())
        print(f"Chart saved to: {save_path}")

    if show:
        plt.show()
    else:
        plt.close(fig)
