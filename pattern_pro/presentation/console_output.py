"""Console output: pretty-prints pattern reports to the terminal."""

from typing import Dict, Optional

from ..domain.entities import (
    DetectedPattern,
    FlagPattern,
    LevelPattern,
    NecklinePattern,
    PatternReport,
    PennantPattern,
)
from ..domain.enums import PatternDirection
from .formatters import format_confidence, format_percent, format_price


# ============================================================================
# ANSI color helpers
# ============================================================================
class _C:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    GREEN = "\033[92m"
    RED = "\033[91m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    PURPLE = "\033[95m"
    WHITE = "\033[97m"
    DIM = "\033[2m"


_DIRECTION_COLORS = {
    PatternDirection.BULLISH: _C.GREEN,
    PatternDirection.BEARISH: _C.RED,
    PatternDirection.NEUTRAL: _C.PURPLE,
}


def _colored(text: str, color: str) -> str:
    return f"{color}{text}{_C.RESET}"


def _arrow(direction: PatternDirection) -> str:
    if direction == PatternDirection.BULLISH:
        return "▲ BULL"
    if direction == PatternDirection.BEARISH:
        return "▼ BEAR"
    return "● NEUT"


def pattern_details(pattern: DetectedPattern) -> str:
    """One-line summary of a pattern's price levels, if it has any."""
    if isinstance(pattern, LevelPattern):
        text = (
            f"breakout {format_price(pattern.breakout_level)}"
            f"  target {format_price(pattern.target)}"
        )
        if isinstance(pattern, NecklinePattern):
            text += f"  neckline {format_price(pattern.neckline)}"
        return text
    if isinstance(pattern, FlagPattern):
        return f"pole {format_percent(pattern.pole_move)}  retrace {format_percent(pattern.retracement)}"
    if isinstance(pattern, PennantPattern):
        return f"pole {format_percent(pattern.pole_move)}  apex {pattern.apex} bars"
    return ""


# ============================================================================
# Main output
# ============================================================================
def print_header(title: str = "PATTERN DETECTION PRO") -> None:
    """Print the report banner."""
    border = _colored("=" * 62, _C.CYAN)
    print(border)
    print(_colored(f"  {title}", _C.CYAN + _C.BOLD))
    print(border)
    print()


def print_summary_table(report: PatternReport, settings: Dict[str, str]) -> None:
    """
    Print the summary panel.

    Parameters
    ----------
    report   : pattern report
    settings : dict with keys like 'symbol', 'timeframe', 'candles'
    """
    print(_colored("┌─────────────────────────────────────────────┐", _C.CYAN))
    print(_colored("│  PATTERN SUMMARY                            │", _C.CYAN + _C.BOLD))
    print(_colored("├─────────────────────────────────────────────┤", _C.CYAN))

    _print_row("Symbol", settings.get("symbol", "N/A"), _C.WHITE)
    _print_row("Timeframe", settings.get("timeframe", "N/A"), _C.WHITE)
    _print_row("Candles", str(settings.get("candles", "N/A")), _C.WHITE)

    if report.strongest:
        color = _DIRECTION_COLORS.get(report.strongest.direction, _C.WHITE)
        _print_row("Strongest", report.strongest.name, color)
    else:
        _print_row("Strongest", "None", _C.DIM)

    _print_row("Confidence", format_confidence(report.confidence), _C.YELLOW)
    _print_row("Confluence", "YES" if report.confluence else "no",
               _C.GREEN if report.confluence else _C.DIM)
    _print_row("Bias", report.bias.value.upper(), _DIRECTION_COLORS[report.bias])

    print(_colored("└─────────────────────────────────────────────┘", _C.CYAN))
    print()


def _print_row(label: str, value: str, value_color: str = _C.WHITE) -> None:
    lbl = f"  {label}:".ljust(18)
    print(
        _colored("│", _C.CYAN)
        + _colored(lbl, _C.WHITE)
        + _colored(value.ljust(27), value_color)
        + _colored("│", _C.CYAN)
    )


def print_patterns(report: PatternReport) -> None:
    """Print the ranked pattern table."""
    if not report.patterns:
        print(_colored("  No patterns detected.", _C.DIM))
        print()
        return

    print(_colored("─── Detected Patterns ──────────────────────────", _C.BOLD))
    print(f"  {'Pattern':<28}  {'Direction':>10}  {'Conf':>5}  {'Type':<13}  Levels")
    print(f"  {'---':<28}  {'---':>10}  {'---':>5}  {'---':<13}  ---")
    for p in report.patterns:
        color = _DIRECTION_COLORS.get(p.direction, _C.WHITE)
        print(
            f"  {p.name:<28}  "
            f"{_colored(_arrow(p.direction), color):>21}  "
            f"{p.confidence:>5}  "
            f"{p.type.value:<13}  "
            f"{pattern_details(p)}"
        )
    print()


def print_full_report(report: PatternReport, settings: Dict[str, str]) -> None:
    """Print the complete pattern report."""
    print_header()
    print_summary_table(report, settings)
    print_patterns(report)

    print(_colored("─── Summary ───────────────────────────────────", _C.BOLD))
    print(f"  Total patterns: {report.total_patterns}")
    print(f"    Bullish: {_colored(str(report.bullish_count), _C.GREEN)}")
    print(f"    Bearish: {_colored(str(report.bearish_count), _C.RED)}")
    print()


def print_scan_table(reports: Dict[str, PatternReport], timeframe: Optional[str] = None) -> None:
    """Print one line per symbol for a multi-symbol scan."""
    title = f"─── Scan Results {timeframe or ''} "
    print(_colored(title.ljust(48, "─"), _C.BOLD))
    print(f"  {'Symbol':<14}  {'Strongest':<28}  {'Conf':>5}  {'Bias':>8}  {'Count':>5}")
    print(f"  {'---':<14}  {'---':<28}  {'---':>5}  {'---':>8}  {'---':>5}")
    for symbol, report in reports.items():
        strongest = report.strongest.name if report.strongest else "-"
        color = _DIRECTION_COLORS[report.bias]
        print(
            f"  {symbol:<14}  {strongest:<28}  {report.confidence:>5}  "
            f"{_colored(report.bias.value.rjust(8), color)}  {report.total_patterns:>5}"
        )
    print()
