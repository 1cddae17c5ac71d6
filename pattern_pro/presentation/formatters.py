"""Price and report formatters."""

from typing import Optional


def format_price(price: Optional[float], decimals: int = 2) -> str:
    """
    Format a price with comma-separated thousands.
    e.g. 12345.678 => "12,345.68"
    """
    if price is None or price != price:  # NaN check
        return "N/A"

    return f"{price:,.{decimals}f}"


def format_percent(value: float, decimals: int = 2) -> str:
    """Format a fraction as a percentage string, e.g. 0.125 => "12.50%"."""
    return f"{value * 100:.{decimals}f}%"


def format_confidence(confidence: int) -> str:
    """Format a 0–100 confidence score."""
    return f"{confidence}/100"
