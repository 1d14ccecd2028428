"""
Revenue Leak Calculator: Display Formatting
"""
import math


def format_currency(amount, compact=False):
    """en-US dollars with no decimals, e.g. '$1,234'. Non-finite -> '$0'.
    compact=True shortens millions/thousands ('$1.2M', '$85K').
    """
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return '$0'
    if not math.isfinite(value):
        return '$0'
    sign = '-' if value < 0 and round(value) != 0 else ''
    value = abs(value)
    if compact and value >= 1_000_000:
        return f"{sign}${value / 1_000_000:.1f}M"
    if compact and value >= 1000:
        return f"{sign}${value / 1000:.0f}K"
    return f"{sign}${value:,.0f}"
