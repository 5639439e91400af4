"""Display formatting for projection values.

The engine returns full-precision floats; rounding for display happens
only here.
"""

import math


def format_number_with_commas(value: float) -> str:
    """Format with thousands separators and at most two fraction digits.

    Trailing zero fraction digits are dropped: 120000 -> "120,000",
    169186.2 -> "169,186.2", 1234.567 -> "1,234.57".
    """
    if value is None or math.isnan(value):
        value = 0.0
    text = f"{value:,.2f}"
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    if text == '-0':
        text = '0'
    return text


def format_currency(value: float) -> str:
    """Format as dollars, with the sign ahead of the symbol ("-$1,234.5")."""
    if value is not None and value < 0:
        return f"-${format_number_with_commas(-value)}"
    return f"${format_number_with_commas(value)}"


def format_percent(value: float, decimals: int = 1) -> str:
    """Format a percentage value (45.726 -> "45.7%")."""
    if value is None or math.isnan(value):
        value = 0.0
    return f"{value:.{decimals}f}%"


def format_fraction_as_percent(value: float, decimals: int = 3) -> str:
    """Format a 0-1 fraction as a percentage, trimming trailing zeros (0.0685 -> "6.85%")."""
    if value is None or math.isnan(value):
        value = 0.0
    text = f"{value * 100:.{decimals}f}"
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return f"{text}%"
