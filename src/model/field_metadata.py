"""Field metadata for YearRecord and ExitValuation fields.

This module provides descriptions and short names for the projection
fields. Short names are used as column headers in tables and the shell
'get' command.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass
class FieldInfo:
    """Metadata for a single field."""
    short_name: str  # Column header (unique, concise)
    description: str  # Full description of the field


# Field metadata for YearRecord fields
FIELD_METADATA: Dict[str, FieldInfo] = {
    "year": FieldInfo("Year", "Projection year (1-10)"),

    # Income
    "base": FieldInfo("Base", "Annual base salary"),
    "equity": FieldInfo("Equity", "Equity vested during the year"),
    "gross_total": FieldInfo("Gross Total", "Base salary plus vested equity"),

    # Tax
    "tax": FieldInfo("Tax", "Federal, state and city income tax on the gross total"),
    "net_total": FieldInfo("Net Total", "Gross total after income tax"),
    "effective_tax_rate": FieldInfo("Eff Rate", "Effective income tax rate (tax / gross total)"),

    # Running totals
    "cumulative_net_total": FieldInfo("Cumulative Net", "Net total summed from year 1 through this year"),
}


# Field metadata for ExitValuation fields
EXIT_FIELD_METADATA: Dict[str, FieldInfo] = {
    "gross_exit_value": FieldInfo("Gross Exit", "Equity value times the exit multiple"),
    "tax": FieldInfo("Exit Tax", "Federal and state capital gains tax on the exit"),
    "net_exit_value": FieldInfo("Net Exit", "Exit value after capital gains tax"),
    "effective_rate": FieldInfo("Exit Rate", "Combined capital gains rate applied to the exit"),
}


# Fields that hold percentages and must not be summed across years
RATE_FIELDS = ("effective_tax_rate", "effective_rate")


def get_short_name(field_name: str) -> str:
    """Get the short name for a field, or the field name if not found."""
    info = FIELD_METADATA.get(field_name) or EXIT_FIELD_METADATA.get(field_name)
    return info.short_name if info else field_name


def get_description(field_name: str) -> str:
    """Get the description for a field, or empty string if not found."""
    info = FIELD_METADATA.get(field_name) or EXIT_FIELD_METADATA.get(field_name)
    return info.description if info else ""


def get_field_info(field_name: str) -> FieldInfo | None:
    """Get the full FieldInfo for a field, or None if not found."""
    return FIELD_METADATA.get(field_name) or EXIT_FIELD_METADATA.get(field_name)


def wrap_header(text: str, max_width: int) -> list[str]:
    """Wrap a header text into multiple lines to fit within max_width.

    Words are split on spaces and distributed across lines to minimize
    the total number of lines while staying within max_width.

    Args:
        text: The header text to wrap
        max_width: Maximum width per line

    Returns:
        List of strings, each representing a line
    """
    if len(text) <= max_width:
        return [text]

    words = text.split()
    lines = []
    current_line = ""

    for word in words:
        if not current_line:
            current_line = word
        elif len(current_line) + 1 + len(word) <= max_width:
            current_line += " " + word
        else:
            lines.append(current_line)
            current_line = word

    if current_line:
        lines.append(current_line)

    return lines
