"""Renderer classes for displaying compensation projections.

This module contains renderer classes that handle the presentation logic
for the projection output. Each renderer takes the ProjectionData
structure and extracts the fields it needs.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from model.ProjectionData import ProjectionData
from model.field_metadata import get_short_name, wrap_header
from render.formatting import (
    format_currency,
    format_fraction_as_percent,
    format_number_with_commas,
    format_percent,
)


def format_multiline_headers(columns: List[tuple], year_width: int = 6) -> tuple[List[str], str]:
    """Format column headers with multi-line wrapping support.

    Args:
        columns: List of (header_text, width) tuples for each column
        year_width: Width of the Year column (default 6)

    Returns:
        Tuple of (list of header lines, separator line)
    """
    wrapped_headers = []
    for header, width in columns:
        lines = wrap_header(header, width)
        wrapped_headers.append((lines, width))

    max_lines = max(len(lines) for lines, _ in wrapped_headers) if wrapped_headers else 1

    # Pad at top so every header ends on the last line
    for lines, width in wrapped_headers:
        while len(lines) < max_lines:
            lines.insert(0, "")

    header_lines = []
    for line_idx in range(max_lines):
        if line_idx == max_lines - 1:
            header_line = f"  {'Year':<{year_width}}"
        else:
            header_line = f"  {'':<{year_width}}"

        for lines, width in wrapped_headers:
            header_line += f" {lines[line_idx]:>{width}}"
        header_lines.append(header_line)

    sep_line = f"  {'-' * year_width}"
    for _, width in wrapped_headers:
        sep_line += f" {'-' * width}"

    return header_lines, sep_line


def parse_year_range(year_range: str, data: ProjectionData) -> tuple:
    """Parse a year range string into start and end years.

    Args:
        year_range: String in format 'startYear-endYear', 'startYear-', or '-endYear'
        data: ProjectionData to get default years from

    Returns:
        Tuple of (start_year, end_year)
    """
    if '-' not in year_range:
        year = int(year_range)
        return (year, year)

    parts = year_range.split('-')
    start_year = int(parts[0]) if parts[0] else data.first_year
    end_year = int(parts[1]) if parts[1] else data.last_year
    return (start_year, end_year)


class BaseRenderer(ABC):
    """Abstract base class for all renderers."""

    @abstractmethod
    def render(self, data: ProjectionData) -> None:
        """Render the data to output.

        Args:
            data: The ProjectionData containing the schedule and exit valuation
        """
        pass


class YearlyCompensationRenderer(BaseRenderer):
    """Renderer for the year-by-year compensation table."""

    def __init__(self, start_year: int = None, end_year: int = None):
        """Initialize with optional year range.

        Args:
            start_year: First year to display (defaults to year 1)
            end_year: Last year to display (defaults to the last projection year)
        """
        self.start_year = start_year
        self.end_year = end_year

    def render(self, data: ProjectionData) -> None:
        print()
        print("=" * 128)
        print(f"{'YEARLY COMPENSATION':^128}")
        print("=" * 128)
        print()

        columns = [
            (get_short_name("base"), 14),
            (get_short_name("equity"), 14),
            (get_short_name("gross_total"), 14),
            (get_short_name("tax"), 15),
            (get_short_name("net_total"), 14),
            (get_short_name("cumulative_net_total"), 16),
            (get_short_name("effective_tax_rate"), 9),
        ]
        header_lines, sep_line = format_multiline_headers(columns, year_width=8)
        for line in header_lines:
            print(line)
        print(sep_line)

        start = self.start_year if self.start_year is not None else data.first_year
        end = self.end_year if self.end_year is not None else data.last_year

        for record in data.yearly_schedule:
            if record.year < start or record.year > end:
                continue
            print(
                f"  {'Year ' + str(record.year):<8}"
                f" {format_currency(record.base):>14}"
                f" {format_currency(record.equity):>14}"
                f" {format_currency(record.gross_total):>14}"
                f" {format_currency(-record.tax):>15}"
                f" {format_currency(record.net_total):>14}"
                f" {format_currency(record.cumulative_net_total):>16}"
                f" {format_percent(record.effective_tax_rate):>9}"
            )
        print()


class ExitValueRenderer(BaseRenderer):
    """Renderer for the exit valuation (capital gains)."""

    def render(self, data: ProjectionData) -> None:
        exit_value = data.exit_valuation
        params = data.parameters

        print()
        print("=" * 60)
        print(f"{'EXIT VALUE (CAPITAL GAINS)':^60}")
        print("=" * 60)
        print(f"  {'Equity Value:':<40} {format_currency(data.equity_value):>17}")
        print(f"  {'Exit Multiple:':<40} {format_number_with_commas(params.exit_multiple) + 'x':>17}")
        print(f"  {'-' * 40}")
        print(f"  {'Gross:':<40} {format_currency(exit_value.gross_exit_value):>17}")
        tax_label = f"Tax ({format_percent(exit_value.effective_rate)}):"
        print(f"  {tax_label:<40} {format_currency(-exit_value.tax):>17}")
        print(f"  {'-' * 40}")
        print(f"  {'Net:':<40} {format_currency(exit_value.net_exit_value):>17}")
        print()


class YearDetailsRenderer(BaseRenderer):
    """Renderer for the income and tax breakdown of a single year."""

    def __init__(self, year: int):
        """Initialize with the projection year to display.

        Args:
            year: Projection year (1-10)
        """
        self.year = year

    def render(self, data: ProjectionData) -> None:
        record = data.get_year(self.year)
        if not record:
            print(f"No data available for year {self.year}")
            return

        params = data.parameters

        print()
        print("=" * 60)
        print(f"{'COMPENSATION FOR YEAR ' + str(self.year):^60}")
        print("=" * 60)

        print()
        print("-" * 60)
        print("INCOME BREAKDOWN")
        print("-" * 60)
        print(f"  {'Base Salary:':<40} {format_currency(record.base):>17}")
        print(f"  {'Vested Equity:':<40} {format_currency(record.equity):>17}")
        print(f"  {'-' * 40}")
        print(f"  {'Gross Total:':<40} {format_currency(record.gross_total):>17}")

        print()
        print("-" * 60)
        print("INCOME TAX")
        print("-" * 60)
        if params.include_tax:
            brackets = (
                ('Federal', params.federal_tax_rate),
                ('State', params.state_tax_rate),
                ('City', params.city_tax_rate),
            )
            for label, rate in brackets:
                bracket_label = f"{label} ({format_fraction_as_percent(rate)}):"
                print(f"  {bracket_label:<40} {format_currency(record.gross_total * rate):>17}")
            print(f"  {'-' * 40}")
        else:
            print("  Taxes excluded from this projection")
        print(f"  {'Total Tax:':<40} {format_currency(record.tax):>17}")
        print(f"  {'Effective Rate:':<40} {format_percent(record.effective_tax_rate):>17}")

        print()
        print("=" * 60)
        print(f"  {'Net Total:':<40} {format_currency(record.net_total):>17}")
        print(f"  {'Cumulative Net:':<40} {format_currency(record.cumulative_net_total):>17}")
        print("=" * 60)
        print()


class SummaryRenderer(BaseRenderer):
    """Renderer for the parameters, horizon totals and exit valuation."""

    def render(self, data: ProjectionData) -> None:
        params = data.parameters

        print()
        print("=" * 60)
        print(f"{'COMPENSATION SUMMARY':^60}")
        print("=" * 60)

        print()
        print("-" * 60)
        print("PARAMETERS")
        print("-" * 60)
        print(f"  {'Base Salary:':<40} {format_currency(params.base_salary):>17}")
        print(f"  {'Equity Percentage:':<40} {format_fraction_as_percent(params.equity_percentage):>17}")
        print(f"  {'Vesting Years:':<40} {params.vesting_years:>17}")
        print(f"  {'Company Value:':<40} {format_currency(params.company_value):>17}")
        print(f"  {'Exit Multiple:':<40} {format_number_with_commas(params.exit_multiple) + 'x':>17}")
        print(f"  {'Include Tax:':<40} {'Yes' if params.include_tax else 'No':>17}")
        if params.include_tax:
            print(f"  {'Federal Tax Rate:':<40} {format_fraction_as_percent(params.federal_tax_rate):>17}")
            print(f"  {'State Tax Rate:':<40} {format_fraction_as_percent(params.state_tax_rate):>17}")
            print(f"  {'City Tax Rate:':<40} {format_fraction_as_percent(params.city_tax_rate):>17}")

        print()
        print("-" * 60)
        print(f"{data.last_year}-YEAR TOTALS")
        print("-" * 60)
        print(f"  {'Equity Value:':<40} {format_currency(data.equity_value):>17}")
        print(f"  {'Yearly Equity:':<40} {format_currency(data.yearly_equity):>17}")
        print(f"  {'Total Gross:':<40} {format_currency(data.total_gross):>17}")
        print(f"  {'Total Tax:':<40} {format_currency(data.total_tax):>17}")
        print(f"  {'Total Net:':<40} {format_currency(data.total_net):>17}")

        ExitValueRenderer().render(data)


# Registry of render modes; YearDetails is constructed with a single year
RENDERER_REGISTRY = {
    'YearlyCompensation': YearlyCompensationRenderer,
    'ExitValue': ExitValueRenderer,
    'YearDetails': YearDetailsRenderer,
    'Summary': SummaryRenderer,
}

# Modes that accept a year range
RANGE_MODES = ('YearlyCompensation',)


def create_renderer(mode: str, start_year: Optional[int] = None, end_year: Optional[int] = None) -> BaseRenderer:
    """Create the renderer registered for `mode`.

    Args:
        mode: Name of a registered render mode
        start_year: First year for range modes, or the year for YearDetails
        end_year: Last year for range modes

    Raises:
        KeyError: if the mode is not registered
        ValueError: if YearDetails is requested without a year
    """
    renderer_class = RENDERER_REGISTRY[mode]
    if mode == 'YearDetails':
        if start_year is None:
            raise ValueError("YearDetails requires a year")
        return renderer_class(start_year)
    if mode in RANGE_MODES:
        return renderer_class(start_year, end_year)
    return renderer_class()
