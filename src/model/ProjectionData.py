"""Data model for compensation projection results.

This module contains the data classes produced by a single projection
run: one record per year of the fixed horizon plus the exit valuation.
Renderers, the shell and the MCP tools all read from this structure.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from model.CompensationParameters import CompensationParameters


# Number of years covered by every projection
PROJECTION_YEARS = 10


@dataclass
class YearRecord:
    """Compensation and tax for a single projection year."""
    year: int

    # Income
    base: float = 0.0
    equity: float = 0.0
    gross_total: float = 0.0

    # Ordinary-income tax
    tax: float = 0.0
    net_total: float = 0.0
    effective_tax_rate: float = 0.0  # Percent, e.g. 45.726

    # Running sum of net_total through this year
    cumulative_net_total: float = 0.0


@dataclass
class ExitValuation:
    """Capital-gains valuation of the equity grant at a liquidity event."""
    gross_exit_value: float = 0.0
    tax: float = 0.0
    net_exit_value: float = 0.0
    effective_rate: float = 0.0  # Percent, e.g. 28.82


@dataclass
class ProjectionData:
    """Complete result of one projection.

    Holds the parameter snapshot the projection was built from, the
    yearly schedule for the whole horizon and the exit valuation.
    """
    parameters: CompensationParameters
    equity_value: float = 0.0
    yearly_equity: float = 0.0
    yearly_schedule: List[YearRecord] = field(default_factory=list)
    exit_valuation: ExitValuation = field(default_factory=ExitValuation)

    @property
    def first_year(self) -> int:
        return self.yearly_schedule[0].year if self.yearly_schedule else 1

    @property
    def last_year(self) -> int:
        return self.yearly_schedule[-1].year if self.yearly_schedule else PROJECTION_YEARS

    @property
    def total_gross(self) -> float:
        return sum(record.gross_total for record in self.yearly_schedule)

    @property
    def total_tax(self) -> float:
        return sum(record.tax for record in self.yearly_schedule)

    @property
    def total_net(self) -> float:
        """Net pay over the horizon (the final cumulative net total)."""
        if not self.yearly_schedule:
            return 0.0
        return self.yearly_schedule[-1].cumulative_net_total

    def get_year(self, year: int) -> Optional[YearRecord]:
        """Get the record for a specific projection year."""
        for record in self.yearly_schedule:
            if record.year == year:
                return record
        return None

    def vesting_years(self) -> List[YearRecord]:
        """Get records for years in which equity vests."""
        return [r for r in self.yearly_schedule if r.equity != 0]

    def post_vesting_years(self) -> List[YearRecord]:
        """Get records for years with salary only."""
        return [r for r in self.yearly_schedule if r.equity == 0]
