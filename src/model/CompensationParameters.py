"""Input parameter set for a compensation projection."""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class CompensationParameters:
    """Snapshot of every input the projection engine reads.

    Rates and the equity percentage are fractions (0.35 for 35%), never
    display percentages. Instances are immutable; use `with_updates` to
    derive a new snapshot after an edit.
    """
    base_salary: float = 120000.0
    equity_percentage: float = 0.10
    vesting_years: int = 4
    company_value: float = 10000000.0
    exit_multiple: float = 2.0
    include_tax: bool = True
    federal_tax_rate: float = 0.35
    state_tax_rate: float = 0.0685
    city_tax_rate: float = 0.03876

    @property
    def combined_income_tax_rate(self) -> float:
        """Sum of the federal, state and city ordinary-income rates."""
        return self.federal_tax_rate + self.state_tax_rate + self.city_tax_rate

    @property
    def equity_value(self) -> float:
        """Current value of the equity grant."""
        return self.company_value * self.equity_percentage

    def with_updates(self, **changes) -> 'CompensationParameters':
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)
