import math

from model.CompensationParameters import CompensationParameters
from model.TaxResult import TaxResult


def _numeric_or_zero(value: float) -> float:
    """Collapse NaN to 0 so a non-numeric value never leaves a tax calculation."""
    return 0.0 if math.isnan(value) else value


class IncomeTaxDetails:
    """Flat ordinary-income tax made of federal, state and city rates.

    Constructed with the rates from a parameter snapshot. Calculation
    methods accept the variable income amount.
    """

    def __init__(self, federal_rate: float, state_rate: float, city_rate: float, include_tax: bool = True):
        """Initialize with the three bracket rates.

        Args:
            federal_rate: Federal rate as a fraction (e.g., 0.35).
            state_rate: State rate as a fraction.
            city_rate: City rate as a fraction.
            include_tax: When False every income is untaxed.
        """
        self.federal_rate = federal_rate
        self.state_rate = state_rate
        self.city_rate = city_rate
        self.include_tax = include_tax

    @classmethod
    def from_parameters(cls, params: CompensationParameters) -> 'IncomeTaxDetails':
        return cls(params.federal_tax_rate, params.state_tax_rate, params.city_tax_rate,
                   include_tax=params.include_tax)

    @property
    def combined_rate(self) -> float:
        return self.federal_rate + self.state_rate + self.city_rate

    def tax_burden(self, income: float) -> TaxResult:
        """Calculate the tax, net income and effective rate for an income.

        Negative income is taxed arithmetically (yielding a negative tax).
        The effective rate is a percentage and is 0 when income is not positive.
        """
        if not self.include_tax:
            return TaxResult(tax=0.0, net=income, effective_rate=0.0)

        federal_tax = income * self.federal_rate
        state_tax = income * self.state_rate
        city_tax = income * self.city_rate
        total_tax = federal_tax + state_tax + city_tax

        effective_rate = (total_tax / income) * 100 if income > 0 else 0.0
        return TaxResult(
            tax=_numeric_or_zero(total_tax),
            net=_numeric_or_zero(income - total_tax),
            effective_rate=_numeric_or_zero(effective_rate),
        )


def compute_income_tax(income: float, params: CompensationParameters) -> TaxResult:
    """Ordinary-income tax on `income` using the rates in `params`."""
    return IncomeTaxDetails.from_parameters(params).tax_burden(income)
