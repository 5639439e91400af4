import math

from model.CompensationParameters import CompensationParameters
from model.TaxResult import TaxResult


# Simplified federal long-term capital gains tiers
FEDERAL_LOWER_RATE = 0.15
FEDERAL_UPPER_RATE = 0.20
# Gains strictly above this amount are taxed at the upper rate
FEDERAL_UPPER_THRESHOLD = 500000

# Flat state capital gains rate
STATE_CAPITAL_GAINS_RATE = 0.0882


class CapitalGainsDetails:
    """Capital gains tax on a one-time gain realized at an exit event.

    The tier rates, threshold and state rate are fixed constants of the
    model rather than plan inputs. The only plan input read here is
    whether taxes are included at all.
    """

    def __init__(self, include_tax: bool = True):
        self.include_tax = include_tax

    @classmethod
    def from_parameters(cls, params: CompensationParameters) -> 'CapitalGainsDetails':
        return cls(include_tax=params.include_tax)

    def federal_rate(self, gain: float) -> float:
        """Return the federal tier rate that applies to `gain`."""
        return FEDERAL_UPPER_RATE if gain > FEDERAL_UPPER_THRESHOLD else FEDERAL_LOWER_RATE

    def total_rate(self, gain: float) -> float:
        return self.federal_rate(gain) + STATE_CAPITAL_GAINS_RATE

    def tax_burden(self, gain: float) -> TaxResult:
        """Calculate the capital gains tax, net gain and effective rate.

        Args:
            gain: The realized gain.

        Returns:
            TaxResult whose effective rate is the combined rate as a percentage.
        """
        if not self.include_tax:
            return TaxResult(tax=0.0, net=gain, effective_rate=0.0)

        total_rate = self.total_rate(gain)
        tax = gain * total_rate
        return TaxResult(
            tax=0.0 if math.isnan(tax) else tax,
            net=0.0 if math.isnan(gain - tax) else gain - tax,
            effective_rate=total_rate * 100,
        )


def compute_capital_gains_tax(gain: float, params: CompensationParameters) -> TaxResult:
    """Capital gains tax on `gain`, honoring `params.include_tax`."""
    return CapitalGainsDetails.from_parameters(params).tax_burden(gain)
