from typing import Dict

from model.ProjectionData import PROJECTION_YEARS


class EquityVestingCalculator:
    """Calculator for straight-line vesting of an equity grant.

    Computes the value vesting in each year of the projection horizon:
    - The grant is a fraction of the current company value
    - It vests in equal parts over the vesting period
    - Nothing vests after the vesting period ends
    """

    def __init__(self,
                 company_value: float = 10000000.0,
                 equity_percentage: float = 0.10,
                 vesting_years: int = 4,
                 horizon_years: int = PROJECTION_YEARS,
                 ):
        """Initialize with grant parameters.

        Args:
            company_value: Current company valuation.
            equity_percentage: Fraction of the company granted (e.g., 0.10 for 10%).
            vesting_years: Number of years over which the grant vests. Values
                below 1 mean no equity ever vests.
            horizon_years: Number of years to build the vesting schedule for.
        """
        self.equity_value = company_value * equity_percentage
        if vesting_years >= 1:
            self.yearly_equity = self.equity_value / vesting_years
        else:
            self.yearly_equity = 0.0

        self.vested_value: Dict[int, float] = {}
        for year in range(1, horizon_years + 1):
            self.vested_value[year] = self.yearly_equity if year <= vesting_years else 0.0
