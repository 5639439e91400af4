"""Projection calculator that builds the yearly schedule and exit valuation.

This calculator creates a complete ProjectionData object from a single
parameter snapshot. The calculation is organized into three steps:
1. Vesting - split the equity grant across the horizon
2. Yearly schedule - salary plus vested equity, taxed as ordinary income,
   with a running cumulative net total
3. Exit valuation - the grant at the exit multiple, taxed as capital gains
"""

import logging

from model.CompensationParameters import CompensationParameters
from model.ProjectionData import ExitValuation, ProjectionData, YearRecord, PROJECTION_YEARS
from tax.IncomeTaxDetails import IncomeTaxDetails
from tax.CapitalGainsDetails import CapitalGainsDetails
from calc.equity_vesting import EquityVestingCalculator


logger = logging.getLogger(__name__)


class ProjectionCalculator:
    """Calculator that builds a complete projection from parameters.

    Holds no state between calls; every call builds fresh tax details
    from the parameter snapshot it is given.
    """

    def calculate(self, params: CompensationParameters) -> ProjectionData:
        """Calculate the yearly schedule and exit valuation.

        Args:
            params: The parameter snapshot

        Returns:
            ProjectionData containing all yearly records and the exit valuation
        """
        income_tax = IncomeTaxDetails.from_parameters(params)
        capital_gains = CapitalGainsDetails.from_parameters(params)
        vesting = EquityVestingCalculator(
            company_value=params.company_value,
            equity_percentage=params.equity_percentage,
            vesting_years=params.vesting_years,
            horizon_years=PROJECTION_YEARS,
        )

        # ============================================================
        # Yearly schedule
        # ============================================================
        schedule = []
        running_total = 0.0
        for year in range(1, PROJECTION_YEARS + 1):
            equity = vesting.vested_value.get(year, 0.0)
            gross_total = params.base_salary + equity
            taxes = income_tax.tax_burden(gross_total)

            # Running sum must be accumulated in year order
            running_total += taxes.net

            schedule.append(YearRecord(
                year=year,
                base=params.base_salary,
                equity=equity,
                gross_total=gross_total,
                tax=taxes.tax,
                net_total=taxes.net,
                effective_tax_rate=taxes.effective_rate,
                cumulative_net_total=running_total,
            ))

        # ============================================================
        # Exit valuation
        # ============================================================
        gross_exit = vesting.equity_value * params.exit_multiple
        exit_taxes = capital_gains.tax_burden(gross_exit)
        exit_valuation = ExitValuation(
            gross_exit_value=gross_exit,
            tax=exit_taxes.tax,
            net_exit_value=exit_taxes.net,
            effective_rate=exit_taxes.effective_rate,
        )

        logger.debug(
            "Projection built: equity value %.2f, yearly equity %.2f, horizon net %.2f, exit gross %.2f",
            vesting.equity_value, vesting.yearly_equity, running_total, gross_exit,
        )

        return ProjectionData(
            parameters=params,
            equity_value=vesting.equity_value,
            yearly_equity=vesting.yearly_equity,
            yearly_schedule=schedule,
            exit_valuation=exit_valuation,
        )


def build_projection(params: CompensationParameters) -> ProjectionData:
    """Build the complete projection for a parameter snapshot."""
    return ProjectionCalculator().calculate(params)
