import os
import sys
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))
from calc.projection_calculator import ProjectionCalculator, build_projection
from model.CompensationParameters import CompensationParameters
from model.ProjectionData import PROJECTION_YEARS


@pytest.fixture
def projection():
    """Projection for the default offer: 120k salary, 10% of a 10M company over 4 years."""
    return ProjectionCalculator().calculate(CompensationParameters())


def test_schedule_has_ten_years(projection):
    assert len(projection.yearly_schedule) == PROJECTION_YEARS
    assert [r.year for r in projection.yearly_schedule] == list(range(1, 11))
    assert projection.first_year == 1
    assert projection.last_year == 10


def test_equity_values(projection):
    assert projection.equity_value == pytest.approx(1000000)
    assert projection.yearly_equity == pytest.approx(250000)


def test_vesting_year(projection):
    year1 = projection.get_year(1)
    assert year1.base == 120000
    assert year1.equity == pytest.approx(250000)
    assert year1.gross_total == pytest.approx(370000)
    assert year1.tax == pytest.approx(169186.2)
    assert year1.net_total == pytest.approx(200813.8)
    assert year1.effective_tax_rate == pytest.approx(45.726)


def test_post_vesting_year(projection):
    year5 = projection.get_year(5)
    assert year5.equity == 0
    assert year5.gross_total == pytest.approx(120000)
    assert year5.tax == pytest.approx(54871.2)
    assert year5.net_total == pytest.approx(65128.8)


def test_cumulative_net_is_running_sum(projection):
    running = 0.0
    for record in projection.yearly_schedule:
        running += record.net_total
        assert record.cumulative_net_total == pytest.approx(running)
    assert projection.total_net == pytest.approx(4 * 200813.8 + 6 * 65128.8)


def test_gross_is_base_plus_equity(projection):
    for record in projection.yearly_schedule:
        assert record.gross_total == pytest.approx(record.base + record.equity)
        assert record.net_total == pytest.approx(record.gross_total - record.tax)


def test_totals(projection):
    assert projection.total_gross == pytest.approx(2200000)
    assert projection.total_tax == pytest.approx(2200000 * 0.45726)


def test_exit_valuation(projection):
    exit_value = projection.exit_valuation
    assert exit_value.gross_exit_value == pytest.approx(2000000)
    assert exit_value.tax == pytest.approx(576400)
    assert exit_value.net_exit_value == pytest.approx(1423600)
    assert exit_value.effective_rate == pytest.approx(28.82)


def test_small_exit_uses_lower_tier():
    params = CompensationParameters(equity_percentage=0.02, exit_multiple=1.0)
    exit_value = build_projection(params).exit_valuation
    assert exit_value.gross_exit_value == pytest.approx(200000)
    assert exit_value.tax == pytest.approx(200000 * 0.2382)


def test_vesting_and_post_vesting_split(projection):
    assert [r.year for r in projection.vesting_years()] == [1, 2, 3, 4]
    assert [r.year for r in projection.post_vesting_years()] == [5, 6, 7, 8, 9, 10]


def test_without_tax():
    projection = build_projection(CompensationParameters(include_tax=False))
    for record in projection.yearly_schedule:
        assert record.tax == 0
        assert record.net_total == record.gross_total
        assert record.effective_tax_rate == 0
    assert projection.exit_valuation.tax == 0
    assert projection.exit_valuation.net_exit_value == pytest.approx(2000000)
    assert projection.total_net == pytest.approx(2200000)


def test_zero_vesting_years_gives_salary_only():
    projection = build_projection(CompensationParameters(vesting_years=0))
    assert projection.yearly_equity == 0
    assert all(record.equity == 0 for record in projection.yearly_schedule)
    # The grant is still valued at exit
    assert projection.exit_valuation.gross_exit_value == pytest.approx(2000000)


def test_idempotent():
    params = CompensationParameters(base_salary=98765.43, exit_multiple=3.3)
    first = build_projection(params)
    second = build_projection(params)
    assert first == second


def test_exit_monotonic_in_multiple():
    base = CompensationParameters()
    previous = None
    for multiple in (0.5, 1.0, 2.0, 4.0):
        exit_value = build_projection(base.with_updates(exit_multiple=multiple)).exit_valuation
        if previous is not None:
            assert exit_value.gross_exit_value > previous.gross_exit_value
            assert exit_value.tax > previous.tax
            assert exit_value.net_exit_value > previous.net_exit_value
        previous = exit_value


def test_parameters_are_kept_on_result():
    params = CompensationParameters(base_salary=150000)
    assert build_projection(params).parameters is params


def test_get_year_out_of_range(projection):
    assert projection.get_year(0) is None
    assert projection.get_year(11) is None
