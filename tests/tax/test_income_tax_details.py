import os
import sys
import math
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src')))
from tax.IncomeTaxDetails import IncomeTaxDetails, compute_income_tax
from model.CompensationParameters import CompensationParameters


def test_combined_rate_is_sum_of_brackets():
    details = IncomeTaxDetails(0.35, 0.0685, 0.03876)
    assert details.combined_rate == pytest.approx(0.45726)


def test_tax_burden_on_first_year_gross():
    # 370,000 x (0.35 + 0.0685 + 0.03876) = 169,186.2
    result = IncomeTaxDetails(0.35, 0.0685, 0.03876).tax_burden(370000)
    assert result.tax == pytest.approx(169186.2)
    assert result.net == pytest.approx(200813.8)
    assert result.effective_rate == pytest.approx(45.726)


def test_tax_burden_salary_only():
    result = IncomeTaxDetails(0.35, 0.0685, 0.03876).tax_burden(120000)
    assert result.tax == pytest.approx(54871.2)
    assert result.net == pytest.approx(65128.8)


def test_zero_income_has_zero_effective_rate():
    result = IncomeTaxDetails(0.35, 0.0685, 0.03876).tax_burden(0)
    assert result.tax == 0
    assert result.net == 0
    assert result.effective_rate == 0


def test_negative_income_is_taxed_arithmetically():
    result = IncomeTaxDetails(0.30, 0.0, 0.0).tax_burden(-1000)
    assert result.tax == pytest.approx(-300)
    assert result.net == pytest.approx(-700)
    assert result.effective_rate == 0


def test_nan_income_collapses_to_zero():
    result = IncomeTaxDetails(0.35, 0.0685, 0.03876).tax_burden(float('nan'))
    assert result.tax == 0
    assert result.net == 0
    assert not math.isnan(result.effective_rate)


def test_include_tax_false_returns_income_untaxed():
    result = IncomeTaxDetails(0.35, 0.0685, 0.03876, include_tax=False).tax_burden(370000)
    assert result.tax == 0
    assert result.net == 370000
    assert result.effective_rate == 0


def test_compute_income_tax_reads_parameter_rates():
    params = CompensationParameters(federal_tax_rate=0.2, state_tax_rate=0.05, city_tax_rate=0.0)
    result = compute_income_tax(100000, params)
    assert result.tax == pytest.approx(25000)
    assert result.effective_rate == pytest.approx(25.0)

    no_tax = compute_income_tax(100000, params.with_updates(include_tax=False))
    assert no_tax.tax == 0
    assert no_tax.net == 100000
