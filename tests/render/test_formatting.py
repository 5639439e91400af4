"""Tests for display formatting of projection values."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from render.formatting import (
    format_number_with_commas,
    format_currency,
    format_percent,
    format_fraction_as_percent,
)


def test_format_number_with_commas():
    assert format_number_with_commas(120000) == "120,000"
    assert format_number_with_commas(169186.2) == "169,186.2"
    assert format_number_with_commas(1234.567) == "1,234.57"
    assert format_number_with_commas(0.5) == "0.5"
    assert format_number_with_commas(0) == "0"


def test_format_number_rounds_to_zero_without_sign():
    assert format_number_with_commas(-0.001) == "0"


def test_format_number_nan_is_zero():
    assert format_number_with_commas(float('nan')) == "0"


def test_format_currency():
    assert format_currency(1423600) == "$1,423,600"
    assert format_currency(-169186.2) == "-$169,186.2"
    assert format_currency(0) == "$0"


def test_format_percent():
    assert format_percent(45.726) == "45.7%"
    assert format_percent(28.82) == "28.8%"
    assert format_percent(0) == "0.0%"
    assert format_percent(45.726, decimals=2) == "45.73%"


def test_format_fraction_as_percent():
    assert format_fraction_as_percent(0.0685) == "6.85%"
    assert format_fraction_as_percent(0.35) == "35%"
    assert format_fraction_as_percent(0.03876) == "3.876%"
