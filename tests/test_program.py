"""Tests for the command-line entry point."""

import os
import sys
import pytest
from unittest.mock import patch

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

import Program


def run_program(*args):
    with patch.object(sys, 'argv', ['Program.py', *args]):
        Program.main()


def test_summary_is_default_mode(capsys):
    run_program('sample')
    output = capsys.readouterr().out
    assert "COMPENSATION SUMMARY" in output
    assert "$1,423,600" in output


def test_yearly_compensation_mode(capsys):
    run_program('sample', '--mode', 'YearlyCompensation')
    output = capsys.readouterr().out
    assert "YEARLY COMPENSATION" in output
    assert "-$169,186.2" in output


def test_year_details_mode(capsys):
    run_program('sample', '--mode', 'YearDetails', '--year', '5')
    output = capsys.readouterr().out
    assert "COMPENSATION FOR YEAR 5" in output
    assert "$65,128.8" in output


def test_no_tax_flag(capsys):
    run_program('sample', '--mode', 'ExitValue', '--no-tax')
    output = capsys.readouterr().out
    assert "Tax (0.0%):" in output
    assert "$2,000,000" in output


def test_missing_plan_exits(capsys):
    with pytest.raises(SystemExit) as exc_info:
        run_program('no-such-plan')
    assert exc_info.value.code == 1
    assert "Spec file not found" in capsys.readouterr().out


def test_invalid_plan_exits(capsys):
    with patch.object(Program, 'load_parameters', side_effect=ValueError("vestingYears must be at least 1 (got 0)")):
        with pytest.raises(SystemExit) as exc_info:
            run_program('sample')
    assert exc_info.value.code == 1
    assert "Invalid plan 'sample'" in capsys.readouterr().out


def test_program_name_required():
    with pytest.raises(SystemExit) as exc_info:
        run_program()
    assert exc_info.value.code == 2
