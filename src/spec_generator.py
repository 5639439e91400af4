"""Interactive wizard that writes a plan's spec.json.

Every question shows the current value, and a blank answer keeps it. When
an existing plan is updated, the current values are the plan's parsed
parameters, so formatted entries such as "$150,000" are shown and kept as
numbers. Answers go through the same parsers as shell input.
"""

import re
from typing import Any, Callable, Optional

from model.CompensationParameters import CompensationParameters
from calc.input_adapter import (
    BASE_PATH,
    list_plans,
    load_spec,
    parameters_from_spec,
    parse_bool,
    parse_formatted_number,
    parse_percent,
    save_spec,
    spec_from_parameters,
)
from render.formatting import format_currency, format_fraction_as_percent, format_number_with_commas


_HAS_DIGIT = re.compile(r'\d')


def ask(question: str, default: Any, shown_default: str, parse: Callable[[str], Any]) -> Any:
    """Ask until `parse` accepts the answer.

    A blank answer returns `default`; with no default an answer is required.
    `parse` rejects an answer by raising ValueError, whose message is shown
    before asking again.
    """
    suffix = f" [{shown_default}]" if default is not None else ""
    while True:
        answer = input(f"{question}{suffix}: ").strip()
        if answer == "":
            if default is not None:
                return default
            print("  An answer is required")
            continue
        try:
            return parse(answer)
        except ValueError as e:
            print(f"  {e}")


def _number(answer: str) -> float:
    if not _HAS_DIGIT.search(answer):
        raise ValueError("Please enter a number (e.g., 120,000 or 2.5)")
    return parse_formatted_number(answer)


def _within(value, min_val=None, max_val=None, show: Callable = str):
    if min_val is not None and value < min_val:
        raise ValueError(f"Value must be at least {show(min_val)}")
    if max_val is not None and value > max_val:
        raise ValueError(f"Value must be at most {show(max_val)}")
    return value


def _usable(default, min_val=None, max_val=None):
    """Drop a default that the bounds would reject, so an answer is required."""
    try:
        return _within(default, min_val, max_val) if default is not None else None
    except ValueError:
        return None


def prompt_int(question: str, default: Optional[int] = None,
               min_val: Optional[int] = None, max_val: Optional[int] = None) -> int:
    def parse(answer):
        value = _number(answer)
        if value != int(value):
            raise ValueError("Please enter a whole number")
        return _within(int(value), min_val, max_val)

    default = _usable(default, min_val, max_val)
    return ask(question, default, str(default), parse)


def prompt_float(question: str, default: Optional[float] = None,
                 min_val: Optional[float] = None, max_val: Optional[float] = None) -> float:
    default = _usable(default, min_val, max_val)
    shown = format_number_with_commas(default) if default is not None else ""
    return ask(question, default, shown, lambda answer: _within(_number(answer), min_val, max_val))


def prompt_currency(question: str, default: Optional[float] = None, min_val: float = 0) -> float:
    """Ask for a dollar amount; "$150,000" and "150000" are both accepted."""
    default = _usable(default, min_val)
    shown = format_currency(default) if default is not None else ""
    return ask(f"{question} ($)", default, shown,
               lambda answer: _within(_number(answer), min_val, show=format_currency))


def prompt_percent(question: str, default: Optional[float] = None, max_val: float = 100.0) -> float:
    """Ask for a 0-100 percentage ("6.85" or "6.85%") and return it as a fraction."""
    def parse(answer):
        _number(answer)
        fraction = parse_percent(answer)
        if fraction < 0:
            raise ValueError("Percentage cannot be negative")
        if fraction > max_val / 100.0:
            raise ValueError(f"Percentage cannot exceed {max_val:g}%")
        return fraction

    default = _usable(default, 0.0, max_val / 100.0)
    shown = format_fraction_as_percent(default) if default is not None else ""
    return ask(f"{question} (%)", default, shown, parse)


def prompt_yes_no(question: str, default: bool = False) -> bool:
    def parse(answer):
        try:
            return parse_bool(answer)
        except ValueError:
            raise ValueError("Please enter 'y' or 'n'")

    return ask(question, default, "Y/n" if default else "y/N", parse)


def _heading(title: str) -> None:
    print()
    print(f"--- {title} " + "-" * (56 - len(title)))


def generate_spec(existing_spec: Optional[dict] = None) -> dict:
    """Ask for every plan value and return the plan-file dictionary.

    Args:
        existing_spec: Plan-file dictionary whose parsed values are offered
            as defaults; None starts from the standard defaults.
    """
    current = parameters_from_spec(existing_spec) if existing_spec else CompensationParameters()
    answers = {}

    _heading("Compensation")
    answers['base_salary'] = prompt_currency("Annual base salary", current.base_salary)
    answers['equity_percentage'] = prompt_percent("Equity grant as percentage of the company",
                                                  current.equity_percentage)
    answers['vesting_years'] = prompt_int("Years over which the equity vests", current.vesting_years,
                                          min_val=1, max_val=10)
    answers['company_value'] = prompt_currency("Current company valuation", current.company_value)
    answers['exit_multiple'] = prompt_float("Exit multiple (company value at exit / value today)",
                                            current.exit_multiple, min_val=0.0)

    _heading("Taxes")
    answers['include_tax'] = prompt_yes_no("Include tax calculations?", current.include_tax)
    # Rates are only asked for when taxes apply; otherwise the current ones are kept
    if answers['include_tax']:
        answers['federal_tax_rate'] = prompt_percent("Federal income tax rate", current.federal_tax_rate)
        answers['state_tax_rate'] = prompt_percent("State income tax rate", current.state_tax_rate)
        answers['city_tax_rate'] = prompt_percent("City income tax rate", current.city_tax_rate)

    return spec_from_parameters(current.with_updates(**answers))


def clean_program_name(name: str) -> str:
    """Replace characters that are not safe in a folder name."""
    return "".join(c if c.isalnum() or c in '-_' else '_' for c in name)


def run_generator(base_path: Optional[str] = None) -> Optional[str]:
    """Run the wizard and return the saved plan name.

    Returns None when the user cancels or the existing plan cannot be read;
    in both cases nothing is written.
    """
    base_path = base_path or BASE_PATH
    try:
        print()
        print("Compensation Calculator - Plan Generator")
        print("=" * 40)

        plans = list_plans(base_path)
        if plans:
            print(f"Existing plans: {', '.join(plans)}")
            print("Enter an existing plan name to update it, or a new name to create one.")
        program_name = clean_program_name(input("Plan name [myplan]: ").strip() or "myplan")

        try:
            existing_spec = load_spec(program_name, base_path)
            # Unparseable values are reported before any question is asked
            parameters_from_spec(existing_spec)
            print(f"Updating plan '{program_name}'; its current values are the defaults.")
        except FileNotFoundError:
            existing_spec = None
            print(f"Creating new plan '{program_name}'.")
        except ValueError as e:
            print(f"Error: could not read plan '{program_name}': {e}")
            return None

        spec_path = save_spec(generate_spec(existing_spec), program_name, base_path)

        print()
        print(f"Configuration saved to {spec_path}")
        print(f"Run it with: python src/Program.py {program_name} [--mode YearlyCompensation|ExitValue|YearDetails]")
        return program_name

    except KeyboardInterrupt:
        print("\n\nCancelled. No changes made.")
        return None


if __name__ == "__main__":
    run_generator()
