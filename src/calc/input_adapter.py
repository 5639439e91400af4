"""Conversion of user-entered values into validated projection parameters.

Plan files and the interactive shell hand over loosely typed values:
numbers, numeric strings with currency symbols and thousands separators,
or display percentages. Everything here normalizes those values before
the projection engine sees them; the engine itself never parses text.
"""

import json
import math
import os
import re
from typing import Any, Dict, List, Optional

from model.CompensationParameters import CompensationParameters


# Default location of plan files, relative to the source tree
BASE_PATH = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', '..'))

# Plan-file keys for each parameter, grouped as they appear in spec.json
COMPENSATION_KEYS = {
    'base_salary': 'baseSalary',
    'equity_percentage': 'equityPercentage',
    'vesting_years': 'vestingYears',
    'company_value': 'companyValue',
    'exit_multiple': 'exitMultiple',
}
TAX_KEYS = {
    'include_tax': 'includeTax',
    'federal_tax_rate': 'federalTaxRate',
    'state_tax_rate': 'stateTaxRate',
    'city_tax_rate': 'cityTaxRate',
}

# Parameters entered as 0-100 display percentages in forms
PERCENT_FIELDS = ('equity_percentage', 'federal_tax_rate', 'state_tax_rate', 'city_tax_rate')

_LEADING_NUMBER = re.compile(r'^-?(\d+\.?\d*|\.\d+)')
_TRUE_WORDS = ('true', 'yes', 'y', 'on', '1')
_FALSE_WORDS = ('false', 'no', 'n', 'off', '0', '')


def parse_formatted_number(value: Any) -> float:
    """Parse a number that may carry currency symbols or thousands separators.

    Every character other than digits, '.' and '-' is dropped, then the
    leading numeric prefix is read ("$1,234.50" -> 1234.5, "12.3.4" -> 12.3).
    Anything that does not parse, including None and NaN, becomes 0.
    """
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return 0.0 if math.isnan(value) else float(value)
    if value is None:
        return 0.0

    clean_value = re.sub(r'[^\d.-]', '', str(value))
    match = _LEADING_NUMBER.match(clean_value)
    if not match:
        return 0.0
    return float(match.group(0))


def parse_percent(value: Any) -> float:
    """Parse a 0-100 display percentage ("6.85" or "6.85%") into a fraction."""
    return parse_formatted_number(value) / 100.0


def parse_bool(value: Any) -> bool:
    """Parse a yes/no style flag."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    text = str(value).strip().lower()
    if text in _TRUE_WORDS:
        return True
    if text in _FALSE_WORDS:
        return False
    raise ValueError(f"Cannot interpret '{value}' as yes/no")


def validate_parameters(params: CompensationParameters) -> CompensationParameters:
    """Enforce the caller-side rules the engine relies on.

    Raises:
        ValueError: if vesting_years is below 1
    """
    if params.vesting_years < 1:
        raise ValueError(f"vestingYears must be at least 1 (got {params.vesting_years})")
    return params


def parameters_from_spec(spec: Optional[dict]) -> CompensationParameters:
    """Build parameters from a plan-file dictionary.

    Rates and the equity percentage are stored as fractions in plan files.
    Missing keys fall back to the defaults; unparseable numbers become 0.
    """
    spec = spec or {}
    compensation = spec.get('compensation', {})
    taxes = spec.get('taxes', {})
    defaults = CompensationParameters()

    values: Dict[str, Any] = {}
    for name, key in COMPENSATION_KEYS.items():
        if key in compensation:
            values[name] = parse_formatted_number(compensation[key])
    for name, key in TAX_KEYS.items():
        if key not in taxes:
            continue
        if name == 'include_tax':
            values[name] = parse_bool(taxes[key])
        else:
            values[name] = parse_formatted_number(taxes[key])

    if 'vesting_years' in values:
        values['vesting_years'] = int(values['vesting_years'])

    return defaults.with_updates(**values)


def parameters_from_form(form: Dict[str, Any], base: Optional[CompensationParameters] = None) -> CompensationParameters:
    """Build parameters from display-form values keyed by parameter name.

    Percentage fields are read as 0-100 display values. Fields absent from
    the form keep their value from `base` (or the defaults).
    """
    params = base or CompensationParameters()
    return params.with_updates(**{name: parse_form_value(name, raw) for name, raw in form.items()})


def parse_form_value(name: str, raw: Any) -> Any:
    """Parse one display-form value for the named parameter.

    Raises:
        KeyError: if `name` is not a parameter
    """
    if name not in COMPENSATION_KEYS and name not in TAX_KEYS:
        raise KeyError(name)
    if name == 'include_tax':
        return parse_bool(raw)
    if name in PERCENT_FIELDS:
        return parse_percent(raw)
    if name == 'vesting_years':
        return int(parse_formatted_number(raw))
    return parse_formatted_number(raw)


def spec_from_parameters(params: CompensationParameters) -> dict:
    """Build the plan-file dictionary for a parameter snapshot."""
    return {
        'compensation': {key: getattr(params, name) for name, key in COMPENSATION_KEYS.items()},
        'taxes': {key: getattr(params, name) for name, key in TAX_KEYS.items()},
    }


def load_spec(program_name: str, base_path: str = BASE_PATH) -> dict:
    """Read input-parameters/<program_name>/spec.json.

    Raises:
        FileNotFoundError: if the plan has no spec.json
    """
    spec_path = os.path.join(base_path, 'input-parameters', program_name, 'spec.json')
    if not os.path.exists(spec_path):
        raise FileNotFoundError(f"Spec file not found: {spec_path}")
    with open(spec_path, 'r') as f:
        return json.load(f)


def load_parameters(program_name: str, base_path: str = BASE_PATH) -> CompensationParameters:
    """Load and validate the parameters of a saved plan."""
    return validate_parameters(parameters_from_spec(load_spec(program_name, base_path)))


def save_spec(spec: dict, program_name: str, base_path: str = BASE_PATH) -> str:
    """Write input-parameters/<program_name>/spec.json and return its path."""
    program_dir = os.path.join(base_path, 'input-parameters', program_name)
    os.makedirs(program_dir, exist_ok=True)
    spec_path = os.path.join(program_dir, 'spec.json')
    with open(spec_path, 'w') as f:
        json.dump(spec, f, indent=4)
    return spec_path


def list_plans(base_path: str = BASE_PATH) -> List[str]:
    """Names of the plan folders under input-parameters that hold a spec.json."""
    input_params_path = os.path.join(base_path, 'input-parameters')
    if not os.path.isdir(input_params_path):
        return []
    return sorted(
        name for name in os.listdir(input_params_path)
        if os.path.isfile(os.path.join(input_params_path, name, 'spec.json'))
    )
