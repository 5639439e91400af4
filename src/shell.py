#!/usr/bin/env python3
"""Interactive command shell for exploring compensation projections.

This module provides an interactive shell that holds one parameter set,
recomputes the projection after every edit, and allows querying any
field(s) from the yearly schedule across a range of projection years.

Usage:
    python src/shell.py [program_name]

Commands:
    load <program_name>           - Load a saved plan
    set <parameter> <value>       - Change a parameter and recompute
    params                        - Show the current parameters
    get <fields> [year_or_range]  - Query fields from the yearly schedule
    fields                        - List all available fields
    exit_value                    - Show the exit valuation
    render [mode] [year_or_range] - Render the projection
    save [program_name]           - Save the parameters as a plan
    reset                         - Restore the default parameters
    generate                      - Create or update a plan interactively
    help                          - Show help message
    exit/quit                     - Exit the shell

Examples:
    > set base_salary 150,000
    > set equity_percentage 2.5
    > get gross_total, net_total
    > get cumulative_net_total 1-4
    > render YearlyCompensation 3-
"""

import sys
import os
import re
import cmd
import readline
from dataclasses import fields as dataclass_fields

# Add src directory to path for imports
sys.path.insert(0, os.path.dirname(__file__))

from model.CompensationParameters import CompensationParameters
from model.ProjectionData import ProjectionData, YearRecord
from model.field_metadata import RATE_FIELDS, get_field_info, get_short_name, get_description
from calc.input_adapter import (
    BASE_PATH,
    COMPENSATION_KEYS,
    TAX_KEYS,
    PERCENT_FIELDS,
    list_plans,
    load_parameters,
    parse_form_value,
    save_spec,
    spec_from_parameters,
    validate_parameters,
)
from calc.projection_calculator import build_projection
from render.formatting import format_currency, format_fraction_as_percent, format_number_with_commas, format_percent
from render.renderers import RENDERER_REGISTRY, RANGE_MODES, ExitValueRenderer, create_renderer, parse_year_range
from spec_generator import run_generator, clean_program_name


# Parameter names accepted by 'set', including the plan-file spellings
PARAMETER_ALIASES = {name: name for name in list(COMPENSATION_KEYS) + list(TAX_KEYS)}
PARAMETER_ALIASES.update({key: name for name, key in COMPENSATION_KEYS.items()})
PARAMETER_ALIASES.update({key: name for name, key in TAX_KEYS.items()})

_YEAR_SPEC = re.compile(r'^(\d+|\d*-\d*)$')


def get_yearly_fields() -> list:
    """Get list of all field names from YearRecord dataclass."""
    return [f.name for f in dataclass_fields(YearRecord)]


def get_parameter_names() -> list:
    """Get list of all parameter names from CompensationParameters."""
    return [f.name for f in dataclass_fields(CompensationParameters)]


def format_value(value, field_name: str = '') -> str:
    """Format a value for display."""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    elif isinstance(value, int) and field_name in ('', 'year'):
        return str(value)
    elif isinstance(value, (int, float)):
        if field_name in RATE_FIELDS:
            return format_percent(value)
        return format_currency(value)
    else:
        return str(value)


def format_parameter(name: str, value) -> str:
    """Format a parameter value the way it is entered."""
    if name in PERCENT_FIELDS:
        return format_fraction_as_percent(value)
    if name == 'exit_multiple':
        return f"{format_number_with_commas(value)}x"
    if name in ('base_salary', 'company_value'):
        return format_currency(value)
    return format_value(value)


class CompensationShell(cmd.Cmd):
    """Interactive shell for editing parameters and querying projections."""

    intro = """
Compensation Calculator Interactive Shell
=========================================
Type 'help' for available commands.
Type 'params' to see the current parameters.
Type 'exit' or 'quit' to exit.
"""
    prompt = '> '

    def __init__(self, params: CompensationParameters = None, program_name: str = None, base_path: str = BASE_PATH):
        super().__init__()
        self.base_path = base_path
        self.program_name = program_name
        self.params = params or CompensationParameters()
        self.projection: ProjectionData = build_projection(self.params)
        self.available_fields = get_yearly_fields()
        self._update_intro()

    def preloop(self):
        """Set up readline before entering the command loop."""
        try:
            readline.set_completer_delims(' \t\n,')
            if 'libedit' in (readline.__doc__ or ''):
                readline.parse_and_bind("bind ^I rl_complete")
            else:
                readline.parse_and_bind("tab: complete")
        except (AttributeError, TypeError):
            pass  # readline might not be fully available

    def _update_intro(self):
        """Update the intro message based on current state."""
        plan_line = f"Plan: {self.program_name}" if self.program_name else "Plan: (defaults, unsaved)"
        self.intro = f"""
Compensation Calculator Interactive Shell
=========================================
{plan_line}

Type 'help' for available commands.
Type 'params' to see the current parameters.
Type 'exit' or 'quit' to exit.
"""

    def _apply(self, params: CompensationParameters) -> bool:
        """Validate a new parameter snapshot and recompute the projection.

        Returns True when applied; on a validation error the previous
        parameters and projection are kept.
        """
        try:
            validate_parameters(params)
        except ValueError as e:
            print(f"Error: {e}")
            return False
        self.params = params
        self.projection = build_projection(params)
        return True

    def do_set(self, arg: str):
        """Change a parameter and recompute the projection.

        Usage: set <parameter> <value>

        Percentage parameters take display values (35 or 35% for 35%).
        Currency values may include '$' and thousands separators.
        include_tax takes yes/no, on/off or true/false.

        Examples:
            set base_salary 150,000
            set equity_percentage 2.5
            set vestingYears 3
            set include_tax off
        """
        parts = arg.strip().split(None, 1)
        if len(parts) != 2:
            print("Usage: set <parameter> <value>")
            print("Use 'params' to see parameter names.")
            return

        alias, raw_value = parts
        name = PARAMETER_ALIASES.get(alias)
        if name is None:
            print(f"Error: Unknown parameter '{alias}'")
            print(f"Parameters: {', '.join(get_parameter_names())}")
            return

        try:
            value = parse_form_value(name, raw_value)
        except ValueError as e:
            print(f"Error: {e}")
            return

        if self._apply(self.params.with_updates(**{name: value})):
            print(f"{name} = {format_parameter(name, value)}")
            print(f"10-year net: {format_currency(self.projection.total_net)}   "
                  f"Net exit: {format_currency(self.projection.exit_valuation.net_exit_value)}")

    def complete_set(self, text, line, begidx, endidx):
        """Tab completion for parameter names."""
        if len(line[:begidx].split()) > 1:
            return []
        return [p for p in get_parameter_names() if p.startswith(text)]

    def do_params(self, arg: str):
        """Show the current parameters."""
        print()
        print(f"Parameters{' for ' + repr(self.program_name) if self.program_name else ''}:")
        print("=" * 40)
        for name in get_parameter_names():
            print(f"  {name:<20} {format_parameter(name, getattr(self.params, name)):>17}")
        print()

    def do_reset(self, arg: str):
        """Restore the default parameters."""
        self._apply(CompensationParameters())
        print("Parameters reset to defaults.")

    def do_get(self, arg: str):
        """Query field(s) from the yearly schedule.

        Usage: get <fields> [year_or_range]

        Arguments:
            fields        - Comma-separated list of field names
            year_or_range - Optional: single year (3) or range (2-5)
                            If range end is omitted (3-), runs to year 10

        Examples:
            get gross_total
            get gross_total, tax
            get net_total 5
            get cumulative_net_total 1-4
        """
        if not arg.strip():
            print("Error: Please specify at least one field to query.")
            print("Usage: get <fields> [year_or_range]")
            print("Example: get net_total 1-4")
            return

        parts = arg.strip().split()
        field_parts = parts
        first_year = self.projection.first_year
        last_year = self.projection.last_year

        if len(parts) > 1 and _YEAR_SPEC.match(parts[-1]) and parts[-1] != '-':
            first_year, last_year = parse_year_range(parts[-1], self.projection)
            field_parts = parts[:-1]

        field_names = [f.strip() for f in ' '.join(field_parts).split(',') if f.strip()]
        if not field_names:
            print("Error: No valid field names provided.")
            return

        invalid_fields = [f for f in field_names if f not in self.available_fields]
        if invalid_fields:
            print(f"Error: Unknown field(s): {', '.join(invalid_fields)}")
            print("Use 'fields' command to see available field names.")
            return

        if first_year > last_year:
            print(f"Error: First year ({first_year}) cannot be greater than last year ({last_year})")
            return

        header = ["Year"] + [get_short_name(f) for f in field_names]
        col_widths = [max(len(h), 6) for h in header]

        rows = []
        records = []
        for year in range(first_year, last_year + 1):
            record = self.projection.get_year(year)
            if record is None:
                continue
            records.append(record)
            row = [str(year)] + [format_value(getattr(record, f), f) for f in field_names]
            rows.append(row)
            for i, cell in enumerate(row):
                col_widths[i] = max(col_widths[i], len(cell))

        if not rows:
            print(f"No data available for years {first_year}-{last_year}")
            return

        header_line = "  ".join(h.rjust(col_widths[i]) for i, h in enumerate(header))
        print()
        print(header_line)
        print("-" * len(header_line))
        for row in rows:
            print("  ".join(cell.rjust(col_widths[i]) for i, cell in enumerate(row)))

        # Totals for summable fields
        if len(rows) > 1:
            total_row = ["Total"]
            for field_name in field_names:
                if field_name in ('year', 'cumulative_net_total') or field_name in RATE_FIELDS:
                    total_row.append("-")
                else:
                    total_row.append(format_value(sum(getattr(r, field_name) for r in records)))
            print("-" * len(header_line))
            print("  ".join(cell.rjust(col_widths[i]) for i, cell in enumerate(total_row)))

        print()

    def complete_get(self, text, line, begidx, endidx):
        """Tab completion for the get command (case-insensitive substring match)."""
        if not text:
            return self.available_fields
        text_lower = text.lower()
        return [f for f in self.available_fields if text_lower in f.lower()]

    def do_fields(self, arg: str):
        """List all available fields that can be queried.

        Usage: fields [field_name]
        """
        if arg.strip():
            field_name = arg.strip()
            if field_name not in self.available_fields:
                print(f"Error: Unknown field '{field_name}'")
                print("Use 'fields' without arguments to see all available fields.")
                return
            info = get_field_info(field_name)
            print(f"\n{field_name}:")
            if info:
                print(f"  Short name: {info.short_name}")
                print(f"  Description: {info.description}")
            else:
                print("  No metadata available")
            print()
            return

        print("\nAvailable fields in YearRecord:")
        print("=" * 70)
        for field_name in self.available_fields:
            print(f"  {field_name:<24} [{get_short_name(field_name):<14}] {get_description(field_name)}")
        print()

    def complete_fields(self, text, line, begidx, endidx):
        text_lower = text.lower()
        return [f for f in self.available_fields if text_lower in f.lower()]

    def do_exit_value(self, arg: str):
        """Show the exit valuation with capital gains tax."""
        ExitValueRenderer().render(self.projection)

    def do_render(self, arg: str):
        """Render the projection.

        Usage: render [mode] [year_or_range]

        Modes:
            Summary             - Parameters, totals and exit value
            YearlyCompensation  - Year-by-year table (accepts a range)
            ExitValue           - Exit valuation
            YearDetails         - Breakdown of one year (requires a year)

        Examples:
            render
            render YearlyCompensation 2-6
            render YearDetails 3
        """
        parts = arg.strip().split()
        if not parts:
            print("\nAvailable render modes:")
            print("=" * 40)
            for mode in RENDERER_REGISTRY.keys():
                print(f"  - {mode}")
            print("\nUsage: render <mode> [year_or_range]")
            print()
            return

        mode = parts[0]
        if mode not in RENDERER_REGISTRY:
            print(f"Error: Unknown render mode '{mode}'")
            print(f"Available modes: {', '.join(RENDERER_REGISTRY.keys())}")
            return

        start_year = end_year = None
        if len(parts) > 1:
            try:
                start_year, end_year = parse_year_range(parts[1], self.projection)
            except ValueError:
                print(f"Error: Invalid year or range '{parts[1]}'")
                return
            if mode not in RANGE_MODES and mode != 'YearDetails':
                print(f"Note: {mode} ignores the year range.")

        try:
            renderer = create_renderer(mode, start_year, end_year)
        except ValueError as e:
            print(f"Error: {e}")
            return
        renderer.render(self.projection)

    def complete_render(self, text, line, begidx, endidx):
        return [m for m in RENDERER_REGISTRY.keys() if m.startswith(text)]

    def do_load(self, arg: str):
        """Load a saved plan.

        Usage: load <program_name>

        If no program name is given and a plan is already loaded, reloads it.
        """
        program_name = arg.strip() if arg.strip() else self.program_name

        if not program_name:
            print("Please specify a program name.")
            print("Available programs:")
            for item in list_plans(self.base_path):
                print(f"  - {item}")
            return

        try:
            print(f"Loading plan '{program_name}'...")
            params = load_parameters(program_name, self.base_path)
        except FileNotFoundError as e:
            print(f"Error: {e}")
            return
        except ValueError as e:
            print(f"Error loading plan: {e}")
            return

        self._apply(params)
        self.program_name = program_name
        print("Plan loaded successfully!")

    def complete_load(self, text, line, begidx, endidx):
        return [p for p in list_plans(self.base_path) if p.startswith(text)]

    def do_save(self, arg: str):
        """Save the current parameters as a plan.

        Usage: save [program_name]

        Without a name, overwrites the loaded plan.
        """
        program_name = clean_program_name(arg.strip()) if arg.strip() else self.program_name
        if not program_name:
            print("Please specify a program name: save <program_name>")
            return

        spec_path = save_spec(spec_from_parameters(self.params), program_name, self.base_path)
        self.program_name = program_name
        print(f"Saved to: {spec_path}")

    def do_generate(self, arg: str):
        """Launch the interactive wizard to create or update a plan.

        After generating a plan, you will be prompted to load it.
        """
        print()
        program_name = run_generator(self.base_path)
        if program_name:
            print()
            reload_choice = input(f"Would you like to load '{program_name}' now? [Y/n]: ").strip().lower()
            if reload_choice in ('', 'y', 'yes'):
                self.do_load(program_name)

    def do_exit(self, arg: str):
        """Exit the shell."""
        print("Goodbye!")
        return True

    def do_quit(self, arg: str):
        """Exit the shell."""
        return self.do_exit(arg)

    def do_EOF(self, arg: str):
        """Handle Ctrl+D to exit."""
        print()
        return self.do_exit(arg)

    def emptyline(self):
        """Do nothing on empty line."""
        pass

    def default(self, line: str):
        """Handle unknown commands."""
        print(f"Unknown command: {line}")
        print("Type 'help' for available commands.")


def main():
    program_name = sys.argv[1] if len(sys.argv) > 1 else None

    if program_name:
        try:
            print(f"Loading plan '{program_name}'...")
            params = load_parameters(program_name)
            print("Plan loaded successfully!")
        except FileNotFoundError as e:
            print(f"Error: {e}")
            sys.exit(1)
        except ValueError as e:
            print(f"Error loading plan: {e}")
            sys.exit(1)
        shell = CompensationShell(params, program_name)
    else:
        shell = CompensationShell()
    shell.cmdloop()


if __name__ == "__main__":
    main()
