"""Compensation Calculator Tools for MCP Server.

This module provides the tool implementations that wrap the projection
engine and expose its data through MCP.
"""

import os
import sys
import logging
from typing import Any, Dict, List, Optional

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from calc.input_adapter import COMPENSATION_KEYS, TAX_KEYS, load_parameters, parameters_from_spec, validate_parameters
from calc.projection_calculator import ProjectionCalculator
from model.ProjectionData import ProjectionData, YearRecord


logger = logging.getLogger(__name__)


def _round(value: float) -> float:
    return round(value, 2)


def year_record_to_dict(record: YearRecord) -> dict:
    """Serialize one schedule year with display rounding."""
    return {
        "year": record.year,
        "base": _round(record.base),
        "equity": _round(record.equity),
        "gross_total": _round(record.gross_total),
        "tax": _round(record.tax),
        "net_total": _round(record.net_total),
        "effective_tax_rate": round(record.effective_tax_rate, 1),
        "cumulative_net_total": _round(record.cumulative_net_total)
    }


def exit_valuation_to_dict(projection: ProjectionData) -> dict:
    """Serialize the exit valuation with display rounding."""
    exit_value = projection.exit_valuation
    return {
        "equity_value": _round(projection.equity_value),
        "exit_multiple": projection.parameters.exit_multiple,
        "gross_exit_value": _round(exit_value.gross_exit_value),
        "tax": _round(exit_value.tax),
        "net_exit_value": _round(exit_value.net_exit_value),
        "effective_rate": round(exit_value.effective_rate, 2)
    }


def parameters_to_dict(projection: ProjectionData) -> dict:
    params = projection.parameters
    return {
        "base_salary": params.base_salary,
        "equity_percentage": params.equity_percentage,
        "vesting_years": params.vesting_years,
        "company_value": params.company_value,
        "exit_multiple": params.exit_multiple,
        "include_tax": params.include_tax,
        "federal_tax_rate": params.federal_tax_rate,
        "state_tax_rate": params.state_tax_rate,
        "city_tax_rate": params.city_tax_rate
    }


def projection_to_dict(projection: ProjectionData) -> dict:
    """Serialize a full projection: parameters, schedule, exit and totals."""
    return {
        "parameters": parameters_to_dict(projection),
        "yearly_schedule": [year_record_to_dict(r) for r in projection.yearly_schedule],
        "exit_valuation": exit_valuation_to_dict(projection),
        "totals": {
            "gross": _round(projection.total_gross),
            "tax": _round(projection.total_tax),
            "net": _round(projection.total_net)
        }
    }


def calculate_projection(arguments: Dict[str, Any]) -> dict:
    """Build a projection from ad-hoc plan-file style values.

    Accepts the camelCase keys of spec.json (baseSalary, equityPercentage,
    federalTaxRate, ...) in a single flat dictionary, with rates as
    fractions. Missing keys use the defaults.
    """
    spec = {
        'compensation': {k: v for k, v in arguments.items() if k in COMPENSATION_KEYS.values()},
        'taxes': {k: v for k, v in arguments.items() if k in TAX_KEYS.values()}
    }
    params = validate_parameters(parameters_from_spec(spec))
    return projection_to_dict(ProjectionCalculator().calculate(params))


class CompensationTools:
    """Tools that wrap the projection engine for one plan."""

    def __init__(self, base_path: str, program_name: str):
        """Initialize with paths and calculate the plan's projection.

        Args:
            base_path: Path to the compensation-calculator root directory
            program_name: Name of the program folder in input-parameters
        """
        self.base_path = base_path
        self.program_name = program_name
        self.params = load_parameters(program_name, base_path)
        self.projection: ProjectionData = ProjectionCalculator().calculate(self.params)

    def get_program_overview(self) -> dict:
        """Get an overview of the plan's parameters and headline results."""
        return {
            "program_name": self.program_name,
            "parameters": parameters_to_dict(self.projection),
            "equity": {
                "equity_value": _round(self.projection.equity_value),
                "yearly_equity": _round(self.projection.yearly_equity),
                "vesting_years": self.params.vesting_years
            },
            "horizon_years": len(self.projection.yearly_schedule),
            "combined_income_tax_rate": round(self.params.combined_income_tax_rate * 100, 3) if self.params.include_tax else 0,
            "total_net": _round(self.projection.total_net),
            "net_exit_value": _round(self.projection.exit_valuation.net_exit_value)
        }

    def get_yearly_compensation(self, year: int) -> dict:
        """Get compensation and tax for a single projection year."""
        record = self.projection.get_year(year)
        if record is None:
            return {"error": f"Year {year} is not in the projection ({self.projection.first_year}-{self.projection.last_year})"}
        return year_record_to_dict(record)

    def get_projection_schedule(self, start_year: Optional[int] = None, end_year: Optional[int] = None) -> dict:
        """Get the yearly schedule, optionally limited to a year range."""
        start = start_year if start_year is not None else self.projection.first_year
        end = end_year if end_year is not None else self.projection.last_year
        return {
            "start_year": start,
            "end_year": end,
            "years": [year_record_to_dict(r) for r in self.projection.yearly_schedule if start <= r.year <= end]
        }

    def get_exit_valuation(self) -> dict:
        """Get the exit valuation with capital gains tax."""
        return exit_valuation_to_dict(self.projection)

    def get_lifetime_totals(self) -> dict:
        """Get totals across the projection horizon and including the exit."""
        total_gross = self.projection.total_gross
        total_tax = self.projection.total_tax
        exit_value = self.projection.exit_valuation
        return {
            "horizon_totals": {
                "gross": _round(total_gross),
                "tax": _round(total_tax),
                "net": _round(self.projection.total_net)
            },
            "vesting_years_net": _round(sum(r.net_total for r in self.projection.vesting_years())),
            "post_vesting_years_net": _round(sum(r.net_total for r in self.projection.post_vesting_years())),
            "effective_horizon_tax_rate": round(total_tax / total_gross * 100, 1) if total_gross > 0 else 0,
            "net_including_exit": _round(self.projection.total_net + exit_value.net_exit_value),
            "tax_including_exit": _round(total_tax + exit_value.tax)
        }

    def compare_years(self, year1: int, year2: int) -> dict:
        """Compare compensation metrics between two years."""
        r1 = self.projection.get_year(year1)
        if r1 is None:
            return {"error": f"Year {year1} is not in the projection"}
        r2 = self.projection.get_year(year2)
        if r2 is None:
            return {"error": f"Year {year2} is not in the projection"}

        def compare_metric(v1: float, v2: float) -> dict:
            diff = v2 - v1
            pct = (diff / v1 * 100) if v1 != 0 else 0
            return {
                f"year_{year1}": round(v1, 2),
                f"year_{year2}": round(v2, 2),
                "difference": round(diff, 2),
                "percent_change": round(pct, 1)
            }

        return {
            "comparison": f"{year1} vs {year2}",
            "equity": compare_metric(r1.equity, r2.equity),
            "gross_total": compare_metric(r1.gross_total, r2.gross_total),
            "tax": compare_metric(r1.tax, r2.tax),
            "net_total": compare_metric(r1.net_total, r2.net_total)
        }

    def search_compensation_data(self, query: str, year: Optional[int] = None) -> dict:
        """Search for specific metrics based on a query."""
        query_lower = query.lower()

        # Map common terms to YearRecord field names
        term_mapping = {
            "salary": ["base"],
            "base": ["base"],
            "equity": ["equity"],
            "vest": ["equity"],
            "stock": ["equity"],
            "gross": ["gross_total"],
            "tax": ["tax"],
            "net": ["net_total"],
            "take home": ["net_total"],
            "effective": ["effective_tax_rate"],
            "rate": ["effective_tax_rate"],
            "cumulative": ["cumulative_net_total"],
            "running": ["cumulative_net_total"]
        }

        matched_keys = []
        for term, keys in term_mapping.items():
            if term in query_lower:
                matched_keys.extend(k for k in keys if k not in matched_keys)

        wants_exit = any(term in query_lower for term in ("exit", "capital gain", "liquidity", "acquisition", "ipo"))

        if not matched_keys and not wants_exit:
            return {
                "query": query,
                "message": "No matching metrics found. Try terms like: salary, equity, gross, tax, net, effective rate, cumulative, exit, capital gains."
            }

        result: Dict[str, Any] = {"query": query}
        if wants_exit:
            result["exit_valuation"] = exit_valuation_to_dict(self.projection)
        if not matched_keys:
            return result

        if year is not None:
            record = self.projection.get_year(year)
            if record is None:
                return {"error": f"Year {year} is not in the projection"}
            result["year"] = year
            result["results"] = {key: round(getattr(record, key), 2) for key in matched_keys}
        else:
            result["years"] = {
                record.year: {key: round(getattr(record, key), 2) for key in matched_keys}
                for record in self.projection.yearly_schedule
            }
        return result


class MultiProgramTools:
    """Manager for multiple compensation plans.

    Discovers all available plans and caches their projections,
    allowing queries to specify which plan to use.
    """

    def __init__(self, base_path: str, default_program: Optional[str] = None):
        """Initialize and discover all available programs.

        Args:
            base_path: Path to the compensation-calculator root directory
            default_program: Default program to use when none specified
        """
        self.base_path = base_path
        self.programs: Dict[str, CompensationTools] = {}
        self.default_program = default_program
        self._discover_programs()

    def _discover_programs(self):
        """Discover and load all available programs."""
        input_params_path = os.path.join(self.base_path, 'input-parameters')

        if not os.path.exists(input_params_path):
            logger.warning("No input-parameters directory under %s", self.base_path)
            return

        for name in sorted(os.listdir(input_params_path)):
            program_dir = os.path.join(input_params_path, name)
            spec_path = os.path.join(program_dir, 'spec.json')

            if os.path.isdir(program_dir) and os.path.exists(spec_path):
                try:
                    self.programs[name] = CompensationTools(self.base_path, name)
                except (OSError, ValueError) as e:
                    # Skip the plan but keep serving the others
                    logger.warning("Failed to load program '%s': %s", name, e)

        logger.info("Loaded %d programs from %s", len(self.programs), input_params_path)

        if self.default_program is None and self.programs:
            self.default_program = list(self.programs.keys())[0]

    def _get_program(self, program: Optional[str] = None, require_explicit: bool = False) -> CompensationTools:
        """Get the specified program or default.

        Args:
            program: Program name to use, or None for default
            require_explicit: If True, raise error when program not specified and multiple exist
        """
        if program is None and len(self.programs) > 1 and require_explicit:
            available = list(self.programs.keys())
            raise ValueError(
                f"Multiple programs available: {available}. Please specify which program to query."
            )

        program_name = program or self.default_program

        if program_name not in self.programs:
            available = list(self.programs.keys())
            raise ValueError(
                f"Program '{program_name}' not found. Available programs: {available}"
            )

        return self.programs[program_name]

    def list_programs(self) -> dict:
        """List all available programs."""
        programs_info = {}
        for name, tools in self.programs.items():
            programs_info[name] = {
                "base_salary": tools.params.base_salary,
                "equity_percentage": tools.params.equity_percentage,
                "vesting_years": tools.params.vesting_years,
                "company_value": tools.params.company_value
            }

        return {
            "available_programs": list(self.programs.keys()),
            "default_program": self.default_program,
            "programs_info": programs_info
        }

    def reload_programs(self) -> dict:
        """Reload all programs from disk, refreshing the cache."""
        old_programs = set(self.programs.keys())

        self.programs.clear()
        self.default_program = None
        self._discover_programs()

        new_programs = set(self.programs.keys())

        return {
            "status": "success",
            "message": f"Reloaded {len(self.programs)} programs",
            "programs_loaded": list(self.programs.keys()),
            "default_program": self.default_program,
            "changes": {
                "added": sorted(new_programs - old_programs),
                "removed": sorted(old_programs - new_programs),
                "reloaded": sorted(old_programs & new_programs)
            }
        }

    def get_program_overview(self, program: Optional[str] = None) -> dict:
        result = self._get_program(program, require_explicit=True).get_program_overview()
        result["program"] = program or self.default_program
        return result

    def get_yearly_compensation(self, year: int, program: Optional[str] = None) -> dict:
        result = self._get_program(program, require_explicit=True).get_yearly_compensation(year)
        result["program"] = program or self.default_program
        return result

    def get_projection_schedule(self, start_year: Optional[int] = None, end_year: Optional[int] = None,
                                program: Optional[str] = None) -> dict:
        result = self._get_program(program, require_explicit=True).get_projection_schedule(start_year, end_year)
        result["program"] = program or self.default_program
        return result

    def get_exit_valuation(self, program: Optional[str] = None) -> dict:
        result = self._get_program(program, require_explicit=True).get_exit_valuation()
        result["program"] = program or self.default_program
        return result

    def get_lifetime_totals(self, program: Optional[str] = None) -> dict:
        result = self._get_program(program, require_explicit=True).get_lifetime_totals()
        result["program"] = program or self.default_program
        return result

    def compare_years(self, year1: int, year2: int, program: Optional[str] = None) -> dict:
        result = self._get_program(program, require_explicit=True).compare_years(year1, year2)
        result["program"] = program or self.default_program
        return result

    def search_compensation_data(self, query: str, year: Optional[int] = None, program: Optional[str] = None) -> dict:
        result = self._get_program(program, require_explicit=True).search_compensation_data(query, year)
        result["program"] = program or self.default_program
        return result

    def compare_programs(self, program1: str, program2: str, metrics: Optional[List[str]] = None) -> dict:
        """Compare two plans and analyze which is better.

        Args:
            program1: First program name to compare
            program2: Second program name to compare
            metrics: Optional list of specific metrics to focus on. If None, compares all key metrics.
                     Options: 'total_gross', 'total_tax', 'total_net', 'net_exit_value',
                              'exit_tax', 'net_including_exit'
        """
        if program1 not in self.programs:
            return {"error": f"Program '{program1}' not found. Available: {list(self.programs.keys())}"}
        if program2 not in self.programs:
            return {"error": f"Program '{program2}' not found. Available: {list(self.programs.keys())}"}

        totals1 = self.programs[program1].get_lifetime_totals()
        totals2 = self.programs[program2].get_lifetime_totals()
        exit1 = self.programs[program1].get_exit_valuation()
        exit2 = self.programs[program2].get_exit_valuation()

        def compare_metric(val1: float, val2: float, higher_is_better: bool = True) -> dict:
            """Compare a metric and determine winner."""
            diff = val2 - val1
            if val1 != 0:
                pct_diff = (diff / abs(val1)) * 100
            else:
                pct_diff = 100 if val2 > 0 else (-100 if val2 < 0 else 0)

            if higher_is_better:
                winner = program1 if val1 > val2 else (program2 if val2 > val1 else "tie")
            else:
                winner = program1 if val1 < val2 else (program2 if val2 < val1 else "tie")

            return {
                program1: round(val1, 2),
                program2: round(val2, 2),
                "difference": round(diff, 2),
                "percent_difference": round(pct_diff, 1),
                "better": winner,
                "higher_is_better": higher_is_better
            }

        all_metrics = {
            "total_gross": ("10-Year Gross Compensation", totals1["horizon_totals"]["gross"], totals2["horizon_totals"]["gross"], True),
            "total_tax": ("10-Year Income Tax", totals1["horizon_totals"]["tax"], totals2["horizon_totals"]["tax"], False),
            "total_net": ("10-Year Net Compensation", totals1["horizon_totals"]["net"], totals2["horizon_totals"]["net"], True),
            "net_exit_value": ("Net Exit Value", exit1["net_exit_value"], exit2["net_exit_value"], True),
            "exit_tax": ("Exit Capital Gains Tax", exit1["tax"], exit2["tax"], False),
            "net_including_exit": ("Net Compensation Including Exit", totals1["net_including_exit"], totals2["net_including_exit"], True)
        }

        if metrics:
            metrics_to_compare = {k: v for k, v in all_metrics.items() if k in metrics}
            if not metrics_to_compare:
                return {
                    "error": f"No valid metrics specified. Available metrics: {list(all_metrics.keys())}"
                }
        else:
            metrics_to_compare = all_metrics

        comparison: Dict[str, Any] = {"programs": [program1, program2], "metrics": {}}
        wins = {program1: 0, program2: 0, "tie": 0}

        for key, (name, val1, val2, higher_is_better) in metrics_to_compare.items():
            result = compare_metric(val1, val2, higher_is_better)
            comparison["metrics"][key] = {"description": name, **result}
            wins[result["better"]] += 1

        if wins[program1] > wins[program2]:
            overall_winner = program1
        elif wins[program2] > wins[program1]:
            overall_winner = program2
        else:
            overall_winner = "tie"

        comparison["summary"] = {
            "metrics_compared": len(metrics_to_compare),
            "wins": {
                program1: wins[program1],
                program2: wins[program2],
                "tied": wins["tie"]
            },
            "overall_better": overall_winner
        }

        if overall_winner == "tie":
            recommendation = f"Both programs are roughly equivalent, each winning {wins[program1]} metrics."
        else:
            loser = program2 if overall_winner == program1 else program1
            recommendation = (f"'{overall_winner}' appears better overall, winning {wins[overall_winner]} of "
                              f"{len(metrics_to_compare)} metrics compared to {wins[loser]} for '{loser}'.")
            net_metric = comparison["metrics"].get("net_including_exit")
            if net_metric and net_metric["better"] != "tie":
                recommendation += (f" '{net_metric['better']}' yields ${abs(net_metric['difference']):,.0f} more "
                                   f"net compensation including the exit.")

        comparison["recommendation"] = recommendation
        return comparison
