#!/usr/bin/env python3
"""MCP Server for Compensation Calculator.

This server exposes compensation projections as MCP tools,
allowing AI assistants to answer questions about a job offer's
salary, equity vesting, taxes and exit value.
"""

import os
import sys
import json
import asyncio
import logging
from typing import Any, Callable

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from tools import MultiProgramTools, calculate_projection


# stdout carries the MCP protocol, so diagnostics go to stderr
logging.basicConfig(level=logging.WARNING, stream=sys.stderr,
                    format='%(asctime)s %(levelname)s %(name)s: %(message)s')
logger = logging.getLogger(__name__)

# Create the MCP server
server = Server("compensation-calculator")

# Global tools instance (initialized on startup)
tools: MultiProgramTools | None = None


def get_tools() -> MultiProgramTools:
    """Get or initialize the tools instance."""
    global tools
    if tools is None:
        # Default program can be set via COMPENSATION_CALCULATOR_PROGRAM env var
        default_program = os.environ.get('COMPENSATION_CALCULATOR_PROGRAM')
        base_path = os.path.join(os.path.dirname(__file__), '..')
        tools = MultiProgramTools(base_path, default_program)
    return tools


# Common program parameter schema
PROGRAM_PARAM = {
    "type": "string",
    "description": "The plan name (folder in input-parameters). If not specified, uses the default plan. Use list_programs to see available plans."
}


def _integer(description: str) -> dict:
    return {"type": "integer", "description": description}


def _schema(required: tuple = (), program: bool = True, **properties) -> dict:
    """JSON schema for a tool's arguments; plan tools also take `program`."""
    if program:
        properties["program"] = PROGRAM_PARAM
    return {"type": "object", "properties": properties, "required": list(required)}


TOOLS = [
    Tool(
        name="list_programs",
        description="List all available compensation plans with their salary, equity and valuation inputs.",
        inputSchema=_schema(program=False)
    ),
    Tool(
        name="reload_programs",
        description="Reload all compensation plans from disk. Use this after adding, modifying, or removing plan spec.json files to refresh the cache without restarting the server.",
        inputSchema=_schema(program=False)
    ),
    Tool(
        name="get_program_overview",
        description="Get an overview of a compensation plan: its parameters, equity grant value, yearly vesting amount, 10-year net and net exit value. Use this first to understand the plan.",
        inputSchema=_schema()
    ),
    Tool(
        name="get_yearly_compensation",
        description="Get base salary, vested equity, gross total, income tax, net total, effective tax rate and cumulative net for one projection year.",
        inputSchema=_schema(("year",), year=_integer("Projection year, 1 through 10"))
    ),
    Tool(
        name="get_projection_schedule",
        description="Get the year-by-year compensation schedule, optionally limited to a range of years.",
        inputSchema=_schema(start_year=_integer("Optional: first year to include (default 1)"),
                            end_year=_integer("Optional: last year to include (default 10)"))
    ),
    Tool(
        name="get_exit_valuation",
        description="Get the value of the equity grant at exit (equity value times exit multiple), the capital gains tax on it and the net exit value.",
        inputSchema=_schema()
    ),
    Tool(
        name="get_lifetime_totals",
        description="Get gross, tax and net totals across the 10-year horizon, split into vesting and post-vesting years, and the totals including the exit.",
        inputSchema=_schema()
    ),
    Tool(
        name="compare_years",
        description="Compare equity, gross, tax and net compensation between two projection years.",
        inputSchema=_schema(("year1", "year2"), year1=_integer("First year to compare"),
                            year2=_integer("Second year to compare"))
    ),
    Tool(
        name="search_compensation_data",
        description="Search for specific compensation metrics. Use this when looking for values like 'equity in year 3' or 'exit tax'.",
        inputSchema=_schema(
            ("query",),
            query={"type": "string",
                   "description": "Natural language query, e.g., 'net pay', 'effective tax rate', 'capital gains at exit'"},
            year=_integer("Optional: specific year to search in"))
    ),
    Tool(
        name="calculate_projection",
        description="Calculate a projection for ad-hoc inputs without a saved plan. Rates and the equity percentage are fractions (0.35 for 35%). Omitted inputs use the defaults.",
        inputSchema=_schema(
            program=False,
            baseSalary={"type": "number", "description": "Annual base salary"},
            equityPercentage={"type": "number", "description": "Equity grant as a fraction of the company"},
            vestingYears=_integer("Vesting period in years (at least 1)"),
            companyValue={"type": "number", "description": "Company valuation today"},
            exitMultiple={"type": "number", "description": "Company value at exit divided by value today"},
            includeTax={"type": "boolean", "description": "Whether to apply taxes"},
            federalTaxRate={"type": "number", "description": "Flat federal income tax rate"},
            stateTaxRate={"type": "number", "description": "Flat state income tax rate"},
            cityTaxRate={"type": "number", "description": "Flat city income tax rate"})
    ),
    Tool(
        name="compare_programs",
        description="Compare two compensation plans and get analysis of which is better. Compares 10-year gross, tax and net, and the exit value. Returns a recommendation on which plan is better overall.",
        inputSchema=_schema(
            ("program1", "program2"),
            program=False,
            program1={"type": "string", "description": "First plan name to compare"},
            program2={"type": "string", "description": "Second plan name to compare"},
            metrics={
                "type": "array",
                "items": {"type": "string"},
                "description": "Optional: specific metrics to compare. Options: 'total_gross', 'total_tax', 'total_net', 'net_exit_value', 'exit_tax', 'net_including_exit'. If not specified, compares all metrics."
            })
    ),
]


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available compensation tools."""
    return TOOLS


# Handlers for tools that query saved plans: (tools, arguments) -> result dict
PLAN_TOOL_HANDLERS: dict[str, Callable[[MultiProgramTools, dict[str, Any]], dict]] = {
    "list_programs": lambda t, a: t.list_programs(),
    "reload_programs": lambda t, a: t.reload_programs(),
    "get_program_overview": lambda t, a: t.get_program_overview(a.get("program")),
    "get_yearly_compensation": lambda t, a: t.get_yearly_compensation(a["year"], a.get("program")),
    "get_projection_schedule": lambda t, a: t.get_projection_schedule(
        a.get("start_year"), a.get("end_year"), a.get("program")),
    "get_exit_valuation": lambda t, a: t.get_exit_valuation(a.get("program")),
    "get_lifetime_totals": lambda t, a: t.get_lifetime_totals(a.get("program")),
    "compare_years": lambda t, a: t.compare_years(a["year1"], a["year2"], a.get("program")),
    "search_compensation_data": lambda t, a: t.search_compensation_data(
        a["query"], a.get("year"), a.get("program")),
    "compare_programs": lambda t, a: t.compare_programs(a["program1"], a["program2"], a.get("metrics")),
}


def dispatch(name: str, arguments: dict[str, Any]) -> dict:
    """Run the named tool and return its JSON-serializable result."""
    if name == "calculate_projection":
        # Ad-hoc inputs never touch the plan cache
        return calculate_projection(arguments)
    handler = PLAN_TOOL_HANDLERS.get(name)
    if handler is None:
        return {"error": f"Unknown tool: {name}"}
    return handler(get_tools(), arguments)


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls; any failure becomes an error payload."""
    try:
        payload = json.dumps(dispatch(name, arguments or {}), indent=2, default=str)
    except Exception as e:
        logger.warning("Tool %s failed: %s", name, e)
        payload = json.dumps({"error": str(e)}, indent=2)
    return [TextContent(type="text", text=payload)]


async def main():
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
