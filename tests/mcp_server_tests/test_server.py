"""Tests for the MCP server module."""

import os
import sys
import json
import shutil
import pytest
from unittest.mock import patch

# Add src and mcp-server to path for imports BEFORE importing mcp modules
MCP_SERVER_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '../../mcp-server'))
SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src'))

if MCP_SERVER_PATH not in sys.path:
    sys.path.insert(0, MCP_SERVER_PATH)
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from mcp.types import Tool, TextContent

# Import server module - need to import from the mcp-server directory
import importlib.util
server_spec = importlib.util.spec_from_file_location("mcp_server", os.path.join(MCP_SERVER_PATH, "server.py"))
mcp_server = importlib.util.module_from_spec(server_spec)
server_spec.loader.exec_module(mcp_server)

tools_spec = importlib.util.spec_from_file_location("tools", os.path.join(MCP_SERVER_PATH, "tools.py"))
tools_module = importlib.util.module_from_spec(tools_spec)
tools_spec.loader.exec_module(tools_module)
MultiProgramTools = tools_module.MultiProgramTools


# Path to the test fixtures
FIXTURES_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), 'fixtures'))


@pytest.fixture
def fixture_tools(tmp_path):
    """Install a MultiProgramTools over both fixture plans as the server's tools."""
    input_params_dir = tmp_path / 'input-parameters'
    for name in ('testprogram', 'notaxprogram'):
        shutil.copytree(os.path.join(FIXTURES_PATH, name), str(input_params_dir / name))
    mcp_server.tools = MultiProgramTools(str(tmp_path), 'testprogram')
    yield mcp_server.tools
    mcp_server.tools = None


async def call(name, arguments):
    result = await mcp_server.call_tool(name, arguments)
    assert isinstance(result, list)
    assert len(result) == 1
    assert isinstance(result[0], TextContent)
    return json.loads(result[0].text)


class TestServerConfiguration:
    """Tests for server configuration and setup."""

    def test_server_name(self):
        assert mcp_server.server.name == "compensation-calculator"

    def test_program_param_schema(self):
        assert mcp_server.PROGRAM_PARAM['type'] == 'string'
        assert 'description' in mcp_server.PROGRAM_PARAM


class TestGetTools:
    """Tests for get_tools function."""

    def setup_method(self):
        mcp_server.tools = None

    def teardown_method(self):
        mcp_server.tools = None

    def test_get_tools_initializes_on_first_call(self):
        tools = mcp_server.get_tools()

        assert tools is not None
        # Check by class name since we're using dynamic imports
        assert tools.__class__.__name__ == 'MultiProgramTools'
        assert 'sample' in tools.programs

    def test_get_tools_returns_cached_instance(self):
        assert mcp_server.get_tools() is mcp_server.get_tools()

    @patch.dict(os.environ, {'COMPENSATION_CALCULATOR_PROGRAM': 'sample'})
    def test_get_tools_uses_env_default_program(self):
        tools = mcp_server.get_tools()
        assert tools.default_program == 'sample'


class TestListTools:
    """Tests for list_tools function."""

    @pytest.mark.asyncio
    async def test_list_tools_contains_expected_tools(self):
        tools = await mcp_server.list_tools()
        assert all(isinstance(t, Tool) for t in tools)

        expected_tools = {
            'list_programs',
            'reload_programs',
            'get_program_overview',
            'get_yearly_compensation',
            'get_projection_schedule',
            'get_exit_valuation',
            'get_lifetime_totals',
            'compare_years',
            'search_compensation_data',
            'calculate_projection',
            'compare_programs',
        }
        assert {t.name for t in tools} == expected_tools

    @pytest.mark.asyncio
    async def test_tools_have_descriptions_and_schemas(self):
        tools = await mcp_server.list_tools()
        for tool in tools:
            assert tool.description
            assert tool.inputSchema['type'] == 'object'

    @pytest.mark.asyncio
    async def test_required_arguments(self):
        tools = {t.name: t for t in await mcp_server.list_tools()}
        assert tools['get_yearly_compensation'].inputSchema['required'] == ['year']
        assert tools['compare_years'].inputSchema['required'] == ['year1', 'year2']
        assert tools['search_compensation_data'].inputSchema['required'] == ['query']
        assert tools['compare_programs'].inputSchema['required'] == ['program1', 'program2']


class TestCallTool:
    """Tests for call_tool function."""

    @pytest.mark.asyncio
    async def test_call_list_programs(self, fixture_tools):
        data = await call('list_programs', {})
        assert data['available_programs'] == ['notaxprogram', 'testprogram']
        assert data['default_program'] == 'testprogram'

    @pytest.mark.asyncio
    async def test_call_get_program_overview(self, fixture_tools):
        data = await call('get_program_overview', {'program': 'testprogram'})
        assert data['equity']['yearly_equity'] == 250000

    @pytest.mark.asyncio
    async def test_call_get_yearly_compensation(self, fixture_tools):
        data = await call('get_yearly_compensation', {'year': 1, 'program': 'testprogram'})
        assert data['tax'] == pytest.approx(169186.2)

    @pytest.mark.asyncio
    async def test_call_get_yearly_compensation_out_of_range(self, fixture_tools):
        data = await call('get_yearly_compensation', {'year': 42, 'program': 'testprogram'})
        assert 'error' in data

    @pytest.mark.asyncio
    async def test_call_get_projection_schedule(self, fixture_tools):
        data = await call('get_projection_schedule', {'start_year': 4, 'program': 'testprogram'})
        assert [y['year'] for y in data['years']] == list(range(4, 11))

    @pytest.mark.asyncio
    async def test_call_get_exit_valuation(self, fixture_tools):
        data = await call('get_exit_valuation', {'program': 'notaxprogram'})
        assert data['net_exit_value'] == 600000

    @pytest.mark.asyncio
    async def test_call_get_lifetime_totals(self, fixture_tools):
        data = await call('get_lifetime_totals', {'program': 'testprogram'})
        assert data['horizon_totals']['net'] == pytest.approx(1194028)

    @pytest.mark.asyncio
    async def test_call_compare_years(self, fixture_tools):
        data = await call('compare_years', {'year1': 4, 'year2': 5, 'program': 'testprogram'})
        assert data['equity']['difference'] == -250000

    @pytest.mark.asyncio
    async def test_call_search_compensation_data(self, fixture_tools):
        data = await call('search_compensation_data', {'query': 'salary', 'year': 7, 'program': 'testprogram'})
        assert data['results'] == {'base': 120000}

    @pytest.mark.asyncio
    async def test_call_compare_programs(self, fixture_tools):
        data = await call('compare_programs', {
            'program1': 'testprogram',
            'program2': 'notaxprogram',
            'metrics': ['net_exit_value']
        })
        assert data['summary']['overall_better'] == 'testprogram'

    @pytest.mark.asyncio
    async def test_call_reload_programs(self, fixture_tools):
        data = await call('reload_programs', {})
        assert data['changes']['reloaded'] == ['notaxprogram', 'testprogram']

    @pytest.mark.asyncio
    async def test_call_calculate_projection(self):
        data = await call('calculate_projection', {'baseSalary': 100000, 'includeTax': False})
        assert data['totals']['net'] == pytest.approx(2000000)

    @pytest.mark.asyncio
    async def test_call_calculate_projection_invalid(self):
        data = await call('calculate_projection', {'vestingYears': 0})
        assert 'vestingYears' in data['error']

    @pytest.mark.asyncio
    async def test_call_requires_program_when_several(self, fixture_tools):
        data = await call('get_exit_valuation', {})
        assert 'Multiple programs available' in data['error']

    @pytest.mark.asyncio
    async def test_call_missing_argument(self, fixture_tools):
        data = await call('get_yearly_compensation', {'program': 'testprogram'})
        assert 'error' in data

    @pytest.mark.asyncio
    async def test_call_unknown_tool(self, fixture_tools):
        data = await call('unknown_tool', {})
        assert 'Unknown tool' in data['error']


class TestDispatch:
    """Tests for the tool dispatch table."""

    def test_every_listed_tool_has_a_handler(self):
        names = {t.name for t in mcp_server.TOOLS}
        assert names == set(mcp_server.PLAN_TOOL_HANDLERS) | {'calculate_projection'}

    def test_plan_tools_accept_program(self):
        for tool in mcp_server.TOOLS:
            takes_program = 'program' in tool.inputSchema['properties']
            assert takes_program == (tool.name not in ('list_programs', 'reload_programs',
                                                       'calculate_projection', 'compare_programs'))

    def test_dispatch_unknown_tool(self):
        assert mcp_server.dispatch('unknown_tool', {}) == {"error": "Unknown tool: unknown_tool"}

    def test_dispatch_calculate_projection_skips_plan_cache(self):
        mcp_server.tools = None
        result = mcp_server.dispatch('calculate_projection', {'includeTax': False})
        assert result['exit_valuation']['net_exit_value'] == 2000000
        assert mcp_server.tools is None

    @pytest.mark.asyncio
    async def test_call_tool_without_arguments(self, fixture_tools):
        result = await mcp_server.call_tool('list_programs', None)
        assert 'available_programs' in json.loads(result[0].text)
