"""Render module for compensation projection output display."""

from render.renderers import (
    BaseRenderer,
    YearlyCompensationRenderer,
    ExitValueRenderer,
    YearDetailsRenderer,
    SummaryRenderer,
    create_renderer,
    parse_year_range,
    RENDERER_REGISTRY,
    RANGE_MODES,
)

__all__ = [
    'BaseRenderer',
    'YearlyCompensationRenderer',
    'ExitValueRenderer',
    'YearDetailsRenderer',
    'SummaryRenderer',
    'create_renderer',
    'parse_year_range',
    'RENDERER_REGISTRY',
    'RANGE_MODES',
]
