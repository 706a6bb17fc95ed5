"""
Unit tests for grid to position conversion.

Tests the column mapping, occupancy handling for spanning cells, panel id
resolution, and the no-overlap guarantee on awkward input.
"""

import pytest

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from layout_converter import convert, convert_definition, grid_units, resolve_panel_id
from layout_types import (
    ContinuationCell,
    GridLayout,
    GridLayoutDefinition,
    Row,
    SimpleCell,
    SpanningCell,
    Viewport,
)


def _assert_no_overlap(positions):
    seen = set()
    for position in positions:
        covered = position.cells()
        assert not (seen & covered), f"{position.panel_id} overlaps"
        seen |= covered
        assert 0 <= position.x and position.x + position.width <= 12
        assert position.width >= 1 and position.height >= 1


class TestGridUnits:
    """Test percentage to column rounding."""

    @pytest.mark.unit
    @pytest.mark.parametrize('percent,units', [
        (100.0, 12),
        (50.0, 6),
        (33.33, 4),
        (25.0, 3),
        (20.0, 2),    # 2.4 rounds down
        (62.5, 8),    # 7.5 rounds half up
        (0.0, 0),
    ])
    def test_rounding(self, percent, units):
        """Widths map to the nearest column count, halves rounding up."""
        assert grid_units(percent) == units


class TestConvert:
    """Test convert() on well-formed layouts."""

    @pytest.mark.unit
    def test_stacked_rows(self, stacked_grid):
        """Full, halves, thirds map to the expected 6 positions."""
        positions = convert(stacked_grid)

        assert [p.y for p in positions] == [0, 1, 1, 2, 2, 2]
        assert [p.x for p in positions] == [0, 0, 6, 0, 4, 8]
        assert [p.width for p in positions] == [12, 6, 6, 4, 4, 4]
        assert all(p.height == 1 for p in positions)

    @pytest.mark.unit
    def test_hybrid(self, hybrid_grid):
        """A spanning cell yields one tall position and no duplicate."""
        positions = {p.panel_id: p for p in convert(hybrid_grid)}

        assert len(positions) == 3
        assert (positions['left'].x, positions['left'].y) == (0, 0)
        assert (positions['left'].width, positions['left'].height) == (6, 2)
        assert (positions['tr'].x, positions['tr'].y, positions['tr'].height) == (6, 0, 1)
        assert (positions['br'].x, positions['br'].y, positions['br'].height) == (6, 1, 1)

    @pytest.mark.unit
    def test_empty_layout(self):
        """An empty layout converts to no positions."""
        assert convert(GridLayout()) == []

    @pytest.mark.unit
    def test_deterministic(self, hybrid_grid):
        """Repeated conversion gives the same result."""
        assert convert(hybrid_grid) == convert(hybrid_grid)

    @pytest.mark.unit
    def test_known_device_type_is_panel_id(self):
        """Known device kinds use the device type as panel id."""
        grid = GridLayout(rows=[Row('r', [
            SimpleCell('c1', device_type='telescope', width=50.0),
            SimpleCell('c2', device_type='any', width=50.0),
        ], 100.0)])
        assert [p.panel_id for p in convert(grid)] == ['telescope', 'c2']

    @pytest.mark.unit
    def test_resolve_panel_id_custom(self):
        """Unknown device kinds fall back to the cell id."""
        assert resolve_panel_id(SimpleCell('custom-1', device_type='spectrograph')) == 'custom-1'

    @pytest.mark.unit
    def test_convert_definition_all_viewports(self, hybrid_grid, stacked_grid):
        """Every viewport of a definition is converted."""
        definition = GridLayoutDefinition(
            id='d', name='D',
            layouts={Viewport.DESKTOP: hybrid_grid, Viewport.MOBILE: stacked_grid},
        )
        result = convert_definition(definition)
        assert set(result) == {Viewport.DESKTOP, Viewport.MOBILE}
        assert len(result[Viewport.MOBILE]) == 6


class TestConvertRobustness:
    """Test convert() on inconsistent or drifting input."""

    @pytest.mark.unit
    def test_right_side_spanning_cell(self):
        """A spanning cell on the right keeps its column in the row below."""
        grid = GridLayout(rows=[
            Row('r1', [SimpleCell('a', width=50.0), SpanningCell('b', width=50.0, row_span=2)], 50.0),
            Row('r2', [SimpleCell('c', width=50.0), ContinuationCell('b', 50.0)], 50.0),
        ])
        positions = {p.panel_id: p for p in convert(grid)}
        assert (positions['b'].x, positions['b'].height) == (6, 2)
        assert (positions['c'].x, positions['c'].y, positions['c'].width) == (0, 1, 6)
        _assert_no_overlap(convert(grid))

    @pytest.mark.unit
    def test_missing_continuation_does_not_overlap(self):
        """Legacy data without a placeholder is pushed past the footprint."""
        grid = GridLayout(rows=[
            Row('r1', [SpanningCell('a', width=50.0, row_span=2), SimpleCell('b', width=50.0)], 50.0),
            Row('r2', [SimpleCell('c', width=50.0), SimpleCell('d', width=50.0)], 50.0),
        ])
        positions = convert(grid)
        _assert_no_overlap(positions)
        assert 'c' not in [p.panel_id for p in positions]

    @pytest.mark.unit
    def test_rounding_overflow_clipped(self):
        """Rounding drift past column 12 is clipped."""
        grid = GridLayout(rows=[Row('r', [
            SimpleCell('a', width=54.2),   # 6.5 -> 7
            SimpleCell('b', width=50.0),   # 6, only 5 left
        ], 100.0)])
        positions = convert(grid)
        assert [p.width for p in positions] == [7, 5]
        _assert_no_overlap(positions)

    @pytest.mark.unit
    def test_zero_width_cell_gets_one_column(self):
        """A degenerate width still produces a visible position."""
        grid = GridLayout(rows=[Row('r', [
            SimpleCell('a', width=0.0),
            SimpleCell('b', width=100.0),
        ], 100.0)])
        positions = convert(grid)
        assert positions[0].width == 1
        _assert_no_overlap(positions)

    @pytest.mark.unit
    def test_span_past_last_row(self):
        """A span larger than the remaining rows is kept as given."""
        grid = GridLayout(rows=[
            Row('r1', [SpanningCell('a', width=100.0, row_span=3)], 100.0),
        ])
        positions = convert(grid)
        assert positions[0].height == 3
