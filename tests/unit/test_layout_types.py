"""
Unit tests for the grid layout data model.

Tests cell variants, derived panel ids, serialisation records and the
width/height balance helpers.
"""

import pytest

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from layout_types import (
    ANY_DEVICE,
    ContinuationCell,
    GridLayout,
    GridLayoutDefinition,
    PanelPosition,
    Priority,
    Row,
    SimpleCell,
    SpanningCell,
    Viewport,
    cell_from_dict,
    height_total,
    is_balanced,
    new_id,
    row_span_of,
    row_width_total,
)


class TestCellVariants:
    """Test the tagged cell variants."""

    @pytest.mark.unit
    def test_simple_cell_defaults(self):
        """SimpleCell should default to an 'any' device at full width."""
        cell = SimpleCell('c1')
        assert cell.device_type == ANY_DEVICE
        assert cell.width == 100.0
        assert cell.priority is Priority.SECONDARY
        assert row_span_of(cell) == 1

    @pytest.mark.unit
    def test_spanning_cell_span(self):
        """SpanningCell should report its row span."""
        cell = SpanningCell('c1', width=50.0, row_span=3)
        assert row_span_of(cell) == 3

    @pytest.mark.unit
    def test_spanning_cell_rejects_zero_span(self):
        """A span below one row is invalid."""
        with pytest.raises(ValueError):
            SpanningCell('c1', row_span=0)

    @pytest.mark.unit
    def test_continuation_counts_as_one_row(self):
        """A continuation placeholder covers only its own row."""
        assert row_span_of(ContinuationCell('c1', 40.0)) == 1

    @pytest.mark.unit
    def test_priority_parse_defaults_to_secondary(self):
        """Unknown priority strings should fall back to SECONDARY."""
        assert Priority.parse('primary') is Priority.PRIMARY
        assert Priority.parse('urgent') is Priority.SECONDARY
        assert Priority.parse(None) is Priority.SECONDARY

    @pytest.mark.unit
    def test_new_id_prefix(self):
        """Generated ids carry the prefix and are unique."""
        first = new_id('row')
        second = new_id('row')
        assert first.startswith('row-')
        assert first != second


class TestCellRecords:
    """Test cell record round trips."""

    @pytest.mark.unit
    def test_spanning_record_has_row_span(self):
        """Spanning cells should store rowSpan."""
        data = SpanningCell('c1', device_type='camera', width=60.0, row_span=2).to_dict()
        assert data['rowSpan'] == 2
        assert data['deviceType'] == 'camera'

    @pytest.mark.unit
    def test_simple_record_has_no_row_span(self):
        """Simple cells should not store rowSpan."""
        assert 'rowSpan' not in SimpleCell('c1').to_dict()

    @pytest.mark.unit
    def test_cell_from_dict_picks_variant(self):
        """The record shape should select the cell variant."""
        assert isinstance(cell_from_dict({'id': 'a', 'width': 50}), SimpleCell)
        assert isinstance(cell_from_dict({'id': 'a', 'width': 50, 'rowSpan': 2}), SpanningCell)
        assert isinstance(cell_from_dict({'id': 'a', 'width': 50, 'continuation': True}), ContinuationCell)

    @pytest.mark.unit
    def test_cell_from_dict_row_span_one_is_simple(self):
        """rowSpan of 1 is a simple cell."""
        assert isinstance(cell_from_dict({'id': 'a', 'rowSpan': 1}), SimpleCell)

    @pytest.mark.unit
    def test_cell_from_dict_requires_id(self):
        """A record without an id cannot be loaded."""
        with pytest.raises(KeyError):
            cell_from_dict({'width': 50})

    @pytest.mark.unit
    def test_cell_from_dict_missing_device_type(self):
        """Missing deviceType means any device."""
        cell = cell_from_dict({'id': 'a'})
        assert cell.device_type == ANY_DEVICE


class TestGridLayout:
    """Test GridLayout derived data."""

    @pytest.mark.unit
    def test_panel_ids_dedupe_in_order(self, hybrid_grid):
        """panel_ids should list each cell id once, in first-seen order."""
        assert hybrid_grid.panel_ids == ['left', 'tr', 'br']

    @pytest.mark.unit
    def test_panel_ids_follow_edits(self, stacked_grid):
        """panel_ids should reflect the rows after a change."""
        stacked_grid.rows.pop()
        assert stacked_grid.panel_ids == ['a', 'b', 'c']

    @pytest.mark.unit
    def test_empty_layout(self):
        """An empty layout has no panels."""
        assert GridLayout().panel_ids == []

    @pytest.mark.unit
    def test_stored_panel_ids_ignored(self):
        """panelIds in a record should be re-derived from rows."""
        grid = GridLayout.from_dict({
            'rows': [{'id': 'r', 'cells': [{'id': 'x', 'width': 100}], 'height': 100}],
            'panelIds': ['stale', 'x'],
        })
        assert grid.panel_ids == ['x']

    @pytest.mark.unit
    def test_record_round_trip_keeps_continuation(self, hybrid_grid):
        """Continuations should survive a record round trip."""
        restored = GridLayout.from_dict(hybrid_grid.to_dict())
        assert isinstance(restored.rows[1].cells[0], ContinuationCell)
        assert isinstance(restored.rows[0].cells[0], SpanningCell)
        assert restored.rows[0].cells[0].row_span == 2


class TestBalanceHelpers:
    """Test the width and height sum helpers."""

    @pytest.mark.unit
    def test_balanced_grid(self, stacked_grid, hybrid_grid):
        """Sample grids sum to 100 in every row and in height."""
        assert is_balanced(stacked_grid)
        assert is_balanced(hybrid_grid)

    @pytest.mark.unit
    def test_row_width_counts_continuation(self, hybrid_grid):
        """Continuation footprints count toward the row width."""
        assert row_width_total(hybrid_grid.rows[1]) == pytest.approx(100.0)

    @pytest.mark.unit
    def test_unbalanced_width(self, stacked_grid):
        """A row off by more than the tolerance is unbalanced."""
        stacked_grid.rows[1].cells[0].width = 40.0
        assert not is_balanced(stacked_grid)

    @pytest.mark.unit
    def test_unbalanced_height(self, stacked_grid):
        """Heights off by more than the tolerance are unbalanced."""
        stacked_grid.rows[0].height = 50.0
        assert height_total(stacked_grid) == pytest.approx(110.0)
        assert not is_balanced(stacked_grid)

    @pytest.mark.unit
    def test_empty_row_exempt(self):
        """An empty row is exempt from the width check."""
        grid = GridLayout(rows=[Row('r', [], 100.0)])
        assert is_balanced(grid)


class TestDefinition:
    """Test GridLayoutDefinition behaviour."""

    @pytest.mark.unit
    def test_layout_for_creates_missing_viewport(self):
        """A missing viewport should read as an empty layout."""
        definition = GridLayoutDefinition(id='d', name='D')
        grid = definition.layout_for(Viewport.MOBILE)
        assert grid.rows == []
        assert Viewport.MOBILE in definition.layouts

    @pytest.mark.unit
    def test_touch_updates_timestamp(self):
        """touch() should move updated_at forward."""
        definition = GridLayoutDefinition(id='d', name='D', updated_at=0)
        definition.touch()
        assert definition.updated_at > 0

    @pytest.mark.unit
    def test_record_round_trip(self, hybrid_grid):
        """Definitions should survive a record round trip."""
        definition = GridLayoutDefinition(
            id='d', name='D', description='desc',
            layouts={Viewport.DESKTOP: hybrid_grid},
            is_default=True, created_at=1, updated_at=2, icon='view_quilt',
        )
        data = definition.to_dict()
        assert set(data['layouts']) == {'desktop'}
        assert data['isDefault'] is True

        restored = GridLayoutDefinition.from_dict(data)
        assert restored.id == 'd'
        assert restored.icon == 'view_quilt'
        assert restored.layout_for(Viewport.DESKTOP).panel_ids == ['left', 'tr', 'br']

    @pytest.mark.unit
    def test_unknown_viewport_rejected(self):
        """An unknown viewport name cannot be loaded."""
        with pytest.raises(ValueError):
            GridLayoutDefinition.from_dict({'id': 'd', 'layouts': {'watch': {'rows': []}}})


class TestPanelPosition:
    """Test PanelPosition helpers."""

    @pytest.mark.unit
    def test_cells_covered(self):
        """cells() should list every covered grid unit."""
        position = PanelPosition('p', x=6, y=0, width=2, height=2)
        assert position.cells() == {(6, 0), (7, 0), (6, 1), (7, 1)}

    @pytest.mark.unit
    def test_record_uses_panel_id_key(self):
        """Records use the panelId key."""
        assert PanelPosition('p', 0, 0, 12, 1).to_dict()['panelId'] == 'p'
