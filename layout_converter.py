# -*- coding: utf-8 -*-
"""
Grid to Position Conversion

Turns a GridLayout (rows of percentage-width cells) into absolute panel
placements on a 12-column grid, one grid row per layout row.

A spanning cell claims its footprint in an occupancy set. Any later cell
that starts on a claimed unit is pushed right by its own width without
being emitted, so a continuation placeholder (or inconsistent legacy data
at the same spot) never produces an overlapping position.

Row height percentages are not used here; the rendering layer applies
them to the unit-height grid rows.
"""

import math
from typing import Dict, List, Set, Tuple

from layout_types import (
    GRID_COLUMNS,
    KNOWN_DEVICE_TYPES,
    AnyCell,
    ContinuationCell,
    GridLayout,
    GridLayoutDefinition,
    PanelPosition,
    Viewport,
    row_span_of,
)


def grid_units(width_percent: float) -> int:
    """Convert a percentage width to grid units, rounding half up.

    Args:
        width_percent: Width as percent of the row.

    Returns:
        Nearest whole number of the 12 grid columns.
    """
    return int(math.floor(width_percent / 100.0 * GRID_COLUMNS + 0.5))


def resolve_panel_id(cell: AnyCell) -> str:
    """Panel id for a cell.

    Known device kinds share one logical slot named after the device
    type, so layouts addressing "the telescope panel" converge. Anything
    else is a custom panel keyed by its cell id.
    """
    device_type = getattr(cell, 'device_type', None)
    if device_type in KNOWN_DEVICE_TYPES:
        return device_type
    return cell.id


def convert(grid_layout: GridLayout) -> List[PanelPosition]:
    """Convert a grid layout to a list of panel positions.

    Pure and deterministic. Rounding drift that would push a cell past
    column 12 or into a claimed unit is clipped to the free columns.

    Args:
        grid_layout: Rows and cells of one viewport.

    Returns:
        Positions in row order, empty for an empty layout.
    """
    positions: List[PanelPosition] = []
    occupied: Set[Tuple[int, int]] = set()

    for y_pos, row in enumerate(grid_layout.rows):
        x_pos = 0
        for cell in row.cells:
            cell_width = grid_units(cell.width)

            if (x_pos, y_pos) in occupied or isinstance(cell, ContinuationCell):
                x_pos += cell_width
                continue

            if x_pos >= GRID_COLUMNS:
                continue

            row_span = row_span_of(cell)
            wanted = max(1, min(cell_width, GRID_COLUMNS - x_pos))
            width = _free_run(occupied, x_pos, y_pos, wanted, row_span)

            positions.append(PanelPosition(
                panel_id=resolve_panel_id(cell),
                x=x_pos,
                y=y_pos,
                width=width,
                height=row_span,
            ))

            for r in range(row_span):
                for c in range(width):
                    occupied.add((x_pos + c, y_pos + r))

            x_pos += max(cell_width, width)

    return positions


def _free_run(occupied: Set[Tuple[int, int]], x: int, y: int, wanted: int, row_span: int) -> int:
    """Number of consecutive free columns from x, at most wanted."""
    run = 0
    for c in range(wanted):
        if any((x + c, y + r) in occupied for r in range(row_span)):
            break
        run += 1
    return max(run, 1)


def convert_definition(definition: GridLayoutDefinition) -> Dict[Viewport, List[PanelPosition]]:
    """Convert every viewport of a layout definition."""
    return {
        viewport: convert(grid)
        for viewport, grid in definition.layouts.items()
    }
