# -*- coding: utf-8 -*-
"""
Structural Layout Edits

Add and delete rows and cells of a GridLayout while keeping the row width
and height sums at 100%. Spanning cells stay consistent with their
continuation placeholders: removing a row hands a spanning cell's origin
to the row below, and removing a spanning cell removes its footprint from
every row it covers.

All functions mutate the grid in place. panel_ids follows automatically
since it is derived from rows.
"""

import logging
from typing import List, Optional

from layout_errors import LayoutEditError
from layout_types import (
    ContinuationCell,
    GridLayout,
    Row,
    SimpleCell,
    SpanningCell,
    new_id,
    row_span_of,
)

logger = logging.getLogger('panel_grid')


def _check_row_index(grid: GridLayout, row_index: int) -> Row:
    if row_index < 0 or row_index >= len(grid.rows):
        raise LayoutEditError(f"Row index {row_index} out of range")
    return grid.rows[row_index]


def _rescale_heights(rows: List[Row], target: float) -> None:
    current = sum(row.height for row in rows)
    if not rows:
        return
    if current <= 0:
        for row in rows:
            row.height = target / len(rows)
        return
    for row in rows:
        row.height = row.height * target / current


def _fixed_width(row: Row) -> float:
    """Width taken by spanning cells and their continuations."""
    return sum(c.width for c in row.cells if not isinstance(c, SimpleCell))


def _share_evenly(row: Row) -> None:
    simple = [c for c in row.cells if isinstance(c, SimpleCell)]
    if not simple:
        return
    width = (100.0 - _fixed_width(row)) / len(simple)
    for cell in simple:
        cell.width = width


def _absorb_width(row: Row, freed: float) -> bool:
    """Give freed width to the simple cells of a row, proportionally.

    Returns:
        False if the row has no simple cell to take it.
    """
    simple = [c for c in row.cells if isinstance(c, SimpleCell)]
    if not simple:
        return False
    current = sum(c.width for c in simple)
    if current <= 0:
        for cell in simple:
            cell.width += freed / len(simple)
        return True
    for cell in simple:
        cell.width += freed * cell.width / current
    return True


def _fill_row(row: Row) -> None:
    """Scale the cells of a row so they sum to 100%."""
    current = sum(c.width for c in row.cells)
    if not row.cells:
        return
    if current <= 0:
        for cell in row.cells:
            cell.width = 100.0 / len(row.cells)
        return
    for cell in row.cells:
        cell.width = cell.width * 100.0 / current


def _origin_row_index(grid: GridLayout, cell_id: str, before: int) -> Optional[int]:
    """Index of the row above `before` that holds the spanning cell cell_id."""
    for index in range(before - 1, -1, -1):
        for cell in grid.rows[index].cells:
            if cell.id == cell_id and isinstance(cell, SpanningCell):
                return index
    return None


def _drop_continuations(grid: GridLayout, cell_id: str, start: int, stop: int, log: logging.Logger) -> None:
    """Remove the placeholders of cell_id from rows start..stop-1."""
    for index in range(start, min(stop, len(grid.rows))):
        covered = grid.rows[index]
        for i, placeholder in enumerate(covered.cells):
            if isinstance(placeholder, ContinuationCell) and placeholder.id == cell_id:
                del covered.cells[i]
                _rebalance_row(grid, index, placeholder.width, log)
                break


def _detach_footprints(grid: GridLayout, row_index: int, log: logging.Logger) -> None:
    """Stop every spanning footprint at this row.

    Spanning cells starting here become single-row cells, footprints from
    rows above end just before it. Afterwards the row holds simple cells
    only.
    """
    row = grid.rows[row_index]
    i = 0
    while i < len(row.cells):
        cell = row.cells[i]
        if isinstance(cell, SpanningCell):
            row.cells[i] = _resize_span(cell, 1)
            _drop_continuations(grid, cell.id, row_index + 1, row_index + cell.row_span, log)
        elif isinstance(cell, ContinuationCell):
            origin_index = _origin_row_index(grid, cell.id, row_index)
            if origin_index is not None:
                origin_row = grid.rows[origin_index]
                for j, origin in enumerate(origin_row.cells):
                    if origin.id == cell.id and isinstance(origin, SpanningCell):
                        origin_row.cells[j] = _resize_span(origin, row_index - origin_index)
                        _drop_continuations(
                            grid, cell.id, row_index + 1, origin_index + origin.row_span, log
                        )
                        break
            else:
                log.warning(f"Continuation {cell.id} in row {row.id} has no spanning origin")
        i += 1
    row.cells[:] = [c for c in row.cells if not isinstance(c, ContinuationCell)]


def _rebalance_row(grid: GridLayout, row_index: int, freed: float, log: logging.Logger) -> None:
    """Hand freed width back to a row, detaching footprints if needed."""
    row = grid.rows[row_index]
    if not row.cells or _absorb_width(row, freed):
        return
    log.info(f"Row {row.id} has no simple cell left, detaching its spanning footprints")
    _detach_footprints(grid, row_index, log)
    _fill_row(row)


def _resize_span(cell: SpanningCell, row_span: int):
    """Spanning cell with a new span, or a SimpleCell for span 1."""
    kwargs = {
        'id': cell.id,
        'device_type': cell.device_type,
        'name': cell.name,
        'priority': cell.priority,
        'width': cell.width,
    }
    if row_span > 1:
        return SpanningCell(row_span=row_span, **kwargs)
    return SimpleCell(**kwargs)


def add_row(grid: GridLayout, index: Optional[int] = None, cell_count: int = 1) -> Row:
    """Insert a row of evenly split simple cells.

    The new row takes 100/(n+1) percent height and the existing rows
    shrink proportionally.

    Args:
        grid: Layout to edit.
        index: Insert position, default appends.
        cell_count: Number of cells in the new row.

    Returns:
        The new row.

    Raises:
        LayoutEditError: On a bad index or cell count.
    """
    if cell_count < 1:
        raise LayoutEditError(f"A row needs at least one cell, got {cell_count}")
    if index is None:
        index = len(grid.rows)
    if index < 0 or index > len(grid.rows):
        raise LayoutEditError(f"Row index {index} out of range")
    if index < len(grid.rows):
        for cell in grid.rows[index].cells:
            if isinstance(cell, ContinuationCell):
                raise LayoutEditError(
                    f"Cannot insert a row inside the span of cell {cell.id}"
                )

    new_height = 100.0 / (len(grid.rows) + 1)
    _rescale_heights(grid.rows, 100.0 - new_height)

    row = Row(
        id=new_id('row'),
        cells=[
            SimpleCell(id=new_id('cell'), name=f'Panel {n + 1}', width=100.0 / cell_count)
            for n in range(cell_count)
        ],
        height=new_height,
    )
    grid.rows.insert(index, row)
    return row


def delete_row(grid: GridLayout, row_index: int, log: Optional[logging.Logger] = None) -> Row:
    """Remove a row and renormalise the remaining heights.

    Raises:
        LayoutEditError: On a bad index.
    """
    log = log or logger
    row = _check_row_index(grid, row_index)
    below = grid.rows[row_index + 1] if row_index + 1 < len(grid.rows) else None

    for cell in row.cells:
        if isinstance(cell, SpanningCell) and below is not None:
            for i, placeholder in enumerate(below.cells):
                if isinstance(placeholder, ContinuationCell) and placeholder.id == cell.id:
                    below.cells[i] = _resize_span(cell, cell.row_span - 1)
                    break
            else:
                log.warning(f"Spanning cell {cell.id} has no continuation in row {below.id}")
        elif isinstance(cell, ContinuationCell):
            origin_index = _origin_row_index(grid, cell.id, row_index)
            if origin_index is None:
                log.warning(f"Continuation {cell.id} in row {row.id} has no spanning origin")
                continue
            origin_row = grid.rows[origin_index]
            for i, origin in enumerate(origin_row.cells):
                if origin.id == cell.id and isinstance(origin, SpanningCell):
                    origin_row.cells[i] = _resize_span(origin, origin.row_span - 1)
                    break

    del grid.rows[row_index]
    _rescale_heights(grid.rows, 100.0)
    return row


def add_cell(
    grid: GridLayout,
    row_index: int,
    cell: Optional[SimpleCell] = None,
    index: Optional[int] = None,
) -> SimpleCell:
    """Add a simple cell to a row.

    The simple cells of the row then share the width not taken by
    spanning footprints evenly.

    Raises:
        LayoutEditError: On a bad index or if spanning cells fill the row.
    """
    row = _check_row_index(grid, row_index)
    if 100.0 - _fixed_width(row) <= 0:
        raise LayoutEditError(f"Row {row.id} has no room for another cell")

    if cell is None:
        cell = SimpleCell(id=new_id('cell'), name=f'Panel {len(grid.panel_ids) + 1}')
    if index is None:
        index = len(row.cells)
    if index < 0 or index > len(row.cells):
        raise LayoutEditError(f"Cell index {index} out of range in row {row.id}")

    row.cells.insert(index, cell)
    _share_evenly(row)
    return cell


def delete_cell(
    grid: GridLayout,
    row_index: int,
    cell_index: int,
    log: Optional[logging.Logger] = None,
) -> None:
    """Remove a cell and hand its width to its row neighbours.

    A spanning cell is removed together with all its continuations. A row
    left with spanning footprints only has them detached so its cells
    still fill it. Rows left without cells are removed.

    Raises:
        LayoutEditError: On a bad index or when targeting a continuation.
    """
    log = log or logger
    row = _check_row_index(grid, row_index)
    if cell_index < 0 or cell_index >= len(row.cells):
        raise LayoutEditError(f"Cell index {cell_index} out of range in row {row.id}")

    cell = row.cells[cell_index]
    if isinstance(cell, ContinuationCell):
        raise LayoutEditError(
            f"Cell {cell.id} continues a spanning cell, delete the spanning cell instead"
        )

    del row.cells[cell_index]
    if isinstance(cell, SpanningCell):
        _drop_continuations(grid, cell.id, row_index + 1, row_index + row_span_of(cell), log)
    _rebalance_row(grid, row_index, cell.width, log)

    empty = [r for r in grid.rows if not r.cells]
    if empty:
        grid.rows[:] = [r for r in grid.rows if r.cells]
        _rescale_heights(grid.rows, 100.0)
