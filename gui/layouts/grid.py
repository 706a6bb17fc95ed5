# -*- coding: utf-8 -*-
"""
Panel Grid View

Renders the active layout's panel positions as a 12-column CSS grid and,
in edit mode, draws draggable dividers. Pointer events on a divider drive
a ResizeSession:

    pointerdown -> repository.begin_column_resize / begin_row_resize
    pointermove -> session.update
    pointerup   -> session.commit
    Escape      -> session.cancel

The divider captures the pointer, so the drag continues when the pointer
leaves it. Every event carries the container size, which serves as the
session's extent provider.
"""

import logging
from typing import Dict, List, Optional, Tuple

from nicegui import ui

from layout_errors import LayoutError
from layout_resize import ContainerExtent, PointerPosition, ResizeSession
from layout_types import GRID_COLUMNS, GridLayout, PanelPosition
from ..state import GridViewState, format_percent

DIVIDER_SIZE_PX = 8

# Pointer events report position and the grid container's size
POINTER_JS = '''(e) => {
    const grid = e.target.parentElement;
    emit({x: e.clientX, y: e.clientY, width: grid.clientWidth, height: grid.clientHeight});
}'''

CAPTURE_JS = '''(e) => {
    e.target.setPointerCapture(e.pointerId);
    const grid = e.target.parentElement;
    emit({x: e.clientX, y: e.clientY, width: grid.clientWidth, height: grid.clientHeight});
}'''


def grid_style(grid: GridLayout) -> str:
    """CSS for the grid container, row heights as fractions."""
    rows = ' '.join(f'{max(row.height, 0.1):.3f}fr' for row in grid.rows) or '1fr'
    return (
        'position: relative; display: grid; width: 100%; height: 100%; gap: 4px; '
        f'grid-template-columns: repeat({GRID_COLUMNS}, 1fr); '
        f'grid-template-rows: {rows};'
    )


def position_style(position: PanelPosition) -> str:
    """CSS placing one panel on the grid."""
    return (
        f'grid-column: {position.x + 1} / span {position.width}; '
        f'grid-row: {position.y + 1} / span {position.height};'
    )


def column_divider_offsets(grid: GridLayout) -> List[Tuple[int, int, float, float, float]]:
    """Column dividers as (row_index, cell_index, left%, top%, height%)."""
    dividers = []
    top = 0.0
    for r, row in enumerate(grid.rows):
        left = 0.0
        for i, cell in enumerate(row.cells[:-1]):
            left += cell.width
            dividers.append((r, i, left, top, row.height))
        top += row.height
    return dividers


def row_divider_offsets(grid: GridLayout) -> List[Tuple[int, float]]:
    """Row dividers as (row_index, top%)."""
    dividers = []
    top = 0.0
    for r, row in enumerate(grid.rows[:-1]):
        top += row.height
        dividers.append((r, top))
    return dividers


class GridView:
    """Grid page body bound to a repository and view state."""

    def __init__(self, repository, state: GridViewState, logger: logging.Logger):
        self._repository = repository
        self._state = state
        self._logger = logger
        self._container: Optional[ui.element] = None
        self._panels: Dict[str, ui.element] = {}
        self._dividers: Dict[tuple, ui.element] = {}
        self._session: Optional[ResizeSession] = None
        self._extent = ContainerExtent(0, 0)

    def build(self) -> ui.element:
        """Create the container and render the current layout."""
        self._container = ui.element('div').classes('panel-grid w-full').style('height: 80vh;')
        ui.keyboard(on_key=self._on_key)
        self.refresh()
        return self._container

    def refresh(self) -> None:
        """Re-render all panels and dividers."""
        if self._container is None:
            return
        self._container.clear()
        self._panels = {}
        self._dividers = {}

        grid = self._repository.current_grid_layout()
        if grid is None:
            self._container.style(replace='height: 80vh;')
            with self._container:
                ui.label('No layout selected').classes('text-lg p-4')
            return

        self._container.style(replace=grid_style(grid) + ' height: 80vh;')
        with self._container:
            for position in self._repository.current_positions():
                with ui.card().classes('panel-cell').style(position_style(position)) as card:
                    ui.label(position.panel_id).classes('text-md font-semibold')
                    ui.label(f'{position.width}/{GRID_COLUMNS} cols').classes('text-xs')
                self._panels[position.panel_id] = card

            if self._state.edit_mode:
                self._build_dividers(grid)

    def _build_dividers(self, grid: GridLayout) -> None:
        for r, i, left, top, height in column_divider_offsets(grid):
            divider = ui.element('div').classes('divider-col').style(
                self._column_divider_style(left, top, height)
            )
            divider.on('pointerdown', lambda e, r=r, i=i: self._start_column(r, i, e.args),
                       js_handler=CAPTURE_JS)
            self._bind_drag(divider)
            self._dividers[('col', r, i)] = divider

        for r, top in row_divider_offsets(grid):
            divider = ui.element('div').classes('divider-row').style(self._row_divider_style(top))
            divider.on('pointerdown', lambda e, r=r: self._start_row(r, e.args), js_handler=CAPTURE_JS)
            self._bind_drag(divider)
            self._dividers[('row', r)] = divider

    def _bind_drag(self, divider: ui.element) -> None:
        divider.on('pointermove', lambda e: self._move(e.args), js_handler=POINTER_JS, throttle=0.02)
        divider.on('pointerup', lambda e: self._release(), js_handler=POINTER_JS)

    @staticmethod
    def _column_divider_style(left: float, top: float, height: float) -> str:
        return (
            f'position: absolute; left: calc({left:.3f}% - {DIVIDER_SIZE_PX // 2}px); '
            f'top: {top:.3f}%; height: {height:.3f}%; width: {DIVIDER_SIZE_PX}px; '
            'cursor: col-resize; z-index: 10; touch-action: none;'
        )

    @staticmethod
    def _row_divider_style(top: float) -> str:
        return (
            f'position: absolute; top: calc({top:.3f}% - {DIVIDER_SIZE_PX // 2}px); '
            f'left: 0; width: 100%; height: {DIVIDER_SIZE_PX}px; '
            'cursor: row-resize; z-index: 10; touch-action: none;'
        )

    # ----------------
    # Drag event flow
    # ----------------

    def _read_pointer(self, args: dict) -> PointerPosition:
        self._extent = ContainerExtent(float(args.get('width', 0)), float(args.get('height', 0)))
        return PointerPosition(float(args.get('x', 0)), float(args.get('y', 0)))

    def _start_column(self, row_index: int, cell_index: int, args: dict) -> None:
        pointer = self._read_pointer(args)
        try:
            self._session = self._repository.begin_column_resize(
                row_index, cell_index, pointer, lambda: self._extent
            )
        except LayoutError as e:
            self._logger.warning(f"Column resize not started: {e}")
            return
        self._state.update(dragging=True, drag_axis='column', drag_value=self._session.value_a)

    def _start_row(self, row_index: int, args: dict) -> None:
        pointer = self._read_pointer(args)
        try:
            self._session = self._repository.begin_row_resize(
                row_index, pointer, lambda: self._extent
            )
        except LayoutError as e:
            self._logger.warning(f"Row resize not started: {e}")
            return
        self._state.update(dragging=True, drag_axis='row', drag_value=self._session.value_a)

    def _move(self, args: dict) -> None:
        if self._session is None or not self._session.is_active:
            return
        value_a, value_b = self._session.update(self._read_pointer(args))
        self._state.update(drag_value=value_a)
        self._restyle()
        self._logger.debug(f"Dragging {format_percent(value_a)}/{format_percent(value_b)}")

    def _release(self) -> None:
        if self._session is None or not self._session.is_active:
            return
        self._session.commit()
        self._end_drag()

    def _on_key(self, e) -> None:
        if self._session is None or not self._session.is_active:
            return
        if e.key == 'Escape' and e.action.keydown:
            self._session.cancel()
            self._end_drag()

    def _end_drag(self) -> None:
        self._session = None
        self._state.update(dragging=False, drag_axis=None, drag_value=None)
        self.refresh()

    def _restyle(self) -> None:
        """Update styles in place so the captured divider stays alive."""
        grid = self._repository.current_grid_layout()
        if grid is None or self._container is None:
            return
        self._container.style(replace=grid_style(grid) + ' height: 80vh;')
        for position in self._repository.current_positions():
            panel = self._panels.get(position.panel_id)
            if panel is not None:
                panel.style(replace=position_style(position))
        for r, i, left, top, height in column_divider_offsets(grid):
            divider = self._dividers.get(('col', r, i))
            if divider is not None:
                divider.style(replace=self._column_divider_style(left, top, height))
        for r, top in row_divider_offsets(grid):
            divider = self._dividers.get(('row', r))
            if divider is not None:
                divider.style(replace=self._row_divider_style(top))
