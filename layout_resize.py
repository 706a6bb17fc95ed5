# -*- coding: utf-8 -*-
"""
Interactive Resize Sessions

Drag logic for the divider between two sibling cells (column resize) or
two adjacent rows (row resize). A session is created on pointer-down and
driven by the host UI:

    session = begin_column_resize(row, 0, PointerPosition(x, y), extents)
    session.update(PointerPosition(x2, y2))   # on every pointer-move
    session.commit()                          # on pointer-up
    session.cancel()                          # on Escape, restores start values

While dragging, the live value is attracted to a canonical fraction when
it is within SNAP_THRESHOLD of one, and clamped so both siblings keep a
usable size. Values are written onto the layout model immediately.
Commit always lands on the nearest canonical fraction that fits the
clamp range.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from layout_errors import LayoutEditError, ResizeStateError
from layout_types import ContinuationCell, GridLayout, Row

logger = logging.getLogger('panel_grid')

COLUMN_SNAP_POINTS = (20.0, 25.0, 33.33, 40.0, 50.0, 60.0, 66.67, 75.0, 80.0)
ROW_SNAP_POINTS = (20.0, 25.0, 33.33, 50.0, 66.67, 75.0, 80.0)
SNAP_THRESHOLD = 5.0
MIN_PERCENT = 15.0
MAX_PERCENT = 85.0


@dataclass(frozen=True)
class PointerPosition:
    """Document-level pointer coordinates in pixels."""
    x: float
    y: float


@dataclass(frozen=True)
class ContainerExtent:
    """Container size in pixels (clientWidth/clientHeight)."""
    width: float
    height: float


ExtentProvider = Callable[[], ContainerExtent]


class ResizeAxis(Enum):
    """Which dimension a session adjusts."""
    COLUMN = "column"
    ROW = "row"


class ResizeState(Enum):
    """Drag session states."""
    IDLE = "idle"
    DRAGGING = "dragging"


def nearest_snap_point(value: float, snap_points: Sequence[float]) -> float:
    """Snap point closest to value."""
    return min(snap_points, key=lambda point: abs(point - value))


def value_bounds(total: float) -> Tuple[float, float]:
    """Allowed range for the first sibling given the pair's total.

    Both siblings keep at least MIN_PERCENT where the total allows it.
    """
    low = MIN_PERCENT
    high = min(MAX_PERCENT, total - MIN_PERCENT)
    if high < low:
        low = high = total / 2.0
    return low, high


def clamp(value: float, low: float = MIN_PERCENT, high: float = MAX_PERCENT) -> float:
    return max(low, min(high, value))


def live_value(
    raw_value: float,
    snap_points: Sequence[float],
    total: float = 100.0,
    threshold: float = SNAP_THRESHOLD,
    bounds: Optional[Tuple[float, float]] = None,
) -> float:
    """Value shown while dragging.

    Args:
        raw_value: Initial value plus pointer delta, in percent.
        snap_points: Canonical fractions for this axis.
        total: Combined size of both siblings.
        threshold: Distance at which a snap point captures the value.
        bounds: (low, high) overriding value_bounds(total).

    Returns:
        Snapped or raw value, clamped to the pair's bounds.
    """
    snap = nearest_snap_point(raw_value, snap_points)
    value = snap if abs(snap - raw_value) < threshold else raw_value
    return clamp(value, *(bounds or value_bounds(total)))


def release_value(
    value: float,
    snap_points: Sequence[float],
    total: float = 100.0,
    bounds: Optional[Tuple[float, float]] = None,
) -> float:
    """Value committed on release.

    The nearest snap point to the current value wins regardless of the
    drag threshold, as long as it fits the pair's bounds.
    """
    low, high = bounds or value_bounds(total)
    snap = nearest_snap_point(value, snap_points)
    if low <= snap <= high:
        return snap
    return clamp(value, low, high)


class _SiblingPair:
    """Two model objects sharing one attribute budget."""

    def __init__(self, first, second, attr: str):
        self.first = first
        self.second = second
        self.attr = attr
        self.initial_first = float(getattr(first, attr))
        self.initial_second = float(getattr(second, attr))
        self.total = self.initial_first + self.initial_second

    def set_first(self, value: float) -> None:
        setattr(self.first, self.attr, value)
        setattr(self.second, self.attr, self.total - value)

    def shift(self, delta: float) -> None:
        self.set_first(self.initial_first + delta)

    def restore(self) -> None:
        setattr(self.first, self.attr, self.initial_first)
        setattr(self.second, self.attr, self.initial_second)


class ResizeSession:
    """One drag gesture on a divider.

    Created in the DRAGGING state by begin_column_resize or
    begin_row_resize. The first pair is the divider's own siblings;
    further pairs are rows that share a spanning cell's footprint and
    move by the same delta.
    """

    def __init__(
        self,
        axis: ResizeAxis,
        pairs: List[_SiblingPair],
        pointer: PointerPosition,
        extent_provider: ExtentProvider,
        snap_points: Sequence[float],
        on_finish: Optional[Callable[['ResizeSession', bool], None]] = None,
    ):
        self._axis = axis
        self._pairs = pairs
        self._primary = pairs[0]
        self._start = pointer
        self._extent_provider = extent_provider
        self._snap_points = tuple(snap_points)
        self._on_finish = on_finish
        self._state = ResizeState.DRAGGING
        self._bounds = self._value_range()

    @property
    def axis(self) -> ResizeAxis:
        return self._axis

    @property
    def state(self) -> ResizeState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is ResizeState.DRAGGING

    @property
    def initial_value_a(self) -> float:
        return self._primary.initial_first

    @property
    def initial_value_b(self) -> float:
        return self._primary.initial_second

    @property
    def total(self) -> float:
        return self._primary.total

    @property
    def value_a(self) -> float:
        return getattr(self._primary.first, self._primary.attr)

    @property
    def value_b(self) -> float:
        return getattr(self._primary.second, self._primary.attr)

    def _require_active(self) -> None:
        if not self.is_active:
            raise ResizeStateError(f"{self._axis.value} resize session already finished")

    def _value_range(self) -> Tuple[float, float]:
        """Range for value_a that keeps every linked pair inside its own bounds.

        All pairs move by one delta, so each linked pair's bounds are
        shifted into the primary pair's terms. The starting value always
        stays reachable.
        """
        start = self._primary.initial_first
        low, high = value_bounds(self._primary.total)
        for pair in self._pairs[1:]:
            pair_low, pair_high = value_bounds(pair.total)
            offset = start - pair.initial_first
            low = max(low, min(pair_low + offset, start))
            high = min(high, max(pair_high + offset, start))
        return low, max(low, high)

    def _apply(self, value: float) -> None:
        delta = value - self._primary.initial_first
        self._primary.set_first(value)
        for pair in self._pairs[1:]:
            pair.shift(delta)

    def update(self, pointer: PointerPosition) -> Tuple[float, float]:
        """Apply a pointer move.

        Args:
            pointer: Current document-level pointer position.

        Returns:
            (value_a, value_b) after the move.

        Raises:
            ResizeStateError: If the session has finished.
        """
        self._require_active()

        extent = self._extent_provider()
        if self._axis is ResizeAxis.COLUMN:
            size = extent.width
            delta_px = pointer.x - self._start.x
        else:
            size = extent.height
            delta_px = pointer.y - self._start.y

        if size <= 0:
            return self.value_a, self.value_b

        delta_percent = delta_px / size * 100.0
        raw_value = self.initial_value_a + delta_percent
        self._apply(live_value(raw_value, self._snap_points, self.total, bounds=self._bounds))
        return self.value_a, self.value_b

    def commit(self) -> Tuple[float, float]:
        """Finish the drag on the nearest canonical fraction.

        Raises:
            ResizeStateError: If the session has finished.
        """
        self._require_active()
        self._apply(release_value(self.value_a, self._snap_points, self.total, bounds=self._bounds))
        logger.debug(
            f"{self._axis.value} resize committed at {self.value_a:.2f}/{self.value_b:.2f}"
        )
        self._finish(committed=True)
        return self.value_a, self.value_b

    def cancel(self) -> Tuple[float, float]:
        """Abort the drag and restore the starting values.

        Raises:
            ResizeStateError: If the session has finished.
        """
        self._require_active()
        for pair in self._pairs:
            pair.restore()
        self._finish(committed=False)
        return self.value_a, self.value_b

    def _finish(self, committed: bool) -> None:
        self._state = ResizeState.IDLE
        if self._on_finish:
            self._on_finish(self, committed)


def _linked_pairs(layout: GridLayout, row: Row, cell_index: int) -> List[_SiblingPair]:
    """Pairs in other rows tied to this divider through a spanning cell."""
    a = row.cells[cell_index]
    b = row.cells[cell_index + 1]
    pairs = []
    for other in layout.rows:
        if other is row or len(other.cells) <= cell_index + 1:
            continue
        oa = other.cells[cell_index]
        ob = other.cells[cell_index + 1]
        linked_a = oa.id == a.id and (isinstance(oa, ContinuationCell) or isinstance(a, ContinuationCell))
        linked_b = ob.id == b.id and (isinstance(ob, ContinuationCell) or isinstance(b, ContinuationCell))
        if linked_a or linked_b:
            pairs.append(_SiblingPair(oa, ob, 'width'))
    return pairs


def begin_column_resize(
    row: Row,
    cell_index: int,
    pointer: PointerPosition,
    extent_provider: ExtentProvider,
    layout: Optional[GridLayout] = None,
    snap_points: Sequence[float] = COLUMN_SNAP_POINTS,
    on_finish: Optional[Callable[[ResizeSession, bool], None]] = None,
) -> ResizeSession:
    """Start dragging the divider right of row.cells[cell_index].

    Args:
        row: Row holding both cells.
        cell_index: Index of the left sibling.
        pointer: Pointer position at pointer-down.
        extent_provider: Returns the container size on each move.
        layout: Enclosing grid, used to keep spanning footprints in step.
        snap_points: Canonical widths.
        on_finish: Called with (session, committed) when the drag ends.

    Raises:
        LayoutEditError: If there is no cell right of cell_index.
    """
    if cell_index < 0 or cell_index + 1 >= len(row.cells):
        raise LayoutEditError(f"No column divider after cell {cell_index} in row {row.id}")

    pairs = [_SiblingPair(row.cells[cell_index], row.cells[cell_index + 1], 'width')]
    if layout is not None:
        pairs.extend(_linked_pairs(layout, row, cell_index))

    return ResizeSession(ResizeAxis.COLUMN, pairs, pointer, extent_provider, snap_points, on_finish)


def begin_row_resize(
    layout: GridLayout,
    row_index: int,
    pointer: PointerPosition,
    extent_provider: ExtentProvider,
    snap_points: Sequence[float] = ROW_SNAP_POINTS,
    on_finish: Optional[Callable[[ResizeSession, bool], None]] = None,
) -> ResizeSession:
    """Start dragging the divider below layout.rows[row_index].

    Raises:
        LayoutEditError: If there is no row below row_index.
    """
    if row_index < 0 or row_index + 1 >= len(layout.rows):
        raise LayoutEditError(f"No row divider after row {row_index}")

    pairs = [_SiblingPair(layout.rows[row_index], layout.rows[row_index + 1], 'height')]
    return ResizeSession(ResizeAxis.ROW, pairs, pointer, extent_provider, snap_points, on_finish)
