# -*- coding: utf-8 -*-
"""
Grid Layout Data Model

Persisted description of a panel layout:
- A GridLayoutDefinition holds one GridLayout per viewport
- A GridLayout is an ordered list of rows, each with a height percentage
- A Row is an ordered list of cells, each with a width percentage

Cells are a tagged variant. A SimpleCell covers one row, a SpanningCell
covers row_span rows starting at the row that holds it, and a
ContinuationCell is the placeholder a spanning cell leaves in each later
row it covers. The placeholder keeps the row's horizontal order explicit
so the cells after it are placed to its right.

Widths and heights are percentages. Positions derived from this model
live in PanelPosition and are never persisted.
"""

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


GRID_COLUMNS = 12
WIDTH_TOLERANCE = 0.1
ANY_DEVICE = 'any'

# Device kinds that map to one shared panel slot across layouts
KNOWN_DEVICE_TYPES = (
    'telescope',
    'camera',
    'focuser',
    'filterwheel',
    'dome',
    'rotator',
    'weather',
)


class Viewport(Enum):
    """Viewport classes, each holding an independent GridLayout."""
    DESKTOP = "desktop"
    TABLET = "tablet"
    MOBILE = "mobile"


class Priority(Enum):
    """Display priority of a panel."""
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"

    @classmethod
    def parse(cls, value: Any) -> 'Priority':
        """Parse a stored priority, defaulting to SECONDARY."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.SECONDARY


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def new_id(prefix: str) -> str:
    """Generate a short unique id like 'row-1a2b3c4d'."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


@dataclass
class Cell:
    """A panel slot within a row.

    Attributes:
        id: Cell identifier, also the panel id for custom panels.
        device_type: Assigned device kind or 'any'.
        name: Display name.
        priority: Display priority.
        width: Width as percent of the row (0-100).
    """
    id: str
    device_type: str = ANY_DEVICE
    name: str = ''
    priority: Priority = Priority.SECONDARY
    width: float = 100.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'deviceType': self.device_type,
            'name': self.name,
            'priority': self.priority.value,
            'width': self.width,
        }


@dataclass
class SimpleCell(Cell):
    """Cell covering a single row."""
    pass


@dataclass
class SpanningCell(Cell):
    """Cell covering row_span rows, starting at the row that holds it."""
    row_span: int = 2

    def __post_init__(self):
        if self.row_span < 1:
            raise ValueError(f"row_span must be >= 1, got {self.row_span}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data['rowSpan'] = self.row_span
        return data


@dataclass
class ContinuationCell:
    """Footprint of a spanning cell from a prior row.

    Attributes:
        id: Id of the spanning cell this placeholder continues.
        width: Same width as the spanning cell.
    """
    id: str
    width: float = 100.0

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'width': self.width, 'continuation': True}


AnyCell = Union[SimpleCell, SpanningCell, ContinuationCell]


def row_span_of(cell: AnyCell) -> int:
    """Number of rows a cell covers from the row that holds it."""
    if isinstance(cell, SpanningCell):
        return cell.row_span
    return 1


def cell_from_dict(data: Dict[str, Any]) -> AnyCell:
    """Build the matching cell variant from a stored record.

    Raises:
        KeyError: If the record has no id.
    """
    width = float(data.get('width', 100.0))
    if data.get('continuation'):
        return ContinuationCell(id=data['id'], width=width)

    kwargs = {
        'id': data['id'],
        'device_type': data.get('deviceType') or ANY_DEVICE,
        'name': data.get('name', ''),
        'priority': Priority.parse(data.get('priority')),
        'width': width,
    }
    row_span = int(data.get('rowSpan') or 1)
    if row_span > 1:
        return SpanningCell(row_span=row_span, **kwargs)
    return SimpleCell(**kwargs)


@dataclass
class Row:
    """Ordered cells plus a height as percent of the container."""
    id: str
    cells: List[AnyCell] = field(default_factory=list)
    height: float = 100.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'cells': [cell.to_dict() for cell in self.cells],
            'height': self.height,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Row':
        return cls(
            id=data['id'],
            cells=[cell_from_dict(c) for c in data.get('cells', [])],
            height=float(data.get('height', 100.0)),
        )


@dataclass
class GridLayout:
    """Rows of one viewport.

    panel_ids is derived from rows on every read, so it always matches
    the actual membership of the grid.
    """
    rows: List[Row] = field(default_factory=list)

    @property
    def panel_ids(self) -> List[str]:
        """De-duplicated cell ids in first-appearance order."""
        seen = []
        for row in self.rows:
            for cell in row.cells:
                if cell.id not in seen:
                    seen.append(cell.id)
        return seen

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rows': [row.to_dict() for row in self.rows],
            'panelIds': self.panel_ids,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GridLayout':
        # Stored panelIds are ignored, they are re-derived from rows
        return cls(rows=[Row.from_dict(r) for r in data.get('rows', [])])


@dataclass
class GridLayoutDefinition:
    """A named layout with one GridLayout per viewport.

    Attributes:
        id: Layout identifier, the repository key.
        name: Display name.
        description: Free text description.
        layouts: GridLayout per Viewport.
        is_default: Shipped/default layout flag.
        created_at: Creation time (epoch ms).
        updated_at: Last modification time (epoch ms).
        icon: Optional icon name.
    """
    id: str
    name: str
    description: str = ''
    layouts: Dict[Viewport, GridLayout] = field(default_factory=dict)
    is_default: bool = False
    created_at: int = 0
    updated_at: int = 0
    icon: Optional[str] = None

    def layout_for(self, viewport: Viewport) -> GridLayout:
        """GridLayout for a viewport, created empty if missing."""
        if viewport not in self.layouts:
            self.layouts[viewport] = GridLayout()
        return self.layouts[viewport]

    def touch(self) -> None:
        """Mark the definition as modified now."""
        self.updated_at = now_ms()

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'layouts': {vp.value: gl.to_dict() for vp, gl in self.layouts.items()},
            'isDefault': self.is_default,
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }
        if self.icon:
            data['icon'] = self.icon
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GridLayoutDefinition':
        """Build a definition from a stored record.

        Raises:
            KeyError: If a required key is missing.
            ValueError: If a viewport name is not recognised.
        """
        layouts = {
            Viewport(name): GridLayout.from_dict(grid)
            for name, grid in data.get('layouts', {}).items()
        }
        return cls(
            id=data['id'],
            name=data.get('name', data['id']),
            description=data.get('description') or '',
            layouts=layouts,
            is_default=bool(data.get('isDefault', False)),
            created_at=int(data.get('createdAt') or 0),
            updated_at=int(data.get('updatedAt') or 0),
            icon=data.get('icon'),
        )


@dataclass(frozen=True)
class PanelPosition:
    """Placement of a panel on the 12-column grid.

    Attributes:
        panel_id: Device type for known kinds, otherwise the cell id.
        x: Column (0-11).
        y: Row index (0-based).
        width: Columns covered (1-12).
        height: Rows covered (>= 1).
    """
    panel_id: str
    x: int
    y: int
    width: int
    height: int

    def cells(self):
        """Grid units covered by this position."""
        return {
            (self.x + c, self.y + r)
            for c in range(self.width)
            for r in range(self.height)
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            'panelId': self.panel_id,
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
        }


# -------------------
# Invariant helpers
# -------------------

def row_width_total(row: Row) -> float:
    """Sum of widths in a row, continuation footprints included."""
    return sum(cell.width for cell in row.cells)


def height_total(grid: GridLayout) -> float:
    """Sum of row heights in a grid."""
    return sum(row.height for row in grid.rows)


def is_balanced(grid: GridLayout, tolerance: float = WIDTH_TOLERANCE) -> bool:
    """Check the row width and height sum invariants.

    Empty rows are exempt from the width check.
    """
    if grid.rows and abs(height_total(grid) - 100.0) > tolerance:
        return False
    for row in grid.rows:
        if row.cells and abs(row_width_total(row) - 100.0) > tolerance:
            return False
    return True
