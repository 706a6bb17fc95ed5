# -*- coding: utf-8 -*-
"""
Layout Templates

Canned grid shapes and the builder that turns them into GridLayouts.

Two shapes are supported:
- Regular grids: cells placed by (row, col). Cells without an explicit
  width share the width left in their row evenly. A spanning cell counts
  against the budget of its starting row and of every row it covers.
- Hybrid: one tall left cell spanning two rows beside two stacked right
  cells. It is recognised structurally and assembled directly.

Every built row sums to 100% width and every built grid to 100% height.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from layout_errors import InvalidTemplateError
from layout_types import (
    ANY_DEVICE,
    ContinuationCell,
    GridLayout,
    GridLayoutDefinition,
    Priority,
    Row,
    SimpleCell,
    SpanningCell,
    Viewport,
    now_ms,
)

logger = logging.getLogger('panel_grid')

BUILD_TOLERANCE = 0.01
DEFAULT_HYBRID_LEFT_WIDTH = 50.0


@dataclass
class TemplateCell:
    """Cell placement within a template (row and col are 0-based)."""
    id: str
    row: int
    col: int
    row_span: int = 1
    col_span: int = 1
    width: Optional[float] = None
    device_type: Optional[str] = None
    name: Optional[str] = None


@dataclass
class LayoutTemplate:
    """A canned grid shape."""
    id: str
    name: str
    rows: int
    cols: int
    cells: List[TemplateCell] = field(default_factory=list)
    description: str = ''
    icon: Optional[str] = None


STATIC_TEMPLATES: List[LayoutTemplate] = [
    LayoutTemplate(
        id='2x2',
        name='2x2 Grid',
        rows=2,
        cols=2,
        icon='grid_view',
        cells=[
            TemplateCell('cell-1', 0, 0),
            TemplateCell('cell-2', 0, 1),
            TemplateCell('cell-3', 1, 0),
            TemplateCell('cell-4', 1, 1),
        ],
    ),
    LayoutTemplate(
        id='1x2',
        name='1x2 Grid',
        rows=1,
        cols=2,
        icon='view_column',
        cells=[
            TemplateCell('cell-1', 0, 0),
            TemplateCell('cell-2', 0, 1),
        ],
    ),
    LayoutTemplate(
        id='3x2',
        name='3x2 Grid',
        rows=3,
        cols=2,
        icon='view_module',
        cells=[
            TemplateCell('cell-1', 0, 0),
            TemplateCell('cell-2', 0, 1),
            TemplateCell('cell-3', 1, 0),
            TemplateCell('cell-4', 1, 1),
            TemplateCell('cell-5', 2, 0),
            TemplateCell('cell-6', 2, 1),
        ],
    ),
    LayoutTemplate(
        id='1-2-3',
        name='Observatory Stack',
        description='Full-width panel over halves over thirds',
        rows=3,
        cols=3,
        icon='view_agenda',
        cells=[
            TemplateCell('cell-1', 0, 0),
            TemplateCell('cell-2', 1, 0),
            TemplateCell('cell-3', 1, 1),
            TemplateCell('cell-4', 2, 0),
            TemplateCell('cell-5', 2, 1),
            TemplateCell('cell-6', 2, 2),
        ],
    ),
    LayoutTemplate(
        id='hybrid-50',
        name='Hybrid 50/50',
        rows=2,
        cols=2,
        icon='view_quilt',
        cells=[
            TemplateCell('cell-1', 0, 0, row_span=2),
            TemplateCell('cell-2', 0, 1),
            TemplateCell('cell-3', 1, 1),
        ],
    ),
    LayoutTemplate(
        id='hybrid-60',
        name='Hybrid 60/40',
        rows=2,
        cols=2,
        icon='view_quilt',
        cells=[
            TemplateCell('cell-1', 0, 0, row_span=2, width=60),
            TemplateCell('cell-2', 0, 1, width=40),
            TemplateCell('cell-3', 1, 1, width=40),
        ],
    ),
]

TEMPLATES_BY_ID: Dict[str, LayoutTemplate] = {t.id: t for t in STATIC_TEMPLATES}


def get_template(template_id: str) -> LayoutTemplate:
    """Look up a static template.

    Raises:
        InvalidTemplateError: If the id is not a known template.
    """
    try:
        return TEMPLATES_BY_ID[template_id]
    except KeyError:
        raise InvalidTemplateError(template_id) from None


def _default_name(cell_id: str) -> str:
    return cell_id.replace('-', ' ').title()


def _make_cell(tc: TemplateCell, width: float, primary: bool) -> Union[SimpleCell, SpanningCell]:
    kwargs = {
        'id': tc.id,
        'device_type': tc.device_type or ANY_DEVICE,
        'name': tc.name or _default_name(tc.id),
        'priority': Priority.PRIMARY if primary else Priority.SECONDARY,
        'width': width,
    }
    if tc.row_span > 1:
        return SpanningCell(row_span=tc.row_span, **kwargs)
    return SimpleCell(**kwargs)


# ---------------
# Hybrid template
# ---------------

def find_hybrid_cells(
    template: LayoutTemplate,
) -> Optional[Tuple[TemplateCell, TemplateCell, TemplateCell]]:
    """Identify the hybrid shape's three cells.

    Returns:
        (left, top_right, bottom_right), or None if any is missing.
    """
    left = next(
        (c for c in template.cells if c.row_span == 2 and c.row == 0 and c.col == 0),
        None,
    )
    top_right = next((c for c in template.cells if c.row == 0 and c.col == 1), None)
    bottom_right = next((c for c in template.cells if c.row == 1 and c.col == 1), None)

    if left is None or top_right is None or bottom_right is None:
        return None
    return left, top_right, bottom_right


def build_hybrid_layout(
    left: TemplateCell,
    top_right: TemplateCell,
    bottom_right: TemplateCell,
) -> GridLayout:
    """Assemble the two-row hybrid shape.

    The left cell keeps its explicit width (default 50) and the right
    cells take the rest. Both rows are 50% high.
    """
    left_width = float(left.width) if left.width is not None else DEFAULT_HYBRID_LEFT_WIDTH
    right_width = 100.0 - left_width

    return GridLayout(rows=[
        Row(
            id='row-1',
            cells=[
                _make_cell(left, left_width, primary=True),
                _make_cell(top_right, right_width, primary=False),
            ],
            height=50.0,
        ),
        Row(
            id='row-2',
            cells=[
                ContinuationCell(id=left.id, width=left_width),
                _make_cell(bottom_right, right_width, primary=False),
            ],
            height=50.0,
        ),
    ])


# -------------
# Regular grids
# -------------

def build_regular_layout(template: LayoutTemplate, log: Optional[logging.Logger] = None) -> GridLayout:
    """Build a grid by distributing widths row by row.

    Args:
        template: Template to build.
        log: Logger for structural anomalies.

    Returns:
        GridLayout with balanced rows.
    """
    log = log or logger
    rows: List[Row] = []
    spanning_widths: Dict[str, float] = {}
    height = 100.0 / template.rows if template.rows else 0.0
    first_cell_id = None

    for r in range(template.rows):
        starting = [c for c in template.cells if c.row == r]
        covering = [
            c for c in template.cells
            if c.row < r < c.row + c.row_span
        ]

        continuation_total = sum(spanning_widths.get(c.id, 0.0) for c in covering)
        budget = 100.0 - continuation_total

        widths: Dict[str, float] = {
            c.id: float(c.width) for c in starting if c.width is not None
        }
        unsized = [c for c in starting if c.width is None]
        remaining = budget - sum(widths.values())

        if unsized:
            if remaining <= 0:
                log.warning(
                    f"Template {template.id} row {r}: explicit widths leave no room, "
                    f"sharing {budget:.2f}% evenly"
                )
                widths = {c.id: budget / len(starting) for c in starting}
            else:
                for c in unsized:
                    widths[c.id] = remaining / len(unsized)
        elif starting and abs(remaining) > BUILD_TOLERANCE:
            actual = sum(widths.values())
            log.warning(
                f"Template {template.id} row {r}: widths sum to {actual + continuation_total:.2f}%, "
                f"rescaling to 100%"
            )
            if actual > 0:
                widths = {cid: w * budget / actual for cid, w in widths.items()}
            else:
                widths = {c.id: budget / len(starting) for c in starting}

        entries = sorted(starting + covering, key=lambda c: c.col)
        cells = []
        for tc in entries:
            if tc.row < r:
                cells.append(ContinuationCell(id=tc.id, width=spanning_widths.get(tc.id, 0.0)))
                continue
            if first_cell_id is None:
                first_cell_id = tc.id
            cells.append(_make_cell(tc, widths[tc.id], primary=(tc.id == first_cell_id)))
            if tc.row_span > 1:
                spanning_widths[tc.id] = widths[tc.id]

        rows.append(Row(id=f'row-{r + 1}', cells=cells, height=height))

    return GridLayout(rows=rows)


def build_grid_layout(template: LayoutTemplate, log: Optional[logging.Logger] = None) -> GridLayout:
    """Build a GridLayout from a template, choosing the hybrid or regular path.

    A two-row template with a tall top-left cell that does not complete
    the hybrid shape is logged and built as a regular grid.
    """
    log = log or logger
    hybrid = find_hybrid_cells(template)
    if hybrid is not None and len(template.cells) == 3:
        return build_hybrid_layout(*hybrid)

    looks_hybrid = template.rows == 2 and any(
        c.row_span == 2 and c.row == 0 and c.col == 0 for c in template.cells
    )
    if looks_hybrid:
        log.warning(
            f"Template {template.id} has a spanning left cell but no hybrid shape, "
            f"building as a regular grid"
        )
    return build_regular_layout(template, log)


def build_from_template(
    template: Union[str, LayoutTemplate],
    is_default: bool = False,
    layout_id: Optional[str] = None,
    name: Optional[str] = None,
    log: Optional[logging.Logger] = None,
) -> GridLayoutDefinition:
    """Build a layout definition using one template for every viewport.

    Each viewport gets its own copy of the rows so later edits and
    resizes stay independent.

    Args:
        template: Template or template id.
        is_default: Mark the definition as a default layout.
        layout_id: Definition id, defaults to the template id.
        name: Display name, defaults to the template name.
        log: Logger for structural anomalies.

    Returns:
        New GridLayoutDefinition.

    Raises:
        InvalidTemplateError: If a template id is not known.
    """
    if isinstance(template, str):
        template = get_template(template)

    grid = build_grid_layout(template, log)
    timestamp = now_ms()

    return GridLayoutDefinition(
        id=layout_id or template.id,
        name=name or template.name,
        description=template.description,
        layouts={viewport: copy.deepcopy(grid) for viewport in Viewport},
        is_default=is_default,
        created_at=timestamp,
        updated_at=timestamp,
        icon=template.icon,
    )
