# -*- coding: utf-8 -*-
"""
Main Application Layout

Primary layout structure for the panel grid GUI.
"""

from typing import Callable, Dict, Optional
from nicegui import ui

from layout_templates import STATIC_TEMPLATES
from ..state import GridViewState, format_fraction
from .grid import GridView


def main_layout(
    state: GridViewState,
    repository,
    grid_view: GridView,
    handlers: Dict[str, Callable],
    title: str,
) -> None:
    """Main application layout.

    Structure:
    ┌──────────────────────────────────────────────────┐
    │ Header: Title, Layout, Template, Edit Toggle     │
    ├──────────────────────────────────────────────────┤
    │                                                  │
    │              Panel Grid                          │
    │                                                  │
    ├──────────────────────────────────────────────────┤
    │ Footer: Viewport, Window Width, Drag Status      │
    └──────────────────────────────────────────────────┘

    Args:
        state: Grid view state instance.
        repository: LayoutRepository shown on the page.
        grid_view: Grid renderer.
        handlers: Command handler callbacks.
        title: Header title.
    """
    header(state, repository, handlers, title)

    with ui.column().classes('w-full p-4'):
        grid_view.build()

    footer(state)


def header(
    state: GridViewState,
    repository,
    handlers: Dict[str, Callable],
    title: str,
) -> ui.element:
    """Application header.

    Contains:
    - App title
    - Active layout selector
    - Template selector to add a layout
    - Delete layout button
    - Edit mode toggle

    Args:
        state: Grid view state instance.
        repository: LayoutRepository for the layout options.
        handlers: Command handler callbacks.
        title: Header title.

    Returns:
        Header element.
    """
    with ui.header().classes('gui-header items-center justify-between') as hdr:
        with ui.row().classes('items-center gap-2'):
            ui.icon('dashboard').classes('text-2xl')
            ui.label(title).classes('text-xl font-semibold')

        with ui.row().classes('items-center gap-4'):
            layout_select = ui.select(
                options={layout.id: layout.name for layout in repository.layouts},
                value=repository.active_id,
                on_change=lambda e: handlers['select_layout'](e.value),
            ).classes('w-48')
            layout_select.props('dense outlined label="Layout"')

            def refresh_options(field: str, value) -> None:
                if field == 'active_layout_id':
                    layout_select.options = {
                        layout.id: layout.name for layout in repository.layouts
                    }
                    layout_select.value = value
                    layout_select.update()

            state.add_listener(refresh_options)

            template_select = ui.select(
                options={t.id: t.name for t in STATIC_TEMPLATES},
                value=None,
                on_change=lambda e: e.value and handlers['add_template'](e.value),
            ).classes('w-48')
            template_select.props('dense outlined label="Add from template"')

            ui.button(
                icon='delete',
                on_click=lambda: handlers['delete_layout'](),
            ).props('flat round').tooltip('Delete layout')

            ui.switch(
                'Edit',
                value=state.edit_mode,
                on_change=lambda e: handlers['edit_mode'](e.value),
            )

    return hdr


def footer(state: GridViewState) -> ui.element:
    """Application footer.

    Contains:
    - Current viewport class
    - Measured window width
    - Drag indicator and live split fraction

    Args:
        state: Grid view state instance.

    Returns:
        Footer element.
    """
    with ui.footer().classes('gui-footer') as ftr:
        with ui.row().classes('items-center gap-4'):
            viewport_label = ui.label()
            viewport_label.bind_text_from(state, 'viewport', lambda v: f'Viewport: {v.value}')

            width_label = ui.label().classes('text-xs')
            width_label.bind_text_from(state, 'window_width', lambda w: f'{w}px')

            drag_label = ui.label().classes('text-xs')
            drag_label.bind_text_from(
                state, 'drag_axis',
                lambda axis: f'Resizing {axis}' if axis else '',
            )

            split_label = ui.label().classes('text-xs')
            split_label.bind_text_from(state, 'drag_value', drag_text)

    return ftr


def drag_text(value: Optional[float]) -> str:
    """Footer text for the live split of a drag, empty when idle."""
    if value is None:
        return ''
    return f'at {format_fraction(value)}'

