# -*- coding: utf-8 -*-
"""
Layout Repository

Arena of GridLayoutDefinitions keyed by id, plus the id of the active
layout. Readers get positions for the active layout at the selector's
current viewport. All mutations are applied immediately; a persistence
collaborator observes them through listeners.

Only one resize session runs at a time, and structural edits are refused
while one is running.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

import layout_edit
from layout_converter import convert
from layout_errors import LayoutEditError, LayoutNotFoundError, ResizeInProgressError
from layout_resize import (
    COLUMN_SNAP_POINTS,
    ROW_SNAP_POINTS,
    ExtentProvider,
    PointerPosition,
    ResizeSession,
    begin_column_resize,
    begin_row_resize,
)
from layout_templates import build_from_template, get_template
from layout_types import (
    GridLayout,
    GridLayoutDefinition,
    PanelPosition,
    Row,
    SimpleCell,
    Viewport,
)
from viewport import ViewportSelector

# Listener events
EVENT_ADDED = 'added'
EVENT_UPDATED = 'updated'
EVENT_DELETED = 'deleted'
EVENT_ACTIVE = 'active'
EVENT_RESIZED = 'resized'
EVENT_EDITED = 'edited'


class LayoutRepository:
    """Holds layout definitions and the active layout id.

    Attributes:
        logger: Logger for repository changes and anomalies.
        selector: Viewport selector deciding which GridLayout is read.
    """

    def __init__(self, logger: logging.Logger, selector: Optional[ViewportSelector] = None):
        self.logger = logger
        self.selector = selector or ViewportSelector(logger=logger)
        self._lock = threading.RLock()
        self._layouts: Dict[str, GridLayoutDefinition] = {}
        self._active_id: Optional[str] = None
        self._session: Optional[ResizeSession] = None
        self._session_layout_id: Optional[str] = None
        self._listeners: List[Callable[[str, Optional[str]], None]] = []

    # -------
    # Queries
    # -------

    @property
    def layouts(self) -> List[GridLayoutDefinition]:
        """Definitions in insertion order."""
        with self._lock:
            return list(self._layouts.values())

    @property
    def active_id(self) -> Optional[str]:
        return self._active_id

    @property
    def active_layout(self) -> Optional[GridLayoutDefinition]:
        with self._lock:
            if self._active_id is None:
                return None
            return self._layouts.get(self._active_id)

    @property
    def resize_session(self) -> Optional[ResizeSession]:
        """The running resize session, if any."""
        return self._session

    def get(self, layout_id: str) -> GridLayoutDefinition:
        """Look up a definition.

        Raises:
            LayoutNotFoundError: If the id is unknown.
        """
        with self._lock:
            try:
                return self._layouts[layout_id]
            except KeyError:
                raise LayoutNotFoundError(layout_id) from None

    def __contains__(self, layout_id: str) -> bool:
        return layout_id in self._layouts

    def __len__(self) -> int:
        return len(self._layouts)

    def current_grid_layout(self) -> Optional[GridLayout]:
        """GridLayout of the active definition at the current viewport."""
        layout = self.active_layout
        if layout is None:
            return None
        return layout.layout_for(self.selector.current)

    def current_positions(self) -> List[PanelPosition]:
        """Positions of the active layout at the current viewport."""
        grid = self.current_grid_layout()
        if grid is None:
            return []
        return convert(grid)

    def positions_for(self, layout_id: str, viewport: Viewport) -> List[PanelPosition]:
        """Positions of any stored layout at a given viewport.

        Raises:
            LayoutNotFoundError: If the id is unknown.
        """
        return convert(self.get(layout_id).layout_for(viewport))

    # ---------------------
    # Arena modifications
    # ---------------------

    def add_layout(self, layout: GridLayoutDefinition) -> None:
        """Add a definition, replacing any with the same id.

        Raises:
            ResizeInProgressError: If the definition it replaces is being resized.
        """
        with self._lock:
            if self._session is not None and self._session_layout_id == layout.id:
                raise ResizeInProgressError(f"Layout {layout.id} is being resized")
            if layout.id in self._layouts:
                self.logger.info(f"Replacing existing layout {layout.id}")
            self._layouts[layout.id] = layout
        self.logger.info(f"Added layout {layout.id}")
        self._notify(EVENT_ADDED, layout.id)

    def update_layout(
        self,
        layout_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        is_default: Optional[bool] = None,
        icon: Optional[str] = None,
    ) -> GridLayoutDefinition:
        """Update descriptive fields of a definition.

        Raises:
            LayoutNotFoundError: If the id is unknown.
        """
        with self._lock:
            layout = self.get(layout_id)
            if name is not None:
                layout.name = name
            if description is not None:
                layout.description = description
            if is_default is not None:
                layout.is_default = is_default
            if icon is not None:
                layout.icon = icon
            layout.touch()
        self._notify(EVENT_UPDATED, layout_id)
        return layout

    def delete_layout(self, layout_id: str) -> None:
        """Remove a definition.

        If it was active, the first remaining definition becomes active,
        or no layout is active when none remain.
        """
        with self._lock:
            if layout_id not in self._layouts:
                self.logger.warning(f"Attempted to delete unknown layout {layout_id}")
                return
            if self._session is not None and self._session_layout_id == layout_id:
                raise ResizeInProgressError(f"Layout {layout_id} is being resized")

            del self._layouts[layout_id]
            active_changed = self._active_id == layout_id
            if active_changed:
                self._active_id = next(iter(self._layouts), None)

        self.logger.info(f"Deleted layout {layout_id}")
        self._notify(EVENT_DELETED, layout_id)
        if active_changed:
            self.logger.info(f"Active layout fell back to {self._active_id}")
            self._notify(EVENT_ACTIVE, self._active_id)

    def set_active(self, layout_id: Optional[str]) -> bool:
        """Make a layout active. None or '' clears the active layout.

        Returns:
            True if the active layout was set, False for an unknown id.
        """
        with self._lock:
            if layout_id and layout_id not in self._layouts:
                self.logger.warning(f"Attempted to activate unknown layout {layout_id}")
                return False
            self._active_id = layout_id or None
        self.logger.info(f"Active layout set to {self._active_id}")
        self._notify(EVENT_ACTIVE, self._active_id)
        return True

    def get_or_create_template_layout(self, template_id: str) -> GridLayoutDefinition:
        """Definition keyed by a template id, built from the template if absent.

        Raises:
            InvalidTemplateError: If the template id is unknown.
        """
        template = get_template(template_id)
        with self._lock:
            existing = self._layouts.get(template_id)
            if existing is not None:
                return existing
            layout = build_from_template(template, log=self.logger)
        self.add_layout(layout)
        return layout

    # ----------------
    # Structural edits
    # ----------------

    def _editable_grid(self, layout_id: str, viewport: Viewport) -> GridLayout:
        if self._session is not None:
            raise ResizeInProgressError("Structural edits are not allowed during a resize")
        return self.get(layout_id).layout_for(viewport)

    def _edited(self, layout_id: str) -> None:
        self.get(layout_id).touch()
        self._notify(EVENT_EDITED, layout_id)

    def add_row(
        self,
        layout_id: str,
        viewport: Viewport,
        index: Optional[int] = None,
        cell_count: int = 1,
    ) -> Row:
        with self._lock:
            row = layout_edit.add_row(self._editable_grid(layout_id, viewport), index, cell_count)
        self._edited(layout_id)
        return row

    def delete_row(self, layout_id: str, viewport: Viewport, row_index: int) -> Row:
        with self._lock:
            row = layout_edit.delete_row(
                self._editable_grid(layout_id, viewport), row_index, self.logger
            )
        self._edited(layout_id)
        return row

    def add_cell(
        self,
        layout_id: str,
        viewport: Viewport,
        row_index: int,
        cell: Optional[SimpleCell] = None,
        index: Optional[int] = None,
    ) -> SimpleCell:
        with self._lock:
            cell = layout_edit.add_cell(
                self._editable_grid(layout_id, viewport), row_index, cell, index
            )
        self._edited(layout_id)
        return cell

    def delete_cell(self, layout_id: str, viewport: Viewport, row_index: int, cell_index: int) -> None:
        with self._lock:
            layout_edit.delete_cell(
                self._editable_grid(layout_id, viewport), row_index, cell_index, self.logger
            )
        self._edited(layout_id)

    # --------
    # Resizing
    # --------

    def _start_session(self) -> GridLayout:
        if self._session is not None:
            raise ResizeInProgressError("A resize session is already active")
        layout = self.active_layout
        if layout is None:
            raise LayoutNotFoundError(str(self._active_id))
        return layout.layout_for(self.selector.current)

    def _session_finished(self, session: ResizeSession, committed: bool) -> None:
        layout_id = self._session_layout_id
        with self._lock:
            self._session = None
            self._session_layout_id = None
        if layout_id is None or layout_id not in self._layouts:
            return
        if committed:
            self._layouts[layout_id].touch()
            self.logger.info(
                f"Layout {layout_id} {session.axis.value} resize committed at "
                f"{session.value_a:.2f}/{session.value_b:.2f}"
            )
            self._notify(EVENT_RESIZED, layout_id)
        else:
            self.logger.info(f"Layout {layout_id} {session.axis.value} resize cancelled")

    def begin_column_resize(
        self,
        row_index: int,
        cell_index: int,
        pointer: PointerPosition,
        extent_provider: ExtentProvider,
        snap_points=COLUMN_SNAP_POINTS,
    ) -> ResizeSession:
        """Start a column resize on the active layout's current viewport.

        Raises:
            ResizeInProgressError: If a session is already active.
            LayoutNotFoundError: If no layout is active.
            LayoutEditError: If the divider does not exist.
        """
        with self._lock:
            grid = self._start_session()
            if row_index < 0 or row_index >= len(grid.rows):
                raise LayoutEditError(f"Row index {row_index} out of range")
            self._session = begin_column_resize(
                grid.rows[row_index], cell_index, pointer, extent_provider,
                layout=grid, snap_points=snap_points, on_finish=self._session_finished,
            )
            self._session_layout_id = self._active_id
            return self._session

    def begin_row_resize(
        self,
        row_index: int,
        pointer: PointerPosition,
        extent_provider: ExtentProvider,
        snap_points=ROW_SNAP_POINTS,
    ) -> ResizeSession:
        """Start a row resize on the active layout's current viewport.

        Raises:
            ResizeInProgressError: If a session is already active.
            LayoutNotFoundError: If no layout is active.
            LayoutEditError: If the divider does not exist.
        """
        with self._lock:
            grid = self._start_session()
            self._session = begin_row_resize(
                grid, row_index, pointer, extent_provider,
                snap_points=snap_points, on_finish=self._session_finished,
            )
            self._session_layout_id = self._active_id
            return self._session

    # ---------
    # Listeners
    # ---------

    def add_listener(self, callback: Callable[[str, Optional[str]], None]) -> None:
        """Add a change listener called with (event, layout_id)."""
        with self._lock:
            if callback not in self._listeners:
                self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[str, Optional[str]], None]) -> None:
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def _notify(self, event: str, layout_id: Optional[str]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event, layout_id)
            except Exception as e:
                self.logger.error(f"Layout listener failed on {event}: {e}")

    # -----------
    # Persistence
    # -----------

    def to_records(self) -> List[Dict[str, Any]]:
        """All definitions as plain records for storage."""
        with self._lock:
            return [layout.to_dict() for layout in self._layouts.values()]

    def load_records(self, records: List[Dict[str, Any]], active_id: Optional[str] = None) -> int:
        """Replace the arena with stored records.

        Malformed records are logged and skipped. An active id that does
        not match a loaded layout falls back to the first one.

        Returns:
            Number of layouts loaded.

        Raises:
            ResizeInProgressError: If a resize session is active.
        """
        loaded: Dict[str, GridLayoutDefinition] = {}
        for record in records:
            try:
                layout = GridLayoutDefinition.from_dict(record)
            except (KeyError, TypeError, ValueError) as e:
                self.logger.warning(f"Skipping malformed layout record: {e}")
                continue
            loaded[layout.id] = layout

        with self._lock:
            if self._session is not None:
                raise ResizeInProgressError("Layouts cannot be reloaded during a resize")
            self._layouts = loaded
            if active_id in loaded:
                self._active_id = active_id
            else:
                self._active_id = next(iter(loaded), None)

        self.logger.info(f"Loaded layouts: {list(loaded)}, active {self._active_id}")
        return len(loaded)
