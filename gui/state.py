# -*- coding: utf-8 -*-
"""
State Management for the Panel Grid GUI

Reactive view state for the grid page: which viewport is shown, whether
dividers are editable, and whether a drag is running.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional
import logging
import threading

from layout_types import Viewport


@dataclass
class GridViewState:
    """Reactive state container for the panel grid page.

    All fields trigger UI updates when modified through the update() method.
    """

    # Layout selection
    active_layout_id: Optional[str] = None
    viewport: Viewport = Viewport.DESKTOP
    window_width: int = 0

    # Editing
    edit_mode: bool = False
    dragging: bool = False
    drag_axis: Optional[str] = None  # "column", "row"
    drag_value: Optional[float] = None  # live value of the left or upper sibling

    # Last change
    last_update: Optional[datetime] = None

    def __post_init__(self):
        """Initialize internal state."""
        self._lock = threading.RLock()
        self._listeners: List[Callable[[str, Any], None]] = []
        self._logger = logging.getLogger('panel_grid')

    def update(self, **kwargs) -> None:
        """Update state fields and notify listeners.

        Args:
            **kwargs: Field names and new values.
        """
        with self._lock:
            changed_fields = []
            for key, value in kwargs.items():
                if hasattr(self, key):
                    old_value = getattr(self, key)
                    if old_value != value:
                        setattr(self, key, value)
                        changed_fields.append((key, value))

            if changed_fields:
                self.last_update = datetime.now()
                listeners = list(self._listeners)
            else:
                listeners = []

        for field_name, new_value in changed_fields:
            for listener in listeners:
                try:
                    listener(field_name, new_value)
                except Exception as e:
                    self._logger.error(f"GUI state listener failed on {field_name}: {e}")

    def add_listener(self, callback: Callable[[str, Any], None]) -> None:
        """Add a state change listener.

        Args:
            callback: Function called with (field_name, new_value) on changes.
        """
        with self._lock:
            if callback not in self._listeners:
                self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[str, Any], None]) -> None:
        """Remove a state change listener.

        Args:
            callback: Previously registered callback.
        """
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)


def create_state() -> GridViewState:
    """Create a new grid view state instance.

    Returns:
        Fresh GridViewState with default values.
    """
    return GridViewState()


# Formatting utilities for display
def format_percent(value: float) -> str:
    """Format a width or height percentage.

    Args:
        value: Percentage.

    Returns:
        Formatted string like "33.3%", whole numbers without decimals.
    """
    if abs(value - round(value)) < 0.05:
        return f"{round(value):d}%"
    return f"{value:.1f}%"


def format_fraction(value: float) -> str:
    """Name the canonical fraction closest to a percentage.

    Args:
        value: Percentage.

    Returns:
        Fraction like "1/3", or the formatted percentage if none is close.
    """
    fractions = {
        20.0: '1/5', 25.0: '1/4', 33.33: '1/3', 40.0: '2/5', 50.0: '1/2',
        60.0: '3/5', 66.67: '2/3', 75.0: '3/4', 80.0: '4/5',
    }
    for point, label in fractions.items():
        if abs(point - value) < 0.01:
            return label
    return format_percent(value)
