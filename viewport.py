# -*- coding: utf-8 -*-
"""
Viewport Selection

Maps a measured window width to a viewport class. The selector only
chooses which GridLayout of the active definition is read; it never
changes a layout.
"""

import logging
import threading
from typing import Callable, List, Optional

from layout_types import Viewport

MOBILE_BREAKPOINT = 768
TABLET_BREAKPOINT = 1200


def classify(
    window_width: float,
    mobile_breakpoint: int = MOBILE_BREAKPOINT,
    tablet_breakpoint: int = TABLET_BREAKPOINT,
) -> Viewport:
    """Classify a window width.

    Args:
        window_width: Window inner width in pixels.
        mobile_breakpoint: Widths below this are mobile.
        tablet_breakpoint: Widths below this (and not mobile) are tablet.

    Returns:
        Viewport for the width.
    """
    if window_width < mobile_breakpoint:
        return Viewport.MOBILE
    if window_width < tablet_breakpoint:
        return Viewport.TABLET
    return Viewport.DESKTOP


class ViewportSelector:
    """Tracks the current viewport and notifies on changes.

    Callers feed every observed window width to update(); debouncing is
    left to them since re-classification is cheap and idempotent.
    """

    def __init__(
        self,
        mobile_breakpoint: int = MOBILE_BREAKPOINT,
        tablet_breakpoint: int = TABLET_BREAKPOINT,
        initial: Viewport = Viewport.DESKTOP,
        logger: Optional[logging.Logger] = None,
    ):
        self._lock = threading.RLock()
        self._mobile_breakpoint = mobile_breakpoint
        self._tablet_breakpoint = tablet_breakpoint
        self._current = initial
        self._listeners: List[Callable[[Viewport], None]] = []
        self.logger = logger or logging.getLogger('panel_grid')

    @property
    def current(self) -> Viewport:
        return self._current

    def classify(self, window_width: float) -> Viewport:
        return classify(window_width, self._mobile_breakpoint, self._tablet_breakpoint)

    def update(self, window_width: float) -> bool:
        """Re-classify after a window size change.

        Returns:
            True if the viewport changed.
        """
        return self.set_viewport(self.classify(window_width))

    def set_viewport(self, viewport: Viewport) -> bool:
        """Force a viewport, e.g. for a preview.

        Returns:
            True if the viewport changed.
        """
        with self._lock:
            if viewport is self._current:
                return False
            self._current = viewport
            listeners = list(self._listeners)

        self.logger.debug(f"Viewport changed to {viewport.value}")
        for listener in listeners:
            try:
                listener(viewport)
            except Exception as e:
                self.logger.error(f"Viewport listener failed: {e}")
        return True

    def add_listener(self, callback: Callable[[Viewport], None]) -> None:
        with self._lock:
            if callback not in self._listeners:
                self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[Viewport], None]) -> None:
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)
