# -*- coding: utf-8 -*-
"""
Panel Grid GUI Application

Main NiceGUI application setup and routing.
"""

import logging
from typing import Any, Callable, Dict, Optional

from nicegui import ui

from layout_errors import LayoutError
from layout_types import Viewport
from .state import GridViewState, create_state
from .layouts import main_layout
from .layouts.grid import GridView

# Reports the window width on load and on every resize
VIEWPORT_JS = '''
const report = () => emitEvent('viewport_resize', {width: window.innerWidth});
window.addEventListener('resize', report);
report();
'''


class PanelGridGUI:
    """Main GUI application class.

    Binds the layout repository to a page, keeps the view state in step
    with the repository and the viewport selector, and owns the command
    handlers called by the header controls.
    """

    def __init__(
        self,
        config: Any,
        repository: Any,
        logger: logging.Logger,
    ):
        """Initialize GUI application.

        Args:
            config: Config instance.
            repository: LayoutRepository shared with the API.
            logger: Logger for GUI operations.
        """
        self._config = config
        self._repository = repository
        self._logger = logger
        self._state = create_state()
        self._grid_view: Optional[GridView] = None

        self._handlers: Dict[str, Callable] = {}
        self._setup_handlers()

        self._state.update(
            active_layout_id=repository.active_id,
            viewport=repository.selector.current,
        )
        repository.selector.add_listener(self._on_viewport_change)
        repository.add_listener(self._on_repository_event)

        self._logger.info("PanelGridGUI initialized")

    @property
    def state(self) -> GridViewState:
        """Get the application state."""
        return self._state

    @property
    def handlers(self) -> Dict[str, Callable]:
        """Get command handlers dict."""
        return self._handlers

    def _setup_handlers(self) -> None:
        """Set up default command handlers."""
        self._handlers = {
            'select_layout': self._handle_select_layout,
            'add_template': self._handle_add_template,
            'delete_layout': self._handle_delete_layout,
            'edit_mode': self._handle_edit_mode,
            'window_width': self._handle_window_width,
        }

    def _handle_select_layout(self, layout_id: Optional[str]) -> None:
        """Handle layout selection."""
        if layout_id == self._repository.active_id:
            return
        if not self._repository.set_active(layout_id):
            ui.notify(f"Unknown layout: {layout_id}", type='warning')

    def _handle_add_template(self, template_id: str) -> None:
        """Handle adding (or reusing) a layout built from a template."""
        try:
            layout = self._repository.get_or_create_template_layout(template_id)
        except LayoutError as e:
            self._logger.warning(f"Template not applied: {e}")
            ui.notify(str(e), type='negative')
            return
        self._repository.set_active(layout.id)

    def _handle_delete_layout(self) -> None:
        """Handle deleting the active layout."""
        layout_id = self._repository.active_id
        if layout_id is None:
            return
        try:
            self._repository.delete_layout(layout_id)
        except LayoutError as e:
            ui.notify(str(e), type='warning')

    def _handle_edit_mode(self, enabled: bool) -> None:
        """Handle edit mode toggle."""
        self._state.update(edit_mode=bool(enabled))
        self._refresh_grid()

    def _handle_window_width(self, width: float) -> None:
        """Handle a window width report from the browser."""
        self._state.update(window_width=int(width))
        self._repository.selector.update(width)

    def register_handler(self, name: str, handler: Callable) -> None:
        """Register a command handler.

        Args:
            name: Handler identifier.
            handler: Callback function.
        """
        self._handlers[name] = handler

    def get_handler(self, name: str) -> Optional[Callable]:
        """Get a registered handler.

        Args:
            name: Handler identifier.

        Returns:
            Handler function or None.
        """
        return self._handlers.get(name)

    def _on_viewport_change(self, viewport: Viewport) -> None:
        self._state.update(viewport=viewport)
        self._refresh_grid()

    def _on_repository_event(self, event: str, layout_id: Optional[str]) -> None:
        self._state.update(active_layout_id=self._repository.active_id)
        # The grid view restyles itself while dragging
        if event != 'resized' or not self._state.dragging:
            self._refresh_grid()

    def _refresh_grid(self) -> None:
        if self._grid_view is not None:
            self._grid_view.refresh()

    def build_ui(self) -> None:
        """Build the main UI layout.

        This is called by NiceGUI to construct the page.
        """
        self._grid_view = GridView(self._repository, self._state, self._logger)
        main_layout(
            state=self._state,
            repository=self._repository,
            grid_view=self._grid_view,
            handlers=self._handlers,
            title=self._config.gui_title,
        )
        ui.on('viewport_resize', lambda e: self._handlers['window_width'](e.args['width']))
        ui.add_body_html(f'<script>{VIEWPORT_JS}</script>')


def create_app(
    config: Any,
    repository: Any,
    logger: logging.Logger,
    title: str = "Alpaca Panel Grid",
) -> PanelGridGUI:
    """Create the GUI application.

    Args:
        config: Config instance.
        repository: LayoutRepository shared with the API.
        logger: Logger for GUI operations.
        title: Window/page title.

    Returns:
        PanelGridGUI instance ready to run.
    """
    gui = PanelGridGUI(config, repository, logger)

    @ui.page('/')
    def main_page():
        ui.page_title(title)
        gui.build_ui()

    return gui


def run_app(
    gui: PanelGridGUI,
    host: str = '0.0.0.0',
    port: int = 8080,
    reload: bool = False,
    title: str = "Alpaca Panel Grid",
) -> None:
    """Run the GUI application.

    Args:
        gui: PanelGridGUI instance.
        host: Bind address.
        port: Port number.
        reload: Enable auto-reload for development.
        title: Browser tab title.
    """
    ui.run(
        host=host,
        port=port,
        reload=reload,
        title=title,
        favicon='▦',
    )
