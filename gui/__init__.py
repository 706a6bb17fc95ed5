# -*- coding: utf-8 -*-
"""
Alpaca Panel Grid GUI Package

NiceGUI page showing the active layout as a 12-column grid with
draggable dividers in edit mode.

Usage:
    from gui import create_app, run_app

    gui = create_app(config, repository, logger)
    run_app(gui, host='0.0.0.0', port=8080)
"""

from .app import create_app, run_app, PanelGridGUI
from .state import (
    GridViewState,
    create_state,
    format_percent,
    format_fraction,
)

__all__ = [
    # Application
    'create_app',
    'run_app',
    'PanelGridGUI',
    # State
    'GridViewState',
    'create_state',
    'format_percent',
    'format_fraction',
]

__version__ = '0.1.0'
