# -*- coding: utf-8 -*-
"""
Layout Components

Page layouts and structure components.
"""

from .grid import (
    GridView,
    grid_style,
    position_style,
    column_divider_offsets,
    row_divider_offsets,
)
from .main import (
    main_layout,
    header,
)

__all__ = [
    'GridView',
    'grid_style',
    'position_style',
    'column_divider_offsets',
    'row_divider_offsets',
    'main_layout',
    'header',
]
