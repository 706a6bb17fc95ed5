"""
Web API package for the panel grid engine.

Provides Falcon resources that expose layouts, templates, panel positions
and viewport classification as JSON.

Example:
    >>> from web import create_api
    >>> api = create_api(repository, logger)
    >>> waitress.serve(api, port=5555)
"""

from typing import List

__version__ = "1.0.0"

from .layout_resources import (
    ActiveLayoutResource,
    LayoutResource,
    LayoutsResource,
    PositionsResource,
    TemplatesResource,
    ViewportResource,
    create_api,
)

__all__: List[str] = [
    "create_api",
    "TemplatesResource",
    "LayoutsResource",
    "LayoutResource",
    "ActiveLayoutResource",
    "PositionsResource",
    "ViewportResource",
    "__version__",
]
