"""
Falcon resources exposing the panel grid engine.

Every resource works on a shared LayoutRepository and returns JSON via
resp.media. Positions are recomputed from the grid on each request.

Classes:
    TemplatesResource: Static template catalogue
    LayoutsResource: List layouts, create a layout from a template
    LayoutResource: Read or delete one layout
    ActiveLayoutResource: Read or change the active layout
    PositionsResource: Panel positions of a layout for a viewport
    ViewportResource: Classify a window width
"""

import logging
from typing import Any, Dict, Optional

import falcon
from falcon import Request, Response

import log
from layout_errors import InvalidTemplateError, LayoutNotFoundError, ResizeInProgressError
from layout_templates import STATIC_TEMPLATES, build_from_template
from layout_types import Viewport

__version__ = "1.0.0"


def _layout_summary(layout) -> Dict[str, Any]:
    return {
        'id': layout.id,
        'name': layout.name,
        'description': layout.description,
        'isDefault': layout.is_default,
        'icon': layout.icon,
        'updatedAt': layout.updated_at,
    }


class _RepositoryResource:
    """Base for resources bound to a repository."""

    def __init__(self, repository, logger: Optional[logging.Logger] = None):
        self.repository = repository
        self.logger = logger or log.logger or logging.getLogger(__name__)

    def _get_layout(self, layout_id: str):
        try:
            return self.repository.get(layout_id)
        except LayoutNotFoundError as e:
            raise falcon.HTTPNotFound(title='Layout not found', description=str(e)) from e


class TemplatesResource(_RepositoryResource):
    """GET /api/templates"""

    def on_get(self, req: Request, resp: Response) -> None:
        resp.media = [
            {
                'id': t.id,
                'name': t.name,
                'description': t.description,
                'rows': t.rows,
                'cols': t.cols,
                'icon': t.icon,
            }
            for t in STATIC_TEMPLATES
        ]


class LayoutsResource(_RepositoryResource):
    """GET/POST /api/layouts"""

    def on_get(self, req: Request, resp: Response) -> None:
        resp.media = {
            'layouts': [_layout_summary(layout) for layout in self.repository.layouts],
            'currentLayoutId': self.repository.active_id,
        }

    def on_post(self, req: Request, resp: Response) -> None:
        """Create a layout from a template.

        Body: {"templateId": str, "isDefault": bool, "id": str, "name": str}
        """
        body = req.get_media(default_when_empty={}) or {}
        template_id = body.get('templateId')
        if not template_id:
            raise falcon.HTTPBadRequest(title='Missing templateId')

        try:
            layout = build_from_template(
                template_id,
                is_default=bool(body.get('isDefault', False)),
                layout_id=body.get('id'),
                name=body.get('name'),
                log=self.logger,
            )
        except InvalidTemplateError as e:
            self.logger.warning(f"Layout creation rejected: {e}")
            raise falcon.HTTPNotFound(title='Template not found', description=str(e)) from e

        try:
            self.repository.add_layout(layout)
        except ResizeInProgressError as e:
            raise falcon.HTTPConflict(title='Layout busy', description=str(e)) from e
        resp.status = falcon.HTTP_201
        resp.media = layout.to_dict()


class LayoutResource(_RepositoryResource):
    """GET/DELETE /api/layouts/{layout_id}"""

    def on_get(self, req: Request, resp: Response, layout_id: str) -> None:
        resp.media = self._get_layout(layout_id).to_dict()

    def on_delete(self, req: Request, resp: Response, layout_id: str) -> None:
        self._get_layout(layout_id)
        try:
            self.repository.delete_layout(layout_id)
        except ResizeInProgressError as e:
            raise falcon.HTTPConflict(title='Layout busy', description=str(e)) from e
        resp.media = {'deleted': layout_id, 'currentLayoutId': self.repository.active_id}


class ActiveLayoutResource(_RepositoryResource):
    """GET/PUT /api/active-layout"""

    def on_get(self, req: Request, resp: Response) -> None:
        layout = self.repository.active_layout
        resp.media = {
            'currentLayoutId': self.repository.active_id,
            'layout': layout.to_dict() if layout else None,
        }

    def on_put(self, req: Request, resp: Response) -> None:
        body = req.get_media(default_when_empty={}) or {}
        layout_id = body.get('id')
        if not self.repository.set_active(layout_id):
            raise falcon.HTTPNotFound(
                title='Layout not found',
                description=f"Unknown layout: {layout_id}",
            )
        resp.media = {'currentLayoutId': self.repository.active_id}


class PositionsResource(_RepositoryResource):
    """GET /api/layouts/{layout_id}/positions?viewport=|width="""

    def on_get(self, req: Request, resp: Response, layout_id: str) -> None:
        layout = self._get_layout(layout_id)

        viewport_name = req.get_param('viewport')
        width = req.get_param_as_int('width', min_value=0)
        if viewport_name:
            try:
                viewport = Viewport(viewport_name)
            except ValueError as e:
                raise falcon.HTTPBadRequest(
                    title='Invalid viewport',
                    description=f"Expected one of {[v.value for v in Viewport]}",
                ) from e
        elif width is not None:
            viewport = self.repository.selector.classify(width)
        else:
            viewport = self.repository.selector.current

        grid = layout.layout_for(viewport)
        resp.media = {
            'layoutId': layout.id,
            'viewport': viewport.value,
            'rowHeights': [row.height for row in grid.rows],
            'positions': [p.to_dict() for p in self.repository.positions_for(layout.id, viewport)],
        }


class ViewportResource(_RepositoryResource):
    """GET /api/viewport?width="""

    def on_get(self, req: Request, resp: Response) -> None:
        width = req.get_param_as_int('width', required=True, min_value=0)
        resp.media = {
            'width': width,
            'viewport': self.repository.selector.classify(width).value,
        }


def create_api(repository, logger: Optional[logging.Logger] = None) -> falcon.App:
    """Create the Falcon app for the layout API.

    Args:
        repository: Shared LayoutRepository.
        logger: Logger for request handling.

    Returns:
        falcon.App with all layout routes.
    """
    app = falcon.App()
    app.add_route('/api/templates', TemplatesResource(repository, logger))
    app.add_route('/api/layouts', LayoutsResource(repository, logger))
    app.add_route('/api/layouts/{layout_id}', LayoutResource(repository, logger))
    app.add_route('/api/layouts/{layout_id}/positions', PositionsResource(repository, logger))
    app.add_route('/api/active-layout', ActiveLayoutResource(repository, logger))
    app.add_route('/api/viewport', ViewportResource(repository, logger))
    return app
