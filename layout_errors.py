"""
Panel Grid Exception Hierarchy

Custom exceptions for the panel grid-layout engine. Structural anomalies in
layout data are never raised; they are logged and degraded to a best-effort
interpretation. Only the conditions below reach the caller.
"""


class LayoutError(Exception):
    """Base exception for all layout engine errors.

    All layout-related exceptions inherit from this class, allowing
    callers to catch all layout errors with a single except clause.
    """
    pass


class InvalidTemplateError(LayoutError):
    """Raised when a template id is not in the known template set.

    Acting on a template that does not exist would silently produce a
    wrong layout, so the build call fails instead. The UI layer is
    expected to surface this as a simple message.
    """

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Unknown layout template: {template_id}")


class LayoutNotFoundError(LayoutError):
    """Raised when a layout id is not present in the repository."""

    def __init__(self, layout_id: str):
        self.layout_id = layout_id
        super().__init__(f"Unknown layout: {layout_id}")


class LayoutEditError(LayoutError):
    """Raised when a structural edit cannot be applied.

    Possible causes:
    - Row or cell index out of range
    - Deleting a continuation placeholder instead of its spanning cell
    - No horizontal space left in a row for a new cell
    - Resize divider without a sibling on the far side
    """
    pass


class ResizeStateError(LayoutError):
    """Raised when a finished resize session is updated, committed or cancelled."""
    pass


class ResizeInProgressError(LayoutError):
    """Raised when a second resize or a structural edit starts during a drag."""
    pass


class StorageError(LayoutError):
    """Raised when layouts cannot be loaded from or saved to storage."""
    pass
