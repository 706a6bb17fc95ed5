# -*- coding: utf-8 -*-
"""
Layout Storage

JSON file persistence for the layout repository. The engine hands over
plain records; this module only reads and writes them:

    {"layouts": [...], "currentLayoutId": "hybrid-50"}

bind_autosave() registers a repository listener that writes the file
after every change.
"""

import json
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from layout_errors import StorageError

LAYOUTS_KEY = 'layouts'
CURRENT_LAYOUT_ID_KEY = 'currentLayoutId'


class LayoutStorage:
    """Thread-safe JSON store for layout records."""

    def __init__(self, path: Union[str, Path], logger):
        """Initialize storage.

        Args:
            path: JSON file location.
            logger: Logger instance for error reporting
        """
        self.path = Path(path)
        self.logger = logger
        self._lock = threading.RLock()

    def load(self) -> Tuple[List[Dict[str, Any]], Optional[str]]:
        """Read stored layouts.

        Returns:
            (records, active_id). A missing file gives ([], None).

        Raises:
            StorageError: If the file cannot be read or parsed.
        """
        with self._lock:
            if not self.path.exists():
                self.logger.info(f"No layout file at {self.path}, starting empty")
                return [], None
            try:
                with self.path.open('r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise StorageError(f"Failed to load layouts from {self.path}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get(LAYOUTS_KEY, []), list):
            raise StorageError(f"Layout file {self.path} has an unexpected structure")

        records = data.get(LAYOUTS_KEY, [])
        self.logger.debug(f"Loaded {len(records)} layout records from {self.path}")
        return records, data.get(CURRENT_LAYOUT_ID_KEY)

    def save(self, records: List[Dict[str, Any]], active_id: Optional[str]) -> None:
        """Write layouts, replacing the file.

        Raises:
            StorageError: If the file cannot be written.
        """
        data = {LAYOUTS_KEY: records, CURRENT_LAYOUT_ID_KEY: active_id}
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path = self.path.with_suffix(self.path.suffix + '.tmp')
                with tmp_path.open('w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2)
                tmp_path.replace(self.path)
            except OSError as e:
                raise StorageError(f"Failed to save layouts to {self.path}: {e}") from e
        self.logger.debug(f"Saved {len(records)} layouts to {self.path}")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(path='{self.path}')"


def bind_autosave(repository, storage: LayoutStorage) -> Callable[[str, Optional[str]], None]:
    """Save the repository whenever it changes.

    Args:
        repository: LayoutRepository to observe.
        storage: Destination store.

    Returns:
        The registered listener, for remove_listener().
    """
    def autosave(event: str, layout_id: Optional[str]) -> None:
        try:
            storage.save(repository.to_records(), repository.active_id)
        except StorageError as e:
            storage.logger.error(f"Autosave after {event} of {layout_id} failed: {e}")

    repository.add_listener(autosave)
    return autosave
