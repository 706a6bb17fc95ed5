"""
Unit tests for JSON layout storage.

Uses temporary files to avoid touching a real layout store.
"""

import json
import pytest
from unittest.mock import Mock

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from layout_errors import StorageError
from layout_storage import LayoutStorage, bind_autosave


class TestLayoutStorage:
    """Test load and save."""

    @pytest.mark.unit
    def test_missing_file(self, tmp_path, mock_logger):
        """A missing file loads as an empty store."""
        storage = LayoutStorage(tmp_path / 'layouts.json', mock_logger)
        assert storage.load() == ([], None)

    @pytest.mark.unit
    def test_round_trip(self, tmp_path, mock_logger, seeded_repository):
        """Saved records load back unchanged."""
        storage = LayoutStorage(tmp_path / 'nested' / 'layouts.json', mock_logger)
        records = seeded_repository.to_records()

        storage.save(records, 'hybrid-50')

        assert storage.load() == (records, 'hybrid-50')
        assert not (tmp_path / 'nested' / 'layouts.json.tmp').exists()

    @pytest.mark.unit
    def test_file_format(self, tmp_path, mock_logger):
        """The file holds layouts and currentLayoutId."""
        path = tmp_path / 'layouts.json'
        LayoutStorage(path, mock_logger).save([], None)
        assert json.loads(path.read_text()) == {'layouts': [], 'currentLayoutId': None}

    @pytest.mark.unit
    def test_invalid_json(self, tmp_path, mock_logger):
        """Unparseable files raise StorageError."""
        path = tmp_path / 'layouts.json'
        path.write_text('{not json')
        with pytest.raises(StorageError, match="Failed to load"):
            LayoutStorage(path, mock_logger).load()

    @pytest.mark.unit
    def test_unexpected_structure(self, tmp_path, mock_logger):
        """A JSON document of the wrong shape raises StorageError."""
        path = tmp_path / 'layouts.json'
        path.write_text('[1, 2, 3]')
        with pytest.raises(StorageError):
            LayoutStorage(path, mock_logger).load()


class TestAutosave:
    """Test the autosave listener."""

    @pytest.mark.unit
    def test_saves_on_change(self, tmp_path, mock_logger, repository):
        """Every repository change is written."""
        storage = LayoutStorage(tmp_path / 'layouts.json', mock_logger)
        bind_autosave(repository, storage)

        repository.get_or_create_template_layout('1x2')
        repository.set_active('1x2')

        records, active_id = storage.load()
        assert [r['id'] for r in records] == ['1x2']
        assert active_id == '1x2'

    @pytest.mark.unit
    def test_save_failure_logged(self, mock_logger, repository):
        """A failed save is logged, not raised."""
        storage = Mock()
        storage.save.side_effect = StorageError("disk full")
        storage.logger = mock_logger
        listener = bind_autosave(repository, storage)

        repository.get_or_create_template_layout('1x2')

        mock_logger.error.assert_called_once()
        repository.remove_listener(listener)
