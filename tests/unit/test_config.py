"""
Unit tests for the panel grid configuration module.

Tests configuration loading, property access, and TOML persistence
using temporary files to avoid modifying actual config.
"""

import logging
import pytest
import toml
from unittest.mock import patch

# Import module under test
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from config import Config, ConfigError


@pytest.fixture
def no_override(tmp_path):
    """Point the override file at a path that does not exist."""
    with patch.object(Config, 'OVERRIDE_CONFIG_PATH', str(tmp_path / 'override' / 'config.toml')):
        yield tmp_path / 'override' / 'config.toml'


@pytest.fixture
def loaded_config(temp_toml_file, tmp_path, no_override):
    """Create a loaded config instance for testing."""
    (tmp_path / 'config.toml').write_text(temp_toml_file.read_text())
    with patch.object(Config, 'get_config_dir', return_value=tmp_path):
        yield Config()


class TestConfigInitialization:
    """Test configuration initialization."""

    @pytest.mark.unit
    def test_config_loads_from_file(self, loaded_config):
        """Config should load successfully from TOML file."""
        assert loaded_config is not None
        assert loaded_config._lock is not None

    @pytest.mark.unit
    def test_config_raises_on_missing_file(self, tmp_path, no_override):
        """Config should raise error when file is missing."""
        with patch.object(Config, 'get_config_dir', return_value=tmp_path):
            with pytest.raises(ConfigError, match="Failed to load"):
                Config()

    @pytest.mark.unit
    def test_config_raises_on_invalid_toml(self, tmp_path, no_override):
        """Config should raise error on invalid TOML syntax."""
        (tmp_path / 'config.toml').write_text('invalid toml {{{{')

        with patch.object(Config, 'get_config_dir', return_value=tmp_path):
            with pytest.raises(ConfigError):
                Config()


class TestConfigProperties:
    """Test section properties."""

    @pytest.mark.unit
    def test_network(self, loaded_config):
        """Network properties should return configured values."""
        assert loaded_config.ip_address == ''
        assert loaded_config.port == 5555

    @pytest.mark.unit
    def test_layout(self, loaded_config, tmp_path):
        """Layout properties should return configured values."""
        assert loaded_config.storage_file == tmp_path / 'layouts.json'
        assert loaded_config.default_template == 'hybrid-50'
        assert loaded_config.mobile_breakpoint == 768
        assert loaded_config.tablet_breakpoint == 1200

    @pytest.mark.unit
    def test_absolute_storage_file(self, loaded_config, tmp_path):
        """Absolute storage paths are kept as given."""
        target = tmp_path / 'elsewhere' / 'grid.json'
        loaded_config.storage_file = str(target)
        assert loaded_config.storage_file == target

    @pytest.mark.unit
    def test_gui(self, loaded_config):
        """GUI properties should return configured values."""
        assert loaded_config.gui_enabled is True
        assert loaded_config.gui_port == 8080
        assert loaded_config.gui_title == 'Test Grid'

    @pytest.mark.unit
    def test_logging(self, loaded_config):
        """Logging properties should return configured values."""
        assert loaded_config.log_level == logging.DEBUG
        assert loaded_config.log_to_stdout is False
        assert loaded_config.max_size_mb == 5
        assert loaded_config.num_keep_logs == 10
        assert loaded_config.log_file == 'panel_grid.log'

    @pytest.mark.unit
    def test_defaults(self, tmp_path, no_override):
        """Missing sections fall back to defaults."""
        (tmp_path / 'config.toml').write_text('title = "Bare"\n')
        with patch.object(Config, 'get_config_dir', return_value=tmp_path):
            config = Config()

        assert config.port == 5555
        assert config.default_template == 'hybrid-50'
        assert config.gui_enabled is True
        assert config.log_level == logging.INFO


class TestConfigOverride:
    """Test the override file."""

    @pytest.mark.unit
    def test_override_wins(self, temp_toml_file, tmp_path, no_override):
        """Values in the override file take precedence."""
        (tmp_path / 'config.toml').write_text(temp_toml_file.read_text())
        no_override.parent.mkdir(parents=True)
        no_override.write_text("[layout]\ndefault_template = '2x2'\n")

        with patch.object(Config, 'get_config_dir', return_value=tmp_path):
            config = Config()

        assert config.default_template == '2x2'
        assert config.mobile_breakpoint == 768


class TestConfigPersistence:
    """Test save and reload."""

    @pytest.mark.unit
    def test_save_and_reload(self, loaded_config, tmp_path):
        """Changed values survive save and reload."""
        loaded_config.tablet_breakpoint = 1400
        loaded_config.save()

        saved = toml.load(tmp_path / 'config.toml')
        assert saved['layout']['tablet_breakpoint'] == 1400

        loaded_config.reload()
        assert loaded_config.tablet_breakpoint == 1400

    @pytest.mark.unit
    def test_repr(self, loaded_config):
        """repr names the config file."""
        assert 'config.toml' in repr(loaded_config)
