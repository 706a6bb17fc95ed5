"""
Shared pytest fixtures for the Alpaca Panel Grid tests.

This module provides common fixtures used across unit and integration tests,
including mock loggers, sample grids, and repository instances.
"""

import pytest
from unittest.mock import Mock
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing.

    Returns:
        Mock logger with standard logging methods.
    """
    logger = Mock()
    logger.debug = Mock()
    logger.info = Mock()
    logger.warning = Mock()
    logger.error = Mock()
    logger.critical = Mock()
    return logger


@pytest.fixture
def mock_config(tmp_path):
    """Create mock configuration object.

    Returns:
        Mock config with standard properties.
    """
    config = Mock()
    config.ip_address = ''
    config.port = 5555
    config.storage_file = tmp_path / 'layouts.json'
    config.default_template = 'hybrid-50'
    config.mobile_breakpoint = 768
    config.tablet_breakpoint = 1200
    config.gui_enabled = False
    config.gui_port = 8080
    config.gui_title = 'Test Grid'
    config.log_level = 10  # DEBUG
    config.log_to_stdout = False
    config.max_size_mb = 5
    config.num_keep_logs = 10
    config.log_file = str(tmp_path / 'panel_grid.log')
    return config


@pytest.fixture
def stacked_grid():
    """Full-width row over halves over thirds.

    Returns:
        GridLayout with 1, 2 and 3 simple cells.
    """
    from layout_types import GridLayout, Row, SimpleCell
    return GridLayout(rows=[
        Row('row-1', [SimpleCell('a', width=100.0)], height=40.0),
        Row('row-2', [SimpleCell('b', width=50.0), SimpleCell('c', width=50.0)], height=30.0),
        Row('row-3', [
            SimpleCell('d', width=33.33),
            SimpleCell('e', width=33.33),
            SimpleCell('f', width=33.34),
        ], height=30.0),
    ])


@pytest.fixture
def hybrid_grid():
    """Tall left cell beside two stacked right cells.

    Returns:
        GridLayout with a spanning cell and its continuation.
    """
    from layout_types import ContinuationCell, GridLayout, Row, SimpleCell, SpanningCell
    return GridLayout(rows=[
        Row('row-1', [SpanningCell('left', width=50.0, row_span=2), SimpleCell('tr', width=50.0)], height=50.0),
        Row('row-2', [ContinuationCell('left', width=50.0), SimpleCell('br', width=50.0)], height=50.0),
    ])


@pytest.fixture
def repository(mock_logger):
    """Create an empty LayoutRepository with its own viewport selector.

    Args:
        mock_logger: Mock logger fixture

    Returns:
        LayoutRepository instance.
    """
    from layout_repository import LayoutRepository
    from viewport import ViewportSelector
    return LayoutRepository(mock_logger, ViewportSelector(logger=mock_logger))


@pytest.fixture
def seeded_repository(repository):
    """Repository holding the hybrid-50 and 2x2 templates, hybrid-50 active.

    Args:
        repository: Empty repository fixture

    Returns:
        LayoutRepository instance.
    """
    repository.get_or_create_template_layout('hybrid-50')
    repository.get_or_create_template_layout('2x2')
    repository.set_active('hybrid-50')
    return repository


# Utility fixtures

@pytest.fixture
def temp_toml_file(tmp_path):
    """Create a temporary TOML config file for testing.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary config file.
    """
    config_content = """
title = "Test Config"

[network]
ip_address = ''
port = 5555

[layout]
storage_file = 'layouts.json'
default_template = 'hybrid-50'
mobile_breakpoint = 768
tablet_breakpoint = 1200

[gui]
enabled = true
port = 8080
title = 'Test Grid'

[logging]
log_level = 'DEBUG'
log_to_stdout = false
max_size_mb = 5
num_keep_logs = 10
log_file = 'panel_grid.log'
"""
    config_file = tmp_path / "test_config.toml"
    config_file.write_text(config_content)
    return config_file
