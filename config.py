# -*- coding: utf-8 -*-
# -----------------------------------------------------------------------------
# config.py - Panel grid configuration file with TOML persistence
# Part of the AlpycaDevice Alpaca skeleton/template device driver
#
# Author:   Robert B. Denny <rdenny@dc3.com> (rbd)
#           Enhanced by: Reid W. Smythe <rwsmythe@gmail.com> (rws)
#
# Python Compatibility: Requires Python 3.7 or later
# GitHub: https://github.com/ASCOMInitiative/AlpycaDevice
#
# -----------------------------------------------------------------------------
# MIT License
#
# Copyright (c) 2022-2024 Bob Denny
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
# -----------------------------------------------------------------------------

import threading
from pathlib import Path
from typing import Any
import sys
import toml
import logging


class ConfigError(Exception):
    """Custom exception for configuration errors"""
    pass


class Config:
    """Panel grid configuration with thread-safe TOML persistence.

    For docker-based installations, looks for /alpaca-grid/config.toml
    first, with any settings there overriding ./config.toml.

    Attributes:
        ip_address: API bind address
        port: API port
        storage_file: Layout JSON file
        default_template: Template used when no layouts are stored
        mobile_breakpoint: Window widths below this are mobile
        tablet_breakpoint: Window widths below this are tablet
        gui_enabled: Serve the NiceGUI panel page
        gui_port: NiceGUI port
        gui_title: Page title
        log_level: Logging level (integer)
        log_to_stdout: Enable logging to stdout
        max_size_mb: Maximum log file size in MB
        num_keep_logs: Number of log files to keep
        log_file: Log file name
    """

    # Class constants
    DEFAULT_CONFIG_FILE = 'config.toml'
    OVERRIDE_CONFIG_PATH = '/alpaca-grid/config.toml'

    def get_config_dir(self):
        if getattr(sys, 'frozen', False):
            return Path(sys.executable).parent
        return Path(sys.path[0])

    def __init__(self):
        """Initialize configuration by loading TOML files."""
        self._lock = threading.RLock()
        self._dict = {}
        self._dict2 = {}

        self._config_file = self.get_config_dir() / self.DEFAULT_CONFIG_FILE
        self._override_file = Path(self.OVERRIDE_CONFIG_PATH)

        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from TOML files.

        Raises:
            ConfigError: If primary config file cannot be loaded.
        """
        with self._lock:
            try:
                self._dict = toml.load(self._config_file)
            except (FileNotFoundError, toml.TomlDecodeError) as e:
                raise ConfigError(
                    f"Failed to load primary config file {self._config_file}: {e}"
                ) from e

            try:
                if self._override_file.exists():
                    self._dict2 = toml.load(self._override_file)
            except toml.TomlDecodeError as e:
                raise ConfigError(
                    f"Failed to load override config file {self._override_file}: {e}"
                ) from e

    def _get_toml(self, sect: str, item: str, default: Any = '') -> Any:
        """Get configuration value, checking override file first.

        Args:
            sect: Configuration section name
            item: Configuration item name
            default: Value returned when neither file has the item

        Returns:
            Configuration value or default if not found
        """
        with self._lock:
            try:
                return self._dict2[sect][item]
            except KeyError:
                try:
                    return self._dict[sect][item]
                except KeyError:
                    return default

    def _put_toml(self, sect: str, item: str, setting: Any) -> None:
        """Set configuration value in the appropriate dictionary.

        Args:
            sect: Configuration section name
            item: Configuration item name
            setting: Value to set
        """
        with self._lock:
            # Override file wins once it exists or has been used
            if self._dict2 or self._override_file.exists():
                if sect not in self._dict2:
                    self._dict2[sect] = {}
                self._dict2[sect][item] = setting
            else:
                if sect not in self._dict:
                    self._dict[sect] = {}
                self._dict[sect][item] = setting

    def save(self) -> None:
        """Save configuration to file, overwriting existing.

        Raises:
            ConfigError: If configuration cannot be saved.
        """
        with self._lock:
            try:
                if self._dict2 or self._override_file.exists():
                    self._override_file.parent.mkdir(parents=True, exist_ok=True)
                    with self._override_file.open('w', encoding='utf-8') as f:
                        toml.dump(self._dict2, f)
                else:
                    with self._config_file.open('w', encoding='utf-8') as f:
                        toml.dump(self._dict, f)
            except (OSError, PermissionError) as e:
                raise ConfigError(f"Failed to save configuration: {e}") from e

    def reload(self) -> None:
        """Reload configuration from files.

        Raises:
            ConfigError: If configuration files cannot be reloaded.
        """
        with self._lock:
            self._dict = {}
            self._dict2 = {}
            self._load_config()

    # Configuration section constants
    NETWORK_SECTION = 'network'
    LAYOUT_SECTION = 'layout'
    GUI_SECTION = 'gui'
    LOGGING_SECTION = 'logging'

    # ---------------
    # Network Section
    # ---------------

    @property
    def ip_address(self) -> str:
        """API bind address."""
        return self._get_toml(self.NETWORK_SECTION, 'ip_address', '')

    @ip_address.setter
    def ip_address(self, value: str) -> None:
        self._put_toml(self.NETWORK_SECTION, 'ip_address', value)

    @property
    def port(self) -> int:
        """API port."""
        return self._get_toml(self.NETWORK_SECTION, 'port', 5555)

    @port.setter
    def port(self, value: int) -> None:
        self._put_toml(self.NETWORK_SECTION, 'port', value)

    # --------------
    # Layout Section
    # --------------

    @property
    def storage_file(self) -> Path:
        """Layout JSON file, relative paths resolve against the config dir."""
        path = Path(self._get_toml(self.LAYOUT_SECTION, 'storage_file', 'layouts.json'))
        if not path.is_absolute():
            path = self._config_file.parent / path
        return path

    @storage_file.setter
    def storage_file(self, value: str) -> None:
        self._put_toml(self.LAYOUT_SECTION, 'storage_file', str(value))

    @property
    def default_template(self) -> str:
        """Template used to seed an empty layout store."""
        return self._get_toml(self.LAYOUT_SECTION, 'default_template', 'hybrid-50')

    @default_template.setter
    def default_template(self, value: str) -> None:
        self._put_toml(self.LAYOUT_SECTION, 'default_template', value)

    @property
    def mobile_breakpoint(self) -> int:
        """Window widths below this are mobile."""
        return self._get_toml(self.LAYOUT_SECTION, 'mobile_breakpoint', 768)

    @mobile_breakpoint.setter
    def mobile_breakpoint(self, value: int) -> None:
        self._put_toml(self.LAYOUT_SECTION, 'mobile_breakpoint', value)

    @property
    def tablet_breakpoint(self) -> int:
        """Window widths below this (and not mobile) are tablet."""
        return self._get_toml(self.LAYOUT_SECTION, 'tablet_breakpoint', 1200)

    @tablet_breakpoint.setter
    def tablet_breakpoint(self, value: int) -> None:
        self._put_toml(self.LAYOUT_SECTION, 'tablet_breakpoint', value)

    # -----------
    # GUI Section
    # -----------

    @property
    def gui_enabled(self) -> bool:
        """Serve the NiceGUI panel page."""
        return self._get_toml(self.GUI_SECTION, 'enabled', True)

    @gui_enabled.setter
    def gui_enabled(self, value: bool) -> None:
        self._put_toml(self.GUI_SECTION, 'enabled', value)

    @property
    def gui_port(self) -> int:
        """NiceGUI port."""
        return self._get_toml(self.GUI_SECTION, 'port', 8080)

    @gui_port.setter
    def gui_port(self, value: int) -> None:
        self._put_toml(self.GUI_SECTION, 'port', value)

    @property
    def gui_title(self) -> str:
        """Page title."""
        return self._get_toml(self.GUI_SECTION, 'title', 'Alpaca Panel Grid')

    @gui_title.setter
    def gui_title(self, value: str) -> None:
        self._put_toml(self.GUI_SECTION, 'title', value)

    # ---------------
    # Logging Section
    # ---------------

    @property
    def log_level(self) -> int:
        """Logging level as integer."""
        return logging.getLevelName(self._get_toml(self.LOGGING_SECTION, 'log_level', 'INFO'))

    @log_level.setter
    def log_level(self, value: str) -> None:
        """Set log level using string value."""
        self._put_toml(self.LOGGING_SECTION, 'log_level', value)

    @property
    def log_to_stdout(self) -> bool:
        """Enable logging to stdout."""
        return self._get_toml(self.LOGGING_SECTION, 'log_to_stdout', False)

    @log_to_stdout.setter
    def log_to_stdout(self, value: bool) -> None:
        self._put_toml(self.LOGGING_SECTION, 'log_to_stdout', value)

    @property
    def max_size_mb(self) -> int:
        """Maximum log file size in MB."""
        return self._get_toml(self.LOGGING_SECTION, 'max_size_mb', 5)

    @max_size_mb.setter
    def max_size_mb(self, value: int) -> None:
        self._put_toml(self.LOGGING_SECTION, 'max_size_mb', value)

    @property
    def num_keep_logs(self) -> int:
        """Number of log files to keep."""
        return self._get_toml(self.LOGGING_SECTION, 'num_keep_logs', 10)

    @num_keep_logs.setter
    def num_keep_logs(self, value: int) -> None:
        self._put_toml(self.LOGGING_SECTION, 'num_keep_logs', value)

    @property
    def log_file(self) -> str:
        """Log file name."""
        return self._get_toml(self.LOGGING_SECTION, 'log_file', 'panel_grid.log')

    @log_file.setter
    def log_file(self, value: str) -> None:
        self._put_toml(self.LOGGING_SECTION, 'log_file', value)

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"config_file='{self._config_file}', "
            f"override_file='{self._override_file}')"
        )
