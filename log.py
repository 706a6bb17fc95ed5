# -*- coding: utf-8 -*-
# -----------------------------------------------------------------------------
# log.py - Rotating file logging shared by the panel grid server, API and GUI
#
# Python Compatibility: Requires Python 3.7 or later
#
# -----------------------------------------------------------------------------
# MIT License
#
# Copyright (c) 2024 Alpaca Panel Grid contributors
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

import logging
import logging.handlers
import time

# Set by init_logging() in app.main(), shared by every module
logger: logging.Logger = None

LOGGER_NAME = 'panel_grid'


def init_logging(config) -> logging.Logger:
    """Create the shared logger with a rotating file handler.

    Time stamps are UTC with milliseconds. The file is rolled over at
    startup so each run starts a fresh log.

    Args:
        config: Config instance providing the [logging] settings.

    Returns:
        The configured logger, also stored in log.logger.
    """
    global logger

    new_logger = logging.getLogger(LOGGER_NAME)
    new_logger.setLevel(config.log_level)
    new_logger.propagate = False
    for handler in new_logger.handlers[:]:
        handler.close()
        new_logger.removeHandler(handler)

    formatter = logging.Formatter(
        '%(asctime)s.%(msecs)03d %(levelname)s %(message)s',
        '%Y-%m-%dT%H:%M:%S',
    )
    formatter.converter = time.gmtime

    file_handler = logging.handlers.RotatingFileHandler(
        config.log_file,
        mode='w',
        delay=True,
        backupCount=config.num_keep_logs,
        maxBytes=config.max_size_mb * 1000000,
    )
    file_handler.setLevel(config.log_level)
    file_handler.setFormatter(formatter)
    file_handler.doRollover()
    new_logger.addHandler(file_handler)

    if config.log_to_stdout:
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(config.log_level)
        stream_handler.setFormatter(formatter)
        new_logger.addHandler(stream_handler)

    logger = new_logger
    return new_logger
