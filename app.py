# -*- coding: utf-8 -*-
# -----------------------------------------------------------------------------
# app.py - Application module
#
# Part of the AlpycaDevice Alpaca skeleton/template device driver
#
# Author:   Robert B. Denny <rdenny@dc3.com> (rbd)
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
import sys
import threading
import traceback

from falcon import App, HTTPInternalServerError, Request, Response
from waitress import serve as waitress_serve

import log
from config import Config
from layout_errors import LayoutError, StorageError
from layout_repository import LayoutRepository
from layout_storage import LayoutStorage, bind_autosave
from viewport import ViewportSelector
from web import create_api

# Global reference for the exception hooks
server_cfg = None


def custom_excepthook(exc_type, exc_value, exc_traceback):
    """Last-chance exception handler

    Caution:
        Hook this as last-chance only after the config info
        has been initialized and the logger is set up!

    Assures that any unhandled exceptions are logged to our logfile
    instead of going to stdout.
    """
    # Do not print exception when user cancels the program
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return

    log.logger.error(f'An uncaught {exc_type.__name__} exception occurred:')
    log.logger.error(exc_value)

    if exc_traceback:
        for line in traceback.format_tb(exc_traceback):
            log.logger.error(repr(line))


def falcon_uncaught_exception_handler(req: Request, resp: Response, ex: BaseException, params):
    """Handle Uncaught Exceptions while in a Falcon Responder

        Logs the info to our log file, then responds with a 500
        Internal Server Error.

    """
    exc = sys.exc_info()
    custom_excepthook(exc[0], exc[1], exc[2])
    raise HTTPInternalServerError(title='Internal Server Error',
                                  description='Layout API responder failed. See logfile.')


def build_repository(config: Config, logger) -> LayoutRepository:
    """Load the layout store and seed it when empty.

    Args:
        config: Loaded configuration.
        logger: Shared logger.

    Returns:
        Repository bound to the configured storage file.
    """
    selector = ViewportSelector(
        mobile_breakpoint=config.mobile_breakpoint,
        tablet_breakpoint=config.tablet_breakpoint,
        logger=logger,
    )
    repository = LayoutRepository(logger, selector)
    storage = LayoutStorage(config.storage_file, logger)

    try:
        records, active_id = storage.load()
        repository.load_records(records, active_id)
    except StorageError as e:
        logger.error(f'==STARTUP== Layout store unreadable, starting empty: {e}')

    bind_autosave(repository, storage)

    if len(repository) == 0:
        try:
            layout = repository.get_or_create_template_layout(config.default_template)
            repository.set_active(layout.id)
        except LayoutError as e:
            logger.error(f'==STARTUP== Cannot seed default layout: {e}')

    return repository


# ===========
# APP STARTUP
# ===========
def main():
    """Application startup"""

    global server_cfg

    server_cfg = Config()
    logger = log.init_logging(server_cfg)

    # -----------------------------
    # Last-Chance Exception Handler
    # -----------------------------
    sys.excepthook = custom_excepthook

    repository = build_repository(server_cfg, logger)
    logger.info(f'==STARTUP== {len(repository)} layouts loaded, active: {repository.active_id}')

    # ----------------------------------
    # MAIN HTTP/REST API ENGINE (FALCON)
    # ----------------------------------
    falc_app: App = create_api(repository, logger)
    falc_app.add_error_handler(Exception, falcon_uncaught_exception_handler)

    host = server_cfg.ip_address if server_cfg.ip_address else '0.0.0.0'
    port = server_cfg.port

    if not server_cfg.gui_enabled:
        logger.info(f'==STARTUP== Serving layout API on {host}:{port}. Time stamps are UTC.')
        waitress_serve(falc_app, host=host, port=port)
        return

    # NiceGUI owns the main thread, the API runs beside it
    api_thread = threading.Thread(
        target=waitress_serve,
        args=(falc_app,),
        kwargs={'host': host, 'port': port},
        daemon=True,
    )
    api_thread.start()
    logger.info(f'==STARTUP== Layout API on {host}:{port}. Time stamps are UTC.')

    from gui import create_app, run_app
    gui = create_app(server_cfg, repository, logger, title=server_cfg.gui_title)
    logger.info(f'==STARTUP== GUI available at http://localhost:{server_cfg.gui_port}')
    run_app(gui, host=host, port=server_cfg.gui_port, title=server_cfg.gui_title)


# ========================
if __name__ in {'__main__', '__mp_main__'}:
    main()
# ========================
