# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Development web server for the diagnostics API."""

from __future__ import annotations

import logging
import os
import threading
from socketserver import ThreadingMixIn
from typing import Protocol
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from django.core.wsgi import get_wsgi_application

_LOGGER = logging.getLogger(__name__)


class _EventLike(Protocol):
    def wait(self, timeout: float | None = None) -> bool:  # pragma: no cover - protocol definition
        ...


class _ThreadedWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


def _api_url(host: str, port: int) -> str:
    display_host = "127.0.0.1" if host in {"0.0.0.0", "::"} else host  # noqa: S104
    if ":" in display_host and not display_host.startswith("["):
        display_host = f"[{display_host}]"
    return f"http://{display_host}:{port}/api/diagnostics/"


def serve(host: str, port: int, *, shutdown_event: _EventLike | None = None) -> None:
    """Serve the Django WSGI app until interrupted or shutdown_event fires."""
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "plugin_diagnostics.components.web.settings")
    httpd = make_server(
        host,
        port,
        get_wsgi_application(),
        server_class=_ThreadedWSGIServer,
        handler_class=WSGIRequestHandler,
    )
    print(f"Diagnostics API available at {_api_url(host, port)}")  # noqa: T201
    if shutdown_event is not None:

        def _wait_for_shutdown() -> None:
            shutdown_event.wait()
            httpd.shutdown()

        threading.Thread(target=_wait_for_shutdown, daemon=True).start()
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        _LOGGER.info("Dev server interrupted; shutting down.")
    finally:
        httpd.server_close()
