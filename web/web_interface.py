# ------------------------------------------------------------------------------
# web_interface.py
# ------------------------------------------------------------------------------

import os
import time

from flask import Flask, abort, g, request, send_from_directory
from waitress import serve

from logging_config import get_logger
from web.blueprints.spots import init_spots

logger = get_logger(__name__)


def _log_requests(server, name):
    """Logs one line per request: method, path, status and duration."""

    @server.before_request
    def _start_timer():
        g.request_started = time.monotonic()

    @server.after_request
    def _log_request(response):
        started = g.get("request_started")
        elapsed_ms = (time.monotonic() - started) * 1000 if started else 0.0
        logger.info(
            f"[{name}] {request.method} {request.full_path.rstrip('?')} "
            f"-> {response.status_code} ({elapsed_ms:.1f} ms)"
        )
        return response


def _make_run(server, name, threads):
    def run(host="0.0.0.0", port=8080):
        logger.info(f"Starting {name} server on http://{host}:{port}")
        serve(server, host=host, port=port, threads=threads)

    return run


def create_web_interface(catalog, threads=4):
    """
    Creates and returns the catalog web interface (Flask server).

    Returns a dict with:
      - server: the Flask app (WSGI callable)
      - run: starts the server, blocking, via waitress
    """
    server = Flask(__name__, static_folder=None)
    _log_requests(server, "catalog")
    init_spots(server, catalog)

    return {"server": server, "run": _make_run(server, "catalog", threads)}


def create_static_interface(static_file, threads=2):
    """
    Creates the second, independent server that serves one static file at "/".

    It shares no state with the catalog server.
    """
    static_path = os.path.abspath(static_file)
    directory, filename = os.path.split(static_path)

    server = Flask(__name__, static_folder=None)
    _log_requests(server, "static")

    @server.route("/", methods=["GET"])
    def static_page():
        if not os.path.isfile(static_path):
            logger.error(f"Static file not found: {static_path}")
            abort(404)
        return send_from_directory(directory, filename)

    return {"server": server, "run": _make_run(server, "static", threads)}
