# ------------------------------------------------------------------------------
# Main Script for the Spot Catalog and its static page server
# main.py
# ------------------------------------------------------------------------------
import json
import os
import sys
import threading

from config import get_config
config = get_config()
from logging_config import get_logger
logger = get_logger(__name__)

from core.spot_catalog import SpotCatalog, StorageFailure
from web.web_interface import create_static_interface, create_web_interface

# --------------------------------------------------------------------------
# Configuration Parameters
# --------------------------------------------------------------------------
_debug = config["DEBUG_MODE"]
host = config["HOST"]

logger.info(f"Debug mode is {'enabled' if _debug else 'disabled'}.")
logger.info(f"Configuration: {json.dumps(config, indent=2)}")

# -----------------------------
# Open the Spot Catalog
# -----------------------------
catalog = SpotCatalog(config["DB_PATH"], timeout=config["DB_TIMEOUT"])
try:
    catalog.initialize(seed_if_empty=config["SEED_IF_EMPTY"])
except StorageFailure as e:
    # No fallback store: the catalog cannot run without its table.
    logger.critical(f"Cannot open spot database {config['DB_PATH']}: {e}")
    sys.exit(1)

# -----------------------------
# Build the Web Interfaces
# -----------------------------
# Expose the Flask server as the WSGI app for Waitress.
interface = create_web_interface(catalog, threads=config["SERVER_THREADS"])
app = interface["server"]

static_interface = create_static_interface(config["STATIC_FILE"])


def _run_catalog_server():
    try:
        interface["run"](host=host, port=config["PORT"])
    except Exception as e:
        logger.critical(f"Catalog server failed: {e}")
        # A dead catalog listener takes the whole process down.
        os._exit(1)


if __name__ == '__main__':
    # The catalog server runs on a background thread, the static page server blocks.
    catalog_thread = threading.Thread(
        target=_run_catalog_server, name="catalog-server", daemon=True
    )
    catalog_thread.start()

    try:
        static_interface["run"](host=host, port=config["STATIC_PORT"])
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt received. Shutting down...")
    except Exception as e:
        logger.critical(f"Static page server failed: {e}")
        sys.exit(1)
