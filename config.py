# config.py
import os
from dotenv import load_dotenv

# Load environment variables from .env file.
load_dotenv()

_cached_config = None


def _float_env(name, default):
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return float(default)


def _int_env(name, default):
    try:
        return int(float(os.getenv(name, default)))
    except (TypeError, ValueError):
        return int(default)


def load_config():
    """
    Loads configuration from environment variables and returns a dictionary.
    """
    output_dir = os.getenv("OUTPUT_DIR", "./data")

    config = {
        # General Settings
        "DEBUG_MODE": os.getenv("DEBUG_MODE", "False").lower() == "true",
        "OUTPUT_DIR": output_dir,

        # Storage Settings
        "DB_PATH": os.getenv("DB_PATH") or os.path.join(output_dir, "spots.db"),
        "DB_TIMEOUT": _float_env("DB_TIMEOUT", 30.0),
        "SEED_IF_EMPTY": os.getenv("SEED_IF_EMPTY", "True").lower() == "true",

        # Server Settings
        "HOST": os.getenv("HOST", "0.0.0.0"),
        "PORT": _int_env("PORT", 8080),
        "SERVER_THREADS": _int_env("SERVER_THREADS", 4),

        # Static Page Settings
        "STATIC_PORT": _int_env("STATIC_PORT", 8081),
        "STATIC_FILE": os.getenv("STATIC_FILE", "./static/another.html"),
    }
    return config


def get_config():
    """Returns the process-wide configuration, loading it on first use."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


if __name__ == "__main__":
    # For testing purposes, print the configuration
    config = load_config()
    from pprint import pprint

    pprint(config)
