"""
SpotCatalog Core Package.

This package contains the business logic of the application,
separated from the web layer. All spot reads and writes are
coordinated through core modules.

ARCHITECTURE RULES:
- core/ modules may only import from:
  - Python standard library
  - utils/ (storage adapters)
  - config (for global configuration)

- core/ modules MUST NOT import from:
  - web/ (no Flask dependencies)
  - flask, werkzeug, or any web-specific packages
"""

__all__ = [
    "spot_catalog",
]
