"""
SpotCatalog Web Blueprints Package.

This package contains Flask Blueprints for modular route organization.
"""

from web.blueprints.spots import init_spots, spots_bp

__all__ = ["init_spots", "spots_bp"]
