"""CMS console API package.

Provide convenient access to :func:`cms_api.factory.create_app` so callers can
``from cms_api import create_app`` without traversing the package structure.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
