"""Reverse proxy awareness for the WSGI pipeline."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Wrap the WSGI app with :class:`ProxyFix` unless ``USE_PROXYFIX`` is off.

    Refresh sessions record ``request.remote_addr`` as their ``ip_address``, so
    behind a load balancer the forwarded client address must win. One trusted
    hop is assumed for ``X-Forwarded-For`` and ``X-Forwarded-Proto``.
    """
    if not app.config.get("USE_PROXYFIX", True):
        return
    hops = int(app.config.get("PROXYFIX_HOPS", 1))
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops)
