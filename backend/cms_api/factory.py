"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from cms_api.core.config import BaseConfig, get_config
from cms_api.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Config object, class or import string. Defaults to the class
        selected by ``APP_ENV``.
    :param instance_relative_config: Look for overrides in the instance folder.
    :param instance_config_filename: Optional instance-level override file.
    :returns: A ready-to-serve :class:`flask.Flask` instance.
    """
    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from cms_api.core import proxy

    proxy.init_app(app)

    from cms_api.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from cms_api.core import cors

    cors.init_app(app)

    from cms_api.api import init_app as init_api

    init_api(app)

    from cms_api.core import errors

    errors.init_app(app)

    from cms_api import cli as app_cli

    app_cli.init_app(app)

    return app
