# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Flask
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from auth_service.container import Container
from auth_service.infrastructure.db import init_db
from auth_service.interfaces.http.controllers.misc_controller import MiscController
from auth_service.shared.config import load_config
from auth_service.shared.logging import logger, setup_logging
from auth_service.shared.middleware.error_handler import configure_error_handling
from auth_service.shared.middleware.request_logger import configure_request_logging


def create_app(container: Container | None = None) -> Flask:
    config = load_config()
    setup_logging(config.log_level, debug_mode=config.debug_logging)
    init_db()

    container = container or Container(config)

    app = Flask(__name__)
    if config.trusted_proxy_count:
        # X-Forwarded-For is trusted only for this many proxy hops
        app.wsgi_app = ProxyFix(  # type: ignore[method-assign]
            app.wsgi_app,
            x_for=config.trusted_proxy_count,
            x_proto=config.trusted_proxy_count,
        )
    configure_error_handling(app)
    configure_request_logging(app)

    CORS(
        app,
        resources={r"/api/*": {"origins": config.allowed_origins}},
        allow_headers=["Authorization", "Content-Type"],
        methods=["GET", "POST", "PUT", "DELETE"],
    )
    app.register_blueprint(MiscController().as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cache-Control", "no-store")
        return resp

    logger.info("Flask app initialized")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=8080)
