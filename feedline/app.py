# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import time

from flask import Flask, g

from feedline.container import Container
from feedline.domain.accounts.repositories import CredentialCache
from feedline.infrastructure.db import SessionFactory, init_db
from feedline.infrastructure.observability import observe_request_latency
from feedline.shared.config import load_config
from feedline.shared.logging import logger, setup_logging
from feedline.shared.middleware.error_handler import configure_error_handling
from feedline.shared.middleware.request_logger import configure_request_logging


def create_app(*, credential_cache: CredentialCache | None = None) -> Flask:
    config = load_config()
    setup_logging(debug_mode=config.debug_logging)
    init_db()

    container = Container(config, SessionFactory, credential_cache=credential_cache)

    app = Flask(__name__)
    app.config.update(
        SECRET_KEY=config.secret_key,
        # Multipart overhead on top of the image itself.
        MAX_CONTENT_LENGTH=config.storage.max_upload_bytes + 64 * 1024,
    )
    app.extensions["feedline.container"] = container

    configure_error_handling(app)
    configure_request_logging(app)

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.posts_controller.as_blueprint())

    @app.before_request
    def _start_timer() -> None:
        g._t0 = time.perf_counter()

    @app.after_request
    def _add_security_headers(resp):
        observe_request_latency(time.perf_counter() - getattr(g, "_t0", time.perf_counter()))

        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cross-Origin-Resource-Policy", "same-origin")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")

        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )

        return resp

    logger.info(f"Flask app initialized (cache={config.cache.backend})")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=3000, debug=True)
