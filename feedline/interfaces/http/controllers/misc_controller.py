# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from feedline.infrastructure.health import check_cache, check_database


class MiscController:
    def __init__(self, *, cache) -> None:
        self._cache = cache

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        bp.add_url_rule("/metrics", view_func=self.metrics, methods=["GET"])
        return bp

    def health(self):
        status: dict[str, object] = {"ok": True}
        try:
            check_database()
            status["database"] = "ok"
        except Exception as exc:  # pragma: no cover
            status["ok"] = False
            status["database"] = f"error: {type(exc).__name__}"
        try:
            check_cache(self._cache)
            status["cache"] = "ok"
        except Exception as exc:
            # Login keeps working on the store alone, so a cache outage only degrades.
            status["cache"] = f"degraded: {type(exc).__name__}"
        return jsonify(status), 200 if status["ok"] else 503

    def metrics(self) -> Response:
        return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)
