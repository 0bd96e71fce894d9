# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, jsonify

from nautilus.infrastructure.health import check_database


class MiscController:
    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        return bp

    def health(self):
        database_ok = check_database()
        status = {"ok": database_ok, "database": "ok" if database_ok else "unavailable"}
        return jsonify(status), 200 if database_ok else 503
