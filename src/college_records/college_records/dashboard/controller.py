from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import principal_required
from ..container import Container
from ..core.principal import Principal


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @principal_required()
    def dashboard(principal: Principal):
        cards = container.dashboard_service.build(principal)
        return jsonify({"cards": [{"title": c.title, "value": c.value} for c in cards]})
