"""Flask JSON service exposing the dashboard snapshot to the presentation layer."""

import logging

from flask import Flask, jsonify

from runner_telemetry.config import Config
from runner_telemetry.engine import build_dashboard
from runner_telemetry.probe import PsutilProbe, SystemProbe
from runner_telemetry.session import TelemetrySession

logger = logging.getLogger(__name__)


def create_app(config: Config, probe: SystemProbe | None = None) -> Flask:
    """Each request runs a complete pass with its own session."""
    app = Flask(__name__)
    probe = probe or PsutilProbe()

    @app.route("/api/dashboard-data")
    def dashboard_data():
        snapshot = build_dashboard(config, probe, TelemetrySession())
        return jsonify(snapshot.to_dict())

    @app.route("/api/diagnostics")
    def diagnostics():
        session = TelemetrySession()
        build_dashboard(config, probe, session)
        return jsonify(session.to_dict())

    @app.route("/health")
    def health():
        return jsonify(status="ok")

    return app


def run_dashboard(app: Flask, host: str, port: int):
    logger.info("Serving dashboard data on http://%s:%d/api/dashboard-data", host, port)
    app.run(host=host, port=port, use_reloader=False)
