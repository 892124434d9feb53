"""Flask admin endpoints for the statsd server."""

from flask import Flask, jsonify

from statsagg.metrics import Metrics
from statsagg.store import AggregationStore


def create_dashboard_app(metrics: Metrics, store: AggregationStore) -> Flask:
    app = Flask(__name__)

    @app.route("/stats")
    def stats():
        snap = metrics.snapshot()
        snap["pending"] = store.pending()
        return jsonify(snap)

    @app.route("/health")
    def health():
        return jsonify(status="ok")

    return app


def run_dashboard(app: Flask, port: int):
    """Run the Flask app (intended for use in a daemon thread)."""
    app.run(host="0.0.0.0", port=port, use_reloader=False)
