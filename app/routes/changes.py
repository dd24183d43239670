# app/routes/changes.py
from flask import Blueprint, current_app, jsonify
import logging
from services.change_log import build_change_report
from services.exceptions import UpstreamError


# Create Blueprint
changes_bp = Blueprint('changes', __name__, url_prefix='/api')

# Get logger
logger = logging.getLogger(__name__)


@changes_bp.route('/changes')
def changes():
    """Current change board: changes grouped by show, plus the windows used."""
    settings = current_app.extensions['change_log_settings']
    http_client = current_app.extensions.get('report_http_client')

    report = build_change_report(settings, http_client=http_client)
    return jsonify(report.to_dict())


@changes_bp.route('/health')
def health():
    return jsonify({"status": "ok"})


@changes_bp.errorhandler(UpstreamError)
def handle_upstream_error(e):
    logger.error(f"Change report failed: status={e.status} body={e.body[:200]!r}")
    return jsonify({"error": e.message}), e.http_status


@changes_bp.app_errorhandler(500)
def handle_server_error(e):
    logger.error(f"Unhandled error while serving request: {getattr(e, 'original_exception', None) or e}")
    return jsonify({"error": "Server error"}), 500
