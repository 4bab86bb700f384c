"""
Health check endpoints.
"""

from flask import Blueprint, jsonify

from agentdesk import __version__

health_bp = Blueprint('health', __name__)


@health_bp.route('/health')
def health_check():
    """Basic health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'service': 'agentdesk-api',
        'version': __version__,
    })
