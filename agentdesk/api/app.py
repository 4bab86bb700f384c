"""
AgentDesk API Server

Flask server for BigDayBot contact import and MLS listing search/import.
Storage is the SQLite database at AGENTDESK_DB_PATH.
"""

import os

from flask import Flask, jsonify
from flask_cors import CORS

from agentdesk import __version__
from agentdesk.api.routes.contacts import bigdaybot_bp
from agentdesk.api.routes.health import health_bp
from agentdesk.api.routes.mls import mls_bp

DEFAULT_ALLOWED_ORIGINS = 'http://localhost:3000,http://localhost:5001'


def create_app() -> Flask:
    """Build the Flask application with CORS and all blueprints registered."""
    app = Flask(__name__)

    allowed_origins = os.getenv('CORS_ALLOWED_ORIGINS', DEFAULT_ALLOWED_ORIGINS).split(',')
    CORS(app, resources={r"/*": {"origins": allowed_origins}})

    app.register_blueprint(health_bp)
    app.register_blueprint(bigdaybot_bp, url_prefix='/api/v1')
    app.register_blueprint(mls_bp, url_prefix='/api/v1')

    @app.route('/')
    def index():
        return jsonify({
            'name': 'AgentDesk API',
            'version': __version__,
            'status': 'running'
        })

    return app


if __name__ == '__main__':
    is_debug = os.getenv('FLASK_DEBUG', 'false').lower() == 'true'
    create_app().run(host='0.0.0.0', port=5000, debug=is_debug)
