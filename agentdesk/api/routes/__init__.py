"""
Shared helpers for API blueprints.
"""

import os

from flask import jsonify

from agentdesk.core.database import AgentDeskDatabase
from agentdesk.utils.config import PROJECT_ROOT


def get_db() -> AgentDeskDatabase:
    """Get database instance."""
    db_path = os.getenv('AGENTDESK_DB_PATH', str(PROJECT_ROOT / 'data' / 'agentdesk.db'))
    return AgentDeskDatabase(db_path)


def error_response(code: str, message: str, status: int, details=None):
    """JSON error envelope."""
    error = {'code': code, 'message': message}
    if details is not None:
        error['details'] = details
    return jsonify({'success': False, 'error': error}), status
