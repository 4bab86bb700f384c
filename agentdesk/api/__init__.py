"""
AgentDesk HTTP API

Flask application exposing BigDayBot contact import and MLS search/import.
"""

from agentdesk.api.app import create_app

__all__ = ["create_app"]
