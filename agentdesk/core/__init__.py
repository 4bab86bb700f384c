"""
AgentDesk Core Package

Persistence for the import pipeline:
- Contact storage (BigDayBot)
- Imported MLS properties
"""

from agentdesk.core.database import AgentDeskDatabase

__all__ = [
    "AgentDeskDatabase",
]
