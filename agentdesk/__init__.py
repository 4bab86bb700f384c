"""
AgentDesk Core

Contact import and MLS listing normalization for real-estate agents.
"""

__version__ = "0.1.0"
