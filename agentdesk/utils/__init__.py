"""
AgentDesk Utilities Package

Shared utilities:
- Configuration management
- Logging setup
"""

from agentdesk.utils.config import load_config, get_db_path, get_mls_credentials
from agentdesk.utils.logging import setup_logging, setup_logging_from_config

__all__ = [
    "load_config",
    "get_db_path",
    "get_mls_credentials",
    "setup_logging",
    "setup_logging_from_config",
]
