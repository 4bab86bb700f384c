"""
MLS client factory.

Builds a listing client from environment credentials and falls back to the
provider's public sandbox when none are configured. Callers get an explicit
ClientSelection so they can tell live data from demo data.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

import logging

from agentdesk.mls.bridge import BridgeClient
from agentdesk.mls.exceptions import MLSConfigError
from agentdesk.mls.simplyrets import SimplyRetsClient
from agentdesk.utils.config import DEFAULT_MLS_PROVIDER, get_mls_credentials

logger = logging.getLogger(__name__)

PROVIDER_BRIDGE = 'bridge'
PROVIDER_SIMPLYRETS = 'simplyrets'
PROVIDERS = (PROVIDER_BRIDGE, PROVIDER_SIMPLYRETS)

# Public sandbox credentials published by each provider
DEMO_BRIDGE_TOKEN = "6baca547742c6f96a6ff71b138424f21"
DEMO_BRIDGE_DATASET = "test"
DEMO_SIMPLYRETS_USERNAME = "simplyrets"
DEMO_SIMPLYRETS_PASSWORD = "simplyrets"


class ClientMode(Enum):
    CONFIGURED = "configured"
    DEMO = "demo"


@dataclass
class ClientSelection:
    """Result of choosing an MLS client."""
    mode: ClientMode
    client: Union[BridgeClient, SimplyRetsClient]
    provider: str

    @property
    def is_demo(self) -> bool:
        return self.mode is ClientMode.DEMO


def _client_options(config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Pick BaseMLSClient tuning options out of the mls config section."""
    mls_config = (config or {}).get('mls', {}) or {}
    options = {}
    for key in ('request_delay', 'timeout', 'max_retries'):
        if mls_config.get(key) is not None:
            options[key] = mls_config[key]
    return options


def create_bridge_client(config: Optional[Dict[str, Any]] = None) -> BridgeClient:
    """
    Bridge client from BRIDGE_ACCESS_TOKEN / BRIDGE_DATASET_KEY.

    Raises:
        MLSConfigError: If either variable is missing
    """
    access_token, dataset_key = get_mls_credentials(PROVIDER_BRIDGE)
    if not access_token or not dataset_key:
        raise MLSConfigError(
            "Bridge API credentials not configured. "
            "Set BRIDGE_ACCESS_TOKEN and BRIDGE_DATASET_KEY environment variables."
        )
    return BridgeClient(access_token, dataset_key, **_client_options(config))


def create_simplyrets_client(config: Optional[Dict[str, Any]] = None) -> SimplyRetsClient:
    """
    SimplyRETS client from SIMPLYRETS_API_USERNAME / SIMPLYRETS_API_PASSWORD.

    Raises:
        MLSConfigError: If either variable is missing
    """
    username, password = get_mls_credentials(PROVIDER_SIMPLYRETS)
    if not username or not password:
        raise MLSConfigError(
            "SimplyRETS API credentials not configured. "
            "Set SIMPLYRETS_API_USERNAME and SIMPLYRETS_API_PASSWORD environment variables."
        )
    return SimplyRetsClient(username, password, **_client_options(config))


def create_demo_bridge_client(config: Optional[Dict[str, Any]] = None) -> BridgeClient:
    """Bridge client on the public test dataset (limited sample data)."""
    return BridgeClient(DEMO_BRIDGE_TOKEN, DEMO_BRIDGE_DATASET, **_client_options(config))


def create_demo_simplyrets_client(config: Optional[Dict[str, Any]] = None) -> SimplyRetsClient:
    """SimplyRETS client on the public demo account."""
    return SimplyRetsClient(DEMO_SIMPLYRETS_USERNAME, DEMO_SIMPLYRETS_PASSWORD,
                            **_client_options(config))


_FACTORIES = {
    PROVIDER_BRIDGE: (create_bridge_client, create_demo_bridge_client),
    PROVIDER_SIMPLYRETS: (create_simplyrets_client, create_demo_simplyrets_client),
}


def select_listing_client(provider: Optional[str] = None,
                          config: Optional[Dict[str, Any]] = None) -> ClientSelection:
    """
    Choose the MLS client for a request.

    Provider comes from the argument, then config['mls']['provider'], then
    MLS_PROVIDER, defaulting to bridge. Missing credentials fall back to
    the provider's demo account.

    Raises:
        MLSConfigError: For an unknown provider name
    """
    provider = (
        provider
        or ((config or {}).get('mls') or {}).get('provider')
        or os.environ.get('MLS_PROVIDER')
        or DEFAULT_MLS_PROVIDER
    ).lower()

    if provider not in _FACTORIES:
        raise MLSConfigError(f"Unknown MLS provider '{provider}'. Expected one of: {', '.join(PROVIDERS)}")

    create, create_demo = _FACTORIES[provider]
    try:
        client = create(config)
        return ClientSelection(mode=ClientMode.CONFIGURED, client=client, provider=provider)
    except MLSConfigError as e:
        logger.warning(f"{e} Falling back to {provider} demo credentials.")
        return ClientSelection(mode=ClientMode.DEMO, client=create_demo(config), provider=provider)
