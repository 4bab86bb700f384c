"""
MLS listing providers

SimplyRETS and Bridge (RESO) clients that normalize listings into
NormalizedProperty, plus the client factory and listing importer.
"""

from agentdesk.mls.exceptions import (
    MLSError,
    MLSAPIError,
    MLSAuthError,
    MLSRateLimitError,
    MLSConfigError,
)
from agentdesk.mls.simplyrets import SimplyRetsClient
from agentdesk.mls.bridge import BridgeClient, BridgeSearchResult, build_odata_filter
from agentdesk.mls.factory import ClientMode, ClientSelection, select_listing_client
from agentdesk.mls.importer import ListingImporter, ListingImportResult

__all__ = [
    "MLSError",
    "MLSAPIError",
    "MLSAuthError",
    "MLSRateLimitError",
    "MLSConfigError",
    "SimplyRetsClient",
    "BridgeClient",
    "BridgeSearchResult",
    "build_odata_filter",
    "ClientMode",
    "ClientSelection",
    "select_listing_client",
    "ListingImporter",
    "ListingImportResult",
]
