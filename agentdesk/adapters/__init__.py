"""
AgentDesk Adapters Package

Canonical record types and the abstract listing-provider interface:
- Contacts and projected upcoming events
- Normalized MLS properties and search filters
"""

from agentdesk.adapters.base_adapter import (
    ListingAdapter,
    Contact,
    UpcomingEvent,
    NormalizedProperty,
    ListingSearch,
    BoundingBox,
)

__all__ = [
    "ListingAdapter",
    "Contact",
    "UpcomingEvent",
    "NormalizedProperty",
    "ListingSearch",
    "BoundingBox",
]
