"""
AgentDesk Base Adapter Interfaces

Canonical record types shared by the CSV importer and the MLS adapters,
plus the abstract interface every listing provider adapter implements.
The adapter pattern allows swapping MLS aggregators without changing the
import pipeline.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any, Dict, List, Optional


# ============================================
# DATA CLASSES (Canonical Representations)
# ============================================

CONTACT_STATUS_ACTIVE = "active"
CONTACT_STATUS_INACTIVE = "inactive"


@dataclass
class Contact:
    """Canonical BigDayBot contact representation"""
    agent_id: str
    first_name: str
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    # Calendar anchor dates (YYYY-MM-DD)
    birthday: Optional[str] = None
    wedding_anniversary: Optional[str] = None
    home_purchase_date: Optional[str] = None
    move_in_date: Optional[str] = None

    # Property location
    property_address: Optional[str] = None
    property_city: Optional[str] = None
    property_state: Optional[str] = None
    property_zip: Optional[str] = None

    # Children
    kid1_name: Optional[str] = None
    kid1_birthday: Optional[str] = None
    kid2_name: Optional[str] = None
    kid2_birthday: Optional[str] = None
    kid3_name: Optional[str] = None
    kid3_birthday: Optional[str] = None
    kid4_name: Optional[str] = None
    kid4_birthday: Optional[str] = None

    notes: Optional[str] = None
    status: str = CONTACT_STATUS_ACTIVE  # active, inactive

    # Provenance
    import_source: Optional[str] = None  # csv, manual
    import_batch_id: Optional[str] = None

    # Assigned by the store
    id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name or ''}".strip()

    @property
    def is_active(self) -> bool:
        return self.status == CONTACT_STATUS_ACTIVE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for database storage"""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Contact':
        """Build from a stored row; unknown columns are ignored."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values.setdefault('agent_id', '')
        values.setdefault('first_name', '')
        if values.get('status') is None:
            values['status'] = CONTACT_STATUS_ACTIVE
        return cls(**values)


@dataclass
class UpcomingEvent:
    """Projected next occurrence of a contact's anchor date (never persisted)"""
    contact: Contact
    event_type: str
    event_date: date
    years_since: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'contact': self.contact.to_dict(),
            'eventType': self.event_type,
            'eventDate': self.event_date.isoformat(),
            'yearsSince': self.years_since,
        }


@dataclass
class NormalizedProperty:
    """Canonical listing representation produced by every MLS adapter"""
    mls_id: str
    address: str
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    price: Optional[float] = None
    beds: Optional[int] = None
    baths: Optional[float] = None
    sqft: Optional[int] = None
    year_built: Optional[int] = None
    lot_size: Optional[float] = None
    photos: List[str] = field(default_factory=list)
    description: Optional[str] = None
    highlights: List[str] = field(default_factory=list)
    property_type: Optional[str] = None
    status: str = "active"  # active, pending, sold, off_market
    days_on_market: Optional[int] = None

    # Attribution
    listing_agent: Optional[str] = None
    listing_agent_phone: Optional[str] = None
    listing_agent_email: Optional[str] = None
    listing_office: Optional[str] = None

    # Geo
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    # Links
    virtual_tour_url: Optional[str] = None
    listing_url: Optional[str] = None

    features: Optional[List[str]] = None
    source: Optional[str] = None  # simplyrets, bridge
    raw_data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self, include_raw: bool = True) -> Dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        if not include_raw:
            data.pop('raw_data')
        return data

    def to_property_row(self, agent_id: str) -> Dict[str, Any]:
        """Convert to a `properties` row owned by an agent."""
        return {
            'agent_id': agent_id,
            'mls_id': self.mls_id,
            'address': self.address,
            'city': self.city,
            'state': self.state,
            'zip': self.zip,
            'price': self.price,
            'beds': self.beds,
            'baths': self.baths,
            'sqft': self.sqft,
            'lot_size': self.lot_size,
            'year_built': self.year_built,
            'property_type': self.property_type,
            'status': self.status,
            'days_on_market': self.days_on_market,
            'listing_agent_name': self.listing_agent,
            'listing_agent_phone': self.listing_agent_phone,
            'listing_agent_email': self.listing_agent_email,
            'listing_office': self.listing_office,
            'photos': json.dumps(self.photos) if self.photos else None,
            'description': self.description,
            'features': json.dumps(self.features) if self.features else None,
            'highlights': json.dumps(self.highlights) if self.highlights else None,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'virtual_tour_url': self.virtual_tour_url,
            'source': self.source,
        }


@dataclass
class BoundingBox:
    """Geo bounding box for map searches"""
    north: float
    south: float
    east: float
    west: float


@dataclass
class ListingSearch:
    """
    Provider-neutral listing search filter.

    Zero or empty values mean "no constraint". Each adapter translates
    this into its own query syntax.
    """
    query: Optional[str] = None
    statuses: List[str] = field(default_factory=list)
    property_types: List[str] = field(default_factory=list)

    min_price: Optional[int] = None
    max_price: Optional[int] = None
    min_beds: Optional[int] = None
    max_beds: Optional[int] = None
    min_baths: Optional[int] = None
    max_baths: Optional[int] = None
    min_area: Optional[int] = None
    max_area: Optional[int] = None
    min_year: Optional[int] = None
    max_year: Optional[int] = None

    cities: List[str] = field(default_factory=list)
    postal_codes: List[str] = field(default_factory=list)
    counties: List[str] = field(default_factory=list)
    state: Optional[str] = None
    bbox: Optional[BoundingBox] = None

    limit: Optional[int] = None
    offset: Optional[int] = None
    sort: Optional[str] = None
    select: List[str] = field(default_factory=list)


# ============================================
# ABSTRACT ADAPTER INTERFACES
# ============================================

class ListingAdapter(ABC):
    """
    Abstract interface for MLS listing providers.

    Implementations must handle:
    - Searching listings by a structured filter
    - Fetching a single listing by its provider identifier
    - Normalizing provider records into NormalizedProperty
    """

    provider: str = "unknown"

    @abstractmethod
    def search_listings(self, search: Optional[ListingSearch] = None) -> List[Dict[str, Any]]:
        """
        Search the provider for raw listings.

        Returns:
            List of upstream listing records (provider schema)
        """
        pass

    @abstractmethod
    def get_listing(self, listing_id: str) -> Dict[str, Any]:
        """
        Fetch a single raw listing.

        Args:
            listing_id: Provider identifier (mlsId / ListingKey)
        """
        pass

    @abstractmethod
    def normalize_listing(self, listing: Dict[str, Any]) -> NormalizedProperty:
        """Transform one upstream record into the canonical shape."""
        pass

    def search(self, search: Optional[ListingSearch] = None) -> List[NormalizedProperty]:
        """Search and normalize listings."""
        return [self.normalize_listing(listing) for listing in self.search_listings(search)]
