"""
Bridge Interactive (Zillow) RESO Web API Client

Bridge serves RESO Data Dictionary records over OData.

API structure:
    Base URL:    https://api.bridgedataoutput.com/api/v2
    Endpoints:   /OData/{dataset}/Property, /OData/{dataset}/Property('{key}')
    Auth:        Bearer token
    Filtering:   OData $filter with RESO field names
    Pagination:  $top (max 200) / $skip, $count=true for totals
    Response:    {"value": [...], "@odata.count": N}

Docs: https://bridgedataoutput.com/docs/platform/

Usage:
    from agentdesk.mls.bridge import BridgeClient

    client = BridgeClient(access_token='...', dataset_key='test')
    result = client.search_properties(ListingSearch(cities=['Austin']))
    properties = [client.normalize_listing(r) for r in result.listings]
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import logging

from agentdesk.adapters.base_adapter import ListingAdapter, ListingSearch, NormalizedProperty
from agentdesk.mls.base_client import BaseMLSClient
from agentdesk.mls.exceptions import MLSAPIError, MLSError
from agentdesk.mls.highlights import build_highlights

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.bridgedataoutput.com/api/v2"
DEFAULT_TOP = 50
MAX_TOP = 200
DEFAULT_ORDERBY = "BridgeModificationTimestamp desc"
MAX_PHOTOS = 10

# RESO StandardStatus to app status
BRIDGE_STATUS_MAP = {
    'Active': 'active',
    'Active Under Contract': 'pending',
    'Pending': 'pending',
    'Coming Soon': 'active',
    'Hold': 'off_market',
    'Withdrawn': 'off_market',
    'Expired': 'off_market',
    'Canceled': 'off_market',
    'Delete': 'off_market',
    'Closed': 'sold',
}

# RESO PropertyType to display type
BRIDGE_PROPERTY_TYPE_MAP = {
    'Residential': 'Single Family',
    'Residential Income': 'Multi-Family',
    'Residential Lease': 'Rental',
    'Land': 'Land',
    'Commercial Sale': 'Commercial',
    'Commercial Lease': 'Commercial',
    'Farm': 'Farm',
}


@dataclass
class BridgeSearchResult:
    """One page of Bridge search results."""
    listings: List[Dict[str, Any]] = field(default_factory=list)
    total_count: Optional[int] = None


# ---------------------------------------------------------------
# OData filter building
# ---------------------------------------------------------------

def _literal(value: Any) -> str:
    """Quote a string literal for OData; embedded quotes are doubled."""
    return "'" + str(value).replace("'", "''") + "'"


def _any_of(field_name: str, values: List[str]) -> str:
    return "(" + " or ".join(f"{field_name} eq {_literal(v)}" for v in values) + ")"


def build_odata_filter(search: Optional[ListingSearch] = None) -> str:
    """
    Build an OData $filter expression from a ListingSearch.

    Returns an empty string when the search has no constraints.
    """
    if search is None:
        return ""

    clauses = []

    if search.statuses:
        clauses.append(_any_of('StandardStatus', search.statuses))
    if search.property_types:
        clauses.append(_any_of('PropertyType', search.property_types))

    ranges = [
        ('ListPrice', search.min_price, search.max_price),
        ('BedroomsTotal', search.min_beds, search.max_beds),
        ('BathroomsTotalInteger', search.min_baths, search.max_baths),
        ('LivingArea', search.min_area, search.max_area),
        ('YearBuilt', search.min_year, search.max_year),
    ]
    for field_name, low, high in ranges:
        if low:
            clauses.append(f"{field_name} ge {low}")
        if high:
            clauses.append(f"{field_name} le {high}")

    if search.cities:
        clauses.append(_any_of('City', search.cities))
    if search.postal_codes:
        clauses.append(_any_of('PostalCode', search.postal_codes))
    if search.counties:
        clauses.append(_any_of('CountyOrParish', search.counties))
    if search.state:
        clauses.append(f"StateOrProvince eq {_literal(search.state)}")

    if search.query:
        q = _literal(search.query)
        clauses.append(f"(contains(UnparsedAddress, {q}) or contains(PublicRemarks, {q}))")

    if search.bbox:
        bbox = search.bbox
        clauses.append(f"Latitude ge {bbox.south}")
        clauses.append(f"Latitude le {bbox.north}")
        clauses.append(f"Longitude ge {bbox.west}")
        clauses.append(f"Longitude le {bbox.east}")

    return " and ".join(clauses)


# ---------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------

def map_status(standard_status: Optional[str]) -> str:
    """Map RESO StandardStatus; unknown statuses count as active."""
    return BRIDGE_STATUS_MAP.get(standard_status, 'active')


def map_property_type(listing: Dict[str, Any]) -> str:
    """Map RESO PropertyType; falls back to PropertySubType then Residential."""
    mapped = BRIDGE_PROPERTY_TYPE_MAP.get(listing.get('PropertyType'))
    return mapped or listing.get('PropertySubType') or 'Residential'


def extract_photos(media: Optional[List[Dict[str, Any]]]) -> List[str]:
    """Photo URLs from a RESO Media array, ordered by Order, first 10."""
    if not media:
        return []

    photos = [
        m for m in media
        if m.get('MediaURL') and (
            m.get('MediaCategory') == 'Photo'
            or (m.get('MimeType') or '').startswith('image/')
        )
    ]
    photos.sort(key=lambda m: m.get('Order') or 0)
    return [m['MediaURL'] for m in photos[:MAX_PHOTOS]]


def build_features(listing: Dict[str, Any]) -> Optional[List[str]]:
    """Flatten feature arrays plus pool/garage/fireplace facts."""
    features = []
    features.extend(listing.get('InteriorFeatures') or [])
    features.extend(listing.get('ExteriorFeatures') or [])

    pool = listing.get('PoolFeatures')
    if pool:
        features.append(f"Pool: {', '.join(pool)}")

    garage = listing.get('GarageSpaces')
    if garage:
        features.append(f"{garage} Car Garage")

    fireplaces = listing.get('FireplacesTotal')
    if fireplaces:
        features.append(f"{fireplaces} Fireplace(s)")

    return features or None


def build_address(listing: Dict[str, Any]) -> str:
    if listing.get('UnparsedAddress'):
        return listing['UnparsedAddress']
    parts = [listing.get('StreetNumber'), listing.get('StreetName'), listing.get('StreetSuffix')]
    return " ".join(str(p) for p in parts if p)


class BridgeClient(BaseMLSClient, ListingAdapter):
    """Client and normalizer for Bridge Interactive RESO datasets."""

    provider = "Bridge"

    def __init__(self, access_token: str, dataset_key: str, base_url: str = None, **kwargs):
        """
        Args:
            access_token: Bridge server token
            dataset_key: Dataset (MLS) identifier, e.g. 'test'
            base_url: API base URL (defaults to DEFAULT_BASE_URL)
            **kwargs: Passed to BaseMLSClient (request_delay, timeout, ...)
        """
        super().__init__(**kwargs)
        self.dataset_key = dataset_key
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip('/')
        self.session.headers.update({'Authorization': f'Bearer {access_token}'})

        logger.info(f"Bridge client initialized (dataset={dataset_key}, url={self.base_url})")

    def _get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}/OData/{self.dataset_key}{endpoint}"
        if params:
            params = {k: v for k, v in params.items() if v not in (None, '')}
        return self.get_json(url, params=params)

    # ---------------------------------------------------------------
    # Fetch methods
    # ---------------------------------------------------------------

    def search_properties(self, search: Optional[ListingSearch] = None) -> BridgeSearchResult:
        """Search the Property resource and return one page plus the total count."""
        search = search or ListingSearch()
        params = {
            '$filter': build_odata_filter(search),
            '$top': min(search.limit or DEFAULT_TOP, MAX_TOP),
            '$skip': search.offset,
            '$orderby': search.sort or DEFAULT_ORDERBY,
            '$select': ",".join(search.select) if search.select else None,
            '$count': 'true',
        }
        logger.info(f"Searching Bridge dataset {self.dataset_key}: {params.get('$filter') or '(no filter)'}")

        data = self._get('/Property', params)
        return self._to_result(data)

    def search_listings(self, search: Optional[ListingSearch] = None) -> List[Dict[str, Any]]:
        return self.search_properties(search).listings

    def get_property(self, listing_key: str) -> Dict[str, Any]:
        """
        Fetch one property by ListingKey.

        Some datasets answer entity lookups with an OData envelope; the
        record is unwrapped from `value` when present.
        """
        data = self._get(f"/Property('{listing_key}')")
        if not isinstance(data, dict) or 'value' not in data:
            return data

        record = data['value']
        if isinstance(record, list):
            if not record:
                raise MLSAPIError(f"Property {listing_key} not found")
            record = record[0]
        return record

    def get_listing(self, listing_id: str) -> Dict[str, Any]:
        return self.get_property(listing_id)

    def get_modified_since(self, timestamp: str, limit: int = MAX_TOP) -> BridgeSearchResult:
        """Properties modified after an ISO timestamp, oldest first (incremental sync)."""
        params = {
            '$filter': f"BridgeModificationTimestamp gt {timestamp}",
            '$top': min(limit, MAX_TOP),
            '$orderby': 'BridgeModificationTimestamp asc',
            '$count': 'true',
        }
        data = self._get('/Property', params)
        return self._to_result(data)

    def get_data_systems(self) -> List[Dict[str, Any]]:
        """List datasets available to the token."""
        data = self.get_json(f"{self.base_url}/OData/DataSystem")
        if isinstance(data, dict):
            return data.get('value', [])
        return data

    def test_connection(self) -> bool:
        """Fetch a single record; False on any MLS error."""
        try:
            self.search_properties(ListingSearch(limit=1))
            return True
        except MLSError as e:
            logger.error(f"Bridge connection test failed: {e}")
            return False

    def _to_result(self, data: Any) -> BridgeSearchResult:
        if isinstance(data, dict):
            listings = data.get('value', data)
            total = data.get('@odata.count')
        else:
            listings, total = data, None

        if isinstance(listings, dict):
            listings = [listings]

        self.stats['records_fetched'] += len(listings)
        return BridgeSearchResult(listings=listings, total_count=total)

    # ---------------------------------------------------------------
    # Normalization
    # ---------------------------------------------------------------

    def normalize_listing(self, listing: Dict[str, Any]) -> NormalizedProperty:
        """Normalize a RESO Property record into the canonical property shape."""
        total_baths = (listing.get('BathroomsFull') or 0) + (listing.get('BathroomsHalf') or 0) * 0.5

        view = listing.get('View')
        if isinstance(view, list):
            view = ", ".join(view)

        highlights = build_highlights(
            year_built=listing.get('YearBuilt'),
            garage_spaces=listing.get('GarageSpaces'),
            has_pool=bool(listing.get('PoolFeatures')),
            stories=listing.get('Stories') or listing.get('StoriesTotal'),
            view=view or None,
            lot_acres=listing.get('LotSizeAcres'),
            interior_features=listing.get('InteriorFeatures'),
        )

        return NormalizedProperty(
            mls_id=listing.get('ListingId') or listing.get('ListingKey'),
            address=build_address(listing),
            city=listing.get('City'),
            state=listing.get('StateOrProvince'),
            zip=listing.get('PostalCode'),
            price=listing.get('ListPrice'),
            beds=listing.get('BedroomsTotal'),
            baths=total_baths,
            sqft=listing.get('LivingArea'),
            year_built=listing.get('YearBuilt') or None,
            lot_size=listing.get('LotSizeAcres') or None,
            photos=extract_photos(listing.get('Media')),
            description=listing.get('PublicRemarks') or None,
            highlights=highlights,
            property_type=map_property_type(listing),
            status=map_status(listing.get('StandardStatus')),
            days_on_market=listing.get('DaysOnMarket') or None,
            listing_agent=listing.get('ListAgentFullName') or None,
            listing_agent_phone=(listing.get('ListAgentDirectPhone')
                                 or listing.get('ListAgentOfficePhone') or None),
            listing_agent_email=listing.get('ListAgentEmail') or None,
            listing_office=listing.get('ListOfficeName') or None,
            latitude=listing.get('Latitude') or None,
            longitude=listing.get('Longitude') or None,
            virtual_tour_url=listing.get('VirtualTourURLUnbranded') or None,
            listing_url=None,
            features=build_features(listing),
            source='bridge',
            raw_data=listing,
        )
