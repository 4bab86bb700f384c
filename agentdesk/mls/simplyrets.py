"""
SimplyRETS MLS Client

SimplyRETS exposes a unified REST API over 500+ MLS systems.

API structure:
    Base URL:    https://api.simplyrets.com
    Endpoints:   /properties, /properties/{mlsId}, /openhouses
    Auth:        HTTP Basic (username/password)
    Filtering:   Query params; list filters repeat the key (cities=A&cities=B)
    Pagination:  ?limit=N&offset=N  (max limit=500)
    Response:    JSON array of listings

Docs: https://docs.simplyrets.com/api/index.html

Usage:
    from agentdesk.mls.simplyrets import SimplyRetsClient

    client = SimplyRetsClient('simplyrets', 'simplyrets')
    properties = client.search(ListingSearch(cities=['Houston'], min_beds=3))
"""

from typing import Any, Dict, List, Optional

import logging

from agentdesk.adapters.base_adapter import ListingAdapter, ListingSearch, NormalizedProperty
from agentdesk.mls.base_client import BaseMLSClient
from agentdesk.mls.highlights import build_highlights

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.simplyrets.com"
DEFAULT_STATUS = "Active"
DEFAULT_LIMIT = 50
MAX_LIMIT = 500

# SimplyRETS mls.status to app status
SIMPLYRETS_STATUS_MAP = {
    'Active': 'active',
    'ActiveUnderContract': 'pending',
    'Pending': 'pending',
    'Closed': 'sold',
}


def map_status(status: Optional[str]) -> str:
    """Map SimplyRETS status; unmapped values pass through lower-cased."""
    if not status:
        return 'active'
    return SIMPLYRETS_STATUS_MAP.get(status, status.lower())


def build_query_params(search: Optional[ListingSearch] = None) -> Dict[str, Any]:
    """
    Translate a ListingSearch into SimplyRETS query parameters.

    Status defaults to Active and limit to 50 unless the search overrides
    them. SimplyRETS has no max-year filter; ``max_year`` is ignored.
    """
    search = search or ListingSearch()
    params: Dict[str, Any] = {
        'status': search.statuses if search.statuses else DEFAULT_STATUS,
        'limit': min(search.limit or DEFAULT_LIMIT, MAX_LIMIT),
    }

    if search.query:
        params['q'] = search.query
    if search.property_types:
        params['type'] = search.property_types

    ranges = {
        'minprice': search.min_price,
        'maxprice': search.max_price,
        'minbeds': search.min_beds,
        'maxbeds': search.max_beds,
        'minbaths': search.min_baths,
        'maxbaths': search.max_baths,
        'minarea': search.min_area,
        'maxarea': search.max_area,
        'minyear': search.min_year,
    }
    params.update({key: value for key, value in ranges.items() if value})

    if search.cities:
        params['cities'] = search.cities
    if search.postal_codes:
        params['postalCodes'] = search.postal_codes
    if search.counties:
        params['counties'] = search.counties
    if search.offset:
        params['offset'] = search.offset
    if search.sort:
        params['sort'] = search.sort

    return params


class SimplyRetsClient(BaseMLSClient, ListingAdapter):
    """Client and normalizer for the SimplyRETS API."""

    provider = "SimplyRETS"

    def __init__(self, username: str, password: str, base_url: str = None, **kwargs):
        """
        Args:
            username: API username
            password: API password
            base_url: API base URL (defaults to DEFAULT_BASE_URL)
            **kwargs: Passed to BaseMLSClient (request_delay, timeout, ...)
        """
        super().__init__(**kwargs)
        self.username = username
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip('/')
        self.session.auth = (username, password)

        logger.info(f"SimplyRETS client initialized (user={username}, url={self.base_url})")

    def _get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        # requests repeats list values as key=a&key=b and drops None values
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        return self.get_json(f"{self.base_url}{endpoint}", params=params)

    # ---------------------------------------------------------------
    # Fetch methods
    # ---------------------------------------------------------------

    def search_listings(self, search: Optional[ListingSearch] = None) -> List[Dict[str, Any]]:
        """Search listings; defaults to active listings, 50 per page."""
        params = build_query_params(search)
        logger.info(f"Searching SimplyRETS listings: {params}")

        listings = self._get('/properties', params)
        self.stats['records_fetched'] += len(listings)
        return listings

    def get_listing(self, listing_id: str) -> Dict[str, Any]:
        """Fetch a single listing by SimplyRETS mlsId."""
        return self._get(f"/properties/{listing_id}")

    def get_open_houses(
        self,
        listing_id: Optional[str] = None,
        cities: Optional[List[str]] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Fetch open houses, optionally for one listing or a set of cities."""
        params = {
            'listingId': listing_id,
            'cities': cities or None,
            'startdate': start_date,
            'enddate': end_date,
            'offset': offset,
            'limit': limit,
        }
        return self._get('/openhouses', params)

    # ---------------------------------------------------------------
    # Normalization
    # ---------------------------------------------------------------

    def normalize_listing(self, listing: Dict[str, Any]) -> NormalizedProperty:
        """Normalize a SimplyRETS listing into the canonical property shape."""
        prop = listing.get('property') or {}
        address = listing.get('address') or {}
        geo = listing.get('geo') or {}
        mls = listing.get('mls') or {}
        agent = listing.get('agent')
        office = listing.get('office') or {}

        highlights = build_highlights(
            year_built=prop.get('yearBuilt'),
            garage_spaces=prop.get('garageSpaces'),
            has_pool=bool(prop.get('pool')),
            stories=prop.get('stories'),
            view=prop.get('view'),
            lot_acres=prop.get('lotSizeArea'),
            interior_features=prop.get('interiorFeatures'),
        )

        total_baths = (prop.get('bathsFull') or 0) + (prop.get('bathsHalf') or 0) * 0.5

        listing_agent = None
        if agent:
            name = f"{agent.get('firstName') or ''} {agent.get('lastName') or ''}".strip()
            listing_agent = name or None
        agent_contact = (agent or {}).get('contact') or {}

        return NormalizedProperty(
            mls_id=listing.get('listingId'),
            address=address.get('full'),
            city=address.get('city'),
            state=address.get('state'),
            zip=address.get('postalCode'),
            price=listing.get('listPrice'),
            beds=prop.get('bedrooms'),
            baths=total_baths,
            sqft=prop.get('area'),
            year_built=prop.get('yearBuilt') or None,
            lot_size=prop.get('lotSizeArea') or None,
            photos=listing.get('photos') or [],
            description=listing.get('remarks') or None,
            highlights=highlights,
            property_type=prop.get('type'),
            status=map_status(mls.get('status')),
            days_on_market=mls.get('daysOnMarket') or None,
            listing_agent=listing_agent,
            listing_agent_phone=agent_contact.get('cell') or agent_contact.get('office') or None,
            listing_agent_email=agent_contact.get('email') or None,
            listing_office=office.get('name') or None,
            latitude=geo.get('lat') or None,
            longitude=geo.get('lng') or None,
            virtual_tour_url=listing.get('virtualTourUrl') or None,
            listing_url=None,  # not provided by SimplyRETS
            source='simplyrets',
            raw_data=listing,
        )
