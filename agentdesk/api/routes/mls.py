"""
MLS endpoints: listing search and import into an agent's properties.
"""

import sqlite3

from flask import Blueprint, jsonify, request

import logging

from agentdesk.adapters.base_adapter import ListingSearch
from agentdesk.api.routes import error_response, get_db
from agentdesk.mls.bridge import BridgeClient
from agentdesk.mls.exceptions import MLSConfigError, MLSError
from agentdesk.mls.factory import select_listing_client
from agentdesk.mls.importer import MAX_IMPORT_KEYS, MAX_IMPORT_LISTINGS, ListingImporter

logger = logging.getLogger(__name__)

mls_bp = Blueprint('mls', __name__)

DEFAULT_SEARCH_LIMIT = 50
MAX_SEARCH_LIMIT = 100


@mls_bp.errorhandler(MLSConfigError)
def handle_config_error(e):
    return error_response('MLS_CONFIG_ERROR', str(e), 400)


@mls_bp.errorhandler(MLSError)
def handle_mls_error(e):
    logger.error(f"MLS upstream error: {e}")
    return error_response('MLS_ERROR', 'MLS provider request failed', 502, details=str(e))


@mls_bp.errorhandler(sqlite3.Error)
def handle_storage_error(e):
    logger.error(f"Listing import failed to persist: {e}")
    return error_response('SERVER_ERROR', str(e), 500)


def search_from_args(args) -> ListingSearch:
    """Build a ListingSearch from query-string arguments."""
    return ListingSearch(
        query=args.get('q') or None,
        statuses=args.getlist('status') or ['Active'],
        property_types=args.getlist('type'),
        min_price=args.get('minprice', type=int),
        max_price=args.get('maxprice', type=int),
        min_beds=args.get('minbeds', type=int),
        max_beds=args.get('maxbeds', type=int),
        min_baths=args.get('minbaths', type=int),
        max_baths=args.get('maxbaths', type=int),
        min_area=args.get('minarea', type=int),
        max_area=args.get('maxarea', type=int),
        min_year=args.get('minyear', type=int),
        max_year=args.get('maxyear', type=int),
        cities=args.getlist('cities'),
        postal_codes=args.getlist('postalCodes'),
        counties=args.getlist('counties'),
        state=args.get('state') or None,
        limit=min(args.get('limit', DEFAULT_SEARCH_LIMIT, type=int), MAX_SEARCH_LIMIT),
        offset=args.get('skip', type=int),
        sort=args.get('sort') or None,
    )


@mls_bp.route('/mls/search', methods=['GET'])
def search_listings():
    """
    Search MLS listings.

    Query params mirror the SimplyRETS names (q, status, type, minprice,
    maxprice, minbeds, ..., cities, postalCodes, state, limit, skip, sort)
    plus provider to pick bridge or simplyrets.
    """
    selection = select_listing_client(provider=request.args.get('provider'))
    search = search_from_args(request.args)

    client = selection.client
    if isinstance(client, BridgeClient):
        result = client.search_properties(search)
        raw_listings, total_count = result.listings, result.total_count
    else:
        raw_listings = client.search_listings(search)
        total_count = None

    listings = [client.normalize_listing(raw).to_dict() for raw in raw_listings]

    return jsonify({
        'success': True,
        'provider': selection.provider,
        'mode': selection.mode.value,
        'listings': listings,
        'totalCount': total_count,
    })


@mls_bp.route('/mls/import', methods=['POST'])
def import_by_keys():
    """
    Import listings by provider key.

    Body: {"agent_id": ..., "listingKeys": [...]} (max 20)
    """
    data = request.get_json(silent=True) or {}
    agent_id = data.get('agent_id')
    listing_keys = data.get('listingKeys')

    if not agent_id:
        return error_response('VALIDATION_ERROR', 'agent_id is required', 400)
    if not listing_keys or not isinstance(listing_keys, list):
        return error_response('VALIDATION_ERROR', 'listingKeys array is required', 400)
    if len(listing_keys) > MAX_IMPORT_KEYS:
        return error_response(
            'VALIDATION_ERROR', f'Maximum {MAX_IMPORT_KEYS} listings can be imported at once', 400
        )

    selection = select_listing_client(provider=data.get('provider'))
    importer = ListingImporter(get_db(), selection.client)
    result = importer.import_by_keys(agent_id, listing_keys)

    if not result.imported and not result.skipped:
        return error_response('FETCH_FAILED', 'No listings could be fetched', 400, details=result.errors)

    return jsonify({'success': True, **result.to_dict()})


@mls_bp.route('/mls/import', methods=['PUT'])
def import_listings():
    """
    Import listings straight from search results.

    Body: {"agent_id": ..., "listings": [<upstream record>, ...]} (max 50)
    """
    data = request.get_json(silent=True) or {}
    agent_id = data.get('agent_id')
    listings = data.get('listings')

    if not agent_id:
        return error_response('VALIDATION_ERROR', 'agent_id is required', 400)
    if not listings or not isinstance(listings, list):
        return error_response('VALIDATION_ERROR', 'listings array is required', 400)
    if len(listings) > MAX_IMPORT_LISTINGS:
        return error_response(
            'VALIDATION_ERROR', f'Maximum {MAX_IMPORT_LISTINGS} listings can be imported at once', 400
        )

    selection = select_listing_client(provider=data.get('provider'))
    importer = ListingImporter(get_db(), selection.client)
    result = importer.import_raw_listings(agent_id, listings)

    return jsonify({'success': True, **result.to_dict()})
