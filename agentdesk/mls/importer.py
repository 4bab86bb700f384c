"""
MLS Listing Importer

Copies normalized MLS listings into an agent's property table without ever
inserting the same (agent_id, mls_id) twice.

Usage:
    from agentdesk.mls.importer import ListingImporter

    importer = ListingImporter(db, client)
    result = importer.import_by_keys('agent-123', ['3yd-BRIDGE-1234'])
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Set

import logging

from agentdesk.adapters.base_adapter import ListingAdapter, NormalizedProperty
from agentdesk.mls.exceptions import MLSAPIError

logger = logging.getLogger(__name__)

MAX_IMPORT_KEYS = 20
MAX_IMPORT_LISTINGS = 50


@dataclass
class ListingImportResult:
    imported: int = 0
    skipped: int = 0
    errors: List[Dict[str, str]] = field(default_factory=list)
    properties: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def message(self) -> str:
        if not self.imported and self.skipped:
            return "All listings have already been imported"
        return f"Successfully imported {self.imported} properties"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'message': self.message,
            'imported': self.imported,
            'skipped': self.skipped,
            'errors': list(self.errors),
            'properties': list(self.properties),
        }


def filter_new_listings(properties: Iterable[NormalizedProperty],
                        existing_ids: Set[str]) -> List[NormalizedProperty]:
    """Drop listings whose mls_id is already stored or repeated earlier in the batch."""
    seen = set(existing_ids)
    new = []
    for prop in properties:
        if prop.mls_id in seen:
            continue
        seen.add(prop.mls_id)
        new.append(prop)
    return new


class ListingImporter:
    """Imports MLS listings for an agent through a listing adapter."""

    def __init__(self, db, client: ListingAdapter):
        """
        Args:
            db: Store exposing get_existing_mls_ids() and insert_properties()
            client: Listing adapter used to fetch and normalize listings
        """
        self.db = db
        self.client = client

    def import_properties(self, agent_id: str,
                          properties: List[NormalizedProperty]) -> ListingImportResult:
        """Insert normalized properties the agent does not already have."""
        existing = self.db.get_existing_mls_ids(agent_id, [p.mls_id for p in properties])
        new = filter_new_listings(properties, existing)
        skipped = len(properties) - len(new)

        if not new:
            logger.info(f"All {len(properties)} listings already imported for agent {agent_id}")
            return ListingImportResult(skipped=skipped)

        inserted = self.db.insert_properties([p.to_property_row(agent_id) for p in new])
        logger.info(f"Imported {len(inserted)} listings for agent {agent_id} ({skipped} skipped)")

        return ListingImportResult(imported=len(inserted), skipped=skipped, properties=inserted)

    def import_raw_listings(self, agent_id: str,
                            raw_listings: List[Dict[str, Any]]) -> ListingImportResult:
        """Normalize upstream listing records and import them."""
        properties = [self.client.normalize_listing(raw) for raw in raw_listings]
        return self.import_properties(agent_id, properties)

    def import_by_keys(self, agent_id: str, listing_keys: List[str]) -> ListingImportResult:
        """
        Fetch listings one key at a time and import them.

        Fetch failures are collected as {'listing_key', 'error'} entries; the
        remaining keys are still imported.
        """
        raw_listings = []
        errors = []

        for key in listing_keys:
            try:
                raw_listings.append(self.client.get_listing(key))
            except MLSAPIError as e:
                logger.warning(f"Failed to fetch listing {key}: {e}")
                errors.append({'listing_key': key, 'error': str(e)})

        if raw_listings:
            result = self.import_raw_listings(agent_id, raw_listings)
        else:
            result = ListingImportResult()

        result.errors = errors + result.errors
        return result
