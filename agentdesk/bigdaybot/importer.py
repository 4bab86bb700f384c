"""
BigDayBot CSV Contact Importer

Imports an agent's contact list from an uploaded CSV into the contact store.
Handles:
- Header alias resolution and date normalization
- Skipping rows without a first name (reported, not fatal)
- Sequential batch inserts with per-batch error capture
- Stamping every contact of one upload with the same import batch ID

Usage:
    from agentdesk.bigdaybot.importer import ContactCSVImporter

    importer = ContactCSVImporter(db)
    result = importer.import_csv(csv_text, agent_id='agent-123')
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import logging

from agentdesk.bigdaybot.column_map import row_to_contact
from agentdesk.bigdaybot.csv_parser import parse_csv

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100


@dataclass
class ImportResult:
    """Outcome of one CSV upload."""
    success: bool
    imported: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)
    import_batch_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'imported': self.imported,
            'skipped': self.skipped,
            'errors': list(self.errors),
        }


class ContactCSVImporter:
    """Imports BigDayBot contacts from CSV text."""

    def __init__(self, db, batch_size: int = DEFAULT_BATCH_SIZE):
        """
        Args:
            db: Contact store exposing insert_contacts(rows)
            batch_size: Rows per insert call
        """
        self.db = db
        self.batch_size = batch_size

    def import_csv(self, csv_text: str, agent_id: str) -> ImportResult:
        """
        Import contacts for an agent.

        Never raises; every failure is reported through the result's
        errors list and success flag.
        """
        import_batch_id = str(uuid.uuid4())
        errors: List[str] = []
        imported = 0
        skipped = 0

        try:
            rows = parse_csv(csv_text)

            if not rows:
                logger.info(f"CSV import for agent {agent_id}: no data rows")
                return ImportResult(
                    success=False,
                    errors=["No data found in CSV file"],
                    import_batch_id=import_batch_id,
                )

            contacts = []
            for i, row in enumerate(rows):
                contact = row_to_contact(row, agent_id, import_batch_id)
                if contact:
                    contacts.append(contact)
                else:
                    skipped += 1
                    # +2: header line plus 1-based numbering
                    errors.append(f"Row {i + 2}: Missing required field (first_name)")

            if not contacts:
                logger.info(f"CSV import for agent {agent_id}: no valid contacts in {len(rows)} rows")
                return ImportResult(
                    success=False,
                    skipped=skipped,
                    errors=["No valid contacts found in CSV"],
                    import_batch_id=import_batch_id,
                )

            for start in range(0, len(contacts), self.batch_size):
                batch = contacts[start:start + self.batch_size]
                try:
                    self.db.insert_contacts([c.to_dict() for c in batch])
                    imported += len(batch)
                except Exception as e:
                    logger.error(f"Batch insert failed (rows {start + 1}-{start + len(batch)}): {e}")
                    errors.append(f"Batch insert error: {e}")

            logger.info(
                f"CSV import for agent {agent_id} (batch {import_batch_id}): "
                f"{imported} imported, {skipped} skipped, {len(errors)} errors"
            )

            return ImportResult(
                success=imported > 0,
                imported=imported,
                skipped=skipped,
                errors=errors,
                import_batch_id=import_batch_id,
            )

        except Exception as e:
            logger.exception(f"CSV import for agent {agent_id} failed")
            return ImportResult(
                success=False,
                imported=imported,
                skipped=skipped,
                errors=[str(e) or "Unknown error"],
                import_batch_id=import_batch_id,
            )


def import_contacts_from_csv(csv_text: str, agent_id: str, db,
                             batch_size: int = DEFAULT_BATCH_SIZE) -> ImportResult:
    """Convenience wrapper around ContactCSVImporter."""
    return ContactCSVImporter(db, batch_size=batch_size).import_csv(csv_text, agent_id)
