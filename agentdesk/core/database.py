"""
AgentDesk Database Module

SQLite database operations for contacts and imported MLS properties.
"""

import json
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set
import logging

logger = logging.getLogger(__name__)


CONTACT_COLUMNS = (
    'id', 'agent_id', 'first_name', 'last_name', 'email', 'phone',
    'birthday', 'wedding_anniversary', 'home_purchase_date', 'move_in_date',
    'property_address', 'property_city', 'property_state', 'property_zip',
    'kid1_name', 'kid1_birthday', 'kid2_name', 'kid2_birthday',
    'kid3_name', 'kid3_birthday', 'kid4_name', 'kid4_birthday',
    'notes', 'status', 'import_source', 'import_batch_id',
    'created_at', 'updated_at',
)

# Columns an agent may change after creation
CONTACT_UPDATABLE_COLUMNS = frozenset(CONTACT_COLUMNS) - {
    'id', 'agent_id', 'import_source', 'import_batch_id', 'created_at', 'updated_at',
}

PROPERTY_COLUMNS = (
    'id', 'agent_id', 'mls_id', 'address', 'city', 'state', 'zip',
    'price', 'beds', 'baths', 'sqft', 'lot_size', 'year_built',
    'property_type', 'status', 'days_on_market',
    'listing_agent_name', 'listing_agent_phone', 'listing_agent_email', 'listing_office',
    'photos', 'description', 'features', 'highlights',
    'latitude', 'longitude', 'virtual_tour_url', 'source',
    'created_at', 'updated_at',
)

# Stored as JSON text, decoded on read
PROPERTY_JSON_COLUMNS = ('photos', 'features', 'highlights')


class AgentDeskDatabase:
    """
    SQLite database manager for AgentDesk.

    Plays the persistence collaborator for the CSV contact importer and the
    MLS listing importer. Every insert call runs in a single transaction.
    """

    def __init__(self, db_path: str):
        """
        Initialize database connection.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

    def _init_database(self) -> None:
        """Create tables if they don't exist."""
        with self._get_connection() as conn:
            conn.execute("PRAGMA journal_mode = WAL")
            conn.execute("PRAGMA busy_timeout = 5000")

            conn.executescript(self._get_tables_schema())
            conn.commit()

            self._apply_migrations(conn)
            conn.commit()

            conn.executescript(self._get_indexes_schema())
            conn.commit()

            logger.info(f"Database initialized at {self.db_path}")

    def _apply_migrations(self, conn) -> None:
        """
        Add columns introduced after the first properties schema.

        Every database gets them here, so tables created by older releases
        end up with the same shape as new ones.
        """
        cursor = conn.execute("PRAGMA table_info(properties)")
        existing_cols = {row[1] for row in cursor.fetchall()}

        new_property_columns = [
            ("listing_office", "TEXT"),
            ("virtual_tour_url", "TEXT"),
            ("source", "TEXT"),              # simplyrets, bridge
        ]

        for col_name, col_type in new_property_columns:
            if col_name not in existing_cols:
                try:
                    conn.execute(f"ALTER TABLE properties ADD COLUMN {col_name} {col_type}")
                    logger.info(f"Added column {col_name} to properties table")
                except sqlite3.OperationalError:
                    pass  # Column already exists

    @contextmanager
    def _get_connection(self):
        """Get database connection with context manager."""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def _get_tables_schema(self) -> str:
        """Return the CREATE TABLE statements only."""
        return '''
        -- BigDayBot contacts (one row per client the agent keeps in touch with)
        CREATE TABLE IF NOT EXISTS bigdaybot_contacts (
            id TEXT PRIMARY KEY,
            agent_id TEXT NOT NULL,
            first_name TEXT NOT NULL,
            last_name TEXT,
            email TEXT,
            phone TEXT,
            -- Anchor dates (YYYY-MM-DD)
            birthday TEXT,
            wedding_anniversary TEXT,
            home_purchase_date TEXT,
            move_in_date TEXT,
            -- Property location
            property_address TEXT,
            property_city TEXT,
            property_state TEXT,
            property_zip TEXT,
            -- Children
            kid1_name TEXT,
            kid1_birthday TEXT,
            kid2_name TEXT,
            kid2_birthday TEXT,
            kid3_name TEXT,
            kid3_birthday TEXT,
            kid4_name TEXT,
            kid4_birthday TEXT,
            notes TEXT,
            status TEXT DEFAULT 'active',
            -- Provenance
            import_source TEXT,
            import_batch_id TEXT,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP
        );

        -- Properties imported from MLS providers
        CREATE TABLE IF NOT EXISTS properties (
            id TEXT PRIMARY KEY,
            agent_id TEXT NOT NULL,
            mls_id TEXT,
            address TEXT NOT NULL,
            city TEXT,
            state TEXT,
            zip TEXT,
            price REAL,
            beds INTEGER,
            baths REAL,
            sqft INTEGER,
            lot_size REAL,
            year_built INTEGER,
            property_type TEXT,
            status TEXT DEFAULT 'active',
            days_on_market INTEGER,
            listing_agent_name TEXT,
            listing_agent_phone TEXT,
            listing_agent_email TEXT,
            photos TEXT,              -- JSON array of URLs
            description TEXT,
            features TEXT,            -- JSON array
            highlights TEXT,          -- JSON array (max 6)
            latitude REAL,
            longitude REAL,
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
            UNIQUE(agent_id, mls_id)
        );
        '''

    def _get_indexes_schema(self) -> str:
        """Return the CREATE INDEX statements."""
        return '''
        CREATE INDEX IF NOT EXISTS idx_contacts_agent ON bigdaybot_contacts(agent_id);
        CREATE INDEX IF NOT EXISTS idx_contacts_batch ON bigdaybot_contacts(import_batch_id);
        CREATE INDEX IF NOT EXISTS idx_properties_agent ON properties(agent_id);
        '''

    # ==========================================
    # CONTACT OPERATIONS
    # ==========================================

    def insert_contacts(self, rows: List[Dict[str, Any]]) -> int:
        """
        Insert a batch of contact rows in one transaction.

        Either the whole batch is written or nothing is; sqlite3 errors
        propagate to the caller.

        Returns:
            Number of rows inserted
        """
        if not rows:
            return 0

        now = datetime.now().isoformat()
        prepared = []
        for row in rows:
            record = {col: row.get(col) for col in CONTACT_COLUMNS}
            record['id'] = record['id'] or str(uuid.uuid4())
            record['status'] = record['status'] or 'active'
            record['created_at'] = record['created_at'] or now
            record['updated_at'] = record['updated_at'] or now
            prepared.append(record)

        columns = ', '.join(CONTACT_COLUMNS)
        placeholders = ', '.join(f':{col}' for col in CONTACT_COLUMNS)

        with self._get_connection() as conn:
            try:
                conn.executemany(
                    f'INSERT INTO bigdaybot_contacts ({columns}) VALUES ({placeholders})',
                    prepared
                )
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise

        logger.debug(f"Inserted {len(prepared)} contacts")
        return len(prepared)

    def get_contacts(self, agent_id: str) -> List[Dict[str, Any]]:
        """Get all contacts for an agent, newest first."""
        with self._get_connection() as conn:
            rows = conn.execute('''
                SELECT * FROM bigdaybot_contacts
                WHERE agent_id = ?
                ORDER BY created_at DESC, rowid DESC
            ''', (agent_id,)).fetchall()
            return [dict(row) for row in rows]

    def get_contact(self, contact_id: str) -> Optional[Dict[str, Any]]:
        """Get a single contact by ID."""
        with self._get_connection() as conn:
            row = conn.execute(
                'SELECT * FROM bigdaybot_contacts WHERE id = ?', (contact_id,)
            ).fetchone()
            return dict(row) if row else None

    def get_contacts_by_batch(self, import_batch_id: str) -> List[Dict[str, Any]]:
        """Get every contact created by one CSV upload."""
        with self._get_connection() as conn:
            rows = conn.execute('''
                SELECT * FROM bigdaybot_contacts
                WHERE import_batch_id = ?
                ORDER BY rowid
            ''', (import_batch_id,)).fetchall()
            return [dict(row) for row in rows]

    def update_contact(self, contact_id: str, updates: Dict[str, Any]) -> bool:
        """
        Update a contact.

        Only agent-editable columns are applied; anything else is ignored.

        Returns:
            True if a row was updated
        """
        changes = {k: v for k, v in updates.items() if k in CONTACT_UPDATABLE_COLUMNS}
        if not changes:
            return False

        changes['updated_at'] = datetime.now().isoformat()
        assignments = ', '.join(f'{col} = :{col}' for col in changes)
        params = dict(changes, contact_id=contact_id)

        with self._get_connection() as conn:
            cursor = conn.execute(
                f'UPDATE bigdaybot_contacts SET {assignments} WHERE id = :contact_id',
                params
            )
            conn.commit()
            return cursor.rowcount > 0

    def delete_contact(self, contact_id: str) -> bool:
        """Delete a contact. Returns True if a row was removed."""
        with self._get_connection() as conn:
            cursor = conn.execute('DELETE FROM bigdaybot_contacts WHERE id = ?', (contact_id,))
            conn.commit()
            return cursor.rowcount > 0

    # ==========================================
    # PROPERTY OPERATIONS
    # ==========================================

    def get_existing_mls_ids(self, agent_id: str, mls_ids: Iterable[str]) -> Set[str]:
        """Return the subset of mls_ids the agent has already imported."""
        mls_ids = [m for m in mls_ids if m]
        if not mls_ids:
            return set()

        placeholders = ', '.join('?' for _ in mls_ids)
        with self._get_connection() as conn:
            rows = conn.execute(
                f'SELECT mls_id FROM properties WHERE agent_id = ? AND mls_id IN ({placeholders})',
                [agent_id, *mls_ids]
            ).fetchall()
            return {row['mls_id'] for row in rows}

    def insert_properties(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Insert property rows in one transaction.

        Returns:
            The inserted rows as stored (ids and timestamps filled in)
        """
        if not rows:
            return []

        now = datetime.now().isoformat()
        prepared = []
        for row in rows:
            record = {col: row.get(col) for col in PROPERTY_COLUMNS}
            record['id'] = record['id'] or str(uuid.uuid4())
            record['status'] = record['status'] or 'active'
            record['created_at'] = record['created_at'] or now
            record['updated_at'] = record['updated_at'] or now
            prepared.append(record)

        columns = ', '.join(PROPERTY_COLUMNS)
        placeholders = ', '.join(f':{col}' for col in PROPERTY_COLUMNS)

        with self._get_connection() as conn:
            try:
                conn.executemany(
                    f'INSERT INTO properties ({columns}) VALUES ({placeholders})',
                    prepared
                )
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise

        logger.info(f"Inserted {len(prepared)} properties")
        return [self._decode_property(record) for record in prepared]

    def get_properties(self, agent_id: str) -> List[Dict[str, Any]]:
        """Get all properties for an agent, newest first."""
        with self._get_connection() as conn:
            rows = conn.execute('''
                SELECT * FROM properties
                WHERE agent_id = ?
                ORDER BY created_at DESC, rowid DESC
            ''', (agent_id,)).fetchall()
            return [self._decode_property(dict(row)) for row in rows]

    @staticmethod
    def _decode_property(record: Dict[str, Any]) -> Dict[str, Any]:
        decoded = dict(record)
        for col in PROPERTY_JSON_COLUMNS:
            value = decoded.get(col)
            decoded[col] = json.loads(value) if value else None
        return decoded
