"""Tests for the SQLite store."""
import sqlite3

import pytest


def test_insert_and_read_contacts(test_db, sample_contact):
    assert test_db.insert_contacts([sample_contact]) == 1

    contacts = test_db.get_contacts("agent-1")
    assert len(contacts) == 1
    stored = contacts[0]
    assert stored["id"]
    assert stored["created_at"]
    assert stored["birthday"] == "1985-03-15"
    assert test_db.get_contact(stored["id"])["email"] == "john@example.com"


def test_contacts_newest_first_and_scoped_to_agent(test_db, sample_contact):
    test_db.insert_contacts([dict(sample_contact, first_name="Old")])
    test_db.insert_contacts([dict(sample_contact, first_name="New")])
    test_db.insert_contacts([dict(sample_contact, agent_id="agent-2")])

    assert [c["first_name"] for c in test_db.get_contacts("agent-1")] == ["New", "Old"]


def test_batch_insert_is_atomic(test_db, sample_contact):
    rows = [dict(sample_contact, id="dup"), dict(sample_contact, id="dup")]
    with pytest.raises(sqlite3.IntegrityError):
        test_db.insert_contacts(rows)
    assert test_db.get_contacts("agent-1") == []


def test_update_contact_whitelists_columns(test_db, sample_contact):
    test_db.insert_contacts([dict(sample_contact, id="c1")])

    assert test_db.update_contact("c1", {"phone": "555-0000", "agent_id": "hijack"}) is True
    stored = test_db.get_contact("c1")
    assert stored["phone"] == "555-0000"
    assert stored["agent_id"] == "agent-1"

    assert test_db.update_contact("c1", {"agent_id": "hijack"}) is False
    assert test_db.update_contact("missing", {"phone": "1"}) is False


def test_delete_contact(test_db, sample_contact):
    test_db.insert_contacts([dict(sample_contact, id="c1")])
    assert test_db.delete_contact("c1") is True
    assert test_db.delete_contact("c1") is False
    assert test_db.get_contact("c1") is None


def test_properties_round_trip_json_columns(test_db):
    inserted = test_db.insert_properties([{
        "agent_id": "agent-1",
        "mls_id": "M1",
        "address": "1 Main St",
        "photos": '["https://p/1.jpg"]',
        "highlights": '["Pool"]',
    }])
    assert inserted[0]["photos"] == ["https://p/1.jpg"]

    stored = test_db.get_properties("agent-1")[0]
    assert stored["highlights"] == ["Pool"]
    assert stored["features"] is None
    assert stored["status"] == "active"


def test_existing_mls_ids(test_db):
    test_db.insert_properties([
        {"agent_id": "agent-1", "mls_id": "M1", "address": "a"},
        {"agent_id": "agent-2", "mls_id": "M2", "address": "b"},
    ])
    assert test_db.get_existing_mls_ids("agent-1", ["M1", "M2", None]) == {"M1"}
    assert test_db.get_existing_mls_ids("agent-1", []) == set()


def test_duplicate_property_rejected(test_db):
    row = {"agent_id": "agent-1", "mls_id": "M1", "address": "a"}
    test_db.insert_properties([row])
    with pytest.raises(sqlite3.IntegrityError):
        test_db.insert_properties([row])


def test_migration_upgrades_older_properties_table(test_db_path):
    from agentdesk.core.database import AgentDeskDatabase

    conn = sqlite3.connect(str(test_db_path))
    conn.execute(
        "CREATE TABLE properties ("
        "id TEXT PRIMARY KEY, agent_id TEXT NOT NULL, mls_id TEXT, address TEXT NOT NULL, "
        "city TEXT, state TEXT, zip TEXT, price REAL, beds INTEGER, baths REAL, sqft INTEGER, "
        "lot_size REAL, year_built INTEGER, property_type TEXT, status TEXT DEFAULT 'active', "
        "days_on_market INTEGER, listing_agent_name TEXT, listing_agent_phone TEXT, "
        "listing_agent_email TEXT, photos TEXT, description TEXT, features TEXT, highlights TEXT, "
        "latitude REAL, longitude REAL, created_at TEXT DEFAULT CURRENT_TIMESTAMP, "
        "updated_at TEXT DEFAULT CURRENT_TIMESTAMP, UNIQUE(agent_id, mls_id))"
    )
    conn.execute("INSERT INTO properties (id, agent_id, mls_id, address) VALUES ('p0', 'agent-1', 'OLD', 'x')")
    conn.commit()
    conn.close()

    db = AgentDeskDatabase(str(test_db_path))

    conn = sqlite3.connect(str(test_db_path))
    columns = {row[1] for row in conn.execute("PRAGMA table_info(properties)")}
    conn.close()
    assert {"listing_office", "virtual_tour_url", "source"} <= columns

    db.insert_properties([{"agent_id": "agent-1", "mls_id": "NEW", "address": "y",
                           "source": "bridge", "listing_office": "Hill Country Realty"}])
    stored = {p["mls_id"]: p for p in db.get_properties("agent-1")}
    assert stored["NEW"]["source"] == "bridge"
    assert stored["OLD"]["source"] is None
