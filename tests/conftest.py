"""
pytest configuration and fixtures for AgentDesk tests.
"""
import sys
from pathlib import Path

import pytest

# Add project root to Python path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

MLS_ENV_VARS = (
    "BRIDGE_ACCESS_TOKEN",
    "BRIDGE_DATASET_KEY",
    "SIMPLYRETS_API_USERNAME",
    "SIMPLYRETS_API_PASSWORD",
    "MLS_PROVIDER",
)


@pytest.fixture
def project_root():
    """Return the project root path."""
    return PROJECT_ROOT


@pytest.fixture
def test_db_path(tmp_path):
    """Create a temporary database path for testing."""
    return tmp_path / "test_agentdesk.db"


@pytest.fixture
def test_db(test_db_path):
    """Create a test database with schema."""
    from agentdesk.core.database import AgentDeskDatabase
    db = AgentDeskDatabase(str(test_db_path))
    yield db
    # Cleanup happens automatically when temp directory is removed


@pytest.fixture
def env_vars(monkeypatch, test_db_path):
    """Point the API at the temp database and clear MLS credentials."""
    for name in MLS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AGENTDESK_DB_PATH", str(test_db_path))


@pytest.fixture
def sample_contact():
    """Sample contact row for testing."""
    return {
        "agent_id": "agent-1",
        "first_name": "John",
        "last_name": "Smith",
        "email": "john@example.com",
        "phone": "555-123-4567",
        "birthday": "1985-03-15",
        "wedding_anniversary": "2010-06-20",
        "home_purchase_date": "2022-09-01",
        "kid1_name": "Emma",
        "kid1_birthday": "2015-04-22",
        "status": "active",
        "import_source": "csv",
        "import_batch_id": "batch-1",
    }


@pytest.fixture
def simplyrets_listing():
    """Sample SimplyRETS /properties record."""
    return {
        "mlsId": 1005192,
        "listingId": "49699452",
        "listPrice": 20714261,
        "remarks": "Beautiful home with updated kitchen.",
        "photos": [
            "https://photos.example.com/1.jpg",
            "https://photos.example.com/2.jpg",
        ],
        "address": {
            "full": "74434 East Sweet Bottom Br #18393",
            "city": "Houston",
            "state": "Texas",
            "postalCode": "77096",
        },
        "property": {
            "type": "RES",
            "bedrooms": 3,
            "bathsFull": 2,
            "bathsHalf": 1,
            "area": 1043,
            "yearBuilt": 1994,
            "garageSpaces": 2.0,
            "pool": "Private",
            "stories": 2,
            "view": "Mountain",
            "lotSizeArea": 0.75,
            "interiorFeatures": ["Granite Counters", "Wet Bar", "Hardwood Floors"],
        },
        "mls": {"status": "Active", "daysOnMarket": 12},
        "geo": {"lat": 29.689418, "lng": -95.474464},
        "agent": {
            "firstName": "Jane",
            "lastName": "Agent",
            "contact": {"email": "jane@example.com", "office": "555-000-1111", "cell": None},
        },
        "office": {"name": "Example Realty"},
        "virtualTourUrl": "https://tours.example.com/49699452",
    }


@pytest.fixture
def bridge_listing():
    """Sample Bridge RESO Property record."""
    return {
        "ListingKey": "3yd-BRIDGE-1001",
        "ListingId": "BR1001",
        "StandardStatus": "Active Under Contract",
        "PropertyType": "Residential",
        "PropertySubType": "Single Family Residence",
        "ListPrice": 450000,
        "UnparsedAddress": "12 Oak Lane",
        "City": "Austin",
        "StateOrProvince": "TX",
        "PostalCode": "78701",
        "BedroomsTotal": 4,
        "BathroomsFull": 2,
        "BathroomsHalf": 1,
        "LivingArea": 2200,
        "LotSizeAcres": 0.3,
        "YearBuilt": 2005,
        "Stories": 2,
        "GarageSpaces": 2,
        "InteriorFeatures": ["Fireplace", "Walk-In Closet"],
        "ExteriorFeatures": ["Covered Patio"],
        "PoolFeatures": ["In Ground"],
        "FireplacesTotal": 1,
        "View": ["Hills", "Lake"],
        "DaysOnMarket": 5,
        "PublicRemarks": "Lovely family home.",
        "ListAgentFullName": "Sam Seller",
        "ListAgentOfficePhone": "512-555-0100",
        "ListAgentEmail": "sam@example.com",
        "ListOfficeName": "Hill Country Realty",
        "Latitude": 30.27,
        "Longitude": -97.74,
        "Media": [
            {"MediaURL": "https://media.example.com/2.jpg", "MediaCategory": "Photo", "Order": 2},
            {"MediaURL": "https://media.example.com/1.jpg", "MediaCategory": "Photo", "Order": 1},
            {"MediaURL": "https://media.example.com/plan.pdf", "MediaCategory": "Document",
             "MimeType": "application/pdf", "Order": 0},
        ],
    }


@pytest.fixture
def mock_response(mocker):
    """Build fake requests.Response objects."""
    def _make(status_code=200, json_data=None, text='', headers=None):
        response = mocker.Mock()
        response.status_code = status_code
        response.ok = 200 <= status_code < 400
        response.json.return_value = json_data
        response.text = text
        response.headers = headers or {}
        return response
    return _make
