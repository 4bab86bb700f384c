"""Tests for the Bridge RESO client and normalizer."""
import pytest

from agentdesk.adapters.base_adapter import BoundingBox, ListingSearch
from agentdesk.mls.bridge import (
    BridgeClient,
    build_features,
    build_odata_filter,
    extract_photos,
    map_property_type,
    map_status,
)
from agentdesk.mls.exceptions import MLSAPIError

BASE = "https://api.bridgedataoutput.com/api/v2/OData/test"


@pytest.fixture
def client():
    return BridgeClient("token-123", "test", request_delay=0)


def test_empty_filter():
    assert build_odata_filter(None) == ""
    assert build_odata_filter(ListingSearch()) == ""


def test_filter_clauses_joined_with_and():
    search = ListingSearch(
        statuses=["Active", "Pending"],
        min_price=200000,
        max_price=500000,
        min_beds=3,
        min_baths=2,
        cities=["Austin"],
        state="TX",
    )
    assert build_odata_filter(search) == (
        "(StandardStatus eq 'Active' or StandardStatus eq 'Pending')"
        " and ListPrice ge 200000"
        " and ListPrice le 500000"
        " and BedroomsTotal ge 3"
        " and BathroomsTotalInteger ge 2"
        " and (City eq 'Austin')"
        " and StateOrProvince eq 'TX'"
    )


def test_filter_free_text_and_quote_escaping():
    search = ListingSearch(query="O'Brien", cities=["Coeur d'Alene"])
    assert build_odata_filter(search) == (
        "(City eq 'Coeur d''Alene')"
        " and (contains(UnparsedAddress, 'O''Brien') or contains(PublicRemarks, 'O''Brien'))"
    )


def test_filter_bbox():
    search = ListingSearch(bbox=BoundingBox(north=31.0, south=30.0, east=-97.0, west=-98.0))
    assert build_odata_filter(search) == (
        "Latitude ge 30.0 and Latitude le 31.0 and Longitude ge -98.0 and Longitude le -97.0"
    )


def test_search_properties_request(client, mocker, mock_response, bridge_listing):
    request = mocker.patch.object(
        client.session, "request",
        return_value=mock_response(json_data={"value": [bridge_listing], "@odata.count": 42}),
    )

    result = client.search_properties(ListingSearch(statuses=["Active"], limit=500))

    assert result.listings == [bridge_listing]
    assert result.total_count == 42
    assert client.session.headers["Authorization"] == "Bearer token-123"
    args, kwargs = request.call_args
    assert args == ("GET", f"{BASE}/Property")
    assert kwargs["params"] == {
        "$filter": "(StandardStatus eq 'Active')",
        "$top": 200,
        "$orderby": "BridgeModificationTimestamp desc",
        "$count": "true",
    }


def test_search_without_count(client, mocker, mock_response, bridge_listing):
    mocker.patch.object(client.session, "request", return_value=mock_response(json_data={"value": [bridge_listing]}))
    result = client.search_properties()
    assert result.total_count is None
    assert client.search_listings() == [bridge_listing]


def test_get_property_url(client, mocker, mock_response, bridge_listing):
    request = mocker.patch.object(client.session, "request", return_value=mock_response(json_data=bridge_listing))
    assert client.get_property("3yd-BRIDGE-1001") == bridge_listing
    assert request.call_args[0][1] == f"{BASE}/Property('3yd-BRIDGE-1001')"


def test_get_property_unwraps_odata_envelope(client, mocker, mock_response, bridge_listing):
    mocker.patch.object(client.session, "request", return_value=mock_response(json_data={"value": bridge_listing}))
    assert client.get_property("3yd-BRIDGE-1001") == bridge_listing


def test_get_property_unwraps_single_item_collection(client, mocker, mock_response, bridge_listing):
    mocker.patch.object(client.session, "request",
                        return_value=mock_response(json_data={"@odata.context": "x", "value": [bridge_listing]}))
    assert client.get_listing("3yd-BRIDGE-1001")["ListingId"] == "BR1001"


def test_get_property_empty_collection_raises(client, mocker, mock_response):
    mocker.patch.object(client.session, "request", return_value=mock_response(json_data={"value": []}))
    with pytest.raises(MLSAPIError, match="not found"):
        client.get_property("missing")


def test_get_modified_since(client, mocker, mock_response):
    request = mocker.patch.object(client.session, "request", return_value=mock_response(json_data={"value": []}))
    client.get_modified_since("2024-01-01T00:00:00Z", limit=1000)
    params = request.call_args[1]["params"]
    assert params["$filter"] == "BridgeModificationTimestamp gt 2024-01-01T00:00:00Z"
    assert params["$orderby"] == "BridgeModificationTimestamp asc"
    assert params["$top"] == 200


def test_connection_check(client, mocker, mock_response):
    mocker.patch.object(client.session, "request", return_value=mock_response(status_code=401))
    assert client.test_connection() is False


def test_status_and_type_maps():
    assert map_status("Active Under Contract") == "pending"
    assert map_status("Closed") == "sold"
    assert map_status("Withdrawn") == "off_market"
    assert map_status("Something New") == "active"
    assert map_property_type({"PropertyType": "Residential Income"}) == "Multi-Family"
    assert map_property_type({"PropertyType": "Other", "PropertySubType": "Cabin"}) == "Cabin"
    assert map_property_type({}) == "Residential"


def test_extract_photos_filters_sorts_and_caps():
    media = [{"MediaURL": f"https://m/{i}.jpg", "MimeType": "image/jpeg", "Order": 20 - i} for i in range(15)]
    media.append({"MediaURL": "https://m/doc.pdf", "MediaCategory": "Document", "Order": 0})

    photos = extract_photos(media)

    assert len(photos) == 10
    assert photos[0] == "https://m/14.jpg"
    assert "https://m/doc.pdf" not in photos
    assert extract_photos(None) == []


def test_build_features(bridge_listing):
    assert build_features(bridge_listing) == [
        "Fireplace",
        "Walk-In Closet",
        "Covered Patio",
        "Pool: In Ground",
        "2 Car Garage",
        "1 Fireplace(s)",
    ]
    assert build_features({}) is None


def test_normalize_listing(client, bridge_listing):
    prop = client.normalize_listing(bridge_listing)

    assert prop.mls_id == "BR1001"
    assert prop.address == "12 Oak Lane"
    assert prop.baths == 2.5
    assert prop.status == "pending"
    assert prop.property_type == "Single Family"
    assert prop.photos == ["https://media.example.com/1.jpg", "https://media.example.com/2.jpg"]
    assert prop.listing_agent == "Sam Seller"
    assert prop.listing_agent_phone == "512-555-0100"
    assert prop.lot_size == 0.3
    assert prop.source == "bridge"
    assert prop.highlights == [
        "Built in 2005",
        "2-car garage",
        "Pool",
        "2 stories",
        "Hills, Lake view",
        "Fireplace",
    ]


def test_normalize_falls_back_to_key_and_street_parts(client):
    prop = client.normalize_listing({
        "ListingKey": "KEY-9",
        "StreetNumber": "100",
        "StreetName": "Congress",
        "StreetSuffix": "Ave",
        "BathroomsFull": 3,
    })
    assert prop.mls_id == "KEY-9"
    assert prop.address == "100 Congress Ave"
    assert prop.baths == 3
    assert prop.features is None
