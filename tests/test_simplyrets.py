"""Tests for the SimplyRETS client and normalizer."""
import pytest

from agentdesk.adapters.base_adapter import ListingSearch
from agentdesk.mls.simplyrets import SimplyRetsClient, build_query_params, map_status


@pytest.fixture
def client():
    return SimplyRetsClient("simplyrets", "simplyrets", request_delay=0)


def test_default_query_params():
    assert build_query_params() == {"status": "Active", "limit": 50}


def test_query_params_from_search():
    search = ListingSearch(
        query="pool",
        statuses=["Active", "Pending"],
        min_price=200000,
        max_beds=0,
        min_year=1990,
        cities=["Houston", "Katy"],
        postal_codes=["77096"],
        limit=10,
        offset=20,
    )
    assert build_query_params(search) == {
        "status": ["Active", "Pending"],
        "limit": 10,
        "q": "pool",
        "minprice": 200000,
        "minyear": 1990,
        "cities": ["Houston", "Katy"],
        "postalCodes": ["77096"],
        "offset": 20,
    }


def test_status_mapping():
    assert map_status("Active") == "active"
    assert map_status("ActiveUnderContract") == "pending"
    assert map_status("Closed") == "sold"
    assert map_status("Withdrawn") == "withdrawn"
    assert map_status(None) == "active"


def test_search_sends_basic_auth_and_params(client, mocker, mock_response, simplyrets_listing):
    request = mocker.patch.object(
        client.session, "request", return_value=mock_response(json_data=[simplyrets_listing])
    )

    listings = client.search_listings(ListingSearch(cities=["Houston"]))

    assert listings == [simplyrets_listing]
    assert client.session.auth == ("simplyrets", "simplyrets")
    args, kwargs = request.call_args
    assert args == ("GET", "https://api.simplyrets.com/properties")
    assert kwargs["params"] == {"status": "Active", "limit": 50, "cities": ["Houston"]}
    assert client.get_stats()["records_fetched"] == 1


def test_get_listing(client, mocker, mock_response, simplyrets_listing):
    request = mocker.patch.object(
        client.session, "request", return_value=mock_response(json_data=simplyrets_listing)
    )
    assert client.get_listing("1005192") == simplyrets_listing
    assert request.call_args[0][1] == "https://api.simplyrets.com/properties/1005192"


def test_normalize_listing(client, simplyrets_listing):
    prop = client.normalize_listing(simplyrets_listing)

    assert prop.mls_id == "49699452"
    assert prop.address == "74434 East Sweet Bottom Br #18393"
    assert prop.city == "Houston"
    assert prop.zip == "77096"
    assert prop.price == 20714261
    assert prop.beds == 3
    assert prop.baths == 2.5
    assert prop.sqft == 1043
    assert prop.status == "active"
    assert prop.property_type == "RES"
    assert prop.days_on_market == 12
    assert prop.listing_agent == "Jane Agent"
    assert prop.listing_agent_phone == "555-000-1111"
    assert prop.listing_office == "Example Realty"
    assert prop.photos == simplyrets_listing["photos"]
    assert prop.source == "simplyrets"
    assert prop.highlights == [
        "Built in 1994",
        "2-car garage",
        "Pool",
        "2 stories",
        "Mountain view",
        "0.75 acre lot",
    ]


def test_normalize_sparse_listing(client):
    prop = client.normalize_listing({
        "listingId": "1",
        "address": {"full": "1 Main St"},
        "property": {"bathsFull": 1, "yearBuilt": 0},
        "mls": {"status": "Pending"},
        "agent": {"firstName": "", "lastName": ""},
    })

    assert prop.baths == 1
    assert prop.year_built is None
    assert prop.latitude is None
    assert prop.listing_agent is None
    assert prop.status == "pending"
    assert prop.photos == []
    assert prop.highlights == []


def test_search_normalizes(client, mocker, mock_response, simplyrets_listing):
    mocker.patch.object(client.session, "request", return_value=mock_response(json_data=[simplyrets_listing]))
    properties = client.search()
    assert [p.mls_id for p in properties] == ["49699452"]
