import pytest

from newrelic_cli.exceptions import AmbiguityError, NotFoundError, ResponseError
from newrelic_cli.models.identifiers import encode_guid
from newrelic_cli.resolver import AppResolver, quote_nrql_string

from .conftest import entity_search


def test_numeric_identifier_needs_no_request(client, fake_api):
    assert AppResolver(client).resolve_app_id("12345") == "12345"
    assert fake_api.requests == []


def test_application_guid_needs_no_request(client, fake_api, app_guid):
    assert AppResolver(client).resolve_app_id(app_guid) == "890123"
    assert fake_api.requests == []


def test_name_lookup_uses_exactly_one_search(client, fake_api, app_guid):
    fake_api.graphql(entity_search({"guid": app_guid, "name": "checkout"}))

    assert AppResolver(client).resolve_app_id("checkout") == "890123"
    assert len(fake_api.requests) == 1
    assert fake_api.last.variables == {
        "query": "name = 'checkout' AND domain = 'APM' AND type = 'APPLICATION'"
    }


def test_non_application_guid_falls_back_to_name_search(client, fake_api, app_guid):
    dashboard_guid = str(encode_guid("1234567", "VIZ", "DASHBOARD", "999999"))
    fake_api.graphql(entity_search({"guid": app_guid}))

    assert AppResolver(client).resolve_app_id(dashboard_guid) == "890123"
    assert len(fake_api.requests) == 1


def test_name_is_escaped_in_search_query(client, fake_api, app_guid):
    fake_api.graphql(entity_search({"guid": app_guid}))
    AppResolver(client).resolve_app_id("O'Brien\\app")
    assert fake_api.last.variables["query"].startswith("name = 'O\\'Brien\\\\app'")


def test_unknown_name_is_not_found(client, fake_api):
    fake_api.graphql(entity_search())
    with pytest.raises(NotFoundError, match="no APM application found with name: ghost"):
        AppResolver(client).resolve_app_id("ghost")


def test_duplicate_name_is_ambiguous(client, fake_api):
    first = str(encode_guid("1", "APM", "APPLICATION", "1"))
    second = str(encode_guid("1", "APM", "APPLICATION", "2"))
    fake_api.graphql(entity_search({"guid": first}, {"guid": second}))

    with pytest.raises(AmbiguityError) as excinfo:
        AppResolver(client).resolve_app_id("checkout")
    assert excinfo.value.candidates == [first, second]
    assert "please use --guid or app ID" in str(excinfo.value)


def test_malformed_search_response_names_missing_key(client, fake_api):
    fake_api.graphql({"actor": {}})
    with pytest.raises(ResponseError) as excinfo:
        AppResolver(client).resolve_app_id("checkout")
    assert excinfo.value.missing == "entitySearch"


def test_quote_nrql_string():
    assert quote_nrql_string("it's") == "it\\'s"
    assert quote_nrql_string("a\\b") == "a\\\\b"
