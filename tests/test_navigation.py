import pytest

from newrelic_cli.exceptions import ResponseError
from newrelic_cli.navigation import (
    ShapeError,
    as_bool,
    as_int,
    as_list,
    as_object,
    as_string,
    expect_list,
    expect_path,
    first_error_message,
    lookup_object,
    objects_in,
)


@pytest.mark.parametrize("node", [None, "text", 42, 1.5, True, ["a"]])
def test_as_object_rejects_non_objects(node):
    assert as_object(node) == ({}, False)


@pytest.mark.parametrize("node", [None, "text", 42, True, {"a": 1}])
def test_as_list_rejects_non_lists(node):
    assert as_list(node) == ([], False)


def test_scalar_accessors_degrade_to_zero_values():
    assert as_string(12) == ""
    assert as_string(None) == ""
    assert as_string("ok") == "ok"
    assert as_int("12") == 0
    assert as_int(True) == 0
    assert as_int(12.9) == 12
    assert as_bool("true") is False
    assert as_bool(True) is True


def test_expect_path_names_first_missing_key():
    with pytest.raises(ResponseError) as excinfo:
        expect_path({"data": {}}, "actor", "account")
    assert excinfo.value.missing == "actor"
    assert str(excinfo.value) == "unexpected response format: missing actor"


def test_expect_path_fails_on_wrong_type():
    with pytest.raises(ResponseError) as excinfo:
        expect_path({"actor": {"account": []}}, "actor", "account")
    assert excinfo.value.missing == "account"


def test_expect_list_accepts_empty_list():
    assert expect_list({"entities": []}, "entities") == []


def test_lookup_object_returns_error_value():
    result = lookup_object({}, "actor")
    assert isinstance(result, ShapeError)
    assert result.missing == "actor"


def test_objects_in_drops_malformed_elements():
    items = [{"id": 1}, None, "junk", {"id": 2}, 3]
    assert list(objects_in(items)) == [{"id": 1}, {"id": 2}]


def test_first_error_message():
    assert first_error_message({}) is None
    assert first_error_message({"errors": []}) is None
    assert first_error_message({"errors": [{"message": "first"}, {"message": "second"}]}) == "first"
    assert first_error_message({"errors": [{"description": "described"}]}) == "described"
