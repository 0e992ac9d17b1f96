import pytest

from apiline.errors import ExtractionError
from apiline.workflows import extract_value


def test_extracts_top_level_string():
    assert extract_value({"token": "abc"}, "$.token") == "abc"


@pytest.mark.parametrize(
    "response, path",
    [
        ({"other": 1}, "$.token"),
        ({"token": "abc"}, "token"),
        ({"token": "abc"}, ".token"),
        ([{"token": "abc"}], "$.token"),
        ({"a": {"b": "c"}}, "$.a.b"),
    ],
)
def test_missing_or_unsupported_paths_yield_none(response, path):
    assert extract_value(response, path) is None


@pytest.mark.parametrize(
    "value, expected",
    [
        (42, "42"),
        (1.5, "1.5"),
        (True, "true"),
        (None, "null"),
        ({"id": 1, "tags": ["x"]}, '{"id":1,"tags":["x"]}'),
        (["a", "b"], '["a","b"]'),
    ],
)
def test_non_string_values_are_stringified(value, expected):
    assert extract_value({"field": value}, "$.field") == expected


def test_empty_field_name_is_an_error():
    with pytest.raises(ExtractionError):
        extract_value({"": "x"}, "$.")
