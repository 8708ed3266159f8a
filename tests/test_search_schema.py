import pytest

from search_proxy.core.exceptions import ValidationException
from search_proxy.domain.schemas.search import (
    FullSearchQuery,
    SimpleSearchQuery,
    openapi_parameters,
    parse_query,
)


def issue_paths(exc_info) -> set:
    return {issue["path"] for issue in exc_info.value.issues}


def test_valid_query_is_coerced_from_strings():
    query = parse_query(FullSearchQuery, {"query": "laptop", "numItems": "2", "start": "5"})

    assert query.query == "laptop"
    assert query.numItems == 2
    assert query.start == 5


def test_query_params_follow_declaration_order_and_wire_names():
    raw = {
        "facet.range": "price:[100 TO 200]",
        "start": "3",
        "query": "tv",
        "order": "desc",
        "facet.filter": "brand:Sony",
        "sort": "price",
        "numItems": "10",
        "responseGroup": "full",
        "facet": "on",
    }

    params = parse_query(FullSearchQuery, raw).to_query_params()

    assert list(params.items()) == [
        ("query", "tv"),
        ("sort", "price"),
        ("order", "desc"),
        ("numItems", 10),
        ("start", 3),
        ("responseGroup", "full"),
        ("facet", "on"),
        ("facet.filter", "brand:Sony"),
        ("facet.range", "price:[100 TO 200]"),
    ]


def test_unset_fields_and_unknown_parameters_are_not_forwarded():
    params = parse_query(FullSearchQuery, {"query": "tv", "apiKey": "x", "numItems": ""}).to_query_params()

    assert params == {"query": "tv"}


@pytest.mark.parametrize(
    "raw, path",
    [
        ({"query": "laptop", "numItems": "26"}, "numItems"),
        ({"query": "laptop", "numItems": "0"}, "numItems"),
        ({"query": "laptop", "numItems": "two"}, "numItems"),
        ({"query": "laptop", "start": "-1"}, "start"),
        ({"query": "laptop", "start": "0"}, "start"),
        ({"query": "laptop", "order": "sideways"}, "order"),
        ({"numItems": "5"}, "query"),
    ],
)
def test_constraint_violations_are_reported_per_field(raw, path):
    with pytest.raises(ValidationException) as exc_info:
        parse_query(FullSearchQuery, raw)

    assert issue_paths(exc_info) == {path}
    assert exc_info.value.status_code == 400


def test_empty_query_cites_non_empty_constraint():
    with pytest.raises(ValidationException) as exc_info:
        parse_query(FullSearchQuery, {"query": ""})

    [issue] = exc_info.value.issues
    assert issue["path"] == "query"
    assert "at least 1 character" in issue["message"]


def test_every_violation_is_collected():
    with pytest.raises(ValidationException) as exc_info:
        parse_query(FullSearchQuery, {"numItems": "99", "start": "-4", "order": "up"})

    assert issue_paths(exc_info) == {"query", "numItems", "start", "order"}


def test_simple_query_defaults():
    query = parse_query(SimpleSearchQuery, {"product": "headphones"})

    assert query.numItems == 24
    assert query.start == 1
    assert query.to_full_query().to_query_params() == {"query": "headphones", "numItems": 24, "start": 1}


def test_simple_query_shares_paging_bounds():
    with pytest.raises(ValidationException) as exc_info:
        parse_query(SimpleSearchQuery, {"product": "headphones", "numItems": "30"})

    assert issue_paths(exc_info) == {"numItems"}


def test_openapi_parameters_mirror_the_model():
    parameters = {p["name"]: p for p in openapi_parameters(FullSearchQuery)}

    assert list(parameters) == [
        "query", "sort", "order", "numItems", "start",
        "responseGroup", "facet", "facet.filter", "facet.range",
    ]
    assert parameters["query"]["required"] is True
    assert parameters["numItems"]["required"] is False
    assert parameters["numItems"]["schema"]["minimum"] == 1
    assert parameters["numItems"]["schema"]["maximum"] == 25
    assert parameters["order"]["schema"]["enum"] == ["asc", "desc"]
    assert all(p["in"] == "query" for p in parameters.values())
