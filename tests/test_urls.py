"""Test url building functionality."""

from unittest.mock import Mock

import pytest

from laravel_router.exceptions import (
    ConstraintViolation,
    MissingParameter,
    RouteNotFound,
    RouteReversalError,
)
from laravel_router.routing import anchor
from laravel_router.urls import NamedRoutes, build_url, serialize_query


def test_build_url_optional_param():
    """Optional placeholder is elided along with its slash."""
    assert build_url("/users/:id?") == "/users"
    assert build_url("/users/:id?", {"id": None}) == "/users"
    assert build_url("/users/:id?", {"id": "5"}) == "/users/5"
    assert build_url("/users/:id?/edit", {}) == "/users/edit"
    assert build_url("/:lang?", {}) == "/"


def test_build_url_required_param():
    """Required placeholder must have a value."""
    assert build_url("/users/:id", {"id": 5}) == "/users/5"

    with pytest.raises(MissingParameter) as err:
        build_url("/users/:id", {})
    assert err.value.name == "id"

    with pytest.raises(MissingParameter):
        build_url("/users/:id", {"id": None})

    with pytest.raises(MissingParameter) as err:
        build_url("/users/:id", {"id": ""})
    assert err.value.name == "id"


def test_build_url_empty_optional_param():
    """Empty strings elide optional placeholders."""
    assert build_url("/users/:id?", {"id": ""}) == "/users"
    assert build_url("/users/:id?/edit", {"id": ""}) == "/users/edit"


def test_build_url_constraint():
    """Values are checked against their constraint."""
    patterns = {"id": anchor(r"\d+")}
    assert build_url("/users/:id?", {"id": "5"}, patterns) == "/users/5"

    with pytest.raises(ConstraintViolation) as err:
        build_url("/users/:id?", {"id": "abc"}, patterns)
    assert err.value.name == "id"
    assert err.value.pattern == r"^\d+$"
    assert err.value.value == "abc"
    assert isinstance(err.value, RouteReversalError)


def test_build_url_encoding():
    """Path values are percent-encoded unless told otherwise."""
    assert build_url("/search/:q", {"q": "a b/c"}) == "/search/a%20b%2Fc"
    assert build_url("/search/:q", {"q": "a b"}, options={"encode": False}) == "/search/a b"


def test_build_url_query():
    """Unused params end up in the query string."""
    assert build_url("/users/:id", {"id": 5, "page": 2}) == "/users/5?page=2"
    assert build_url("/users", {"active": True}) == "/users?active=true"
    assert (
        build_url("/users", {"ids": [1, 2]}, options={"array_format": "repeat"})
        == "/users?ids=1&ids=2"
    )


def test_build_url_custom_serializer():
    """Query serialization can be delegated."""
    serializer = Mock(return_value="x=1")
    options = {"serializer": serializer}
    assert build_url("/users/:id", {"id": 1, "page": 2}, options=options) == "/users/1?x=1"
    serializer.assert_called_once_with({"page": 2}, options)

    assert build_url("/users", {"page": 2}, options={"serializer": lambda *_: ""}) == "/users"


def test_serialize_query_array_formats():
    """Lists are encoded as requested."""
    params = {"ids": [1, 2]}
    assert serialize_query(params) == "ids%5B0%5D=1&ids%5B1%5D=2"
    assert serialize_query(params, {"encode": False}) == "ids[0]=1&ids[1]=2"
    assert (
        serialize_query(params, {"encode": False, "array_format": "brackets"})
        == "ids[]=1&ids[]=2"
    )
    assert serialize_query(params, {"array_format": "repeat"}) == "ids=1&ids=2"
    assert serialize_query(params, {"array_format": "comma"}) == "ids=1%2C2"
    assert serialize_query({"ids": []}) == ""

    with pytest.raises(ValueError):
        serialize_query(params, {"array_format": "json"})


def test_serialize_query_nested():
    """Mappings are nested with brackets or dots."""
    params = {"filter": {"name": "bob", "tags": ["a"]}}
    assert (
        serialize_query(params, {"encode": False})
        == "filter[name]=bob&filter[tags][0]=a"
    )
    assert (
        serialize_query(params, {"encode": False, "allow_dots": True})
        == "filter.name=bob&filter.tags[0]=a"
    )


def test_serialize_query_scalars():
    """None and booleans are serialized like qs does."""
    assert serialize_query({"a": None, "b": False, "c": "x y"}) == "a=&b=false&c=x%20y"


def test_named_routes():
    """Registry stores, overwrites and builds named routes."""
    registry = NamedRoutes()
    registry.add("users.show", "/users/:id", {"id": anchor(r"\d+")})
    assert "users.show" in registry
    assert len(registry) == 1
    assert list(registry) == ["users.show"]
    assert registry.url("users.show", {"id": 3}) == "/users/3"

    registry.add("users.show", "/people/:id")
    assert len(registry) == 1
    assert registry.get("users.show").uri == "/people/:id"
    assert registry.url("users.show", {"id": "abc"}) == "/people/abc"


def test_named_routes_not_found():
    """Unknown names raise RouteNotFound."""
    registry = NamedRoutes()

    with pytest.raises(RouteNotFound) as err:
        registry.url("missing-name", {})
    assert err.value.name == "missing-name"

    with pytest.raises(LookupError):
        registry.get("missing-name")
