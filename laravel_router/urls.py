"""Named routes and url building."""

from re import Pattern
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple
from urllib.parse import quote

from laravel_router.exceptions import ConstraintViolation, MissingParameter, RouteNotFound
from laravel_router.patterns import placeholder_pattern
from laravel_router.types import NamedRoute

ARRAY_FORMATS = ("indices", "brackets", "repeat", "comma")

QuerySerializer = Callable[[Dict[str, Any], Dict[str, Any]], str]


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def _flatten(
    key: str, value: Any, array_format: str, allow_dots: bool
) -> Iterator[Tuple[str, str]]:
    if isinstance(value, Mapping):
        for child, item in value.items():
            child_key = f"{key}.{child}" if allow_dots else f"{key}[{child}]"
            yield from _flatten(child_key, item, array_format, allow_dots)
    elif isinstance(value, (list, tuple)):
        if array_format == "comma":
            if value:
                yield key, ",".join(_stringify(item) for item in value)
            return
        for index, item in enumerate(value):
            if array_format == "indices":
                child_key = f"{key}[{index}]"
            elif array_format == "brackets":
                child_key = f"{key}[]"
            else:
                child_key = key
            yield from _flatten(child_key, item, array_format, allow_dots)
    else:
        yield key, _stringify(value)


def serialize_query(params: Mapping[str, Any], options: Optional[Mapping[str, Any]] = None) -> str:
    """Serialize params to a query string (without the leading ``?``).

    Options:
        serializer: callable ``(params, options) -> str`` used instead
        array_format: ``indices`` (default), ``brackets``, ``repeat`` or ``comma``
        allow_dots: nest mappings as ``a.b=c`` instead of ``a[b]=c``
        encode: percent-encode keys and values (default True)
    """
    options = dict(options or {})
    serializer: Optional[QuerySerializer] = options.get("serializer")
    if serializer is not None:
        return serializer(dict(params), options)

    array_format = options.get("array_format", "indices")
    if array_format not in ARRAY_FORMATS:
        raise ValueError(f"'{array_format}' is not a supported array format")
    allow_dots = bool(options.get("allow_dots", False))
    encode = options.get("encode", True)

    pairs: List[Tuple[str, str]] = []
    for key, value in params.items():
        pairs.extend(_flatten(str(key), value, array_format, allow_dots))

    if encode:
        pairs = [(quote(key, safe=""), quote(value, safe="")) for key, value in pairs]
    return "&".join(f"{key}={value}" for key, value in pairs)


def build_url(
    uri: str,
    params: Optional[Mapping[str, Any]] = None,
    patterns: Optional[Mapping[str, Pattern]] = None,
    options: Optional[Mapping[str, Any]] = None,
) -> str:
    """Substitute ``params`` into a compiled uri.

    A placeholder is without a value when its param is missing, ``None``
    or ``""``. Optional placeholders without a value are dropped along with
    the ``/`` in front of them. Params no placeholder consumed end up in
    the query string.
    """
    remaining = dict(params or {})
    patterns = patterns or {}
    options = options or {}
    encode = options.get("encode", True)

    parts: List[str] = []
    last = 0
    for match in placeholder_pattern.finditer(uri):
        parts.append(uri[last : match.start()])
        last = match.end()

        name = match["name"]
        value = remaining.pop(name, None)
        if value is None or value == "":
            if match["optional"]:
                continue
            raise MissingParameter(name, uri)

        value = _stringify(value)
        pattern = patterns.get(name)
        if pattern is not None and not pattern.fullmatch(value):
            raise ConstraintViolation(name, pattern.pattern, value)

        parts.append((match["sep"] or "") + (quote(value, safe="") if encode else value))
    parts.append(uri[last:])

    url = "".join(parts) or "/"
    query = serialize_query(remaining, options) if remaining else ""
    if query:
        url = f"{url}?{query}"
    return url


class NamedRoutes:
    """Name -> route registry shared by every node of a router."""

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._routes: Dict[str, NamedRoute] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._routes

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._routes)

    def add(self, name: str, uri: str, patterns: Optional[Mapping[str, Pattern]] = None) -> NamedRoute:
        """Register ``name``; an existing route with that name is replaced."""
        route = NamedRoute(uri, dict(patterns or {}))
        self._routes[name] = route
        return route

    def get(self, name: str) -> NamedRoute:
        """Return the route registered as ``name``."""
        try:
            return self._routes[name]
        except KeyError:
            raise RouteNotFound(name) from None

    def url(
        self,
        name: str,
        params: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Build the url of the route registered as ``name``."""
        route = self.get(name)
        return build_url(route.uri, params, route.patterns, options)
