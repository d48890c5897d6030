from dataclasses import dataclass, field
from re import Pattern
from typing import Any, Dict, List, Mapping, Union

Constraint = Union[str, Pattern]


def _as_list(value: Any) -> List:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _merge_options(options: Union[str, Mapping, None], key: str, kwargs: Dict) -> Dict:
    if isinstance(options, str):
        options = {key: options}
    merged = dict(options or {})
    merged.update(kwargs)
    return merged


@dataclass(frozen=True)
class CompiledUri:
    """Normalized uri plus the constraints found inline."""

    uri: str
    patterns: Dict[str, Pattern] = field(default_factory=dict)
    malformed: bool = False


@dataclass(frozen=True)
class NamedRoute:
    uri: str
    patterns: Dict[str, Pattern] = field(default_factory=dict)


@dataclass(frozen=True)
class RouteDescription:
    """What the action mapper is told about the route it resolves."""

    uri: str
    middleware: tuple
    name: str
    patterns: Dict[str, Pattern]
    meta: Dict[str, Any]


@dataclass(frozen=True)
class GroupOptions:
    prefix: str = "/"
    middleware: List = field(default_factory=list)
    namespace: str = ""
    patterns: Dict[str, Constraint] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, options: Union[str, Mapping, None] = None, **kwargs) -> "GroupOptions":
        """Build group options from a prefix string or a mapping."""
        merged = _merge_options(options, "prefix", kwargs)
        prefix = merged.pop("prefix", "/")
        middleware = _as_list(merged.pop("middleware", None))
        namespace = merged.pop("namespace", "") or ""
        patterns = dict(merged.pop("patterns", None) or {})
        meta = dict(merged.pop("meta", None) or {})

        if merged:
            raise TypeError(
                f"group() got unexpected keyword "
                f"arguments: {', '.join(list(merged))}"
            )

        return cls(prefix, middleware, namespace, patterns, meta)


@dataclass(frozen=True)
class RouteOptions:
    """Route options merged with defaults.

    Keys the router does not know about are kept in ``extra`` and handed
    over untouched to the action mapper.
    """

    method: str = "get"
    uri: str = "/"
    middleware: List = field(default_factory=list)
    name: str = ""
    patterns: Dict[str, Constraint] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, options: Union[str, Mapping, None] = None, **kwargs) -> "RouteOptions":
        """Build route options from a uri string or a mapping."""
        merged = _merge_options(options, "uri", kwargs)
        method = str(merged.pop("method", "get") or "get").lower()
        uri = merged.pop("uri", "/")
        middleware = _as_list(merged.pop("middleware", None))
        name = merged.pop("name", "") or ""
        patterns = dict(merged.pop("patterns", None) or {})
        meta = dict(merged.pop("meta", None) or {})
        return cls(method, uri, middleware, name, patterns, meta, merged)
