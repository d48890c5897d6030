"""Route uri compilation and path conversion utilities."""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from re import Pattern
from typing import Any, Dict, Mapping, Optional, Tuple

from laravel_router.exceptions import InvalidRoutePattern
from laravel_router.patterns import (
    backslashes_expr,
    brace_pattern,
    constraint_expr,
    param_pattern,
    separators_expr,
    unparsed_expr,
)
from laravel_router.types import CompiledUri, Constraint


def anchor(pattern: Constraint) -> Pattern:
    """Compile ``pattern`` wrapped in ``^...$``."""
    if isinstance(pattern, re.Pattern):
        source, flags = pattern.pattern, pattern.flags
    else:
        source, flags = str(pattern), 0

    anchored = source
    if not anchored.startswith("^"):
        anchored = f"^{anchored}"
    if not anchored.endswith("$") or anchored.endswith("\\$"):
        anchored = f"{anchored}$"

    if isinstance(pattern, re.Pattern) and anchored == source:
        return pattern

    try:
        return re.compile(anchored, flags)
    except re.error as err:
        raise InvalidRoutePattern(source, str(err)) from err


def anchor_all(patterns: Optional[Mapping[str, Constraint]]) -> Dict[str, Pattern]:
    """Anchor every pattern of a name -> constraint mapping."""
    return {name: anchor(pattern) for name, pattern in (patterns or {}).items()}


def _unanchor(source: str) -> str:
    if source.startswith("^"):
        source = source[1:]
    if source.endswith("$") and not source.endswith("\\$"):
        source = source[:-1]
    return source


def _normalize_separators(uri: str, keep_backslashes: bool = False) -> str:
    if not keep_backslashes:
        uri = uri.replace("\\", "/")
    return separators_expr.sub("/", uri)


def join_uri(*segments: str) -> str:
    """Join uri segments with exactly one ``/`` between them."""
    uri = "/".join(segment for segment in segments if segment)
    uri = separators_expr.sub("/", uri)
    if not uri.startswith("/"):
        uri = f"/{uri}"
    return uri


def compile_uri(uri: str, strict: bool = False) -> CompiledUri:
    """Extract inline constraints and normalize ``uri`` to colon notation.

    ``/users/{id}(\\d+)`` and ``/users/:id(\\d+)`` both compile to
    ``/users/:id`` with ``{"id": re.compile(r"^\\d+$")}``.

    A token followed by an unterminated or nested parenthesis is left
    untouched unless ``strict`` is set, in which case it raises
    ``InvalidRoutePattern``.
    """
    patterns: Dict[str, Pattern] = {}

    def _extract(match: re.Match) -> str:
        token = match["token"]
        name = token.strip(":{}?")
        body = backslashes_expr.sub(lambda _: "\\", match["body"])
        patterns[name] = anchor(body)
        return token

    uri = constraint_expr.sub(_extract, uri)

    malformed = bool(unparsed_expr.search(uri))
    if malformed and strict:
        raise InvalidRoutePattern(uri, "unterminated or nested inline constraint")

    uri = brace_pattern.sub(
        lambda match: f":{match['name']}{match['optional'] or ''}", uri
    )
    uri = _normalize_separators(uri, keep_backslashes=malformed)
    return CompiledUri(uri, patterns, malformed)


def _freeze(patterns: Optional[Mapping[str, Constraint]]) -> Tuple[Tuple[str, str], ...]:
    return tuple(
        sorted(
            (name, _unanchor(anchor(pattern).pattern))
            for name, pattern in (patterns or {}).items()
        )
    )


@lru_cache(maxsize=None)
def _render_express(uri: str, constraints: Tuple[Tuple[str, str], ...]) -> str:
    bodies = dict(constraints)

    def _render(match: re.Match) -> str:
        name = match["name"]
        body = bodies.get(name)
        rendered = f":{name}({body})" if body is not None else f":{name}"
        return rendered + (match["optional"] or "")

    return param_pattern.sub(_render, uri)


def to_express(uri: str, patterns: Optional[Mapping[str, Constraint]] = None) -> str:
    """Render a compiled uri in the path-to-regexp notation of Express."""
    return _render_express(uri, _freeze(patterns))


@dataclass(frozen=True)
class RouteEntry:
    """Route registered on a node, as handed to the host."""

    method: str
    path: str
    handlers: tuple
    uri: str = "/"
    name: Optional[str] = None
    patterns: Dict[str, Pattern] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)
