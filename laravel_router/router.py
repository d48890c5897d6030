"""Group-aware router producing Express-style routes.

Freely adapted from https://github.com/simplymichael/node-laravel-router

"""

import logging
import sys
from re import Pattern
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

from laravel_router.exceptions import RouteConfigurationError
from laravel_router.routing import (
    RouteEntry,
    anchor_all,
    compile_uri,
    join_uri,
    to_express,
)
from laravel_router.types import (
    CompiledUri,
    GroupOptions,
    RouteDescription,
    RouteOptions,
    _as_list,
)
from laravel_router.urls import NamedRoutes

ActionMapper = Callable[[Any, RouteDescription, RouteOptions], Any]
Options = Union[str, Mapping, None]


def is_compatible_host(host: Any) -> bool:
    """Determine if ``host`` is an Express-type app."""
    return (
        host is not None
        and callable(getattr(host, "listen", None))
        and callable(getattr(host, "use", None))
    )


def _identity(action: Any, description: RouteDescription, options: RouteOptions) -> Any:
    return action


class RouteNode:
    """A node of the route tree.

    Holds the settings accumulated from every enclosing group along with
    the routes and subgroups registered directly on it.
    """

    def __init__(
        self,
        registry: NamedRoutes,
        action_to_handler: ActionMapper,
        log: logging.Logger,
        host: Any = None,
        strict: bool = False,
        uris: Optional[List[str]] = None,
        middleware: Optional[List] = None,
        names: Optional[List[str]] = None,
        patterns: Optional[Dict[str, Pattern]] = None,
        meta: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Initialize route node."""
        self.registry = registry
        self.action_to_handler = action_to_handler
        self.log = log
        self.host = host
        self.strict = strict
        self.uris: List[str] = uris or []
        self.middleware: List = middleware or []
        self.names: List[str] = names or []
        self.patterns: Dict[str, Pattern] = patterns or {}
        self.meta: Dict[str, Any] = meta or {}
        self.routes: List[RouteEntry] = []
        self.groups: List["RouteNode"] = []

    @property
    def lazy(self) -> bool:
        """Routes wait for apply() instead of going straight to the host."""
        return self.host is None

    def new_child(self, **settings) -> "RouteNode":
        """Create a node sharing this node's registry, mapper and host."""
        return RouteNode(
            self.registry,
            self.action_to_handler,
            self.log,
            host=self.host,
            strict=self.strict,
            **settings,
        )

    def _compile(self, uri: str) -> CompiledUri:
        compiled = compile_uri(uri, strict=self.strict)
        if compiled.malformed:
            self.log.warning(f"Unparsed inline constraint left in {uri!r}")
        return compiled

    def _register(self, method: str, entry: RouteEntry) -> None:
        register = getattr(self.host, method, None)
        if not callable(register):
            raise RouteConfigurationError(
                f"Host has no '{method}' function to register {entry.path!r}"
            )
        register(entry.path, list(entry.handlers))
        self.log.debug(f"Registered {method.upper()} {entry.path}")

    def group(self, options: Options = None, builder: Optional[Callable] = None, **kwargs) -> "RouteNode":
        """Create a subgroup and hand it to ``builder``."""
        group_options = GroupOptions.create(options, **kwargs)
        compiled = self._compile(group_options.prefix)

        child = self.new_child(
            uris=self.uris + [compiled.uri],
            middleware=self.middleware + group_options.middleware,
            names=self.names + [group_options.namespace],
            patterns={
                **self.patterns,
                **compiled.patterns,
                **anchor_all(group_options.patterns),
            },
            meta={**self.meta, **group_options.meta},
        )
        self.groups.append(child)
        self.log.debug(f"Created group {join_uri(*child.uris)}")

        if builder is not None:
            builder(child)
        return child

    def route(self, options: Options = None, action: Any = None, **kwargs) -> Any:
        """Register route.

        Without ``action`` a decorator is returned which registers the
        decorated function as the action.
        """
        if action is None:

            def _register_view(endpoint):
                self.route(options, endpoint, **kwargs)
                return endpoint

            return _register_view

        route_options = RouteOptions.create(options, **kwargs)
        method = route_options.method

        compiled = self._compile(join_uri(*self.uris, route_options.uri))
        node_patterns = {**self.patterns, **compiled.patterns}

        uri = compiled.uri
        middleware = self.middleware + route_options.middleware
        name = "".join(self.names) + route_options.name
        patterns = {**node_patterns, **anchor_all(route_options.patterns)}
        meta = {**self.meta, **route_options.meta}

        description = RouteDescription(uri, tuple(middleware), name, patterns, meta)
        handler = self.action_to_handler(action, description, route_options)
        handlers = tuple(middleware + _as_list(handler))

        entry = RouteEntry(
            method,
            to_express(uri, patterns),
            handlers,
            uri,
            name if route_options.name else None,
            patterns,
            meta,
        )
        if not self.lazy:
            self._register(method, entry)

        # the node and the registry only change once the host accepted the route
        self.patterns = node_patterns
        if route_options.name:
            self.registry.add(name, uri, patterns)

        self.routes.append(entry)
        return entry

    def verb(self, method: str, options: Options = None, action: Any = None, **kwargs) -> Any:
        """Register route for any HTTP verb."""
        kwargs["method"] = method
        return self.route(options, action, **kwargs)

    def get(self, options: Options = None, action: Any = None, **kwargs) -> Any:
        """Register GET route."""
        return self.verb("get", options, action, **kwargs)

    def post(self, options: Options = None, action: Any = None, **kwargs) -> Any:
        """Register POST route."""
        return self.verb("post", options, action, **kwargs)

    def put(self, options: Options = None, action: Any = None, **kwargs) -> Any:
        """Register PUT route."""
        return self.verb("put", options, action, **kwargs)

    def patch(self, options: Options = None, action: Any = None, **kwargs) -> Any:
        """Register PATCH route."""
        return self.verb("patch", options, action, **kwargs)

    def delete(self, options: Options = None, action: Any = None, **kwargs) -> Any:
        """Register DELETE route."""
        return self.verb("delete", options, action, **kwargs)

    def options(self, options: Options = None, action: Any = None, **kwargs) -> Any:
        """Register OPTIONS route."""
        return self.verb("options", options, action, **kwargs)

    def head(self, options: Options = None, action: Any = None, **kwargs) -> Any:
        """Register HEAD route."""
        return self.verb("head", options, action, **kwargs)

    def all(self, options: Options = None, action: Any = None, **kwargs) -> Any:
        """Register route matching every method."""
        return self.verb("all", options, action, **kwargs)

    def serve(self, uri: str, static: Any) -> RouteEntry:
        """Mount ``static`` (middleware or handler stack) under ``uri``."""
        compiled = self._compile(join_uri(*self.uris, uri))
        patterns = {**self.patterns, **compiled.patterns}
        handlers = tuple(self.middleware + _as_list(static))

        entry = RouteEntry(
            "get",
            to_express(compiled.uri, patterns),
            handlers,
            compiled.uri,
            None,
            patterns,
            dict(self.meta),
        )
        if not self.lazy:
            self._register("use", entry)

        self.routes.append(entry)
        return entry

    def apply(self, routing_fn: Callable[[RouteEntry], Any]) -> None:
        """Hand every route of this subtree to ``routing_fn``.

        Does nothing when a host was given, since routes were registered
        as they were defined. Meant to be called once: calling it again
        hands every route over again.
        """
        if not self.lazy:
            self.log.debug("Routes already registered with host, nothing to apply")
            return

        for entry in self.routes:
            routing_fn(entry)
            self.log.debug(f"Applied {entry.method.upper()} {entry.path}")

        for group in self.groups:
            group.apply(routing_fn)

    def iter_routes(self) -> Iterator[RouteEntry]:
        """Iterate over every route of this subtree, depth first."""
        yield from self.routes
        for group in self.groups:
            yield from group.iter_routes()

    def url(
        self,
        name: str,
        params: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Build url of a named route."""
        return self.registry.url(name, params, options)


class Router(RouteNode):
    """Router."""

    FORMAT_STRING = "[%(name)s] - [%(levelname)s] - %(message)s"

    def __init__(
        self,
        host: Any = None,
        action_to_handler: Optional[ActionMapper] = None,
        name: str = "laravel_router",
        debug: bool = False,
        configure_logs: bool = True,
        strict: bool = False,
    ) -> None:
        """Initialize Router object."""
        self.name: str = name
        self.debug: bool = debug
        log = logging.getLogger(self.name)
        super().__init__(NamedRoutes(), action_to_handler or _identity, log, strict=strict)
        if configure_logs:
            self._configure_logging()

        if host is not None and not is_compatible_host(host):
            self.log.warning(
                f"{type(host).__name__} is not an Express-type app, routing is lazy"
            )
            host = None
        self.host = host

    def _configure_logging(self) -> None:
        if self._already_configured(self.log):
            return

        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(self.FORMAT_STRING)
        handler.setFormatter(formatter)
        self.log.propagate = False
        if self.debug:
            level = logging.DEBUG
        else:
            level = logging.ERROR
        self.log.setLevel(level)
        self.log.addHandler(handler)

    def _already_configured(self, log) -> bool:
        if not log.handlers:
            return False

        for handler in log.handlers:
            if isinstance(handler, logging.StreamHandler):
                if handler.stream == sys.stdout:
                    return True

        return False


def create_router(*args, **kwargs) -> Router:
    """Create router from an optional host and/or action mapper.

    One argument is taken as the host when it is an Express-type app,
    otherwise as the action mapper when callable. Two arguments are
    ``(host, action_to_handler)``.
    """
    if len(args) == 1:
        arg = args[0]
        if is_compatible_host(arg):
            kwargs["host"] = arg
        elif callable(arg):
            kwargs["action_to_handler"] = arg
    elif len(args) > 1:
        kwargs["host"], kwargs["action_to_handler"] = args[:2]

    return Router(**kwargs)
