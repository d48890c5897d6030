"""laravel_router: Laravel-style route groups for Express-type apps."""

from laravel_router.exceptions import (  # noqa: F401
    ConstraintViolation,
    InvalidRoutePattern,
    MissingParameter,
    RouteConfigurationError,
    RouteNotFound,
    RouteReversalError,
    RouterError,
)
from laravel_router.router import (  # noqa: F401
    RouteNode,
    Router,
    create_router,
    is_compatible_host,
)
from laravel_router.routing import RouteEntry, compile_uri, to_express  # noqa: F401
