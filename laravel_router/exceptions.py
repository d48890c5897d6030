"""Routing exceptions."""

from typing import Optional


class RouterError(Exception):
    """Base class for all routing errors."""


class RouteConfigurationError(RouterError, ValueError):
    """Route or group definition cannot be registered."""


class InvalidRoutePattern(RouteConfigurationError):
    """Inline constraint is malformed or not a valid regular expression."""

    def __init__(self, pattern: str, reason: str) -> None:
        """Initialize error."""
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid route pattern {pattern!r}: {reason}")


class RouteReversalError(RouterError, LookupError):
    """URL cannot be built for a named route."""


class RouteNotFound(RouteReversalError):
    """No route registered under the requested name."""

    def __init__(self, name: str) -> None:
        """Initialize error."""
        self.name = name
        super().__init__(f'No URL found for "{name}"')


class MissingParameter(RouteReversalError):
    """Required placeholder has no value."""

    def __init__(self, name: str, uri: Optional[str] = None) -> None:
        """Initialize error."""
        self.name = name
        self.uri = uri
        message = f'Missing required parameter "{name}"'
        if uri:
            message += f" for {uri!r}"
        super().__init__(message)


class ConstraintViolation(RouteReversalError):
    """Placeholder value does not satisfy its registered pattern."""

    def __init__(self, name: str, pattern: str, value: str) -> None:
        """Initialize error."""
        self.name = name
        self.pattern = pattern
        self.value = value
        super().__init__(
            f'Parameter "{name}" with value {value!r} does not match {pattern!r}'
        )
