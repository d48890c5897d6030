"""app: lazy routing with groups and named urls."""

from typing import Any, List

from laravel_router import Router
from laravel_router.routing import RouteEntry
from laravel_router.types import RouteDescription, RouteOptions


def authenticate(request: Any) -> None:
    """Reject anonymous requests."""


def log_request(request: Any) -> None:
    """Log the request."""


class UsersController:
    def index(self, request: Any) -> str:
        return "users"

    def show(self, request: Any) -> str:
        return "user"


def resolve_action(action: Any, description: RouteDescription, options: RouteOptions) -> Any:
    """Turn "Controller@method" strings into bound methods."""
    if isinstance(action, str) and "@" in action:
        controller, method = action.split("@", 1)
        return getattr(CONTROLLERS[controller], method)
    return action


CONTROLLERS = {"UsersController": UsersController()}

router = Router(action_to_handler=resolve_action, debug=True)
table: List[RouteEntry] = []


def api(group):
    group.get({"uri": "/users", "name": "users.index"}, "UsersController@index")
    group.get({"uri": "/users/:id(\\d+)", "name": "users.show"}, "UsersController@show")

    @group.post("/users", middleware=[log_request])
    def create_user(request: Any) -> str:
        return "created"


router.group(
    {"prefix": "/api/{version}", "middleware": [authenticate], "namespace": "api."},
    api,
    patterns={"version": r"v\d+"},
)
router.serve("/static", lambda request: "static file")
router.apply(table.append)

if __name__ == "__main__":
    for route in table:
        print(route.method.upper(), route.path, len(route.handlers))
    print(router.url("api.users.show", {"version": "v1", "id": 7, "expand": ["posts"]}))
