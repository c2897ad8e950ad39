import inspect
from typing import Any, Callable, List

from sqlalchemy.exc import DBAPIError
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from usersapi.core.logging import get_logger
from usersapi.exceptions import RequestValidationException
from usersapi.web.response import ResponseEntity
from usersapi.web.serialization import serialize_json_safe

logger = get_logger("web.routes")


def store_error_message(error: Exception) -> str:
    """Message of the underlying driver error, without SQLAlchemy's decoration."""
    if isinstance(error, DBAPIError) and error.orig is not None:
        return str(error.orig)
    return str(error)


class RouteBuilder:
    """Builds Starlette routes from controller instances."""

    def __init__(self, controllers: List[Any], ignore_trailing_slash: bool = True):
        self.controllers = controllers
        self.ignore_trailing_slash = ignore_trailing_slash

    def build_routes(self) -> List[Route]:
        routes = []

        for controller in self.controllers:
            base_path = getattr(controller, "__usersapi_base_path__", "")

            for name, method in inspect.getmembers(
                controller, predicate=inspect.ismethod
            ):
                if not hasattr(method, "__usersapi_route__"):
                    continue

                route_meta = method.__usersapi_route__
                full_path = self._combine_paths(base_path, route_meta.path)
                endpoint = self._create_endpoint(method)

                routes.append(
                    Route(path=full_path, endpoint=endpoint, methods=[route_meta.method])
                )

                # Register /path/ as well when trailing slashes are ignored
                if (
                    self.ignore_trailing_slash
                    and len(full_path) > 1
                    and not full_path.endswith("/")
                ):
                    routes.append(
                        Route(
                            path=full_path + "/",
                            endpoint=endpoint,
                            methods=[route_meta.method],
                        )
                    )

        # Specific paths before parameterized paths
        routes.sort(key=self._route_priority)

        return routes

    def _create_endpoint(self, handler: Callable):
        """
        Wrap a controller method as a Starlette endpoint.

        Validation errors become 400 responses. Any other exception, store
        errors included, becomes a 500 carrying the raw error message.
        """

        async def endpoint(request: Request):
            try:
                result = await handler(request)
            except RequestValidationException as e:
                return self._to_response(ResponseEntity.bad_request({"error": str(e)}))
            except Exception as e:
                logger.error(
                    f"{request.method} {request.url.path} failed: "
                    f"{type(e).__name__}: {e}"
                )
                return self._to_response(
                    ResponseEntity.internal_server_error(
                        {"error": store_error_message(e)}
                    )
                )

            if isinstance(result, Response):
                return result
            if not isinstance(result, ResponseEntity):
                result = ResponseEntity.ok(result)
            return self._to_response(result)

        endpoint.__name__ = handler.__name__
        return endpoint

    @staticmethod
    def _to_response(entity: ResponseEntity) -> Response:
        content = b"" if entity.body is None else serialize_json_safe(entity.body)
        return Response(
            content=content, status_code=entity.status, media_type="application/json"
        )

    def _combine_paths(self, base: str, route: str) -> str:
        """Combine base path and route path."""
        base = base.rstrip("/")
        route = route.rstrip("/")

        if not route:
            return base or "/"

        if not base:
            return route or "/"

        return f"{base}{route}"

    def _route_priority(self, route: Route):
        """Specific paths sort before parameterized paths."""
        path = route.path
        segments = [s for s in path.split("/") if s]
        param_count = sum(1 for s in segments if s.startswith("{"))
        return (param_count, -len(segments), path)
