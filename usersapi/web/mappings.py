from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class RouteMapping:
    """HTTP method and path attached to a controller method."""

    method: str
    path: str


def _mapping(method: str, path: str) -> Callable:
    def decorator(func: Callable) -> Callable:
        func.__usersapi_route__ = RouteMapping(method=method, path=path)
        return func

    return decorator


def GetMapping(path: str = "") -> Callable:
    return _mapping("GET", path)


def PostMapping(path: str = "") -> Callable:
    return _mapping("POST", path)


def PutMapping(path: str = "") -> Callable:
    return _mapping("PUT", path)


def DeleteMapping(path: str = "") -> Callable:
    return _mapping("DELETE", path)
