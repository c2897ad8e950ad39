from usersapi.web.controllers import RestController
from usersapi.web.mappings import DeleteMapping, GetMapping, PostMapping, PutMapping
from usersapi.web.middleware import CORSHeadersMiddleware, JSONContentTypeMiddleware
from usersapi.web.response import ResponseEntity
from usersapi.web.route_builder import RouteBuilder
from usersapi.web.user_controller import UserController

__all__ = [
    "RestController",
    "GetMapping",
    "PostMapping",
    "PutMapping",
    "DeleteMapping",
    "CORSHeadersMiddleware",
    "JSONContentTypeMiddleware",
    "ResponseEntity",
    "RouteBuilder",
    "UserController",
]
