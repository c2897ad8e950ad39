from typing import Union

from starlette.requests import Request

from usersapi.data.models import User
from usersapi.exceptions import RequestValidationException
from usersapi.web.controllers import RestController
from usersapi.web.mappings import DeleteMapping, GetMapping, PostMapping, PutMapping
from usersapi.web.response import ResponseEntity

INVALID_DATA = "Datos inválidos"
FIELDS_REQUIRED = "Nombre y email son requeridos"
USER_NOT_FOUND = "Usuario no encontrado"
USER_DELETED = "Usuario eliminado"


def _path_id(request: Request) -> Union[int, str]:
    """
    The {id} path segment, as an int when it is numeric.

    Anything else is handed to the store unchanged, which decides how to
    answer it.
    """
    raw = request.path_params["id"]
    try:
        return int(raw)
    except ValueError:
        return raw


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


async def _read_user_body(request: Request) -> User:
    """
    Decode a {"id", "name", "email"} body.

    Absent or null fields decode as zero values (0 and ""); anything that is
    not a JSON object with an integer id and string name/email is rejected.
    """
    try:
        payload = await request.json()
    except (ValueError, UnicodeDecodeError):
        raise RequestValidationException(INVALID_DATA) from None

    if not isinstance(payload, dict):
        raise RequestValidationException(INVALID_DATA)

    user_id = payload.get("id")
    name = payload.get("name")
    email = payload.get("email")
    user_id = 0 if user_id is None else user_id
    name = "" if name is None else name
    email = "" if email is None else email
    if not _is_int(user_id) or not isinstance(name, str) or not isinstance(email, str):
        raise RequestValidationException(INVALID_DATA)

    return User(id=user_id, name=name, email=email)


@RestController("/users")
class UserController:
    """
    CRUD endpoints for users.

    Each handler makes a single call to the repository. Update and delete do
    not check that the id exists and answer 200 either way; update echoes the
    submitted body.
    """

    def __init__(self, user_repository):
        self.user_repository = user_repository

    @GetMapping("")
    async def list_users(self, request: Request):
        users = await self.user_repository.find_all()
        return ResponseEntity.ok(users)

    @GetMapping("/{id}")
    async def get_user(self, request: Request):
        user = await self.user_repository.find_by_id(_path_id(request))
        if user is None:
            return ResponseEntity.not_found({"error": USER_NOT_FOUND})
        return ResponseEntity.ok(user)

    @PostMapping("")
    async def create_user(self, request: Request):
        submitted = await _read_user_body(request)
        if not submitted.name or not submitted.email:
            raise RequestValidationException(FIELDS_REQUIRED)

        user = await self.user_repository.create(submitted.name, submitted.email)
        return ResponseEntity.created(user)

    @PutMapping("/{id}")
    async def update_user(self, request: Request):
        user_id = _path_id(request)
        submitted = await _read_user_body(request)

        await self.user_repository.update(user_id, submitted.name, submitted.email)
        return ResponseEntity.ok(submitted)

    @DeleteMapping("/{id}")
    async def delete_user(self, request: Request):
        await self.user_repository.delete(_path_id(request))
        return ResponseEntity.ok({"message": USER_DELETED})
