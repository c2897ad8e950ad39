from usersapi.core.application import main, run
from usersapi.core.server import UsersASGIApp
from usersapi.data import User, UserRepository
from usersapi.exceptions import (
    ConfigurationException,
    DatabaseConnectionException,
    RequestValidationException,
    SchemaInitializationException,
    UsersApiException,
)

__all__ = [
    "run",
    "main",
    "UsersASGIApp",
    "User",
    "UserRepository",
    "UsersApiException",
    "ConfigurationException",
    "DatabaseConnectionException",
    "SchemaInitializationException",
    "RequestValidationException",
]
