from usersapi.data.adapter import SQLAlchemyAdapter, normalize_database_url
from usersapi.data.models import User
from usersapi.data.repository import UserRepository
from usersapi.data.retry import RetryPolicy, connect_with_retry
from usersapi.data.schema import ensure_schema, metadata, users_table

__all__ = [
    # Handle
    "SQLAlchemyAdapter",
    "normalize_database_url",
    # Connection establishment
    "RetryPolicy",
    "connect_with_retry",
    # Schema
    "ensure_schema",
    "metadata",
    "users_table",
    # Users
    "User",
    "UserRepository",
]
