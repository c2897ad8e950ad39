from sqlalchemy import Column, Integer, MetaData, Table, Text
from sqlalchemy.exc import SQLAlchemyError

from usersapi.core.logging import get_logger
from usersapi.exceptions import SchemaInitializationException

logger = get_logger("data.schema")

metadata = MetaData()

users_table = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("email", Text, nullable=False, unique=True),
)


async def ensure_schema(adapter):
    """Create the users table if it does not exist yet."""
    try:
        async with adapter.begin() as conn:
            await conn.run_sync(metadata.create_all, checkfirst=True)
    except SQLAlchemyError as e:
        raise SchemaInitializationException(f"Error creating users table: {e}") from e

    logger.info("Users table ready")
