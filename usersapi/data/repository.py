from typing import List, Optional

from sqlalchemy import delete, insert, select, update

from usersapi.data.models import User
from usersapi.data.schema import users_table


class UserRepository:
    """
    Store access for users.

    Every method performs exactly one statement against the shared adapter.
    Store errors propagate to the caller unchanged.
    """

    def __init__(self, adapter):
        self.adapter = adapter

    async def find_all(self) -> List[User]:
        query = select(users_table.c.id, users_table.c.name, users_table.c.email)
        query = query.order_by(users_table.c.id)

        async with self.adapter.get_connection() as conn:
            result = await conn.execute(query)
            return [_to_user(row) for row in result]

    async def find_by_id(self, user_id) -> Optional[User]:
        query = select(
            users_table.c.id, users_table.c.name, users_table.c.email
        ).where(users_table.c.id == user_id)

        async with self.adapter.get_connection() as conn:
            result = await conn.execute(query)
            row = result.first()

        return _to_user(row) if row is not None else None

    async def create(self, name: str, email: str) -> User:
        """Insert a user and return it with the id assigned by the store."""
        statement = insert(users_table).values(name=name, email=email)

        async with self.adapter.begin() as conn:
            result = await conn.execute(statement)
            user_id = result.inserted_primary_key[0]

        return User(id=user_id, name=name, email=email)

    async def update(self, user_id, name: str, email: str) -> int:
        """Update name and email. Returns the number of rows changed."""
        statement = (
            update(users_table)
            .where(users_table.c.id == user_id)
            .values(name=name, email=email)
        )

        async with self.adapter.begin() as conn:
            result = await conn.execute(statement)
            return result.rowcount

    async def delete(self, user_id) -> int:
        """Delete a user. Returns the number of rows removed."""
        statement = delete(users_table).where(users_table.c.id == user_id)

        async with self.adapter.begin() as conn:
            result = await conn.execute(statement)
            return result.rowcount


def _to_user(row) -> User:
    return User(id=row.id, name=row.name, email=row.email)
