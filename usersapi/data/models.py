from dataclasses import dataclass


@dataclass
class User:
    """A row of the users table."""

    id: int
    name: str
    email: str
