"""
Connection establishment with bounded retries.

Each attempt opens the engine and pings it. A failed attempt with zero-based
index i waits base_delay * i**2 seconds, so the default policy waits 0, 1, 4,
9 and 16 seconds across its five attempts, the last wait included.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

from usersapi.core.logging import get_logger
from usersapi.exceptions import ConfigurationException, DatabaseConnectionException

logger = get_logger("data.retry")

SleepFunction = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try and how long to wait between tries."""

    max_attempts: int = 5
    base_delay: float = 1.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ConfigurationException("database.connect.max_attempts must be >= 1")
        if self.base_delay < 0:
            raise ConfigurationException("database.connect.base_delay must be >= 0")

    def delay_for(self, attempt: int) -> float:
        """Delay in seconds after the failed attempt with zero-based index attempt."""
        return self.base_delay * attempt * attempt

    @classmethod
    def from_config(cls, config) -> "RetryPolicy":
        return cls(
            max_attempts=config.get_int("database.connect.max_attempts", 5),
            base_delay=config.get_float("database.connect.base_delay", 1.0),
        )


async def connect_with_retry(
    adapter,
    database_url,
    policy: RetryPolicy = None,
    sleep: SleepFunction = asyncio.sleep,
    echo: bool = False,
):
    """
    Connect adapter to database_url, retrying according to policy.

    Returns the connected adapter. Raises DatabaseConnectionException once
    every attempt has failed.
    """
    policy = policy or RetryPolicy()
    last_error = None

    for attempt in range(policy.max_attempts):
        try:
            await adapter.connect(database_url, echo=echo)
        except Exception as e:
            last_error = e
            delay = policy.delay_for(attempt)
            logger.warning(
                f"Attempt {attempt + 1}: Error connecting to database: {e}. "
                f"Retrying in {delay:g}s..."
            )
            await sleep(delay)
        else:
            logger.info(f"Database connection established (attempt {attempt + 1})")
            return adapter

    raise DatabaseConnectionException(policy.max_attempts, last_error) from last_error
