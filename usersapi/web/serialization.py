import dataclasses
import json
from typing import Any

from usersapi.core.logging import get_logger

logger = get_logger("web.serialization")


class UsersJSONEncoder(json.JSONEncoder):
    """JSON encoder that renders dataclasses such as User as objects."""

    def default(self, obj: Any) -> Any:
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return dataclasses.asdict(obj)
        return super().default(obj)


def serialize_json(data: Any) -> bytes:
    """Serialize data to UTF-8 JSON bytes."""
    return json.dumps(
        data, cls=UsersJSONEncoder, ensure_ascii=False, separators=(",", ":")
    ).encode("utf-8")


def serialize_json_safe(data: Any) -> bytes:
    """
    Serialize data, returning an empty body if it cannot be encoded.

    Response writing is best effort; an unencodable payload still gets its
    status code.
    """
    try:
        return serialize_json(data)
    except (TypeError, ValueError) as e:
        logger.debug(f"Dropping unencodable response body: {e}")
        return b""
