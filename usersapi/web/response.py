from typing import Any


class ResponseEntity:
    """
    Response body plus status code, returned from handlers.

    Examples:
        return ResponseEntity.created(user)
        return ResponseEntity.not_found({"error": "Usuario no encontrado"})
    """

    def __init__(self, body: Any = None, status: int = 200):
        self.body = body
        self.status = status

    @classmethod
    def ok(cls, body: Any = None):
        return cls(body, 200)

    @classmethod
    def created(cls, body: Any = None):
        return cls(body, 201)

    @classmethod
    def bad_request(cls, body: Any = None):
        return cls(body, 400)

    @classmethod
    def not_found(cls, body: Any = None):
        return cls(body, 404)

    @classmethod
    def internal_server_error(cls, body: Any = None):
        return cls(body, 500)
