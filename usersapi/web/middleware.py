from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

JSON_CONTENT_TYPE = "application/json"


class JSONContentTypeMiddleware(BaseHTTPMiddleware):
    """Set Content-Type: application/json on every response."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["content-type"] = JSON_CONTENT_TYPE
        return response


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add permissive CORS headers to every response.

    Preflight (OPTIONS) requests are answered here with an empty 200 and
    never reach the router.
    """

    def __init__(
        self,
        app,
        allow_origin: str = "*",
        allow_methods: str = "GET, POST, PUT, DELETE, OPTIONS",
        allow_headers: str = "Content-Type",
    ):
        super().__init__(app)
        self.cors_headers = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Methods": allow_methods,
            "Access-Control-Allow-Headers": allow_headers,
        }

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=self.cors_headers)

        response = await call_next(request)
        response.headers.update(self.cors_headers)
        return response
