import asyncio
from contextlib import asynccontextmanager

import uvicorn
from starlette.applications import Starlette
from starlette.exceptions import HTTPException
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import Response

from usersapi.config.properties import get_config
from usersapi.core.logging import get_logger
from usersapi.data.adapter import SQLAlchemyAdapter, normalize_database_url
from usersapi.data.repository import UserRepository
from usersapi.data.retry import RetryPolicy, connect_with_retry
from usersapi.data.schema import ensure_schema
from usersapi.exceptions import ConfigurationException, UsersApiException
from usersapi.web.middleware import CORSHeadersMiddleware, JSONContentTypeMiddleware
from usersapi.web.route_builder import RouteBuilder
from usersapi.web.serialization import serialize_json_safe
from usersapi.web.user_controller import UserController

logger = get_logger("core.server")


async def http_exception_handler(request: Request, exc: HTTPException) -> Response:
    """Render router errors (unknown path, wrong method) as JSON."""
    return Response(
        content=serialize_json_safe({"error": exc.detail}),
        status_code=exc.status_code,
        headers=exc.headers,
        media_type="application/json",
    )


class UsersASGIApp:
    """
    ASGI application for the users service.

    Owns the shared database adapter. Startup connects it with retries and
    creates the users table; a failure in either aborts startup. Shutdown
    disposes the engine.
    """

    def __init__(self, config=None, sleep=asyncio.sleep):
        self.config = config or get_config()

        database_url = self.config.get("database.url")
        if not database_url:
            raise ConfigurationException(
                "DATABASE_URL is not set; a database connection string is required"
            )
        self.database_url = normalize_database_url(database_url)
        self.retry_policy = RetryPolicy.from_config(self.config)
        self._sleep = sleep

        self.adapter = SQLAlchemyAdapter()
        self.user_repository = UserRepository(self.adapter)
        self.controllers = [UserController(self.user_repository)]

        route_builder = RouteBuilder(
            self.controllers,
            ignore_trailing_slash=self.config.get_bool(
                "server.ignore_trailing_slash", True
            ),
        )

        # First entry is the outermost layer
        middleware = [
            Middleware(JSONContentTypeMiddleware),
            Middleware(
                CORSHeadersMiddleware,
                allow_origin=self.config.get("cors.allow_origin", "*"),
                allow_methods=self.config.get(
                    "cors.allow_methods", "GET, POST, PUT, DELETE, OPTIONS"
                ),
                allow_headers=self.config.get("cors.allow_headers", "Content-Type"),
            ),
        ]

        self.app = Starlette(
            routes=route_builder.build_routes(),
            middleware=middleware,
            exception_handlers={HTTPException: http_exception_handler},
            lifespan=self._lifespan,
        )

    @asynccontextmanager
    async def _lifespan(self, app):
        try:
            await connect_with_retry(
                self.adapter,
                self.database_url,
                policy=self.retry_policy,
                sleep=self._sleep,
                echo=self.config.get_bool("database.echo"),
            )
            await ensure_schema(self.adapter)
        except UsersApiException as e:
            logger.critical(str(e))
            await self.adapter.disconnect()
            raise

        try:
            yield
        finally:
            await self.adapter.disconnect()
            logger.info("Database connection closed")

    async def __call__(self, scope, receive, send):
        await self.app(scope, receive, send)


def _start_uvicorn(server, config, host, port, log_level, access_log):
    """Run server under uvicorn. Startup failures exit the process."""
    uvicorn_kwargs = {
        "host": host,
        "port": port,
        "log_level": log_level,
        "access_log": access_log,
        "lifespan": "on",
        # Keep the handlers installed by configure_logging
        "log_config": None,
    }

    timeout = config.get("server.timeout")
    if timeout is not None:
        uvicorn_kwargs["timeout_keep_alive"] = int(timeout)

    uvicorn.run(server, **uvicorn_kwargs)
