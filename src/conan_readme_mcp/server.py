#!/usr/bin/env python3
"""MCP server exposing the package tools over stdio or Streamable HTTP."""

from __future__ import annotations

import contextlib
import json
import logging
import typing as t
from collections.abc import AsyncIterator

import anyio
import click
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from mcp.shared.exceptions import McpError
from starlette.applications import Starlette
from starlette.routing import Mount
from starlette.types import Receive, Scope, Send

from conan_readme_mcp.cache import MemoryCache
from conan_readme_mcp.clients import ConanCenterApi, GitHubApi
from conan_readme_mcp.core.package_service import PackageService
from conan_readme_mcp.errors import ErrorKind, PackageReadmeError, ValidationError
from conan_readme_mcp.monitoring.metrics import tool_calls_total
from conan_readme_mcp.utils.config import ServerConfig
from conan_readme_mcp.validation import require_arguments

logger = logging.getLogger(__name__)

PACKAGE_NAME_SCHEMA = {
    "type": "string",
    "description": "The name of the Conan package",
    "pattern": "^[A-Za-z0-9._-]+$",
}

TOOLS: t.List[types.Tool] = [
    types.Tool(
        name="get_package_readme",
        description="Get package README and usage examples from ConanCenter",
        inputSchema={
            "type": "object",
            "required": ["package_name"],
            "properties": {
                "package_name": PACKAGE_NAME_SCHEMA,
                "version": {
                    "type": "string",
                    "description": 'The version of the package (default: "latest")',
                    "default": "latest",
                },
                "include_examples": {
                    "type": "boolean",
                    "description": "Whether to include usage examples (default: true)",
                    "default": True,
                },
            },
        },
    ),
    types.Tool(
        name="get_package_info",
        description="Get package basic information and dependencies from ConanCenter",
        inputSchema={
            "type": "object",
            "required": ["package_name"],
            "properties": {
                "package_name": PACKAGE_NAME_SCHEMA,
                "include_dependencies": {
                    "type": "boolean",
                    "description": "Whether to include dependencies (default: true)",
                    "default": True,
                },
                "include_options": {
                    "type": "boolean",
                    "description": "Whether to include package options (default: false)",
                    "default": False,
                },
            },
        },
    ),
    types.Tool(
        name="search_packages",
        description="Search for packages in ConanCenter",
        inputSchema={
            "type": "object",
            "required": ["query"],
            "properties": {
                "query": {"type": "string", "description": "The search query", "minLength": 1, "maxLength": 200},
                "limit": {
                    "type": "integer",
                    "description": "Maximum number of results to return (default: 20)",
                    "default": 20,
                    "minimum": 1,
                    "maximum": 100,
                },
            },
        },
    ),
]

_ERROR_CODES = {
    ErrorKind.INVALID_INPUT: types.INVALID_PARAMS,
    ErrorKind.NOT_FOUND: types.INVALID_REQUEST,
}


def to_mcp_error(exc: PackageReadmeError) -> McpError:
    code = _ERROR_CODES.get(exc.kind, types.INTERNAL_ERROR)
    return McpError(types.ErrorData(code=code, message=exc.message, data={"kind": exc.kind.value}))


async def dispatch(service: PackageService, name: str, arguments: t.Any) -> t.Dict[str, t.Any]:
    """Route one tool call to the service. Raises :class:`PackageReadmeError` subclasses."""
    args = require_arguments(arguments)
    if name == "get_package_info":
        return await service.get_package_info(
            args.get("package_name"), args.get("include_dependencies"), args.get("include_options")
        )
    if name == "get_package_readme":
        return await service.get_package_readme(
            args.get("package_name"), args.get("version"), args.get("include_examples")
        )
    if name == "search_packages":
        return await service.search_packages(args.get("query"), args.get("limit"))
    raise ValidationError(f"Unknown tool: {name}")


def create_app(service: PackageService, config: t.Optional[ServerConfig] = None) -> Server:
    config = config or ServerConfig()
    app = Server(config.name, version=config.version)

    @app.list_tools()
    async def list_tools() -> list[types.Tool]:
        return TOOLS

    @app.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[types.ContentBlock]:
        try:
            result = await dispatch(service, name, arguments)
        except PackageReadmeError as exc:
            tool_calls_total.inc(tool=name, outcome=exc.kind.value)
            logger.error("Tool execution failed: %s (%s): %s", name, exc.kind.value, exc.message)
            raise to_mcp_error(exc) from exc
        tool_calls_total.inc(tool=name, outcome="ok")
        return [types.TextContent(type="text", text=json.dumps(result, indent=2))]

    return app


def create_service(config: ServerConfig) -> PackageService:
    cache = MemoryCache(
        default_ttl=config.cache.default_ttl_seconds,
        max_size_bytes=config.cache.max_size_bytes,
        cleanup_interval=config.cache.cleanup_interval_seconds,
    )
    return PackageService(
        cache=cache,
        conan_center=ConanCenterApi(config.http),
        github=GitHubApi(config.http),
        ttl=config.ttl,
        resilience=config.resilience,
    )


@contextlib.asynccontextmanager
async def service_lifespan(config: ServerConfig) -> AsyncIterator[PackageService]:
    """Own the service for the process lifetime: start the cache sweep, tear everything down on exit."""
    service = create_service(config)
    service.cache.start()
    try:
        yield service
    finally:
        service.cache.destroy()
        await service.close()
        logger.info("Server resources released")


async def run_stdio(config: ServerConfig) -> None:
    async with service_lifespan(config) as service:
        app = create_app(service, config)
        async with stdio_server() as (read_stream, write_stream):
            logger.info("%s running on stdio", config.name)
            await app.run(read_stream, write_stream, app.create_initialization_options())


def create_http_app(config: ServerConfig, json_response: bool = False) -> Starlette:
    holder: t.Dict[str, StreamableHTTPSessionManager] = {}

    async def handle_streamable_http(scope: Scope, receive: Receive, send: Send) -> None:
        await holder["manager"].handle_request(scope, receive, send)

    @contextlib.asynccontextmanager
    async def lifespan(starlette_app: Starlette) -> AsyncIterator[None]:
        async with service_lifespan(config) as service:
            manager = StreamableHTTPSessionManager(app=create_app(service, config), json_response=json_response)
            holder["manager"] = manager
            async with manager.run():
                logger.info("Application started with StreamableHTTP session manager!")
                try:
                    yield
                finally:
                    logger.info("Application shutting down...")

    return Starlette(routes=[Mount("/mcp", app=handle_streamable_http)], lifespan=lifespan)


@click.command()
@click.option(
    "--transport",
    type=click.Choice(["stdio", "streamable-http"], case_sensitive=False),
    default=None,
    help="Transport to serve on (default: stdio)",
)
@click.option("--host", default=None, help="Host to bind for streamable-http")
@click.option("--port", default=None, type=int, help="Port to listen on for streamable-http")
@click.option(
    "--log-level",
    default=None,
    help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
)
@click.option(
    "--json-response",
    is_flag=True,
    default=False,
    help="Enable JSON responses instead of SSE streams",
)
def main(
    transport: t.Optional[str],
    host: t.Optional[str],
    port: t.Optional[int],
    log_level: t.Optional[str],
    json_response: bool,
) -> int:
    config = ServerConfig.from_env()
    config.transport = (transport or config.transport).lower()
    config.host = host or config.host
    config.port = port or config.port
    config.log_level = log_level or config.log_level

    # stdout carries the stdio transport; logs go to stderr
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if config.transport == "stdio":
        anyio.run(run_stdio, config)
        return 0

    import uvicorn

    uvicorn.run(create_http_app(config, json_response=json_response), host=config.host, port=config.port)
    return 0


if __name__ == "__main__":
    main()
