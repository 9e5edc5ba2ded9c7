"""MCP front-ends for the PR semantic search operation.

Both bindings expose the same tool and share SearchService.search(); the
adapters here only translate arguments and results:

  http:  streamable HTTP; ``files`` arrives as one comma-separated string.
         Also serves the liveness probe at /health.
  stdio: ``files`` arrives as a list of strings. Stdout belongs to the
         protocol, so nothing in this process may print to it.

Tools return the payload string; FastMCP wraps it in the standard
{"content": [{"type": "text", "text": ...}]} tool-call envelope.
"""

from __future__ import annotations

import asyncio
import logging

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from prrecall_core.search import SearchQuery, SearchService, split_files

logger = logging.getLogger(__name__)

SERVER_NAME = "pr-semantic-search-server"
TOOL_NAME = "pr-semantic-search"
HEALTH_PATH = "/health"
TRANSPORTS = ("stdio", "http")

_TOOL_DESCRIPTION = (
    "Find pull requests from the same repository that are semantically similar to the given PR "
    "(url, title, body, changed files). Returns up to three past PRs with their review comments."
)


def handle_http_search(service: SearchService, url: str, title: str, body: str, files: str) -> str:
    query = SearchQuery(url=url, title=title, body=body, files=split_files(files))
    return service.search(query).payload()


def handle_stdio_search(service: SearchService, url: str, title: str, body: str, files: list[str]) -> str:
    query = SearchQuery(url=url, title=title, body=body, files=list(files or []))
    return service.search(query).payload()


def create_server(service: SearchService, transport: str = "stdio") -> FastMCP:
    """Build an MCP server bound to an already-loaded search service.

    The corpus must be fully loaded before this is called, so the server
    cannot accept a query against a partial corpus.
    """
    if transport not in TRANSPORTS:
        raise ValueError(f"Unknown transport: {transport!r}. Choose one of {', '.join(TRANSPORTS)}.")

    mcp = FastMCP(SERVER_NAME)

    if transport == "http":

        @mcp.tool(name=TOOL_NAME, description=_TOOL_DESCRIPTION)
        async def search_http(url: str, title: str, body: str, files: str) -> str:
            # The embedding request blocks; keep it off the event loop.
            return await asyncio.to_thread(handle_http_search, service, url, title, body, files)

        @mcp.custom_route(HEALTH_PATH, methods=["GET"])
        async def health(request: Request) -> PlainTextResponse:
            return PlainTextResponse("ok")

    else:

        @mcp.tool(name=TOOL_NAME, description=_TOOL_DESCRIPTION)
        async def search_stdio(url: str, title: str, body: str, files: list[str]) -> str:
            return await asyncio.to_thread(handle_stdio_search, service, url, title, body, files)

    return mcp


def run_server(service: SearchService, config: dict) -> None:
    """Serve until interrupted, on the transport named in config."""
    transport = config.get("transport", "stdio")
    mcp = create_server(service, transport)
    if transport == "http":
        logger.info("Serving %s on http://%s:%s%s", TOOL_NAME, config["host"], config["port"], config["http_path"])
        mcp.run(transport="http", host=config["host"], port=int(config["port"]), path=config["http_path"])
    else:
        logger.info("Serving %s on stdio", TOOL_NAME)
        mcp.run(transport="stdio")
