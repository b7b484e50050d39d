"""docindex MCP Server - API documentation search index exposed over MCP."""

import argparse
import logging

from fastmcp import FastMCP

from docindex_mcp import __version__
from docindex_mcp.config import get_config
from docindex_mcp.store import IndexStore
from docindex_mcp.tools import browse_index, list_indexes, search_index

logger = logging.getLogger("docindex-mcp.server")


def create_server(store: IndexStore) -> FastMCP:
    """Build a FastMCP server whose tools query ``store``."""
    mcp = FastMCP(
        "docindex MCP Server",
        instructions=(
            "API documentation search server. "
            "Provides tools for listing loaded documentation indexes, "
            "searching items (modules, types, traits, functions, methods) by name or path, "
            "and browsing items by fully qualified path."
        ),
    )
    list_indexes.register(mcp, store)
    search_index.register(mcp, store)
    browse_index.register(mcp, store)
    return mcp


def main():
    """Entry point for the docindex MCP server."""
    config = get_config()
    parser = argparse.ArgumentParser(
        prog="docindex-mcp",
        description="docindex MCP Server - API documentation search exposed over MCP",
    )
    parser.add_argument("--version", "-v", action="version", version=f"docindex-mcp {__version__}")
    parser.add_argument(
        "--index",
        action="append",
        default=[],
        metavar="PATH",
        help="Index file to load (native .json or legacy search-index.js); repeatable. "
        "Added to DOCINDEX_PATHS.",
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "http", "sse"],
        default="stdio",
        help="Transport protocol (default: stdio)",
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind when using http/sse transport (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind when using http/sse transport (default: 8000)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    store = IndexStore.from_config(config)
    for path in args.index:
        store.load_file(path)
    if not len(store):
        logger.warning("No index loaded; set DOCINDEX_PATHS or pass --index")

    run_kwargs: dict = {"transport": args.transport, "show_banner": False}
    if args.transport in ("http", "sse"):
        run_kwargs["host"] = args.host
        run_kwargs["port"] = args.port

    # Suppress noisy uvicorn shutdown messages (e.g. "Cancel N running task(s)")
    logging.getLogger("uvicorn.error").setLevel(logging.CRITICAL)

    try:
        create_server(store).run(**run_kwargs)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
