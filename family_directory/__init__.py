"""Family Directory Server - FastMCP server for a family address book.

Members and pairwise relation links live in a document store; the server
exposes CRUD plus derived views: the relation-based family tree, the
children-list hierarchy, area grouping, filtering and map markers.

Usage:
    family-directory --store-file /path/to/family.json
    FAMILY_STORE_FILE=/path/to/family.json python -m family_directory
"""

from __future__ import annotations

import logging

from fastmcp import FastMCP

from . import state
from .directory import FamilyDirectory
from .mcp_resources import register_resources
from .mcp_tools import register_tools
from .store import DocumentStore, InMemoryDocumentStore
from .telemetry import initialize_tracing

logger = logging.getLogger(__name__)

# Initialize tracing FIRST (before creating server)
# This is a no-op if PHOENIX_ENABLED is not set to 'true'
initialize_tracing()

# Initialize FastMCP server
mcp = FastMCP("Family Directory Server")

_directory: FamilyDirectory | None = None


def initialize(store: DocumentStore | None = None) -> FamilyDirectory:
    """Configure from env vars, construct the store and register tools.

    The directory (and the store it wraps) is built once here and handed to
    the tool and resource registrations. Safe to call multiple times.

    Args:
        store: Store to use instead of the configured in-memory/JSON store.
    """
    global _directory
    if _directory is not None:
        return _directory

    state.configure()
    if store is None:
        store = InMemoryDocumentStore(state.STORE_FILE)
    logger.info(f"Using store {type(store).__name__} (file: {state.STORE_FILE})")

    _directory = FamilyDirectory(store)
    register_tools(mcp, _directory)
    register_resources(mcp, _directory)
    return _directory


__all__ = ["mcp", "initialize"]
