"""Runtime configuration for the family directory server."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Configuration (set by configure() at startup)
STORE_FILE: Path | None = None


def _resolve_store_path() -> Path | None:
    """Get the store snapshot path from the FAMILY_STORE_FILE env var.

    Returns None when the variable is unset or blank (in-memory only). The
    file itself need not exist yet; it is created on the first write.

    Raises:
        IsADirectoryError: If the path points at a directory.
    """
    env_path = os.getenv("FAMILY_STORE_FILE")
    if not env_path or not env_path.strip():
        return None
    path = Path(env_path).expanduser().resolve()
    if path.is_dir():
        raise IsADirectoryError(f"FAMILY_STORE_FILE must be a file, got directory: {path}")
    return path


def configure() -> None:
    """Initialize configuration from environment. Called at startup.

    Loads .env file if present, then reads FAMILY_STORE_FILE from environment.
    Note: load_dotenv() does NOT override existing env vars by default.
    """
    global STORE_FILE
    load_dotenv()
    STORE_FILE = _resolve_store_path()
