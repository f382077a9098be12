"""
Environment Variable Utilities
==============================

Shared helpers for:
- Auto-loading .env from repo root
- Resolving the Tradier API token with proper precedence
- Never logging secrets

Usage:
    from tradier_data.utils.env import load_repo_dotenv, resolve_tradier_token

    load_repo_dotenv()  # Auto-loads .env from repo root if present
    token = resolve_tradier_token()  # "" if not configured
"""

import os
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "TRADIER_TOKEN"
BASE_URI_ENV_VAR = "TRADIER_BASE_URI"


def get_repo_root() -> Path:
    """
    Find the repository root directory.

    Searches upward from this file, then from the working directory, for a
    directory containing ``.git`` or ``pyproject.toml``. Falls back to the
    working directory.
    """
    current = Path(__file__).resolve().parent

    check_paths = [current]
    cwd = Path.cwd()
    if cwd != current:
        check_paths.append(cwd)

    for start_path in check_paths:
        path = start_path
        for _ in range(10):  # Limit search depth
            if (path / ".git").exists():
                return path
            if (path / "pyproject.toml").exists():
                return path
            if path.parent == path:
                break
            path = path.parent

    return cwd


def load_repo_dotenv(dotenv_path: Optional[Path] = None) -> bool:
    """
    Load .env file from repo root if present.

    Safe to call multiple times; already-set environment variables are
    never overridden.

    Args:
        dotenv_path: Optional explicit path to .env file.
                     If not provided, searches for .env in repo root.

    Returns:
        True if .env was found and loaded, False otherwise
    """
    if dotenv_path is None:
        dotenv_path = get_repo_root() / ".env"

    if not dotenv_path.exists():
        logger.debug(f".env not found at {dotenv_path}")
        return False

    loaded = load_dotenv(dotenv_path, override=False)
    if loaded:
        logger.debug(f"Loaded .env from {dotenv_path}")
    return loaded


def resolve_tradier_token(explicit_token: Optional[str] = None) -> str:
    """
    Resolve the Tradier API token.

    Priority (highest to lowest):
    1. explicit_token argument
    2. TRADIER_TOKEN environment variable

    Returns:
        Token string, or "" if none is configured (never logged)
    """
    if explicit_token and explicit_token.strip():
        logger.debug("Using explicitly supplied Tradier token")
        return explicit_token.strip()

    token = os.environ.get(TOKEN_ENV_VAR, "").strip()
    if token:
        logger.debug(f"Using {TOKEN_ENV_VAR}")
    else:
        logger.debug(f"{TOKEN_ENV_VAR} not set")
    return token
