"""
Shared Utility Functions
========================

Common utilities used across the codebase.
"""

from tradier_data.utils.env import (
    load_repo_dotenv,
    resolve_tradier_token,
    get_repo_root,
)

__all__ = [
    "load_repo_dotenv",
    "resolve_tradier_token",
    "get_repo_root",
]
