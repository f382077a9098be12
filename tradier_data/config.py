"""
Configuration Management
========================

Connection settings for the Tradier client. Values are injected into
``TradierClient`` explicitly; only ``TradierConfig.from_env()`` reads the
process environment (after loading the repo's .env file).

Environment:
    TRADIER_BASE_URI  API root (default: sandbox)
    TRADIER_TOKEN     Bearer token
    TRADIER_TIMEOUT   Per-request timeout in seconds (default: 30)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from tradier_data.utils.env import (
    BASE_URI_ENV_VAR,
    load_repo_dotenv,
    resolve_tradier_token,
)

PROJECT_ROOT = Path(__file__).parent.parent

SANDBOX_BASE_URI = "https://sandbox.tradier.com/"
PRODUCTION_BASE_URI = "https://api.tradier.com/"

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class TradierConfig:
    """Tradier API connection settings."""
    token: str = ""
    base_uri: str = SANDBOX_BASE_URI
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self):
        # Endpoints are appended as relative paths
        if not self.base_uri.endswith("/"):
            object.__setattr__(self, "base_uri", self.base_uri + "/")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @property
    def is_sandbox(self) -> bool:
        return "sandbox" in self.base_uri

    @classmethod
    def from_env(
        cls,
        token: Optional[str] = None,
        dotenv_path: Optional[Path] = None,
    ) -> "TradierConfig":
        """
        Build config from the environment.

        Args:
            token: Explicit token, takes precedence over TRADIER_TOKEN
            dotenv_path: Optional explicit .env path
        """
        load_repo_dotenv(dotenv_path)
        return cls(
            token=resolve_tradier_token(token),
            base_uri=os.getenv(BASE_URI_ENV_VAR) or SANDBOX_BASE_URI,
            timeout=float(os.getenv("TRADIER_TIMEOUT") or DEFAULT_TIMEOUT),
        )

    def __repr__(self) -> str:
        # Token is never rendered
        return (
            f"TradierConfig(base_uri={self.base_uri!r}, timeout={self.timeout}, "
            f"token={'set' if self.token else 'missing'})"
        )
