"""Runtime configuration for the Ratchet MCP server.

Settings come from environment variables (optionally via a ``.env`` file,
loaded once by the entry point). In mock mode the PointCare credentials are
not required.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

LOG_LEVELS = ("debug", "info", "warn", "error")


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("true", "1", "yes")


@dataclass
class RatchetConfig:
    """Configuration for the Ratchet MCP server."""

    # PointCare API (only required outside mock mode)
    api_url: str = "https://api.pointcare.com"
    api_key: str = ""
    client_id: str | None = None
    client_secret: str | None = None

    # Supabase (PointCare EMR dashboard)
    supabase_url: str | None = None
    supabase_key: str | None = None

    # Runtime
    mock_mode: bool = True
    log_level: str = "info"

    # Timeouts (ms)
    request_timeout: int = 30000

    @property
    def supabase_enabled(self) -> bool:
        """Dashboard sync is on only when both URL and key are set."""
        return bool(self.supabase_url and self.supabase_key)

    @property
    def request_timeout_seconds(self) -> float:
        return self.request_timeout / 1000

    @classmethod
    def from_env(cls) -> RatchetConfig:
        """Load configuration from environment variables."""
        mock_mode = _env_flag("RATCHET_MOCK_MODE") or not os.getenv("POINTCARE_API_URL")

        log_level = os.getenv("LOG_LEVEL", "info").lower()
        if log_level not in LOG_LEVELS:
            log_level = "info"

        try:
            request_timeout = int(os.getenv("REQUEST_TIMEOUT", "30000"))
        except ValueError:
            request_timeout = 30000

        return cls(
            api_url=os.getenv("POINTCARE_API_URL") or "https://api.pointcare.com",
            api_key=os.getenv("POINTCARE_API_KEY", ""),
            client_id=os.getenv("POINTCARE_CLIENT_ID"),
            client_secret=os.getenv("POINTCARE_CLIENT_SECRET"),
            supabase_url=os.getenv("SUPABASE_URL") or None,
            supabase_key=os.getenv("SUPABASE_ANON_KEY") or None,
            mock_mode=mock_mode,
            log_level=log_level,
            request_timeout=request_timeout,
        )

    def validate(self) -> list[str]:
        """Return a list of problems that block live operation."""
        errors: list[str] = []
        if not self.mock_mode:
            if not self.api_url:
                errors.append("POINTCARE_API_URL is required when not in mock mode")
            if not self.api_key:
                errors.append("POINTCARE_API_KEY is required when not in mock mode")
        return errors


# Global config instance
_config: RatchetConfig | None = None


def get_config() -> RatchetConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = RatchetConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next ``get_config`` re-reads env."""
    global _config
    _config = None
