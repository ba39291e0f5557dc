"""Process-wide runtime state, built once and passed explicitly.

The server builds one ``RatchetContext`` at startup; tests build a fresh one
per case instead of resetting globals.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .config import RatchetConfig
from .tools.dashboard import DashboardSync
from .tools.mock_store import MockStore


@dataclass
class RatchetContext:
    """Configuration, mock data store and dashboard syncer for one server."""

    config: RatchetConfig
    store: MockStore = field(default_factory=MockStore)
    dashboard: DashboardSync | None = None

    def __post_init__(self):
        if self.dashboard is None:
            self.dashboard = DashboardSync.from_config(self.config)

    @property
    def mock_mode(self) -> bool:
        return self.config.mock_mode

    @classmethod
    def from_env(cls) -> RatchetContext:
        return cls(config=RatchetConfig.from_env())

    async def aclose(self) -> None:
        if self.dashboard is not None:
            await self.dashboard.aclose()
