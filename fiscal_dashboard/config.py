"""Runtime configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

from fiscal_dashboard.schema import OBLIGATIONS_CATEGORY


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Dashboard settings shared by the CLI script and the Streamlit app."""

    category: str = field(default_factory=lambda: os.getenv("DASHBOARD_CATEGORY", OBLIGATIONS_CATEGORY))
    critical_limit: int = field(default_factory=lambda: max(0, int(os.getenv("DASHBOARD_CRITICAL_LIMIT", "5"))))
    debug: bool = field(default_factory=lambda: _env_flag("DASHBOARD_DEBUG"))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached Settings instance for the running process."""
    return Settings()
