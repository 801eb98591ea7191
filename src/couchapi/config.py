# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for couchapi."""

import os
from dataclasses import dataclass

from .version import __version__

DEFAULT_URL = "http://localhost:5984"
DEFAULT_CONTENT_TYPE = "application/json;charset=utf-8"
DEFAULT_USER_AGENT = f"couchapi/{__version__}"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class ClientSettings:
    """Connection defaults shared by every client created without explicit overrides."""

    url: str = DEFAULT_URL
    timeout: float = 30.0
    verify_ssl: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    content_type: str = DEFAULT_CONTENT_TYPE

    @classmethod
    def from_env(cls) -> "ClientSettings":
        """Create settings from environment variables (evaluated at call time)."""
        timeout = _float_env("COUCHAPI_TIMEOUT", cls.timeout)
        if timeout <= 0:
            timeout = cls.timeout
        return cls(
            url=os.getenv("COUCHAPI_URL", cls.url),
            timeout=timeout,
            verify_ssl=_bool_env("COUCHAPI_VERIFY_SSL", cls.verify_ssl),
            user_agent=os.getenv("COUCHAPI_USER_AGENT", cls.user_agent),
            content_type=os.getenv("COUCHAPI_CONTENT_TYPE", cls.content_type),
        )


def load_client_settings() -> ClientSettings:
    """Load client settings from environment with sensible defaults."""
    return ClientSettings.from_env()
