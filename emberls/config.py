"""
Server settings.

Values come from the client's ``initializationOptions`` and can be
overridden through environment variables.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

DEFAULT_ADDON_TIMEOUT = 5.0
DEFAULT_INDEX_TTL = 60.0
DEFAULT_CONTEXT_TTL = 1.0


@dataclass
class ServerSettings:
    """
    Tunables for the completion engine.

    Attributes:
        addon_timeout: Deadline in seconds for a single addon chain link.
            ``None`` disables the deadline.
        index_ttl: Time-to-live for project-wide listings (components,
            helpers, routes, ...).
        context_ttl: Time-to-live for template context lookups, which
            depend on the current document text.
    """

    addon_timeout: float | None = DEFAULT_ADDON_TIMEOUT
    index_ttl: float = DEFAULT_INDEX_TTL
    context_ttl: float = DEFAULT_CONTEXT_TTL

    @classmethod
    def from_initialization_options(
        cls, options: Mapping[str, Any] | None = None
    ) -> ServerSettings:
        options = options or {}
        settings = cls(
            addon_timeout=_optional_float(
                options.get("addonTimeout", DEFAULT_ADDON_TIMEOUT)
            ),
            index_ttl=float(options.get("indexTtl", DEFAULT_INDEX_TTL)),
            context_ttl=float(options.get("contextTtl", DEFAULT_CONTEXT_TTL)),
        )

        env_timeout = os.getenv("EMBERLS_ADDON_TIMEOUT")
        if env_timeout:
            settings.addon_timeout = _optional_float(env_timeout)

        return settings


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, str) and value.strip().lower() in ("", "none", "off"):
        return None
    result = float(value)
    # 0 or negative means "no deadline"
    return result if result > 0 else None
