"""
Project Index Cache for emberls

Every listing behind completion (components, helpers, routes, ...) is
derived from the filesystem and is too slow to recompute per keystroke.
This module keeps the last computed value of each listing for a fixed
time-to-live.

Design Principles:
1. Explicit keys (project root, query kind, plus document for lookups)
2. Explicit TTL per query kind
3. Expired entries are recomputed, never served stale
4. Redundant recomputation under concurrent misses is tolerated
"""

from __future__ import annotations

import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from lsprotocol.types import CompletionItem, LogMessageParams, MessageType

from emberls.config import ServerSettings

if TYPE_CHECKING:
    from emberls.lsp.ember_language_server import EmberLanguageServer
    from emberls.workspace.layout import ProjectLayout

T = TypeVar("T")


@dataclass
class ProjectIndexEntry:
    """A cached value and the moment it stops being valid."""

    value: Any
    expires_at: float


class IndexCache:
    """
    Time-boxed cache keyed by explicit composite keys.

    Usage:
        cache = IndexCache()
        helpers = cache.get_or_compute(
            (root, "helpers"), 60, lambda: layout.list_helpers(root)
        )

        # Drop everything for a project when its addon set changes
        cache.invalidate(root)
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[tuple[Hashable, ...], ProjectIndexEntry] = {}

    def get_or_compute(
        self, key: tuple[Hashable, ...], ttl: float, producer: Callable[[], T]
    ) -> T:
        now = self._clock()
        entry = self._entries.get(key)
        if entry is not None and now < entry.expires_at:
            return entry.value

        value = producer()
        self._prune(now)
        self._entries[key] = ProjectIndexEntry(value=value, expires_at=now + ttl)
        return value

    def invalidate(self, root: str) -> None:
        """Drop all entries belonging to a project root."""
        self._entries = {
            key: entry for key, entry in self._entries.items() if key[0] != root
        }

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def _prune(self, now: float) -> None:
        # Lookup keys include the document text, so stale ones pile up quickly.
        expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
        for key in expired:
            del self._entries[key]


class ProjectIndex:
    """
    Cached view over a ProjectLayout.

    Project-wide listings share ``settings.index_ttl``; template context
    lookups use the tighter ``settings.context_ttl`` because they depend on
    the document text as it is being edited.
    """

    def __init__(
        self,
        layout: ProjectLayout,
        cache: IndexCache | None = None,
        settings: ServerSettings | None = None,
        server: EmberLanguageServer | None = None,
    ) -> None:
        self.layout = layout
        self.cache = cache or IndexCache()
        self.settings = settings or ServerSettings()
        self.server = server

    def _listing(
        self, root: str, kind: str, producer: Callable[[str], list[CompletionItem]]
    ) -> list[CompletionItem]:
        return self.cache.get_or_compute(
            (root, kind), self.settings.index_ttl, lambda: producer(root)
        )

    def components(self, root: str) -> list[CompletionItem]:
        return self._listing(root, "components", self.layout.list_components)

    def mu_components(self, root: str) -> list[CompletionItem]:
        return self._listing(root, "mu_components", self.layout.list_mu_components)

    def pods_components(self, root: str) -> list[CompletionItem]:
        return self._listing(root, "pods_components", self.layout.list_pods_components)

    def helpers(self, root: str) -> list[CompletionItem]:
        return self._listing(root, "helpers", self.layout.list_helpers)

    def modifiers(self, root: str) -> list[CompletionItem]:
        return self._listing(root, "modifiers", self.layout.list_modifiers)

    def routes(self, root: str) -> list[CompletionItem]:
        return self._listing(root, "routes", self.layout.list_routes)

    def models(self, root: str) -> list[CompletionItem]:
        return self._listing(root, "models", self.layout.list_models)

    def addons_info(self, root: str) -> list[CompletionItem]:
        return self._listing(root, "addons_info", self.layout.get_project_addons_info)

    def addon_items(self, root: str, *kinds: str) -> list[CompletionItem]:
        """Addon-contributed items whose detail is one of ``kinds``."""
        return [item for item in self.addons_info(root) if item.detail in kinds]

    def template_context(self, root: str, uri: str, text: str) -> list[CompletionItem]:
        return self.cache.get_or_compute(
            (root, "template_context", uri, text),
            self.settings.context_ttl,
            lambda: self.layout.template_context_lookup(root, uri, text),
        )

    def invalidate(self, root: str) -> None:
        self.cache.invalidate(root)

    def init_registry(self, root: str) -> None:
        """Warm the project-wide listings for a newly registered project."""
        started = time.monotonic()
        try:
            self.helpers(root)
            self.modifiers(root)
            self.routes(root)
            self.components(root)
            self.addons_info(root)
        except Exception as e:
            self._log(
                MessageType.Error,
                f"Error initializing registry for {root}: {type(e).__name__}: {e}",
            )
            return

        elapsed = int((time.monotonic() - started) * 1000)
        self._log(MessageType.Info, f"{root}: registry initialized in {elapsed}ms")

    def _log(self, level: MessageType, message: str) -> None:
        if self.server:
            self.server.window_log_message(LogMessageParams(type=level, message=message))
