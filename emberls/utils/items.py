from __future__ import annotations

import copy
from typing import Any, Iterable, Mapping

from lsprotocol.types import CompletionItem


def item_label(item: Any) -> str | None:
    """Label of a completion item, whether an lsprotocol object or a plain dict."""
    if isinstance(item, Mapping):
        return item.get("label")
    return getattr(item, "label", None)


def uniq_by_label(items: Iterable[Any]) -> list[Any]:
    """Drop items whose label was already seen, keeping first occurrences in order."""
    seen: set[str | None] = set()
    result = []
    for item in items:
        label = item_label(item)
        if label in seen:
            continue
        seen.add(label)
        result.append(item)
    return result


def with_label(item: CompletionItem, label: str) -> CompletionItem:
    """Copy of ``item`` carrying a different label."""
    relabeled = copy.copy(item)
    relabeled.label = label
    return relabeled
