"""
Static completion items for framework keywords.

Grouped by the template position where each keyword is valid.
"""
from lsprotocol.types import CompletionItem, CompletionItemKind


def _items(names: list[str], detail: str) -> list[CompletionItem]:
    return [
        CompletionItem(label=name, kind=CompletionItemKind.Function, detail=detail)
        for name in names
    ]


MUSTACHE_ITEMS: list[CompletionItem] = _items(
    [
        "action",
        "array",
        "component",
        "concat",
        "debugger",
        "each-in",
        "fn",
        "get",
        "has-block",
        "has-block-params",
        "hash",
        "if",
        "input",
        "link-to",
        "loc",
        "log",
        "mount",
        "mut",
        "outlet",
        "partial",
        "query-params",
        "textarea",
        "unbound",
        "unless",
        "yield",
    ],
    "Ember",
)

BLOCK_ITEMS: list[CompletionItem] = _items(
    [
        "component",
        "each",
        "each-in",
        "if",
        "in-element",
        "let",
        "link-to",
        "unless",
        "with",
    ],
    "Ember",
)

SUB_EXPRESSION_ITEMS: list[CompletionItem] = _items(
    [
        "action",
        "array",
        "component",
        "concat",
        "fn",
        "get",
        "hash",
        "if",
        "mut",
        "query-params",
        "unless",
    ],
    "Ember",
)

MODIFIER_ITEMS: list[CompletionItem] = _items(["action", "on"], "Ember")


def builtin_modifiers() -> list[CompletionItem]:
    return _items(["action", "on"], "modifier")
