"""
Focus path predicates for templates and scripts.

Each predicate answers one question about the syntax around the cursor.
They are pure and never mutate the tree.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from emberls.syntax.focus_path import FocusPath, Node, node_type

STORE_LOOKUP_METHODS = frozenset(
    {
        "findRecord",
        "findAll",
        "query",
        "queryRecord",
        "peekRecord",
        "peekAll",
        "createRecord",
        "modelFor",
    }
)

ROUTE_LOOKUP_METHODS = frozenset(
    {
        "transitionTo",
        "replaceWith",
        "transitionToRoute",
        "replaceRoute",
        "intermediateTransitionTo",
        "paramsFor",
        "urlFor",
        "controllerFor",
        "modelFor",
    }
)


@dataclass(frozen=True)
class ScopedValue:
    """A block parameter name and the construct that introduced it."""

    name: str
    node: Node
    path: FocusPath


def has_node_type(node: Any, type_name: str) -> bool:
    return node_type(node) == type_name


def _path_original(node: Any) -> str | None:
    path = node.get("path") if isinstance(node, Mapping) else None
    if has_node_type(path, "PathExpression"):
        return path.get("original")
    return None


def get_local_scope(focus_path: FocusPath) -> list[ScopedValue]:
    """Collect block params bound by enclosing elements and blocks, innermost first."""
    scope: list[ScopedValue] = []
    cursor = focus_path.parent_path

    while cursor is not None:
        node = cursor.node
        if node_type(node) in ("ElementNode", "Block"):
            for param in node.get("blockParams") or []:
                scope.append(ScopedValue(name=param, node=node, path=cursor))
        cursor = cursor.parent_path

    return scope


# ===== Templates =====


def is_path_expression(focus_path: FocusPath) -> bool:
    return has_node_type(focus_path.node, "PathExpression")


def is_local_path_expression(focus_path: FocusPath) -> bool:
    """``{{this.foo}}``"""
    return is_path_expression(focus_path) and focus_path.node.get("this") is True


def is_argument_path_expression(focus_path: FocusPath) -> bool:
    """``{{@foo}}``"""
    return is_path_expression(focus_path) and focus_path.node.get("data") is True


def is_scoped_path_expression(focus_path: FocusPath) -> bool:
    if not is_path_expression(focus_path):
        return False
    node = focus_path.node
    if node.get("this") or node.get("data"):
        return False
    return len(get_local_scope(focus_path)) > 0


def _is_path_of(focus_path: FocusPath, parent_type: str) -> bool:
    if not is_path_expression(focus_path):
        return False
    parent = focus_path.parent
    return has_node_type(parent, parent_type) and parent.get("path") is focus_path.node


def is_mustache_path(focus_path: FocusPath) -> bool:
    """``{{foo}}``"""
    return _is_path_of(focus_path, "MustacheStatement")


def is_block_path(focus_path: FocusPath) -> bool:
    """``{{#foo}}{{/foo}}``"""
    return _is_path_of(focus_path, "BlockStatement")


def is_sub_expression_path(focus_path: FocusPath) -> bool:
    """``(foo)``"""
    return _is_path_of(focus_path, "SubExpression")


def is_modifier_path(focus_path: FocusPath) -> bool:
    """``<div {{foo}}>``"""
    return _is_path_of(focus_path, "ElementModifierStatement")


def is_angle_component_path(focus_path: FocusPath) -> bool:
    """``<Foo``"""
    node = focus_path.node
    if not has_node_type(node, "ElementNode"):
        return False
    tag = node.get("tag") or ""
    if not tag:
        return False
    first = tag[0]
    return first.isalpha() and first.isupper()


def is_component_argument_name(focus_path: FocusPath) -> bool:
    """``<Foo @name``"""
    node = focus_path.node
    if not has_node_type(node, "AttrNode"):
        return False
    if not str(node.get("name", "")).startswith("@"):
        return False
    return has_node_type(focus_path.parent, "ElementNode")


def is_inline_link_to_target(focus_path: FocusPath) -> bool:
    """``{{link-to "text" "target"}}``"""
    parent = focus_path.parent
    if not has_node_type(parent, "MustacheStatement"):
        return False
    params = parent.get("params") or []
    return (
        _path_original(parent) == "link-to"
        and len(params) > 1
        and params[1] is focus_path.node
    )


def is_block_link_to_target(focus_path: FocusPath) -> bool:
    """``{{#link-to "target"}}{{/link-to}}``"""
    parent = focus_path.parent
    if not has_node_type(parent, "BlockStatement"):
        return False
    params = parent.get("params") or []
    return (
        _path_original(parent) == "link-to"
        and len(params) > 0
        and params[0] is focus_path.node
    )


def is_link_to_target(focus_path: FocusPath) -> bool:
    return is_inline_link_to_target(focus_path) or is_block_link_to_target(
        focus_path
    )


def is_link_component_route_target(focus_path: FocusPath) -> bool:
    """``<LinkTo @route="target" />``"""
    if not has_node_type(focus_path.node, "TextNode"):
        return False
    parent = focus_path.parent
    if not has_node_type(parent, "AttrNode") or parent.get("name") != "@route":
        return False
    parent_path = focus_path.parent_path
    grand_parent = parent_path.parent if parent_path else None
    return has_node_type(grand_parent, "ElementNode") and grand_parent.get("tag") == "LinkTo"


# ===== Scripts =====


def _is_string_literal(node: Any) -> bool:
    if has_node_type(node, "StringLiteral"):
        return True
    return has_node_type(node, "Literal") and isinstance(node.get("value"), str)


def _member_name(node: Any) -> str | None:
    if not has_node_type(node, "MemberExpression"):
        return None
    prop = node.get("property")
    if has_node_type(prop, "Identifier"):
        return prop.get("name")
    return None


def _is_store_receiver(node: Any) -> bool:
    if has_node_type(node, "Identifier"):
        return node.get("name") == "store"
    return _member_name(node) == "store"


def _first_argument_call(focus_path: FocusPath) -> Node | None:
    """Return the enclosing CallExpression when the focus is its first string argument."""
    if not _is_string_literal(focus_path.node):
        return None
    parent = focus_path.parent
    if not has_node_type(parent, "CallExpression"):
        return None
    arguments = parent.get("arguments") or []
    if not arguments or arguments[0] is not focus_path.node:
        return None
    return parent


def is_store_model_lookup(focus_path: FocusPath) -> bool:
    """``this.store.findRecord('user')``"""
    call = _first_argument_call(focus_path)
    if call is None:
        return False
    callee = call.get("callee")
    if _member_name(callee) not in STORE_LOOKUP_METHODS:
        return False
    return _is_store_receiver(callee.get("object"))


def is_route_lookup(focus_path: FocusPath) -> bool:
    """``this.transitionTo('posts')``"""
    call = _first_argument_call(focus_path)
    if call is None:
        return False
    callee = call.get("callee")
    if _member_name(callee) not in ROUTE_LOOKUP_METHODS:
        return False
    return not _is_store_receiver(callee.get("object"))
