from __future__ import annotations

from typing import Callable

from emberls.context.types import CompletionContext
from emberls.syntax import ast_helpers
from emberls.syntax.focus_path import FocusPath

Predicate = Callable[[FocusPath], bool]


def _is_generic_path_expression(focus_path: FocusPath) -> bool:
    # Modifier heads are PathExpressions too; they have their own rule below.
    return ast_helpers.is_path_expression(focus_path) and not ast_helpers.is_modifier_path(
        focus_path
    )


def _is_route_target(focus_path: FocusPath) -> bool:
    return ast_helpers.is_link_to_target(
        focus_path
    ) or ast_helpers.is_link_component_route_target(focus_path)


# Evaluated in order; the first matching predicate wins.
TEMPLATE_CONTEXT_RULES: list[tuple[CompletionContext, Predicate]] = [
    (CompletionContext.ANGLE_COMPONENT, ast_helpers.is_angle_component_path),
    (CompletionContext.COMPONENT_ARGUMENT, ast_helpers.is_component_argument_name),
    (CompletionContext.LOCAL_PATH, ast_helpers.is_local_path_expression),
    (CompletionContext.ARGUMENT_PATH, ast_helpers.is_argument_path_expression),
    (CompletionContext.MUSTACHE_PATH, ast_helpers.is_mustache_path),
    (CompletionContext.BLOCK_PATH, ast_helpers.is_block_path),
    (CompletionContext.SUB_EXPRESSION_PATH, ast_helpers.is_sub_expression_path),
    (CompletionContext.PATH_EXPRESSION, _is_generic_path_expression),
    (CompletionContext.ROUTE_TARGET, _is_route_target),
    (CompletionContext.MODIFIER_PATH, ast_helpers.is_modifier_path),
]


class CompletionContextClassifier:
    """
    Decides which completion context applies at a focus path.

    The classifier is stateless; rules can be replaced for testing.
    """

    def __init__(
        self, rules: list[tuple[CompletionContext, Predicate]] | None = None
    ) -> None:
        self.rules = rules if rules is not None else TEMPLATE_CONTEXT_RULES

    def classify(self, focus_path: FocusPath | None) -> CompletionContext:
        if focus_path is None:
            return CompletionContext.NONE

        for context, predicate in self.rules:
            if predicate(focus_path):
                return context

        return CompletionContext.NONE
