from enum import Enum


class CompletionContext(Enum):
    """Classification of the template position under the cursor."""

    ANGLE_COMPONENT = "angle_component"        # <Foo
    COMPONENT_ARGUMENT = "component_argument"  # <Foo @na
    LOCAL_PATH = "local_path"                  # {{this.na}}
    ARGUMENT_PATH = "argument_path"            # {{@na}}
    MUSTACHE_PATH = "mustache_path"            # {{foo}}
    BLOCK_PATH = "block_path"                  # {{#foo}}{{/foo}}
    SUB_EXPRESSION_PATH = "sub_expression"     # (foo)
    PATH_EXPRESSION = "path_expression"        # {{foo bar}}
    ROUTE_TARGET = "route_target"              # {{link-to "x" "target"}}, <LinkTo @route="target">
    MODIFIER_PATH = "modifier_path"            # <div {{foo}}>
    NONE = "none"
