import re

_SEGMENT_SPLIT = re.compile(r"[-_]")
_UPPER_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def normalize_to_angle_bracket_component(name: str) -> str:
    """
    Convert a dashed component name to its angle bracket form.

    Examples:
        "foo-bar"          -> "FooBar"
        "foo/bar-baz"      -> "Foo::BarBaz"
        "FooBar"           -> "FooBar" (already normalized)
    """
    segments = name.split("/")
    return "::".join(_classify(segment) for segment in segments)


def normalize_to_classic_component(name: str) -> str:
    """
    Convert an angle bracket component name back to its dashed form.

    Examples:
        "FooBar"           -> "foo-bar"
        "Foo::BarBaz"      -> "foo/bar-baz"
    """
    segments = name.split("::")
    return "/".join(_dasherize(segment) for segment in segments)


def _classify(segment: str) -> str:
    parts = [part for part in _SEGMENT_SPLIT.split(segment) if part]
    return "".join(part[0].upper() + part[1:] for part in parts)


def _dasherize(segment: str) -> str:
    return _UPPER_BOUNDARY.sub("-", segment).lower()
