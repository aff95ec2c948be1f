"""
Naming utilities shared by the class registry and the code generators.

Qualified class names are ``::``-separated paths (``Op::Plus``). Field
names and accessor names are derived from them mechanically so that every
backend produces the same names for the same model.
"""

import re
from typing import List, Sequence

SEPARATOR = "::"

_DOTTED = re.compile(r"\.+")


def split_qualified(name: str) -> List[str]:
    """Split a qualified name into its path segments."""
    return [part for part in name.split(SEPARATOR) if part]


def join_qualified(parts: Sequence[str]) -> str:
    """Join path segments into a qualified name."""
    return SEPARATOR.join(parts)


def simple_name(name: str) -> str:
    """Return the last path segment (``Op::Plus`` -> ``Plus``)."""
    parts = split_qualified(name)
    return parts[-1] if parts else name


def namespace(name: str) -> List[str]:
    """Return the path segments before the last one."""
    return split_qualified(name)[:-1]


def lcfirst(value: str) -> str:
    """Lower-case the first character only."""
    return value[:1].lower() + value[1:]


def ucfirst(value: str) -> str:
    """Upper-case the first character only."""
    return value[:1].upper() + value[1:]


def field_base_name(type_name: str) -> str:
    """Name given to an anonymous field of the given declared type.

    ``Expr`` -> ``expr``, ``Op::Plus`` -> ``plus``, ``scalar`` -> ``scalar``.
    """
    return lcfirst(simple_name(type_name))


def accessor_name(field_name: str) -> str:
    """Accessor for a field (``expr1`` -> ``getExpr1``)."""
    return "get" + ucfirst(field_name)


def visit_method_name(class_name: str) -> str:
    """Visitor dispatch method for a class (``Op::Plus`` -> ``visitPlus``)."""
    return "visit" + simple_name(class_name)


def normalize_prefix(prefix: str) -> str:
    """
    Normalize a class-name prefix.

    Dots are accepted as separators; a non-empty prefix always ends with
    ``::`` so that it can be concatenated with a qualified name.
    """
    prefix = _DOTTED.sub(SEPARATOR, (prefix or "").strip())
    if not prefix:
        return ""
    if not prefix.endswith(SEPARATOR):
        prefix += SEPARATOR
    return prefix


def apply_prefix(prefix: str, name: str) -> str:
    """Return ``name`` qualified by the (normalized) ``prefix``."""
    return normalize_prefix(prefix) + name
