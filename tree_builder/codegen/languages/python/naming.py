"""
Python-specific naming checks.

Class and field names come straight from the config, so a name that is
legal in the config language can still be unusable in Python source.
"""

import keyword

from ....errors import RenderError
from ....naming import split_qualified

# Python reserved keywords, plus names the generated code already binds
PYTHON_RESERVED_WORDS = frozenset(keyword.kwlist)

RESERVED_FIELD_NAMES = PYTHON_RESERVED_WORDS | {"self"}


def check_class_name(qualified_name: str, template: str):
    """Raise RenderError if any segment of a class name is a Python keyword."""
    for segment in split_qualified(qualified_name):
        if keyword.iskeyword(segment):
            raise RenderError(
                f"class name '{qualified_name}' contains the Python keyword '{segment}'",
                template,
            )


def check_field_name(name: str, class_name: str, template: str):
    """Raise RenderError if a field name cannot be a Python parameter."""
    if name in RESERVED_FIELD_NAMES:
        raise RenderError(
            f"field '{name}' of class '{class_name}' is reserved in Python",
            template,
        )


def module_alias(qualified_name: str) -> str:
    """Import alias for a class module (``Op::Plus`` -> ``_Op_Plus``)."""
    return "_" + "_".join(split_qualified(qualified_name))
