"""
Render contexts handed to language backends.

Contexts are plain, immutable data derived from the class registry. Every
class name in a context is already prefixed, so backends never need to see
the registry or the generation configuration.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ...model import FieldKind
from ...naming import simple_name, split_qualified, visit_method_name


@dataclass(frozen=True)
class FieldContext:
    """One field as the templates see it."""

    name: str
    accessor: str
    kind: FieldKind
    target: Optional[str] = None  # prefixed qualified target, CLASS_REF only

    @property
    def is_scalar(self) -> bool:
        return self.kind is FieldKind.SCALAR

    @property
    def is_class_ref(self) -> bool:
        return self.kind is FieldKind.CLASS_REF


@dataclass(frozen=True)
class ClassContext:
    """Render context for one per-class artifact."""

    name: str
    supertype: Optional[str]
    is_abstract: bool
    fields: Tuple[FieldContext, ...] = ()
    source_name: str = ""  # unprefixed name as declared

    @property
    def simple_name(self) -> str:
        return simple_name(self.name)

    @property
    def path(self) -> List[str]:
        return split_qualified(self.name)

    @property
    def class_fields(self) -> Tuple[FieldContext, ...]:
        return tuple(f for f in self.fields if f.is_class_ref)

    @property
    def visit_method(self) -> str:
        """Visitor method the generated accept operation dispatches to."""
        return visit_method_name(self.name)

    def as_dict(self) -> Dict[str, Any]:
        """Template variables for this context."""
        return {
            "class_name": self.name,
            "simple_name": self.simple_name,
            "supertype": self.supertype,
            "is_abstract": self.is_abstract,
            "fields": list(self.fields),
            "class_fields": list(self.class_fields),
            "visit_method": self.visit_method,
            "source_name": self.source_name,
        }


@dataclass(frozen=True)
class ApiEntry:
    """Shorthand constructor for one concrete class."""

    short_name: str
    class_name: str
    args: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ApiContext:
    """Render context for the whole-model API artifact."""

    name: str
    entries: Tuple[ApiEntry, ...] = ()
    classes: Tuple[str, ...] = ()  # every concrete class, never abstract ones

    def as_dict(self) -> Dict[str, Any]:
        return {
            "api_name": self.name,
            "simple_name": simple_name(self.name),
            "entries": list(self.entries),
            "classes": list(self.classes),
        }


@dataclass(frozen=True)
class VisitMethod:
    """Dispatch method for one concrete class.

    ``children`` lists the accessors of fields that are themselves tree
    classes; the default visitor visits them and folds the results.
    """

    method_name: str
    class_name: str
    children: Tuple[str, ...] = ()


@dataclass(frozen=True)
class VisitorContext:
    """Render context for the whole-model Visitor artifact."""

    name: str
    methods: Tuple[VisitMethod, ...] = ()
    combine_name: str = "combine"

    def as_dict(self) -> Dict[str, Any]:
        return {
            "visitor_name": self.name,
            "simple_name": simple_name(self.name),
            "methods": list(self.methods),
            "combine_name": self.combine_name,
        }


@dataclass
class RenderOptions:
    """Presentation settings passed to every template."""

    indent_size: int = 4
    add_comments: bool = True
    generator_name: str = "treebuild"
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def indent(self) -> str:
        return " " * self.indent_size
