"""
Semantic model built from parsed declarations.

The ClassRegistry walks declarations strictly in order. Each declaration's
supertype and field types are resolved against the classes registered so
far plus the class being declared, which makes self-reference legal
(``ExprList(Expr, ExprList)``) and every other forward reference an error.
Once built, the registry and its descriptors are never mutated.
"""

from collections import Counter
from enum import Enum
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from .errors import (
    AbstractWithParamsError,
    DuplicateClassError,
    DuplicateFieldNameError,
    UnresolvedFieldTypeError,
    UnresolvedSupertypeError,
)
from .logging_config import get_logger
from .naming import accessor_name, field_base_name, namespace, simple_name
from .parser import AbstractDecl, Declaration, ParamDecl

logger = get_logger(__name__)

SCALAR = "scalar"


class FieldKind(Enum):
    """Declared kind of a field."""

    SCALAR = "scalar"
    CLASS_REF = "class"


class Field:
    """A resolved constructor field of a concrete class."""

    __slots__ = ("_name", "_kind", "_target", "_explicit")

    def __init__(
        self,
        name: str,
        kind: FieldKind,
        target: Optional["ClassDescriptor"] = None,
        explicit: bool = False,
    ):
        self._name = name
        self._kind = kind
        self._target = target
        self._explicit = explicit

    @property
    def name(self) -> str:
        return self._name

    @property
    def kind(self) -> FieldKind:
        return self._kind

    @property
    def target(self) -> Optional["ClassDescriptor"]:
        """Referenced class for CLASS_REF fields, None for scalars."""
        return self._target

    @property
    def explicit(self) -> bool:
        """True when the config named the field itself."""
        return self._explicit

    @property
    def is_scalar(self) -> bool:
        return self._kind is FieldKind.SCALAR

    @property
    def type_name(self) -> str:
        return SCALAR if self._target is None else self._target.name

    @property
    def accessor(self) -> str:
        return accessor_name(self._name)

    def __repr__(self) -> str:
        return f"Field({self._name!r}, {self.type_name!r})"


class ClassDescriptor:
    """Fully resolved description of one declared class."""

    def __init__(
        self,
        name: str,
        is_abstract: bool,
        supertype: Optional["ClassDescriptor"],
        index: int,
        line: int = 0,
    ):
        self._name = name
        self._is_abstract = is_abstract
        self._supertype = supertype
        self._index = index
        self._line = line
        self._fields: Tuple[Field, ...] = ()

    @property
    def name(self) -> str:
        """Fully qualified name, e.g. ``Op::Plus``."""
        return self._name

    @property
    def simple_name(self) -> str:
        return simple_name(self._name)

    @property
    def namespace(self) -> List[str]:
        return namespace(self._name)

    @property
    def is_abstract(self) -> bool:
        return self._is_abstract

    @property
    def supertype(self) -> Optional["ClassDescriptor"]:
        return self._supertype

    @property
    def fields(self) -> Tuple[Field, ...]:
        return self._fields

    @property
    def index(self) -> int:
        """Position among all declarations."""
        return self._index

    @property
    def line(self) -> int:
        return self._line

    def ancestors(self) -> List["ClassDescriptor"]:
        """Supertype chain, nearest first."""
        chain = []
        current = self._supertype
        while current is not None:
            chain.append(current)
            current = current.supertype
        return chain

    def class_fields(self) -> List[Field]:
        """Fields that refer to other tree classes."""
        return [f for f in self._fields if not f.is_scalar]

    def is_subclass_of(self, other: "ClassDescriptor") -> bool:
        return other is self or other in self.ancestors()

    def __repr__(self) -> str:
        kind = "abstract " if self._is_abstract else ""
        return f"<ClassDescriptor {kind}{self._name}>"


def assign_field_names(params: Sequence[ParamDecl], class_name: str) -> List[str]:
    """
    Resolve the field name of every parameter, in constructor order.

    Explicit names pass through unchanged. Anonymous parameters are named
    after their declared type (``lcfirst`` of the last path segment); when
    two or more anonymous parameters share that base name each one gets a
    1-based suffix in declaration order.

    Raises:
        DuplicateFieldNameError: If two parameters resolve to the same name.
    """
    anonymous = Counter(
        field_base_name(p.type_name) for p in params if p.explicit_name is None
    )
    numbering: Counter = Counter()
    names: List[str] = []

    for param in params:
        if param.explicit_name is not None:
            name = param.explicit_name
        else:
            base = field_base_name(param.type_name)
            if anonymous[base] > 1:
                numbering[base] += 1
                name = f"{base}{numbering[base]}"
            else:
                name = base
        if name in names:
            raise DuplicateFieldNameError(name, class_name)
        names.append(name)

    return names


class ClassRegistry:
    """Mapping from qualified name to ClassDescriptor, in declaration order."""

    def __init__(self):
        self._classes: Dict[str, ClassDescriptor] = {}
        self._ordered: List[ClassDescriptor] = []

    @classmethod
    def build(cls, declarations: Iterable[Declaration]) -> "ClassRegistry":
        """
        Build a registry from parsed declarations.

        Args:
            declarations: Declarations in source order.

        Returns:
            The finished registry.

        Raises:
            SemanticError: The first violated invariant, one of
                DuplicateClassError, AbstractWithParamsError,
                UnresolvedSupertypeError, UnresolvedFieldTypeError or
                DuplicateFieldNameError.
        """
        registry = cls()
        for declaration in declarations:
            registry._declare(declaration)
        logger.info(
            "registered %d classes (%d concrete)",
            len(registry),
            len(registry.concrete_classes()),
        )
        return registry

    def _declare(self, decl: Declaration) -> ClassDescriptor:
        if decl.name in self._classes:
            raise DuplicateClassError(decl.name)

        is_abstract = isinstance(decl, AbstractDecl)
        if is_abstract and decl.params:
            raise AbstractWithParamsError(decl.name)

        supertype = None
        if decl.supertype is not None:
            supertype = self._classes.get(decl.supertype)
            if supertype is None:
                raise UnresolvedSupertypeError(decl.supertype, decl.name)

        descriptor = ClassDescriptor(
            decl.name,
            is_abstract,
            supertype,
            index=len(self._ordered),
            line=decl.line,
        )
        descriptor._fields = tuple(self._resolve_fields(decl, descriptor))

        self._classes[decl.name] = descriptor
        self._ordered.append(descriptor)
        logger.debug(
            "declared %r with fields %s",
            descriptor,
            [f.name for f in descriptor.fields],
        )
        return descriptor

    def _resolve_fields(
        self, decl: Declaration, descriptor: ClassDescriptor
    ) -> List[Field]:
        targets: List[Optional[ClassDescriptor]] = []
        for param in decl.params:
            if param.is_scalar:
                targets.append(None)
            elif param.type_name == decl.name:
                targets.append(descriptor)
            elif param.type_name in self._classes:
                targets.append(self._classes[param.type_name])
            else:
                raise UnresolvedFieldTypeError(param.type_name, decl.name)

        names = assign_field_names(decl.params, decl.name)

        return [
            Field(
                name,
                FieldKind.SCALAR if target is None else FieldKind.CLASS_REF,
                target,
                explicit=param.explicit_name is not None,
            )
            for name, target, param in zip(names, targets, decl.params)
        ]

    # Read-only access

    def __iter__(self) -> Iterator[ClassDescriptor]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)

    def __contains__(self, name: object) -> bool:
        return name in self._classes

    def __getitem__(self, name: str) -> ClassDescriptor:
        return self._classes[name]

    def get(self, name: str) -> Optional[ClassDescriptor]:
        return self._classes.get(name)

    @property
    def classes(self) -> Tuple[ClassDescriptor, ...]:
        """All descriptors in declaration order."""
        return tuple(self._ordered)

    def names(self) -> List[str]:
        return [c.name for c in self._ordered]

    def concrete_classes(self) -> List[ClassDescriptor]:
        return [c for c in self._ordered if not c.is_abstract]

    def abstract_classes(self) -> List[ClassDescriptor]:
        return [c for c in self._ordered if c.is_abstract]

    def subclasses_of(self, descriptor: ClassDescriptor) -> List[ClassDescriptor]:
        """Classes whose supertype chain includes ``descriptor``."""
        return [
            c for c in self._ordered if c is not descriptor and c.is_subclass_of(descriptor)
        ]
