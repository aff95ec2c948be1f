"""
Code generation driver.

Turns a finished ClassRegistry into render contexts, hands them to a
language backend and passes the rendered text to an output writer. The
driver has no partial-success mode: the first rendering or writing error
propagates, and artifacts already written in the same run stay on disk.
"""

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any, Dict, Iterator, List, Optional

from ...errors import OutputConflictError
from ...logging_config import get_logger
from ...model import ClassDescriptor, ClassRegistry, FieldKind
from ...naming import apply_prefix, normalize_prefix, simple_name, visit_method_name
from .backend import Backend
from .config import GeneratorConfig
from .context import (
    ApiContext,
    ApiEntry,
    ClassContext,
    FieldContext,
    VisitMethod,
    VisitorContext,
)
from .writer import FileWriter, OutputWriter

logger = get_logger(__name__)

API_NAME = "API"
VISITOR_NAME = "Visitor"

KIND_CLASS = "class"
KIND_API = "api"
KIND_VISITOR = "visitor"


@dataclass(frozen=True)
class RenderedArtifact:
    """Rendered source text and where it belongs."""

    kind: str
    name: str
    path: PurePosixPath
    text: str


@dataclass(frozen=True)
class Artifact:
    """Record of one artifact handed to the writer."""

    kind: str
    name: str
    path: PurePosixPath
    written: bool = True


@dataclass
class GenerationResult:
    """Container for generation results and metadata."""

    artifacts: List[Artifact] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def paths(self) -> List[PurePosixPath]:
        return [a.path for a in self.artifacts]

    @property
    def written_count(self) -> int:
        return sum(1 for a in self.artifacts if a.written)

    def of_kind(self, kind: str) -> List[Artifact]:
        return [a for a in self.artifacts if a.kind == kind]


class CodeGenerationDriver:
    """Builds render contexts from a registry and emits every artifact."""

    def __init__(
        self,
        backend: Backend,
        config: Optional[GeneratorConfig] = None,
        writer: Optional[OutputWriter] = None,
    ):
        self.backend = backend
        self.config = config or backend.config
        self.writer = writer or FileWriter(
            self.config.output_dir, write_if_changed=self.config.write_if_changed
        )
        self.prefix = normalize_prefix(self.config.prefix)

    def qualify(self, name: str) -> str:
        """Prefixed output name for a declared class name."""
        return apply_prefix(self.prefix, name)

    # Contexts

    def class_context(self, descriptor: ClassDescriptor) -> ClassContext:
        fields = tuple(
            FieldContext(
                name=f.name,
                accessor=f.accessor,
                kind=f.kind,
                target=self.qualify(f.target.name)
                if f.kind is FieldKind.CLASS_REF
                else None,
            )
            for f in descriptor.fields
        )
        return ClassContext(
            name=self.qualify(descriptor.name),
            supertype=self.qualify(descriptor.supertype.name)
            if descriptor.supertype is not None
            else None,
            is_abstract=descriptor.is_abstract,
            fields=fields,
            source_name=descriptor.name,
        )

    def api_context(self, registry: ClassRegistry) -> ApiContext:
        concrete = registry.concrete_classes()
        entries = tuple(
            ApiEntry(
                short_name=descriptor.simple_name,
                class_name=self.qualify(descriptor.name),
                args=tuple(f.name for f in descriptor.fields),
            )
            for descriptor in concrete
        )
        return ApiContext(
            name=self.qualify(API_NAME),
            entries=entries,
            classes=tuple(self.qualify(d.name) for d in concrete),
        )

    def visitor_context(self, registry: ClassRegistry) -> VisitorContext:
        methods = tuple(
            VisitMethod(
                method_name=visit_method_name(descriptor.name),
                class_name=self.qualify(descriptor.name),
                children=tuple(f.accessor for f in descriptor.class_fields()),
            )
            for descriptor in registry.concrete_classes()
        )
        return VisitorContext(name=self.qualify(VISITOR_NAME), methods=methods)

    # Layout

    def check_layout(self, registry: ClassRegistry):
        """
        Make sure every artifact of the run gets a path of its own.

        A class named like a whole-model artifact (``API``, ``Visitor``)
        would otherwise be overwritten by it. The backend then applies its
        own module layout rules.

        Raises:
            OutputConflictError: On the first clash, naming the class.
        """
        names = [self.qualify(d.name) for d in registry]
        owners: Dict[PurePosixPath, str] = {}
        names.extend([self.qualify(API_NAME), self.qualify(VISITOR_NAME)])
        for name in names:
            path = self.backend.output_path(name)
            if path in owners:
                raise OutputConflictError(
                    owners[path],
                    name,
                    path,
                    f"output {path} is also used by the generated {simple_name(name)}",
                )
            owners[path] = name

        self.backend.check_layout(names)

    # Rendering

    def iter_rendered(self, registry: ClassRegistry) -> Iterator[RenderedArtifact]:
        """
        Render artifacts one at a time: every class in declaration order,
        then the API, then the visitor. The layout is checked before the
        first artifact is rendered.
        """
        self.check_layout(registry)

        for descriptor in registry:
            context = self.class_context(descriptor)
            yield RenderedArtifact(
                KIND_CLASS,
                context.name,
                self.backend.output_path(context.name),
                self.backend.render_class(context),
            )

        api = self.api_context(registry)
        yield RenderedArtifact(
            KIND_API, api.name, self.backend.output_path(api.name), self.backend.render_api(api)
        )

        visitor = self.visitor_context(registry)
        yield RenderedArtifact(
            KIND_VISITOR,
            visitor.name,
            self.backend.output_path(visitor.name),
            self.backend.render_visitor(visitor),
        )

    def render(self, registry: ClassRegistry) -> Dict[str, str]:
        """Render everything in memory, keyed by POSIX relative path."""
        return {str(a.path): a.text for a in self.iter_rendered(registry)}

    def generate(self, registry: ClassRegistry) -> GenerationResult:
        """
        Render and write every artifact.

        Returns:
            GenerationResult listing the artifacts in emission order.

        Raises:
            OutputConflictError: If two artifacts would share an output path.
            RenderError: If the backend fails to render an artifact.
            OutputWriteError: If the writer fails to store an artifact.
        """
        result = GenerationResult(
            metadata={
                "language": self.backend.language_name,
                "file_extension": self.backend.file_extension,
                "prefix": self.prefix,
                "output_dir": self.config.output_dir,
                "class_count": len(registry),
                "concrete_count": len(registry.concrete_classes()),
            }
        )

        for rendered in self.iter_rendered(registry):
            written = self.writer.write(rendered.path, rendered.text)
            result.artifacts.append(
                Artifact(rendered.kind, rendered.name, rendered.path, written)
            )
            logger.debug(
                "%s %s -> %s%s",
                rendered.kind,
                rendered.name,
                rendered.path,
                "" if written else " (unchanged)",
            )

        logger.info(
            "generated %d artifacts (%d written) for %s",
            len(result.artifacts),
            result.written_count,
            self.backend.language_name,
        )
        return result


def generate_code(
    registry: ClassRegistry,
    backend: Backend,
    config: Optional[GeneratorConfig] = None,
    writer: Optional[OutputWriter] = None,
) -> GenerationResult:
    """Generate every artifact for ``registry`` with the given backend."""
    return CodeGenerationDriver(backend, config, writer).generate(registry)
