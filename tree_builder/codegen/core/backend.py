"""
Base backend interface for all target languages.

Defines the contract every language backend implements: four renderers
(abstract class, concrete class, API, visitor) plus the mapping from a
qualified class name to an output file path. The driver depends only on
this interface.
"""

from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Any, Callable, Dict, Optional, Sequence

from ...logging_config import get_logger
from ...naming import split_qualified
from .config import GeneratorConfig
from .context import ApiContext, ClassContext, RenderOptions, VisitorContext
from .templates import TemplateEngine, create_template_engine

logger = get_logger(__name__)


class Backend(ABC):
    """Abstract base class for all language backends."""

    # Template file names, relative to the backend's template directory
    abstract_template = "abstract_class.j2"
    concrete_template = "concrete_class.j2"
    api_template = "api.j2"
    visitor_template = "visitor.j2"

    # Backend-specific settings and their defaults (GeneratorConfig.custom)
    default_options: Dict[str, Any] = {}

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize backend with optional configuration."""
        self.config = config or GeneratorConfig(language=self.language_name)
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        self._template_engine = create_template_engine(
            self.get_template_directory(), self.template_filters()
        )

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'perl', 'python')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.pm', '.py')."""
        pass

    @abstractmethod
    def get_template_directory(self) -> Path:
        """Return the directory containing templates for this backend."""
        pass

    def template_filters(self) -> Dict[str, Callable]:
        """Extra Jinja2 filters this backend's templates use."""
        return {}

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this backend."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @property
    def render_options(self) -> RenderOptions:
        extra = dict(self.default_options)
        extra.update(self.config.custom)
        return RenderOptions(
            indent_size=self.config.indent_size,
            add_comments=self.config.add_comments,
            extra=extra,
        )

    # Output locations

    def output_path(self, qualified_name: str) -> PurePosixPath:
        """
        Map a qualified name to a path relative to the output root.

        Every namespace segment becomes a directory; the last segment
        becomes the file name with the backend's extension.
        """
        parts = split_qualified(qualified_name)
        return PurePosixPath(*parts[:-1], parts[-1] + self.file_extension)

    def check_layout(self, names: Sequence[str]):
        """
        Reject class names whose output files cannot live side by side.

        Called once per run, before anything is rendered, with the qualified
        name of every artifact: each class, then the API and the visitor.
        """
        pass

    # Template variables, overridden by backends that need more than the
    # plain context

    def class_variables(self, context: ClassContext) -> Dict[str, Any]:
        variables = context.as_dict()
        variables["options"] = self.render_options
        return variables

    def api_variables(self, context: ApiContext) -> Dict[str, Any]:
        variables = context.as_dict()
        variables["options"] = self.render_options
        return variables

    def visitor_variables(self, context: VisitorContext) -> Dict[str, Any]:
        variables = context.as_dict()
        variables["options"] = self.render_options
        return variables

    # Renderers

    def render_class(self, context: ClassContext) -> str:
        """Render a per-class artifact, choosing the abstract or concrete renderer."""
        if context.is_abstract:
            return self.render_abstract_class(context)
        return self.render_concrete_class(context)

    def render_abstract_class(self, context: ClassContext) -> str:
        code = self.render_template(self.abstract_template, self.class_variables(context))
        return self.format_code(code)

    def render_concrete_class(self, context: ClassContext) -> str:
        code = self.render_template(self.concrete_template, self.class_variables(context))
        return self.format_code(code)

    def render_api(self, context: ApiContext) -> str:
        code = self.render_template(self.api_template, self.api_variables(context))
        return self.format_code(code)

    def render_visitor(self, context: VisitorContext) -> str:
        code = self.render_template(self.visitor_template, self.visitor_variables(context))
        return self.format_code(code)

    def format_code(self, code: str) -> str:
        """
        Apply language-specific formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code ending in exactly one newline
        """
        # Basic cleanup - remove excessive blank lines
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 2:  # Allow max 2 consecutive blank lines
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n") + "\n"

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with context."""
        logger.debug("%s: rendering %s", self.language_name, template_name)
        return self.template_engine.render_template(template_name, context)

    def template_exists(self, template_name: str) -> bool:
        """Check if a template exists."""
        return self.template_engine.template_exists(template_name)
