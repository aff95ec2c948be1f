"""
Core code generation components.

Provides the backend contract, render contexts, configuration, templates,
output writers and the driver that ties them together.
"""

from .backend import Backend
from .config import ConfigManager, GeneratorConfig, load_config
from .context import (
    ApiContext,
    ApiEntry,
    ClassContext,
    FieldContext,
    RenderOptions,
    VisitMethod,
    VisitorContext,
)
from .driver import (
    Artifact,
    CodeGenerationDriver,
    GenerationResult,
    RenderedArtifact,
    generate_code,
)
from .templates import TemplateEngine, create_template_engine
from .writer import FileWriter, MemoryWriter, OutputWriter

__all__ = [
    # Backend interface
    "Backend",
    # Render contexts
    "ApiContext",
    "ApiEntry",
    "ClassContext",
    "FieldContext",
    "RenderOptions",
    "VisitMethod",
    "VisitorContext",
    # Driver
    "Artifact",
    "CodeGenerationDriver",
    "GenerationResult",
    "RenderedArtifact",
    "generate_code",
    # Configuration system
    "ConfigManager",
    "GeneratorConfig",
    "load_config",
    # Template system
    "TemplateEngine",
    "create_template_engine",
    # Output
    "FileWriter",
    "MemoryWriter",
    "OutputWriter",
]
