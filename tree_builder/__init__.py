"""
Tree Builder

Compiles a small class-declaration language into tree classes, a
shorthand-constructor API and a default visitor for a target language.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from .codegen import GenerationResult, GeneratorConfig, get_backend, load_config
from .codegen.core.driver import CodeGenerationDriver
from .codegen.core.writer import OutputWriter
from .errors import TreeBuildError
from .model import ClassRegistry
from .parser import parse_text

__version__ = "0.1.0"


def build_registry(text: str) -> ClassRegistry:
    """
    Tokenize, parse and resolve a class configuration.

    Args:
        text: Configuration source text

    Returns:
        The finished ClassRegistry

    Raises:
        TreeBuildError: The first lexical, syntax or semantic error
    """
    return ClassRegistry.build(parse_text(text))


def generate_tree(
    text: str,
    language: str = "perl",
    config: Optional[Union[GeneratorConfig, Dict[str, Any], str, Path]] = None,
    writer: Optional[OutputWriter] = None,
) -> GenerationResult:
    """
    Build a registry from ``text`` and generate every artifact.

    Args:
        text: Configuration source text
        language: Backend language name or alias
        config: GeneratorConfig, dict of overrides (``prefix``,
            ``output_dir``, ...) or path to a JSON settings file
        writer: Output writer (defaults to files below ``output_dir``)

    Returns:
        GenerationResult describing the emitted artifacts
    """
    registry = build_registry(text)
    if isinstance(config, GeneratorConfig):
        final_config = config
    elif isinstance(config, (str, Path)):
        final_config = load_config(language, config_file=config)
    else:
        final_config = load_config(language, custom_config=config)
    backend = get_backend(language, final_config)
    return CodeGenerationDriver(backend, final_config, writer).generate(registry)


__all__ = [
    "ClassRegistry",
    "GenerationResult",
    "GeneratorConfig",
    "TreeBuildError",
    "__version__",
    "build_registry",
    "generate_tree",
]
