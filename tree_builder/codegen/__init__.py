"""
Tree Builder Code Generation Module

Generates tree classes, an API module and a visitor in various languages
from a class registry.
"""

from .core import (
    Backend,
    CodeGenerationDriver,
    FileWriter,
    GenerationResult,
    GeneratorConfig,
    MemoryWriter,
    generate_code,
    load_config,
)
from .registry import (
    BackendRegistry,
    get_backend,
    get_language_info,
    get_registry,
    is_language_supported,
    list_all_language_info,
    list_supported_languages,
    register_backend,
)

__all__ = [
    "Backend",
    "BackendRegistry",
    "CodeGenerationDriver",
    "FileWriter",
    "GenerationResult",
    "GeneratorConfig",
    "MemoryWriter",
    "generate_code",
    "get_backend",
    "get_language_info",
    "get_registry",
    "is_language_supported",
    "list_all_language_info",
    "list_supported_languages",
    "load_config",
    "register_backend",
]
