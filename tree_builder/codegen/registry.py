"""
Backend registry: language identifiers and aliases to Backend classes.

The module-level registry is created on first use and registers the
bundled backends. Tests and embedding code may build their own
BackendRegistry instead.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Type, Union

from ..errors import BackendRegistryError, UnknownBackendError
from ..logging_config import get_logger
from .core.backend import Backend
from .core.config import GeneratorConfig, load_config

logger = get_logger(__name__)

ConfigSource = Union[GeneratorConfig, Dict[str, Any], str, Path, None]


class BackendRegistry:
    """Table of registered backends, looked up case-insensitively."""

    def __init__(self):
        self._backends: Dict[str, Type[Backend]] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        language: str,
        backend_class: Type[Backend],
        aliases: Iterable[str] = (),
        replace: bool = False,
    ):
        """
        Register ``backend_class`` under ``language`` and its aliases.

        A language that is already registered is left alone unless
        ``replace`` is set.

        Raises:
            BackendRegistryError: If ``backend_class`` is not a Backend
                subclass, or an alias is taken by another language.
        """
        if not (isinstance(backend_class, type) and issubclass(backend_class, Backend)):
            raise BackendRegistryError(
                f"{backend_class!r} is not a Backend subclass"
            )

        key = language.lower()
        if key in self._backends and not replace:
            return

        alias_keys = [a.lower() for a in aliases if a.lower() != key]
        if not replace:
            for alias in alias_keys:
                if alias in self._backends:
                    raise BackendRegistryError(
                        f"Alias '{alias}' is already a language name"
                    )
                owner = self._aliases.get(alias)
                if owner is not None and owner != key:
                    raise BackendRegistryError(
                        f"Alias '{alias}' already refers to '{owner}'"
                    )

        self._backends[key] = backend_class
        for alias in alias_keys:
            self._aliases[alias] = key

        logger.debug("registered backend %s (%s)", key, backend_class.__name__)

    def unregister(self, language: str):
        """Remove a language together with its aliases."""
        key = language.lower()
        self._backends.pop(key, None)
        for alias in self.get_aliases_for_language(key):
            del self._aliases[alias]

    def resolve_name(self, language: str) -> str:
        """
        Primary language name for a name or alias.

        Raises:
            UnknownBackendError: If nothing is registered under that name.
        """
        key = language.lower()
        if key in self._backends:
            return key
        try:
            return self._aliases[key]
        except KeyError:
            raise UnknownBackendError(language, self.list_languages()) from None

    def get_backend_class(self, language: str) -> Type[Backend]:
        return self._backends[self.resolve_name(language)]

    def create_backend(self, language: str, config: ConfigSource = None) -> Backend:
        """
        Instantiate the backend for ``language``.

        Args:
            language: Language name or alias
            config: A GeneratorConfig used as is, a dict of overrides, a path
                to a JSON settings file, or None for the defaults

        Raises:
            UnknownBackendError: If the language is not registered.
            ConfigError: If a settings file cannot be loaded.
        """
        primary = self.resolve_name(language)

        if isinstance(config, GeneratorConfig):
            final_config = config
        elif isinstance(config, (str, Path)):
            final_config = load_config(primary, config_file=config)
        elif config is None or isinstance(config, dict):
            final_config = load_config(primary, custom_config=config)
        else:
            raise BackendRegistryError(
                f"Unsupported config type: {type(config).__name__}"
            )

        return self._backends[primary](final_config)

    def list_languages(self) -> List[str]:
        return sorted(self._backends)

    def get_aliases_for_language(self, language: str) -> List[str]:
        key = language.lower()
        return sorted(alias for alias, target in self._aliases.items() if target == key)

    def is_supported(self, language: str) -> bool:
        key = language.lower()
        return key in self._backends or key in self._aliases

    def get_language_info(self, language: str) -> Dict[str, Any]:
        """
        Describe a registered language.

        Returns:
            Dict with name, class, file_extension, aliases, module and the
            backend's default options.
        """
        key = self.resolve_name(language)
        backend_class = self._backends[key]
        backend = backend_class(GeneratorConfig(language=key))

        return {
            "name": backend.language_name,
            "class": backend_class.__name__,
            "file_extension": backend.file_extension,
            "aliases": self.get_aliases_for_language(key),
            "module": backend_class.__module__,
            "options": dict(backend_class.default_options),
        }


_global_registry: Optional[BackendRegistry] = None


def get_registry() -> BackendRegistry:
    """Return the shared registry, registering the bundled backends first."""
    global _global_registry
    if _global_registry is None:
        _global_registry = BackendRegistry()
        _register_bundled_backends(_global_registry)
    return _global_registry


def _register_bundled_backends(registry: BackendRegistry):
    from .languages.perl import PerlBackend
    from .languages.python import PythonBackend

    registry.register("perl", PerlBackend, aliases=["pl", "perl5"])
    registry.register("python", PythonBackend, aliases=["py"])


# Shortcuts on the shared registry


def register_backend(
    language: str, backend_class: Type[Backend], aliases: Iterable[str] = ()
):
    get_registry().register(language, backend_class, aliases)


def get_backend(language: str, config: ConfigSource = None) -> Backend:
    return get_registry().create_backend(language, config)


def list_supported_languages() -> List[str]:
    return get_registry().list_languages()


def is_language_supported(language: str) -> bool:
    return get_registry().is_supported(language)


def get_language_info(language: str) -> Dict[str, Any]:
    return get_registry().get_language_info(language)


def list_all_language_info() -> Dict[str, Dict[str, Any]]:
    """Language info for every registered backend, keyed by language."""
    return {
        language: get_language_info(language)
        for language in list_supported_languages()
    }
