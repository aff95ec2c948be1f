"""
Configuration management for code generation.

Handles loading and merging generation settings from JSON files,
providing defaults and validation for backend settings.
"""

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ...errors import ConfigError
from ...logging_config import get_logger
from ...naming import normalize_prefix, split_qualified

logger = get_logger(__name__)


@dataclass
class GeneratorConfig:
    """Settings for one generation run."""

    # Output settings
    output_dir: str = "."
    prefix: str = ""
    language: str = "perl"

    # Generated code settings
    indent_size: int = 4
    add_comments: bool = True

    # Write only files whose content changed
    write_if_changed: bool = True

    # Custom settings (backend-specific)
    custom: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.prefix = normalize_prefix(self.prefix)


# Expected types of the settings that map onto GeneratorConfig fields
_SETTING_TYPES: Dict[str, Tuple[type, ...]] = {
    "output_dir": (str, Path),
    "prefix": (str,),
    "language": (str,),
    "indent_size": (int,),
    "add_comments": (bool,),
    "write_if_changed": (bool,),
    "custom": (dict,),
}


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}

    def _defaults_for(self, language: str) -> Dict[str, Any]:
        """Defaults for a language, taken from its backend class."""
        if language not in self._configs:
            from ..registry import get_registry

            registry = get_registry()
            defaults: Dict[str, Any] = {"language": language}
            if registry.is_supported(language):
                backend_class = registry.get_backend_class(language)
                defaults["language"] = registry.resolve_name(language)
                defaults["custom"] = dict(backend_class.default_options)
            self._configs[language] = defaults

        base = dict(self._configs[language])
        base["custom"] = dict(base.get("custom", {}))
        return base

    def get_config(
        self,
        language: str,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language name
            custom_config: Explicit overrides (highest priority)
            config_file: Path to JSON settings file

        Returns:
            Merged configuration for the language
        """
        base_config = self._defaults_for(language.lower())
        target = base_config["language"]

        if config_file:
            settings = self._load_config_file(config_file)
            self._check_language(settings, target, f"settings file {config_file}")
            self._merge(base_config, settings)

        if custom_config:
            self._check_language(custom_config, target, "overrides")
            self._merge(base_config, custom_config)

        return self._dict_to_config(base_config)

    def _check_language(self, settings: Dict[str, Any], target: str, source: str):
        """The target language is chosen by the caller; settings may only repeat it."""
        requested = settings.get("language")
        if requested is None:
            return
        if not isinstance(requested, str):
            raise ConfigError(f"Setting 'language' in {source} must be a string")

        from ..registry import get_registry

        registry = get_registry()
        name = requested.lower()
        if registry.is_supported(name):
            name = registry.resolve_name(name)
        if name != target:
            raise ConfigError(
                f"Language '{requested}' in {source} does not match the "
                f"target language '{target}'"
            )

    def _merge(self, base: Dict[str, Any], overrides: Dict[str, Any]):
        for key, value in overrides.items():
            if key == "custom" and isinstance(value, dict):
                base.setdefault("custom", {}).update(value)
            else:
                base[key] = value

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in configuration file {path}: {e}"
            ) from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        logger.debug("loaded settings from %s: %s", path, sorted(config))
        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                self._check_type(key, value)
                config_args[key] = value
            else:
                custom_args[key] = value

        # Unknown keys are backend-specific settings
        if custom_args:
            existing_custom = config_args.get("custom", {})
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return GeneratorConfig(**config_args)

    def _check_type(self, key: str, value: Any):
        expected = _SETTING_TYPES.get(key)
        if expected is None:
            return
        # bool is an int subclass
        if isinstance(value, bool) and bool not in expected:
            valid = False
        else:
            valid = isinstance(value, expected)
        if not valid:
            names = " or ".join(t.__name__ for t in expected)
            raise ConfigError(
                f"Setting '{key}' must be {names}, got {type(value).__name__}: {value!r}"
            )

    def validate_config(self, config: GeneratorConfig) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation warnings
        """
        warnings = []

        for segment in split_qualified(config.prefix):
            if not segment.isidentifier():
                warnings.append(f"Prefix segment is not an identifier: {segment!r}")

        if config.indent_size < 1:
            warnings.append(f"Indent size must be positive, got {config.indent_size}")

        if not config.output_dir:
            warnings.append("Empty output directory, using current directory")

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: str = "perl",
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Target language name
        custom_config: Explicit overrides
        config_file: Path to JSON settings file

    Returns:
        Merged configuration for the language
    """
    manager = get_config_manager()
    return manager.get_config(language, custom_config, config_file)
