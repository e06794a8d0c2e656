"""
Configuration management for accessor generation.

Handles loading and merging configuration from JSON files,
providing per-language defaults and validation for generator settings.
"""

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""
    pass


@dataclass
class GeneratorConfig:
    """Base configuration for accessor generators."""

    # Output settings
    output_dir: Optional[str] = None
    unit_suffix: str = "_nx_datetime"
    unit_name_case: str = "snake"  # snake, pascal

    # Naming settings
    family_label_case: str = "pascal"  # pascal -> String_/Date_, lower -> string_/date_

    # Code style settings
    indent_size: int = 4
    add_comments: bool = True

    # Discovery
    marker_name: str = "datetime_extension"

    # Where generated code finds the runtime helpers
    helper_module: str = "nx_datetime.runtime"

    # Language-specific settings
    language_config: Dict[str, Any] = field(default_factory=dict)


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported languages."""
        # Python defaults
        self._configs["python"] = {
            "unit_suffix": "_nx_datetime",
            "unit_name_case": "snake",
            "family_label_case": "pascal",
            "indent_size": 4,
            "add_comments": True,
            "helper_module": "nx_datetime.runtime",
            "language_config": {
                "optional_style": "union",  # union -> X | None, optional -> Optional[X]
            },
        }

        # Kotlin defaults
        self._configs["kotlin"] = {
            "unit_suffix": "_NXDateExtension",
            "unit_name_case": "pascal",
            "family_label_case": "pascal",
            "indent_size": 4,
            "add_comments": True,
            "helper_module": "com.smh.annotation",
            "language_config": {
                "date_type": "java.util.Date",
            },
        }

    def get_config(
        self,
        language: str = "python",
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language name
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration for the language
        """
        base_config = json.loads(json.dumps(self._configs.get(language.lower(), {})))

        if config_file:
            self._merge(base_config, self._load_config_file(config_file))

        if custom_config:
            self._merge(base_config, custom_config)

        return self._dict_to_config(base_config)

    @staticmethod
    def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        """Shallow merge, except language_config which merges key by key."""
        for key, value in overrides.items():
            if key == "language_config" and isinstance(value, dict):
                base.setdefault("language_config", {}).update(value)
            else:
                base[key] = value

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = set(GeneratorConfig.__dataclass_fields__)

        config_args = {}
        language_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                language_args[key] = value

        # Unknown keys are language-specific settings
        if language_args:
            existing = dict(config_args.get("language_config", {}))
            existing.update(language_args)
            config_args["language_config"] = existing

        return GeneratorConfig(**config_args)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(asdict(config), f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e

    def list_languages(self) -> List[str]:
        """Get list of languages with default configurations."""
        return list(self._configs.keys())

    def validate_config(self, config: GeneratorConfig, language: str) -> List[str]:
        """
        Validate configuration for a language.

        Returns:
            List of validation warnings
        """
        warnings = []

        if config.family_label_case not in {"pascal", "lower"}:
            warnings.append(f"Invalid family_label_case: {config.family_label_case}")

        if config.unit_name_case not in {"snake", "pascal"}:
            warnings.append(f"Invalid unit_name_case: {config.unit_name_case}")

        if not config.unit_suffix:
            warnings.append("Empty unit_suffix - generated units may collide with sources")

        if config.indent_size < 1:
            warnings.append(f"Invalid indent_size: {config.indent_size}")

        if not config.marker_name.isidentifier():
            warnings.append(f"Invalid marker_name: {config.marker_name}")

        module_parts = config.helper_module.split(".")
        if not all(part.isidentifier() for part in module_parts):
            warnings.append(f"Invalid helper_module: {config.helper_module}")

        if language == "python":
            style = config.language_config.get("optional_style", "union")
            if style not in {"union", "optional"}:
                warnings.append(f"Invalid optional_style: {style}")

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
    language: str = "python",
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Target language name
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration for the language
    """
    manager = get_config_manager()
    return manager.get_config(language, custom_config, config_file)


# Example configuration file for reference
EXAMPLE_PYTHON_CONFIG = {
    "output_dir": "generated",
    "family_label_case": "lower",
    "add_comments": True,
    "optional_style": "optional",
}
