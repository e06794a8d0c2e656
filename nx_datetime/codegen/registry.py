"""
Registry of accessor generators by target language.

Maps language names and their aliases (``py``, ``kt``) to generator
classes and builds configured generator instances for the CLI and the
generation driver.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union

from .core.config import GeneratorConfig, load_config
from .core.generator import AccessorGenerator
from .core.schema import Declaration

# Declaration used to show each language's unit file naming
EXAMPLE_DECLARATION = Declaration(name="DateTest", namespace="")

ConfigSource = Union[GeneratorConfig, Dict[str, Any], str, Path, None]


class RegistryError(Exception):
    """Exception raised for registry-related errors."""

    pass


class GeneratorRegistry:
    """Language name -> generator class lookup."""

    def __init__(self):
        self._generators: Dict[str, Type[AccessorGenerator]] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        language: str,
        generator_class: Type[AccessorGenerator],
        aliases: Optional[List[str]] = None,
    ):
        """
        Register a generator class under a language name and its aliases.

        Raises:
            RegistryError: If the class is not an AccessorGenerator or an
                alias is already taken by another language
        """
        if not issubclass(generator_class, AccessorGenerator):
            raise RegistryError(
                f"{generator_class.__name__} must inherit from AccessorGenerator"
            )

        language_key = language.lower()
        for alias in aliases or []:
            alias_key = alias.lower()
            if alias_key == language_key:
                continue
            owner = self._aliases.get(alias_key, alias_key if alias_key in self._generators else None)
            if owner is not None and owner != language_key:
                raise RegistryError(f"Alias '{alias}' already refers to '{owner}'")
            self._aliases[alias_key] = language_key

        self._generators[language_key] = generator_class

    def resolve_language(self, language: str) -> str:
        """Primary name for a language name or alias."""
        language_key = language.lower()
        return self._aliases.get(language_key, language_key)

    def is_supported(self, language: str) -> bool:
        return self.resolve_language(language) in self._generators

    def list_languages(self) -> List[str]:
        """Registered primary language names, sorted."""
        return sorted(self._generators)

    def get_generator_class(self, language: str) -> Type[AccessorGenerator]:
        """
        Generator class for a language name or alias.

        Raises:
            RegistryError: If the language is not registered
        """
        try:
            return self._generators[self.resolve_language(language)]
        except KeyError:
            raise RegistryError(
                f"No generator registered for language: {language}. "
                f"Available: {', '.join(self.list_languages())}"
            ) from None

    def create_generator(self, language: str, config: ConfigSource = None) -> AccessorGenerator:
        """
        Build a configured generator.

        Args:
            language: Language name or alias
            config: GeneratorConfig, dict of overrides, config file path, or
                None for the language defaults

        Returns:
            Generator instance

        Raises:
            RegistryError: If the language is unknown or the config is unusable
        """
        generator_class = self.get_generator_class(language)
        language_key = self.resolve_language(language)

        if config is not None and not isinstance(config, (GeneratorConfig, dict, str, Path)):
            raise RegistryError(f"Invalid config type: {type(config)}")

        try:
            if isinstance(config, GeneratorConfig):
                final_config = config
            elif isinstance(config, dict):
                final_config = load_config(language_key, custom_config=config)
            elif config is not None:
                final_config = load_config(language_key, config_file=config)
            else:
                final_config = load_config(language_key)

            return generator_class(final_config)
        except Exception as e:
            raise RegistryError(f"Failed to create {language} generator: {e}") from e

    def get_language_info(self, language: str) -> Dict[str, Any]:
        """
        Describe a registered language for ``--language-info``.

        Raises:
            RegistryError: If the language is not registered
        """
        language_key = self.resolve_language(language)
        generator = self.create_generator(language_key)

        return {
            "name": generator.language_name,
            "class": type(generator).__name__,
            "module": type(generator).__module__,
            "file_extension": generator.file_extension,
            "aliases": sorted(a for a, target in self._aliases.items() if target == language_key),
            "unit_suffix": generator.config.unit_suffix,
            "helper_module": generator.config.helper_module,
            "example_file": generator.unit_file_name(EXAMPLE_DECLARATION),
        }


_global_registry: Optional[GeneratorRegistry] = None


def get_registry() -> GeneratorRegistry:
    """The shared registry, with the built-in languages registered."""
    global _global_registry
    if _global_registry is None:
        from .languages.kotlin import KotlinGenerator
        from .languages.python import PythonGenerator

        _global_registry = GeneratorRegistry()
        _global_registry.register("python", PythonGenerator, aliases=["py"])
        _global_registry.register("kotlin", KotlinGenerator, aliases=["kt"])
    return _global_registry


def get_generator(language: str, config: ConfigSource = None) -> AccessorGenerator:
    """Configured generator from the shared registry."""
    return get_registry().create_generator(language, config)


def list_supported_languages() -> List[str]:
    return get_registry().list_languages()


def get_language_info(language: str) -> Dict[str, Any]:
    return get_registry().get_language_info(language)


def list_all_language_info() -> Dict[str, Dict[str, Any]]:
    """Language info for every registered language, skipping broken ones."""
    result = {}
    for language in list_supported_languages():
        try:
            result[language] = get_language_info(language)
        except RegistryError:
            continue
    return result
