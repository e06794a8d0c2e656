"""
nx_datetime Code Generation Module

Generates date/time accessors for marked declarations in Python or Kotlin.
"""

from .registry import GeneratorRegistry, get_generator, list_supported_languages
from .core.generator import AccessorGenerator, GeneratedUnit
from .core.processor import (
    DateTimeExtensionProcessor,
    ProcessingResult,
    process_declarations,
    process_manifest,
    process_sources,
)
from .core.schema import Declaration, Field
from .core.config import GeneratorConfig, ConfigManager, load_config


def quick_generate(source, module_name="__main__", language="python", **options):
    """
    Quick accessor generation from Python source text.

    Args:
        source: Python source containing marked classes
        module_name: Module the classes live in
        language: Target language
        **options: Generator options

    Returns:
        Dict mapping declaration name to generated code
    """
    from .core.discovery import discover_source

    discovered = discover_source(source, module_name)
    result = process_declarations(
        discovered.declarations, language=language, config=options or None
    )

    if not result.success:
        raise RuntimeError(f"Accessor generation failed: {result.error_message}")

    return {unit.declaration: unit.code for unit in result.units}


# Export main interfaces
__all__ = [
    "GeneratorRegistry",
    "AccessorGenerator",
    "GeneratedUnit",
    "DateTimeExtensionProcessor",
    "ProcessingResult",
    "Declaration",
    "Field",
    "GeneratorConfig",
    "ConfigManager",
    "load_config",
    "process_declarations",
    "process_manifest",
    "process_sources",
    "quick_generate",
    "get_generator",
    "list_supported_languages",
]
