"""
Core accessor generation components.

Provides the directive model, the classify / plan / emit pipeline and the
base classes used by all language generators.
"""

from .generator import AccessorGenerator, GeneratorError, GeneratedUnit
from .schema import (
    CarrierType,
    Declaration,
    DeclarationPlan,
    Diagnostic,
    Directive,
    Field,
    PlannedAccessor,
    ResultType,
    Severity,
    DateToText,
    IntegerToDate,
    IntegerToText,
    TextToDate,
    TextToText,
)
from .classifier import (
    ClassificationError,
    MissingDirectiveError,
    UnsupportedTypeError,
    classify_field,
)
from .planner import AccessorPlanner, DuplicateAccessorError
from .discovery import DiscoveryError, discover_file, discover_manifest, discover_source
from .processor import (
    DateTimeExtensionProcessor,
    ProcessingResult,
    process_declarations,
    process_manifest,
    process_sources,
)
from .output import is_up_to_date, write_units
from .naming import NameSanitizer, NamingCase
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "AccessorGenerator",
    "GeneratorError",
    "GeneratedUnit",
    # Schema - directives, declarations, plans
    "CarrierType",
    "Declaration",
    "DeclarationPlan",
    "Diagnostic",
    "Directive",
    "Field",
    "PlannedAccessor",
    "ResultType",
    "Severity",
    "DateToText",
    "IntegerToDate",
    "IntegerToText",
    "TextToDate",
    "TextToText",
    # Pipeline
    "ClassificationError",
    "MissingDirectiveError",
    "UnsupportedTypeError",
    "DuplicateAccessorError",
    "classify_field",
    "AccessorPlanner",
    "DiscoveryError",
    "discover_file",
    "discover_manifest",
    "discover_source",
    "DateTimeExtensionProcessor",
    "ProcessingResult",
    "process_declarations",
    "process_manifest",
    "process_sources",
    "is_up_to_date",
    "write_units",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "NamingCase",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system - language-agnostic
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
