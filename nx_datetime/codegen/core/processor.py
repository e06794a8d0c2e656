"""
Generation driver.

Runs the single forward pass Classifier -> Planner -> Generator over every
discovered declaration, turning field-scoped failures into diagnostics so
one malformed field never stops the rest of the pass.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from nx_datetime.logging_config import get_logger
from nx_datetime.utils import SourceLoaderError

from .classifier import ClassificationError, ClassifiedField, classify_field
from .discovery import (
    DiscoveryError,
    DiscoveryResult,
    discover_file,
    discover_manifest,
)
from .generator import AccessorGenerator, GeneratedUnit, GeneratorError
from .planner import AccessorPlanner
from .schema import Declaration, Diagnostic, Severity
from .templates import TemplateError

logger = get_logger(__name__)


@dataclass
class ProcessingResult:
    """Units and diagnostics produced by one generation pass."""

    units: List[GeneratedUnit] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    # Generation never defers symbols; kept for hosts expecting a work list
    deferred: List[Declaration] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    success: bool = True
    error_message: Optional[str] = None
    exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "ProcessingResult":
        """Create a failed processing result."""
        return cls(success=False, error_message=message, exception=exception)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        return not self.success or bool(self.errors)

    def unit_for(self, declaration: str) -> Optional[GeneratedUnit]:
        """Unit generated for a qualified or simple declaration name."""
        for unit in self.units:
            if unit.declaration == declaration or unit.declaration.rsplit(".", 1)[-1] == declaration:
                return unit
        return None


def diagnostic_from_error(
    error: Union[ClassificationError, GeneratorError, TemplateError, DiscoveryError],
    declaration: Optional[Declaration] = None,
    source_path: Optional[str] = None,
) -> Diagnostic:
    """Wrap an exception into an ERROR diagnostic."""
    return Diagnostic(
        severity=Severity.ERROR,
        code=getattr(error, "code", type(error).__name__),
        message=str(error),
        declaration=getattr(error, "declaration", None)
        or (declaration.qualified_name if declaration else None),
        field=getattr(error, "field_name", None),
        source_path=source_path or (declaration.source_path if declaration else None),
    )


class DateTimeExtensionProcessor:
    """Generates accessor units for marked declarations."""

    def __init__(self, generator: AccessorGenerator):
        """
        Initialize the processor.

        Args:
            generator: Target-language generator; its config drives planning
        """
        self.generator = generator
        self.config = generator.config
        self.planner = AccessorPlanner(self.config)

    def process(self, declarations: Iterable[Declaration]) -> ProcessingResult:
        """
        Run one generation pass.

        Args:
            declarations: Declarations carrying the extension marker

        Returns:
            ProcessingResult with one unit per declaration that could be
            emitted and every diagnostic raised on the way
        """
        declarations = list(declarations)
        logger.info("Generating for %s", ", ".join(d.name for d in declarations))

        result = ProcessingResult()
        try:
            for declaration in declarations:
                unit, diagnostics = self.process_declaration(declaration)
                if unit is not None:
                    result.units.append(unit)
                result.diagnostics.extend(diagnostics)
        except Exception as e:
            logger.exception("Accessor generation failed")
            return ProcessingResult.error(f"Accessor generation failed: {e}", exception=e)

        result.metadata = self._build_metadata(declarations, result)
        return result

    def process_declaration(
        self, declaration: Declaration
    ) -> Tuple[Optional[GeneratedUnit], List[Diagnostic]]:
        """
        Classify, plan and emit one declaration.

        Args:
            declaration: Declaration to process

        Returns:
            The unit (None only if rendering itself failed) and diagnostics
        """
        diagnostics: List[Diagnostic] = []
        classified: List[ClassifiedField] = []

        for field_obj in declaration.fields:
            try:
                classified.append(classify_field(declaration, field_obj))
            except ClassificationError as e:
                logger.error("%s", e)
                diagnostics.append(diagnostic_from_error(e, declaration))

        plan, collisions = self.planner.plan_declaration(declaration, classified)
        for error in collisions:
            logger.error("%s", error)
            diagnostics.append(diagnostic_from_error(error, declaration))

        for warning in self.generator.validate_plan(plan):
            logger.warning("%s", warning)
            diagnostics.append(
                Diagnostic(
                    severity=Severity.WARNING,
                    code="GeneratorWarning",
                    message=warning,
                    declaration=declaration.qualified_name,
                    source_path=declaration.source_path,
                )
            )

        try:
            unit = self.generator.generate_unit(plan)
        except (GeneratorError, TemplateError) as e:
            logger.error("%s", e)
            diagnostics.append(diagnostic_from_error(e, declaration))
            return None, diagnostics

        return unit, diagnostics

    def _build_metadata(
        self, declarations: List[Declaration], result: ProcessingResult
    ) -> Dict[str, Any]:
        return {
            "language": self.generator.language_name,
            "file_extension": self.generator.file_extension,
            "declaration_count": len(declarations),
            "unit_count": len(result.units),
            "accessor_count": sum(len(u.accessor_names) for u in result.units),
            "error_count": len(result.errors),
            "warning_count": len(result.warnings),
        }


def _processor_for(
    generator: Optional[AccessorGenerator], language: str, config: Any
) -> DateTimeExtensionProcessor:
    if generator is None:
        from ..registry import get_generator

        generator = get_generator(language, config)
    return DateTimeExtensionProcessor(generator)


def process_declarations(
    declarations: Iterable[Declaration],
    language: str = "python",
    config: Any = None,
    generator: Optional[AccessorGenerator] = None,
) -> ProcessingResult:
    """
    Generate units for already-built declarations.

    Args:
        declarations: Declarations to process
        language: Target language when no generator is given
        config: GeneratorConfig, dict of overrides or config file path
        generator: Ready generator instance (takes precedence)

    Returns:
        ProcessingResult
    """
    return _processor_for(generator, language, config).process(declarations)


def _merge_discovery(
    processor: DateTimeExtensionProcessor, discovered: DiscoveryResult
) -> ProcessingResult:
    result = processor.process(discovered.declarations)
    result.diagnostics[:0] = discovered.diagnostics
    if result.success:
        result.metadata["error_count"] = len(result.errors)
    return result


def process_sources(
    paths: Iterable[Union[str, Path]],
    language: str = "python",
    config: Any = None,
    generator: Optional[AccessorGenerator] = None,
) -> ProcessingResult:
    """
    Discover declarations in Python files and generate their units.

    Files that can't be read or parsed are reported and skipped.

    Args:
        paths: Python source files
        language: Target language when no generator is given
        config: GeneratorConfig, dict of overrides or config file path
        generator: Ready generator instance (takes precedence)

    Returns:
        ProcessingResult
    """
    processor = _processor_for(generator, language, config)
    discovered = DiscoveryResult()

    for path in paths:
        try:
            found = discover_file(path, marker_name=processor.config.marker_name)
        except (DiscoveryError, SourceLoaderError, OSError) as e:
            logger.error("%s", e)
            discovered.diagnostics.append(
                diagnostic_from_error(e, source_path=Path(path).as_posix())
            )
            continue
        discovered.declarations.extend(found.declarations)
        discovered.diagnostics.extend(found.diagnostics)

    return _merge_discovery(processor, discovered)


def process_manifest(
    data: Any,
    source_path: Optional[str] = None,
    language: str = "python",
    config: Any = None,
    generator: Optional[AccessorGenerator] = None,
) -> ProcessingResult:
    """
    Generate units for the declarations described by a JSON manifest.

    Args:
        data: Parsed manifest
        source_path: Manifest location, recorded as unit dependency
        language: Target language when no generator is given
        config: GeneratorConfig, dict of overrides or config file path
        generator: Ready generator instance (takes precedence)

    Returns:
        ProcessingResult

    Raises:
        DiscoveryError: If the manifest structure is invalid
    """
    processor = _processor_for(generator, language, config)
    return _merge_discovery(processor, discover_manifest(data, source_path))
