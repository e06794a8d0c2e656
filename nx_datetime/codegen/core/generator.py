"""
Base generator interface for all accessor emission targets.

Defines the contract that all language generators must implement and
the GeneratedUnit artifact they produce.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Tuple
from pathlib import Path

from .config import GeneratorConfig, load_config
from .naming import NameSanitizer, NamingCase
from .schema import Declaration, DeclarationPlan, HelperFunction, PlannedAccessor
from .templates import TemplateEngine, create_template_engine


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


@dataclass(frozen=True)
class GeneratedUnit:
    """One emitted source artifact holding every accessor of a declaration."""

    declaration: str  # Qualified name of the originating declaration
    namespace: str
    file_name: str
    code: str
    dependencies: Tuple[str, ...] = ()
    accessor_names: Tuple[str, ...] = ()
    source_digest: Optional[str] = None

    @property
    def relative_path(self) -> Path:
        """Location below an output root, one directory per namespace segment."""
        parts = [p for p in self.namespace.split(".") if p]
        return Path(*parts, self.file_name) if parts else Path(self.file_name)


class AccessorGenerator(ABC):
    """Abstract base class for all accessor generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or load_config(self.language_name)
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        self._template_engine = create_template_engine(self.get_template_directory())

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'python', 'kotlin')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.py', '.kt')."""
        pass

    @property
    @abstractmethod
    def sanitizer(self) -> NameSanitizer:
        """Name sanitizer for this language."""
        pass

    @abstractmethod
    def get_template_directory(self) -> Path:
        """Directory holding this language's unit template."""
        pass

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def render_unit(self, plan: DeclarationPlan) -> str:
        """
        Render the source text for one declaration's accessors.

        Args:
            plan: Declaration and its planned accessors

        Returns:
            Generated code as a string
        """
        pass

    @abstractmethod
    def helper_name(self, helper: HelperFunction) -> str:
        """Name the generated code uses to call a runtime helper."""
        pass

    @abstractmethod
    def type_name(self, accessor: PlannedAccessor) -> str:
        """Result type of an accessor as written in the target language."""
        pass

    def unit_file_name(self, declaration: Declaration) -> str:
        """
        Deterministic file name for a declaration's unit.

        Args:
            declaration: Originating declaration

        Returns:
            File name including extension
        """
        case = (
            NamingCase.PASCAL_CASE
            if self.config.unit_name_case == "pascal"
            else NamingCase.SNAKE_CASE
        )
        stem = self.sanitizer.convert(declaration.name, case)
        return f"{stem}{self.config.unit_suffix}{self.file_extension}"

    def generate_unit(self, plan: DeclarationPlan) -> GeneratedUnit:
        """
        Render and package a declaration plan.

        Args:
            plan: Declaration and its planned accessors

        Returns:
            GeneratedUnit ready to be written
        """
        declaration = plan.declaration
        code = self.format_code(self.render_unit(plan))
        dependencies = (declaration.source_path,) if declaration.source_path else ()

        return GeneratedUnit(
            declaration=declaration.qualified_name,
            namespace=declaration.namespace,
            file_name=self.unit_file_name(declaration),
            code=code,
            dependencies=dependencies,
            accessor_names=tuple(plan.accessor_names),
            source_digest=declaration.source_digest,
        )

    def header_lines(self, declaration: Declaration) -> List[str]:
        """Provenance lines written at the top of every unit."""
        lines = [f"Generated by nx_datetime for {declaration.qualified_name}. Do not edit."]
        if declaration.source_path:
            lines.append(f"source: {declaration.source_path}")
        if declaration.source_digest:
            lines.append(f"source-sha256: {declaration.source_digest}")
        return lines

    def build_accessor_context(self, accessor: PlannedAccessor) -> Dict[str, Any]:
        """Template context shared by every language for one accessor."""
        return {
            "name": accessor.name,
            "field_name": accessor.field_name,
            "type": self.type_name(accessor),
            "nullable": accessor.nullable,
            "carrier_nullable": accessor.carrier_nullable,
            "helper": self.helper_name(accessor.expression.helper),
            "arguments": list(accessor.expression.arguments),
            "directive_kind": accessor.directive.kind,
        }

    def validate_plan(self, plan: DeclarationPlan) -> List[str]:
        """
        Check a plan for names the target language can't emit.

        Args:
            plan: Plan to validate

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []
        declaration = plan.declaration

        if not plan.accessors:
            warnings.append(
                f"Declaration '{declaration.qualified_name}' produced no accessors"
            )

        for accessor in plan.accessors:
            if not self.sanitizer.is_valid_identifier(accessor.name):
                warnings.append(
                    f"Accessor {declaration.name}.{accessor.name} is not a valid "
                    f"{self.language_name} identifier"
                )

        return warnings

    def format_code(self, code: str) -> str:
        """
        Apply language-specific formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code ending with exactly one newline
        """
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 2:  # Allow max 2 consecutive blank lines
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n") + "\n"

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with context.

        Args:
            template_name: Template file name
            context: Template variables

        Returns:
            Rendered content
        """
        return self.template_engine.render_template(template_name, context)
