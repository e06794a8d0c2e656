"""
Kotlin accessor generator implementation.

Emits extension properties (``val Receiver.name: Type get() = ...``) in
the declaration's package, calling the reformatting helpers as extension
functions.
"""

from pathlib import Path
from typing import Any, Dict, List

from ...core.config import GeneratorConfig
from ...core.generator import AccessorGenerator
from ...core.naming import NameSanitizer, NamingCase, create_kotlin_sanitizer
from ...core.schema import DeclarationPlan, HelperFunction, PlannedAccessor, ResultType

KOTLIN_HELPERS = {
    HelperFunction.REFORMAT_TEXT: "changeFormatDate",
    HelperFunction.PARSE_TEXT: "toDate",
    HelperFunction.FORMAT_TIMESTAMP: "changeFormatDate",
    HelperFunction.TIMESTAMP_TO_DATE: "toDate",
    HelperFunction.FORMAT_DATE: "changeFormatDate",
}


class KotlinGenerator(AccessorGenerator):
    """Generates Kotlin extension properties for a declaration."""

    def __init__(self, config: GeneratorConfig = None):
        self._sanitizer = create_kotlin_sanitizer()
        super().__init__(config)
        self.date_type = self.config.language_config.get("date_type", "java.util.Date")

    @property
    def language_name(self) -> str:
        return "kotlin"

    @property
    def file_extension(self) -> str:
        return ".kt"

    @property
    def sanitizer(self) -> NameSanitizer:
        return self._sanitizer

    def get_template_directory(self) -> Path:
        return Path(__file__).parent / "templates"

    def helper_name(self, helper: HelperFunction) -> str:
        return KOTLIN_HELPERS[helper]

    def type_name(self, accessor: PlannedAccessor) -> str:
        if accessor.result_type == ResultType.DATE:
            base = self.date_type.rsplit(".", 1)[-1]
        else:
            base = "String"
        return f"{base}?" if accessor.nullable else base

    def get_imports(self, plan: DeclarationPlan) -> List[str]:
        """Fully qualified imports used by the unit, sorted."""
        imports = {
            f"{self.config.helper_module}.{self.helper_name(a.expression.helper)}"
            for a in plan.accessors
        }
        if any(a.result_type == ResultType.DATE for a in plan.accessors):
            if "." in self.date_type:
                imports.add(self.date_type)
        return sorted(imports)

    def render_unit(self, plan: DeclarationPlan) -> str:
        declaration = plan.declaration
        context = {
            "header": self.header_lines(declaration),
            "namespace": declaration.namespace,
            "declaration": declaration.name,
            "imports": self.get_imports(plan),
            "accessors": [self.build_accessor_context(a) for a in plan.accessors],
            "indent": " " * self.config.indent_size,
        }
        return self.render_template("unit.kt.j2", context)

    def build_accessor_context(self, accessor: PlannedAccessor) -> Dict[str, Any]:
        context = super().build_accessor_context(accessor)
        if not self.sanitizer.is_valid_identifier(accessor.name):
            context["name"] = f"`{accessor.name}`"
        context["arguments"] = [
            (self.sanitizer.convert(name, NamingCase.CAMEL_CASE), value)
            for name, value in accessor.expression.arguments
        ]
        return context

    def validate_plan(self, plan: DeclarationPlan) -> List[str]:
        warnings = super().validate_plan(plan)
        namespace = plan.declaration.namespace
        if namespace and not all(p.isidentifier() for p in namespace.split(".")):
            warnings.append(f"Invalid Kotlin package name: {namespace}")
        return warnings


def create_kotlin_generator(config: GeneratorConfig = None, **overrides) -> KotlinGenerator:
    """Create a Kotlin generator, optionally overriding configuration keys."""
    if config is None:
        from ...core.config import load_config

        config = load_config("kotlin", custom_config=overrides or None)

    return KotlinGenerator(config)
