"""
Python accessor generator implementation.

Emits a module next to the declaring module that imports the declaration,
defines one getter per planned accessor and attaches it as a read-only
property.
"""

import re
from pathlib import Path
from typing import Any, Dict, List

from ...core.config import GeneratorConfig
from ...core.generator import AccessorGenerator, GeneratorError
from ...core.naming import NameSanitizer, create_python_sanitizer
from ...core.schema import DeclarationPlan, HelperFunction, PlannedAccessor
from .config import HELPER_DOCS, PythonConfig, get_helper_names


class PythonGenerator(AccessorGenerator):
    """Generates Python modules that attach properties to a declaration."""

    def __init__(self, config: GeneratorConfig = None):
        """Initialize Python generator with configuration."""
        self._sanitizer = create_python_sanitizer()
        super().__init__(config)
        self.python_config = PythonConfig(**self.config.language_config)

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "python"

    @property
    def file_extension(self) -> str:
        """Return Python file extension."""
        return ".py"

    @property
    def sanitizer(self) -> NameSanitizer:
        return self._sanitizer

    def get_template_directory(self) -> Path:
        """Return the Python templates directory."""
        return Path(__file__).parent / "templates"

    def helper_name(self, helper: HelperFunction) -> str:
        return helper.value

    def type_name(self, accessor: PlannedAccessor) -> str:
        return self.python_config.get_python_type(
            accessor.result_type, is_optional=accessor.nullable
        )

    def render_unit(self, plan: DeclarationPlan) -> str:
        """Render the accessor module for one declaration."""
        declaration = plan.declaration
        if not declaration.namespace:
            raise GeneratorError(
                f"Cannot emit Python accessors for {declaration.name}: "
                "the declaring module is unknown"
            )

        context = {
            "header": self.header_lines(declaration),
            "declaration": declaration.name,
            "namespace": declaration.namespace,
            "helper_module": self.config.helper_module,
            "helpers": get_helper_names(plan.accessors),
            "stdlib_imports": self.python_config.get_required_imports(plan.accessors),
            "accessors": [self.build_accessor_context(a) for a in plan.accessors],
            "add_comments": self.config.add_comments,
            "indent": " " * self.config.indent_size,
        }

        return self.render_template("unit.py.j2", context)

    def build_accessor_context(self, accessor: PlannedAccessor) -> Dict[str, Any]:
        context = super().build_accessor_context(accessor)
        context["getter"] = "_get_" + re.sub(r"\W", "_", accessor.name)
        context["is_identifier"] = self.sanitizer.is_valid_identifier(accessor.name)
        context["doc"] = HELPER_DOCS[accessor.expression.helper].format(
            field=accessor.field_name
        )
        return context

    def validate_plan(self, plan: DeclarationPlan) -> List[str]:
        """Validate a plan for Python generation."""
        warnings = super().validate_plan(plan)

        for accessor in plan.accessors:
            if accessor.name.startswith("__"):
                warnings.append(
                    f"Accessor {plan.declaration.name}.{accessor.name} starts with a "
                    "double underscore and will not be name-mangled"
                )

        return warnings


def create_python_generator(config: GeneratorConfig = None, **overrides) -> PythonGenerator:
    """Create a Python generator, optionally overriding configuration keys."""
    if config is None:
        from ...core.config import load_config

        config = load_config("python", custom_config=overrides or None)

    return PythonGenerator(config)
