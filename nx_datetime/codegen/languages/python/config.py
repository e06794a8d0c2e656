"""
Python-specific configuration and type mappings.

Provides the result-type mapping and import bookkeeping for generated
Python accessor modules.
"""

from enum import Enum
from typing import Iterable, List, Set

from ...core.schema import HelperFunction, PlannedAccessor, ResultType


class OptionalStyle(Enum):
    """How nullable result types are spelled."""

    UNION = "union"  # datetime | None
    OPTIONAL = "optional"  # Optional[datetime]


PYTHON_TYPE_MAP = {
    ResultType.TEXT: "str",
    ResultType.DATE: "datetime",
}

# Types that require imports
PYTHON_IMPORT_MAP = {
    "datetime": "from datetime import datetime",
    "Optional": "from typing import Optional",
}


class PythonConfig:
    """Python-specific configuration."""

    def __init__(self, **kwargs):
        """Initialize Python configuration."""
        style = kwargs.get("optional_style", "union")
        if isinstance(style, OptionalStyle):
            self.optional_style = style
        else:
            try:
                self.optional_style = OptionalStyle(style)
            except ValueError:
                self.optional_style = OptionalStyle.UNION

        self.type_map = PYTHON_TYPE_MAP.copy()
        self.type_map[ResultType.TEXT] = kwargs.get("text_type", "str")
        self.type_map[ResultType.DATE] = kwargs.get("date_type", "datetime")

    def get_python_type(self, result_type: ResultType, is_optional: bool = False) -> str:
        """Get Python type string for an accessor result."""
        python_type = self.type_map[result_type]

        if is_optional:
            if self.optional_style == OptionalStyle.OPTIONAL:
                python_type = f"Optional[{python_type}]"
            else:
                python_type = f"{python_type} | None"

        return python_type

    def get_required_imports(self, accessors: Iterable[PlannedAccessor]) -> List[str]:
        """Standard-library imports needed by the accessors' signatures."""
        imports: Set[str] = set()

        for accessor in accessors:
            base_type = self.type_map[accessor.result_type]
            if base_type in PYTHON_IMPORT_MAP:
                imports.add(PYTHON_IMPORT_MAP[base_type])
            if accessor.nullable and self.optional_style == OptionalStyle.OPTIONAL:
                imports.add(PYTHON_IMPORT_MAP["Optional"])

        return sorted(imports)


def get_helper_names(accessors: Iterable[PlannedAccessor]) -> List[str]:
    """Runtime helper functions called by the accessors, sorted."""
    return sorted({a.expression.helper.value for a in accessors})


HELPER_DOCS = {
    HelperFunction.REFORMAT_TEXT: "{field} reformatted to the target pattern.",
    HelperFunction.PARSE_TEXT: "{field} parsed into a datetime, None when it does not parse.",
    HelperFunction.FORMAT_TIMESTAMP: "{field} (epoch milliseconds) formatted as text.",
    HelperFunction.TIMESTAMP_TO_DATE: "{field} (epoch milliseconds) as a datetime.",
    HelperFunction.FORMAT_DATE: "{field} formatted as text.",
}
