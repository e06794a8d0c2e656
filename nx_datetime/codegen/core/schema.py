"""
Core schema representation for accessor generation.

Holds the closed directive vocabulary, the declaration/field model that
discovery produces, and the planned-accessor and diagnostic records that
flow from the planner to the generators.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type
from enum import Enum


class CarrierType(Enum):
    """Primitive shape of a field before conversion."""

    TEXT = "text"
    INTEGER_TIMESTAMP = "integer_timestamp"
    DATE_OBJECT = "date_object"
    UNSUPPORTED = "unsupported"


class ResultType(Enum):
    """Value family an accessor produces."""

    TEXT = "text"
    DATE = "date"


class HelperFunction(Enum):
    """Runtime helpers a generated accessor may call."""

    REFORMAT_TEXT = "reformat_text"
    PARSE_TEXT = "parse_text"
    FORMAT_TIMESTAMP = "format_timestamp"
    TIMESTAMP_TO_DATE = "timestamp_to_date"
    FORMAT_DATE = "format_date"


class Directive:
    """Base for the five conversion directives.

    Subclasses are frozen dataclasses; the class-level attributes describe
    where a directive may attach and what it produces.
    """

    kind: ClassVar[str]
    carrier: ClassVar[CarrierType]
    family: ClassVar[ResultType]
    helper: ClassVar[HelperFunction]
    pattern_fields: ClassVar[Tuple[str, ...]] = ()

    prefix: str

    def pattern_arguments(self) -> Tuple[Tuple[str, str], ...]:
        """Pattern parameters in call order, as (name, value) pairs."""
        return tuple((name, getattr(self, name)) for name in self.pattern_fields)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind}
        data.update(dict(self.pattern_arguments()))
        data["prefix"] = self.prefix
        return data


@dataclass(frozen=True)
class TextToText(Directive):
    """Reformat a text date from one pattern to another."""

    origin_pattern: str
    target_pattern: str
    prefix: str = ""

    kind: ClassVar[str] = "text_to_text"
    carrier: ClassVar[CarrierType] = CarrierType.TEXT
    family: ClassVar[ResultType] = ResultType.TEXT
    helper: ClassVar[HelperFunction] = HelperFunction.REFORMAT_TEXT
    pattern_fields: ClassVar[Tuple[str, ...]] = ("origin_pattern", "target_pattern")


@dataclass(frozen=True)
class TextToDate(Directive):
    """Parse a text date into a date object."""

    origin_pattern: str
    prefix: str = ""

    kind: ClassVar[str] = "text_to_date"
    carrier: ClassVar[CarrierType] = CarrierType.TEXT
    family: ClassVar[ResultType] = ResultType.DATE
    helper: ClassVar[HelperFunction] = HelperFunction.PARSE_TEXT
    pattern_fields: ClassVar[Tuple[str, ...]] = ("origin_pattern",)


@dataclass(frozen=True)
class IntegerToText(Directive):
    """Format an epoch-milliseconds timestamp as text."""

    target_pattern: str
    prefix: str = ""

    kind: ClassVar[str] = "integer_to_text"
    carrier: ClassVar[CarrierType] = CarrierType.INTEGER_TIMESTAMP
    family: ClassVar[ResultType] = ResultType.TEXT
    helper: ClassVar[HelperFunction] = HelperFunction.FORMAT_TIMESTAMP
    pattern_fields: ClassVar[Tuple[str, ...]] = ("target_pattern",)


@dataclass(frozen=True)
class IntegerToDate(Directive):
    """Convert an epoch-milliseconds timestamp into a date object."""

    prefix: str = ""

    kind: ClassVar[str] = "integer_to_date"
    carrier: ClassVar[CarrierType] = CarrierType.INTEGER_TIMESTAMP
    family: ClassVar[ResultType] = ResultType.DATE
    helper: ClassVar[HelperFunction] = HelperFunction.TIMESTAMP_TO_DATE


@dataclass(frozen=True)
class DateToText(Directive):
    """Format a date object as text."""

    target_pattern: str
    prefix: str = ""

    kind: ClassVar[str] = "date_to_text"
    carrier: ClassVar[CarrierType] = CarrierType.DATE_OBJECT
    family: ClassVar[ResultType] = ResultType.TEXT
    helper: ClassVar[HelperFunction] = HelperFunction.FORMAT_DATE
    pattern_fields: ClassVar[Tuple[str, ...]] = ("target_pattern",)


DIRECTIVE_TYPES: Tuple[Type[Directive], ...] = (
    TextToText,
    TextToDate,
    IntegerToText,
    IntegerToDate,
    DateToText,
)

DIRECTIVES_BY_KIND: Dict[str, Type[Directive]] = {d.kind: d for d in DIRECTIVE_TYPES}
DIRECTIVES_BY_NAME: Dict[str, Type[Directive]] = {d.__name__: d for d in DIRECTIVE_TYPES}


def directive_from_dict(data: Dict[str, Any]) -> Directive:
    """
    Build a directive from its manifest representation.

    Args:
        data: Mapping with a ``kind`` key plus the directive's parameters

    Returns:
        Directive instance

    Raises:
        ValueError: If the kind is unknown or parameters don't match
    """
    params = dict(data)
    kind = params.pop("kind", None)
    directive_cls = DIRECTIVES_BY_KIND.get(kind) or DIRECTIVES_BY_NAME.get(kind)
    if directive_cls is None:
        known = ", ".join(sorted(DIRECTIVES_BY_KIND))
        raise ValueError(f"Unknown directive kind {kind!r} (known: {known})")

    # Accept the JVM-era spelling of the prefix parameter
    if "prefix_name" in params:
        params["prefix"] = params.pop("prefix_name")

    try:
        return directive_cls(**params)
    except TypeError as e:
        raise ValueError(f"Invalid parameters for {kind}: {e}") from e


@dataclass(frozen=True)
class Field:
    """One declared member of an annotated declaration."""

    name: str
    type_name: str  # Raw type identity as written in the source
    directives: Tuple[Directive, ...] = ()
    nullable: bool = False
    line: Optional[int] = None

    def directives_of(self, directive_cls: Type[Directive]) -> List[Directive]:
        """Directives of one variant, in declaration order."""
        return [d for d in self.directives if type(d) is directive_cls]


@dataclass(frozen=True)
class Declaration:
    """A record type marked for accessor generation."""

    name: str
    namespace: str
    fields: Tuple[Field, ...] = ()
    source_path: Optional[str] = None
    source_digest: Optional[str] = None
    members: Tuple[str, ...] = ()  # Methods, properties and class attributes

    @property
    def qualified_name(self) -> str:
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name

    def get_field(self, name: str) -> Optional[Field]:
        """Get field by name."""
        for field_obj in self.fields:
            if field_obj.name == name:
                return field_obj
        return None

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]


@dataclass(frozen=True)
class HelperCall:
    """Single helper invocation forming an accessor body."""

    helper: HelperFunction
    field_name: str
    arguments: Tuple[Tuple[str, str], ...] = ()


@dataclass(frozen=True)
class PlannedAccessor:
    """One read-only computed accessor, prior to rendering."""

    name: str
    field_name: str
    result_type: ResultType
    nullable: bool
    expression: HelperCall
    directive: Directive
    carrier_nullable: bool = False


class Severity(Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """A build-time message tied to a declaration or field."""

    severity: Severity
    code: str
    message: str
    declaration: Optional[str] = None
    field: Optional[str] = None
    source_path: Optional[str] = None

    @property
    def location(self) -> str:
        if self.declaration and self.field:
            return f"{self.declaration}.{self.field}"
        return self.declaration or self.source_path or "<input>"

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def __str__(self) -> str:
        return f"{self.severity.value}: [{self.code}] {self.location}: {self.message}"


@dataclass
class DeclarationPlan:
    """Accessors planned for one declaration, in emission order."""

    declaration: Declaration
    accessors: List[PlannedAccessor] = field(default_factory=list)

    @property
    def accessor_names(self) -> List[str]:
        return [a.name for a in self.accessors]
