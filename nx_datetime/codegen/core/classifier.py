"""
Field classification.

Maps a field's raw type identity onto its carrier type and buckets the
directives that are valid for that carrier.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Type

from nx_datetime.logging_config import get_logger

from .generator import GeneratorError
from .schema import (
    CarrierType,
    DateToText,
    Declaration,
    Directive,
    Field,
    IntegerToDate,
    IntegerToText,
    TextToDate,
    TextToText,
)

logger = get_logger(__name__)


class ClassificationError(GeneratorError):
    """A field-scoped failure; the field gets no accessors."""

    code = "ClassificationError"

    def __init__(self, message: str, declaration: str, field_name: str):
        super().__init__(message)
        self.declaration = declaration
        self.field_name = field_name


class UnsupportedTypeError(ClassificationError):
    code = "UnsupportedType"


class MissingDirectiveError(ClassificationError):
    code = "MissingDirective"


# Raw type identities, Python spellings first, then the JVM spellings
# accepted in manifests.
CARRIER_TYPE_MAP: Dict[str, CarrierType] = {
    "str": CarrierType.TEXT,
    "builtins.str": CarrierType.TEXT,
    "int": CarrierType.INTEGER_TIMESTAMP,
    "builtins.int": CarrierType.INTEGER_TIMESTAMP,
    "datetime": CarrierType.DATE_OBJECT,
    "datetime.datetime": CarrierType.DATE_OBJECT,
    "text": CarrierType.TEXT,
    "integer_timestamp": CarrierType.INTEGER_TIMESTAMP,
    "date_object": CarrierType.DATE_OBJECT,
    "kotlin.String": CarrierType.TEXT,
    "String": CarrierType.TEXT,
    "kotlin.Long": CarrierType.INTEGER_TIMESTAMP,
    "Long": CarrierType.INTEGER_TIMESTAMP,
    "java.util.Date": CarrierType.DATE_OBJECT,
    "Date": CarrierType.DATE_OBJECT,
}

# Directive variants each carrier accepts, in planning order
CARRIER_DIRECTIVES: Dict[CarrierType, Tuple[Type[Directive], ...]] = {
    CarrierType.TEXT: (TextToText, TextToDate),
    CarrierType.INTEGER_TIMESTAMP: (IntegerToText, IntegerToDate),
    CarrierType.DATE_OBJECT: (DateToText,),
}

CARRIER_LABELS = {
    CarrierType.TEXT: "String",
    CarrierType.INTEGER_TIMESTAMP: "Long",
    CarrierType.DATE_OBJECT: "Date",
}


@dataclass
class ClassifiedField:
    """A field whose carrier is supported and which has directives to plan."""

    field: Field
    carrier: CarrierType
    directives_by_variant: Dict[Type[Directive], List[Directive]] = field(
        default_factory=dict
    )

    @property
    def directives(self) -> List[Directive]:
        """All valid directives, grouped by variant in planning order."""
        ordered = []
        for variant in CARRIER_DIRECTIVES[self.carrier]:
            ordered.extend(self.directives_by_variant.get(variant, []))
        return ordered


def carrier_type_of(type_name: str) -> CarrierType:
    """Resolve a raw type identity to a carrier type."""
    return CARRIER_TYPE_MAP.get(type_name.strip(), CarrierType.UNSUPPORTED)


def classify_field(declaration: Declaration, field_obj: Field) -> ClassifiedField:
    """
    Classify one field of a declaration.

    Args:
        declaration: Declaring type, used for diagnostics
        field_obj: Field to classify

    Returns:
        ClassifiedField with the directives valid for its carrier

    Raises:
        UnsupportedTypeError: If the carrier is not text, integer or date
        MissingDirectiveError: If no directive valid for the carrier is attached
    """
    carrier = carrier_type_of(field_obj.type_name)
    location = f"{declaration.name}.{field_obj.name}"

    if carrier == CarrierType.UNSUPPORTED:
        raise UnsupportedTypeError(
            f"Unsupported type: property {field_obj.type_name}\nCheck {location}",
            declaration.qualified_name,
            field_obj.name,
        )

    buckets = {
        variant: field_obj.directives_of(variant)
        for variant in CARRIER_DIRECTIVES[carrier]
    }

    if not any(buckets.values()):
        raise MissingDirectiveError(
            f"Annotations for {CARRIER_LABELS[carrier]} property are missing "
            f"or incorrect.\nCheck {location}",
            declaration.qualified_name,
            field_obj.name,
        )

    ignored = [
        d for d in field_obj.directives if type(d) not in CARRIER_DIRECTIVES[carrier]
    ]
    if ignored:
        logger.debug(
            "Ignoring %d directive(s) on %s not applicable to %s",
            len(ignored),
            location,
            carrier.value,
        )

    return ClassifiedField(
        field=field_obj,
        carrier=carrier,
        directives_by_variant={k: v for k, v in buckets.items() if v},
    )
