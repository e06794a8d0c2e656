"""
Accessor planning.

Turns classified fields into PlannedAccessors: generated names (with the
family-label rule for fields carrying both text- and date-producing
directives), result types, nullability, and the helper call each accessor
evaluates with its patterns baked in as literals.
"""

from typing import Iterable, List, Optional, Set, Tuple

from nx_datetime.logging_config import get_logger

from .classifier import ClassificationError, ClassifiedField
from .config import GeneratorConfig
from .schema import (
    Declaration,
    DeclarationPlan,
    Directive,
    HelperCall,
    PlannedAccessor,
    ResultType,
)

logger = get_logger(__name__)


class DuplicateAccessorError(ClassificationError):
    """A planned name repeats another accessor or shadows a declared field."""

    code = "DuplicateAccessor"

    def __init__(self, message: str, declaration: str, field_name: str, accessor_name: str):
        super().__init__(message, declaration, field_name)
        self.accessor_name = accessor_name


FAMILY_LABELS = {
    ResultType.TEXT: "String",
    ResultType.DATE: "Date",
}


def family_label(family: ResultType, label_case: str = "pascal") -> str:
    label = FAMILY_LABELS[family]
    return label.lower() if label_case == "lower" else label


def accessor_name(
    directive: Directive,
    field_name: str,
    multiple_families: bool,
    label_case: str = "pascal",
) -> str:
    """
    Name of the accessor a directive produces.

    A field whose directives all produce the same family gets
    ``{prefix}{field}``. Once more than one family is present every accessor
    on that field carries its own family label, ``{prefix}{Label}_{field}``.

    Args:
        directive: Directive being planned
        field_name: Source field name
        multiple_families: Whether the field mixes output families
        label_case: "pascal" for String_/Date_, "lower" for string_/date_

    Returns:
        Generated accessor name
    """
    if multiple_families:
        label = family_label(directive.family, label_case)
        return f"{directive.prefix}{label}_{field_name}"
    return f"{directive.prefix}{field_name}"


def plan_field(
    classified: ClassifiedField, config: Optional[GeneratorConfig] = None
) -> List[PlannedAccessor]:
    """
    Plan every accessor for one classified field.

    Args:
        classified: Field with its carrier and valid directives
        config: Generator configuration (naming options)

    Returns:
        One PlannedAccessor per directive, in planning order
    """
    label_case = config.family_label_case if config else "pascal"
    field_obj = classified.field
    directives = classified.directives

    multiple_families = len({d.family for d in directives}) > 1

    accessors = []
    for directive in directives:
        nullable = directive.family == ResultType.DATE or field_obj.nullable
        accessors.append(
            PlannedAccessor(
                name=accessor_name(directive, field_obj.name, multiple_families, label_case),
                field_name=field_obj.name,
                result_type=directive.family,
                nullable=nullable,
                expression=HelperCall(
                    helper=directive.helper,
                    field_name=field_obj.name,
                    arguments=directive.pattern_arguments(),
                ),
                directive=directive,
                carrier_nullable=field_obj.nullable,
            )
        )
    return accessors


class AccessorPlanner:
    """Plans a whole declaration, keeping accessor names unique on it."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config

    def plan_declaration(
        self, declaration: Declaration, classified_fields: Iterable[ClassifiedField]
    ) -> Tuple[DeclarationPlan, List[DuplicateAccessorError]]:
        """
        Plan all classified fields of a declaration.

        Args:
            declaration: Declaration being generated
            classified_fields: Its successfully classified fields, in field order

        Returns:
            The plan and any accessors dropped for name collisions
        """
        plan = DeclarationPlan(declaration=declaration)
        errors: List[DuplicateAccessorError] = []
        taken: Set[str] = set(declaration.field_names) | set(declaration.members)

        for classified in classified_fields:
            for accessor in plan_field(classified, self.config):
                if accessor.name in taken:
                    if accessor.name in declaration.field_names:
                        what = "a declared field"
                    elif accessor.name in declaration.members:
                        what = "a declared member"
                    else:
                        what = "another generated accessor"
                    errors.append(
                        DuplicateAccessorError(
                            f"Accessor '{accessor.name}' collides with {what}\n"
                            f"Check {declaration.name}.{accessor.field_name}",
                            declaration.qualified_name,
                            accessor.field_name,
                            accessor.name,
                        )
                    )
                    continue

                taken.add(accessor.name)
                plan.accessors.append(accessor)

        logger.debug(
            "Planned %d accessor(s) for %s",
            len(plan.accessors),
            declaration.qualified_name,
        )
        return plan, errors
