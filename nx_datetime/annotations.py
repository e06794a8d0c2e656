"""Markers used in user code.

Decorate a class with :func:`datetime_extension` and attach directives to
its fields through ``typing.Annotated``::

    @datetime_extension
    @dataclass
    class Event:
        created: Annotated[str, TextToDate("yyyy-MM-dd", prefix="nx_")]

Both are inert at runtime; the generator reads them from the source.
"""

from .codegen.core.schema import (
    DateToText,
    Directive,
    IntegerToDate,
    IntegerToText,
    TextToDate,
    TextToText,
)

MARKER_ATTRIBUTE = "__nx_datetime_extension__"


def datetime_extension(cls=None, **options):
    """Mark a class for accessor generation.

    Usable bare (``@datetime_extension``) or called
    (``@datetime_extension()``). Options are recorded on the class.
    """

    def mark(target):
        setattr(target, MARKER_ATTRIBUTE, dict(options))
        return target

    if cls is None:
        return mark
    return mark(cls)


def is_datetime_extension(cls) -> bool:
    """Whether a class carries the extension marker."""
    return MARKER_ATTRIBUTE in vars(cls)


__all__ = [
    "DateToText",
    "Directive",
    "IntegerToDate",
    "IntegerToText",
    "TextToDate",
    "TextToText",
    "datetime_extension",
    "is_datetime_extension",
]
