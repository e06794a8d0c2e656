import logging

import pytest

from nx_datetime.codegen.core.classifier import (
    ClassificationError,
    MissingDirectiveError,
    UnsupportedTypeError,
    carrier_type_of,
    classify_field,
)
from nx_datetime.codegen.core.generator import GeneratorError
from nx_datetime.codegen.core.schema import (
    CarrierType,
    DateToText,
    Declaration,
    Field,
    IntegerToDate,
    IntegerToText,
    TextToDate,
    TextToText,
)

DECLARATION = Declaration(name="Event", namespace="app.models")


@pytest.mark.parametrize(
    "type_name, carrier",
    [
        ("str", CarrierType.TEXT),
        ("kotlin.String", CarrierType.TEXT),
        ("int", CarrierType.INTEGER_TIMESTAMP),
        ("kotlin.Long", CarrierType.INTEGER_TIMESTAMP),
        ("datetime.datetime", CarrierType.DATE_OBJECT),
        ("java.util.Date", CarrierType.DATE_OBJECT),
        ("float", CarrierType.UNSUPPORTED),
        ("kotlin.Int", CarrierType.UNSUPPORTED),
    ],
)
def test_carrier_type_of(type_name, carrier):
    assert carrier_type_of(type_name) == carrier


def test_text_field_orders_directives_by_variant():
    field_obj = Field(
        name="dateOne",
        type_name="str",
        directives=(TextToDate("yyyy-MM-dd"), TextToText("yyyy-MM-dd", "yyyy MMM dd")),
    )
    classified = classify_field(DECLARATION, field_obj)

    assert classified.carrier == CarrierType.TEXT
    assert classified.directives == [
        TextToText("yyyy-MM-dd", "yyyy MMM dd"),
        TextToDate("yyyy-MM-dd"),
    ]


def test_integer_field_keeps_every_directive_of_a_variant():
    field_obj = Field(
        name="created",
        type_name="int",
        directives=(IntegerToDate(), IntegerToText("yyyy", prefix="y_"), IntegerToText("MM", prefix="m_")),
    )
    classified = classify_field(DECLARATION, field_obj)

    assert classified.directives == [
        IntegerToText("yyyy", prefix="y_"),
        IntegerToText("MM", prefix="m_"),
        IntegerToDate(),
    ]


def test_inapplicable_directives_are_ignored(caplog):
    caplog.set_level(logging.DEBUG, logger="nx_datetime")
    field_obj = Field(
        name="dateTwo",
        type_name="datetime.datetime",
        directives=(DateToText("dd MMM yyyy"), TextToDate("yyyy")),
    )
    classified = classify_field(DECLARATION, field_obj)

    assert classified.directives == [DateToText("dd MMM yyyy")]
    assert "Ignoring 1 directive(s) on Event.dateTwo" in caplog.text


def test_unsupported_type():
    field_obj = Field(name="ratio", type_name="float", directives=(TextToDate("yyyy"),))
    with pytest.raises(UnsupportedTypeError) as excinfo:
        classify_field(DECLARATION, field_obj)

    error = excinfo.value
    assert error.code == "UnsupportedType"
    assert error.declaration == "app.models.Event"
    assert error.field_name == "ratio"
    assert "Unsupported type: property float" in str(error)
    assert "Check Event.ratio" in str(error)


def test_missing_directive_on_text_field():
    with pytest.raises(MissingDirectiveError) as excinfo:
        classify_field(DECLARATION, Field(name="label", type_name="str"))

    assert excinfo.value.code == "MissingDirective"
    assert "Annotations for String property are missing or incorrect" in str(excinfo.value)


def test_only_wrong_carrier_directives_is_missing():
    field_obj = Field(name="created", type_name="int", directives=(TextToDate("yyyy"),))
    with pytest.raises(MissingDirectiveError, match="Long property"):
        classify_field(DECLARATION, field_obj)


def test_classification_errors_are_generator_errors():
    assert issubclass(ClassificationError, GeneratorError)
    assert issubclass(UnsupportedTypeError, ClassificationError)
    assert issubclass(MissingDirectiveError, ClassificationError)
