import pytest

from nx_datetime.codegen.core.naming import (
    NamingCase,
    create_kotlin_sanitizer,
    create_python_sanitizer,
)
from nx_datetime.codegen.core.templates import TemplateEngine, TemplateError, kt_literal, py_literal


@pytest.mark.parametrize(
    "name, case, expected",
    [
        ("DateTest", NamingCase.SNAKE_CASE, "date_test"),
        ("HTTPServer", NamingCase.SNAKE_CASE, "http_server"),
        ("date_test", NamingCase.PASCAL_CASE, "DateTest"),
        ("DateTest", NamingCase.PASCAL_CASE, "DateTest"),
        ("origin_pattern", NamingCase.CAMEL_CASE, "originPattern"),
        ("date-test", NamingCase.CAMEL_CASE, "dateTest"),
    ],
)
def test_convert(name, case, expected):
    assert create_python_sanitizer().convert(name, case) == expected


def test_identifier_checks_per_language():
    assert create_python_sanitizer().is_valid_identifier("nx_dateOne")
    assert not create_python_sanitizer().is_valid_identifier("lambda")
    assert not create_python_sanitizer().is_valid_identifier("nx-date")
    assert not create_kotlin_sanitizer().is_valid_identifier("val")
    assert create_kotlin_sanitizer().is_valid_identifier("lambda")


def test_literal_filters():
    assert py_literal("yyyy-MM-dd") == "'yyyy-MM-dd'"
    assert kt_literal('a"$b') == '"a\\"\\$b"'


def test_template_rendering(tmp_path):
    (tmp_path / "unit.j2").write_text("{{ pattern | py_literal }} {{ pattern | kt_literal }}")
    engine = TemplateEngine(tmp_path)

    assert engine.render_template("unit.j2", {"pattern": "dd/MM"}) == "'dd/MM' \"dd/MM\""

    with pytest.raises(TemplateError):
        engine.render_template("unit.j2", {})
    with pytest.raises(TemplateError):
        engine.render_template("missing.j2", {})
