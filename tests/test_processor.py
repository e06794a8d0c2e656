import logging

from nx_datetime.codegen.core.processor import (
    DateTimeExtensionProcessor,
    ProcessingResult,
    process_declarations,
    process_manifest,
    process_sources,
)
from nx_datetime.codegen.core.schema import (
    DateToText,
    Declaration,
    Field,
    IntegerToText,
    Severity,
    TextToDate,
)
from nx_datetime.codegen.languages.kotlin import create_kotlin_generator
from nx_datetime.codegen.languages.python import PythonGenerator


def test_scenarios(scenario_declaration, caplog):
    caplog.set_level(logging.INFO, logger="nx_datetime")
    generator = create_kotlin_generator(family_label_case="lower")
    result = DateTimeExtensionProcessor(generator).process([scenario_declaration])

    assert result.success
    assert result.deferred == []
    assert result.diagnostics == []
    [unit] = result.units
    assert unit.accessor_names == ("nx_string_dateOne", "nx_date_dateOne", "nx_dateTwo")
    assert "Generating for DateTest" in caplog.text


def test_failing_field_does_not_stop_siblings():
    declaration = Declaration(
        name="Mixed",
        namespace="app",
        fields=(
            Field("ratio", "float", directives=(TextToDate("yyyy", prefix="nx_"),)),
            Field("label", "str"),
            Field("when", "datetime.datetime", directives=(DateToText("dd MMM yyyy", prefix="nx_"),)),
        ),
    )
    result = process_declarations([declaration])

    assert result.success
    assert result.has_errors
    assert [(d.code, d.field) for d in result.errors] == [
        ("UnsupportedType", "ratio"),
        ("MissingDirective", "label"),
    ]
    assert result.unit_for("Mixed").accessor_names == ("nx_when",)
    assert result.metadata["error_count"] == 2
    assert result.metadata["accessor_count"] == 1


def test_declaration_without_accessors_still_gets_unit():
    declaration = Declaration(name="Empty", namespace="app", fields=(Field("label", "str"),))
    result = process_declarations([declaration])

    assert result.unit_for("app.Empty") is not None
    assert [d.severity for d in result.diagnostics] == [Severity.ERROR, Severity.WARNING]
    assert result.warnings[0].code == "GeneratorWarning"


def test_render_failure_is_scoped_to_declaration():
    loose = Declaration(
        name="Loose",
        namespace="",
        fields=(Field("stamp", "int", directives=(IntegerToText("yyyy", prefix="fmt_"),)),),
    )
    good = Declaration(
        name="Good",
        namespace="app",
        fields=(Field("stamp", "int", directives=(IntegerToText("yyyy", prefix="fmt_"),)),),
    )
    result = DateTimeExtensionProcessor(PythonGenerator()).process([loose, good])

    assert [u.declaration for u in result.units] == ["app.Good"]
    assert result.errors[0].code == "GeneratorError"
    assert result.errors[0].declaration == "Loose"


def test_unexpected_exception_becomes_error_result(scenario_declaration, monkeypatch):
    generator = PythonGenerator()

    def explode(plan):
        raise RuntimeError("boom")

    monkeypatch.setattr(generator, "render_unit", explode)
    result = DateTimeExtensionProcessor(generator).process([scenario_declaration])

    assert not result.success
    assert result.has_errors
    assert "boom" in result.error_message
    assert isinstance(result.exception, RuntimeError)


def test_error_result_keeps_discovery_diagnostics(write_package, event_source, monkeypatch):
    good = write_package("failing", "models", event_source)
    broken = write_package("failing", "broken", "class (:\n")
    generator = PythonGenerator()

    def explode(plan):
        raise RuntimeError("boom")

    monkeypatch.setattr(generator, "render_unit", explode)
    result = process_sources([broken, good], generator=generator)

    assert not result.success
    assert [d.code for d in result.errors] == ["DiscoveryError"]
    assert result.errors[0].source_path == broken.as_posix()


def test_idempotent_output(write_package, event_source):
    path = write_package("idem", "models", event_source)

    first = process_sources([path])
    second = process_sources([path])

    assert [u.code for u in first.units] == [u.code for u in second.units]
    assert first.units == second.units


def test_sources_with_bad_files_are_reported(write_package, event_source, tmp_path):
    good = write_package("mixed", "models", event_source)
    broken = write_package("mixed", "broken", "class (:\n")
    missing = tmp_path / "mixed" / "missing.py"

    result = process_sources([broken, missing, good])

    assert [u.declaration for u in result.units] == ["mixed.models.Event"]
    assert [d.code for d in result.errors] == ["DiscoveryError", "FileNotFoundError"]
    assert result.errors[0].source_path == broken.as_posix()
    assert result.metadata["error_count"] == 2


def test_process_manifest_kotlin():
    manifest = {
        "declarations": [
            {
                "name": "DateTest",
                "namespace": "com.smh.nxdatetime",
                "fields": [
                    {
                        "name": "dateTwo",
                        "type": "java.util.Date",
                        "directives": [
                            {"kind": "date_to_text", "target_pattern": "dd MMM yyyy", "prefix": "nx_"}
                        ],
                    },
                    {"name": "bad", "type": "kotlin.String", "directives": [{"kind": "nope"}]},
                ],
            }
        ]
    }
    result = process_manifest(manifest, source_path="decls.json", language="kt")

    [unit] = result.units
    assert unit.file_name == "DateTest_NXDateExtension.kt"
    assert unit.dependencies == ("decls.json",)
    assert [d.code for d in result.diagnostics] == ["InvalidDirective"]


def test_error_result_factory():
    result = ProcessingResult.error("nope")
    assert not result.success
    assert result.units == [] and result.deferred == []
