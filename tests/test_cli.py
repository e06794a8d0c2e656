import json

import pytest

from nx_datetime.main import main

BROKEN_FIELD_SOURCE = """
from typing import Annotated
from nx_datetime.annotations import TextToDate, datetime_extension


@datetime_extension
class Reading:
    ratio: Annotated[float, TextToDate("yyyy")]
    taken: Annotated[str, TextToDate("yyyy-MM-dd", prefix="nx_")]
"""


def test_generate_writes_units_next_to_sources(write_package, event_source, capsys):
    path = write_package("clishop", "models", event_source)

    assert main(["generate", str(path.parent)]) == 0

    unit = path.parent / "event_nx_datetime.py"
    assert unit.exists()
    assert "Event.nx_String_dateOne = property(" in unit.read_text(encoding="utf-8")
    assert "1 of 1 unit(s) written" in capsys.readouterr().out

    # Second run leaves the unit alone and ignores it as a source
    assert main(["generate", str(path.parent)]) == 0
    assert "0 of 1 unit(s) written" in capsys.readouterr().out


def test_check_mode(write_package, event_source, capsys):
    path = write_package("checkshop", "models", event_source)

    assert main(["generate", "--check", str(path)]) == 1
    assert "missing" in capsys.readouterr().out
    assert not (path.parent / "event_nx_datetime.py").exists()

    assert main(["generate", str(path)]) == 0
    assert main(["generate", "--check", str(path)]) == 0

    path.write_text(path.read_text(encoding="utf-8") + "\n# edited\n", encoding="utf-8")
    capsys.readouterr()
    assert main(["generate", "--check", str(path)]) == 1
    assert "source changed" in capsys.readouterr().out


def test_dry_run_writes_nothing(write_package, event_source, capsys):
    path = write_package("dryshop", "models", event_source)

    assert main(["generate", "--dry-run", str(path)]) == 0

    assert not (path.parent / "event_nx_datetime.py").exists()
    assert "event_nx_datetime.py" in capsys.readouterr().out


def test_field_errors_set_exit_code(write_package):
    path = write_package("errshop", "models", BROKEN_FIELD_SOURCE)

    assert main(["generate", str(path)]) == 1
    assert (path.parent / "reading_nx_datetime.py").exists()
    assert main(["generate", "--allow-errors", str(path)]) == 0


def test_manifest_to_output_dir(tmp_path):
    manifest = tmp_path / "decls.json"
    manifest.write_text(
        json.dumps(
            [
                {
                    "name": "DateTest",
                    "namespace": "com.smh.nxdatetime",
                    "fields": [
                        {
                            "name": "dateOne",
                            "type": "kotlin.String",
                            "directives": [
                                {"kind": "text_to_date", "origin_pattern": "yyyy-MM-dd", "prefix": "nx_"},
                                {
                                    "kind": "text_to_text",
                                    "origin_pattern": "yyyy-MM-dd",
                                    "target_pattern": "yyyy MMM dd",
                                    "prefix": "nx_",
                                },
                            ],
                        }
                    ],
                }
            ]
        ),
        encoding="utf-8",
    )
    out = tmp_path / "out"

    code = main(
        [
            "generate",
            "--manifest", str(manifest),
            "--language", "kotlin",
            "--output-dir", str(out),
            "--lower-family-labels",
        ]
    )

    assert code == 0
    unit = out / "com" / "smh" / "nxdatetime" / "DateTest_NXDateExtension.kt"
    text = unit.read_text(encoding="utf-8")
    assert "val DateTest.nx_string_dateOne: String\n" in text
    assert "val DateTest.nx_date_dateOne: Date?\n" in text


def test_suffix_and_config_file(write_package, event_source, tmp_path):
    path = write_package("cfgshop", "models", event_source)
    config = tmp_path / "nx.json"
    config.write_text(json.dumps({"add_comments": False}), encoding="utf-8")

    assert main(["generate", "--suffix", "_dates", "--config", str(config), str(path)]) == 0

    text = (path.parent / "event_dates.py").read_text(encoding="utf-8")
    assert '"""dateOne' not in text


def test_bad_config_file(write_package, event_source, tmp_path, capsys):
    path = write_package("badcfg", "models", event_source)
    assert main(["generate", "--config", str(tmp_path / "missing.json"), str(path)]) == 1
    assert "Configuration error" in capsys.readouterr().out


@pytest.mark.parametrize(
    "argv, message",
    [
        (["generate"], "Input required"),
        (["generate", "--language", "cobol", "x.py"], "Unsupported language"),
        (["generate", "--manifest", "nope.json"], "File not found"),
    ],
)
def test_usage_errors(argv, message, capsys):
    assert main(argv) == 1
    assert message in capsys.readouterr().out


def test_informational_commands(capsys):
    assert main(["generate", "--list-languages"]) == 0
    out = capsys.readouterr().out
    assert "kotlin" in out and "python" in out

    assert main(["generate", "--language-info", "kt"]) == 0
    assert "_NXDateExtension" in capsys.readouterr().out

    assert main(["generate", "--language-info", "cobol"]) == 1


def test_no_command(capsys):
    assert main([]) == 1
