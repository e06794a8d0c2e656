import textwrap
from pathlib import Path

import pytest

from nx_datetime.codegen.core.schema import (
    DateToText,
    Declaration,
    Field,
    TextToDate,
    TextToText,
)


@pytest.fixture()
def scenario_declaration():
    """The two-field declaration used across pipeline tests."""
    return Declaration(
        name="DateTest",
        namespace="com.smh.nxdatetime",
        fields=(
            Field(
                name="dateOne",
                type_name="kotlin.String",
                directives=(
                    TextToDate("yyyy-MM-dd", prefix="nx_"),
                    TextToText("yyyy-MM-dd", "yyyy MMM dd", prefix="nx_"),
                ),
            ),
            Field(
                name="dateTwo",
                type_name="java.util.Date",
                directives=(DateToText("dd MMM yyyy", prefix="nx_"),),
            ),
        ),
        source_path="app/DateTest.kt",
        source_digest="0" * 64,
    )


@pytest.fixture()
def write_package(tmp_path: Path):
    """Create a package below tmp_path holding one module with the given source."""

    def _write(package: str, module: str, source: str) -> Path:
        package_dir = tmp_path / package
        package_dir.mkdir(parents=True, exist_ok=True)
        (package_dir / "__init__.py").write_text("", encoding="utf-8")
        path = package_dir / f"{module}.py"
        path.write_text(textwrap.dedent(source).lstrip(), encoding="utf-8")
        return path

    return _write


EVENT_SOURCE = '''
from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, ClassVar, Optional

from nx_datetime.annotations import (
    DateToText,
    IntegerToDate,
    IntegerToText,
    TextToDate,
    TextToText,
    datetime_extension,
)


@datetime_extension
@dataclass
class Event:
    dateOne: Annotated[
        str,
        TextToDate("yyyy-MM-dd", prefix="nx_"),
        TextToText("yyyy-MM-dd", "yyyy MMM dd", prefix="nx_"),
    ]
    dateTwo: Annotated[datetime, DateToText("dd MMM yyyy", prefix="nx_")]
    created: Annotated[int, IntegerToText("yyyy-MM-dd", prefix="fmt_"), IntegerToDate(prefix="at_")]
    updated: Annotated[Optional[str], TextToText("dd/MM/yyyy", "yyyy-MM-dd", prefix="iso_")] = None
    registry: ClassVar[dict] = {}


class Plain:
    when: Annotated[str, TextToDate("yyyy-MM-dd")]
'''


@pytest.fixture()
def event_source():
    return EVENT_SOURCE
