"""
Unit output.

Places generated units on disk, rewriting a file only when its content
changed, and reads back the source digest recorded in a unit header.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from nx_datetime.logging_config import get_logger

from .generator import GeneratedUnit

logger = get_logger(__name__)

DIGEST_PATTERN = re.compile(r"source-sha256: ([0-9a-f]{64})")


@dataclass(frozen=True)
class WrittenUnit:
    """Outcome of placing one unit."""

    unit: GeneratedUnit
    path: Path
    changed: bool


def unit_path(unit: GeneratedUnit, output_dir: Optional[Union[str, Path]] = None) -> Path:
    """
    Where a unit belongs.

    With an output directory the unit goes below it, one directory per
    namespace segment. Without one it sits next to its source file, or
    under the current directory when it has no source file.

    Args:
        unit: Generated unit
        output_dir: Optional output root

    Returns:
        Target file path
    """
    if output_dir:
        return Path(output_dir) / unit.relative_path

    for dependency in unit.dependencies:
        source = Path(dependency)
        if source.suffix == ".py":
            return source.parent / unit.file_name

    return unit.relative_path


def write_unit(unit: GeneratedUnit, output_dir: Optional[Union[str, Path]] = None) -> WrittenUnit:
    """Write one unit, leaving identical files untouched."""
    path = unit_path(unit, output_dir)

    if path.exists() and path.read_text(encoding="utf-8") == unit.code:
        logger.debug("Unchanged: %s", path)
        return WrittenUnit(unit, path, changed=False)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(unit.code, encoding="utf-8")
    logger.info("Wrote %s", path)
    return WrittenUnit(unit, path, changed=True)


def write_units(
    units: Iterable[GeneratedUnit], output_dir: Optional[Union[str, Path]] = None
) -> List[WrittenUnit]:
    """
    Write every unit of a processing pass.

    Args:
        units: Units to write
        output_dir: Optional output root

    Returns:
        One WrittenUnit per unit, in input order
    """
    return [write_unit(unit, output_dir) for unit in units]


def read_recorded_digest(path: Union[str, Path]) -> Optional[str]:
    """Source digest recorded in a unit's header, if any."""
    path = Path(path)
    if not path.exists():
        return None

    with path.open("r", encoding="utf-8") as f:
        for _ in range(10):
            line = f.readline()
            if not line:
                break
            match = DIGEST_PATTERN.search(line)
            if match:
                return match.group(1)
    return None


def is_up_to_date(path: Union[str, Path], digest: Optional[str]) -> bool:
    """
    Whether the unit at ``path`` was generated from a source with ``digest``.

    Args:
        path: Existing unit file
        digest: Current source digest

    Returns:
        False when the file is missing, has no digest or a different one
    """
    if digest is None:
        return False
    return read_recorded_digest(path) == digest
