"""Runtime helpers called by generated accessors.

Patterns use the Java ``SimpleDateFormat`` letters (``yyyy-MM-dd``,
``dd MMM yyyy HH:mm``) so one annotation reads the same for every target
language. Text is parsed with dateparser; integer timestamps are epoch
milliseconds in local time.
"""

import re
from datetime import datetime
from functools import lru_cache
from typing import Callable, Dict, List, Optional, Tuple

import dateparser

from .logging_config import get_logger

logger = get_logger(__name__)


class PatternError(ValueError):
    """Raised for a pattern letter that has no meaning."""

    pass


# Only the origin pattern may match; no free-form fallback
_PARSE_SETTINGS = {"PARSERS": ["custom-formats"]}

_TOKEN_RE = re.compile(r"'(?:[^']|'')*'|([A-Za-z])\1*|[^A-Za-z']+")

# strptime directives, keyed by (letter, minimum run length), longest first
_PARSE_DIRECTIVES: Dict[str, List[Tuple[int, str]]] = {
    "y": [(3, "%Y"), (2, "%y"), (1, "%Y")],
    "M": [(4, "%B"), (3, "%b"), (1, "%m")],
    "d": [(1, "%d")],
    "H": [(1, "%H")],
    "h": [(1, "%I")],
    "m": [(1, "%M")],
    "s": [(1, "%S")],
    "S": [(1, "%f")],
    "a": [(1, "%p")],
    "E": [(4, "%A"), (1, "%a")],
    "Z": [(1, "%z")],
    "z": [(1, "%Z")],
}


def _pick(letter: str, count: int) -> str:
    for minimum, directive in _PARSE_DIRECTIVES[letter]:
        if count >= minimum:
            return directive
    raise PatternError(f"Unsupported pattern letter run: {letter * count}")


@lru_cache(maxsize=256)
def tokenize_pattern(pattern: str) -> Tuple[Tuple[str, int, str], ...]:
    """Split a Java-style pattern into (letter, run length, literal) tokens.

    Letter tokens have an empty literal; literal tokens have an empty letter.
    """
    tokens = []
    for match in _TOKEN_RE.finditer(pattern):
        text = match.group(0)
        if text.startswith("'"):
            literal = text[1:-1].replace("''", "'") if len(text) > 2 else "'"
            tokens.append(("", 0, literal))
        elif match.group(1):
            letter = match.group(1)
            if letter not in _PARSE_DIRECTIVES:
                raise PatternError(f"Illegal pattern character '{letter}' in {pattern!r}")
            tokens.append((letter, len(text), ""))
        else:
            tokens.append(("", 0, text))
    return tuple(tokens)


def to_strptime(pattern: str) -> str:
    """Translate a Java-style pattern to a strptime/strftime format.

    Args:
        pattern: Pattern such as ``yyyy-MM-dd``

    Returns:
        Format such as ``%Y-%m-%d``
    """
    parts = []
    for letter, count, literal in tokenize_pattern(pattern):
        if letter:
            parts.append(_pick(letter, count))
        else:
            parts.append(literal.replace("%", "%%"))
    return "".join(parts)


def _padded(value: int, count: int) -> str:
    return str(value).zfill(count)


def _hour12(value: datetime) -> int:
    return value.hour % 12 or 12


_FORMATTERS: Dict[str, Callable[[datetime, int], str]] = {
    "y": lambda v, n: _padded(v.year % 100, 2) if n == 2 else _padded(v.year, n),
    "M": lambda v, n: (
        v.strftime("%B") if n >= 4 else v.strftime("%b") if n == 3 else _padded(v.month, n)
    ),
    "d": lambda v, n: _padded(v.day, n),
    "H": lambda v, n: _padded(v.hour, n),
    "h": lambda v, n: _padded(_hour12(v), n),
    "m": lambda v, n: _padded(v.minute, n),
    "s": lambda v, n: _padded(v.second, n),
    "S": lambda v, n: _padded(v.microsecond // 1000, n),
    "a": lambda v, n: "AM" if v.hour < 12 else "PM",
    "E": lambda v, n: v.strftime("%A") if n >= 4 else v.strftime("%a"),
    "Z": lambda v, n: v.strftime("%z"),
    "z": lambda v, n: v.strftime("%Z"),
}


def render_pattern(value: datetime, pattern: str) -> str:
    """Format a datetime with a Java-style pattern.

    Numeric fields honour the run length as minimum width (``M`` gives
    ``1``, ``MM`` gives ``01``), which strftime can't express portably.
    """
    parts = []
    for letter, count, literal in tokenize_pattern(pattern):
        parts.append(_FORMATTERS[letter](value, count) if letter else literal)
    return "".join(parts)


def parse_text(value: Optional[str], origin_pattern: str) -> Optional[datetime]:
    """Parse text written in ``origin_pattern``.

    Args:
        value: Text to parse
        origin_pattern: Java-style pattern of ``value``

    Returns:
        The parsed datetime, or None when ``value`` is None or doesn't parse
    """
    if value is None:
        return None

    parsed = dateparser.parse(
        value,
        date_formats=[to_strptime(origin_pattern)],
        settings=_PARSE_SETTINGS,
    )
    if parsed is None:
        logger.debug("Could not parse %r with pattern %r", value, origin_pattern)
    return parsed


def reformat_text(value: Optional[str], origin_pattern: str, target_pattern: str) -> Optional[str]:
    """Rewrite text from ``origin_pattern`` to ``target_pattern``.

    Text that doesn't parse is returned unchanged.
    """
    if value is None:
        return None

    parsed = parse_text(value, origin_pattern)
    if parsed is None:
        return value
    return render_pattern(parsed, target_pattern)


def timestamp_to_date(value: Optional[int]) -> Optional[datetime]:
    """Epoch milliseconds as a local datetime."""
    if value is None:
        return None
    return datetime.fromtimestamp(value / 1000)


def format_timestamp(value: Optional[int], target_pattern: str) -> Optional[str]:
    """Epoch milliseconds formatted with ``target_pattern``."""
    if value is None:
        return None
    return render_pattern(timestamp_to_date(value), target_pattern)


def format_date(value: Optional[datetime], target_pattern: str) -> Optional[str]:
    """A datetime formatted with ``target_pattern``."""
    if value is None:
        return None
    return render_pattern(value, target_pattern)


__all__ = [
    "PatternError",
    "format_date",
    "format_timestamp",
    "parse_text",
    "reformat_text",
    "render_pattern",
    "timestamp_to_date",
    "to_strptime",
]
