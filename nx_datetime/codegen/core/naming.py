"""
Naming utilities for safe code generation.

Case conversion for unit file names and helper arguments, and identifier
checks for generated accessor names.
"""

import keyword
import re
from typing import Set
from enum import Enum


class NamingCase(Enum):
    """Different naming case styles."""
    SNAKE_CASE = "snake"      # date_test
    CAMEL_CASE = "camel"      # dateTest
    PASCAL_CASE = "pascal"    # DateTest


class NameSanitizer:
    """Case conversion and identifier checks for one target language."""

    def __init__(self, reserved_words: Set[str] = None):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
        """
        self.reserved_words = reserved_words or set()

    def convert(self, name: str, target_case: NamingCase) -> str:
        """Clean a name and convert it to the target case."""
        return self._convert_case(self._clean_basic(name), target_case)

    def is_valid_identifier(self, name: str) -> bool:
        """Whether a name can be emitted verbatim."""
        return name.isidentifier() and name not in self.reserved_words

    def _clean_basic(self, name: str) -> str:
        """Basic name cleanup - remove invalid characters."""
        cleaned = re.sub(r'[^a-zA-Z0-9_]', '_', name).strip('_')
        return cleaned or "unit"

    def _convert_case(self, name: str, target_case: NamingCase) -> str:
        """Convert name to target case style."""
        if target_case == NamingCase.SNAKE_CASE:
            return self._to_snake_case(name)
        elif target_case == NamingCase.CAMEL_CASE:
            return self._to_camel_case(name)
        elif target_case == NamingCase.PASCAL_CASE:
            return self._to_pascal_case(name)
        return name

    def _to_snake_case(self, name: str) -> str:
        """Convert to snake_case."""
        # HTTPServer -> HTTP_Server, dateTest -> date_Test
        name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
        name = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name)
        return re.sub(r'_+', '_', name.lower()).strip('_')

    def _to_camel_case(self, name: str) -> str:
        """Convert to camelCase."""
        parts = self._to_snake_case(name).split('_')
        return parts[0] + ''.join(part.capitalize() for part in parts[1:])

    def _to_pascal_case(self, name: str) -> str:
        """Convert to PascalCase."""
        if '_' not in name and name[:1].isupper():
            return name
        return ''.join(part.capitalize() for part in self._to_snake_case(name).split('_') if part)


KOTLIN_RESERVED_WORDS = {
    'as', 'break', 'class', 'continue', 'do', 'else', 'false', 'for', 'fun',
    'if', 'in', 'interface', 'is', 'null', 'object', 'package', 'return',
    'super', 'this', 'throw', 'true', 'try', 'typealias', 'typeof', 'val',
    'var', 'when', 'while',
}


def create_python_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Python."""
    return NameSanitizer(set(keyword.kwlist))


def create_kotlin_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Kotlin."""
    return NameSanitizer(set(KOTLIN_RESERVED_WORDS))
