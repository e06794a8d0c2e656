"""
Language-specific accessor generators.

This module contains generators for each supported target language.
"""

from .python import PythonGenerator, create_python_generator
from .kotlin import KotlinGenerator, create_kotlin_generator

__all__ = [
    "PythonGenerator",
    "create_python_generator",
    "KotlinGenerator",
    "create_kotlin_generator",
]
