"""
Python accessor generator module.

Emits modules that attach read-only date/time properties to declarations.
"""

from .generator import PythonGenerator, create_python_generator
from .config import OptionalStyle, PythonConfig

__all__ = [
    "PythonGenerator",
    "create_python_generator",
    "PythonConfig",
    "OptionalStyle",
]
