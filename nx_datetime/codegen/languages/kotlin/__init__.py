"""
Kotlin accessor generator module.

Emits extension properties calling the JVM reformatting helpers.
"""

from .generator import KOTLIN_HELPERS, KotlinGenerator, create_kotlin_generator

__all__ = [
    "KotlinGenerator",
    "KOTLIN_HELPERS",
    "create_kotlin_generator",
]
