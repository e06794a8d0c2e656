import pytest

from nx_datetime.codegen.core.config import GeneratorConfig
from nx_datetime.codegen.languages.kotlin import KotlinGenerator
from nx_datetime.codegen.languages.python import PythonGenerator
from nx_datetime.codegen.registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    get_registry,
    list_all_language_info,
    list_supported_languages,
)


def test_builtin_languages():
    assert list_supported_languages() == ["kotlin", "python"]
    registry = get_registry()
    assert registry.is_supported("PY")
    assert registry.is_supported("kt")
    assert not registry.is_supported("go")


def test_get_generator_uses_language_defaults():
    generator = get_generator("kt")
    assert isinstance(generator, KotlinGenerator)
    assert generator.config.unit_suffix == "_NXDateExtension"

    generator = get_generator("python", {"family_label_case": "lower"})
    assert isinstance(generator, PythonGenerator)
    assert generator.config.family_label_case == "lower"

    config = GeneratorConfig(unit_suffix="_mine")
    assert get_generator("py", config).config is config


def test_unknown_language():
    with pytest.raises(RegistryError, match="Available: kotlin, python"):
        get_generator("cobol")


def test_bad_config_type():
    with pytest.raises(RegistryError, match="Invalid config type"):
        get_generator("python", 42)


def test_language_info():
    info = get_language_info("kt")
    assert info["name"] == "kotlin"
    assert info["aliases"] == ["kt"]
    assert info["file_extension"] == ".kt"
    assert info["example_file"] == "DateTest_NXDateExtension.kt"

    assert list_all_language_info()["python"]["example_file"] == "date_test_nx_datetime.py"


def test_registry_aliases_and_conflicts():
    registry = GeneratorRegistry()
    registry.register("python", PythonGenerator, aliases=["py"])

    assert registry.resolve_language("PY") == "python"
    assert registry.list_languages() == ["python"]

    with pytest.raises(RegistryError):
        registry.register("kotlin", KotlinGenerator, aliases=["py"])
    with pytest.raises(RegistryError):
        registry.register("broken", object)

    assert registry.is_supported("py")
    assert not registry.is_supported("kotlin")
