"""Unit tests for the configuration model (cppgen.config).

Tests cover:
- ConfigEntry construction from plain values and typed accessors
- Rendering of every entry type
- Flag interpretation (bool and string-truthy)
- GeneratorConfig loading from TOML, group mapping and error handling
- Placeholder derivation (PROJECT_*, build/cmake keys, DEPENDENCIES,
  CMAKE_OPTIONS, CMAKE_DEFINES)
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from cppgen.config import ConfigEntry, ConfigGroup, EntryType, GeneratorConfig
from cppgen.errors import ConfigError, TypeMismatchError

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# ConfigEntry
# ---------------------------------------------------------------------------


class TestConfigEntryFromValue:
    def test_bool_is_not_integer(self):
        assert ConfigEntry.from_value(True).type is EntryType.BOOLEAN

    def test_scalars(self):
        assert ConfigEntry.from_value(3).type is EntryType.INTEGER
        assert ConfigEntry.from_value(2.5).type is EntryType.FLOAT
        assert ConfigEntry.from_value("x").type is EntryType.STRING

    def test_array_elements_are_entries(self):
        entry = ConfigEntry.from_value(["a", 1])
        assert entry.type is EntryType.ARRAY
        assert [item.type for item in entry.as_array()] == [EntryType.STRING, EntryType.INTEGER]

    def test_nested_dictionary(self):
        entry = ConfigEntry.from_value({"version": "1.0", "opts": {"a": True}})
        table = entry.as_dict()
        assert table["version"].as_string() == "1.0"
        assert table["opts"].as_dict()["a"].as_bool() is True

    def test_date_becomes_string(self):
        entry = ConfigEntry.from_value(date(2024, 1, 2))
        assert entry.as_string() == "2024-01-02"

    def test_to_python_round_trip(self):
        raw = {"a": [1, "b", {"c": False}]}
        assert ConfigEntry.from_value(raw).to_python() == raw


class TestConfigEntryAccessors:
    def test_wrong_tag_raises_type_mismatch(self):
        entry = ConfigEntry.from_value(5)
        with pytest.raises(TypeMismatchError) as exc_info:
            entry.as_string()
        assert exc_info.value.expected == "string"
        assert exc_info.value.actual == "integer"

    def test_type_mismatch_is_a_type_error(self):
        with pytest.raises(TypeError):
            ConfigEntry.from_value("x").as_bool()

    def test_int_is_not_readable_as_float(self):
        with pytest.raises(TypeMismatchError):
            ConfigEntry.from_value(1).as_float()


class TestConfigEntryRender:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("hello", "hello"),
            (True, "ON"),
            (False, "OFF"),
            (17, "17"),
            (2.5, "2.5"),
            (["a", 1, True], "a 1 ON"),
            ([], ""),
            ({"k": "v"}, "[Dictionary]"),
        ],
    )
    def test_render(self, raw, expected):
        assert ConfigEntry.from_value(raw).render() == expected


class TestIsTruthy:
    @pytest.mark.parametrize("raw", [True, "true", "ON", "1", "yes", " True "])
    def test_truthy(self, raw):
        assert ConfigEntry.from_value(raw).is_truthy() is True

    @pytest.mark.parametrize("raw", [False, "false", "off", "0", "", "maybe"])
    def test_falsy(self, raw):
        assert ConfigEntry.from_value(raw).is_truthy() is False

    def test_integer_flag_is_rejected(self):
        with pytest.raises(TypeMismatchError):
            ConfigEntry.from_value(1).is_truthy()


# ---------------------------------------------------------------------------
# Groups & lookup
# ---------------------------------------------------------------------------


class TestConfigGroup:
    def test_known_sections(self):
        assert ConfigGroup.from_section("build") is ConfigGroup.BUILD
        assert ConfigGroup.from_section("cmake") is ConfigGroup.BUILD_SYSTEM_OPTIONS
        assert ConfigGroup.from_section("package_managers") is ConfigGroup.PACKAGE_MANAGERS

    def test_unknown_section_maps_to_project(self):
        assert ConfigGroup.from_section("metadata") is ConfigGroup.PROJECT_INFO


class TestGeneratorConfigLookup:
    def test_missing_group_is_empty(self):
        assert GeneratorConfig().group(ConfigGroup.BUILD) == {}

    def test_missing_entry_is_none(self):
        assert GeneratorConfig().entry(ConfigGroup.BUILD, "nope") is None

    def test_flag_default(self):
        config = GeneratorConfig()
        assert config.flag(ConfigGroup.TEMPLATES, "main", default=True) is True
        assert config.flag(ConfigGroup.TEMPLATES, "main") is False

    def test_flag_wrong_type_names_key(self):
        config = GeneratorConfig.from_mapping({"templates": {"main": 1}})
        with pytest.raises(TypeMismatchError, match="templates.main"):
            config.flag(ConfigGroup.TEMPLATES, "main")

    def test_project_name(self):
        config = GeneratorConfig.from_mapping({"project": {"name": "demo"}})
        assert config.project_name == "demo"
        assert GeneratorConfig().project_name == ""

    def test_project_name_wrong_type(self):
        config = GeneratorConfig.from_mapping({"project": {"name": 42}})
        with pytest.raises(TypeMismatchError):
            _ = config.project_name

    def test_unknown_sections_merge_into_project(self):
        config = GeneratorConfig.from_mapping(
            {"project": {"name": "demo"}, "metadata": {"license": "MIT"}}
        )
        assert config.entry(ConfigGroup.PROJECT_INFO, "license").as_string() == "MIT"

    def test_top_level_scalar(self):
        config = GeneratorConfig.from_mapping({"title": "x"})
        assert config.entry(ConfigGroup.PROJECT_INFO, "title").as_string() == "x"

    def test_frozen(self):
        config = GeneratorConfig()
        with pytest.raises(Exception):
            config.groups = {}


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoad:
    def test_load_groups(self, sample_config: GeneratorConfig):
        assert sample_config.project_name == "demo"
        assert sample_config.entry(ConfigGroup.BUILD, "cpp_standard").as_int() == 20
        assert set(sample_config.group(ConfigGroup.DEPENDENCIES)) == {"fmt", "spdlog"}

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found") as exc_info:
            GeneratorConfig.load(tmp_path / "missing.toml")
        assert exc_info.value.path == tmp_path / "missing.toml"

    def test_invalid_toml(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text("[project\nname = ", encoding="utf-8")
        with pytest.raises(ConfigError, match="Error parsing TOML"):
            GeneratorConfig.load(path)

    def test_to_mapping(self, sample_config: GeneratorConfig):
        mapping = sample_config.to_mapping()
        assert mapping["project"]["version"] == "1.2.3"
        assert mapping["cmake"]["defines"]["DEMO_LEVEL"] == 3


# ---------------------------------------------------------------------------
# Placeholder derivation
# ---------------------------------------------------------------------------


class TestPlaceholderValues:
    def test_project_keys_are_prefixed(self, sample_config: GeneratorConfig):
        values = sample_config.placeholder_values()
        assert values["PROJECT_NAME"] == "demo"
        assert values["PROJECT_VERSION"] == "1.2.3"
        assert values["PROJECT_NAMESPACE"] == "demo_ns"

    def test_build_keys_are_uppercased(self, sample_config: GeneratorConfig):
        values = sample_config.placeholder_values()
        assert values["CPP_STANDARD"] == "20"
        assert values["ENABLE_TESTING"] == "ON"
        assert values["USE_MODULES"] == "OFF"

    def test_cmake_scalars_override_build(self):
        config = GeneratorConfig.from_mapping(
            {"build": {"generator": "Make"}, "cmake": {"generator": "Ninja"}}
        )
        assert config.placeholder_values()["GENERATOR"] == "Ninja"

    def test_dependencies_listing(self, sample_config: GeneratorConfig):
        assert sample_config.placeholder_values()["DEPENDENCIES"] == "fmt 10.2.1\nspdlog 1.13.0\n"

    def test_dependency_without_version(self):
        config = GeneratorConfig.from_mapping({"dependencies": {"boost": {"git": "x"}}})
        assert config.placeholder_values()["DEPENDENCIES"] == "boost\n"

    def test_dependency_string_shorthand(self):
        config = GeneratorConfig.from_mapping({"dependencies": {"fmt": "10.0.0"}})
        assert config.placeholder_values()["DEPENDENCIES"] == "fmt 10.0.0\n"

    def test_cmake_options(self, sample_config: GeneratorConfig):
        assert (
            sample_config.placeholder_values()["CMAKE_OPTIONS"]
            == 'option(BUILD_SHARED_LIBS "BUILD_SHARED_LIBS" OFF)\n'
        )

    def test_cmake_defines_omit_empty_value(self, sample_config: GeneratorConfig):
        assert sample_config.placeholder_values()["CMAKE_DEFINES"] == (
            "add_compile_definitions(DEMO_DEBUG)\n"
            "add_compile_definitions(DEMO_LEVEL=3)\n"
        )

    def test_aggregates_always_present(self):
        values = GeneratorConfig().placeholder_values()
        assert values == {"DEPENDENCIES": "", "CMAKE_OPTIONS": "", "CMAKE_DEFINES": ""}

    def test_nested_table_renders_opaque(self):
        config = GeneratorConfig.from_mapping({"project": {"type": {"type": "library"}}})
        assert config.placeholder_values()["PROJECT_TYPE"] == "[Dictionary]"
