"""cppgen configuration model.

A generator configuration is a fixed set of *groups* (project info, build,
dependencies, ...) each holding a mapping of keys to typed values.  The
values form a closed tagged union (:class:`ConfigEntry`) so that every
consumer has to say which type it expects; reading a value through the wrong
tag raises :class:`~cppgen.errors.TypeMismatchError` instead of coercing.

The model is built once per run (normally from a TOML file) and is frozen
afterwards.  :meth:`GeneratorConfig.placeholder_values` derives the flat
``{TOKEN: text}`` map that templates are rendered with.
"""

from __future__ import annotations

import tomllib
from datetime import date, datetime, time
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from cppgen.errors import ConfigError, TypeMismatchError

TRUTHY_STRINGS = frozenset({"true", "on", "1", "yes"})

# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------


class ConfigGroup(str, Enum):
    """Top-level configuration groups, keyed by their TOML section name."""

    PROJECT_INFO = "project"
    BUILD = "build"
    DEPENDENCIES = "dependencies"
    TEMPLATES = "templates"
    PACKAGE_MANAGERS = "package_managers"
    BUILD_SYSTEM_OPTIONS = "cmake"

    @classmethod
    def from_section(cls, section: str) -> "ConfigGroup":
        """Map a TOML section name to its group.

        Unknown sections fall back to :attr:`PROJECT_INFO`.
        """
        try:
            return cls(section)
        except ValueError:
            return cls.PROJECT_INFO


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------


class EntryType(str, Enum):
    """Type tag of a :class:`ConfigEntry`."""

    STRING = "string"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    ARRAY = "array"
    DICTIONARY = "dictionary"


class ConfigEntry(BaseModel):
    """A single typed configuration value.

    ``value`` holds a ``str``, ``bool``, ``int``, ``float``, a ``tuple`` of
    entries or a ``dict`` of entries depending on ``type``.
    """

    model_config = ConfigDict(frozen=True)

    type: EntryType
    value: Any

    @classmethod
    def from_value(cls, raw: Any) -> "ConfigEntry":
        """Wrap a plain Python value (as produced by a TOML parser)."""
        # bool first: it is a subclass of int
        if isinstance(raw, bool):
            return cls(type=EntryType.BOOLEAN, value=raw)
        if isinstance(raw, int):
            return cls(type=EntryType.INTEGER, value=raw)
        if isinstance(raw, float):
            return cls(type=EntryType.FLOAT, value=raw)
        if isinstance(raw, str):
            return cls(type=EntryType.STRING, value=raw)
        if isinstance(raw, (list, tuple)):
            return cls(
                type=EntryType.ARRAY,
                value=tuple(cls.from_value(item) for item in raw),
            )
        if isinstance(raw, dict):
            return cls(
                type=EntryType.DICTIONARY,
                value={str(k): cls.from_value(v) for k, v in raw.items()},
            )
        if isinstance(raw, (datetime, date, time)):
            return cls(type=EntryType.STRING, value=raw.isoformat())
        return cls(type=EntryType.STRING, value=str(raw))

    # -- Typed accessors ---------------------------------------------------

    def _expect(self, expected: EntryType) -> Any:
        if self.type is not expected:
            raise TypeMismatchError(expected.value, self.type.value)
        return self.value

    def as_string(self) -> str:
        return self._expect(EntryType.STRING)

    def as_bool(self) -> bool:
        return self._expect(EntryType.BOOLEAN)

    def as_int(self) -> int:
        return self._expect(EntryType.INTEGER)

    def as_float(self) -> float:
        return self._expect(EntryType.FLOAT)

    def as_array(self) -> tuple["ConfigEntry", ...]:
        return self._expect(EntryType.ARRAY)

    def as_dict(self) -> dict[str, "ConfigEntry"]:
        return self._expect(EntryType.DICTIONARY)

    # -- Conversion --------------------------------------------------------

    def render(self) -> str:
        """Stringify the value for placeholder substitution.

        Strings render as themselves, booleans as ``ON``/``OFF``, numbers as
        decimal text, arrays as their space-joined elements.  Dictionaries
        are not meant for direct substitution and render as ``[Dictionary]``.
        """
        if self.type is EntryType.STRING:
            return self.value
        if self.type is EntryType.BOOLEAN:
            return "ON" if self.value else "OFF"
        if self.type in (EntryType.INTEGER, EntryType.FLOAT):
            return str(self.value)
        if self.type is EntryType.ARRAY:
            return " ".join(item.render() for item in self.value)
        if self.type is EntryType.DICTIONARY:
            return "[Dictionary]"
        raise AssertionError(f"Unhandled entry type: {self.type}")

    def is_truthy(self) -> bool:
        """Interpret a boolean or a string flag (``"true"``/``"on"``/``"1"``/``"yes"``).

        Raises:
            TypeMismatchError: For any other type.
        """
        if self.type is EntryType.BOOLEAN:
            return self.value
        if self.type is EntryType.STRING:
            return self.value.strip().lower() in TRUTHY_STRINGS
        raise TypeMismatchError("boolean or string flag", self.type.value)

    def to_python(self) -> Any:
        """Convert back to plain Python values."""
        if self.type is EntryType.ARRAY:
            return [item.to_python() for item in self.value]
        if self.type is EntryType.DICTIONARY:
            return {k: v.to_python() for k, v in self.value.items()}
        return self.value


# ---------------------------------------------------------------------------
# Configuration model
# ---------------------------------------------------------------------------


class GeneratorConfig(BaseModel):
    """Group-keyed generator configuration.

    Instances are created once (usually via :meth:`load`) and then passed to
    the generators.  Missing groups and keys are never an error: lookups
    return an empty mapping or ``None``.
    """

    model_config = ConfigDict(frozen=True)

    groups: dict[ConfigGroup, dict[str, ConfigEntry]] = Field(default_factory=dict)

    # -- Lookup ------------------------------------------------------------

    def group(self, group: ConfigGroup) -> dict[str, ConfigEntry]:
        """Return the entries of *group* (empty if the group is absent)."""
        return self.groups.get(group, {})

    def entry(self, group: ConfigGroup, key: str) -> ConfigEntry | None:
        """Return a single entry, or ``None`` if absent."""
        return self.group(group).get(key)

    def flag(self, group: ConfigGroup, key: str, default: bool = False) -> bool:
        """Read a boolean flag that may also be spelled as a string.

        Raises:
            TypeMismatchError: If the entry exists with a non-flag type.
        """
        found = self.entry(group, key)
        if found is None:
            return default
        try:
            return found.is_truthy()
        except TypeMismatchError as exc:
            raise TypeMismatchError(exc.expected, exc.actual, key=f"{group.value}.{key}") from exc

    @property
    def project_name(self) -> str:
        """The ``project.name`` string, or ``""`` when not set."""
        found = self.entry(ConfigGroup.PROJECT_INFO, "name")
        if found is None:
            return ""
        return found.as_string()

    # -- Placeholder derivation -------------------------------------------

    def placeholder_values(self) -> dict[str, str]:
        """Derive the ``{TOKEN: text}`` map used to render templates.

        * ``project.<key>`` becomes ``PROJECT_<KEY>``.
        * ``build.<key>`` and ``cmake.<key>`` become ``<KEY>``.
        * ``DEPENDENCIES`` lists one dependency per line, with its version.
        * ``CMAKE_OPTIONS`` / ``CMAKE_DEFINES`` expand the ``cmake.options``
          and ``cmake.defines`` tables into CMake statements.
        """
        values: dict[str, str] = {}

        for key, found in self.group(ConfigGroup.PROJECT_INFO).items():
            values[f"PROJECT_{key.upper()}"] = found.render()

        for group in (ConfigGroup.BUILD, ConfigGroup.BUILD_SYSTEM_OPTIONS):
            for key, found in self.group(group).items():
                values[key.upper()] = found.render()

        values["DEPENDENCIES"] = self._render_dependencies()
        values["CMAKE_OPTIONS"] = self._render_cmake_options()
        values["CMAKE_DEFINES"] = self._render_cmake_defines()
        return values

    def _render_dependencies(self) -> str:
        lines: list[str] = []
        for name, found in self.group(ConfigGroup.DEPENDENCIES).items():
            version = None
            if found.type is EntryType.DICTIONARY:
                version = found.as_dict().get("version")
            elif found.type is EntryType.STRING:
                version = found
            if version is not None:
                lines.append(f"{name} {version.render()}\n")
            else:
                lines.append(f"{name}\n")
        return "".join(lines)

    def _cmake_table(self, key: str) -> dict[str, ConfigEntry]:
        found = self.entry(ConfigGroup.BUILD_SYSTEM_OPTIONS, key)
        if found is None or found.type is not EntryType.DICTIONARY:
            return {}
        return found.as_dict()

    def _render_cmake_options(self) -> str:
        return "".join(
            f'option({option} "{option}" {value.render()})\n'
            for option, value in self._cmake_table("options").items()
        )

    def _render_cmake_defines(self) -> str:
        lines: list[str] = []
        for define, value in self._cmake_table("defines").items():
            rendered = value.render()
            suffix = f"={rendered}" if rendered else ""
            lines.append(f"add_compile_definitions({define}{suffix})\n")
        return "".join(lines)

    # -- Construction ------------------------------------------------------

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "GeneratorConfig":
        """Build a config from a parsed TOML document.

        Tables are assigned to the group named after their section; unknown
        sections merge into the project group.  Top-level scalars are stored
        under their own key in the group their name maps to.
        """
        groups: dict[ConfigGroup, dict[str, ConfigEntry]] = {}
        for section, node in data.items():
            group = ConfigGroup.from_section(section)
            bucket = groups.setdefault(group, {})
            if isinstance(node, dict):
                for key, value in node.items():
                    bucket[key] = ConfigEntry.from_value(value)
            else:
                bucket[section] = ConfigEntry.from_value(node)
        return cls(groups=groups)

    @classmethod
    def load(cls, path: str | Path) -> "GeneratorConfig":
        """Load a configuration from a TOML file.

        Raises:
            ConfigError: If the file is missing, unreadable or not valid TOML.
        """
        config_path = Path(path)
        try:
            with config_path.open("rb") as fh:
                data = tomllib.load(fh)
        except FileNotFoundError as exc:
            raise ConfigError(f"Config file not found: {config_path}", config_path) from exc
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Error parsing TOML file {config_path}: {exc}", config_path) from exc
        except OSError as exc:
            raise ConfigError(f"Cannot read config file {config_path}: {exc}", config_path) from exc
        return cls.from_mapping(data)

    def to_mapping(self) -> dict[str, dict[str, Any]]:
        """Convert back to plain nested Python values keyed by section name."""
        return {
            group.value: {key: found.to_python() for key, found in entries.items()}
            for group, entries in self.groups.items()
        }
