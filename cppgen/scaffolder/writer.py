"""Rendering and writing of output files.

A :class:`TemplateWriter` is created for one generation run.  It merges the
config-derived placeholder map with step-specific values, renders through a
:class:`~cppgen.scaffolder.placeholders.PlaceholderEngine` and writes the
result, recording every outcome on a :class:`GenerationResult`.  Write
failures are file-scoped: they are recorded and reported, never raised.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, computed_field

from cppgen.utils import print_error, print_note, write_file

from .placeholders import PlaceholderEngine
from .templates import Template


class ProjectKind(str, Enum):
    """Which template subset a project is generated from."""

    BINARY = "binary"
    LIBRARY = "library"
    HEADER_ONLY = "header_only"


class GenerationResult(BaseModel):
    """Outcome of one generation run."""

    output_dir: Path
    project_kind: ProjectKind | None = Field(default=None, description="None for scan & replay runs")
    written: list[Path] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list, description="Templates that were not found")
    failed: dict[str, str] = Field(default_factory=dict, description="Output path -> error message")

    @computed_field  # type: ignore[misc]
    @property
    def success(self) -> bool:
        """True when no file failed to be written."""
        return not self.failed

    def summary(self) -> dict[str, str]:
        """Labels and values for a console summary table."""
        data = {"Output directory": str(self.output_dir)}
        if self.project_kind is not None:
            data["Project kind"] = self.project_kind.value
        data["Files written"] = str(len(self.written))
        data["Templates skipped"] = str(len(self.skipped))
        data["Failures"] = str(len(self.failed))
        return data


def merge_values(base: Mapping[str, str], additional: Mapping[str, str] | None = None) -> dict[str, str]:
    """Combine placeholder maps; *additional* wins on key collision."""
    merged = dict(base)
    if additional:
        merged.update(additional)
    return merged


class TemplateWriter:
    """Renders templates and writes files for a single run."""

    def __init__(
        self,
        engine: PlaceholderEngine,
        values: Mapping[str, str],
        result: GenerationResult,
    ) -> None:
        self.engine = engine
        self.values = dict(values)
        self.result = result

    def render(self, template: Template, additional: Mapping[str, str] | None = None) -> str:
        """Render *template* with the base values plus *additional*."""
        return self.engine.replace(template.content, merge_values(self.values, additional))

    def write(
        self,
        template: Template,
        output_path: Path,
        additional: Mapping[str, str] | None = None,
    ) -> Path | None:
        """Render *template* into *output_path*.

        Returns:
            The written path, or ``None`` if the write failed.
        """
        return self.write_text(output_path, self.render(template, additional))

    def write_text(self, output_path: Path, content: str) -> Path | None:
        """Truncate/create *output_path* with *content*, creating parents."""
        try:
            path = write_file(output_path, content)
        except OSError as exc:
            print_error(f"Failed to write to: {output_path} ({exc})")
            self.result.failed[str(output_path)] = str(exc)
            return None
        print_note(f"Generated: {path}")
        self.result.written.append(path)
        return path

    def missing(self, name: str) -> None:
        """Record that an expected template was not found."""
        print_note(f"Template not found, skipping: {name}")
        self.result.skipped.append(name)
