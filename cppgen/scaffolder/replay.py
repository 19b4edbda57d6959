"""Scan & replay generation.

Copies an arbitrary template folder into an output directory, running every
file through the placeholder engine on the way.  Unlike the config-driven
:class:`~cppgen.scaffolder.generator.ProjectGenerator` nothing is
classified: the folder's layout is reproduced as-is.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from cppgen.config import GeneratorConfig
from cppgen.errors import GenerationError, TemplateNotFoundError
from cppgen.utils import ensure_dir, print_error, read_file

from .placeholders import PlaceholderEngine
from .scanner import ROOT_FILES_NODE, Directory, list_templates, scan_template_directory
from .writer import GenerationResult, TemplateWriter, merge_values

DEFAULT_VALUES: dict[str, str] = {
    "PROJECT_NAME": "MyGeneratedProject",
    "AUTHOR_NAME": "CGen User",
    "APP_NAME": "DefaultApp",
}


class ReplayGenerator:
    """Replays a scanned template folder into an output directory.

    Args:
        engine: Placeholder engine; ``@TOKEN@`` only when omitted.
        values: Placeholder values merged over :data:`DEFAULT_VALUES`.
    """

    def __init__(
        self,
        engine: PlaceholderEngine | None = None,
        values: Mapping[str, str] | None = None,
    ) -> None:
        self.engine = engine or PlaceholderEngine()
        self.values = merge_values(DEFAULT_VALUES, values)

    @classmethod
    def from_config(
        cls,
        config: GeneratorConfig,
        engine: PlaceholderEngine | None = None,
    ) -> "ReplayGenerator":
        """Use the placeholder map derived from *config* on top of the defaults."""
        return cls(engine, config.placeholder_values())

    def generate(
        self,
        template_name: str,
        base_dir: str | Path,
        output_dir: str | Path,
    ) -> GenerationResult:
        """Replay ``base_dir / template_name`` into *output_dir*.

        Raises:
            ScanError: If *base_dir* or the template cannot be scanned.
            TemplateNotFoundError: If *template_name* is not an available
                template under *base_dir*.
            GenerationError: If *output_dir* exists and is not a directory.
        """
        available = list_templates(base_dir)
        if template_name not in available:
            listing = ", ".join(available) or "none"
            raise TemplateNotFoundError(
                f"Template '{template_name}' not found in {base_dir} (available: {listing})",
                Path(base_dir) / template_name,
            )

        tree = scan_template_directory(template_name, base_dir)

        root = Path(output_dir)
        try:
            root = ensure_dir(root)
        except OSError as exc:
            raise GenerationError(f"Output path is not a usable directory: {root} ({exc})", root) from exc

        result = GenerationResult(output_dir=root)
        writer = TemplateWriter(self.engine, self.values, result)
        for node in tree:
            target = root if node.name == ROOT_FILES_NODE else root / node.name
            self._replay(node, target, writer)
        return result

    def _replay(self, node: Directory, target: Path, writer: TemplateWriter) -> None:
        """Write *node*'s files into *target*, then recurse into its children."""
        try:
            ensure_dir(target)
        except OSError as exc:
            print_error(f"Could not create directory: {target} ({exc})")
            writer.result.failed[str(target)] = str(exc)
            return

        for filename in sorted(node.files):
            source = node.path / filename
            try:
                content = read_file(source)
            except (OSError, UnicodeDecodeError) as exc:
                print_error(f"Could not read template file: {source} ({exc})")
                writer.result.failed[str(source)] = str(exc)
                continue
            writer.write_text(target / filename, self.engine.replace(content, self.values))

        for child in node.directories:
            self._replay(child, target / child.name, writer)
