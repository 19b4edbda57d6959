"""Template discovery and classification for config-driven generation.

Provides the :class:`TemplateRepository` which loads every ``*.template``
file under a template root, records its placeholders, classifies it into a
:class:`TemplateCategory` and indexes it by logical name and by relative
path.  The bundled default template set lives in ``cppgen/templates/``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import Enum
from pathlib import Path, PurePosixPath

from pydantic import BaseModel, ConfigDict, Field

from cppgen.errors import TemplateLoadError, TemplateNotFoundError

from .placeholders import PlaceholderEngine

TEMPLATE_SUFFIX = ".template"

# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


def default_template_dir() -> Path:
    """Return the template set shipped with cppgen."""
    return _DEFAULT_TEMPLATE_DIR


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class TemplateCategory(str, Enum):
    """What a template is used for, decided once from its path."""

    ROOT = "root"
    SRC = "src"
    BINARY = "binary"
    LIBRARY = "library"
    PACKAGE_MANAGER = "package_manager"
    DEPENDENCY = "dependency"
    CONFIG = "config"
    SOURCE_CODE = "source_code"


class Template(BaseModel):
    """A loaded template file."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="File name without the .template marker")
    content: str = Field(default="", description="Raw template text")
    relative_path: str = Field(..., description="POSIX path relative to the template root")
    placeholders: frozenset[str] = Field(default_factory=frozenset)


def classify(relative_path: str) -> TemplateCategory:
    """Classify a template from its path relative to the template root.

    Rules are checked top to bottom and the first match wins.
    """
    rel = PurePosixPath(relative_path)
    filename = rel.name
    rel_str = rel.as_posix()

    if filename == f"root_CMakeLists.txt{TEMPLATE_SUFFIX}":
        return TemplateCategory.ROOT
    if filename == f"src_CMakeLists.txt{TEMPLATE_SUFFIX}":
        return TemplateCategory.SRC
    if "binary" in rel_str:
        return TemplateCategory.BINARY
    if "library" in rel_str:
        return TemplateCategory.LIBRARY
    if "package_managers" in rel.parts[:-1]:
        return TemplateCategory.PACKAGE_MANAGER
    if "dependencies" in filename:
        return TemplateCategory.DEPENDENCY
    if "config" in filename:
        return TemplateCategory.CONFIG
    return TemplateCategory.SOURCE_CODE


# ---------------------------------------------------------------------------
# TemplateRepository
# ---------------------------------------------------------------------------


class TemplateRepository:
    """Owns every template found under a template root.

    Templates can be looked up by logical name (``"main.cpp"``), by relative
    path (``"package_managers/vcpkg/vcpkg.json.template"``) or iterated per
    category.  All iteration is ordered by name.

    The same :class:`PlaceholderEngine` is used to record each template's
    placeholders and, via :meth:`render`, to substitute them.
    """

    def __init__(
        self,
        template_dir: str | Path | None = None,
        engine: PlaceholderEngine | None = None,
    ) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.engine = engine or PlaceholderEngine()
        self._by_category: dict[TemplateCategory, list[Template]] = {}
        self._by_name: dict[str, Template] = {}
        self._by_path: dict[str, Template] = {}
        self._categories: dict[str, TemplateCategory] = {}

    # -- Loading -----------------------------------------------------------

    def load(self) -> "TemplateRepository":
        """Load every ``*.template`` file under the template root.

        Reloading replaces whatever was loaded before.

        Returns:
            ``self``, so calls can be chained.

        Raises:
            TemplateNotFoundError: If the root is missing or not a directory.
            TemplateLoadError: If a template file cannot be read as UTF-8 text.
        """
        if not self.template_dir.exists():
            raise TemplateNotFoundError(
                f"Template directory not found: {self.template_dir}", self.template_dir
            )
        if not self.template_dir.is_dir():
            raise TemplateNotFoundError(
                f"Template path is not a directory: {self.template_dir}", self.template_dir
            )

        self._by_category.clear()
        self._by_name.clear()
        self._by_path.clear()
        self._categories.clear()
        for path in sorted(self.template_dir.rglob(f"*{TEMPLATE_SUFFIX}")):
            if not path.is_file():
                continue
            relative = path.relative_to(self.template_dir).as_posix()
            self.add(classify(relative), self._load_file(path, relative))
        return self

    def _load_file(self, path: Path, relative: str) -> Template:
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise TemplateLoadError(f"Cannot read template {path}: {exc}", path) from exc
        return Template(
            name=path.name[: -len(TEMPLATE_SUFFIX)],
            content=content,
            relative_path=relative,
            placeholders=frozenset(self.engine.extract(content)),
        )

    def add(self, category: TemplateCategory, template: Template) -> None:
        """Register *template*; the name and path indices update together."""
        bucket = self._by_category.setdefault(category, [])
        bucket.append(template)
        bucket.sort(key=_sort_key)
        self._by_name[template.name] = template
        self._by_path[template.relative_path] = template
        self._categories[template.relative_path] = category

    # -- Lookup ------------------------------------------------------------

    def get(self, category: TemplateCategory) -> list[Template]:
        """Templates in *category*, ordered by name (empty if none)."""
        return list(self._by_category.get(category, []))

    def all(self) -> list[Template]:
        """Every template, ordered by name."""
        return sorted(self._by_path.values(), key=_sort_key)

    def find_by_name(self, name: str) -> Template | None:
        return self._by_name.get(name)

    def find_by_path(self, path: str) -> Template | None:
        return self._by_path.get(PurePosixPath(path).as_posix())

    def find(self, name_or_path: str) -> Template | None:
        """Look up by relative path first, then by logical name."""
        return self.find_by_path(name_or_path) or self.find_by_name(name_or_path)

    def category_of(self, template: Template) -> TemplateCategory | None:
        return self._categories.get(template.relative_path)

    def __len__(self) -> int:
        return len(self._by_path)

    def __iter__(self) -> Iterator[Template]:
        return iter(self.all())

    # -- Rendering ---------------------------------------------------------

    def render(self, template: Template, values: Mapping[str, str]) -> str:
        """Substitute *values* into *template* with the repository's engine."""
        return self.engine.replace(template.content, values)


def _sort_key(template: Template) -> tuple[str, str]:
    return (template.name, template.relative_path)
