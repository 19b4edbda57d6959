"""Config-driven project generation.

Takes a :class:`~cppgen.config.GeneratorConfig` and a loaded
:class:`~cppgen.scaffolder.templates.TemplateRepository` and writes a CMake
project skeleton: the directory tree, the build files, the sources for the
configured project kind, the package manager files and any custom templates.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from cppgen.config import ConfigEntry, ConfigGroup, EntryType, GeneratorConfig
from cppgen.errors import GenerationError
from cppgen.utils import ensure_dir, print_warning

from .package_managers import PackageManagerGenerator
from .placeholders import PlaceholderEngine
from .templates import TEMPLATE_SUFFIX, Template, TemplateCategory, TemplateRepository
from .writer import GenerationResult, ProjectKind, TemplateWriter

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

PROJECT_DIRECTORIES: tuple[str, ...] = ("src", "include", "cmake", "test")

_KIND_CATEGORIES: dict[ProjectKind, TemplateCategory] = {
    ProjectKind.BINARY: TemplateCategory.BINARY,
    ProjectKind.LIBRARY: TemplateCategory.LIBRARY,
}


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Orchestrates one config-driven generation.

    The generated tree contains:
    - ``CMakeLists.txt`` and ``src/CMakeLists.txt``
    - ``cmake/config.cmake.in``
    - ``src/main.cpp`` (binary), ``src/<name>.cpp`` / ``src/<name>.cppm``
      (library) or ``include/<name>/<name>.hpp`` (header-only)
    - CPM, Conan, vcpkg and xrepo files for the enabled managers
    - any ``[templates.custom]`` outputs
    """

    def __init__(
        self,
        config: GeneratorConfig,
        templates: TemplateRepository,
        engine: PlaceholderEngine | None = None,
    ) -> None:
        self.config = config
        self.templates = templates
        self.engine = engine or templates.engine
        if not self.engine.same_styles(templates.engine):
            print_warning(
                f"Warning: rendering with {self.engine!r} but templates were scanned "
                f"with {templates.engine!r}; recorded placeholders may not match."
            )
        self.package_managers = PackageManagerGenerator(config, templates)

    # -- Public API --------------------------------------------------------

    def generate(self, output_dir: str | Path) -> GenerationResult:
        """Generate the project into *output_dir*.

        Args:
            output_dir: Project root; created if it does not exist.

        Returns:
            A :class:`GenerationResult` listing what was written, skipped and
            failed.

        Raises:
            GenerationError: If *output_dir* exists and is not a directory.
            TypeMismatchError: If a config value the generator reads has the
                wrong type.
        """
        root = Path(output_dir)
        try:
            ensure_dir(root)
        except (NotADirectoryError, FileExistsError) as exc:
            raise GenerationError(f"Output path is not a directory: {root}", root) from exc
        except OSError as exc:
            raise GenerationError(f"Cannot create output directory {root}: {exc}", root) from exc

        kind = self.project_kind()
        result = GenerationResult(output_dir=root, project_kind=kind)
        writer = TemplateWriter(self.engine, self.config.placeholder_values(), result)

        # 1. Skeleton directories
        self._create_directory_structure(root, kind)

        # 2. Root, src and config build files
        self._render_build_files(root, kind, writer)

        # 3. Sources for the project kind
        if kind is ProjectKind.BINARY:
            self._render_binary(root, writer)
        elif kind is ProjectKind.LIBRARY:
            self._render_library(root, writer)
        else:
            self._render_header_only(root, writer)

        # 4. Package managers
        self.package_managers.generate_all(root, writer)

        # 5. User-defined templates
        self._render_custom(root, writer)

        return result

    def project_kind(self) -> ProjectKind:
        """Resolve the project kind from ``project.type``.

        A flat ``type = "library"`` string is checked first, then a nested
        ``[project.type] type = "library"`` table.  Values are matched
        ignoring case and surrounding whitespace.  Anything else is binary.
        """
        found = self.config.entry(ConfigGroup.PROJECT_INFO, "type")
        candidates: list[ConfigEntry] = []
        if found is not None:
            candidates.append(found)
            if found.type is EntryType.DICTIONARY and "type" in found.as_dict():
                candidates.append(found.as_dict()["type"])

        for candidate in candidates:
            if candidate.type is not EntryType.STRING:
                continue
            try:
                return ProjectKind(candidate.as_string().strip().lower())
            except ValueError:
                continue
        return ProjectKind.BINARY

    def modules_enabled(self) -> bool:
        """``build.use_modules``, falling back to ``build.modules``."""
        for key in ("use_modules", "modules"):
            if self.config.entry(ConfigGroup.BUILD, key) is not None:
                return self.config.flag(ConfigGroup.BUILD, key)
        return False

    # -- Directory structure -----------------------------------------------

    def _create_directory_structure(self, root: Path, kind: ProjectKind) -> None:
        """Create ``src/``, ``include/``, ``cmake/``, ``test/`` and the public
        include directory for library and header-only projects."""
        dirs = list(PROJECT_DIRECTORIES)
        name = self.config.project_name
        if name and kind in (ProjectKind.LIBRARY, ProjectKind.HEADER_ONLY):
            dirs.append(f"include/{name}")
        for d in dirs:
            try:
                ensure_dir(root / d)
            except OSError as exc:
                raise GenerationError(f"Cannot create directory {root / d}: {exc}", root / d) from exc

    # -- Build files -------------------------------------------------------

    def _template_enabled(self, key: str) -> bool:
        return self.config.flag(ConfigGroup.TEMPLATES, key, default=True)

    def _kind_template(self, kind: ProjectKind, name: str) -> Template | None:
        """The kind-specific template called *name*, if the kind has one."""
        category = _KIND_CATEGORIES.get(kind)
        if category is None:
            return None
        for template in self.templates.get(category):
            if template.name == name:
                return template
        return None

    def _src_build_template(self, kind: ProjectKind) -> Template | None:
        return self._kind_template(kind, "CMakeLists.txt") or self.templates.find_by_name(
            "src_CMakeLists.txt"
        )

    def _render_build_files(self, root: Path, kind: ProjectKind, writer: TemplateWriter) -> None:
        if self._template_enabled("cmake_root"):
            self._render_named(writer, "root_CMakeLists.txt", root / "CMakeLists.txt")

        # The library build file needs the source listings; see _render_library
        if kind is not ProjectKind.LIBRARY and self._template_enabled("cmake_src"):
            template = self._src_build_template(kind)
            if template is None:
                writer.missing("src_CMakeLists.txt")
            else:
                writer.write(template, root / "src" / "CMakeLists.txt")

        if self._template_enabled("cmake_config"):
            self._render_named(writer, "config.cmake.in", root / "cmake" / "config.cmake.in")

    def _render_named(self, writer: TemplateWriter, name: str, output_path: Path) -> None:
        template = self.templates.find_by_name(name)
        if template is None:
            writer.missing(name)
            return
        writer.write(template, output_path)

    # -- Project kinds -----------------------------------------------------

    def _render_binary(self, root: Path, writer: TemplateWriter) -> None:
        if not self._template_enabled("main"):
            return
        template = self._kind_template(ProjectKind.BINARY, "main.cpp") or self.templates.find_by_name(
            "main.cpp"
        )
        if template is None:
            writer.missing("main.cpp")
            return
        writer.write(template, root / "src" / "main.cpp")

    def _render_library(self, root: Path, writer: TemplateWriter) -> None:
        name = self.config.project_name
        modules = self.modules_enabled()
        sources: list[str] = []

        # The source stub is optional; a template set without one is not a skip
        source_template = self._kind_template(ProjectKind.LIBRARY, "library.cpp")
        if source_template is not None and name:
            if writer.write(source_template, root / "src" / f"{name}.cpp") is not None:
                sources.append(f"{name}.cpp")

        extra = self.config.entry(ConfigGroup.BUILD, "sources")
        if extra is not None:
            sources.extend(item.render() for item in extra.as_array())

        if modules:
            self._render_module(root, name, writer)

        if self._template_enabled("cmake_src"):
            template = self._src_build_template(ProjectKind.LIBRARY)
            if template is None:
                writer.missing("src_CMakeLists.txt")
                return
            writer.write(
                template,
                root / "src" / "CMakeLists.txt",
                {
                    "SOURCE_FILES": "\n".join(sources),
                    "MODULE_FILES": f"{name}.cppm" if modules and name else "",
                },
            )

    def _render_module(self, root: Path, name: str, writer: TemplateWriter) -> None:
        if not name:
            print_warning("Warning: modules are enabled but project.name is not set. Skipping module file.")
            return
        template = self._kind_template(ProjectKind.LIBRARY, "module.cppm") or self.templates.find_by_name(
            "module.cppm"
        )
        if template is None:
            writer.missing("module.cppm")
            return
        namespace = self.config.entry(ConfigGroup.PROJECT_INFO, "namespace")
        writer.write(
            template,
            root / "src" / f"{name}.cppm",
            {
                "MODULE_NAME": name,
                "NAMESPACE": namespace.as_string() if namespace is not None else name,
            },
        )

    def _render_header_only(self, root: Path, writer: TemplateWriter) -> None:
        name = self.config.project_name
        template = self.templates.find_by_name("header.hpp")
        if template is None:
            return
        if not name:
            print_warning("Warning: project.name is not set. Skipping public header.")
            return
        writer.write(template, root / "include" / name / f"{name}.hpp")

    # -- Custom templates --------------------------------------------------

    def _render_custom(self, root: Path, writer: TemplateWriter) -> None:
        """Render every ``[templates.custom.<key>]`` entry.

        Each entry names a ``source`` template (relative path or logical name,
        the ``.template`` marker is optional) and a ``destination`` relative
        to the project root.
        """
        custom = self.config.entry(ConfigGroup.TEMPLATES, "custom")
        if custom is None:
            return

        for key, spec in custom.as_dict().items():
            if spec.type is not EntryType.DICTIONARY:
                print_warning(f"Warning: custom template '{key}' is not a table. Skipping.")
                continue
            fields = spec.as_dict()
            if "source" not in fields or "destination" not in fields:
                print_warning(
                    f"Warning: custom template '{key}' needs both 'source' and 'destination'. Skipping."
                )
                continue

            source = fields["source"].as_string()
            destination = PurePosixPath(fields["destination"].as_string())
            if destination.is_absolute() or ".." in destination.parts:
                print_warning(
                    f"Warning: custom template '{key}' destination {destination} "
                    "is outside the project. Skipping."
                )
                continue

            template = self.templates.find(source) or self.templates.find_by_path(
                f"{source}{TEMPLATE_SUFFIX}"
            )
            if template is None:
                writer.missing(source)
                continue
            writer.write(template, root / destination)


# ---------------------------------------------------------------------------
# Factory helpers
# ---------------------------------------------------------------------------


def create_project_generator(
    config_path: str | Path,
    template_dir: str | Path | None = None,
    engine: PlaceholderEngine | None = None,
) -> ProjectGenerator:
    """Load a TOML config and a template directory into a generator.

    Raises:
        ConfigError: If the config cannot be loaded.
        TemplateNotFoundError: If the template directory is unusable.
    """
    config = GeneratorConfig.load(config_path)
    templates = TemplateRepository(template_dir, engine).load()
    return ProjectGenerator(config, templates)


def create_project(
    config: GeneratorConfig,
    template_dir: str | Path | None,
    output_dir: str | Path,
) -> GenerationResult:
    """Load *template_dir* and generate *config* into *output_dir* in one call."""
    templates = TemplateRepository(template_dir).load()
    return ProjectGenerator(config, templates).generate(output_dir)
