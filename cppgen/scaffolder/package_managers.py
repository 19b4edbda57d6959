"""Package manager file generation for cpm, conan, vcpkg and xrepo.

Each manager is enabled independently through the ``[package_managers]``
config group.  CPM is the only dependency-capable manager: it receives one
rendered ``CPMAddPackage`` fragment per entry of ``[dependencies]``.  The
others get a single manifest file in the project root.
"""

from __future__ import annotations

import json
from pathlib import Path

from cppgen.config import ConfigEntry, ConfigGroup, EntryType, GeneratorConfig
from cppgen.utils import print_warning

from .templates import TemplateRepository
from .writer import TemplateWriter

PACKAGE_MANAGERS: tuple[str, ...] = ("cpm", "conan", "vcpkg", "xrepo")

_CPM_DIR = "package_managers/cpm"


class PackageManagerGenerator:
    """Renders the files of every enabled package manager."""

    # Manager -> (template path, output file name)
    _MANIFESTS: dict[str, tuple[str, str]] = {
        "conan": ("package_managers/conan/conanfile.txt.template", "conanfile.txt"),
        "vcpkg": ("package_managers/vcpkg/vcpkg.json.template", "vcpkg.json"),
        "xrepo": ("package_managers/xrepo/xmake.lua.template", "xmake.lua"),
    }

    def __init__(self, config: GeneratorConfig, templates: TemplateRepository) -> None:
        self.config = config
        self.templates = templates

    def enabled(self) -> list[str]:
        """Names of the managers switched on in the config, in fixed order."""
        return [
            name
            for name in PACKAGE_MANAGERS
            if self.config.flag(ConfigGroup.PACKAGE_MANAGERS, name)
        ]

    def generate_all(self, output_dir: Path, writer: TemplateWriter) -> dict[str, list[Path]]:
        """Generate the files of every enabled manager into *output_dir*.

        Returns:
            Mapping of manager name to the paths written for it.
        """
        result: dict[str, list[Path]] = {}
        for name in self.enabled():
            if name == "cpm":
                result[name] = self.generate_cpm(output_dir, writer)
            else:
                result[name] = self.generate_manifest(name, output_dir, writer)
        return result

    # -- CPM ---------------------------------------------------------------

    def generate_cpm(self, output_dir: Path, writer: TemplateWriter) -> list[Path]:
        """Write ``cmake/dependencies.cmake`` and ``cmake/dependencies_cpm.cmake``.

        The second file receives ``CPM_DEPENDENCIES``: one rendered fragment
        per configured dependency, each followed by a newline.
        """
        written: list[Path] = []
        cmake_dir = output_dir / "cmake"

        bootstrap = self.templates.find_by_path(f"{_CPM_DIR}/dependencies.cmake.template")
        if bootstrap is None:
            writer.missing(f"{_CPM_DIR}/dependencies.cmake.template")
        else:
            _collect(written, writer.write(bootstrap, cmake_dir / "dependencies.cmake"))

        fragments = self.render_dependency_fragments(writer)

        listing = self.templates.find_by_path(
            f"{_CPM_DIR}/dependencies_cpm.cmake.template"
        ) or self.templates.find_by_name("dependencies_cpm.cmake")
        if listing is None:
            writer.missing("dependencies_cpm.cmake")
        else:
            _collect(
                written,
                writer.write(
                    listing,
                    cmake_dir / "dependencies_cpm.cmake",
                    {"CPM_DEPENDENCIES": fragments},
                ),
            )
        return written

    def render_dependency_fragments(self, writer: TemplateWriter) -> str:
        """Render the per-dependency template once for each dependency."""
        dependencies = self.config.group(ConfigGroup.DEPENDENCIES)
        if not dependencies:
            return ""

        fragment = self.templates.find_by_path(f"{_CPM_DIR}/dependency.cmake.template")
        if fragment is None:
            writer.missing(f"{_CPM_DIR}/dependency.cmake.template")
            return ""

        parts: list[str] = []
        for name, entry in dependencies.items():
            values = dependency_values(name, entry)
            if values is None:
                print_warning(f"Warning: dependency '{name}' has no usable definition. Skipping.")
                continue
            parts.append(writer.render(fragment, values) + "\n")
        return "".join(parts)

    # -- Manifest-only managers ---------------------------------------------

    def generate_manifest(self, name: str, output_dir: Path, writer: TemplateWriter) -> list[Path]:
        """Write the single manifest file of *name* (conan, vcpkg or xrepo).

        ``[templates.package_managers] <name>_config = false`` turns the
        manifest off while leaving the manager enabled.
        """
        if not self._manifest_enabled(name):
            return []
        template_path, output_name = self._MANIFESTS[name]
        template = self.templates.find_by_path(template_path)
        if template is None:
            writer.missing(template_path)
            return []
        path = writer.write(template, output_dir / output_name, self.manifest_values(name))
        return [path] if path is not None else []

    def manifest_values(self, name: str) -> dict[str, str]:
        """Dependency listing in the native syntax of manager *name*.

        * conan: ``CONAN_REQUIRES``, one ``name/version`` per line
        * vcpkg: ``VCPKG_DEPENDENCIES``, a JSON array of package names
        * xrepo: ``XREPO_REQUIRES`` (``add_requires`` lines) and
          ``XREPO_PACKAGES`` (quoted, comma-separated names)
        """
        deps: list[tuple[str, str]] = []
        for dep_name, entry in self.config.group(ConfigGroup.DEPENDENCIES).items():
            values = dependency_values(dep_name, entry)
            if values is not None:
                deps.append((dep_name, values["DEPENDENCY_VERSION"]))

        if name == "conan":
            return {
                "CONAN_REQUIRES": "".join(
                    f"{dep}/{version}\n" if version else f"{dep}\n" for dep, version in deps
                )
            }
        if name == "vcpkg":
            return {"VCPKG_DEPENDENCIES": json.dumps([dep for dep, _ in deps])}
        if name == "xrepo":
            return {
                "XREPO_REQUIRES": "".join(
                    f'add_requires("{dep} {version}")\n' if version else f'add_requires("{dep}")\n'
                    for dep, version in deps
                ),
                "XREPO_PACKAGES": ", ".join(f'"{dep}"' for dep, _ in deps),
            }
        return {}

    def _manifest_enabled(self, name: str) -> bool:
        toggles = self.config.entry(ConfigGroup.TEMPLATES, "package_managers")
        if toggles is None or toggles.type is not EntryType.DICTIONARY:
            return True
        found = toggles.as_dict().get(f"{name}_config")
        return True if found is None else found.is_truthy()


def dependency_values(name: str, entry: ConfigEntry) -> dict[str, str] | None:
    """Placeholder values for one ``[dependencies]`` entry.

    A table may carry ``version`` and either ``url`` or ``git``; ``url`` is
    preferred when both are present.  A bare string is read as the version.
    ``DEPENDENCY_SOURCE`` holds the matching ``CPMAddPackage`` argument.
    """
    values = {"DEPENDENCY_NAME": name, "DEPENDENCY_VERSION": "", "DEPENDENCY_SOURCE": ""}

    if entry.type is EntryType.STRING:
        values["DEPENDENCY_VERSION"] = entry.as_string()
        return values
    if entry.type is not EntryType.DICTIONARY:
        return None

    table = entry.as_dict()
    if "version" in table:
        values["DEPENDENCY_VERSION"] = table["version"].render()
    if "url" in table:
        url = table["url"].as_string()
        values["DEPENDENCY_URL"] = url
        values["DEPENDENCY_SOURCE"] = f"URL {url}"
    elif "git" in table:
        git = table["git"].as_string()
        values["DEPENDENCY_GIT"] = git
        values["DEPENDENCY_SOURCE"] = f"GIT_REPOSITORY {git}"
    return values


def _collect(written: list[Path], path: Path | None) -> None:
    if path is not None:
        written.append(path)
