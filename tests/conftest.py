"""Shared pytest fixtures for the cppgen test suite.

Provides reusable fixtures for:
- Temporary output directories
- Sample TOML configurations (as text, files and ``GeneratorConfig``)
- Small categorised template sets written to ``tmp_path``
- Scan & replay template folders
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from cppgen.config import GeneratorConfig
from cppgen.scaffolder.templates import TemplateRepository


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Write ``{relative_path: content}`` below *root* and return *root*."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Not-yet-existing directory for generated projects."""
    return tmp_path / "out"


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


SAMPLE_TOML = textwrap.dedent("""\
    [project]
    name = "demo"
    version = "1.2.3"
    description = "Demo project"
    namespace = "demo_ns"

    [build]
    cpp_standard = 20
    enable_testing = true
    use_modules = false

    [dependencies]
    fmt = { version = "10.2.1", git = "https://github.com/fmtlib/fmt.git" }
    spdlog = { version = "1.13.0", url = "https://example.com/spdlog.zip", git = "https://github.com/gabime/spdlog.git" }

    [package_managers]
    cpm = true
    conan = false
    vcpkg = "on"
    xrepo = false

    [cmake.options]
    BUILD_SHARED_LIBS = false

    [cmake.defines]
    DEMO_DEBUG = ""
    DEMO_LEVEL = 3
""")


@pytest.fixture
def sample_toml() -> str:
    """A complete binary-project configuration as TOML text."""
    return SAMPLE_TOML


@pytest.fixture
def config_file(tmp_path: Path, sample_toml: str) -> Path:
    """``sample_toml`` written to ``tmp_path/project.toml``."""
    path = tmp_path / "project.toml"
    path.write_text(sample_toml, encoding="utf-8")
    return path


@pytest.fixture
def sample_config(config_file: Path) -> GeneratorConfig:
    """``sample_toml`` loaded into a ``GeneratorConfig``."""
    return GeneratorConfig.load(config_file)


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


MINIMAL_TEMPLATES: dict[str, str] = {
    "root_CMakeLists.txt.template": "project(@PROJECT_NAME@ VERSION @PROJECT_VERSION@)\n",
    "src_CMakeLists.txt.template": "# generic src for @PROJECT_NAME@\n",
    "binary/CMakeLists.txt.template": "add_executable(@PROJECT_NAME@ main.cpp)\n",
    "binary/main.cpp.template": "// @PROJECT_NAME@ main\n",
    "library/CMakeLists.txt.template": (
        "add_library(@PROJECT_NAME@ @SOURCE_FILES@)\nmodules: @MODULE_FILES@\n"
    ),
    "library/library.cpp.template": "// @PROJECT_NAME@ library\n",
    "library/module.cppm.template": "export module @MODULE_NAME@;\nnamespace @NAMESPACE@ {}\n",
    "header_only/header.hpp.template": "#pragma once // @PROJECT_NAME@\n",
    "cmake/config.cmake.in.template": "@PACKAGE_INIT@\n# @PROJECT_NAME@\n",
    "package_managers/cpm/dependencies.cmake.template": "include(dependencies_cpm.cmake)\n",
    "package_managers/cpm/dependency.cmake.template": (
        "CPMAddPackage(@DEPENDENCY_NAME@ @DEPENDENCY_VERSION@ @DEPENDENCY_SOURCE@)"
    ),
    "package_managers/cpm/dependencies_cpm.cmake.template": "@CPM_DEPENDENCIES@",
    "package_managers/conan/conanfile.txt.template": "[requires]\n@CONAN_REQUIRES@",
    "package_managers/vcpkg/vcpkg.json.template": '{"name": "@PROJECT_NAME@", "dependencies": @VCPKG_DEPENDENCIES@}\n',
    "package_managers/xrepo/xmake.lua.template": "@XREPO_REQUIRES@add_packages(@XREPO_PACKAGES@)\n",
}


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A small but complete categorised template set."""
    return write_tree(tmp_path / "templates", MINIMAL_TEMPLATES)


@pytest.fixture
def repository(template_dir: Path) -> TemplateRepository:
    """``template_dir`` loaded into a ``TemplateRepository``."""
    return TemplateRepository(template_dir).load()


# ---------------------------------------------------------------------------
# Scan & replay
# ---------------------------------------------------------------------------


@pytest.fixture
def replay_base(tmp_path: Path) -> Path:
    """Base directory holding a ``console-app`` template folder and a hidden ``_shared``."""
    base = tmp_path / "replay"
    write_tree(
        base,
        {
            "console-app/README.md": "# @PROJECT_NAME@ by @AUTHOR_NAME@\n",
            "console-app/CMakeLists.txt": "project(@PROJECT_NAME@)\n",
            "console-app/src/main.cpp": 'int main() { return 0; } // @APP_NAME@\n',
            "console-app/src/detail/util.hpp": "// @UNKNOWN_TOKEN@\n",
            "_shared/common.txt": "shared\n",
        },
    )
    (base / "console-app" / "empty").mkdir()
    return base


@pytest.fixture
def make_tree():
    """The ``write_tree`` helper, for tests that build their own layouts."""
    return write_tree
