"""cppgen scaffolder -- renders C++ project skeletons from templates.

Two entry points:

* :class:`ProjectGenerator` reads a ``GeneratorConfig`` and a categorised
  :class:`TemplateRepository` and writes a CMake project (binary, library or
  header-only) plus package manager files.
* :class:`ReplayGenerator` copies a scanned template folder, substituting
  placeholders in every file.

Quick usage::

    from cppgen.config import GeneratorConfig
    from cppgen.scaffolder import ProjectGenerator, TemplateRepository

    config = GeneratorConfig.load("project.toml")
    templates = TemplateRepository().load()
    result = ProjectGenerator(config, templates).generate("/tmp/output")
"""

from cppgen.scaffolder.generator import ProjectGenerator, create_project, create_project_generator
from cppgen.scaffolder.placeholders import PlaceholderEngine, PlaceholderStyle
from cppgen.scaffolder.replay import ReplayGenerator
from cppgen.scaffolder.scanner import Directory, list_templates, scan_template_directory
from cppgen.scaffolder.templates import Template, TemplateCategory, TemplateRepository
from cppgen.scaffolder.writer import GenerationResult, ProjectKind

__all__ = [
    "Directory",
    "GenerationResult",
    "PlaceholderEngine",
    "PlaceholderStyle",
    "ProjectGenerator",
    "ProjectKind",
    "ReplayGenerator",
    "Template",
    "TemplateCategory",
    "TemplateRepository",
    "create_project",
    "create_project_generator",
    "list_templates",
    "scan_template_directory",
]
