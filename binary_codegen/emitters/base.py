"""
Base class for unit emitters.

Emitters turn a prepared TypeSynthesis into GeneratedUnits by rendering
a Jinja2 template with precomputed method bodies.
"""

from __future__ import annotations

import ast
from pathlib import Path
from typing import Any

import jinja2

from .. import __version__
from ..cli_utils import reconstruct_command_line
from ..config import CodeGeneratorConfig
from ..descriptors import GeneratedUnit
from ..errors import GenerationError


def generation_comment(config: CodeGeneratorConfig) -> str:
    """Generate a simplified command line comment for generated units"""
    if not config.add_generation_comment:
        return ""

    from ..cli import binary_codegen as click_command

    command_line = reconstruct_command_line(click_command)
    return f"# Generated by binary_codegen v{__version__} : {command_line}"


class TemplateEmitter:
    """Base class for emitters rendering one template."""

    # Template file under templates/python
    TEMPLATE_NAME: str = ""

    def __init__(self, config: CodeGeneratorConfig, header: str | None = None):
        """
        Initialize the emitter.

        Args:
            config: Code generation configuration
            header: First line of every unit (computed from the config when None)
        """
        self.config = config
        self.header = generation_comment(config) if header is None else header
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent / "templates" / "python"
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
            undefined=jinja2.StrictUndefined,
        )
        self.template = self.jinja_env.get_template(self.TEMPLATE_NAME)

    def _render(self, unit_name: str, **context: Any) -> GeneratedUnit:
        """
        Render the template into a unit.

        Args:
            unit_name: File name of the unit
            **context: Template variables

        Returns:
            The generated unit

        Raises:
            GenerationError: If validation is enabled and the text does not parse
        """
        text = self.template.render(
            header=self.header,
            runtime_module=self.config.runtime_module,
            **context,
        )
        if self.config.validate_output:
            try:
                ast.parse(text, filename=unit_name)
            except SyntaxError as e:
                raise GenerationError(f"Generated unit {unit_name} is not valid Python: {e}") from e
        return GeneratedUnit(name=unit_name, text=text)
