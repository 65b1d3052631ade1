"""
Atomic file writer for generated units.

Ensures that file writes are atomic so an interrupted generation never
leaves a half-written module behind.
"""

from __future__ import annotations

import ast
import tempfile
from collections.abc import Callable, Iterable
from pathlib import Path

from structlog import get_logger

from .config import OutputConfig, OutputMode
from .descriptors import GeneratedUnit
from .errors import CodeWriteError

logger = get_logger()


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file
    """

    def __init__(self, validate: Callable[[str], None] | None = None):
        """Initialize the atomic writer.

        Args:
            validate: Optional validation function for generated code
        """
        self._validate = validate or self._default_validate

    def write(self, path: Path, content: str, validate: bool = True) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            validate: Whether to validate before finalizing

        Raises:
            CodeWriteError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory keeps the final rename on one filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self.validate(content)

            temp_path.replace(path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

    def write_if_not_exists(self, path: Path, content: str, validate: bool = True) -> None:
        """Write content only if the file doesn't exist.

        Raises:
            CodeWriteError: If the file already exists or validation fails
        """
        if path.exists():
            raise CodeWriteError(f"Output file already exists: {path}. Use force mode to overwrite.")
        self.write(path, content, validate)

    def validate(self, content: str) -> None:
        """Run the configured validation on content."""
        self._validate(content)

    def _default_validate(self, content: str) -> None:
        try:
            ast.parse(content)
        except SyntaxError as e:
            raise CodeWriteError(f"Generated Python code is not valid: {e}") from e


def write_units(directory: Path, units: Iterable[GeneratedUnit], output_config: OutputConfig | None = None) -> list[Path]:
    """
    Write generated units into a package directory.

    In ERROR_IF_EXISTS mode every target is checked before anything is
    written, so a refused run leaves the directory untouched.

    Args:
        directory: Package directory receiving the units
        units: Units to write
        output_config: Output handling options

    Returns:
        Paths written, in unit order

    Raises:
        CodeWriteError: If a unit exists and overwriting was not requested, or a unit is invalid
    """
    output_config = output_config or OutputConfig()
    units = list(units)
    targets = [directory / unit.name for unit in units]

    if output_config.mode == OutputMode.ERROR_IF_EXISTS:
        existing = [path for path in targets if path.exists()]
        if existing:
            raise CodeWriteError(f"Output file already exists: {existing[0]}. Use force mode to overwrite.")

    writer = AtomicWriter()
    for unit, path in zip(units, targets, strict=True):
        if output_config.atomic_write:
            writer.write(path, unit.text, validate=output_config.validate_before_write)
        else:
            if output_config.validate_before_write:
                writer.validate(unit.text)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(unit.text, encoding="utf-8")
        logger.debug("unit written", path=str(path))

    logger.info("units written", directory=str(directory), count=len(targets))
    return targets
