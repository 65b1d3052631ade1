"""
Configuration for the converter generator.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when an output file already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        validate_before_write: Whether to parse units before writing them
        atomic_write: Whether to use atomic file writes
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class CodeGeneratorConfig:
    """Configuration options for code generation."""

    # Module the generated code imports Converter, Reader, ... from
    runtime_module: str = "binary_codegen.runtime"

    # Name of the tuple of creators exposed by the registry module
    registry_name: str = "CONVERTER_CREATORS"

    # Add generation comment at top of each unit
    add_generation_comment: bool = True

    # Worker threads used for per-type synthesis (None = executor default)
    max_workers: int | None = None

    # Parse every generated unit before handing it out
    validate_output: bool = True

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary."""
        config = CodeGeneratorConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "runtime_module": self.runtime_module,
            "registry_name": self.registry_name,
            "add_generation_comment": self.add_generation_comment,
            "max_workers": self.max_workers,
            "validate_output": self.validate_output,
        }
