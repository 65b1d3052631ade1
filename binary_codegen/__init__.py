"""Binary converter code generator

A Python package for generating binary encoder/decoder classes ahead of time
from structural descriptions of tuple-like types. Emits one converter and one
converter creator module per type plus an ordered creator registry.
"""

__version__ = "1.0.0"
__author__ = "François Lagunas"

from .cancellation import CancellationToken
from .config import CodeGeneratorConfig, OutputConfig, OutputMode
from .descriptors import (
    ContextDeclaration,
    DiscoveryPolicy,
    GeneratedUnit,
    MemberDescriptor,
    MemberKind,
    TypeDescriptor,
    TypeRef,
)
from .driver import GenerationDriver, GenerationResult
from .errors import CodeWriteError, ConfigurationError, DuplicateSlotError, GenerationCancelled, GenerationError
from .introspection import TupleKey, declare_context, describe, initializer
from .writer import AtomicWriter, write_units

__all__ = [
    "GenerationDriver",
    "GenerationResult",
    "CodeGeneratorConfig",
    "OutputConfig",
    "OutputMode",
    "CancellationToken",
    "ContextDeclaration",
    "DiscoveryPolicy",
    "GeneratedUnit",
    "MemberDescriptor",
    "MemberKind",
    "TypeDescriptor",
    "TypeRef",
    "GenerationError",
    "ConfigurationError",
    "DuplicateSlotError",
    "GenerationCancelled",
    "CodeWriteError",
    "TupleKey",
    "initializer",
    "describe",
    "declare_context",
    "AtomicWriter",
    "write_units",
]
