"""
Diagnostics reported to the host.

Each descriptor carries a stable code so hosts can filter or escalate
individual checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

CATEGORY = "SourceGeneration"


class DiagnosticSeverity(str, Enum):
    """Severity of a diagnostic."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """A reported problem: code, severity, message and the context it applies to."""

    code: str
    severity: DiagnosticSeverity
    message: str
    context: str = ""

    @property
    def is_error(self) -> bool:
        return self.severity is DiagnosticSeverity.ERROR

    def __str__(self) -> str:
        return f"{self.severity.value} {self.code}: {self.message}"


@dataclass(frozen=True)
class DiagnosticDescriptor:
    """Template for one kind of diagnostic."""

    code: str
    title: str
    message_format: str
    severity: DiagnosticSeverity

    def create(self, context: str, *args: object) -> Diagnostic:
        return Diagnostic(
            code=self.code,
            severity=self.severity,
            message=self.message_format.format(*args),
            context=context,
        )


CONTEXT_MUST_BE_EXTENSIBLE = DiagnosticDescriptor(
    code="BINSRCGEN01",
    title="Context Type Must Be Extensible!",
    message_format="Require an extensible declaration for source generation context '{0}'.",
    severity=DiagnosticSeverity.ERROR,
)

CONTEXT_MUST_HAVE_NAMESPACE = DiagnosticDescriptor(
    code="BINSRCGEN02",
    title="Context Type Must Have Namespace!",
    message_format="Require a target package for source generation context '{0}'.",
    severity=DiagnosticSeverity.ERROR,
)

INCLUDE_TYPE_DUPLICATED = DiagnosticDescriptor(
    code="BINSRCGEN03",
    title="Include Type Duplicated.",
    message_format="Please remove duplicated include for type '{0}'.",
    severity=DiagnosticSeverity.WARNING,
)

DECODE_NOT_SUPPORTED = DiagnosticDescriptor(
    code="BINSRCGEN04",
    title="Decode Not Supported.",
    message_format="No initializer of type '{0}' covers its immutable members, decode will raise at call time.",
    severity=DiagnosticSeverity.WARNING,
)

DUPLICATE_SLOT_INDEX = DiagnosticDescriptor(
    code="BINSRCGEN05",
    title="Duplicate Slot Index!",
    message_format="{0}",
    severity=DiagnosticSeverity.ERROR,
)

CONVERTER_NAME_COLLISION = DiagnosticDescriptor(
    code="BINSRCGEN06",
    title="Converter Name Collision!",
    message_format="Type '{0}' generates unit '{1}', already generated for type '{2}'. Rename one of them.",
    severity=DiagnosticSeverity.ERROR,
)
