"""
Enumerable converter emitter.

Iterable aggregates are encoded as the concatenation of their elements'
self-delimiting encodings. Rebuilding an arbitrary container is left to
hand-written converters, so the emitted ``decode`` always raises.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..cancellation import CancellationToken
from ..descriptors import GeneratedUnit
from .base import TemplateEmitter

if TYPE_CHECKING:
    from ..synthesis import TypeSynthesis


class EnumerableEmitter(TemplateEmitter):
    """Emits the encode-only converter of a single-element-type iterable."""

    TEMPLATE_NAME = "enumerable.py.jinja2"

    def emit(self, synthesis: TypeSynthesis, cancellation: CancellationToken | None = None) -> GeneratedUnit:
        cancellation = cancellation or CancellationToken()
        cancellation.throw_if_cancelled()
        descriptor = synthesis.descriptor
        return self._render(
            f"{synthesis.converter_name}.py",
            target=descriptor.self_type.full_name,
            converter_name=synthesis.converter_name,
            type_alias=synthesis.type_alias,
            element_alias=synthesis.aliases.get_alias(descriptor.element_type),
            is_reference_type=descriptor.is_reference_type,
            prologue=synthesis.aliases.prologue(),
        )
