"""
Converter creator emitter.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..cancellation import CancellationToken
from ..descriptors import GeneratedUnit
from .base import TemplateEmitter

if TYPE_CHECKING:
    from ..synthesis import TypeSynthesis


class CreatorEmitter(TemplateEmitter):
    """Emits the factory that builds a converter from a GeneratorContext.

    The factory answers only for its own target type and asks the context
    once for each distinct member type.
    """

    TEMPLATE_NAME = "creator.py.jinja2"

    def emit(self, synthesis: TypeSynthesis, cancellation: CancellationToken | None = None) -> GeneratedUnit:
        cancellation = cancellation or CancellationToken()
        lookups: dict[str, str] = {}
        arguments = []
        for alias in synthesis.argument_aliases():
            cancellation.throw_if_cancelled()
            variable = lookups.setdefault(alias, f"cvt{alias}")
            arguments.append(variable)

        return self._render(
            f"{synthesis.creator_name}.py",
            target=synthesis.descriptor.self_type.full_name,
            namespace=synthesis.namespace,
            converter_name=synthesis.converter_name,
            creator_name=synthesis.creator_name,
            type_alias=synthesis.type_alias,
            prologue=synthesis.aliases.prologue(),
            lookups=[{"alias": alias, "variable": variable} for alias, variable in lookups.items()],
            arguments=arguments,
        )
