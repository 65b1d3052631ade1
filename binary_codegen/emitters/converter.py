"""
Tuple converter emitter.

Emits a converter whose four operations follow the member protocol:

- ``encode``: every member but the last is self-delimiting, the last one
  owns the rest of the region.
- ``encode_auto``: every member is self-delimiting, so an enclosing
  aggregate may append more data.
- ``decode`` / ``decode_auto``: mirror the two encoders, then rebuild the
  instance through the construction plan.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..cancellation import CancellationToken
from ..descriptors import GeneratedUnit
from .base import TemplateEmitter

if TYPE_CHECKING:
    from ..synthesis import TypeSynthesis


class ConverterEmitter(TemplateEmitter):
    """Emits the converter unit of a tuple-like aggregate."""

    TEMPLATE_NAME = "converter.py.jinja2"

    def emit(self, synthesis: TypeSynthesis, cancellation: CancellationToken | None = None) -> GeneratedUnit:
        """
        Emit the converter unit.

        Args:
            synthesis: Prepared resolution results of the type
            cancellation: Token checked once per member

        Returns:
            The unit named ``<converter_name>.py``
        """
        cancellation = cancellation or CancellationToken()
        arguments = []
        for i, alias in enumerate(synthesis.argument_aliases()):
            cancellation.throw_if_cancelled()
            arguments.append({"name": f"_arg{i}", "field": f"_cvt{i}", "alias": alias})

        return self._render(
            f"{synthesis.converter_name}.py",
            target=synthesis.descriptor.self_type.full_name,
            converter_name=synthesis.converter_name,
            type_alias=synthesis.type_alias,
            prologue=synthesis.aliases.prologue(),
            arguments=arguments,
            encode_body=self.encode_body(synthesis, auto=False, cancellation=cancellation),
            encode_auto_body=self.encode_body(synthesis, auto=True, cancellation=cancellation),
            decode_body=self.decode_body(synthesis, auto=False, cancellation=cancellation),
            decode_auto_body=self.decode_body(synthesis, auto=True, cancellation=cancellation),
        )

    def encode_body(self, synthesis: TypeSynthesis, auto: bool, cancellation: CancellationToken | None = None) -> list[str]:
        """Statements of ``encode`` (auto=False) or ``encode_auto`` (auto=True)."""
        cancellation = cancellation or CancellationToken()
        members = synthesis.members
        lines = []
        if synthesis.descriptor.is_reference_type:
            lines.extend(["if item is None:", "    return"])
        for i, member in enumerate(members):
            cancellation.throw_if_cancelled()
            last = i == len(members) - 1
            method = "encode_auto" if auto or not last else "encode"
            lines.append(f"self._cvt{i}.{method}(allocator, item.{member.name})")
        return lines or ["pass"]

    def decode_body(self, synthesis: TypeSynthesis, auto: bool, cancellation: CancellationToken | None = None) -> list[str]:
        """Statements of ``decode`` (auto=False) or ``decode_auto`` (auto=True)."""
        cancellation = cancellation or CancellationToken()
        if synthesis.plan is None:
            return [f"raise DecodeUnsupportedError({synthesis.type_alias})"]

        members = synthesis.members
        lines = []
        if not auto and members:
            lines.append("reader = Reader(span)")
        for i in range(len(members)):
            cancellation.throw_if_cancelled()
            last = i == len(members) - 1
            if auto or not last:
                lines.append(f"_var{i} = self._cvt{i}.decode_auto(reader)")
            else:
                lines.append(f"_var{i} = self._cvt{i}.decode(reader.remaining())")

        lines.append(f"result = {self._construct_expression(synthesis, cancellation)}")
        for member in synthesis.plan.remainder_members:
            cancellation.throw_if_cancelled()
            lines.append(f"result.{member.name} = _var{members.index(member)}")
        lines.append("return result")
        return lines

    def _construct_expression(self, synthesis: TypeSynthesis, cancellation: CancellationToken) -> str:
        plan = synthesis.plan
        callee = synthesis.type_alias
        if plan.initializer.factory is not None:
            callee = f"{callee}.{plan.initializer.factory}"

        arguments = []
        for parameter, member in zip(plan.initializer.parameters, plan.parameter_members, strict=True):
            cancellation.throw_if_cancelled()
            variable = f"_var{synthesis.members.index(member)}"
            arguments.append(variable if parameter.positional_only else f"{parameter.name}={variable}")
        return f"{callee}({', '.join(arguments)})"
