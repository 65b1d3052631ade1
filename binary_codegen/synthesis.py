"""
Per-type synthesis.

A TypeSynthesis holds everything computed once for a type (members, alias
table, construction plan, names) and is shared by all emitters of that
type. ``synthesize`` runs the emitters and returns the type's artifacts.
"""

from __future__ import annotations

from dataclasses import dataclass

from structlog import get_logger

from .aliases import TypeAliasRegistry
from .cancellation import CancellationToken
from .config import CodeGeneratorConfig
from .constructors import resolve_construction_plan
from .descriptors import ConstructionPlan, MemberDescriptor, TypeArtifacts, TypeDescriptor
from .diagnostics import DECODE_NOT_SUPPORTED
from .emitters import ConverterEmitter, CreatorEmitter, EnumerableEmitter
from .members import resolve_members
from .utils import safe_target_name

logger = get_logger()


@dataclass
class TypeSynthesis:
    """Memoized resolution results for one type."""

    descriptor: TypeDescriptor
    namespace: str
    members: list[MemberDescriptor]
    aliases: TypeAliasRegistry
    plan: ConstructionPlan | None
    converter_name: str

    @classmethod
    def build(
        cls,
        descriptor: TypeDescriptor,
        namespace: str,
        cancellation: CancellationToken | None = None,
    ) -> TypeSynthesis:
        """
        Resolve members, aliases and construction plan of a type.

        Args:
            descriptor: The type description
            namespace: Package the generated units are imported from
            cancellation: Token checked by every resolver step

        Returns:
            The prepared synthesis
        """
        cancellation = cancellation or CancellationToken()
        aliases = TypeAliasRegistry(descriptor.self_type)

        if descriptor.is_enumerable:
            members: list[MemberDescriptor] = []
            aliases.add(descriptor.element_type)
            plan = None
        else:
            members = resolve_members(descriptor, cancellation)
            for member in members:
                cancellation.throw_if_cancelled()
                aliases.add(member.type)
            plan = resolve_construction_plan(descriptor, members, cancellation)

        return cls(
            descriptor=descriptor,
            namespace=namespace,
            members=members,
            aliases=aliases,
            plan=plan,
            converter_name=f"{safe_target_name(descriptor.self_type)}_Converter",
        )

    @property
    def creator_name(self) -> str:
        return f"{self.converter_name}Creator"

    @property
    def type_alias(self) -> str:
        return self.aliases.get_alias(self.descriptor.self_type)

    @property
    def can_decode(self) -> bool:
        return self.plan is not None

    def member_alias(self, member: MemberDescriptor) -> str:
        return self.aliases.get_alias(member.type)

    def argument_aliases(self) -> list[str]:
        """Alias of the sub-converter type for each converter constructor argument."""
        if self.descriptor.is_enumerable:
            return [self.aliases.get_alias(self.descriptor.element_type)]
        return [self.member_alias(m) for m in self.members]


def synthesize(
    descriptor: TypeDescriptor,
    namespace: str,
    config: CodeGeneratorConfig,
    cancellation: CancellationToken | None = None,
    header: str | None = None,
) -> TypeArtifacts:
    """
    Generate the converter and creator units of one type.

    Args:
        descriptor: The type description
        namespace: Package the generated units are imported from
        config: Code generation configuration
        cancellation: Token checked by every step
        header: First line of every unit (computed from the config when None)

    Returns:
        The units, creator names and diagnostics of the type

    Raises:
        ConfigurationError: If the type cannot be described consistently
        GenerationCancelled: If the pass was cancelled
    """
    cancellation = cancellation or CancellationToken()
    log = logger.new(type=descriptor.self_type.full_name)
    synthesis = TypeSynthesis.build(descriptor, namespace, cancellation)
    artifacts = TypeArtifacts(type_ref=descriptor.self_type)

    if descriptor.is_enumerable:
        converter_unit = EnumerableEmitter(config, header).emit(synthesis, cancellation)
    else:
        converter_unit = ConverterEmitter(config, header).emit(synthesis, cancellation)
        if not synthesis.can_decode:
            log.warning("decode not supported, emitting stubs")
            artifacts.diagnostics.append(DECODE_NOT_SUPPORTED.create(descriptor.self_type.full_name, descriptor.self_type.full_name))

    creator_unit = CreatorEmitter(config, header).emit(synthesis, cancellation)

    # Nothing is recorded before every unit of the type exists
    artifacts.units.extend([converter_unit, creator_unit])
    artifacts.creators.append(synthesis.creator_name)
    log.debug("type synthesized", converter=synthesis.converter_name, members=len(synthesis.members))
    return artifacts
