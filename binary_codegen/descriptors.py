"""
Descriptor definitions.

These value objects are the only view of a type the generation engine has.
The host computes them once per type; the engine never inspects live
classes again after that.
"""

from __future__ import annotations

import types
import typing
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from .diagnostics import Diagnostic


class MemberKind(str, Enum):
    """Kind of a serializable member."""

    FIELD = "field"
    PROPERTY = "property"


class DiscoveryPolicy(str, Enum):
    """Rule selecting which members participate and in which order."""

    EXPLICIT_INDEX = "explicit_index"  # Members carrying a TupleKey, by key
    DECLARED_ORDER = "declared_order"  # Every public member, by declaration
    FIXED_SLOT_NAMES = "fixed_slot_names"  # item1 .. item7, rest


@dataclass(frozen=True)
class TypeRef:
    """Symbolic identity of a type: module, qualified name and generic arguments."""

    module: str
    name: str
    args: tuple[TypeRef, ...] = ()

    @property
    def arity(self) -> int:
        return len(self.args)

    @property
    def full_name(self) -> str:
        """Dotted expression naming the type, e.g. ``builtins.list[builtins.int]``."""
        base = f"{self.module}.{self.name}"
        if not self.args:
            return base
        return f"{base}[{', '.join(arg.full_name for arg in self.args)}]"

    def modules(self) -> Iterator[str]:
        """Yield every module that must be imported to evaluate ``full_name``."""
        yield self.module
        for arg in self.args:
            yield from arg.modules()

    @staticmethod
    def of(tp: typing.Any) -> TypeRef:
        """
        Build a reference from a class or a parameterized generic.

        Args:
            tp: A class such as ``int`` or a generic alias such as ``list[int]``

        Returns:
            The matching TypeRef

        Raises:
            TypeError: If ``tp`` is neither a class nor a generic alias of one
        """
        if tp is None or tp is types.NoneType:
            return TypeRef("types", "NoneType")
        origin = typing.get_origin(tp)
        if origin is typing.Annotated:
            return TypeRef.of(typing.get_args(tp)[0])
        # int | None and Optional[int] both render as typing.Union[...]
        if origin is typing.Union or origin is types.UnionType:
            return TypeRef("typing", "Union", tuple(TypeRef.of(arg) for arg in typing.get_args(tp)))
        if origin is not None:
            if not isinstance(origin, type):
                raise TypeError(f"Cannot reference special form {tp!r}")
            args = tuple(TypeRef.of(arg) for arg in typing.get_args(tp))
            return TypeRef(origin.__module__, origin.__qualname__, args)
        if isinstance(tp, type):
            if "<locals>" in tp.__qualname__:
                raise TypeError(f"Cannot reference {tp.__qualname__}: local classes are not importable")
            return TypeRef(tp.__module__, tp.__qualname__)
        raise TypeError(f"Expected a class or generic alias, got {tp!r}")

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True)
class MemberDescriptor:
    """A member of an aggregate as seen by the host."""

    name: str
    kind: MemberKind
    type: TypeRef
    is_immutable: bool = False

    # Explicit key for EXPLICIT_INDEX, or the index assigned by resolution
    slot_index: int | None = None

    # Visibility as reported by the host
    is_public: bool = True
    is_static: bool = False
    is_readable: bool = True


@dataclass(frozen=True)
class ParameterDescriptor:
    """A parameter of an initializer."""

    name: str
    type: TypeRef
    positional_only: bool = False


@dataclass(frozen=True)
class InitializerDescriptor:
    """A way to build an instance: the type's constructor or a classmethod factory."""

    parameters: tuple[ParameterDescriptor, ...] = ()

    # None calls the type itself, otherwise the named classmethod
    factory: str | None = None

    @property
    def arity(self) -> int:
        return len(self.parameters)


@dataclass(frozen=True)
class TypeDescriptor:
    """Normalized description of one aggregate type."""

    self_type: TypeRef
    members: tuple[MemberDescriptor, ...] = ()
    policy: DiscoveryPolicy = DiscoveryPolicy.EXPLICIT_INDEX
    initializers: tuple[InitializerDescriptor, ...] = ()

    # Whether an instance may be absent (None)
    is_reference_type: bool = True

    # Set for iterable aggregates producing elements of a single type
    element_type: TypeRef | None = None

    @property
    def is_enumerable(self) -> bool:
        return self.element_type is not None


@dataclass(frozen=True)
class ConstructionPlan:
    """How a decoder rebuilds an instance from decoded member values."""

    initializer: InitializerDescriptor
    # Ordered like the initializer's parameters
    parameter_members: tuple[MemberDescriptor, ...] = ()
    # Assigned as attributes after construction
    remainder_members: tuple[MemberDescriptor, ...] = ()


@dataclass(frozen=True)
class GeneratedUnit:
    """A generated module: file name and source text."""

    name: str
    text: str


@dataclass(frozen=True)
class ContextDeclaration:
    """A container requesting converters for a set of types."""

    name: str
    namespace: str | None
    includes: tuple[TypeDescriptor, ...] = ()
    is_extensible: bool = True


@dataclass
class TypeArtifacts:
    """Everything one type's synthesis produced."""

    type_ref: TypeRef
    units: list[GeneratedUnit] = field(default_factory=list)
    creators: list[str] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    # Set when the pass was cancelled while this type was in progress
    cancelled: bool = False
