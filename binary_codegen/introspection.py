"""
Host adapter for Python classes.

Builds TypeDescriptors from dataclasses, NamedTuples, annotated plain
classes and iterable generics, and ContextDeclarations from lists of them.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import inspect
import types
import typing
from collections.abc import Callable, Iterable
from typing import Any

from structlog import get_logger

from .descriptors import (
    ContextDeclaration,
    DiscoveryPolicy,
    InitializerDescriptor,
    MemberDescriptor,
    MemberKind,
    ParameterDescriptor,
    TypeDescriptor,
    TypeRef,
)
from .members import FIXED_SLOT_NAMES

logger = get_logger()

_INITIALIZER_MARKER = "__binary_codegen_initializer__"


@dataclasses.dataclass(frozen=True)
class TupleKey:
    """Explicit slot index of a member, used as ``Annotated[int, TupleKey(0)]``."""

    index: int


def initializer(func: Callable[..., Any] | classmethod) -> classmethod:
    """
    Mark a classmethod as an alternative constructor for decoding.

    May be stacked on ``@classmethod`` or used alone on a function taking ``cls``.
    """
    method = func if isinstance(func, classmethod) else classmethod(func)
    setattr(method.__func__, _INITIALIZER_MARKER, True)
    return method


def _type_hints(obj: Any) -> dict[str, Any]:
    """
    Resolved annotations of a class or function.

    Raises:
        TypeError: If an annotation names something that is not importable at run time
    """
    try:
        return typing.get_type_hints(obj, include_extras=True)
    except NameError as e:
        raise TypeError(f"Cannot resolve annotations of {obj!r}: {e}") from e


def _unwrap(hint: Any) -> tuple[Any, TupleKey | None, bool]:
    """Split an annotation into its type, its TupleKey and whether it is a ClassVar."""
    key = None
    if typing.get_origin(hint) is typing.Annotated:
        hint, *metadata = typing.get_args(hint)
        key = next((m for m in metadata if isinstance(m, TupleKey)), None)
    is_static = hint is typing.ClassVar or typing.get_origin(hint) is typing.ClassVar
    if is_static:
        args = typing.get_args(hint)
        hint = args[0] if args else object
        if typing.get_origin(hint) is typing.Annotated:
            hint, *metadata = typing.get_args(hint)
            key = key or next((m for m in metadata if isinstance(m, TupleKey)), None)
    return hint, key, is_static


def _is_named_tuple(tp: type) -> bool:
    return issubclass(tp, tuple) and hasattr(tp, "_fields")


def _fields_are_immutable(tp: type) -> bool:
    if _is_named_tuple(tp):
        return True
    if dataclasses.is_dataclass(tp):
        return tp.__dataclass_params__.frozen
    return False


def _annotated_members(tp: type) -> tuple[list[MemberDescriptor], bool]:
    """Members declared through class annotations, and whether any carries a TupleKey."""
    immutable = _fields_are_immutable(tp)
    members = []
    has_keys = False
    for name, hint in _type_hints(tp).items():
        if isinstance(hint, dataclasses.InitVar):
            continue
        hint, key, is_static = _unwrap(hint)
        try:
            type_ref = TypeRef.of(hint)
        except TypeError:
            if not is_static:
                raise
            logger.debug("class variable skipped", type=tp.__qualname__, member=name)
            continue
        has_keys = has_keys or key is not None
        members.append(
            MemberDescriptor(
                name=name,
                kind=MemberKind.FIELD,
                type=type_ref,
                is_immutable=immutable,
                slot_index=key.index if key else None,
                is_public=not name.startswith("_"),
                is_static=is_static,
            )
        )
    return members, has_keys


def _property_members(tp: type, known: set[str]) -> tuple[list[MemberDescriptor], bool]:
    """Members declared as properties with a return annotation."""
    members = []
    has_keys = False
    for klass in reversed(tp.__mro__):
        for name, attribute in vars(klass).items():
            if not isinstance(attribute, property) or name in known:
                continue
            hint = _type_hints(attribute.fget).get("return") if attribute.fget else None
            if hint is None:
                logger.debug("property without return annotation skipped", type=tp.__qualname__, member=name)
                continue
            hint, key, _ = _unwrap(hint)
            has_keys = has_keys or key is not None
            known.add(name)
            members.append(
                MemberDescriptor(
                    name=name,
                    kind=MemberKind.PROPERTY,
                    type=TypeRef.of(hint),
                    is_immutable=attribute.fset is None,
                    slot_index=key.index if key else None,
                    is_public=not name.startswith("_"),
                    is_readable=attribute.fget is not None,
                )
            )
    return members, has_keys


def _describe_signature(
    func: Callable[..., Any], hints: dict[str, Any], factory: str | None
) -> list[InitializerDescriptor]:
    """Initializers offered by one callable: its full signature, and a zero-argument form when every parameter is optional."""
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return []

    variadic = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    declared = [p for p in signature.parameters.values() if p.kind not in variadic]

    parameters = []
    for parameter in declared:
        hint = hints.get(parameter.name)
        if hint is None:
            logger.debug("initializer with untyped parameter skipped", factory=factory, parameter=parameter.name)
            return []
        hint, _, _ = _unwrap(hint)
        parameters.append(
            ParameterDescriptor(
                name=parameter.name,
                type=TypeRef.of(hint),
                positional_only=parameter.kind == inspect.Parameter.POSITIONAL_ONLY,
            )
        )

    result = [InitializerDescriptor(parameters=tuple(parameters), factory=factory)]
    if declared and all(p.default is not inspect.Parameter.empty for p in declared):
        result.append(InitializerDescriptor(parameters=(), factory=factory))
    return result


def _initializers(tp: type, class_hints: dict[str, Any]) -> list[InitializerDescriptor]:
    # NamedTuple.__new__ takes exactly the class annotations
    hints = class_hints if _is_named_tuple(tp) else {**class_hints, **_type_hints(tp.__init__)}
    result = _describe_signature(tp, hints, None)

    seen = set()
    for klass in tp.__mro__:
        for name, attribute in vars(klass).items():
            if name in seen or not isinstance(attribute, classmethod):
                continue
            seen.add(name)
            if getattr(attribute.__func__, _INITIALIZER_MARKER, False):
                bound = getattr(tp, name)
                result.extend(_describe_signature(bound, _type_hints(attribute.__func__), name))
    return result


def _iterable_element(tp: Any) -> Any | None:
    """Element type of a single-argument iterable generic, or None."""
    origin = typing.get_origin(tp)
    if not isinstance(origin, type) or not issubclass(origin, collections.abc.Iterable):
        return None
    args = typing.get_args(tp)
    if len(args) != 1 or isinstance(args[0], typing.TypeVar):
        return None
    return args[0]


def _describe_enumerable(tp: Any, element: Any) -> TypeDescriptor:
    return TypeDescriptor(self_type=TypeRef.of(tp), element_type=TypeRef.of(element))


def _infer_policy(members: list[MemberDescriptor], has_keys: bool) -> DiscoveryPolicy:
    if has_keys:
        return DiscoveryPolicy.EXPLICIT_INDEX
    names = [m.name for m in members if m.is_public and not m.is_static]
    if names and all(name in FIXED_SLOT_NAMES for name in names):
        return DiscoveryPolicy.FIXED_SLOT_NAMES
    return DiscoveryPolicy.DECLARED_ORDER


def describe(tp: Any, policy: DiscoveryPolicy | None = None) -> TypeDescriptor:
    """
    Describe a Python type for converter generation.

    Args:
        tp: A class, or a single-argument iterable generic such as ``list[int]``
        policy: Discovery policy, inferred from the members when None

    Returns:
        The type descriptor

    Raises:
        TypeError: If ``tp`` cannot be described
    """
    if typing.get_origin(tp) is not None:
        element = _iterable_element(tp)
        if element is None:
            raise TypeError(f"Only single-argument iterable generics can be described, got {tp!r}")
        return _describe_enumerable(tp, element)
    if not isinstance(tp, type):
        raise TypeError(f"Expected a class, got {tp!r}")

    iterable_bases = [e for e in map(_iterable_element, types.get_original_bases(tp)) if e is not None]
    if len(iterable_bases) == 1:
        return _describe_enumerable(tp, iterable_bases[0])

    members, field_keys = _annotated_members(tp)
    properties, property_keys = _property_members(tp, {m.name for m in members})
    members.extend(properties)

    if policy is None:
        policy = _infer_policy(members, field_keys or property_keys)

    descriptor = TypeDescriptor(
        self_type=TypeRef.of(tp),
        members=tuple(members),
        policy=policy,
        initializers=tuple(_initializers(tp, _type_hints(tp))),
    )
    logger.debug(
        "described type",
        type=descriptor.self_type.full_name,
        policy=policy.value,
        members=len(descriptor.members),
        initializers=len(descriptor.initializers),
    )
    return descriptor


def declare_context(
    name: str,
    namespace: str | None,
    include: Iterable[Any],
    extensible: bool = True,
) -> ContextDeclaration:
    """
    Declare a context requesting converters for a list of types.

    Args:
        name: Name of the context, used in diagnostics
        namespace: Package the generated units are imported from
        include: Types to generate for, or ready-made TypeDescriptors
        extensible: Whether generated code may be added to the context

    Returns:
        The context declaration
    """
    includes = tuple(t if isinstance(t, TypeDescriptor) else describe(t) for t in include)
    return ContextDeclaration(name=name, namespace=namespace, includes=includes, is_extensible=extensible)
