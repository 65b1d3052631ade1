"""
Construction plan resolution.

Decides how a decoder rebuilds an instance: which initializer to call with
which decoded members, and which members to assign afterwards.
"""

from __future__ import annotations

from structlog import get_logger

from .cancellation import CancellationToken
from .descriptors import ConstructionPlan, InitializerDescriptor, MemberDescriptor, TypeDescriptor

logger = get_logger()


def _match_parameters(
    initializer: InitializerDescriptor,
    members: list[MemberDescriptor],
    cancellation: CancellationToken,
) -> list[MemberDescriptor] | None:
    """
    Map every parameter to a member by case-insensitive name and exact type.

    Each member is used at most once. An exact-case name match is preferred
    over a case-insensitive one, so members differing only by case can each
    take their own parameter.
    """
    matched: list[MemberDescriptor] = []
    for parameter in initializer.parameters:
        cancellation.throw_if_cancelled()
        key = parameter.name.casefold()
        candidates = [
            m for m in members if m.name.casefold() == key and m.type == parameter.type and m not in matched
        ]
        if not candidates:
            return None
        member = next((m for m in candidates if m.name == parameter.name), candidates[0])
        matched.append(member)
    return matched


def resolve_construction_plan(
    descriptor: TypeDescriptor,
    members: list[MemberDescriptor],
    cancellation: CancellationToken | None = None,
) -> ConstructionPlan | None:
    """
    Choose how decoded members are reassembled into an instance.

    A zero-argument initializer wins when every member is mutable. Otherwise
    initializers are tried from the highest arity down; the first whose
    parameters all match a member and which leaves only mutable members
    uncovered is used.

    Args:
        descriptor: The type description
        members: Resolved members, in serialization order
        cancellation: Token checked once per candidate and parameter

    Returns:
        The plan, or None when no initializer can rebuild the type
    """
    cancellation = cancellation or CancellationToken()
    log = logger.new(type=descriptor.self_type.full_name)

    all_mutable = all(not m.is_immutable for m in members)
    default_initializer = next((i for i in descriptor.initializers if i.arity == 0), None)
    if default_initializer is not None and all_mutable:
        log.debug("using zero-argument initializer", factory=default_initializer.factory)
        return ConstructionPlan(
            initializer=default_initializer,
            parameter_members=(),
            remainder_members=tuple(members),
        )

    # sorted() is stable, so equal arities keep declaration order
    candidates = sorted(descriptor.initializers, key=lambda i: i.arity, reverse=True)
    for initializer in candidates:
        cancellation.throw_if_cancelled()
        matched = _match_parameters(initializer, members, cancellation)
        if matched is None:
            log.debug("initializer rejected", parameters=[p.name for p in initializer.parameters])
            continue
        remainder = [m for m in members if m not in matched]
        if any(m.is_immutable for m in remainder):
            log.debug("initializer leaves immutable members", parameters=[p.name for p in initializer.parameters])
            continue
        log.debug("initializer selected", parameters=[p.name for p in initializer.parameters], factory=initializer.factory)
        return ConstructionPlan(
            initializer=initializer,
            parameter_members=tuple(matched),
            remainder_members=tuple(remainder),
        )

    log.debug("no feasible initializer")
    return None
