"""
Member resolution.

Turns the members a host reported for a type into the ordered list of
members that are serialized, according to the type's discovery policy.
"""

from __future__ import annotations

import dataclasses
from collections import defaultdict

from structlog import get_logger

from .cancellation import CancellationToken
from .descriptors import DiscoveryPolicy, MemberDescriptor, TypeDescriptor
from .errors import DuplicateSlotError

logger = get_logger()

# Slot vocabulary of positional tuple aggregates; "rest" holds the continuation
FIXED_SLOT_NAMES = ("item1", "item2", "item3", "item4", "item5", "item6", "item7", "rest")


def _is_eligible(member: MemberDescriptor) -> bool:
    return member.is_public and not member.is_static and member.is_readable


def _check_unique_slots(descriptor: TypeDescriptor, members: list[MemberDescriptor]) -> None:
    by_slot: dict[int, list[str]] = defaultdict(list)
    for member in members:
        by_slot[member.slot_index].append(member.name)
    for slot_index, names in by_slot.items():
        if len(names) > 1:
            raise DuplicateSlotError(descriptor.self_type.full_name, slot_index, names)


def _explicit_index_members(descriptor: TypeDescriptor, cancellation: CancellationToken) -> list[MemberDescriptor]:
    result = []
    for member in descriptor.members:
        cancellation.throw_if_cancelled()
        if not _is_eligible(member):
            continue
        if member.slot_index is None or member.slot_index < 0:
            continue
        result.append(member)
    _check_unique_slots(descriptor, result)
    return sorted(result, key=lambda m: m.slot_index)


def _declared_order_members(descriptor: TypeDescriptor, cancellation: CancellationToken) -> list[MemberDescriptor]:
    result = []
    for member in descriptor.members:
        cancellation.throw_if_cancelled()
        if not _is_eligible(member):
            continue
        result.append(dataclasses.replace(member, slot_index=len(result)))
    return result


def _fixed_slot_members(descriptor: TypeDescriptor, cancellation: CancellationToken) -> list[MemberDescriptor]:
    result = []
    for member in descriptor.members:
        cancellation.throw_if_cancelled()
        if not _is_eligible(member) or member.name not in FIXED_SLOT_NAMES:
            continue
        result.append(dataclasses.replace(member, slot_index=FIXED_SLOT_NAMES.index(member.name)))
    _check_unique_slots(descriptor, result)
    return sorted(result, key=lambda m: m.slot_index)


_RESOLVERS = {
    DiscoveryPolicy.EXPLICIT_INDEX: _explicit_index_members,
    DiscoveryPolicy.DECLARED_ORDER: _declared_order_members,
    DiscoveryPolicy.FIXED_SLOT_NAMES: _fixed_slot_members,
}


def resolve_members(descriptor: TypeDescriptor, cancellation: CancellationToken | None = None) -> list[MemberDescriptor]:
    """
    Resolve the ordered serializable members of a type.

    Only public, non-static, readable members are considered. The returned
    members carry their final slot index.

    Args:
        descriptor: The type description
        cancellation: Token checked once per member

    Returns:
        Members in serialization order (possibly empty)

    Raises:
        DuplicateSlotError: If two members resolve to the same slot
        GenerationCancelled: If the pass was cancelled
    """
    cancellation = cancellation or CancellationToken()
    members = _RESOLVERS[descriptor.policy](descriptor, cancellation)
    logger.debug(
        "resolved members",
        type=descriptor.self_type.full_name,
        policy=descriptor.policy.value,
        members=[m.name for m in members],
    )
    return members
