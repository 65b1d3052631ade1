"""
Type aliases used by generated code.

Generated modules never spell a type's full name in their body; every type
gets a short alias bound once in the module prologue.
"""

from __future__ import annotations

from .descriptors import TypeRef

SELF_ALIAS = "_TSelf"


class TypeAliasRegistry:
    """Maps each distinct TypeRef of one generated unit to a short alias.

    The type being generated always gets ``_TSelf``; every other type gets
    ``_T0``, ``_T1``, ... in the order it was first added.
    """

    def __init__(self, self_type: TypeRef):
        self.self_type = self_type
        self._aliases: dict[TypeRef, str] = {self_type: SELF_ALIAS}
        self._index = 0

    def add(self, type_ref: TypeRef) -> str:
        """Register a type if it is new and return its alias."""
        alias = self._aliases.get(type_ref)
        if alias is not None:
            return alias
        alias = f"_T{self._index}"
        self._index += 1
        self._aliases[type_ref] = alias
        return alias

    def get_alias(self, type_ref: TypeRef) -> str:
        return self._aliases[type_ref]

    def __contains__(self, type_ref: object) -> bool:
        return type_ref in self._aliases

    def __len__(self) -> int:
        return len(self._aliases)

    def entries(self) -> list[tuple[str, str]]:
        """(alias, full name) pairs, ``_TSelf`` first, then first-seen order."""
        return [(alias, type_ref.full_name) for type_ref, alias in self._aliases.items()]

    def imports(self) -> list[str]:
        """Sorted modules the prologue must import."""
        modules: set[str] = set()
        for type_ref in self._aliases:
            modules.update(type_ref.modules())
        return sorted(modules)

    def prologue(self) -> list[str]:
        """Source lines binding every alias."""
        lines = [f"import {module}" for module in self.imports()]
        lines.append("")
        lines.extend(f"{alias} = {full_name}" for alias, full_name in self.entries())
        return lines
