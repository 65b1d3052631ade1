"""
Emitters.

Render generated units from a prepared TypeSynthesis.
"""

from __future__ import annotations

from .base import TemplateEmitter, generation_comment
from .converter import ConverterEmitter
from .creator import CreatorEmitter
from .enumerable import EnumerableEmitter
from .registry import REGISTRY_UNIT_NAME, RegistryEmitter

__all__ = [
    "TemplateEmitter",
    "generation_comment",
    "ConverterEmitter",
    "CreatorEmitter",
    "EnumerableEmitter",
    "RegistryEmitter",
    "REGISTRY_UNIT_NAME",
]
