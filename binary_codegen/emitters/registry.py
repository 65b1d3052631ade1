"""
Creator registry emitter.
"""

from __future__ import annotations

from ..descriptors import GeneratedUnit
from .base import TemplateEmitter

REGISTRY_UNIT_NAME = "__init__.py"


class RegistryEmitter(TemplateEmitter):
    """Emits the package module exposing every creator of a context, in registration order."""

    TEMPLATE_NAME = "registry.py.jinja2"

    def emit(self, context_name: str, namespace: str, creators: list[str]) -> GeneratedUnit:
        return self._render(
            REGISTRY_UNIT_NAME,
            context_name=context_name,
            namespace=namespace,
            creators=creators,
            registry_name=self.config.registry_name,
        )
