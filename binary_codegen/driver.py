"""
Generation driver.

Validates a context declaration, runs per-type synthesis in parallel and
merges the per-type results into one GenerationResult.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from structlog import get_logger

from .cancellation import CancellationToken
from .config import CodeGeneratorConfig
from .descriptors import ContextDeclaration, GeneratedUnit, TypeArtifacts, TypeDescriptor, TypeRef
from .diagnostics import (
    CONTEXT_MUST_BE_EXTENSIBLE,
    CONTEXT_MUST_HAVE_NAMESPACE,
    CONVERTER_NAME_COLLISION,
    DUPLICATE_SLOT_INDEX,
    INCLUDE_TYPE_DUPLICATED,
    Diagnostic,
)
from .emitters import RegistryEmitter, generation_comment
from .errors import DuplicateSlotError, GenerationCancelled
from .synthesis import synthesize

logger = get_logger()


@dataclass
class GenerationResult:
    """Merged output of one context declaration."""

    context_name: str
    units: list[GeneratedUnit] = field(default_factory=list)

    # Creator registry, in registration order
    creators: list[str] = field(default_factory=list)

    diagnostics: list[Diagnostic] = field(default_factory=list)

    # Types dropped because the pass was cancelled
    cancelled: list[TypeRef] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self.diagnostics)

    def merge(self, artifacts: TypeArtifacts) -> None:
        """Append one type's artifacts, keeping them grouped."""
        if artifacts.cancelled:
            self.cancelled.append(artifacts.type_ref)
            return
        self.units.extend(artifacts.units)
        self.creators.extend(artifacts.creators)
        self.diagnostics.extend(artifacts.diagnostics)

    def unit(self, name: str) -> GeneratedUnit:
        """Look up a unit by file name."""
        for unit in self.units:
            if unit.name == name:
                return unit
        raise KeyError(name)


class GenerationDriver:
    """Runs converter generation for context declarations."""

    def __init__(self, config: CodeGeneratorConfig | None = None):
        """
        Initialize the driver.

        Args:
            config: Code generation configuration
        """
        self.config = config or CodeGeneratorConfig()

    def run(self, context: ContextDeclaration, cancellation: CancellationToken | None = None) -> GenerationResult:
        """
        Generate every unit requested by a context declaration.

        Configuration errors on the declaration stop generation for it and are
        reported as diagnostics. Problems with one included type never affect
        the others.

        Args:
            context: The declaration to generate
            cancellation: Token shared by every worker of the pass

        Returns:
            Units, creator registry and diagnostics of the context
        """
        cancellation = cancellation or CancellationToken()
        log = logger.new(context=context.name)
        result = GenerationResult(context_name=context.name)

        if not context.is_extensible:
            log.warning("context is not extensible, skipping")
            result.diagnostics.append(CONTEXT_MUST_BE_EXTENSIBLE.create(context.name, context.name))
            return result
        if not context.namespace:
            log.warning("context has no namespace, skipping")
            result.diagnostics.append(CONTEXT_MUST_HAVE_NAMESPACE.create(context.name, context.name))
            return result

        descriptors = self._unique_includes(context, result)
        header = generation_comment(self.config)

        def work(descriptor: TypeDescriptor) -> TypeArtifacts:
            return self._synthesize_isolated(descriptor, context.namespace, cancellation, header)

        # map() yields in submission order, so the merge is reproducible
        owners: dict[str, TypeRef] = {}
        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            for artifacts in executor.map(work, descriptors):
                if self._claim_unit_names(artifacts, owners, result):
                    result.merge(artifacts)

        result.units.append(RegistryEmitter(self.config, header).emit(context.name, context.namespace, result.creators))
        log.info(
            "context generated",
            types=len(descriptors),
            units=len(result.units),
            creators=len(result.creators),
            cancelled=len(result.cancelled),
        )
        return result

    def run_all(self, contexts: list[ContextDeclaration], cancellation: CancellationToken | None = None) -> list[GenerationResult]:
        """Run several independent context declarations."""
        cancellation = cancellation or CancellationToken()
        return [self.run(context, cancellation) for context in contexts]

    def _unique_includes(self, context: ContextDeclaration, result: GenerationResult) -> list[TypeDescriptor]:
        """Drop repeated includes of the same type, warning about each repeat."""
        seen: set[TypeRef] = set()
        unique = []
        for descriptor in context.includes:
            type_ref = descriptor.self_type
            if type_ref in seen:
                logger.warning("duplicate include ignored", context=context.name, type=type_ref.full_name)
                result.diagnostics.append(INCLUDE_TYPE_DUPLICATED.create(context.name, type_ref.full_name))
                continue
            seen.add(type_ref)
            unique.append(descriptor)
        return unique

    def _claim_unit_names(self, artifacts: TypeArtifacts, owners: dict[str, TypeRef], result: GenerationResult) -> bool:
        """
        Record the unit names of a type, refusing names another type already produced.

        Different types can map to the same converter name (nested ``Order.Item``
        and top-level ``Order_Item``). The first one keeps the name, later ones are
        reported and skipped.
        """
        type_ref = artifacts.type_ref
        for unit in artifacts.units:
            owner = owners.get(unit.name)
            if owner is not None:
                logger.warning("converter name collision, type skipped", type=type_ref.full_name, unit=unit.name, owner=owner.full_name)
                result.diagnostics.append(
                    CONVERTER_NAME_COLLISION.create(type_ref.full_name, type_ref.full_name, unit.name, owner.full_name)
                )
                return False
        owners.update((unit.name, type_ref) for unit in artifacts.units)
        return True

    def _synthesize_isolated(
        self,
        descriptor: TypeDescriptor,
        namespace: str,
        cancellation: CancellationToken,
        header: str,
    ) -> TypeArtifacts:
        """Run synthesis for one type, turning its failures into artifacts."""
        type_ref = descriptor.self_type
        try:
            cancellation.throw_if_cancelled()
            return synthesize(descriptor, namespace, self.config, cancellation, header)
        except GenerationCancelled:
            logger.warning("type generation cancelled", type=type_ref.full_name)
            return TypeArtifacts(type_ref=type_ref, cancelled=True)
        except DuplicateSlotError as e:
            logger.warning("type skipped", type=type_ref.full_name, error=str(e))
            return TypeArtifacts(type_ref=type_ref, diagnostics=[DUPLICATE_SLOT_INDEX.create(type_ref.full_name, str(e))])
