"""Hook registry for operation hooks.

Holds the hook generators registered during a schema build and
aggregates their output per field.
"""

import logging
from enum import Enum

from ophooks.hooks.errors import RegistrationLockedError
from ophooks.hooks.types import (
    AggregatedCallbacks,
    FieldContext,
    HookBundle,
    HookDescriptor,
    HookGenerator,
)

logger = logging.getLogger(__name__)


class RegistryPhase(Enum):
    """Registration phase of a HookRegistry."""

    UNLOCKED = "unlocked"
    LOCKED = "locked"


class HookRegistry:
    """Registry of operation hook generators for one schema build.

    Generators must all be registered before the first field's hooks are
    resolved. Resolving locks the registry for the rest of the build, so a
    late registration fails instead of silently missing fields that were
    already wrapped.

    Example:
        registry = HookRegistry()
        registry.register(lambda ctx: HookBundle(before=[...]))

        bundles = registry.resolve_for(field_context)  # locks the registry
        callbacks = aggregate(bundles)
    """

    def __init__(self) -> None:
        self._generators: list[HookGenerator] = []
        self._phase = RegistryPhase.UNLOCKED

    @property
    def phase(self) -> RegistryPhase:
        return self._phase

    @property
    def is_locked(self) -> bool:
        return self._phase is RegistryPhase.LOCKED

    def __len__(self) -> int:
        return len(self._generators)

    def register(self, generator: HookGenerator) -> None:
        """Register a hook generator.

        Args:
            generator: Called once per root field; returns a HookBundle,
                or None when it does not apply to the field

        Raises:
            RegistrationLockedError: If hooks have already been resolved
        """
        if self.is_locked:
            raise RegistrationLockedError()
        self._generators.append(generator)
        logger.debug(
            "Registered operation hook generator %s",
            getattr(generator, "__qualname__", repr(generator)),
        )

    def resolve_for(self, context: FieldContext) -> list[HookBundle]:
        """Run every generator for a field and return the applicable bundles.

        The first call locks the registry.

        Returns:
            Non-None bundles, in registration order
        """
        if not self.is_locked:
            self._phase = RegistryPhase.LOCKED
            logger.info(
                "Operation hook registry locked with %d generator(s)",
                len(self._generators),
            )

        bundles = []
        for generator in self._generators:
            bundle = generator(context)
            if bundle is not None:
                bundles.append(bundle)
        return bundles


def _sorted_callbacks(descriptors: list[HookDescriptor]) -> tuple:
    # sorted() is stable, so equal priorities keep registration order
    return tuple(d.callback for d in sorted(descriptors, key=lambda d: d.priority))


def aggregate(bundles: list[HookBundle]) -> AggregatedCallbacks | None:
    """Merge bundles into priority-ordered callbacks for each stage.

    Returns:
        AggregatedCallbacks, or None if no bundle contributed any hook
    """
    before: list[HookDescriptor] = []
    after: list[HookDescriptor] = []
    error: list[HookDescriptor] = []

    for bundle in bundles:
        before.extend(bundle.before)
        after.extend(bundle.after)
        error.extend(bundle.error)

    if not before and not after and not error:
        return None

    return AggregatedCallbacks(
        before=_sorted_callbacks(before),
        after=_sorted_callbacks(after),
        error=_sorted_callbacks(error),
    )
