"""
Lifecycle management of the components within a single namespace.

Managing a namespace takes a few steps:

1. Discover the candidate types of the namespace and keep the managed ones;
2. Build the dependency mapping from their declared dependency slots;
3. Sort it topologically;
4. Instantiate the components in that order and inject their dependencies.

These steps run once, in :meth:`LifecycleManager.initialize`. Starting and
stopping are separate operations that call the start and stop hooks of every
component, in dependency order.
"""

import logging
import threading
from typing import Any, Optional

from caretaker.discovery import ComponentDiscovery, ModuleDiscovery
from caretaker.domain import ComponentDescriptor, LifecycleState, Phase, canonical_name
from caretaker.errors import LifecycleHookError
from caretaker.inspection import AttributeInspector, MarkerInspector, describe
from caretaker.settings import LifecycleSettings
from caretaker.sorting import topological_sort
from caretaker.wiring import WiringManager

__all__ = ["LifecycleManager"]

logger = logging.getLogger(__name__)


class LifecycleManager:
    """Initialize, start and stop the managed components of one namespace.

    All operations are serialized on a single lock. ``initialize`` runs at
    most once; ``start`` requires an initialized manager and ``stop`` a
    started one, otherwise they do nothing. A stopped manager cannot be
    started again.

    Args:
        namespace: The discovery scope, e.g. a package name.
        discovery: Finds candidate types; defaults to :class:`ModuleDiscovery`.
        inspector: Reports managed types, slots and hooks; defaults to
            :class:`MarkerInspector`.
        settings: Options; defaults to :meth:`LifecycleSettings.from_env`.

    Example:
        >>> manager = LifecycleManager("myapp.components")
        >>> manager.initialize()
        >>> manager.start()
        >>> manager.stop()
    """

    def __init__(
        self,
        namespace: str,
        discovery: Optional[ComponentDiscovery] = None,
        inspector: Optional[AttributeInspector] = None,
        settings: Optional[LifecycleSettings] = None,
    ):
        self.namespace = namespace
        self._settings = settings or LifecycleSettings.from_env()
        self._discovery = discovery or ModuleDiscovery(self._settings.recursive_discovery)
        self._inspector = inspector or MarkerInspector()
        self._lock = threading.RLock()
        self._state = LifecycleState.UNINITIALIZED
        self._components: list[tuple[str, Any]] = []

    @property
    def state(self) -> LifecycleState:
        with self._lock:
            return self._state

    @property
    def components(self) -> tuple[Any, ...]:
        """The wired components, in dependency order."""
        with self._lock:
            return tuple(component for _, component in self._components)

    def initialize(self) -> None:
        """Discover, sort, instantiate and wire the namespace's components.

        Calls after the first successful one do nothing. On failure the
        manager stays uninitialized and keeps no components.

        Raises:
            NamespaceResolutionError: If the namespace cannot be resolved.
            DependencyError: If components have duplicate names, or
                dependencies that are cyclic or not managed.
            ComponentConstructionError: If a component cannot be constructed.
        """
        with self._lock:
            if self._state is not LifecycleState.UNINITIALIZED:
                logger.debug("Namespace '%s' is already initialized", self.namespace)
                return

            descriptors = self._managed_descriptors()
            ordered_types = topological_sort(
                {
                    component_type: descriptor.dependencies
                    for component_type, descriptor in descriptors.items()
                }
            )
            wiring = WiringManager()
            wiring.wire(descriptors[component_type] for component_type in ordered_types)

            self._components = list(wiring.components.items())
            self._state = LifecycleState.INITIALIZED
            logger.info(
                "Initialized %d components in namespace '%s'",
                len(self._components),
                self.namespace,
            )

    def start(self) -> None:
        """Call the start hook of every component, dependencies first.

        Does nothing unless the manager is initialized and not yet started.

        Raises:
            LifecycleHookError: If a hook fails. Hooks after it are not called
                and hooks already called are not undone.
        """
        with self._lock:
            if self._state is not LifecycleState.INITIALIZED:
                logger.debug("Ignoring start of '%s' in state %s", self.namespace, self._state)
                return

            self._invoke_hooks(Phase.START, self._components)
            self._state = LifecycleState.STARTED
            logger.info("Started namespace '%s'", self.namespace)

    def stop(self) -> None:
        """Call the stop hook of every component.

        Hooks run in the same order as on start unless
        ``settings.reverse_stop_order`` is set. Does nothing unless the
        manager is started.

        Raises:
            LifecycleHookError: If a hook fails. Hooks after it are not called.
        """
        with self._lock:
            if self._state is not LifecycleState.STARTED:
                logger.debug("Ignoring stop of '%s' in state %s", self.namespace, self._state)
                return

            components = self._components
            if self._settings.reverse_stop_order:
                components = list(reversed(components))

            self._invoke_hooks(Phase.STOP, components)
            self._state = LifecycleState.STOPPED
            logger.info("Stopped namespace '%s'", self.namespace)

    def _managed_descriptors(self) -> dict[type, ComponentDescriptor]:
        candidates = sorted(self._discovery.discover(self.namespace), key=canonical_name)
        return {
            candidate: describe(candidate, self._inspector)
            for candidate in candidates
            if self._inspector.is_managed(candidate)
        }

    def _invoke_hooks(self, phase: Phase, components: list[tuple[str, Any]]) -> None:
        for component_name, component in components:
            hook = self._inspector.hook_for(component, phase)
            if hook is None:
                continue

            logger.debug("Invoking %s hook of %s", phase, component_name)
            try:
                hook()
            except Exception as e:
                raise LifecycleHookError(component_name, phase, e) from e
