"""Discovery of candidate component types within a namespace.

A namespace is a string identifying a discovery scope. :class:`ModuleDiscovery`
treats it as a dotted module path and collects the classes defined there;
:class:`StaticDiscovery` treats it as a key into types registered explicitly.
Discovery returns candidates only: filtering for managed types is done by
the lifecycle.
"""

import importlib
import inspect
import logging
import pkgutil
from collections import defaultdict
from types import ModuleType
from typing import Callable, Protocol, TypeVar

from caretaker.errors import NamespaceResolutionError

__all__ = ["ComponentDiscovery", "ModuleDiscovery", "StaticDiscovery"]

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=type)


class ComponentDiscovery(Protocol):
    def discover(self, namespace: str) -> set[type]:
        """Return the candidate types in ``namespace``.

        Returns an empty set when the namespace holds no candidates.

        Raises:
            NamespaceResolutionError: If the namespace cannot be resolved.
        """
        ...


class ModuleDiscovery:
    """Discover the classes defined in a module or package.

    Only classes whose ``__module__`` is the scanned module are returned, so
    names imported from elsewhere are not picked up twice.

    Args:
        recursive: When the namespace is a package, also scan its submodules.
    """

    def __init__(self, recursive: bool = True):
        self._recursive = recursive

    def discover(self, namespace: str) -> set[type]:
        root = _import(namespace)
        modules = [root]
        if self._recursive and hasattr(root, "__path__"):
            modules.extend(_submodules(root))

        discovered = {
            member
            for module in modules
            for member in _classes_defined_in(module)
        }
        logger.debug(
            "Discovered %d classes in %d modules of '%s'",
            len(discovered),
            len(modules),
            namespace,
        )
        return discovered


class StaticDiscovery:
    """Discovery over types registered explicitly, grouped by namespace."""

    def __init__(self):
        self._types: dict[str, list[type]] = defaultdict(list)

    def register(self, namespace: str, component_type: type) -> None:
        """Register a type as a candidate of ``namespace``."""
        if component_type not in self._types[namespace]:
            self._types[namespace].append(component_type)

    def component(self, namespace: str) -> Callable[[C], C]:
        """Decorator registering a class in ``namespace``.

        Example:
            @discovery.component("app")
            @managed
            class Database:
                ...
        """

        def decorator(cls: C) -> C:
            self.register(namespace, cls)
            return cls

        return decorator

    def discover(self, namespace: str) -> set[type]:
        if namespace not in self._types:
            raise NamespaceResolutionError(namespace, "no types registered")
        return set(self._types[namespace])


def _import(module_name: str) -> ModuleType:
    # Import errors are not only ImportError: "" raises ValueError, a relative name TypeError.
    try:
        return importlib.import_module(module_name)
    except Exception as e:
        raise NamespaceResolutionError(module_name, repr(e)) from e


def _submodules(package: ModuleType) -> list[ModuleType]:
    def on_error(name: str) -> None:
        raise NamespaceResolutionError(name, "unable to import package")

    walker = pkgutil.walk_packages(package.__path__, f"{package.__name__}.", onerror=on_error)
    try:
        return [_import(info.name) for info in walker]
    except NamespaceResolutionError:
        raise
    except Exception as e:
        raise NamespaceResolutionError(package.__name__, repr(e)) from e


def _classes_defined_in(module: ModuleType) -> list[type]:
    return [
        member
        for _, member in inspect.getmembers(module, inspect.isclass)
        if member.__module__ == module.__name__
    ]
