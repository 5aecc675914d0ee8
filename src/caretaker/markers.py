"""Decorators and annotations that mark classes for lifecycle management.

Example:
    >>> @managed(name="db")
    ... class Database:
    ...     @on_start
    ...     def connect(self): ...
    >>>
    >>> @managed
    ... class Service:
    ...     db: Annotated[Database, INJECT]
"""

from typing import Any, Callable, Optional, TypeVar, Union, overload

from caretaker.domain import Phase

__all__ = ["INJECT", "managed", "on_start", "on_stop", "component_metadata"]

METADATA_ATTRIBUTE = "__component_metadata__"
HOOK_ATTRIBUTE = "__lifecycle_hook__"

C = TypeVar("C", bound=type)
F = TypeVar("F", bound=Callable[..., Any])


class _InjectMarker:
    def __repr__(self) -> str:
        return "INJECT"


INJECT = _InjectMarker()
"""Marks a class annotation as a dependency slot: ``Annotated[Target, INJECT]``."""


def set_metadata(target: C, **kwargs) -> C:
    # Copy so that a subclass never writes into its base class's metadata.
    metadata = dict(target.__dict__.get(METADATA_ATTRIBUTE, {}))
    metadata.update(kwargs)
    setattr(target, METADATA_ATTRIBUTE, metadata)
    return target


def component_metadata(target: type) -> dict[str, Any]:
    """Return the metadata declared on ``target`` itself, ignoring base classes."""
    return dict(target.__dict__.get(METADATA_ATTRIBUTE, {}))


@overload
def managed(target: C) -> C: ...


@overload
def managed(*, name: Optional[str] = None) -> Callable[[C], C]: ...


def managed(
    target: Optional[C] = None, *, name: Optional[str] = None
) -> Union[C, Callable[[C], C]]:
    """Mark a class as a managed component.

    Can be used bare (``@managed``) or with an explicit component name
    (``@managed(name="db")``). Without a name the class's fully qualified name
    is used. Managed classes must be constructible without arguments.
    """

    def decorator(cls: C) -> C:
        return set_metadata(cls, managed=True, name=name)

    if target is not None:
        return decorator(target)
    return decorator


def _hook(phase: Phase) -> Callable[[F], F]:
    def decorator(func: F) -> F:
        setattr(func, HOOK_ATTRIBUTE, phase)
        return func

    return decorator


on_start = _hook(Phase.START)
on_start.__doc__ = "Mark a method to be called when the lifecycle starts."

on_stop = _hook(Phase.STOP)
on_stop.__doc__ = "Mark a method to be called when the lifecycle stops."
