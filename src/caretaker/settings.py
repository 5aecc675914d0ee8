"""Configuration of a lifecycle manager."""

import os
from dataclasses import dataclass
from typing import Mapping

__all__ = ["LifecycleSettings"]

ENV_PREFIX = "CARETAKER_"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class LifecycleSettings:
    """Options of a :class:`~caretaker.lifecycle.LifecycleManager`.

    Attributes:
        recursive_discovery: Scan submodules of a package namespace.
        reverse_stop_order: Stop dependents before their dependencies. By
            default stop hooks run in the same order as start hooks.
    """

    recursive_discovery: bool = True
    reverse_stop_order: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = os.environ) -> "LifecycleSettings":
        """Read settings from ``CARETAKER_*`` environment variables.

        Unset variables keep their defaults.
        """
        defaults = cls()
        return cls(
            recursive_discovery=_flag(
                environ, "RECURSIVE_DISCOVERY", defaults.recursive_discovery
            ),
            reverse_stop_order=_flag(
                environ, "REVERSE_STOP_ORDER", defaults.reverse_stop_order
            ),
        )


def _flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    value = environ.get(ENV_PREFIX + name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES
