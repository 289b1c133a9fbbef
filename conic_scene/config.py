"""Configuration helpers for the dependency resolver."""

from __future__ import annotations

import copy
from dataclasses import dataclass

DEFAULT_PASSES = 3


@dataclass
class ResolverConfig:
    """Resolver settings.

    ``passes`` bounds the relaxation depth; construction chains longer than
    this under-resolve instead of failing.  ``convergence_tol`` is the largest
    attribute change still treated as "unchanged" when deciding whether the
    last pass reached a fixed point.
    """

    passes: int = DEFAULT_PASSES
    warn_on_non_convergence: bool = True
    convergence_tol: float = 1e-9


_RESOLVER_CONFIG = ResolverConfig()


def get_resolver_config() -> ResolverConfig:
    return copy.deepcopy(_RESOLVER_CONFIG)


def set_resolver_config(config: ResolverConfig) -> None:
    global _RESOLVER_CONFIG
    if config.passes < 1:
        raise ValueError(f"passes must be >= 1, got {config.passes}")
    _RESOLVER_CONFIG = copy.deepcopy(config)
