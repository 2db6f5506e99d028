"""Policy services package."""

from .evaluation_registry import (
    CapabilityListener,
    EvaluationRegistry,
    get_evaluation_registry,
    set_evaluation_registry,
    reset_evaluation_registry,
)
from .chain import chain_policy

__all__ = [
    "CapabilityListener",
    "EvaluationRegistry",
    "get_evaluation_registry",
    "set_evaluation_registry",
    "reset_evaluation_registry",
    "chain_policy",
]
