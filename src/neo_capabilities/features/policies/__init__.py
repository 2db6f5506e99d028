"""Policies feature for neo-capabilities.

- entities/: The fluent Policy builder and its evaluation logic
- services/: Evaluation registry and policy chaining
"""

from .entities import Policy
from .services import (
    CapabilityListener,
    EvaluationRegistry,
    chain_policy,
    get_evaluation_registry,
    reset_evaluation_registry,
    set_evaluation_registry,
)

__all__ = [
    # Entities
    "Policy",

    # Services
    "CapabilityListener",
    "EvaluationRegistry",
    "chain_policy",
    "get_evaluation_registry",
    "reset_evaluation_registry",
    "set_evaluation_registry",
]
