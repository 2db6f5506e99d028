"""Chaining of related policies.

A chain expresses "baseline policy, then override for some roles": the next
policy targets the same primitives and resource types and runs right after
its parent, so its values win on overlapping capabilities.
"""

import logging
from typing import TYPE_CHECKING

from ....config.settings import get_settings

if TYPE_CHECKING:
    from ..entities.policy import Policy

logger = logging.getLogger(__name__)


def chain_policy(parent: "Policy", child: "Policy") -> "Policy":
    """Copy a parent's targets into a child policy that runs after it.

    Exceptions and ``only`` are not copied; each link starts clean.

    Args:
        parent: The policy being refined
        child: A freshly created policy

    Returns:
        The child policy, re-prioritized after the parent
    """
    primitives = parent.get_primitives()
    if primitives:
        child.primitives(primitives)

    content_types = parent.get_content_types()
    if content_types:
        child.caps_for_content_type(content_types)

    taxonomies = parent.get_taxonomies()
    if taxonomies:
        child.caps_for_taxonomy(taxonomies)

    child.at_priority(parent.priority + get_settings().chain_priority_step)

    logger.debug(f"Chained {child!r} after {parent!r}")
    return child
