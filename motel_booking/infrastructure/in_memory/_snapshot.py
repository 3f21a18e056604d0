import copy
from typing import TypeVar

T = TypeVar("T")


def snapshot(entity: T) -> T:
    """Detached copy, so callers only see changes they persist explicitly."""
    clone = copy.deepcopy(entity)
    if hasattr(clone, "pending_events"):
        clone.pending_events = []
    return clone
