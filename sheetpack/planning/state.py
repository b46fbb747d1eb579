# -*- coding: utf-8 -*-
"""
Run-time state containers for a packing request.

This module defines:
  - RuntimeBudget: mutable space budget used during a solve
  - PackingState:  immutable input snapshot (topic pool + available space)

Notes
-----
- Business (timeless) entities live in `business_objects/`:
  * business_objects.topics.OrganizedTopic / EnhancedSubTopic
  * business_objects.constraints.SpaceConstraints
- Everything here is created fresh per request and discarded afterwards.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional

from sheetpack.business_objects.errors import StateValidationError
from sheetpack.business_objects.topics import OrganizedTopic


# ----------------------------
# Runtime (mutable) container
# ----------------------------

@dataclass
class RuntimeBudget:
    """
    Mutable space budget used during planning.

    Attributes
    ----------
    capacity : float
        Total space available (negative inputs are clamped to 0).
    used : float
        Space charged so far; updated as content is committed.
    """
    capacity: float
    used: float = field(default=0.0, init=False)

    def __post_init__(self) -> None:  # type: ignore[override]
        self.capacity = max(0.0, float(self.capacity))
        self.used = 0.0

    @property
    def remaining(self) -> float:
        return self.capacity - self.used

    def can_fit(self, space: float, ceiling: Optional[float] = None, eps: float = 1e-9) -> bool:
        """Check if `space` fits under `ceiling` (defaults to capacity), within tolerance."""
        limit = self.capacity if ceiling is None else min(self.capacity, ceiling)
        return self.used + space <= limit + eps

    def charge(self, space: float, ceiling: Optional[float] = None, eps: float = 1e-9) -> bool:
        """
        Attempt to charge `space`. Returns True if committed, False otherwise.
        No overfill is allowed (beyond eps tolerance).
        """
        if self.can_fit(space, ceiling=ceiling, eps=eps):
            self.used += space
            return True
        return False


# ----------------------------
# Immutable input snapshot
# ----------------------------

@dataclass(frozen=True)
class PackingState:
    """
    Immutable problem input for a packing run.

    Attributes
    ----------
    topics : list[OrganizedTopic]
        Candidate topic pool (read-only).
    available_space : float
        Budget in content units.
    """
    topics: List[OrganizedTopic]
    available_space: float

    def __post_init__(self) -> None:  # type: ignore[override]
        seen: set[str] = set()
        for t in self.topics:
            if t.id in seen:
                raise StateValidationError(f"Duplicate OrganizedTopic.id: {t.id}")
            seen.add(t.id)

    def to_runtime(self) -> RuntimeBudget:
        """Create a fresh, mutable budget to execute a solve."""
        return RuntimeBudget(capacity=self.available_space)
