# -*- coding: utf-8 -*-
"""
Policy (configuration knobs) for the packing pipeline.

Utilization bands (fractions of the available space):
  - sparse_utilized:  below this, additions are suggested even when the
                      remaining space is small (default 0.3)
  - under_utilized:   below this, suggest adding topics/subtopics (default 0.7)
  - expansion_upper:  between under_utilized and this, suggest expanding
                      selected topics (default 0.85)
  - over_utilized:    above this, suggest reducing content (default 1.0)
  - overflow_warning: above this, analyses flag the selection as near
                      overflow (default 0.95)

Suggestion limits:
  - max_suggestions, max_topic_additions, max_subtopic_additions_per_topic

Run control:
  - eps: feasibility tolerance for budget checks
"""

from __future__ import annotations
from dataclasses import dataclass

from sheetpack.business_objects.errors import StateValidationError


@dataclass(frozen=True)
class Policy:
    """
    Planning knobs (pure data holder).

    Attributes
    ----------
    sparse_utilized : float
    under_utilized : float
    expansion_upper : float
    over_utilized : float
    overflow_warning : float
    min_remaining_for_additions : float
        Remaining space (units) below which no additions are suggested.
    min_remaining_for_expansion : float
        Remaining space (units) below which no expansion is suggested.
    expansion_cap : float
        Upper bound for the space impact of one expand_content suggestion.
    max_suggestions : int
    max_topic_additions : int
    max_subtopic_additions_per_topic : int
    eps : float
    """
    sparse_utilized: float = 0.3
    under_utilized: float = 0.7
    expansion_upper: float = 0.85
    over_utilized: float = 1.0
    overflow_warning: float = 0.95

    min_remaining_for_additions: float = 50.0
    min_remaining_for_expansion: float = 100.0
    expansion_cap: float = 150.0

    max_suggestions: int = 5
    max_topic_additions: int = 3
    max_subtopic_additions_per_topic: int = 2

    eps: float = 1e-9

    def __post_init__(self) -> None:  # type: ignore[override]
        bands = (
            0.0,
            self.sparse_utilized,
            self.under_utilized,
            self.expansion_upper,
            self.over_utilized,
        )
        if any(lo > hi for lo, hi in zip(bands, bands[1:])):
            raise StateValidationError(
                "Policy bands must satisfy 0 <= sparse_utilized <= under_utilized"
                " <= expansion_upper <= over_utilized."
            )
        if self.max_suggestions < 0:
            raise StateValidationError("Policy.max_suggestions must be >= 0.")


DEFAULT_POLICY = Policy()
