# -*- coding: utf-8 -*-
"""
Layout constraint models: the physical page budget and the optional
reference-document characterization used for calibration.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Literal

from .errors import StateValidationError

PageSize = Literal["a4", "letter", "legal", "a3"]
FontSize = Literal["small", "medium", "large"]
LayoutPattern = Literal["single-column", "multi-column", "mixed"]
OrganizationStyle = Literal["hierarchical", "flat", "mixed"]

PAGE_SIZES = ("a4", "letter", "legal", "a3")
FONT_SIZES = ("small", "medium", "large")
LAYOUT_PATTERNS = ("single-column", "multi-column", "mixed")
ORGANIZATION_STYLES = ("hierarchical", "flat", "mixed")
MAX_COLUMNS = 3


@dataclass(frozen=True)
class SpaceConstraints:
    """
    Immutable description of the physical output.

    Attributes
    ----------
    available_pages : int
        Page count; 0 means no budget. Negative values are tolerated and
        produce an empty budget.
    page_size : PageSize
        One of "a4", "letter", "legal", "a3".
    font_size : FontSize
        One of "small", "medium", "large".
    columns : int
        Column count, 1..3.
    target_utilization : float
        Fraction of raw capacity to budget for, in (0, 1].
    """
    available_pages: int = 1
    page_size: PageSize = "a4"
    font_size: FontSize = "medium"
    columns: int = 1
    target_utilization: float = 0.85

    def __post_init__(self) -> None:  # type: ignore[override]
        if self.page_size not in PAGE_SIZES:
            raise StateValidationError(
                f"SpaceConstraints.page_size must be one of {PAGE_SIZES}, got {self.page_size!r}."
            )
        if self.font_size not in FONT_SIZES:
            raise StateValidationError(
                f"SpaceConstraints.font_size must be one of {FONT_SIZES}, got {self.font_size!r}."
            )
        if not 1 <= int(self.columns) <= MAX_COLUMNS:
            raise StateValidationError(
                f"SpaceConstraints.columns must be in 1..{MAX_COLUMNS}, got {self.columns}."
            )
        if not 0.0 < float(self.target_utilization) <= 1.0:
            raise StateValidationError("SpaceConstraints.target_utilization must be in (0, 1].")


@dataclass(frozen=True)
class ReferenceFormatAnalysis:
    """
    Characterization of a reference study sheet.

    Attributes
    ----------
    content_density : float
        Characters per page observed in the reference.
    topic_count : int
        Number of topics in the reference.
    average_topic_length : float
        Mean characters per topic body.
    layout_pattern : LayoutPattern
    organization_style : OrganizationStyle
    visual_elements : dict
        Cosmetic style metadata (headers, colors, fonts); ignored by packing.
    """
    content_density: float
    topic_count: int
    average_topic_length: float
    layout_pattern: LayoutPattern = "single-column"
    organization_style: OrganizationStyle = "mixed"
    visual_elements: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self) -> None:  # type: ignore[override]
        if self.content_density < 0:
            raise StateValidationError("ReferenceFormatAnalysis.content_density must be >= 0.")
        if self.topic_count < 0:
            raise StateValidationError("ReferenceFormatAnalysis.topic_count must be >= 0.")
        if self.average_topic_length < 0:
            raise StateValidationError("ReferenceFormatAnalysis.average_topic_length must be >= 0.")
        if self.layout_pattern not in LAYOUT_PATTERNS:
            raise StateValidationError(
                f"ReferenceFormatAnalysis.layout_pattern must be one of {LAYOUT_PATTERNS}."
            )
        if self.organization_style not in ORGANIZATION_STYLES:
            raise StateValidationError(
                f"ReferenceFormatAnalysis.organization_style must be one of {ORGANIZATION_STYLES}."
            )
