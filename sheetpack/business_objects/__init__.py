# -*- coding: utf-8 -*-
"""
Public exports for the business objects layer.
"""

from .errors import SchemaError, StateValidationError
from .topics import (
    Priority,
    PRIORITY_LEVELS,
    VisualExample,
    EnhancedSubTopic,
    OrganizedTopic,
    priority_of,
    space_of,
)
from .constraints import SpaceConstraints, ReferenceFormatAnalysis

__all__ = [
    # errors
    "SchemaError",
    "StateValidationError",
    # core models
    "Priority",
    "PRIORITY_LEVELS",
    "VisualExample",
    "EnhancedSubTopic",
    "OrganizedTopic",
    "SpaceConstraints",
    "ReferenceFormatAnalysis",
    # helpers
    "priority_of",
    "space_of",
]
