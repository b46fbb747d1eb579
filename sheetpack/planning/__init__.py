# -*- coding: utf-8 -*-
"""
Planning layer public API for the packing pipeline.

This module exposes the core planning-time data contracts:
  - State models (PackingState, RuntimeBudget)
  - Policy configuration and calibration modes
  - Selection and result records

Other planning modules (solvers, suggestions, reduction, density,
utilization, advisor, tracker) are intentionally not exported here to avoid
cluttering the namespace. They should be imported explicitly when needed.
"""

from .state import PackingState, RuntimeBudget
from .policy import DEFAULT_POLICY, Policy
from .calibration import CalibrationMode, Default, ReferenceGuided, calibration_for
from .solution import (
    ContentExpansionSuggestion,
    ContentUtilizationAnalysis,
    DensityAction,
    DensityOptimization,
    ReductionStrategy,
    SelectionValidation,
    SpaceOptimizationResult,
    SpaceRecommendations,
    SpaceSuggestion,
    SpaceUtilizationInfo,
    SubtopicSelection,
    TopicSelection,
    UtilizationRecommendation,
)

__all__ = [
    "PackingState",
    "RuntimeBudget",
    "Policy",
    "DEFAULT_POLICY",
    "CalibrationMode",
    "Default",
    "ReferenceGuided",
    "calibration_for",
    "TopicSelection",
    "SubtopicSelection",
    "SpaceSuggestion",
    "SpaceOptimizationResult",
    "SpaceUtilizationInfo",
    "ReductionStrategy",
    "DensityAction",
    "DensityOptimization",
    "ContentExpansionSuggestion",
    "UtilizationRecommendation",
    "ContentUtilizationAnalysis",
    "SelectionValidation",
    "SpaceRecommendations",
]
