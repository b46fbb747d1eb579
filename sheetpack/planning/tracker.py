# -*- coding: utf-8 -*-
"""
Planning tracker: CSV artifacts for a packing run.

Files produced (when Tracker is used):
  - selection.csv            (per-topic selection snapshot)
  - suggestions.csv          (ordered SpaceSuggestions)
  - utilization_summary.csv  (one row of global KPIs)
  - reduction_strategies.csv (best-first reduction plans; may be header-only)
  - density_actions.csv      (density report, one row per action)

Notes
-----
- Engine operations never write files; callers decide when to dump.
- Every writer returns the path it wrote.
"""

from __future__ import annotations
import csv
import json
import os
from dataclasses import dataclass
from typing import List, Sequence

from sheetpack.business_objects.topics import OrganizedTopic, priority_of, space_of
from sheetpack.planning.solution import (
    DensityOptimization,
    ReductionStrategy,
    SpaceSuggestion,
    SpaceUtilizationInfo,
    TopicSelection,
)
from sheetpack.quality_metrics.core import compute_selection_metrics, space_by_priority


@dataclass
class Tracker:
    """
    Thin, opt-in artifact writer. Callers control when/where to dump.
    """
    out_dir: str

    def __post_init__(self) -> None:  # type: ignore[override]
        os.makedirs(self.out_dir, exist_ok=True)

    def _path(self, filename: str) -> str:
        os.makedirs(self.out_dir, exist_ok=True)
        return os.path.join(self.out_dir, filename)

    # -----------------------------
    # Selection snapshot
    # -----------------------------
    def write_selection_csv(
        self,
        topics: Sequence[OrganizedTopic],
        selection: Sequence[TopicSelection],
        filename: str = "selection.csv",
    ) -> str:
        """
        One row per topic in the pool (input order).

        Columns:
          topic_id, title, priority, confidence, estimated_space,
          selected (0/1), charged_space, subtopic_ids_json
        """
        path = self._path(filename)
        chosen = {sel.topic_id: sel for sel in selection}

        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow([
                "topic_id",
                "title",
                "priority",
                "confidence",
                "estimated_space",
                "selected",
                "charged_space",
                "subtopic_ids_json",
            ])
            for t in topics:
                sel = chosen.get(t.id)
                w.writerow([
                    t.id,
                    t.title,
                    priority_of(t),
                    float(t.confidence),
                    space_of(t),
                    0 if sel is None else 1,
                    0.0 if sel is None else space_of(sel),
                    json.dumps([] if sel is None else list(sel.subtopic_ids)),
                ])
        return path

    # -----------------------------
    # Suggestions
    # -----------------------------
    def write_suggestions_csv(
        self,
        suggestions: Sequence[SpaceSuggestion],
        filename: str = "suggestions.csv",
    ) -> str:
        """
        Columns:
          rank, type, target_id, space_impact, description
        """
        path = self._path(filename)
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow(["rank", "type", "target_id", "space_impact", "description"])
            for idx, s in enumerate(suggestions):
                w.writerow([idx, s.type, s.target_id, float(s.space_impact), s.description])
        return path

    # -----------------------------
    # Global KPIs
    # -----------------------------
    def write_utilization_summary_csv(
        self,
        selection: Sequence[TopicSelection],
        topics: Sequence[OrganizedTopic],
        info: SpaceUtilizationInfo,
        filename: str = "utilization_summary.csv",
    ) -> str:
        """
        Single-row summary.

        Columns (in order):
          1. Budget: available_space, used_space, remaining_space, utilization_pct
          2. Selection: selected_topics, selected_subtopics, total_topics,
             selection_rate, high_priority_coverage, unknown_selections
          3. Space by tier: high_space, medium_space, low_space
          4. suggestion_count
        """
        path = self._path(filename)
        metrics = compute_selection_metrics(selection, topics, info.total_available_space)
        tiers = space_by_priority(selection, topics)

        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow([
                "available_space",
                "used_space",
                "remaining_space",
                "utilization_pct",
                "selected_topics",
                "selected_subtopics",
                "total_topics",
                "selection_rate",
                "high_priority_coverage",
                "unknown_selections",
                "high_space",
                "medium_space",
                "low_space",
                "suggestion_count",
            ])
            w.writerow([
                info.total_available_space,
                info.used_space,
                info.remaining_space,
                info.utilization_percentage * 100.0,
                int(metrics["Selected Topics"]),
                int(metrics["Selected Subtopics"]),
                int(metrics["Total Topics"]),
                metrics["Selection Rate"],
                metrics["High Priority Coverage"],
                int(metrics["Unknown Selections"]),
                tiers["high"],
                tiers["medium"],
                tiers["low"],
                len(info.suggestions),
            ])
        return path

    # -----------------------------
    # Reduction strategies
    # -----------------------------
    def write_reduction_strategies_csv(
        self,
        strategies: List[ReductionStrategy],
        filename: str = "reduction_strategies.csv",
    ) -> str:
        """
        Columns:
          rank, reduction_type, content_impact, preservation_score,
          space_recovered, target_ids_json
        """
        path = self._path(filename)
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow([
                "rank",
                "reduction_type",
                "content_impact",
                "preservation_score",
                "space_recovered",
                "target_ids_json",
            ])
            for idx, s in enumerate(strategies):
                w.writerow([
                    idx,
                    s.reduction_type,
                    s.content_impact,
                    float(s.preservation_score),
                    float(s.space_recovered),
                    json.dumps(list(s.target_ids)),
                ])
        return path

    # -----------------------------
    # Density report
    # -----------------------------
    def write_density_actions_csv(
        self,
        density: DensityOptimization,
        filename: str = "density_actions.csv",
    ) -> str:
        """
        Columns:
          step_index, type, target_area, impact, description,
          current_density, target_density, density_gap, reference_alignment
        """
        path = self._path(filename)
        with open(path, "w", newline="", encoding="utf-8") as f:
            w = csv.writer(f)
            w.writerow([
                "step_index",
                "type",
                "target_area",
                "impact",
                "description",
                "current_density",
                "target_density",
                "density_gap",
                "reference_alignment",
            ])
            for idx, a in enumerate(density.optimization_actions):
                w.writerow([
                    idx,
                    a.type,
                    a.target_area,
                    float(a.impact),
                    a.description,
                    density.current_density,
                    density.target_density,
                    density.density_gap,
                    density.reference_alignment,
                ])
        return path
