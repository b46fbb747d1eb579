#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Run the packing pipeline on one problem folder and export CSV artifacts.

This version does NOT use argparse.
Just set the variables at the top of the file and run:

    python scripts/run_packing.py

Problem folder layout:
    topics.json        (required)
    constraints.json   (required)
    reference.json     (optional; enables reference-guided calibration)
    selection.json     (optional; evaluate this selection instead of the solver's)
"""

from __future__ import annotations
import logging
import os

# ====== CONFIGURATION ======
PROBLEM_DIR = "problems/problem_1"
OUT_DIR = "reports/problem_1"

# Use reference.json when present
USE_REFERENCE = True

# Evaluate selection.json (when present) instead of the solver's own selection
USE_SELECTION = False

# Recompute estimated_space for every topic from the constraints
REESTIMATE = True

LOG_LEVEL = logging.INFO
# ============================

from sheetpack.heuristics.estimate.footprint import add_space_estimates, calculate_available_space
from sheetpack.planning import Policy
from sheetpack.planning.advisor import generate_space_recommendations
from sheetpack.planning.solvers.greedy import run_packing
from sheetpack.planning.tracker import Tracker
from sheetpack.utils.read_jsons import (
    read_constraints_json,
    read_reference_json,
    read_selection_json,
    read_topics_json,
)


def main() -> None:
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Load problem
    constraints = read_constraints_json(os.path.join(PROBLEM_DIR, "constraints.json"))
    topics = read_topics_json(os.path.join(PROBLEM_DIR, "topics.json"))
    if REESTIMATE:
        topics = add_space_estimates(topics, constraints)

    reference_path = os.path.join(PROBLEM_DIR, "reference.json")
    reference = None
    if USE_REFERENCE and os.path.exists(reference_path):
        reference = read_reference_json(reference_path)

    selection_path = os.path.join(PROBLEM_DIR, "selection.json")
    selection = None
    if USE_SELECTION and os.path.exists(selection_path):
        selection = read_selection_json(selection_path)

    available = float(calculate_available_space(constraints))

    # Solve + evaluate; tracker writes the CSVs
    tracker = Tracker(out_dir=OUT_DIR)
    report = run_packing(
        topics,
        constraints,
        available,
        reference=reference,
        policy=Policy(),
        tracker=tracker,
        selection=selection,
    )
    recommendations = generate_space_recommendations(topics, constraints, reference)

    print("\n=== Recommended topics (commit order) ===")
    print(report.result.recommended_topics)
    print(
        f"\nUsed {report.utilization.used_space:.0f} of {available:.0f} units "
        f"({report.utilization.utilization_percentage * 100:.1f}%)"
    )
    for s in report.utilization.suggestions:
        print(f"  - [{s.type}] {s.description} ({s.space_impact:+.0f})")
    if report.reduction_strategies:
        best = report.reduction_strategies[0]
        print(
            f"\nBest reduction: {best.reduction_type} {best.target_ids} "
            f"(preserves {best.preservation_score:.2f})"
        )
    print(f"\nOptimal topic count: {recommendations.optimal_topic_count}")
    for tip in recommendations.space_utilization_tips:
        print(f"  * {tip}")

    print(f"\nCSV artifacts written to: {OUT_DIR}")


if __name__ == "__main__":
    main()
