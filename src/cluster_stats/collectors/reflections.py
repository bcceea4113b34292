"""Reflection state collector.

Reduces every materialization of every layout into cluster-wide reflection
counters. For each layout:

1. FOOTPRINT
   - Every materialization's footprint counts toward the total size,
     whatever its state (running, done, failed, ...)

2. SELECTION
   - Only DONE and FAILED materializations are candidates
   - The candidate with the greatest start time represents the layout
   - On equal start times the first one returned by the service wins

3. CLASSIFICATION
   - DONE: active reflection, footprint counts toward the latest size
   - FAILED: error reflection
   - Incremental layouts with a candidate are counted either way
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

from .base import BaseCollector
from ..backends.base import AccelerationService
from ..data.models import (
    Acceleration,
    Materialization,
    MaterializationState,
    ReflectionStats,
)


def total_footprint(materializations: Iterable[Materialization]) -> int:
    """Sum the footprint of all materializations, in any state."""
    total = 0
    for materialization in materializations:
        total += materialization.footprint
    return total


def select_latest_terminal(materializations: Iterable[Materialization]) -> Optional[Materialization]:
    """Return the DONE/FAILED materialization with the greatest start time.

    Ties keep the first materialization encountered. Returns None when no
    materialization is terminal.
    """
    latest: Optional[Materialization] = None
    for materialization in materializations:
        if not materialization.is_terminal:
            continue
        if latest is None or materialization.start_time > latest.start_time:
            latest = materialization
    return latest


def reduce_reflection_stats(
    accelerations: Iterable[Acceleration],
    get_materializations: Callable[[str], Iterable[Materialization]],
) -> ReflectionStats:
    """Fold all layouts of all accelerations into one ReflectionStats.

    Args:
        accelerations: Accelerations with their layouts
        get_materializations: Lookup of a layout's materializations by layout id
    """
    active_reflections = 0
    error_reflections = 0
    total_reflection_size_bytes = 0
    latest_reflections_size_bytes = 0
    incremental_reflection_count = 0

    for acceleration in accelerations:
        for layout in acceleration.layouts:
            materializations = list(get_materializations(layout.id))

            total_reflection_size_bytes += total_footprint(materializations)

            latest = select_latest_terminal(materializations)
            if latest is None:
                continue

            if layout.incremental:
                incremental_reflection_count += 1

            if latest.state == MaterializationState.DONE:
                active_reflections += 1
                latest_reflections_size_bytes += latest.footprint
            elif latest.state == MaterializationState.FAILED:
                error_reflections += 1

    return ReflectionStats(
        active_reflections=active_reflections,
        error_reflections=error_reflections,
        total_reflection_size_bytes=total_reflection_size_bytes,
        latest_reflections_size_bytes=latest_reflections_size_bytes,
        incremental_reflection_count=incremental_reflection_count,
    )


class ReflectionStatsCollector(BaseCollector):
    """Collector for acceleration (reflection) statistics."""

    def __init__(self, accelerations: AccelerationService):
        self.accelerations = accelerations

    @property
    def name(self) -> str:
        return "reflections"

    @property
    def display_name(self) -> str:
        return "Reflection Stats"

    def collect(self) -> ReflectionStats:
        return reduce_reflection_stats(
            self.accelerations.get_all_accelerations(),
            self.accelerations.get_materializations,
        )
