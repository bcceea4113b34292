"""Stats collectors - nodes, sources, jobs and reflections."""

from .base import BaseCollector, CollectorError
from .cluster import ClusterStatsCollector
from .endpoints import EndpointCollector, process_endpoints
from .jobs import JobStatsCollector
from .reflections import (
    ReflectionStatsCollector,
    reduce_reflection_stats,
    select_latest_terminal,
    total_footprint,
)
from .sources import SourceStatsCollector

__all__ = [
    "BaseCollector",
    "CollectorError",
    "ClusterStatsCollector",
    "EndpointCollector",
    "process_endpoints",
    "JobStatsCollector",
    "ReflectionStatsCollector",
    "reduce_reflection_stats",
    "select_latest_terminal",
    "total_footprint",
    "SourceStatsCollector",
]
