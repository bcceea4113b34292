"""Cluster stats collector.

Composes the node, source, job and reflection collectors into one snapshot.
"""

from __future__ import annotations

from typing import Any, Dict

from .base import BaseCollector, CollectorError
from .endpoints import EndpointCollector
from .jobs import JobStatsCollector
from .reflections import ReflectionStatsCollector
from .sources import SourceStatsCollector
from ..backends.base import BackendError
from ..data.models import ClusterStats


class ClusterStatsCollector(BaseCollector):
    """Collector for the complete cluster stats snapshot.

    There is no partial snapshot: a service failure in any part other than
    the source dataset counts fails the whole collection.
    """

    def __init__(
        self,
        endpoints: EndpointCollector,
        sources: SourceStatsCollector,
        jobs: JobStatsCollector,
        reflections: ReflectionStatsCollector,
    ):
        self.endpoints = endpoints
        self.sources = sources
        self.jobs = jobs
        self.reflections = reflections

    @classmethod
    def from_backend(cls, backend, job_window_days: int = 7) -> "ClusterStatsCollector":
        """Build all collectors over a single backend implementing every service."""
        return cls(
            endpoints=EndpointCollector(backend),
            sources=SourceStatsCollector(backend, backend),
            jobs=JobStatsCollector(backend, window_days=job_window_days),
            reflections=ReflectionStatsCollector(backend),
        )

    @property
    def name(self) -> str:
        return "cluster_stats"

    @property
    def display_name(self) -> str:
        return "Cluster Stats"

    def collect(self) -> ClusterStats:
        """Compute a fresh snapshot.

        Raises:
            CollectorError: If a cluster service fails outside the source counts.
        """
        current = self.endpoints.name
        try:
            nodes = self.endpoints.collect()
            current = self.sources.name
            sources = self.sources.collect()
            current = self.jobs.name
            job_stats = self.jobs.collect()
            current = self.reflections.name
            reflection_stats = self.reflections.collect()
        except BackendError as e:
            raise CollectorError(current, str(e), e)

        return ClusterStats(
            coordinators=nodes["coordinators"],
            executors=nodes["executors"],
            sources=sources,
            job_stats=job_stats,
            reflection_stats=reflection_stats,
        )

    def is_available(self) -> bool:
        """Reachability of the cluster, as seen through the node registry."""
        return self.endpoints.is_available()

    def get_status(self) -> Dict[str, Any]:
        collectors = {
            c.name: c.get_status()
            for c in (self.endpoints, self.sources, self.jobs, self.reflections)
        }
        return {
            "name": self.name,
            "display_name": self.display_name,
            "available": all(s["available"] for s in collectors.values()),
            "collectors": collectors,
        }
