"""Pytest configuration and shared fixtures."""

import pytest

from cluster_stats.backends.base import (
    AccelerationService,
    JobsService,
    NamespaceLookupError,
    NamespaceService,
    NodeRegistry,
    SourceService,
)
from cluster_stats.data.models import (
    Acceleration,
    JobTypeStats,
    Layout,
    Materialization,
    MaterializationState,
    NodeDescriptor,
    SourceDescriptor,
    Space,
)


class FakeBackend(NodeRegistry, SourceService, NamespaceService, JobsService, AccelerationService):
    """In-memory cluster services.

    Failures are injected by listing source names in failing_pds or by
    setting fail_vds / fail_jobs / fail_accelerations.
    """

    def __init__(self):
        self.coordinators = []
        self.executors = []
        self.sources = []
        self.pds_counts = {}
        self.vds_counts = {}
        self.failing_pds = set()
        self.fail_vds = False
        self.fail_jobs = False
        self.reachable = True
        self.job_stats = []
        self.accelerations = []
        self.materializations = {}
        self.spaces = {}
        self.calls = []

    def get_coordinators(self):
        return list(self.coordinators)

    def get_executors(self):
        return list(self.executors)

    def ping(self):
        return self.reachable

    def get_sources(self):
        return list(self.sources)

    def get_dataset_count(self, path):
        self.calls.append(("get_dataset_count", path))
        if path in self.failing_pds:
            raise NamespaceLookupError(f"no such path: {path}")
        return self.pds_counts.get(path, 0)

    def get_counts(self, queries):
        self.calls.append(("get_counts", tuple(queries)))
        if self.fail_vds:
            raise NamespaceLookupError("index unavailable")
        return [self.vds_counts.get(q.value, 0) for q in queries]

    def add_or_update_space(self, path, space):
        self.calls.append(("add_or_update_space", path))
        current = self.spaces.get(path)
        version = 0 if current is None else (current.version or 0) + 1
        self.spaces[path] = Space(
            name=space.name,
            id=space.id or f"id-{path}",
            description=space.description,
            version=version,
        )

    def get_space(self, path):
        stored = self.spaces[path]
        return Space(name=stored.name, id=stored.id, description=stored.description, version=stored.version)

    def get_job_stats(self, from_millis, to_millis):
        self.calls.append(("get_job_stats", from_millis, to_millis))
        if self.fail_jobs:
            raise RuntimeError("jobs service down")
        return list(self.job_stats)

    def get_all_accelerations(self):
        return list(self.accelerations)

    def get_materializations(self, layout_id):
        return list(self.materializations.get(layout_id, []))


@pytest.fixture
def backend():
    """An empty in-memory cluster."""
    return FakeBackend()


@pytest.fixture
def make_materialization():
    """Factory for materializations: (state, start_time, footprint)."""
    counter = {"n": 0}

    def _make(state, start_time, footprint=0, layout_id="layout"):
        counter["n"] += 1
        return Materialization(
            id=f"m{counter['n']}",
            layout_id=layout_id,
            state=MaterializationState(state),
            start_time=start_time,
            footprint=footprint,
        )

    return _make


@pytest.fixture
def populated_backend(backend):
    """A small cluster with two nodes, three sources, jobs and reflections."""
    backend.coordinators = [
        NodeDescriptor("coord-1.example.com", 16, 8 * 1024 ** 3, 1500000000000),
    ]
    backend.executors = [
        NodeDescriptor("exec-1.example.com", 32, 16 * 1024 ** 3, 1500000100000),
        NodeDescriptor("exec-2.example.com", 32, 16 * 1024 ** 3, 1500000200000),
    ]
    backend.sources = [
        SourceDescriptor("src-1", "pg", "POSTGRES"),
        SourceDescriptor("src-2", "lake", "S3"),
        SourceDescriptor("src-3", "hive", "HIVE"),
    ]
    backend.pds_counts = {"pg": 12, "lake": 340, "hive": 0}
    backend.vds_counts = {"pg": 3, "lake": 25, "hive": 1}
    backend.job_stats = [JobTypeStats("UI", 120), JobTypeStats("JDBC", 45)]
    backend.accelerations = [
        Acceleration("acc-1", [Layout("l1", incremental=True), Layout("l2")]),
        Acceleration("acc-2", [Layout("l3")]),
    ]
    backend.materializations = {
        "l1": [
            Materialization("m1", "l1", MaterializationState.RUNNING, 1, 10),
            Materialization("m2", "l1", MaterializationState.DONE, 5, 20),
            Materialization("m3", "l1", MaterializationState.FAILED, 3, 5),
        ],
        "l2": [
            Materialization("m4", "l2", MaterializationState.DONE, 2, 100),
            Materialization("m5", "l2", MaterializationState.FAILED, 7, 0),
        ],
        "l3": [],
    }
    return backend
