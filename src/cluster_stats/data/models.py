"""Data models for cluster statistics.

This module defines the records read from cluster collaborators and the
derived snapshot returned by the stats API, following these principles:

1. EXPLICIT UNITS
   - Memory and footprints: bytes (integers)
   - Time: epoch milliseconds (integers), rendered as ISO-8601 on the wire
   - Counts: datasets, reflections, jobs (integers)

2. UNKNOWN IS NOT ZERO
   - Dataset counts that could not be computed are held as None internally
   - The wire format renders them as -1 (COUNT_UNAVAILABLE)

3. SNAPSHOTS ARE IMMUTABLE
   - NodeEndpointInfo, ReflectionStats and ClusterStats are frozen and built
     once per request
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


# Wire sentinel for a dataset count that failed upstream
COUNT_UNAVAILABLE = -1

# Index field holding the source a dataset belongs to
DATASET_SOURCES = "dataset_sources"


def format_millis(epoch_millis: int) -> str:
    """Render epoch milliseconds as an ISO-8601 UTC timestamp."""
    seconds, millis = divmod(int(epoch_millis), 1000)
    ts = datetime.fromtimestamp(seconds, tz=timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%S") + f".{millis:03d}Z"


def _wire_count(count: Optional[int]) -> int:
    return COUNT_UNAVAILABLE if count is None else count


# =============================================================================
# Collaborator Records
# =============================================================================


@dataclass
class NodeDescriptor:
    """A cluster member as reported by the node registry.

    Units:
    - max_direct_memory: bytes
    - start_time: epoch milliseconds
    """

    address: str
    available_cores: int
    max_direct_memory: int  # Unit: bytes
    start_time: int  # Unit: epoch millis

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NodeDescriptor":
        return cls(
            address=data.get("address", ""),
            available_cores=int(data.get("availableCores", 0)),
            max_direct_memory=int(data.get("maxDirectMemory", 0)),
            start_time=int(data.get("startTime", 0)),
        )


@dataclass
class SourceDescriptor:
    """A registered data source."""

    id: str
    name: str  # Also the namespace path of the source
    type: str  # 'S3', 'POSTGRES', 'HDFS', ...

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SourceDescriptor":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            type=data.get("type", "UNKNOWN"),
        )


class MaterializationState(str, Enum):
    """Lifecycle state of a materialization."""

    NEW = "NEW"  # Scheduled, not started
    RUNNING = "RUNNING"  # Build in progress
    DONE = "DONE"  # Built successfully
    FAILED = "FAILED"  # Build failed
    DELETED = "DELETED"  # Dropped by the acceleration lifecycle
    UNKNOWN = "UNKNOWN"  # Reported by a newer coordinator; treated as non-terminal


TERMINAL_STATES = frozenset({MaterializationState.DONE, MaterializationState.FAILED})


def _parse_state(value: Any) -> MaterializationState:
    try:
        return MaterializationState(str(value or "NEW").upper())
    except ValueError:
        return MaterializationState.UNKNOWN


@dataclass
class Materialization:
    """One build attempt of a layout.

    Units:
    - start_time: epoch milliseconds
    - footprint: bytes on disk
    """

    id: str
    layout_id: str
    state: MaterializationState
    start_time: int  # Unit: epoch millis
    footprint: int = 0  # Unit: bytes

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Materialization":
        metrics = data.get("metrics") or {}
        return cls(
            id=str(data.get("id", "")),
            layout_id=str(data.get("layoutId", "")),
            state=_parse_state(data.get("state")),
            start_time=int(data.get("startTime", 0)),
            footprint=int(metrics.get("footprint") or 0),
        )


@dataclass
class Layout:
    """A reflection definition within an acceleration."""

    id: str
    incremental: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Layout":
        return cls(id=str(data.get("id", "")), incremental=bool(data.get("incremental", False)))


@dataclass
class Acceleration:
    """A set of layouts accelerating one dataset.

    Raw and aggregation layouts are listed together.
    """

    id: str
    layouts: List[Layout] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Acceleration":
        layouts: List[Layout] = []
        for key in ("rawLayouts", "aggregationLayouts", "layouts"):
            layouts.extend(Layout.from_dict(item) for item in data.get(key) or [])
        return cls(id=str(data.get("id", "")), layouts=layouts)


@dataclass
class JobTypeStats:
    """Job count for one job type over a time window."""

    type: str
    count: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JobTypeStats":
        return cls(type=data.get("type", "UNKNOWN"), count=int(data.get("count", 0)))

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "count": self.count}


@dataclass(frozen=True)
class SearchQuery:
    """A term query against the namespace index."""

    field: str
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return {"term": {"field": self.field, "value": self.value}}


def term_query(field_name: str, value: str) -> SearchQuery:
    return SearchQuery(field=field_name, value=value)


# =============================================================================
# Snapshot Records
# =============================================================================


@dataclass(frozen=True)
class NodeEndpointInfo:
    """Lightweight stat record for a coordinator or executor."""

    address: str
    available_cores: int
    max_direct_memory_bytes: int  # Unit: bytes
    started_at: int  # Unit: epoch millis

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "availableCores": self.available_cores,
            "maxDirectMemoryBytes": self.max_direct_memory_bytes,
            "startedAt": format_millis(self.started_at),
        }


@dataclass
class SourceStats:
    """Dataset counts for one source.

    pds_count/vds_count are None when the upstream lookup failed.
    """

    id: str
    type: str
    pds_count: Optional[int] = None
    vds_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "pdsCount": _wire_count(self.pds_count),
            "vdsCount": _wire_count(self.vds_count),
        }


@dataclass(frozen=True)
class ReflectionStats:
    """Cluster-wide reflection counters.

    Units:
    - total_reflection_size_bytes: bytes across every materialization
    - latest_reflections_size_bytes: bytes of the latest DONE materialization per layout
    """

    active_reflections: int = 0
    error_reflections: int = 0
    total_reflection_size_bytes: int = 0
    latest_reflections_size_bytes: int = 0
    incremental_reflection_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "activeReflections": self.active_reflections,
            "errorReflections": self.error_reflections,
            "totalReflectionSizeBytes": self.total_reflection_size_bytes,
            "latestReflectionsSizeBytes": self.latest_reflections_size_bytes,
            "incrementalReflectionCount": self.incremental_reflection_count,
        }


@dataclass(frozen=True)
class ClusterStats:
    """Complete stats payload for API responses."""

    coordinators: List[NodeEndpointInfo]
    executors: List[NodeEndpointInfo]
    sources: List[SourceStats]
    job_stats: List[JobTypeStats]
    reflection_stats: ReflectionStats

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coordinators": [c.to_dict() for c in self.coordinators],
            "executors": [e.to_dict() for e in self.executors],
            "sources": [s.to_dict() for s in self.sources],
            "jobStats": [j.to_dict() for j in self.job_stats],
            "reflectionStats": self.reflection_stats.to_dict(),
        }


# =============================================================================
# Spaces
# =============================================================================


@dataclass
class Space:
    """A top-level namespace container for virtual datasets.

    version is the optimistic-concurrency tag checked by the namespace
    service; it is passed through untouched.
    """

    name: str
    id: Optional[str] = None
    description: Optional[str] = None
    version: Optional[int] = None
    dataset_count: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Space":
        if not isinstance(data, dict):
            raise ValueError("Space payload must be a JSON object")
        name = data.get("name")
        if not name or not isinstance(name, str):
            raise ValueError("Space payload requires a 'name'")
        version = data.get("version")
        return cls(
            name=name,
            id=data.get("id"),
            description=data.get("description"),
            version=int(version) if version is not None else None,
            dataset_count=data.get("datasetCount"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "version": self.version,
            "datasetCount": self.dataset_count,
        }
