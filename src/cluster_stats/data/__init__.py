"""Data layer - collaborator records and snapshot models."""

from .models import (
    COUNT_UNAVAILABLE,
    DATASET_SOURCES,
    Acceleration,
    ClusterStats,
    JobTypeStats,
    Layout,
    Materialization,
    MaterializationState,
    NodeDescriptor,
    NodeEndpointInfo,
    ReflectionStats,
    SearchQuery,
    SourceDescriptor,
    SourceStats,
    Space,
    term_query,
)

__all__ = [
    "COUNT_UNAVAILABLE",
    "DATASET_SOURCES",
    "Acceleration",
    "ClusterStats",
    "JobTypeStats",
    "Layout",
    "Materialization",
    "MaterializationState",
    "NodeDescriptor",
    "NodeEndpointInfo",
    "ReflectionStats",
    "SearchQuery",
    "SourceDescriptor",
    "SourceStats",
    "Space",
    "term_query",
]
