"""Node endpoint collector.

Projects coordinator and executor descriptors from the node registry into
lightweight stat records.
"""

from __future__ import annotations

from typing import Dict, Iterable, List

from .base import BaseCollector
from ..backends.base import NodeRegistry
from ..data.models import NodeDescriptor, NodeEndpointInfo


def process_endpoints(endpoints: Iterable[NodeDescriptor]) -> List[NodeEndpointInfo]:
    """Build one stat record per node, keeping the registry's order."""
    return [
        NodeEndpointInfo(
            address=endpoint.address,
            available_cores=endpoint.available_cores,
            max_direct_memory_bytes=endpoint.max_direct_memory,
            started_at=endpoint.start_time,
        )
        for endpoint in endpoints
    ]


class EndpointCollector(BaseCollector):
    """Collector for cluster node topology."""

    def __init__(self, registry: NodeRegistry):
        self.registry = registry

    @property
    def name(self) -> str:
        return "endpoints"

    @property
    def display_name(self) -> str:
        return "Cluster Nodes"

    def is_available(self) -> bool:
        return self.registry.ping()

    def collect(self) -> Dict[str, List[NodeEndpointInfo]]:
        return {
            "coordinators": process_endpoints(self.registry.get_coordinators()),
            "executors": process_endpoints(self.registry.get_executors()),
        }
