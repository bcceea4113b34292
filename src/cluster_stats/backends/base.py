"""Collaborator interfaces read by the stats collectors.

Each interface is a thin view over a cluster service. Implementations must
be safe to call from several request threads at once; the collectors hold no
state of their own between calls.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from ..data.models import (
    Acceleration,
    JobTypeStats,
    Materialization,
    NodeDescriptor,
    SearchQuery,
    SourceDescriptor,
    Space,
)


class BackendError(Exception):
    """Exception raised when a cluster service call fails."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)


class NamespaceLookupError(BackendError):
    """A namespace read (dataset count, index count, space lookup) failed."""


class NamespaceWriteError(BackendError):
    """A namespace write was rejected, e.g. on a stale version."""


class UserLookupError(BackendError):
    """The user owning a namespace entity could not be resolved."""


class NodeRegistry(ABC):
    """Live membership of the cluster."""

    @abstractmethod
    def get_coordinators(self) -> List[NodeDescriptor]:
        pass

    @abstractmethod
    def get_executors(self) -> List[NodeDescriptor]:
        pass

    @abstractmethod
    def ping(self) -> bool:
        """True if the cluster answers at all."""
        pass


class SourceService(ABC):
    @abstractmethod
    def get_sources(self) -> List[SourceDescriptor]:
        """Registered sources, in catalog order."""
        pass


class NamespaceService(ABC):
    """Catalog of sources, spaces and datasets."""

    @abstractmethod
    def get_dataset_count(self, path: str) -> int:
        """Count datasets below a namespace path.

        Raises:
            NamespaceLookupError: If the path cannot be resolved.
        """
        pass

    @abstractmethod
    def get_counts(self, queries: Sequence[SearchQuery]) -> List[int]:
        """Count index matches for several queries in one round trip.

        Returns:
            One count per query, in query order.

        Raises:
            NamespaceLookupError: If the batch fails.
        """
        pass

    @abstractmethod
    def add_or_update_space(self, path: str, space: Space) -> None:
        """Create or update a space.

        Raises:
            NamespaceWriteError: If the write is rejected.
            UserLookupError: If the owning user is unknown.
        """
        pass

    @abstractmethod
    def get_space(self, path: str) -> Space:
        pass


class JobsService(ABC):
    @abstractmethod
    def get_job_stats(self, from_millis: int, to_millis: int) -> List[JobTypeStats]:
        """Job counts per job type within [from_millis, to_millis]."""
        pass


class AccelerationService(ABC):
    @abstractmethod
    def get_all_accelerations(self) -> List[Acceleration]:
        pass

    @abstractmethod
    def get_materializations(self, layout_id: str) -> List[Materialization]:
        """Materializations of one layout, in no particular order."""
        pass
