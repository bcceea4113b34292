"""Cluster service interfaces and the coordinator REST client."""

from .base import (
    AccelerationService,
    BackendError,
    JobsService,
    NamespaceLookupError,
    NamespaceService,
    NamespaceWriteError,
    NodeRegistry,
    SourceService,
    UserLookupError,
)
from .rest import CoordinatorClient

__all__ = [
    "AccelerationService",
    "BackendError",
    "JobsService",
    "NamespaceLookupError",
    "NamespaceService",
    "NamespaceWriteError",
    "NodeRegistry",
    "SourceService",
    "UserLookupError",
    "CoordinatorClient",
]
