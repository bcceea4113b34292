"""Base collector interface for cluster statistics."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


def _log(msg: str) -> None:
    """Print with flush so messages interleave correctly across request threads."""
    print(msg, flush=True)


class BaseCollector(ABC):
    """Abstract base class for stats collectors.

    All collectors implement this interface to provide a consistent way to
    compute one part of the cluster snapshot from the cluster services.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this collector.

        Returns:
            A short, lowercase identifier (e.g., 'sources', 'reflections')
        """
        pass

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Human-readable name for UI display.

        Returns:
            A user-friendly name (e.g., 'Source Stats', 'Reflection Stats')
        """
        pass

    @abstractmethod
    def collect(self) -> Any:
        """Compute this collector's part of the snapshot.

        Returns:
            The computed records. Type varies by collector.
        """
        pass

    def is_available(self) -> bool:
        """Check if this collector can run (services configured).

        Returns:
            True if the collector can operate, False otherwise.
        """
        return True

    def get_status(self) -> Dict[str, Any]:
        """Get collector status information.

        Returns:
            Dictionary with status details including availability.
        """
        return {
            "name": self.name,
            "display_name": self.display_name,
            "available": self.is_available(),
        }


class CollectorError(Exception):
    """Exception raised when a collector fails to collect data."""

    def __init__(self, collector_name: str, message: str, cause: Optional[Exception] = None):
        self.collector_name = collector_name
        self.cause = cause
        super().__init__(f"[{collector_name}] {message}")
