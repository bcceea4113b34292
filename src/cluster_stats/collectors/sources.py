"""Source dataset count collector.

Resolves physical and virtual dataset counts for every registered source.
Physical counts are looked up one source at a time; virtual counts are
fetched in a single batched index query.
"""

from __future__ import annotations

from typing import List, Optional

from .base import BaseCollector, _log
from ..backends.base import NamespaceLookupError, NamespaceService, SourceService
from ..data.models import DATASET_SOURCES, SearchQuery, SourceStats, term_query


class SourceStatsCollector(BaseCollector):
    """Collector for per-source dataset counts.

    A failed lookup leaves the affected count as None (rendered as -1)
    instead of failing the snapshot:
    - a physical count failure affects only that source
    - a batched virtual count failure affects every source
    """

    def __init__(self, sources: SourceService, namespace: NamespaceService):
        self.sources = sources
        self.namespace = namespace

    @property
    def name(self) -> str:
        return "sources"

    @property
    def display_name(self) -> str:
        return "Source Stats"

    def collect(self) -> List[SourceStats]:
        results: List[SourceStats] = []
        vds_queries: List[SearchQuery] = []

        for source in self.sources.get_sources():
            results.append(
                SourceStats(id=source.id, type=source.type, pds_count=self._get_pds_count(source.name))
            )
            vds_queries.append(term_query(DATASET_SOURCES, source.name))

        if vds_queries:
            self._assign_vds_counts(results, vds_queries)

        return results

    def _get_pds_count(self, source_name: str) -> Optional[int]:
        try:
            return self.namespace.get_dataset_count(source_name)
        except NamespaceLookupError as e:
            _log(f"[{self.name}] Failed to get dataset count for {source_name!r}: {e}")
            return None

    def _assign_vds_counts(self, results: List[SourceStats], queries: List[SearchQuery]) -> None:
        """Assign batched counts back to sources by position.

        All or nothing: on failure, or when the batch does not return one
        count per query, every vds_count stays unknown.
        """
        try:
            counts = self.namespace.get_counts(queries)
        except NamespaceLookupError as e:
            _log(f"[{self.name}] Failed to get vds counts: {e}")
            return

        if len(counts) != len(results):
            _log(
                f"[{self.name}] Failed to get vds counts: expected {len(results)} "
                f"results, got {len(counts)}"
            )
            return

        for source_stats, count in zip(results, counts):
            source_stats.vds_count = count
