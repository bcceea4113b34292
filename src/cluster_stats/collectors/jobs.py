"""Job throughput collector."""

from __future__ import annotations

import time
from datetime import timedelta
from typing import Callable, List

from .base import BaseCollector
from ..backends.base import JobsService
from ..data.models import JobTypeStats

DEFAULT_WINDOW_DAYS = 7


class JobStatsCollector(BaseCollector):
    """Collector for job-type counts over a trailing window.

    Failures of the jobs service are not handled here.
    """

    def __init__(
        self,
        jobs: JobsService,
        window_days: int = DEFAULT_WINDOW_DAYS,
        clock: Callable[[], float] = time.time,
    ):
        self.jobs = jobs
        self.window = timedelta(days=window_days)
        self.clock = clock

    @property
    def name(self) -> str:
        return "jobs"

    @property
    def display_name(self) -> str:
        return "Job Stats"

    def collect(self) -> List[JobTypeStats]:
        now_ms = int(self.clock() * 1000)
        window_ms = int(self.window.total_seconds() * 1000)
        return list(self.jobs.get_job_stats(now_ms - window_ms, now_ms))
