"""Coordinator REST client.

Implements every collaborator interface by reading the summaries the
coordinator exposes over its JSON API.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Type
from urllib.parse import quote

import requests
import urllib3
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

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
from ..data.models import (
    Acceleration,
    JobTypeStats,
    Materialization,
    NodeDescriptor,
    SearchQuery,
    SourceDescriptor,
    Space,
)

DEFAULT_URL = "http://localhost:9047"
API_PREFIX = "/api/v3"


class CoordinatorClient(NodeRegistry, SourceService, NamespaceService, JobsService, AccelerationService):
    """Client for the coordinator's REST API.

    One instance is shared by all request threads; the underlying session
    only issues blocking, independent calls.
    """

    def __init__(
        self,
        url: str = DEFAULT_URL,
        timeout: int = 30,
        verify: bool = True,
        ca_bundle: Optional[str] = None,
        token: Optional[str] = None,
        retries: int = 4,
    ):
        self.url = url.rstrip("/")
        self.timeout = timeout
        self.token = token
        self.retries = retries
        self._verify = self._determine_verify(verify, ca_bundle)
        self._session: Optional[requests.Session] = None

        if self._verify is False:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def _determine_verify(self, verify: bool, ca_bundle: Optional[str]):
        """Determine SSL verification setting."""
        if not verify:
            return False
        if ca_bundle:
            return ca_bundle
        return True

    def _get_session(self) -> requests.Session:
        """Get or create a requests session with retry configuration."""
        if self._session is None:
            session = requests.Session()
            retry = Retry(
                total=self.retries,
                connect=self.retries,
                read=self.retries,
                backoff_factor=0.5,
                status_forcelist=(429, 500, 502, 503, 504),
                allowed_methods=("GET", "HEAD"),
            )
            adapter = HTTPAdapter(
                max_retries=retry,
                pool_connections=5,
                pool_maxsize=10,
            )
            session.mount("https://", adapter)
            session.mount("http://", adapter)
            session.verify = self._verify
            session.headers.update({"User-Agent": "cluster-stats-monitor/1.0"})
            if self.token:
                session.headers.update({"Authorization": f"Bearer {self.token}"})
            self._session = session
        return self._session

    def close(self) -> None:
        """Close the session and release resources."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def ping(self) -> bool:
        """Check whether the coordinator answers."""
        try:
            resp = self._get_session().head(f"{self.url}{API_PREFIX}/server_status", timeout=5)
            return resp.status_code < 500
        except requests.RequestException:
            return False

    # --- Transport ---

    def _request(
        self,
        method: str,
        path: str,
        error_cls: Type[BackendError] = BackendError,
        not_found_cls: Optional[Type[BackendError]] = None,
        **kwargs,
    ) -> Any:
        url = f"{self.url}{API_PREFIX}{path}"
        try:
            resp = self._get_session().request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise error_cls(f"{method} {path} failed: {e}", e)
        if resp.status_code == 404 and not_found_cls is not None:
            raise not_found_cls(f"{method} {path} returned HTTP 404: {resp.text[:200]}")
        if resp.status_code >= 400:
            raise error_cls(f"{method} {path} returned HTTP {resp.status_code}: {resp.text[:200]}")
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise error_cls(f"{method} {path} returned invalid JSON", e)

    @staticmethod
    def _items(payload: Any) -> List[Dict[str, Any]]:
        """Unwrap list responses, bare or under a 'data' key."""
        if isinstance(payload, dict):
            payload = payload.get("data", [])
        return list(payload or [])

    # --- NodeRegistry ---

    def get_coordinators(self) -> List[NodeDescriptor]:
        payload = self._request("GET", "/cluster/coordinators")
        return [NodeDescriptor.from_dict(item) for item in self._items(payload)]

    def get_executors(self) -> List[NodeDescriptor]:
        payload = self._request("GET", "/cluster/executors")
        return [NodeDescriptor.from_dict(item) for item in self._items(payload)]

    # --- SourceService ---

    def get_sources(self) -> List[SourceDescriptor]:
        payload = self._request("GET", "/source")
        return [SourceDescriptor.from_dict(item) for item in self._items(payload)]

    # --- NamespaceService ---

    def get_dataset_count(self, path: str) -> int:
        payload = self._request(
            "GET", "/namespace/dataset-count", NamespaceLookupError, params={"path": path}
        )
        try:
            return int(payload["count"])
        except (KeyError, TypeError, ValueError) as e:
            raise NamespaceLookupError(f"Malformed dataset count for {path!r}", e)

    def get_counts(self, queries: Sequence[SearchQuery]) -> List[int]:
        payload = self._request(
            "POST",
            "/namespace/counts",
            NamespaceLookupError,
            json={"queries": [q.to_dict() for q in queries]},
        )
        try:
            return [int(c) for c in payload["counts"]]
        except (KeyError, TypeError, ValueError) as e:
            raise NamespaceLookupError("Malformed batched counts", e)

    def add_or_update_space(self, path: str, space: Space) -> None:
        # 404 means the owning user no longer exists
        self._request(
            "PUT",
            f"/space/{quote(path, safe='')}",
            NamespaceWriteError,
            not_found_cls=UserLookupError,
            json=space.to_dict(),
        )

    def get_space(self, path: str) -> Space:
        payload = self._request("GET", f"/space/{quote(path, safe='')}", NamespaceLookupError)
        return Space.from_dict(payload)

    # --- JobsService ---

    def get_job_stats(self, from_millis: int, to_millis: int) -> List[JobTypeStats]:
        payload = self._request("GET", "/jobs/stats", params={"start": from_millis, "end": to_millis})
        return [JobTypeStats.from_dict(item) for item in self._items(payload)]

    # --- AccelerationService ---

    def get_all_accelerations(self) -> List[Acceleration]:
        payload = self._request("GET", "/accelerations")
        return [Acceleration.from_dict(item) for item in self._items(payload)]

    def get_materializations(self, layout_id: str) -> List[Materialization]:
        payload = self._request("GET", f"/accelerations/layouts/{quote(layout_id, safe='')}/materializations")
        return [Materialization.from_dict(item) for item in self._items(payload)]
