"""HTTP request handlers for the cluster stats API.

Provides API endpoints for the cluster snapshot, space writes and health.
"""

from __future__ import annotations

import json
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler
from typing import Any, Dict, Optional, TYPE_CHECKING
from urllib.parse import urlparse, unquote

from ..backends.base import BackendError, NamespaceWriteError, UserLookupError
from ..collectors.base import CollectorError, _log
from .spaces import put_space

if TYPE_CHECKING:
    from ..backends.base import NamespaceService
    from ..collectors.cluster import ClusterStatsCollector

SPACE_PREFIX = "/api/space/"


class StatsRequestHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the stats API.

    Serves:
    - GET  /api/cluster/stats
    - PUT  /api/space/{spaceName}
    - GET  /api/health
    """

    # These will be set by the server
    stats_collector: Optional["ClusterStatsCollector"] = None
    namespace: Optional["NamespaceService"] = None
    url_prefix: str = ""
    config: Optional[Dict] = None

    def do_GET(self):
        stripped = self._strip_prefix(urlparse(self.path).path)
        if stripped is None:
            self.send_error(HTTPStatus.NOT_FOUND, "Invalid prefix")
            return

        if stripped == "/api/cluster/stats":
            return self._handle_cluster_stats()
        if stripped == "/api/health":
            return self._handle_health()
        if stripped == "/api/config":
            return self._send_json(self.config or {})
        self.send_error(HTTPStatus.NOT_FOUND, "Unknown endpoint")

    def do_PUT(self):
        stripped = self._strip_prefix(urlparse(self.path).path)
        if stripped is None:
            self.send_error(HTTPStatus.NOT_FOUND, "Invalid prefix")
            return

        if stripped.startswith(SPACE_PREFIX):
            space_name = unquote(stripped[len(SPACE_PREFIX):]).strip("/")
            return self._handle_put_space(space_name)
        self.send_error(HTTPStatus.NOT_FOUND, "Unknown endpoint")

    def do_OPTIONS(self):
        stripped = self._strip_prefix(urlparse(self.path).path)
        if stripped is None:
            self.send_error(HTTPStatus.NOT_FOUND, "Invalid prefix")
            return
        if stripped in {"/api/cluster/stats", "/api/health", "/api/config"} or stripped.startswith(SPACE_PREFIX):
            self.send_response(HTTPStatus.NO_CONTENT)
            self._send_cors_headers()
            self.send_header("Access-Control-Allow-Methods", "GET,PUT,OPTIONS")
            self.send_header("Access-Control-Allow-Headers", "Content-Type, Authorization")
            self.end_headers()
            return
        self.send_error(HTTPStatus.NOT_FOUND, "Unknown endpoint")

    # --- API Handlers ---

    def _handle_cluster_stats(self):
        collector = self.stats_collector
        if not collector:
            self.send_error(HTTPStatus.SERVICE_UNAVAILABLE, "Server not initialized.")
            return
        try:
            stats = collector.collect()
        except CollectorError as exc:
            _log(f"[api] Cluster stats failed: {exc}")
            self._send_json({"error": str(exc)}, status_code=HTTPStatus.BAD_GATEWAY)
            return
        except Exception as exc:
            _log(f"[api] Cluster stats failed unexpectedly: {exc!r}")
            self._send_json({"error": "Internal error computing cluster stats."},
                            status_code=HTTPStatus.INTERNAL_SERVER_ERROR)
            return
        self._send_json(stats.to_dict())

    def _handle_put_space(self, space_name: str):
        namespace = self.namespace
        if not namespace:
            self.send_error(HTTPStatus.SERVICE_UNAVAILABLE, "Server not initialized.")
            return
        if not space_name or "/" in space_name:
            self._send_json({"error": "Invalid space name."}, status_code=HTTPStatus.BAD_REQUEST)
            return

        payload = self._read_json_body()
        if payload is None:
            self._send_json({"error": "Request body must be a JSON object."},
                            status_code=HTTPStatus.BAD_REQUEST)
            return

        try:
            space = put_space(namespace, space_name, payload)
        except ValueError as exc:
            self._send_json({"error": str(exc)}, status_code=HTTPStatus.BAD_REQUEST)
            return
        except UserLookupError as exc:
            self._send_json({"error": str(exc)}, status_code=HTTPStatus.NOT_FOUND)
            return
        except NamespaceWriteError as exc:
            self._send_json({"error": str(exc)}, status_code=HTTPStatus.CONFLICT)
            return
        except BackendError as exc:
            _log(f"[api] Space {space_name!r} update failed: {exc}")
            self._send_json({"error": str(exc)}, status_code=HTTPStatus.BAD_GATEWAY)
            return
        self._send_json(space.to_dict())

    def _handle_health(self):
        collector = self.stats_collector
        if not collector:
            self._send_json({"ok": False}, status_code=HTTPStatus.SERVICE_UNAVAILABLE)
            return
        status = collector.get_status()
        self._send_json({"ok": status["available"], "collectors": status["collectors"]})

    # --- Helper Methods ---

    def _read_json_body(self) -> Optional[Dict[str, Any]]:
        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            return None
        raw = self.rfile.read(length) if length > 0 else b""
        try:
            data = json.loads(raw.decode("utf-8") or "null")
        except (UnicodeDecodeError, json.JSONDecodeError):
            return None
        return data if isinstance(data, dict) else None

    def _send_json(self, data: Any, *, status_code: HTTPStatus = HTTPStatus.OK):
        body = json.dumps(data).encode("utf-8")
        self.send_response(status_code)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Cache-Control", "no-store, max-age=0")
        self._send_cors_headers()
        self.end_headers()
        self.wfile.write(body)

    def _send_cors_headers(self):
        self.send_header("Access-Control-Allow-Origin", "*")

    def _strip_prefix(self, path: str) -> Optional[str]:
        norm_prefix = (self.url_prefix or "").rstrip("/")
        if not norm_prefix:
            return path or "/"
        if not norm_prefix.startswith("/"):
            norm_prefix = f"/{norm_prefix}"
        if not path.startswith(norm_prefix):
            return None
        stripped = path[len(norm_prefix):] or "/"
        if not stripped.startswith("/"):
            stripped = "/" + stripped
        return stripped
