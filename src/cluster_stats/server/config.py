"""Configuration management for the cluster stats monitor.

Supports YAML-based configuration for the server, the coordinator backend
and the stats window.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..backends.rest import DEFAULT_URL
from ..collectors.jobs import DEFAULT_WINDOW_DAYS


@dataclass
class BackendConfig:
    """Coordinator REST API configuration."""

    url: str = DEFAULT_URL
    timeout: int = 30  # seconds
    verify: bool = True
    ca_bundle: Optional[str] = None
    token: Optional[str] = None
    retries: int = 4


@dataclass
class StatsConfig:
    """Snapshot computation settings."""

    job_window_days: int = DEFAULT_WINDOW_DAYS


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = 8080
    url_prefix: str = ""


@dataclass
class Config:
    """Main configuration container."""

    deployment_name: str = "Cluster Stats Monitor"

    server: ServerConfig = field(default_factory=ServerConfig)
    backend: BackendConfig = field(default_factory=BackendConfig)
    stats: StatsConfig = field(default_factory=StatsConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create config from dictionary."""
        deployment = data.get("deployment", {})

        server_data = data.get("server", {})
        server = ServerConfig(
            host=server_data.get("host", "0.0.0.0"),
            port=server_data.get("port", 8080),
            url_prefix=server_data.get("url_prefix", ""),
        )

        backend_data = data.get("backend", {})
        backend = BackendConfig(
            url=backend_data.get("url", DEFAULT_URL),
            timeout=backend_data.get("timeout", 30),
            verify=backend_data.get("verify", True),
            ca_bundle=backend_data.get("ca_bundle"),
            # Token from env wins so it can stay out of the file
            token=os.environ.get("CLUSTER_STATS_TOKEN") or backend_data.get("token"),
            retries=backend_data.get("retries", 4),
        )

        stats_data = data.get("stats", {})
        stats = StatsConfig(
            job_window_days=stats_data.get("job_window_days", DEFAULT_WINDOW_DAYS),
        )

        return cls(
            deployment_name=deployment.get("name", "Cluster Stats Monitor"),
            server=server,
            backend=backend,
            stats=stats,
        )

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """Load config from YAML file."""
        if not path.exists():
            return cls()
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """Load config from path or defaults.

        Checks in order:
        1. Provided path
        2. CLUSTER_STATS_CONFIG env var
        3. ./configs/config.yaml
        4. ./config.yaml
        5. ~/.cluster_stats/config.yaml
        6. Default config
        """
        paths_to_try = []

        if config_path:
            paths_to_try.append(Path(config_path))

        if env_path := os.environ.get("CLUSTER_STATS_CONFIG"):
            paths_to_try.append(Path(env_path))

        paths_to_try.extend([
            Path("./configs/config.yaml"),
            Path("./config.yaml"),
            Path.home() / ".cluster_stats" / "config.yaml",
        ])

        for path in paths_to_try:
            if path.exists():
                return cls.from_yaml(path)

        return cls()

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary. The backend token is never included."""
        return {
            "deployment": {
                "name": self.deployment_name,
            },
            "server": {
                "host": self.server.host,
                "port": self.server.port,
                "url_prefix": self.server.url_prefix,
            },
            "backend": {
                "url": self.backend.url,
                "timeout": self.backend.timeout,
                "verify": self.backend.verify,
                "retries": self.backend.retries,
            },
            "stats": {
                "job_window_days": self.stats.job_window_days,
            },
        }
