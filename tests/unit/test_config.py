"""Tests for configuration management."""

import pytest

from cluster_stats.server.config import (
    BackendConfig,
    Config,
    ServerConfig,
    StatsConfig,
)


class TestConfig:
    def test_default_config(self):
        config = Config()
        assert config.deployment_name == "Cluster Stats Monitor"
        assert config.server.host == "0.0.0.0"
        assert config.server.port == 8080
        assert config.backend.url == "http://localhost:9047"
        assert config.backend.verify is True
        assert config.stats.job_window_days == 7

    def test_from_dict(self, monkeypatch):
        monkeypatch.delenv("CLUSTER_STATS_TOKEN", raising=False)
        data = {
            "deployment": {"name": "Prod Cluster"},
            "server": {"host": "localhost", "port": 9000, "url_prefix": "/stats"},
            "backend": {
                "url": "https://coordinator:9047",
                "timeout": 10,
                "verify": False,
                "token": "secret",
            },
            "stats": {"job_window_days": 14},
        }
        config = Config.from_dict(data)

        assert config.deployment_name == "Prod Cluster"
        assert config.server == ServerConfig(host="localhost", port=9000, url_prefix="/stats")
        assert config.backend.url == "https://coordinator:9047"
        assert config.backend.timeout == 10
        assert config.backend.verify is False
        assert config.backend.token == "secret"
        assert config.stats == StatsConfig(job_window_days=14)

    def test_token_from_env(self, monkeypatch):
        monkeypatch.setenv("CLUSTER_STATS_TOKEN", "from-env")
        config = Config.from_dict({"backend": {"token": "from-file"}})
        assert config.backend.token == "from-env"

    def test_from_yaml(self, tmp_path):
        yaml_content = """
deployment:
  name: "YAML Test"
server:
  port: 8888
backend:
  url: http://coord.internal:9047
  retries: 2
"""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(yaml_content)

        config = Config.from_yaml(config_file)

        assert config.deployment_name == "YAML Test"
        assert config.server.port == 8888
        assert config.backend.url == "http://coord.internal:9047"
        assert config.backend.retries == 2
        assert config.stats.job_window_days == 7

    def test_from_yaml_missing_file(self, tmp_path):
        assert Config.from_yaml(tmp_path / "nope.yaml") == Config()

    def test_from_yaml_empty_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")
        assert Config.from_yaml(config_file).server.port == 8080

    def test_load_explicit_path(self, tmp_path):
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("server:\n  port: 7000\n")
        assert Config.load(str(config_file)).server.port == 7000

    def test_load_from_env(self, tmp_path, monkeypatch):
        config_file = tmp_path / "env.yaml"
        config_file.write_text("server:\n  port: 7100\n")
        monkeypatch.setenv("CLUSTER_STATS_CONFIG", str(config_file))
        monkeypatch.chdir(tmp_path)
        assert Config.load().server.port == 7100

    def test_to_dict_omits_token(self):
        config = Config(backend=BackendConfig(token="secret"))
        data = config.to_dict()

        assert data["deployment"]["name"] == "Cluster Stats Monitor"
        assert "token" not in data["backend"]
        assert data["stats"]["job_window_days"] == 7


class TestMainArgs:
    def test_defaults_leave_config_untouched(self):
        from cluster_stats.server.main import parse_args

        args = parse_args([])
        assert args.host is None
        assert args.port is None
        assert args.backend_url is None
        assert args.insecure is False

    def test_create_backend_from_config(self):
        from cluster_stats.server.main import create_backend

        config = Config(backend=BackendConfig(url="https://coord:9047/", timeout=5, verify=False))
        backend = create_backend(config)

        assert backend.url == "https://coord:9047"
        assert backend.timeout == 5
        assert backend._verify is False
