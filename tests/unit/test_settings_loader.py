"""Unit tests for Settings and the YAML config loader."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from ragkb.config.loader import load_config, settings_from_config
from ragkb.config.settings import Settings

_ENV_KEYS = (
    "RAGKB_WORKER_COUNT",
    "RAGKB_DATABASE_PATH",
    "RAGKB_SIMILARITY_THRESHOLD",
    "RAGKB_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from an empty directory (no .env) with no RAGKB_* overrides."""
    monkeypatch.chdir(tmp_path)
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def _write_yaml(tmp_path: Path, body: str) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(body, encoding="utf-8")
    return str(path)


class TestSettings:
    def test_defaults(self) -> None:
        s = Settings()
        assert s.database_path == "data/ragkb.db"
        assert s.worker_count == 5
        assert s.max_chunk_chars == 1000
        assert s.embedding_dimension == 1536
        assert s.similarity_threshold == 0.5
        assert s.query_result_limit == 5

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RAGKB_DATABASE_PATH", "/tmp/other.db")
        assert Settings().database_path == "/tmp/other.db"

    def test_worker_count_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Settings(worker_count=0)


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        config = load_config(str(tmp_path / "missing.yaml"))
        assert config["worker_pool"]["worker_count"] == 5
        assert config["storage"]["database_path"] == "data/ragkb.db"

    def test_yaml_overrides_defaults(self, tmp_path: Path) -> None:
        path = _write_yaml(tmp_path, "worker_pool:\n  worker_count: 3\n")
        config = load_config(path)
        assert config["worker_pool"]["worker_count"] == 3
        assert config["worker_pool"]["poll_interval_seconds"] == 1.0

    def test_env_beats_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RAGKB_WORKER_COUNT", "9")
        path = _write_yaml(tmp_path, "worker_pool:\n  worker_count: 3\n")
        assert load_config(path)["worker_pool"]["worker_count"] == 9

    def test_unset_env_does_not_clobber_yaml(self, tmp_path: Path) -> None:
        path = _write_yaml(tmp_path, "retrieval:\n  similarity_threshold: 0.8\n")
        assert load_config(path)["retrieval"]["similarity_threshold"] == 0.8

    def test_settings_from_config(self, tmp_path: Path) -> None:
        path = _write_yaml(
            tmp_path,
            "worker_pool:\n  worker_count: 2\nretrieval:\n  query_result_limit: 10\n",
        )
        s = settings_from_config(load_config(path))
        assert isinstance(s, Settings)
        assert s.worker_count == 2
        assert s.query_result_limit == 10
        assert s.max_chunk_chars == 1000
