# tests/test_config.py
"""Test configuration loading"""

from pathlib import Path

import pytest

from spot_linker.core.config import default_config, load_config
from spot_linker.core.exceptions import ConfigError


class TestLoadConfig:
    """Test load_config()"""

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        """Test built-in defaults when no config.yaml exists"""
        monkeypatch.chdir(tmp_path)
        config = load_config()

        assert config == default_config()
        assert config.matching.concurrency == 2
        assert config.matching.max_batch_size == 10
        assert config.matching.max_candidates == 10
        assert config.search.language == "en"
        assert config.search.limit == 20
        assert config.cache.ttl_seconds == 24 * 3600
        assert config.output.log_directory == Path("~/.spot-linker").expanduser().resolve()

    def test_reads_config_from_cwd(self, tmp_path, monkeypatch):
        (tmp_path / "config.yaml").write_text(
            "matching:\n  concurrency: 3\ncache:\n  ttl_hours: 0.5\n", encoding="utf-8"
        )
        monkeypatch.chdir(tmp_path)

        config = load_config()

        assert config.matching.concurrency == 3
        assert config.matching.max_batch_size == 10
        assert config.cache.ttl_seconds == 1800

    def test_explicit_path_must_exist(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "missing.yaml")
        assert "not found" in exc_info.value.message

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == default_config()

    def test_log_directory_is_expanded(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(f"output:\n  log_directory: '{tmp_path / 'logs'}'\n", encoding="utf-8")
        assert load_config(path).output.log_directory == (tmp_path / "logs").resolve()

    @pytest.mark.parametrize("content", [
        "matching: [1, 2]\n",
        "matching:\n  concurrency: 0\n",
        "matching:\n  max_batch_size: true\n",
        "search:\n  language: ''\n",
        "search:\n  limit: twenty\n",
        "cache:\n  ttl_hours: -1\n",
        "output:\n  log_directory: 42\n",
        "- just\n- a list\n",
        "matching: {concurrency: [\n",
    ])
    def test_invalid_config(self, tmp_path, content):
        path = tmp_path / "config.yaml"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)
