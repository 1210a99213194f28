"""Tests for config file discovery."""

from pathlib import Path

import pytest

from gamestats.config.discovery import CONFIG_FILENAME, find_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GAMESTATS_CONFIG", raising=False)


class TestFindConfig:
    def test_in_start_dir(self, tmp_path: Path) -> None:
        config = tmp_path / CONFIG_FILENAME
        config.write_text("")
        assert find_config(tmp_path) == config.resolve()

    def test_walks_up(self, tmp_path: Path) -> None:
        config = tmp_path / CONFIG_FILENAME
        config.write_text("")
        nested = tmp_path / "content" / "games"
        nested.mkdir(parents=True)
        assert find_config(nested) == config.resolve()

    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config = tmp_path / "elsewhere.toml"
        config.write_text("")
        monkeypatch.setenv("GAMESTATS_CONFIG", str(config))
        assert find_config(tmp_path / "unrelated") == config

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv("GAMESTATS_CONFIG", str(tmp_path / "missing.toml"))
        assert find_config(tmp_path) is None
