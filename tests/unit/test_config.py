"""Unit tests for Settings and the YAML config loader."""

from __future__ import annotations

from pathlib import Path

import pytest

from listengraph.config.loader import genre_table, load_config
from listengraph.config.settings import Settings
from listengraph.utils.errors import ConfigurationError


def _settings(**overrides) -> Settings:  # noqa: ANN003
    """Settings that ignore any .env file in the working directory."""
    return Settings(_env_file=None, **overrides)


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("LISTENS_DB_PATH", raising=False)
        settings = _settings()
        assert settings.listens_db_path == "data/listens.db"
        assert settings.network_proximity_window_minutes == 30
        assert settings.genre_cache_enabled is True

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LISTENS_DB_PATH", "/srv/listens.db")
        monkeypatch.setenv("NETWORK_MAX_ARTISTS", "40")
        settings = _settings()
        assert settings.listens_db_path == "/srv/listens.db"
        assert settings.network_max_artists == 40


class TestLoadConfig:
    def test_yaml_plus_env_layers(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            "app:\n  name: listengraph\n"
            "genres:\n  artists:\n    Daft Punk: Electronic\n",
            encoding="utf-8",
        )

        config = load_config(str(path), settings=_settings(network_min_play_count=3))

        assert config["app"]["name"] == "listengraph"
        assert config["app"]["port"] == 8000
        assert config["network"]["min_play_count"] == 3
        assert genre_table(config) == {"Daft Punk": "Electronic"}

    def test_missing_file_yields_env_only(self, tmp_path: Path) -> None:
        config = load_config(str(tmp_path / "absent.yaml"), settings=_settings())
        assert config["storage"]["listens_db_path"] == _settings().listens_db_path
        assert genre_table(config) == {}

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("genres: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Malformed YAML"):
            load_config(str(path), settings=_settings())

    def test_non_mapping_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(str(path), settings=_settings())

    def test_repo_config_has_genre_table(self, project_root: Path) -> None:
        config = load_config(str(project_root / "config" / "config.yaml"), settings=_settings())
        table = genre_table(config)
        assert table["Daft Punk"] == "Electronic"
        assert table["The Weeknd"] == "R&B"


class TestGenreTable:
    def test_rejects_non_mapping(self) -> None:
        with pytest.raises(ConfigurationError):
            genre_table({"genres": {"artists": ["Daft Punk"]}})


class TestPrecedence:
    def _yaml(self, tmp_path: Path) -> str:
        path = tmp_path / "config.yaml"
        path.write_text(
            "network:\n  min_play_count: 4\n  proximity_window_minutes: 15\n",
            encoding="utf-8",
        )
        return str(path)

    def test_yaml_beats_settings_defaults(self, tmp_path: Path) -> None:
        config = load_config(self._yaml(tmp_path), settings=_settings())
        assert config["network"]["min_play_count"] == 4
        assert config["network"]["proximity_window_minutes"] == 15
        assert config["network"]["min_edge_weight"] == 1

    def test_environment_beats_yaml(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("NETWORK_PROXIMITY_WINDOW_MINUTES", "90")
        config = load_config(self._yaml(tmp_path), settings=_settings())
        assert config["network"]["proximity_window_minutes"] == 90
        assert config["network"]["min_play_count"] == 4

    def test_non_mapping_section(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("network: 5\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="network"):
            load_config(str(path), settings=_settings())
