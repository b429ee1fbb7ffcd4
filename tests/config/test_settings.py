"""Tests for ShelfSettings — unified settings with TOML source."""

from pathlib import Path

import pytest

from shelfkit.config.discovery import CONFIG_ENV_VAR, ConfigError
from shelfkit.config.settings import ShelfSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.delenv("SHELFKIT_ROOT", raising=False)


class TestShelfSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = ShelfSettings.load(root=tmp_path)
        assert settings.root == tmp_path
        assert settings.config_path is None
        assert settings.verbose is False
        assert settings.log_json is False
        assert settings.storage.backend == "file"
        assert settings.catalog.uncategorized == "Uncategorized"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = ShelfSettings.load(root=tmp_path)
        with pytest.raises(Exception):
            settings.verbose = True  # type: ignore[misc]

    def test_storage_root_relative(self, tmp_path: Path) -> None:
        settings = ShelfSettings.load(root=tmp_path)
        assert settings.storage_root == tmp_path / ".shelfkit"

    def test_storage_root_absolute(self, tmp_path: Path) -> None:
        target = tmp_path / "elsewhere"
        settings = ShelfSettings.load(root=tmp_path, storage={"path": str(target)})
        assert settings.storage_root == target


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "shelfkit.toml").write_text(
            '[storage]\nbackend = "sqlite"\n[catalog]\ncategories = ["A", "B"]\n'
        )
        settings = ShelfSettings.load(root=tmp_path)
        assert settings.storage.backend == "sqlite"
        assert settings.storage.key == "library"  # default preserved
        assert settings.catalog.categories == ("A", "B")
        assert settings.config_path == tmp_path / "shelfkit.toml"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('[storage]\nkey = "custom"\n')
        settings = ShelfSettings.load(config_path=str(custom), root=tmp_path)
        assert settings.storage.key == "custom"
        assert settings.config_path == custom

    def test_root_from_toml_location(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """When no explicit root, use parent of discovered shelfkit.toml."""
        (tmp_path / "shelfkit.toml").write_text("")
        subdir = tmp_path / "sub" / "deep"
        subdir.mkdir(parents=True)
        monkeypatch.chdir(subdir)
        settings = ShelfSettings.load()
        assert settings.root == tmp_path.resolve()

    def test_invalid_toml_raises(self, tmp_path: Path) -> None:
        (tmp_path / "shelfkit.toml").write_text("verbose = \n")
        with pytest.raises(ConfigError):
            ShelfSettings.load(root=tmp_path)


class TestPriority:
    def test_overrides_beat_toml(self, tmp_path: Path) -> None:
        (tmp_path / "shelfkit.toml").write_text("verbose = true\n")
        settings = ShelfSettings.load(root=tmp_path, verbose=False)
        assert settings.verbose is False

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SHELFKIT_LOG_JSON", "true")
        settings = ShelfSettings.load(root=tmp_path)
        assert settings.log_json is True

    def test_nested_env_var_beats_toml(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "shelfkit.toml").write_text('[storage]\nbackend = "sqlite"\n')
        monkeypatch.setenv("SHELFKIT_STORAGE__BACKEND", "memory")
        settings = ShelfSettings.load(root=tmp_path)
        assert settings.storage.backend == "memory"
