"""Tests for GameConfig and ServerConfig YAML loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from abyss.errors import ConfigError
from abyss.game.config import GameConfig, Variant
from abyss.server.config import ServerConfig

_REPO_CONFIG = Path(__file__).resolve().parent.parent / "config"


class TestGameConfig:
    """Tests for presets and YAML overrides."""

    def test_defaults(self, default_config: GameConfig) -> None:
        assert default_config.variant is Variant.DEEP_SEA
        assert default_config.grid_size == 50
        assert default_config.hazard_threshold == 5
        assert default_config.collection_goal == 10

    def test_reef_preset(self, reef_config: GameConfig) -> None:
        assert reef_config.hull_max == 100
        assert reef_config.hazard_threshold == 10
        assert reef_config.collection_goal == 30
        assert reef_config.vent_count == 20

    def test_unknown_variant(self) -> None:
        with pytest.raises(ConfigError):
            GameConfig.for_variant("lava_lake")

    def test_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "game.yaml"
        path.write_text("variant: coral_reef\ncollection_goal: 3\nviewport: [640, 480]\n")
        config = GameConfig.from_yaml(path)
        assert config.variant is Variant.CORAL_REEF
        assert config.collection_goal == 3
        assert config.viewport == (640, 480)
        # Untouched keys keep the reef preset
        assert config.hull_max == 100

    def test_overrides_win(self, tmp_path: Path) -> None:
        path = tmp_path / "game.yaml"
        path.write_text("seed: 1\n")
        assert GameConfig.from_yaml(path, seed=99).seed == 99

    def test_unknown_keys_ignored(self, caplog: pytest.LogCaptureFixture) -> None:
        config = GameConfig.from_dict({"wobble": 3})
        assert config == GameConfig()
        assert "wobble" in caplog.text

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "game.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError):
            GameConfig.from_yaml(path)

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "game.yaml"
        path.write_text("")
        assert GameConfig.from_yaml(path) == GameConfig()

    @pytest.mark.parametrize("name", ["default.yaml", "coral_reef.yaml"])
    def test_shipped_files_load(self, name: str) -> None:
        config = GameConfig.from_yaml(_REPO_CONFIG / name)
        assert config.grid_size == 50

    def test_default_file_keeps_deep_sea_rules(self) -> None:
        config = GameConfig.from_yaml(_REPO_CONFIG / "default.yaml")
        preset = GameConfig.for_variant(Variant.DEEP_SEA)
        assert config.collection_goal == preset.collection_goal == 10
        assert config.vent_count == 40
        assert config.hazard_threshold == 5

    def test_default_file_with_reef_variant(self) -> None:
        config = GameConfig.from_yaml(_REPO_CONFIG / "default.yaml", variant="coral_reef")
        assert config.variant is Variant.CORAL_REEF
        assert config.collection_goal == 30
        assert config.vent_count == 20
        assert config.hull_max == 100
        assert config.hazard_threshold == 10
        assert config.flashlight_radius == 200.0


class TestServerConfig:
    """Tests for the backend config."""

    def test_defaults(self) -> None:
        config = ServerConfig()
        assert config.port == 3000
        assert config.data_dir == Path("data")

    def test_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "server.yaml"
        path.write_text("port: 8080\ndata_dir: /srv/abyss\n")
        config = ServerConfig.from_yaml(path, host="0.0.0.0")
        assert config.port == 8080
        assert config.data_dir == Path("/srv/abyss")
        assert config.host == "0.0.0.0"

    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigError):
            ServerConfig().with_overrides({"workers": 4})

    def test_shipped_file_loads(self) -> None:
        assert ServerConfig.from_yaml(_REPO_CONFIG / "server.yaml").port == 3000
