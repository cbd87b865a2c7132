"""Tests for tjp.toml loading."""

from pathlib import Path

import pytest

from tjp.core.config import TjpConfig, load_config
from tjp.core.session import ParseSession


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path / "tjp.toml")
        assert config == TjpConfig()
        assert config.parser.include_paths == []
        assert config.parser.log_level == "WARNING"
        assert config.defaults.timing_resolution == 60
        assert config.source is None

    def test_values_are_read(self, tmp_path: Path) -> None:
        path = tmp_path / "tjp.toml"
        path.write_text(
            """
[parser]
log_level = "DEBUG"

[defaults]
daily_working_hours = 7.5
yearly_working_days = 220
timing_resolution = 15
""",
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.parser.log_level == "DEBUG"
        assert config.defaults.daily_working_hours == 7.5
        assert config.defaults.yearly_working_days == 220.0
        assert config.defaults.timing_resolution == 15
        assert config.source == path

    def test_include_paths_are_relative_to_the_file(self, tmp_path: Path) -> None:
        path = tmp_path / "tjp.toml"
        path.write_text('[parser]\ninclude_paths = ["shared", "../common"]\n', encoding="utf-8")
        config = load_config(path)
        assert config.parser.include_paths == [tmp_path / "shared", tmp_path / "../common"]

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "tjp.toml"
        path.write_text("[parser\n", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(path)


class TestConfigInSessions:
    """Tests for configuration values used while parsing."""

    def test_defaults_apply_to_new_projects(self, tmp_path: Path) -> None:
        path = tmp_path / "tjp.toml"
        path.write_text("[defaults]\ndaily_working_hours = 6\n", encoding="utf-8")
        with ParseSession(load_config(path)) as session:
            project = session.parse_text(
                'project p "P" "1.0" 2024-01-01 - 2024-12-31\ntask t "T" { effort 1d }'
            )
        assert project["dailyworkinghours"] == 6.0
        assert project.task("t")["effort", 0] == 6

    def test_include_paths_are_searched(self, tmp_path: Path) -> None:
        shared = tmp_path / "shared"
        shared.mkdir()
        (shared / "tasks.tji").write_text('task shared "Shared"\n', encoding="utf-8")
        (tmp_path / "tjp.toml").write_text(
            '[parser]\ninclude_paths = ["shared"]\n', encoding="utf-8"
        )
        document = tmp_path / "docs" / "plan.tjp"
        document.parent.mkdir()
        document.write_text(
            'project p "P" "1.0" 2024-01-01 - 2024-12-31\ninclude "tasks.tji"\n',
            encoding="utf-8",
        )
        with ParseSession(load_config(tmp_path / "tjp.toml")) as session:
            project = session.parse_file(document)
        assert project.task("shared") is not None
