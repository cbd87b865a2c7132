"""Tests for the tjp command line interface."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from tjp.cli import app
from tjp.core.errors import UnknownReferenceError

runner = CliRunner()

PROJECT_HEADER = 'project test "Test Project" "1.0" 2024-01-01 - 2024-12-31\n'


@pytest.fixture
def no_config(tmp_path: Path) -> list[str]:
    return ["--config", str(tmp_path / "missing.toml")]


class TestCheckCommand:
    """Tests for tjp check."""

    def test_valid_file(self, no_config, tjp_file) -> None:
        path = tjp_file(PROJECT_HEADER + 'task t "T"\nresource r "R"\n')
        result = runner.invoke(app, [*no_config, "check", str(path)])
        assert result.exit_code == 0
        assert f"{path}: ok (1 tasks, 1 resources, 0 reports)" in result.output

    def test_failures_are_counted(self, no_config, tjp_file) -> None:
        good = tjp_file(PROJECT_HEADER, "good.tjp")
        bad = tjp_file(PROJECT_HEADER + 'task t "T" { complete 200 }\n', "bad.tjp")
        result = runner.invoke(app, [*no_config, "check", str(good), str(bad)])
        assert result.exit_code == 1
        assert "[task_complete]" in result.output
        assert "1 of 2 files failed" in result.output

    def test_missing_file(self, no_config, tmp_path: Path) -> None:
        missing = tmp_path / "missing.tjp"
        result = runner.invoke(app, [*no_config, "check", str(missing)])
        assert result.exit_code == 1
        assert "[file_not_found]" in result.output
        assert "1 of 1 files failed" in result.output

    def test_config_file_is_used(self, tmp_path: Path, tjp_file) -> None:
        (tmp_path / "shared").mkdir()
        (tmp_path / "shared" / "tasks.tji").write_text('task s "S"\n', encoding="utf-8")
        config = tmp_path / "tjp.toml"
        config.write_text('[parser]\ninclude_paths = ["shared"]\n', encoding="utf-8")
        path = tjp_file(PROJECT_HEADER + 'include "tasks.tji"\n', "main.tjp")
        result = runner.invoke(app, ["--config", str(config), "check", str(path)])
        assert result.exit_code == 0
        assert "1 tasks" in result.output


class TestReferenceCommands:
    """Tests for keywords, describe and manual."""

    def test_keywords(self, no_config) -> None:
        result = runner.invoke(app, [*no_config, "keywords"])
        assert result.exit_code == 0
        keywords = [line for line in result.output.splitlines() if " " not in line]
        assert "task" in keywords
        assert "booking:overtime" in keywords
        assert keywords == sorted(keywords)

    def test_keywords_table(self, no_config) -> None:
        result = runner.invoke(app, [*no_config, "keywords", "--details"])
        assert result.exit_code == 0
        assert "Keywords (" in result.output
        assert "priority" in result.output

    def test_keywords_with_document_extensions(self, no_config, tjp_file) -> None:
        path = tjp_file(
            'project p "P" "1.0" 2024-01-01 - 2024-12-31 { extend task { text Owner "O" } }\n'
        )
        result = runner.invoke(app, [*no_config, "keywords", "--with", str(path)])
        assert result.exit_code == 0
        assert "task:owner" in result.output.splitlines()

    def test_with_broken_document(self, no_config, tjp_file) -> None:
        path = tjp_file("task\n")
        result = runner.invoke(app, [*no_config, "keywords", "--with", str(path)])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_keywords_with_broken_grammar_documentation(self, no_config, monkeypatch) -> None:
        def broken_reference(registry):
            raise UnknownReferenceError("see also names nosuchkeyword", "unknown_reference")

        monkeypatch.setattr("tjp.core.session.build_reference", broken_reference)
        result = runner.invoke(app, [*no_config, "keywords"])
        assert result.exit_code == 1
        assert "Error: [unknown_reference]" in result.output

    def test_describe(self, no_config) -> None:
        result = runner.invoke(app, [*no_config, "describe", "priority"])
        assert result.exit_code == 0
        assert result.output.startswith("Keyword:     priority")
        assert "Inheritable: Yes" in result.output

    def test_describe_unknown_keyword(self, no_config) -> None:
        result = runner.invoke(app, [*no_config, "describe", "nosuchkeyword"])
        assert result.exit_code == 1
        assert "Unknown keyword: nosuchkeyword" in result.output

    def test_manual_to_file(self, no_config, tmp_path: Path) -> None:
        output = tmp_path / "manual.txt"
        result = runner.invoke(app, [*no_config, "manual", "-o", str(output)])
        assert result.exit_code == 0
        assert f"Wrote {output}" in result.output
        text = output.read_text(encoding="utf-8")
        assert "Keyword:     task " in text
        assert "-" * 79 in text


class TestGlobalOptions:
    """Tests for options of the main callback."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.startswith("tjp ")
        assert "Python" in result.output

    def test_unreadable_config(self, tmp_path: Path) -> None:
        config = tmp_path / "tjp.toml"
        config.write_text("[parser\n", encoding="utf-8")
        result = runner.invoke(app, ["--config", str(config), "keywords"])
        assert result.exit_code == 1
        assert "Cannot read configuration" in result.output
