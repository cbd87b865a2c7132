"""Tests for parse sessions and batch parsing."""

from pathlib import Path

import pytest

from tjp.core.errors import ParseError, SemanticError
from tjp.core.session import ParseSession, parse_files

PROJECT_HEADER = 'project test "Test Project" "1.0" 2024-01-01 - 2024-12-31\n'


class TestParseSession:
    """Tests for ParseSession."""

    def test_parse_text(self, session: ParseSession) -> None:
        project = session.parse_text(PROJECT_HEADER + 'task t "T"\n')
        assert project.id == "test"
        assert project.task("t").name == "T"

    def test_parse_file_records_file_names(self, session: ParseSession, tjp_file) -> None:
        path = tjp_file(PROJECT_HEADER + 'task t "T" { priority 5000 }\n')
        with pytest.raises(SemanticError) as exc_info:
            session.parse_file(path)
        assert exc_info.value.context.file == str(path)
        assert exc_info.value.context.line == 2

    def test_macro_only_document_has_no_project(self, session: ParseSession) -> None:
        with pytest.raises(ParseError) as exc_info:
            session.parse_text("macro m [x]\n", "macros.tji")
        assert exc_info.value.code == "no_project"

    def test_state_is_reset_between_documents(self, session: ParseSession) -> None:
        first = session.parse_text(PROJECT_HEADER + 'task t "T"\n')
        second = session.parse_text(PROJECT_HEADER + 'task t "T"\n')
        assert first is not second
        assert len(second.tasks) == 1

    def test_context_manager_closes_the_scanner(self) -> None:
        with ParseSession() as session:
            session.parse_text(PROJECT_HEADER)
            assert session.context.scanner is not None
        assert session.context.scanner is None

    def test_sessions_have_private_registries(self) -> None:
        with ParseSession() as first, ParseSession() as second:
            assert first.registry is not second.registry

    def test_syntax_reference(self, session: ParseSession) -> None:
        reference = session.syntax_reference()
        assert "task" in reference
        assert "project" in reference
        assert reference["task"].optional_attributes


class TestParseFiles:
    """Tests for parsing several documents."""

    def test_errors_are_collected_per_file(self, tmp_path: Path) -> None:
        good = tmp_path / "good.tjp"
        good.write_text(PROJECT_HEADER + 'task t "T"\n', encoding="utf-8")
        bad = tmp_path / "bad.tjp"
        bad.write_text(PROJECT_HEADER + "task\n", encoding="utf-8")
        also_good = tmp_path / "also_good.tjp"
        also_good.write_text(PROJECT_HEADER, encoding="utf-8")

        results = parse_files([good, bad, also_good])

        assert [r.ok for r in results] == [True, False, True]
        assert results[0].project.task("t") is not None
        assert isinstance(results[1].error, ParseError)
        assert results[1].error.context.file == str(bad)
        assert results[1].project is None

    def test_extensions_do_not_leak_between_files(self, tmp_path: Path) -> None:
        extended = tmp_path / "extended.tjp"
        extended.write_text(
            'project p "P" "1.0" 2024-01-01 - 2024-12-31 { extend task { text Owner "O" } }\n'
            'task t "T" { owner "ann" }\n',
            encoding="utf-8",
        )
        plain = tmp_path / "plain.tjp"
        plain.write_text(PROJECT_HEADER + 'task t "T" { owner "ann" }\n', encoding="utf-8")

        first, second = parse_files([extended, plain])

        assert first.ok
        assert not second.ok
        assert second.error.code == "unexpected_token"

    def test_missing_file_does_not_stop_the_batch(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.tjp"
        good = tmp_path / "good.tjp"
        good.write_text(PROJECT_HEADER + 'task t "T"\n', encoding="utf-8")

        first, second = parse_files([missing, good])

        assert not first.ok
        assert first.error.code == "file_not_found"
        assert first.error.context.file == str(missing)
        assert second.ok
        assert second.project.task("t") is not None

    def test_include_cycle_is_reported(self, tmp_path: Path) -> None:
        main = tmp_path / "main.tjp"
        main.write_text(PROJECT_HEADER + 'include "main.tjp"\n', encoding="utf-8")

        (result,) = parse_files([main])

        assert result.error.code == "include_recursion"
