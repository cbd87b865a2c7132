"""Tests for user defined attributes added by ``extend``."""

from datetime import datetime

import pytest

from tjp.core.errors import (
    DuplicateAttributeError,
    InvalidAttributeNameError,
    ParseError,
    SemanticError,
)
from tjp.core.model import Reference


def header(*extensions: str, scenarios: str = "") -> str:
    body = " ".join([scenarios, *extensions])
    return f'project test "Test" "1.0" 2024-01-01 - 2024-12-31 {{ {body} }}\n'


class TestExtendingTasks:
    """Tests for attributes that become usable after the extend statement."""

    def test_date_attribute(self, parse) -> None:
        project = parse(
            'task t "T" { delivered 2024-03-01 }',
            header=header('extend task { date Delivered "Delivered" }'),
        )
        assert project.task("t").get("Delivered") == datetime(2024, 3, 1)

    def test_keyword_is_unknown_without_extension(self, parse) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse('task t "T" { delivered 2024-03-01 }')
        assert exc_info.value.code == "unexpected_token"

    def test_text_attribute(self, parse) -> None:
        project = parse(
            'task t "T" { owner "ann" }',
            header=header('extend task { text Owner "Owner" }'),
        )
        assert project.task("t").get("Owner") == "ann"

    def test_definition_is_added_to_the_property_set(self, parse) -> None:
        project = parse("", header=header('extend task { text Owner "Owner" }'))
        definition = project.tasks.definitions["Owner"]
        assert definition.name == "Owner"
        assert definition.user_defined

    def test_reference_with_label(self, parse) -> None:
        project = parse(
            'task t "T" { link "https://example.com/t" { label "Ticket" } }',
            header=header('extend task { reference Link "Link" }'),
        )
        assert project.task("t").get("Link") == Reference(
            url="https://example.com/t", label="Ticket"
        )

    def test_reference_without_label(self, parse) -> None:
        project = parse(
            'task t "T" { link "https://example.com/t" }',
            header=header('extend task { reference Link "Link" }'),
        )
        assert project.task("t").get("Link").label is None

    def test_scenario_specific_attribute(self, parse) -> None:
        project = parse(
            'task t "T" { risk "low" alt:risk "high" }',
            header=header(
                'extend task { text Risk "Risk" { scenariospecific } }',
                scenarios='scenario plan "Plan" { scenario alt "Alt" }',
            ),
        )
        task = project.task("t")
        assert task["Risk", 0] == "low"
        assert task["Risk", 1] == "high"

    def test_inherited_attribute(self, parse) -> None:
        project = parse(
            'task p "P" { owner "ann" task c "C" }',
            header=header('extend task { text Owner "Owner" { inherit } }'),
        )
        assert project.task("p.c").get("Owner") == "ann"

    def test_attribute_is_not_inherited_by_default(self, parse) -> None:
        project = parse(
            'task p "P" { owner "ann" task c "C" }',
            header=header('extend task { text Owner "Owner" }'),
        )
        assert project.task("p.c").get("Owner") is None


class TestExtendingResources:
    """Tests for resource extensions."""

    def test_resource_attribute(self, parse) -> None:
        project = parse(
            'resource r "R" { room "B12" }',
            header=header('extend resource { text Room "Room" }'),
        )
        assert project.resource("r").get("Room") == "B12"

    def test_task_keyword_is_not_valid_for_resources(self, parse) -> None:
        with pytest.raises(ParseError):
            parse(
                'resource r "R" { room "B12" }',
                header=header('extend task { text Room "Room" }'),
            )


class TestExtensionErrors:
    """Tests for rejected extend statements."""

    def test_id_must_start_with_capital(self, parse) -> None:
        with pytest.raises(InvalidAttributeNameError) as exc_info:
            parse("", header=header('extend task { text delivered "Delivered" }'))
        assert exc_info.value.code == "extend_id_cap"
        assert exc_info.value.context.file == "test.tjp"

    def test_builtin_keyword_cannot_be_redefined(self, parse) -> None:
        with pytest.raises(DuplicateAttributeError) as exc_info:
            parse("", header=header('extend task { text Note "Note" }'))
        assert exc_info.value.code == "extend_duplicate"

    def test_scenario_specific_builtin_cannot_be_redefined(self, parse) -> None:
        with pytest.raises(DuplicateAttributeError) as exc_info:
            parse("", header=header('extend task { date Start "Start" }'))
        assert exc_info.value.code == "extend_duplicate"

    def test_same_extension_twice(self, parse) -> None:
        with pytest.raises(DuplicateAttributeError) as exc_info:
            parse("", header=header('extend task { text Owner "A" text Owner "B" }'))
        assert exc_info.value.code == "extend_duplicate"

    def test_unknown_property_type(self, parse) -> None:
        with pytest.raises(SemanticError) as exc_info:
            parse("", header=header('extend account { text Code "Code" }'))
        assert exc_info.value.code == "extend_prop"


class TestExtensionDocumentation:
    """Tests for the reference entries of extended keywords."""

    def test_extended_keyword_is_documented(self, session, parse) -> None:
        parse("", header=header('extend task { date Delivered "Delivered" }'))
        reference = session.syntax_reference()
        entry = reference["task:delivered"]
        assert "Delivered" in entry.doc
        assert [arg.name for arg in entry.args] == ["value"]
        assert "task" in [context.keyword for context in entry.contexts]

    def test_scenario_specific_extension_is_marked(self, session, parse) -> None:
        parse("", header=header('extend task { text Risk "Risk" { scenariospecific } }'))
        assert session.syntax_reference()["task:risk"].scenario_specific

    def test_fresh_session_has_no_extensions(self, session, registry) -> None:
        session.parse_text(header('extend task { text Owner "Owner" }'))
        assert "task:owner" in session.syntax_reference()
        assert not any(p.keyword == "task:owner" for _rule, p in registry.patterns())
