"""Tests for keyword documentation, cross referencing and rendering."""

import pytest

from tjp.core.docs import SyntaxReference, build_reference, render, render_manual, wrap
from tjp.core.docs.renderer import LINE_WIDTH
from tjp.core.errors import DuplicateKeywordError, UnknownReferenceError
from tjp.core.grammar import GrammarBuilder, Registry


class _ItemGrammar(GrammarBuilder):
    def rule_item(self) -> None:
        self.new_rule("item")
        self.new_pattern(["_item", "$ID", "!itemBody"])
        self.doc("item", "Declare an item.")
        self.arg(1, "id", "The ID of the item")

    def rule_itemBody(self) -> None:
        self.new_options_rule("itemBody", "itemAttributes")

    def rule_itemAttributes(self) -> None:
        self.new_rule("itemAttributes")
        self.optional()
        self.repeatable()
        self.new_pattern(["_alpha", "$INTEGER"])
        self.doc("alpha", "The alpha value of the item.")
        self.arg(1, "value", "Any integer")
        self.inheritable()
        self.new_pattern(["!scenarioId", "!itemScenarioAttributes"])

    def rule_itemScenarioAttributes(self) -> None:
        self.new_rule("itemScenarioAttributes")
        self.new_pattern(["_beta", "$STRING"])
        self.doc("beta", "The beta text of the item.")
        self.also(["alpha"])

    def rule_scenarioId(self) -> None:
        self.new_rule("scenarioId")
        self.new_pattern(["$ID_WITH_COLON"])


def item_reference() -> SyntaxReference:
    return build_reference(_ItemGrammar().build())


class TestCrossReference:
    """Tests for contexts, attributes and see-also links."""

    def test_entries_are_sorted_by_keyword(self) -> None:
        assert item_reference().keywords() == ["alpha", "beta", "item"]

    def test_syntax_line(self) -> None:
        reference = item_reference()
        assert reference["item"].syntax == "item <id> [{ <attributes> }]"
        assert reference["alpha"].syntax == "alpha <value>"
        assert reference["beta"].syntax == "beta <string>"

    def test_attributes_and_contexts(self) -> None:
        reference = item_reference()
        item = reference["item"]
        assert [a.keyword for a in item.optional_attributes] == ["alpha", "beta"]
        assert [c.keyword for c in reference["alpha"].contexts] == ["item"]
        assert item.contexts == []

    def test_scenario_prefix_marks_attributes(self) -> None:
        reference = item_reference()
        assert reference["beta"].scenario_specific
        assert not reference["alpha"].scenario_specific

    def test_see_also(self) -> None:
        assert [e.keyword for e in item_reference()["beta"].see_also] == ["alpha"]

    def test_cross_reference_is_idempotent(self) -> None:
        reference = item_reference()
        reference.cross_reference()
        assert [a.keyword for a in reference["item"].optional_attributes] == ["alpha", "beta"]
        assert [c.keyword for c in reference["beta"].contexts] == ["item"]
        assert len(reference["beta"].see_also) == 1

    def test_duplicate_keyword(self) -> None:
        registry = _ItemGrammar().build()
        registry.define_rule("other")
        pattern = registry.add_pattern("other", ["_other"])
        pattern.keyword = "alpha"
        with pytest.raises(DuplicateKeywordError) as exc_info:
            SyntaxReference(registry)
        assert exc_info.value.code == "duplicate_keyword"

    def test_unknown_see_also(self) -> None:
        registry = _ItemGrammar().build()
        registry["itemScenarioAttributes"].patterns[0].see_also.add("gamma")
        with pytest.raises(UnknownReferenceError) as exc_info:
            build_reference(registry)
        assert exc_info.value.code == "unknown_reference"

    def test_unknown_argument_reference(self) -> None:
        builder = _ItemGrammar()
        builder.build()
        builder.new_rule("depends")
        builder.new_pattern(["_depends", "$ID"])
        builder.doc("depends", "Depend on something.")
        builder.arg(1, "items", "^itemreference")
        with pytest.raises(UnknownReferenceError):
            build_reference(builder.registry)

    def test_undocumented_attribute_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        registry = _ItemGrammar().build()
        registry.add_pattern("itemAttributes", ["_gamma", "$ID"])
        with caplog.at_level("WARNING", logger="tjp.core.docs.keyword_doc"):
            reference = build_reference(registry)
        assert "gamma" not in reference
        assert any("_gamma" in record.getMessage() for record in caplog.records)


class TestRendering:
    """Tests for the fixed width reference page."""

    def test_item_page(self) -> None:
        text = render(item_reference()["item"])
        assert text == (
            "Keyword:     item     Scenario Specific: No     Inheritable: No\n"
            "\n"
            "Purpose:     Declare an item.\n"
            "\n"
            "Syntax:      item <id> [{ <attributes> }]\n"
            "\n"
            "Arguments:   id [id]: The ID of the item\n"
            "\n"
            "Context:     Global scope\n"
            "\n"
            "Attributes:  alpha, [sc:]beta\n"
        )

    def test_flags_in_keyword_line(self) -> None:
        reference = item_reference()
        assert "Inheritable: Yes" in render(reference["alpha"]).splitlines()[0]
        assert "Scenario Specific: Yes" in render(reference["beta"]).splitlines()[0]

    def test_no_arguments_and_see_also(self) -> None:
        lines = render(item_reference()["beta"]).splitlines()
        assert "Arguments:   none" in lines
        assert "Context:     item" in lines
        assert lines[-1] == "See also:    alpha"

    def test_long_text_is_wrapped_with_hanging_indent(self) -> None:
        registry = _ItemGrammar().build()
        registry["item"].patterns[0].doc = " ".join(["word"] * 40)
        lines = render(build_reference(registry)["item"]).splitlines()
        purpose = [line for line in lines if line.startswith("Purpose:") or line.startswith(" ")]
        assert len(purpose) > 1
        assert all(len(line) <= LINE_WIDTH for line in lines)
        assert all(line.startswith(" " * 13 + "word") for line in purpose[1:])

    def test_manual_separates_pages(self) -> None:
        text = render_manual(item_reference())
        assert text.count("-" * LINE_WIDTH) == 2
        assert text.startswith("Keyword:     alpha")


class TestWrap:
    """Tests for the word wrapper."""

    def test_words_are_not_split(self) -> None:
        assert wrap("aaa bbb ccc", 7) == ["aaa bbb", "ccc"]

    def test_long_word_gets_its_own_line(self) -> None:
        assert wrap("a " + "x" * 12 + " b", 5) == ["a", "x" * 12, "b"]

    def test_newlines_are_kept(self) -> None:
        assert wrap("one\n\ntwo", 20) == ["one", "", "two"]


class TestGrammarReference:
    """Tests for the reference of the complete TJP grammar."""

    @pytest.fixture
    def reference(self, registry: Registry) -> SyntaxReference:
        return build_reference(registry)

    def test_task_entry(self, reference: SyntaxReference) -> None:
        task = reference["task"]
        attributes = [a.keyword for a in task.optional_attributes]
        assert "priority" in attributes
        assert "allocate" in attributes
        assert "task" in attributes
        assert "task" in [c.keyword for c in task.contexts]

    def test_allocate_lists_its_resources(self, reference: SyntaxReference) -> None:
        attributes = [a.keyword for a in reference["allocate"].optional_attributes]
        assert "allocate:resources" in attributes

    def test_priority_is_inheritable_and_scenario_specific(
        self, reference: SyntaxReference
    ) -> None:
        first_line = render(reference["priority"]).splitlines()[0]
        assert first_line.endswith("Scenario Specific: Yes     Inheritable: Yes")
        assert "task" in [c.keyword for c in reference["priority"].contexts]


    def test_long_keyword_moves_flags_to_continuation_line(
        self, reference: SyntaxReference
    ) -> None:
        lines = render(reference["extend:scenariospecific"]).splitlines()
        assert lines[0] == "Keyword:     extend:scenariospecific"
        assert lines[1].startswith(" " * 13 + "Scenario Specific: ")
        assert "Inheritable: " in lines[1]

    def test_manual_fits_the_line_width(self, reference: SyntaxReference) -> None:
        lines = render_manual(reference).splitlines()
        assert max(len(line) for line in lines) <= LINE_WIDTH

    def test_purpose_paragraphs_are_rewrapped(self, reference: SyntaxReference) -> None:
        lines = render(reference["task"]).splitlines()
        purpose = lines[lines.index("") + 1]
        assert purpose.startswith("Purpose:     Tasks are the central elements of a project plan.")
        assert len(purpose) > 70
