"""Tests for the recursive-descent matching engine."""

from datetime import datetime
from typing import Any

import pytest

from tjp.core.context import ParseContext
from tjp.core.engine import Parser, TokenStream
from tjp.core.errors import ParseError, SemanticError
from tjp.core.grammar import Registry
from tjp.core.scanner import Scanner


def run(registry: Registry, rule: str, text: str, context: ParseContext | None = None) -> Any:
    context = context or ParseContext(registry=registry)
    parser = Parser(registry, TokenStream(Scanner(text, "engine.tjp")), context)
    return parser.parse(rule)


def taskref_registry() -> Registry:
    registry = Registry()
    registry.define_rule("taskref")
    registry.alias_single_pattern("taskref", "$ID")
    registry.derive_comma_list_rule("taskrefs", "taskref")
    registry.define_rule("maybeTaskrefs")
    registry.mark_optional("maybeTaskrefs")
    registry.add_pattern("maybeTaskrefs", ["!taskrefs"])
    return registry


class TestListRules:
    """Tests for derived list rules."""

    def test_comma_list_of_three(self) -> None:
        assert run(taskref_registry(), "taskrefs", "a, b, c") == ["a", "b", "c"]

    def test_comma_list_of_one(self) -> None:
        assert run(taskref_registry(), "taskrefs", "a") == ["a"]

    def test_optional_wrapper_on_empty_input(self) -> None:
        assert run(taskref_registry(), "maybeTaskrefs", "") == []

    def test_optional_wrapper_passes_list_through(self) -> None:
        assert run(taskref_registry(), "maybeTaskrefs", "x, y") == ["x", "y"]

    def test_whitespace_list(self) -> None:
        registry = Registry()
        registry.derive_list_rule("words", "$ID")
        assert run(registry, "words", "one two three") == ["one", "two", "three"]

    def test_dangling_comma(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            run(taskref_registry(), "taskrefs", "a, ")
        assert exc_info.value.code == "unexpected_token"


class TestPatternMatching:
    """Tests for dispatch, coercion and action results."""

    def test_typed_terminals_are_coerced(self) -> None:
        registry = Registry()
        registry.define_rule("values")
        registry.add_pattern(
            "values", ["_values", "$INTEGER", "$FLOAT", "$DATE", "$TIME", "$STRING"]
        )
        result = run(registry, "values", 'values 3 2.5 2024-05-01 10:30 "text"')
        assert result == ["values", 3, 2.5, datetime(2024, 5, 1), 37800, "text"]

    def test_single_value_without_action(self) -> None:
        registry = Registry()
        registry.define_rule("one")
        registry.add_pattern("one", ["$INTEGER"])
        assert run(registry, "one", "7") == 7

    def test_action_receives_positional_values(self) -> None:
        registry = Registry()
        registry.define_rule("pair")
        registry.add_pattern("pair", ["_pair", "$ID", "$ID"], lambda val, ctx: (val[2], val[1]))
        assert run(registry, "pair", "pair left right") == ("right", "left")

    def test_literal_wins_over_id(self) -> None:
        registry = Registry()
        registry.define_rule("criterion")
        registry.add_pattern("criterion", ["$ID"], lambda val, ctx: ("id", val[0]))
        registry.add_pattern("criterion", ["_tree"], lambda val, ctx: ("keyword", val[0]))
        assert run(registry, "criterion", "tree") == ("keyword", "tree")
        assert run(registry, "criterion", "start") == ("id", "start")

    def test_optional_rule_yields_none(self) -> None:
        registry = Registry()
        registry.define_rule("item")
        registry.add_pattern("item", ["$ID", "!suffix"], lambda val, ctx: val[1])
        registry.define_rule("suffix")
        registry.mark_optional("suffix")
        registry.add_pattern("suffix", ["_!"])
        assert run(registry, "item", "name") is None

    def test_repeatable_rule_collects_in_order(self) -> None:
        registry = Registry()
        registry.define_rule("attrs")
        registry.mark_repeatable("attrs")
        registry.mark_optional("attrs")
        registry.add_pattern("attrs", ["_a", "$INTEGER"], lambda val, ctx: ("a", val[1]))
        registry.add_pattern("attrs", ["_b", "$INTEGER"], lambda val, ctx: ("b", val[1]))
        assert run(registry, "attrs", "b 1 a 2 b 3") == [("b", 1), ("a", 2), ("b", 3)]
        assert run(registry, "attrs", "") == []

    def test_non_optional_repeatable_needs_one_match(self) -> None:
        registry = Registry()
        registry.define_rule("attrs")
        registry.mark_repeatable("attrs")
        registry.add_pattern("attrs", ["_a"])
        with pytest.raises(ParseError):
            run(registry, "attrs", "")

    def test_actions_run_left_to_right(self) -> None:
        order: list[str] = []
        registry = Registry()
        registry.define_rule("pair")
        registry.add_pattern("pair", ["!left", "!right"], lambda val, ctx: order.append("pair"))
        registry.define_rule("left")
        registry.add_pattern("left", ["$ID"], lambda val, ctx: order.append("left"))
        registry.define_rule("right")
        registry.add_pattern("right", ["$ID"], lambda val, ctx: order.append("right"))
        run(registry, "pair", "x y")
        assert order == ["left", "right", "pair"]

    def test_location_points_to_first_token(self) -> None:
        seen = []
        registry = Registry()
        registry.define_rule("stmt")
        registry.add_pattern("stmt", ["_let", "$ID"], lambda val, ctx: seen.append(ctx.location))
        run(registry, "stmt", "\n   let x")
        assert (seen[0].line, seen[0].column) == (2, 4)


class TestErrors:
    """Tests for syntax errors and error positions."""

    def _registry(self) -> Registry:
        registry = Registry()
        registry.define_rule("stmt")
        registry.add_pattern("stmt", ["_set", "$ID", "$INTEGER"])
        registry.add_pattern("stmt", ["_unset", "$ID"])
        return registry

    def test_no_alternative_names_expected_tokens(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            run(self._registry(), "stmt", "reset x")
        error = exc_info.value
        assert error.code == "unexpected_token"
        assert "'set'" in error.message and "'unset'" in error.message
        assert error.context.format() == "engine.tjp:1:1"

    def test_no_backtracking_after_selection(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            run(self._registry(), "stmt", "set x y")
        assert exc_info.value.code == "unexpected_token"
        assert exc_info.value.context.column == 7

    def test_trailing_input(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            run(self._registry(), "stmt", "unset x extra")
        assert exc_info.value.code == "trailing_input"

    def test_model_errors_get_a_position(self) -> None:
        def reject(val: list[Any], ctx: ParseContext) -> None:
            raise SemanticError("rejected", "rejected")

        registry = Registry()
        registry.define_rule("stmt")
        registry.add_pattern("stmt", ["_go"], reject)
        with pytest.raises(SemanticError) as exc_info:
            run(registry, "stmt", "  go")
        assert exc_info.value.code == "rejected"
        assert exc_info.value.context.column == 3

    def test_context_error_helper(self) -> None:
        registry = Registry()
        registry.define_rule("stmt")
        registry.add_pattern("stmt", ["$INTEGER"], lambda val, ctx: ctx.error("too_big", "Too big"))
        with pytest.raises(SemanticError) as exc_info:
            run(registry, "stmt", "1000")
        assert str(exc_info.value) == "engine.tjp:1:1: [too_big] Too big"
