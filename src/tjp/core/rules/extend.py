"""
The ``extend`` statement: user defined task and resource attributes.
"""

from typing import TYPE_CHECKING, Any

from ..context import ParseContext
from ..extension import GrammarExtender, ValueType


def _extender(ctx: ParseContext) -> GrammarExtender:
    if ctx.extender is None:
        ctx.extender = GrammarExtender(ctx.registry)
    return ctx.extender


def _extend_property(val: list[Any], ctx: ParseContext) -> str:
    ctx.extend_target = _extender(ctx).check_property_type(ctx, val[0])
    return ctx.extend_target


def _extend_id(val: list[Any], ctx: ParseContext) -> str:
    return _extender(ctx).check_attribute_id(ctx, val[0])


def _extend_with(value_type: ValueType) -> Any:
    def action(val: list[Any], ctx: ParseContext) -> Any:
        options = set(val[3] or [])
        return _extender(ctx).extend(
            ctx,
            ctx.extend_target,
            val[1],
            val[2],
            value_type,
            inheritable="inherit" in options,
            scenario_specific="scenariospecific" in options,
        )

    return action


class ExtendRules:
    """
    Note: This mixin expects to be combined with GrammarBuilder via multiple inheritance.
    """

    if TYPE_CHECKING:
        new_rule: Any
        new_pattern: Any
        single_pattern: Any
        optional: Any
        repeatable: Any
        new_options_rule: Any
        doc: Any
        arg: Any

    def rule_extendProperty(self) -> None:
        self.new_rule("extendProperty")
        self.new_pattern(["$ID"], _extend_property)

    def rule_extendBody(self) -> None:
        self.new_options_rule("extendBody", "extendAttributes")

    def rule_extendAttributes(self) -> None:
        self.new_rule("extendAttributes")
        self.optional()
        self.repeatable()

        self.new_pattern(
            ["_date", "!extendId", "$STRING", "!extendOptionsBody"], _extend_with(ValueType.DATE)
        )
        self.doc("extend:date", "Extend the property with a new attribute of type date.")
        self._name_arg()

        self.new_pattern(
            ["_reference", "!extendId", "$STRING", "!extendOptionsBody"],
            _extend_with(ValueType.REFERENCE),
        )
        self.doc(
            "extend:reference",
            """
            Extend the property with a new attribute of type reference. A reference is a
            URL and an optional text that will be shown instead of the URL if needed.
            """,
        )
        self._name_arg()

        self.new_pattern(
            ["_text", "!extendId", "$STRING", "!extendOptionsBody"], _extend_with(ValueType.TEXT)
        )
        self.doc(
            "extend:text",
            """
            Extend the property with a new attribute of type text. A text is a character
            sequence enclosed in single or double quotes.
            """,
        )
        self._name_arg()

    def _name_arg(self) -> None:
        self.arg(
            2,
            "name",
            "The name of the new attribute. It is used as header in report columns and the like.",
        )

    def rule_extendId(self) -> None:
        self.new_rule("extendId")
        self.new_pattern(["$ID"], _extend_id)
        self.arg(0, "id", "The ID of the new attribute. It can be used like the built-in IDs.")

    def rule_extendOptionsBody(self) -> None:
        self.new_options_rule("extendOptionsBody", "extendOptions")

    def rule_extendOptions(self) -> None:
        self.new_rule("extendOptions")
        self.optional()
        self.repeatable()

        self.single_pattern("_inherit")
        self.doc(
            "extend:inherit",
            """
            If this attribute is used, the property extension will be inherited by
            child properties from their parent property.
            """,
        )

        self.single_pattern("_scenariospecific")
        self.doc(
            "extend:scenariospecific",
            """
            If this attribute is used, the property extension is scenario specific. A
            different value can be set for each scenario.
            """,
        )

    def rule_referenceBody(self) -> None:
        self.new_options_rule("referenceBody", "referenceAttributes")

    def rule_referenceAttributes(self) -> None:
        self.new_rule("referenceAttributes")
        self.optional()
        self.repeatable()
        self.new_pattern(["_label", "$STRING"], lambda val, ctx: val[1])
        self.doc("reference:label", "The text that is shown instead of the URL of a reference.")
        self.arg(1, "text", "The label text")
