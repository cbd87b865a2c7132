"""
Logical expressions used by report filters.
"""

from typing import TYPE_CHECKING, Any

from ..context import ParseContext
from ..model import (
    OPERATORS,
    LogicalAttribute,
    LogicalExpression,
    LogicalFlag,
    LogicalOperation,
)


def _logical_expression(val: list[Any], ctx: ParseContext) -> LogicalExpression:
    return LogicalExpression(operation=val[0], file=ctx.location.file, line=ctx.location.line)


def _operation(val: list[Any], ctx: ParseContext) -> LogicalOperation:
    if val[1] is None:
        return LogicalOperation(operand1=val[0])
    operator, operand2 = val[1]
    return LogicalOperation(operand1=val[0], operator=operator, operand2=operand2)


def _attribute(val: list[Any], ctx: ParseContext) -> LogicalAttribute:
    parts = val[0].split(".")
    if len(parts) != 2:
        ctx.error(
            "logical_attribute", "Attributes must be specified as <scenarioID>.<attribute>"
        )
    scenario, attribute = parts
    scenario_idx = ctx.require_project().scenario_idx(scenario)
    if scenario_idx is None:
        ctx.error("unknown_scenario", f"Unknown scenario ID {scenario}")
    return LogicalAttribute(attribute=attribute, scenario_idx=scenario_idx)


def _flag_or_function(val: list[Any], ctx: ParseContext) -> LogicalFlag:
    if val[1] is not None:
        ctx.error("logical_function", f"Unknown function {val[0]}")
    if val[0] not in ctx.require_project()["flags"]:
        ctx.error("undecl_flag", f"Undeclared flag {val[0]}")
    return LogicalFlag(flag=val[0])


def _constant(val: list[Any], ctx: ParseContext) -> LogicalOperation:
    return LogicalOperation(operand1=val[0])


class ExpressionRules:
    """
    Note: This mixin expects to be combined with GrammarBuilder via multiple inheritance.
    """

    if TYPE_CHECKING:
        new_rule: Any
        new_pattern: Any
        optional: Any
        new_comma_list_rule: Any
        doc: Any
        arg: Any

    def rule_logicalExpression(self) -> None:
        self.new_rule("logicalExpression")
        self.new_pattern(["!operation"], _logical_expression)
        self.doc(
            "logicalexpression",
            """
            A logical expression is a combination of operands and mathematical operations.
            The final result of a logical expression is always true or false. Logical
            expressions are used to reduce the properties in a report to a certain
            subset or to select alternatives for the cell content of a table. When used
            with attributes like hidetask or hideresource the logical expression
            evaluates to true for a certain property, this property is hidden or rolled-up
            in the report.

            Operands can be previously declared flags, scenario specific attributes
            (plan.start), dates, integers or strings. An operand can also be a nested
            logical expression enclosed in parentheses.
            """,
        )
        self.arg(
            0,
            "expression",
            """
            Supported operators are "~" (logical not), ">", "<", "=", ">=", "<="
            (comparisons), "&" (logical and) and "|" (logical or). Binary operators have
            no precedence and group to the right: "a | b & c" means "a | (b & c)". Use
            parentheses to group differently.
            """,
        )

    def rule_operation(self) -> None:
        self.new_rule("operation")
        self.new_pattern(["!operand", "!operatorAndOperand"], _operation)

    def rule_operatorAndOperand(self) -> None:
        self.new_rule("operatorAndOperand")
        self.optional()
        for operator in OPERATORS:
            self.new_pattern([f"_{operator}", "!operation"], lambda val, ctx: (val[0], val[1]))

    def rule_operand(self) -> None:
        self.new_rule("operand")
        self.new_pattern(["_(", "!operation", "_)"], lambda val, ctx: val[1])
        self.new_pattern(
            ["_~", "!operand"], lambda val, ctx: LogicalOperation(operand1=val[1], operator="~")
        )
        self.new_pattern(["$ABSOLUTE_ID"], _attribute)
        self.new_pattern(["$DATE"], _constant)
        self.new_pattern(["$ID", "!argumentList"], _flag_or_function)
        self.new_pattern(["$INTEGER"], _constant)
        self.new_pattern(["$STRING"], _constant)

    def rule_argumentList(self) -> None:
        self.new_rule("argumentList")
        self.optional()
        self.new_pattern(["_(", "!arguments", "_)"], lambda val, ctx: val[1])

    def rule_arguments(self) -> None:
        self.new_comma_list_rule("arguments", "!operation")
