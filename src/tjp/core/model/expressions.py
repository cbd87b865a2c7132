"""
Logical expressions used by report filters (``hidetask``, ``rolluptask`` ...).

Expressions are evaluated against a property: flags test the property's
flag list, attributes read a scenario specific value.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict

from .property import Property

OPERATORS = ("|", "&", ">", "<", "=", ">=", "<=")


class LogicalFlag(BaseModel):
    """True if the property carries the flag."""

    flag: str

    model_config = ConfigDict(frozen=True)

    def eval(self, prop: Property, scenario_idx: int = 0) -> bool:
        return self.flag in prop["flags", scenario_idx]


class LogicalAttribute(BaseModel):
    """Value of a scenario specific attribute (``plan.start``)."""

    attribute: str
    scenario_idx: int

    model_config = ConfigDict(frozen=True)

    def eval(self, prop: Property, scenario_idx: int = 0) -> Any:
        return prop[self.attribute, self.scenario_idx]


class LogicalOperation(BaseModel):
    """
    Unary or binary operation.

    Without an operator the operation evaluates to its first operand. The
    unary ``~`` negates it.
    """

    operand1: Any
    operator: str | None = None
    operand2: Any = None

    def eval(self, prop: Property, scenario_idx: int = 0) -> Any:
        left = _eval(self.operand1, prop, scenario_idx)
        if self.operator is None:
            return left
        if self.operator == "~":
            return not left
        right = _eval(self.operand2, prop, scenario_idx)
        if self.operator == "|":
            return bool(left) or bool(right)
        if self.operator == "&":
            return bool(left) and bool(right)
        if self.operator == ">":
            return left > right
        if self.operator == "<":
            return left < right
        if self.operator == "=":
            return left == right
        if self.operator == ">=":
            return left >= right
        if self.operator == "<=":
            return left <= right
        raise ValueError(f"Unknown operator {self.operator}")


class LogicalExpression(BaseModel):
    """A logical operation plus the place where it was written."""

    operation: LogicalOperation
    file: str
    line: int

    def eval(self, prop: Property, scenario_idx: int = 0) -> bool:
        return bool(self.operation.eval(prop, scenario_idx))


def _eval(operand: Any, prop: Property, scenario_idx: int) -> Any:
    if isinstance(operand, (LogicalOperation, LogicalFlag, LogicalAttribute)):
        return operand.eval(prop, scenario_idx)
    return operand
