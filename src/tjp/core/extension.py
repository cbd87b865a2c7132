"""
Runtime grammar extension.

An ``extend`` statement adds a user defined attribute to tasks or resources.
The extension registers the attribute definition on the project's property
set and appends one pattern to the attribute rule of that property type, so
the new keyword can be used in every block parsed after the statement.
Extensions cannot be undone within a session.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from .context import ParseContext
from .errors import DuplicateAttributeError, InvalidAttributeNameError, SemanticError
from .grammar import ArgumentDoc, Pattern, Registry
from .model import AttributeDefinition, Reference

logger = logging.getLogger(__name__)


class ValueType(Enum):
    """Value types of user defined attributes."""

    DATE = "date"
    TEXT = "text"
    REFERENCE = "reference"


# property type -> (attribute rule, scenario attribute rule, property set)
EXTENDABLE = {
    "task": ("taskAttributes", "taskScenarioAttributes", "tasks"),
    "resource": ("resourceAttributes", "resourceScenarioAttributes", "resources"),
}

_VALUE_TOKENS = {
    ValueType.DATE: ["$DATE"],
    ValueType.TEXT: ["$STRING"],
    ValueType.REFERENCE: ["$STRING", "!referenceBody"],
}

_VALUE_DOCS = {
    ValueType.DATE: "A date value",
    ValueType.TEXT: "A text enclosed in single or double quotes",
    ValueType.REFERENCE: "A URL; an optional label can be given in the block",
}


def _value_of(value_type: ValueType, val: list[Any]) -> Any:
    if value_type == ValueType.REFERENCE:
        labels = val[2] or []
        return Reference(url=val[1], label=labels[0] if labels else None)
    return val[1]


class GrammarExtender:
    """Applies ``extend`` statements to a registry."""

    def __init__(self, registry: Registry):
        self.registry = registry

    def check_property_type(self, context: ParseContext, property_type: str) -> str:
        if property_type not in EXTENDABLE:
            raise SemanticError(
                "Extendable property expected: task or resource",
                "extend_prop",
                context.error_context(),
            )
        return property_type

    def check_attribute_id(self, context: ParseContext, attribute_id: str) -> str:
        if not ("A" <= attribute_id[:1] <= "Z"):
            raise InvalidAttributeNameError(
                "User defined attributes IDs must start with a capital letter",
                "extend_id_cap",
                context.error_context(),
            )
        return attribute_id

    def extend(
        self,
        context: ParseContext,
        property_type: str,
        attribute_id: str,
        name: str,
        value_type: ValueType,
        inheritable: bool = False,
        scenario_specific: bool = False,
    ) -> Pattern:
        """
        Declare a new attribute and make its keyword part of the grammar.

        Returns:
            The pattern appended to the attribute rule

        Raises:
            SemanticError: ``property_type`` cannot be extended
            InvalidAttributeNameError: ``attribute_id`` does not start with a capital letter
            DuplicateAttributeError: the attribute or its keyword already exists
        """
        self.check_property_type(context, property_type)
        self.check_attribute_id(context, attribute_id)
        rule_name, scenario_rule_name, set_name = EXTENDABLE[property_type]
        keyword = attribute_id.lower()
        for candidate in (rule_name, scenario_rule_name):
            if ("lit", keyword) in self.registry.rule_first_set(candidate):
                raise DuplicateAttributeError(
                    f"The {property_type} attribute '{keyword}' is already defined",
                    "extend_duplicate",
                    context.error_context(),
                )

        project = context.require_project()
        property_set = getattr(project, set_name)
        if attribute_id in property_set.definitions:
            raise DuplicateAttributeError(
                f"Attribute '{attribute_id}' is already defined for {property_type}s",
                "extend_duplicate",
                context.error_context(),
            )
        property_set.add_definition(
            AttributeDefinition(
                attribute_id,
                name,
                value_type.value,
                inheritable=inheritable,
                scenario_specific=scenario_specific,
                user_defined=True,
            )
        )

        if scenario_specific:

            def action(val: list[Any], ctx: ParseContext) -> None:
                ctx.require_property()[attribute_id, ctx.scenario_idx] = _value_of(value_type, val)

        else:

            def action(val: list[Any], ctx: ParseContext) -> None:
                ctx.require_property().set(attribute_id, _value_of(value_type, val))

        target = scenario_rule_name if scenario_specific else rule_name
        pattern = self.registry.add_pattern(
            target, [f"_{keyword}", *_VALUE_TOKENS[value_type]], action
        )
        pattern.keyword = f"{property_type}:{keyword}"
        pattern.doc = f"User defined {value_type.value} attribute '{name}'."
        pattern.inheritable = inheritable
        pattern.args[1] = _value_arg(value_type)
        context.extensions.append(pattern.keyword)
        logger.debug(
            "Extended %s with %s (%s) in rule %s", property_type, attribute_id, value_type.value, target
        )
        return pattern


def _value_arg(value_type: ValueType) -> ArgumentDoc:
    kind = "date" if value_type == ValueType.DATE else "string"
    return ArgumentDoc("value", _VALUE_DOCS[value_type], f"<{kind}>")
