"""
Properties and property sets.

A property is a node of one of the project trees (scenarios, tasks,
resources). Its attributes are declared by :class:`AttributeDefinition`
entries of the owning :class:`PropertySet`; the built-in definitions are
created with the project and user defined ones are added by ``extend``.

Attributes are either stored once per property (``prop.get(name)``,
``prop.set(name, value)``) or, for scenario specific attributes, once per
scenario (``prop[name, scenario_idx]``).
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..errors import DuplicateAttributeError, SemanticError
from ..tokens import SourceLocation

if TYPE_CHECKING:
    from .project import Project

logger = logging.getLogger(__name__)


@dataclass
class AttributeDefinition:
    """
    Declaration of one property attribute.

    Attributes:
        id: Attribute ID as used by the semantic actions
        name: Human readable name, e.g. for report column headers
        value_type: Kind of value (``date``, ``text``, ``reference``, ``list`` ...)
        inheritable: Child properties start with the parent's value
        scenario_specific: A separate value is stored per scenario
        default: Initial value; mutable defaults are copied per property
        user_defined: Added by an ``extend`` statement
    """

    id: str
    name: str
    value_type: str
    inheritable: bool = False
    scenario_specific: bool = False
    default: Any = None
    user_defined: bool = False


class PropertySet:
    """The attribute definitions and the properties of one kind."""

    def __init__(self, project: Project, kind: str, definitions: list[AttributeDefinition]):
        self.project = project
        self.kind = kind
        self.definitions: dict[str, AttributeDefinition] = {d.id: d for d in definitions}
        self._properties: dict[str, Property] = {}

    def add_definition(self, definition: AttributeDefinition) -> None:
        if definition.id in self.definitions:
            raise DuplicateAttributeError(
                f"Attribute '{definition.id}' is already defined for {self.kind}s",
                "extend_duplicate",
            )
        self.definitions[definition.id] = definition
        logger.debug("Added attribute %s to %s set", definition.id, self.kind)

    def definition(self, attribute: str) -> AttributeDefinition:
        try:
            return self.definitions[attribute]
        except KeyError:
            raise SemanticError(
                f"Unknown {self.kind} attribute '{attribute}'", "unknown_attribute"
            ) from None

    def add(self, prop: Property) -> None:
        if prop.full_id in self._properties:
            raise SemanticError(
                f"{self.kind.capitalize()} '{prop.full_id}' has already been defined",
                "duplicate_id",
            )
        self._properties[prop.full_id] = prop

    def clear_properties(self) -> None:
        self._properties.clear()

    def get(self, full_id: str) -> Property | None:
        return self._properties.get(full_id)

    def index_of(self, full_id: str) -> int | None:
        for idx, key in enumerate(self._properties):
            if key == full_id:
                return idx
        return None

    def __getitem__(self, idx: int) -> Property:
        return list(self._properties.values())[idx]

    def __contains__(self, full_id: object) -> bool:
        return full_id in self._properties

    def __iter__(self) -> Iterator[Property]:
        return iter(self._properties.values())

    def __len__(self) -> int:
        return len(self._properties)


@dataclass(eq=False)
class Property:
    """Base class of scenarios, tasks and resources."""

    project: Project
    id: str
    name: str
    parent: Property | None = None
    location: SourceLocation | None = None
    children: list[Property] = field(default_factory=list, init=False, repr=False)
    _values: dict[str, Any] = field(default_factory=dict, init=False, repr=False)
    _scenario_values: dict[int, dict[str, Any]] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        self.property_set.add(self)
        if self.parent is not None:
            self.parent.children.append(self)

    @property
    def property_set(self) -> PropertySet:
        raise NotImplementedError

    @property
    def full_id(self) -> str:
        return self.id

    @property
    def level(self) -> int:
        return 0 if self.parent is None else self.parent.level + 1

    def __str__(self) -> str:
        return f"{self.property_set.kind} {self.full_id}"

    # ------------------------------------------------------------------
    # Attribute access
    # ------------------------------------------------------------------

    def _default(self, definition: AttributeDefinition) -> Any:
        return copy.deepcopy(definition.default)

    def get(self, attribute: str) -> Any:
        definition = self.property_set.definition(attribute)
        if attribute not in self._values:
            self._values[attribute] = self._default(definition)
        return self._values[attribute]

    def set(self, attribute: str, value: Any) -> None:
        self.property_set.definition(attribute)
        self._values[attribute] = value

    def __getitem__(self, key: tuple[str, int]) -> Any:
        attribute, scenario_idx = key
        definition = self.property_set.definition(attribute)
        values = self._scenario_values.setdefault(scenario_idx, {})
        if attribute not in values:
            values[attribute] = self._default(definition)
        return values[attribute]

    def __setitem__(self, key: tuple[str, int], value: Any) -> None:
        attribute, scenario_idx = key
        self.property_set.definition(attribute)
        self._scenario_values.setdefault(scenario_idx, {})[attribute] = value

    def provided(self, attribute: str, scenario_idx: int | None = None) -> bool:
        """True if the attribute has been assigned (or read) on this property."""
        if scenario_idx is None:
            return attribute in self._values
        return attribute in self._scenario_values.get(scenario_idx, {})

    def inherit_attributes(self) -> None:
        """Copy the values of inheritable attributes from the parent."""
        if self.parent is None:
            return
        for definition in self.property_set.definitions.values():
            if not definition.inheritable:
                continue
            if definition.scenario_specific:
                for idx, values in self.parent._scenario_values.items():
                    if definition.id in values:
                        self[definition.id, idx] = copy.deepcopy(values[definition.id])
            elif definition.id in self.parent._values:
                self._values[definition.id] = copy.deepcopy(self.parent._values[definition.id])


@dataclass(eq=False)
class Scenario(Property):
    @property
    def property_set(self) -> PropertySet:
        return self.project.scenarios


@dataclass(eq=False)
class Task(Property):
    bookings: dict[int, list] = field(default_factory=dict, init=False, repr=False)

    @property
    def property_set(self) -> PropertySet:
        return self.project.tasks

    @property
    def full_id(self) -> str:
        if self.parent is None:
            return self.id
        return f"{self.parent.full_id}.{self.id}"

    def add_booking(self, scenario_idx: int, booking: Any) -> None:
        self.bookings.setdefault(scenario_idx, []).append(booking)


@dataclass(eq=False)
class Resource(Property):
    @property
    def property_set(self) -> PropertySet:
        return self.project.resources
