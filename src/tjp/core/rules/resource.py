"""
Resource declarations, bookings and resource allocations.
"""

from typing import TYPE_CHECKING, Any

from ..context import ParseContext
from ..model import Allocation, Booking, Resource
from .common import add_flags, close_property, reset_scenario
from .task import add_booking

SELECTION_MODES = ("maxloaded", "minloaded", "minallocated", "order", "random")


def _resource_header(val: list[Any], ctx: ParseContext) -> Resource:
    resource = Resource(ctx.require_project(), val[1], val[2], ctx.property, ctx.location)
    resource.inherit_attributes()
    ctx.property = resource
    ctx.scenario_idx = 0
    return resource


def _resource_id(val: list[Any], ctx: ParseContext) -> Resource:
    resource = ctx.require_project().resource(val[0])
    if resource is None:
        ctx.error("resource_id_expct", f"{val[0]} is not a defined resource.")
    return resource


def _resource_vacation(val: list[Any], ctx: ParseContext) -> None:
    prop = ctx.require_property()
    prop["vacations", ctx.scenario_idx] = prop["vacations", ctx.scenario_idx] + val[2]


def _resource_booking_header(val: list[Any], ctx: ParseContext) -> Any:
    resource = ctx.require_property()
    ctx.booking = Booking(
        resource=resource.id, task=val[0].full_id, intervals=val[1], location=ctx.location
    )
    return val[0]


def _overtime(val: list[Any], ctx: ParseContext) -> None:
    if val[1] < 0 or val[1] > 2:
        ctx.error("overtime_range", f"Overtime value {val[1]} out of range (0 - 2).")
    ctx.booking.overtime = val[1]


def _sloppy(val: list[Any], ctx: ParseContext) -> None:
    if val[1] < 0 or val[1] > 2:
        ctx.error("sloppy_range", f"Sloppyness value {val[1]} out of range (0 - 2).")
    ctx.booking.sloppy = val[1]


def _allocation(val: list[Any], ctx: ParseContext) -> Allocation:
    allocation = Allocation(candidates=[val[0].id])
    for name, value in val[1] or []:
        if name == "alternative":
            allocation.candidates.extend(resource.id for resource in value)
        else:
            setattr(allocation, name, value)
    return allocation


def _select_mode(val: list[Any], ctx: ParseContext) -> tuple[str, str]:
    if val[1] not in SELECTION_MODES:
        ctx.error("alloc_select_mode", f"Unknown selection mode {val[1]}")
    return ("selection_mode", val[1])


class ResourceRules:
    """
    Note: This mixin expects to be combined with GrammarBuilder via multiple inheritance.
    """

    if TYPE_CHECKING:
        new_rule: Any
        new_pattern: Any
        optional: Any
        repeatable: Any
        new_comma_list_rule: Any
        new_options_rule: Any
        doc: Any
        arg: Any

    def rule_resource(self) -> None:
        self.new_rule("resource")
        self.new_pattern(["!resourceHeader", "!resourceBody"], close_property)
        self.doc(
            "resource",
            """
            Tasks that have an effort specification need to have at least one resource
            assigned to do the work. Use this property to define resources or groups of
            resources.
            """,
        )

    def rule_resourceHeader(self) -> None:
        self.new_rule("resourceHeader")
        self.new_pattern(["_resource", "$ID", "$STRING"], _resource_header)
        self.arg(1, "id", "The ID of the resource. Resources have a global name space.")
        self.arg(2, "name", "The name of the resource")

    def rule_resourceBody(self) -> None:
        self.new_options_rule("resourceBody", "resourceAttributes")

    def rule_resourceAttributes(self) -> None:
        self.new_rule("resourceAttributes")
        self.repeatable()
        self.optional()
        self.new_pattern(["!resource"])
        self.new_pattern(["!resourceScenarioAttributes"])
        self.new_pattern(["!scenarioId", "!resourceScenarioAttributes"], reset_scenario)
        # User defined attributes are appended by 'extend'.

    def rule_resourceScenarioAttributes(self) -> None:
        self.new_rule("resourceScenarioAttributes")

        self.new_pattern(["_flags", "!flagList"], add_flags)
        self.doc(
            "resource:flags",
            """
            Attach a set of flags. The flags can be used in logical expressions to filter
            properties from the reports.
            """,
        )

        self.new_pattern(["_booking", "!resourceBooking"])
        self.doc(
            "booking",
            """
            The booking attribute can be used to report completed work. This can be part
            of the necessary effort or the whole effort. When the scenario is scheduled in
            projection mode, TaskJuggler assumes that only the work reported with bookings
            has been done up to now. It then schedules a plan for the still missing
            effort.

            This attribute is also used within the Time Sheet Server to transfer the
            bookings of the time sheets into the project plan.
            """,
        )

        self.new_pattern(["_vacation", "!vacationName", "!intervals"], _resource_vacation)
        self.doc(
            "resource:vacation",
            """
            Specify a vacation period for the resource. It can also be used to block out
            the time before a resource joined or after it left. For employees changing
            their work schedule from full-time to part-time, or vice versa, please refer
            to the 'Shift' property.
            """,
        )

        self.new_pattern(["!workinghours"])
        # User defined scenario specific attributes are appended by 'extend'.

    def rule_resourceId(self) -> None:
        self.new_rule("resourceId")
        self.new_pattern(["$ID"], _resource_id)
        self.arg(0, "resource", "The ID of a defined resource")

    def rule_resourceList(self) -> None:
        self.new_comma_list_rule("resourceList", "!resourceId")

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------

    def rule_resourceBooking(self) -> None:
        self.new_rule("resourceBooking")
        self.new_pattern(["!resourceBookingHeader", "!bookingBody"], add_booking)

    def rule_resourceBookingHeader(self) -> None:
        self.new_rule("resourceBookingHeader")
        self.new_pattern(["!taskId", "!intervals"], _resource_booking_header)
        self.arg(0, "id", "Absolute ID of a defined task")

    def rule_bookingBody(self) -> None:
        self.new_options_rule("bookingBody", "bookingAttributes")

    def rule_bookingAttributes(self) -> None:
        self.new_rule("bookingAttributes")
        self.optional()
        self.repeatable()

        self.new_pattern(["_overtime", "$INTEGER"], _overtime)
        self.doc(
            "booking:overtime",
            """
            This attribute enables bookings during off-hours and vacations. It implicitly
            sets the sloppy attribute accordingly.
            """,
        )
        self.arg(
            1,
            "value",
            """
            * 0: You can only book available working time. (Default)

            * 1: You can book off-hours as well.

            * 2: You can book working time, off-hours and vacation time.
            """,
        )

        self.new_pattern(["_sloppy", "$INTEGER"], _sloppy)
        self.doc(
            "booking:sloppy",
            """
            Controls how strict the bookings are checked against the availability of the
            resource and the working hours.
            """,
        )
        self.arg(
            1,
            "sloppyness",
            """
            * 0: Period may not contain any off-duty hours, vacation or other task
            assignments. (default)

            * 1: Period may contain off-duty hours, but no vacation time or other task
            assignments.

            * 2: Period may contain off-duty hours and vacation time, but no other task
            assignments.
            """,
        )

    # ------------------------------------------------------------------
    # Allocations
    # ------------------------------------------------------------------

    def rule_resourceAllocations(self) -> None:
        self.new_comma_list_rule("resourceAllocations", "!resourceAllocation")

    def rule_resourceAllocation(self) -> None:
        self.new_rule("resourceAllocation")
        self.new_pattern(["!resourceId", "!allocationAttributes"], _allocation)
        self.doc(
            "allocate:resources",
            """
            The optional attributes provide numerous ways to control which resource is
            used and when exactly it will be assigned to the task.
            """,
        )
        self.arg(0, "resource", "The ID of a defined resource")

    def rule_allocationAttributes(self) -> None:
        self.new_options_rule("allocationAttributes", "allocationAttribute")

    def rule_allocationAttribute(self) -> None:
        self.new_rule("allocationAttribute")
        self.optional()
        self.repeatable()

        self.new_pattern(
            ["_alternative", "!resourceList"], lambda val, ctx: ("alternative", val[1])
        )
        self.doc(
            "alternative",
            """
            Specify which resources should be allocated to the task. The optional
            attributes provide numerous ways to control which resource is used and when
            exactly it will be assigned to the task. Shifts and limits can be used to
            restrict the allocation to certain time intervals or to limit them to a
            certain maximum per time period.
            """,
        )

        self.new_pattern(["_select", "$ID"], _select_mode)
        self.doc(
            "select",
            """
            The select function controls which resource is picked from an allocation and
            it's alternatives. The selection is re-evaluated each time the resource used
            in the previous time slot becomes unavailable.

            Even for non-persistent allocations a change in the resource selection only
            happens if the resource used in the previous (or next for ASAP tasks) time
            slot has become unavailable.
            """,
        )
        self.arg(
            1,
            "function",
            """
            * maxloaded: Pick the available resource that has been used the most so far.

            * minloaded: Pick the available resource that has been used the least so far.

            * minallocated: Pick the resource that has the smallest allocation factor.
            The allocation factor is calculated from the various allocations of the
            resource across the tasks. This is the default setting.

            * order: Pick the first available resource from the list.

            * random: Pick a random resource from the list.
            """,
        )

        self.new_pattern(["_persistent"], lambda val, ctx: ("persistent", True))
        self.doc(
            "persistent",
            """
            Specifies that once a resource is picked from the list of alternatives this
            resource is used for the whole task. This is useful when several alternative
            resources have been specified. Normally the selected resource can change after
            each break. A break is an interval of at least one timeslot where no resources
            were available.
            """,
        )

        self.new_pattern(["_mandatory"], lambda val, ctx: ("mandatory", True))
        self.doc(
            "mandatory",
            """
            Makes a resource allocation mandatory. This means, that for each time slot
            only then resources are allocated when all mandatory resources are available.
            So either all mandatory resources can be allocated for the time slot, or no
            resource will be allocated.
            """,
        )
