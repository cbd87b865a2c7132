"""
Task declarations, task attributes and task dependencies.
"""

from typing import TYPE_CHECKING, Any

from ..context import ParseContext
from ..model import Booking, Task, TaskDependency
from .common import add_flags, close_property, reset_scenario


def _task_header(val: list[Any], ctx: ParseContext) -> Task:
    task = Task(ctx.require_project(), val[1], val[2], ctx.property, ctx.location)
    task.inherit_attributes()
    ctx.property = task
    ctx.scenario_idx = 0
    return task


def _note(val: list[Any], ctx: ParseContext) -> None:
    ctx.require_property().set("note", val[1])


def _task_id(val: list[Any], ctx: ParseContext) -> Task:
    task = ctx.require_project().task(val[0])
    if task is None:
        ctx.error("unknown_task", f"Unknown task {val[0]}")
    return task


def _relative_task_id(val: list[Any], ctx: ParseContext) -> str:
    task = ctx.property
    task_id = val[0]
    while task is not None and task_id.startswith("!"):
        task_id = task_id[1:]
        task = task.parent
    if task_id.startswith("!"):
        ctx.error("too_many_bangs", "Too many '!' for relative task in this context.")
    if task is not None:
        return f"{task.full_id}.{task_id}"
    return task_id


def _dependency(on_end: bool) -> Any:
    def action(val: list[Any], ctx: ParseContext) -> TaskDependency:
        ctx.task_dependency = TaskDependency(task_id=val[0], on_end=on_end)
        return ctx.task_dependency

    return action


def _gap_duration(val: list[Any], ctx: ParseContext) -> None:
    ctx.task_dependency.gap_duration = val[1]


def _gap_length(val: list[Any], ctx: ParseContext) -> None:
    ctx.task_dependency.gap_length = val[1]


def _on_end(on_end: bool) -> Any:
    def action(val: list[Any], ctx: ParseContext) -> None:
        ctx.task_dependency.on_end = on_end

    return action


def _task_booking_header(val: list[Any], ctx: ParseContext) -> Task:
    task = ctx.require_property()
    ctx.booking = Booking(
        resource=val[0].id, task=task.full_id, intervals=val[1], location=ctx.location
    )
    return task


def add_booking(val: list[Any], ctx: ParseContext) -> Booking:
    val[0].add_booking(ctx.scenario_idx, ctx.booking)
    return ctx.booking


def _append(attribute: str, forward: bool | None = None) -> Any:
    def action(val: list[Any], ctx: ParseContext) -> None:
        prop = ctx.require_property()
        prop[attribute, ctx.scenario_idx] = prop[attribute, ctx.scenario_idx] + val[1]
        if forward is not None:
            prop["forward", ctx.scenario_idx] = forward

    return action


def _assign(attribute: str, forward: bool | None = None) -> Any:
    def action(val: list[Any], ctx: ParseContext) -> None:
        prop = ctx.require_property()
        prop[attribute, ctx.scenario_idx] = val[1] if len(val) > 1 else True
        if forward is not None:
            prop["forward", ctx.scenario_idx] = forward

    return action


def _complete(val: list[Any], ctx: ParseContext) -> None:
    if val[1] < 0 or val[1] > 100:
        ctx.error("task_complete", "Complete value must be between 0 and 100")
    ctx.require_property()["complete", ctx.scenario_idx] = val[1]


def _effort(val: list[Any], ctx: ParseContext) -> None:
    if val[1] <= 0:
        ctx.error("effort_zero", "Effort value must be larger than 0")
    ctx.require_property()["effort", ctx.scenario_idx] = val[1]


def _period(val: list[Any], ctx: ParseContext) -> None:
    prop = ctx.require_property()
    prop["start", ctx.scenario_idx] = val[1].start
    prop["end", ctx.scenario_idx] = val[1].end


def _priority(val: list[Any], ctx: ParseContext) -> None:
    if val[1] < 0 or val[1] > 1000:
        ctx.error("task_priority", "Priority must have a value between 0 and 1000")
    ctx.require_property()["priority", ctx.scenario_idx] = val[1]


def _responsible(val: list[Any], ctx: ParseContext) -> None:
    ctx.require_property()["responsible", ctx.scenario_idx] = [r.id for r in val[1]]


def _scheduling(val: list[Any], ctx: ParseContext) -> None:
    if val[1] not in ("asap", "alap"):
        ctx.error("task_scheduling", "Scheduling must be 'asap' or 'alap'")
    ctx.require_property()["forward", ctx.scenario_idx] = val[1] == "asap"


class TaskRules:
    """
    Note: This mixin expects to be combined with GrammarBuilder via multiple inheritance.
    """

    if TYPE_CHECKING:
        new_rule: Any
        new_pattern: Any
        single_pattern: Any
        optional: Any
        repeatable: Any
        new_comma_list_rule: Any
        new_options_rule: Any
        doc: Any
        arg: Any
        also: Any
        inheritable: Any

    def rule_task(self) -> None:
        self.new_rule("task")
        self.new_pattern(["!taskHeader", "!taskBody"], close_property)
        self.doc(
            "task",
            """
            Tasks are the central elements of a project plan. Use a task to specify the
            various steps and phases of the project. Depending on the attributes of that
            task, a task can be a container task, a milestone or a regular leaf task. The
            latter may have resources assigned. By specifying dependencies the user can
            force a certain sequence of tasks.
            """,
        )

    def rule_taskHeader(self) -> None:
        self.new_rule("taskHeader")
        self.new_pattern(["_task", "$ID", "$STRING"], _task_header)
        self.arg(1, "id", "The ID of the task")
        self.arg(2, "name", "The name of the task")

    def rule_taskBody(self) -> None:
        self.new_options_rule("taskBody", "taskAttributes")

    def rule_taskAttributes(self) -> None:
        self.new_rule("taskAttributes")
        self.repeatable()
        self.optional()

        self.new_pattern(["_note", "$STRING"], _note)
        self.doc(
            "task:note",
            """
            Attach a note to the task. This is usually a more detailed specification of
            what the task is about.
            """,
        )
        self.arg(1, "note", "The note text")

        self.new_pattern(["!task"])
        self.new_pattern(["!taskScenarioAttributes"])
        self.new_pattern(["!scenarioId", "!taskScenarioAttributes"], reset_scenario)
        # User defined attributes are appended by 'extend'.

    def rule_taskId(self) -> None:
        self.new_rule("taskId")
        self.new_pattern(["!taskIdUnverifd"], _task_id)

    def rule_taskIdUnverifd(self) -> None:
        self.new_rule("taskIdUnverifd")
        self.single_pattern("$ABSOLUTE_ID")
        self.single_pattern("$ID")

    # ------------------------------------------------------------------
    # Dependencies
    # ------------------------------------------------------------------

    def rule_taskDep(self) -> None:
        self.new_rule("taskDep")
        self.new_pattern(["!taskDepHeader", "!taskDepBody"], lambda val, ctx: val[0])
        self.doc("taskreference", "Reference to another task.")
        self.arg(
            0,
            "id",
            """
            Absolute or relative ID of a task. An absolute task ID is a string of all
            parent task IDs concatenated with dots. A relative ID starts with one or more
            bangs. Each bang moves the scope to find the task with the specified ID to the
            parent of the current task.
            """,
        )

    def rule_taskDepHeader(self) -> None:
        self.new_rule("taskDepHeader")
        self.new_pattern(["!taskDepId"], _dependency(on_end=True))

    def rule_taskDepId(self) -> None:
        self.new_rule("taskDepId")
        self.single_pattern("$ABSOLUTE_ID")
        self.single_pattern("$ID")
        self.new_pattern(["$RELATIVE_ID"], _relative_task_id)

    def rule_taskDepList(self) -> None:
        self.new_comma_list_rule("taskDepList", "!taskDep")

    def rule_taskDepBody(self) -> None:
        self.new_options_rule("taskDepBody", "taskDepAttributes")

    def rule_taskDepAttributes(self) -> None:
        self.new_rule("taskDepAttributes")
        self.optional()
        self.repeatable()

        self.new_pattern(["_gapduration", "!intervalDuration"], _gap_duration)
        self.doc(
            "gapduration",
            """
            Specifies the minimum required gap between the end of a preceding task and the
            start of this task, or the start of a following task and the end of this task.
            This is calendar time, not working time. 7d means one week.
            """,
        )

        self.new_pattern(["_gaplength", "!workingDuration"], _gap_length)
        self.doc(
            "gaplength",
            """
            Specifies the minimum required gap between the end of a preceding task and the
            start of this task, or the start of a following task and the end of this task.
            This is working time, not calendar time. 7d means 7 working days, not one
            week. Whether a day is considered a working day or not depends on the defined
            working hours and global vacations.
            """,
        )

        self.new_pattern(["_onend"], _on_end(True))
        self.doc("onend", "The target of the dependency is the end of the task.")

        self.new_pattern(["_onstart"], _on_end(False))
        self.doc("onstart", "The target of the dependency is the start of the task.")

    def rule_taskPred(self) -> None:
        self.new_rule("taskPred")
        self.new_pattern(["!taskPredHeader", "!taskDepBody"], lambda val, ctx: val[0])

    def rule_taskPredHeader(self) -> None:
        self.new_rule("taskPredHeader")
        self.new_pattern(["!taskDepId"], _dependency(on_end=False))

    def rule_taskPredList(self) -> None:
        self.new_comma_list_rule("taskPredList", "!taskPred")

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------

    def rule_taskBooking(self) -> None:
        self.new_rule("taskBooking")
        self.new_pattern(["!taskBookingHeader", "!bookingBody"], add_booking)

    def rule_taskBookingHeader(self) -> None:
        self.new_rule("taskBookingHeader")
        self.new_pattern(["!resourceId", "!intervals"], _task_booking_header)
        self.arg(0, "resource", "ID of a defined resource")

    # ------------------------------------------------------------------
    # Scenario specific attributes
    # ------------------------------------------------------------------

    def rule_taskScenarioAttributes(self) -> None:
        self.new_rule("taskScenarioAttributes")

        self.new_pattern(["_allocate", "!resourceAllocations"], _append("allocate"))
        self.doc(
            "allocate",
            """
            Specify which resources should be allocated to the task. The optional
            attributes provide numerous ways to control which resource is used and when
            exactly it will be assigned to the task. Shifts and limits can be used to
            restrict the allocation to certain time intervals or to limit them to a
            certain maximum per time period.
            """,
        )
        self.arg(1, "resources", "^allocate:resources")

        self.new_pattern(["_booking", "!taskBooking"])
        self.doc(
            "task:booking",
            """
            Bookings can be used to report already completed work by specifying the exact
            time intervals a certain resource has worked on this task.
            """,
        )

        self.new_pattern(["_complete", "!number"], _complete)
        self.doc(
            "complete",
            """
            Specifies what percentage of the task is already completed. This can be useful
            for project tracking. Reports with calendar elements may show the completed
            part of the task in a different color. The completion percentage has no impact
            on the scheduler. It's meant for documentation purposes only.
            Tasks may not have subtasks if this attribute is used.
            """,
        )
        self.arg(1, "percent", "The percent value. It must be between 0 and 100.")

        self.new_pattern(["_depends", "!taskDepList"], _append("depends", forward=True))
        self.doc(
            "depends",
            """
            Specifies that the task cannot start before the specified tasks have been
            finished.

            By using the 'depends' attribute, the scheduling policy is automatically set
            to asap. If both depends and precedes are used, the last policy counts.
            """,
        )
        self.arg(1, "tasks", "^taskreference")

        self.new_pattern(["_duration", "!calendarDuration"], _assign("duration"))
        self.doc(
            "duration",
            """
            Specifies the time the task occupies the resources. This is calendar time, not
            working time. 7d means one week. If resources are specified they are allocated
            when available. Availability of resources has no impact on the duration of the
            task. It will always be the specified duration.

            Tasks may not have subtasks if this attribute is used.
            """,
        )
        self.also(["effort", "length"])

        self.new_pattern(["_effort", "!workingDuration"], _effort)
        self.doc(
            "effort",
            """
            Specifies the effort needed to complete the task. An effort of 4d can be done
            with 2 full-time resources in 2 days. The task will not finish before the
            resources have contributed the specified effort. So the duration of the task
            will depend on the availability of the resources.

            WARNING: In almost all real world projects effort is not the product of time
            and resources. This is only true if the task can be partitioned without adding
            any overhead. For more information about this read "The Mythical Man-Month" by
            Frederick P. Brooks, Jr.

            Tasks may not have subtasks if this attribute is used.
            """,
        )
        self.also(["duration", "length"])

        self.new_pattern(["_end", "!valDate"], _assign("end", forward=False))
        self.doc(
            "end",
            """
            The end date of the task. When specified for the top-level (default) scenario
            this attributes also implicitly sets the scheduling policy of the tasks to
            alap.
            """,
        )

        self.new_pattern(["_flags", "!flagList"], add_flags)
        self.doc(
            "task:flags",
            """
            Attach a set of flags. The flags can be used in logical expressions to filter
            properties from the reports.
            """,
        )

        self.new_pattern(["_length", "!workingDuration"], _assign("length"))
        self.doc(
            "length",
            """
            Specifies the time the task occupies the resources. This is working time, not
            calendar time. 7d means 7 working days, not one week. Whether a day is
            considered a working day or not depends on the defined working hours and
            global vacations. A task with a length specification may have resource
            allocations. Resources are allocated when they are available. The availability
            has no impact on the duration of the task. A day where none of the specified
            resources is available is still considered a working day, if there is no
            global vacation or global working time defined.

            Tasks may not have subtasks if this attribute is used.
            """,
        )
        self.also(["duration", "effort"])

        self.new_pattern(["_maxend", "!valDate"], _assign("maxend"))
        self.doc(
            "maxend",
            """
            Specifies the maximum wanted end time of the task. The value is not used
            during scheduling, but is checked after all tasks have been scheduled. If the
            end of the task is later than the specified value, then an error is reported.
            """,
        )

        self.new_pattern(["_maxstart", "!valDate"], _assign("maxstart"))
        self.doc(
            "maxstart",
            """
            Specifies the maximum wanted start time of the task. The value is not used
            during scheduling, but is checked after all tasks have been scheduled. If the
            start of the task is later than the specified value, then an error is
            reported.
            """,
        )

        self.new_pattern(["_milestone"], _assign("milestone"))
        self.doc(
            "milestone",
            """
            Turns the task into a special task that has no duration. You may not specify a
            duration, length, effort or subtasks for a milestone task.

            A task that only has a start or an end specification and no duration
            specification or sub tasks, will be recognized as milestone automatically.
            """,
        )

        self.new_pattern(["_minend", "!valDate"], _assign("minend"))
        self.doc(
            "minend",
            """
            Specifies the minimum wanted end time of the task. The value is not used
            during scheduling, but is checked after all tasks have been scheduled. If the
            end of the task is earlier than the specified value, then an error is
            reported.
            """,
        )

        self.new_pattern(["_minstart", "!valDate"], _assign("minstart"))
        self.doc(
            "minstart",
            """
            Specifies the minimum wanted start time of the task. The value is not used
            during scheduling, but is checked after all tasks have been scheduled. If the
            start of the task is earlier than the specified value, then an error is
            reported.
            """,
        )

        self.new_pattern(["_period", "!interval"], _period)
        self.doc(
            "period",
            """
            This property is a shortcut for setting the start and end property at the same
            time. In contrast to using these, it does not change the scheduling direction.
            """,
        )

        self.new_pattern(["_precedes", "!taskPredList"], _append("precedes", forward=False))
        self.doc(
            "precedes",
            """
            Specifies that the tasks with the specified IDs cannot start before the task
            has been finished. If multiple IDs are specified, they must be separated by
            commas. IDs must be either global or relative. A relative ID starts with a
            number of '!'. Each '!' moves the scope to the parent task. Global IDs do not
            contain '!', but have IDs separated by dots.

            By using the 'precedes' attribute, the scheduling policy is automatically set
            to alap. If both depends and precedes are used within a task, the last policy
            counts.
            """,
        )
        self.arg(1, "tasks", "^taskreference")

        self.new_pattern(["_priority", "$INTEGER"], _priority)
        self.doc(
            "priority",
            """
            Specifies the priority of the task. A task with higher priority is more
            likely to get the requested resources. The default priority value of all tasks
            is 500. Don't confuse the priority of a tasks with the importance or urgency
            of a task. It only increases the chances that the tasks gets the requested
            resources. It does not mean that the task happens earlier, though that is
            usually the effect you will see. It also does not have any effect on tasks
            that don't have any resources assigned (e.g. milestones).

            This attribute is inherited by subtasks if specified prior to the definition
            of the subtask.
            """,
        )
        self.arg(1, "value", "Priority value (1 - 1000)")
        self.inheritable()

        self.new_pattern(["_responsible", "!resourceList"], _responsible)
        self.doc(
            "responsible",
            """
            The ID of the resource that is responsible for this task. This value is for
            documentation purposes only. It's not used by the scheduler.
            """,
        )

        self.new_pattern(["_scheduled"], _assign("scheduled"))
        self.doc(
            "scheduled",
            """
            This is mostly for internal use. It specifies that the task can be ignored for
            scheduling in the scenario.
            """,
        )

        self.new_pattern(["_scheduling", "$ID"], _scheduling)
        self.doc(
            "scheduling",
            """
            Specifies the scheduling policy for the task. A task can be scheduled from
            start to end (As Soon As Possible, asap) or from end to start (As Late As
            Possible, alap).

            A task can be scheduled from start to end (ASAP mode) when it has a hard
            (start) or soft (depends) criteria for the start time. A task can be scheduled
            from end to start (ALAP mode) when it has a hard (end) or soft (precedes)
            criteria for the end time.

            Some task attributes set the scheduling policy implicitly. This attribute can
            be used to explicitly set the scheduling policy of the task to a certain
            direction. To avoid it being overwritten again by an implicit attribute this
            attribute should always be the last attribute of the task.

            As a general rule, try to avoid ALAP tasks whenever possible. Have a close
            eye on tasks that have been switched implicitly to ALAP mode because the
            end attribute comes after the start attribute.
            """,
        )
        self.arg(1, "policy", "Possible values are asap or alap")

        self.new_pattern(["_start", "!valDate"], _assign("start", forward=True))
        self.doc(
            "start",
            """
            The start date of the task. When specified for the top-level (default)
            scenario this attribute also implicitly sets the scheduling policy of the task
            to asap.
            """,
        )
        self.also(["end", "period", "maxstart", "minstart", "scheduling"])
        # User defined scenario specific attributes are appended by 'extend'.
