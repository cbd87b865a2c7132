"""
Actions shared by several rule groups.
"""

from typing import Any

from ..context import ParseContext


def close_property(val: list[Any], ctx: ParseContext) -> Any:
    """End of a property block: the parent becomes the current property."""
    prop = ctx.require_property()
    ctx.property = prop.parent
    ctx.scenario_idx = 0
    return prop


def reset_scenario(val: list[Any], ctx: ParseContext) -> None:
    """A scenario prefix only applies to the attribute that follows it."""
    ctx.scenario_idx = 0


def add_flags(val: list[Any], ctx: ParseContext) -> None:
    prop = ctx.require_property()
    flags = prop["flags", ctx.scenario_idx]
    prop["flags", ctx.scenario_idx] = flags + [flag for flag in val[1] if flag not in flags]
