"""
The TJP grammar.

Each mixin declares the rules of one area of the language; ``TjpGrammar``
combines them with :class:`~tjp.core.grammar.GrammarBuilder`.
"""

import logging

from ..grammar import GrammarBuilder, Registry
from .expressions import ExpressionRules
from .extend import ExtendRules
from .project import ProjectRules
from .report import ReportRules
from .resource import ResourceRules
from .scenario import ScenarioRules
from .task import TaskRules
from .timing import TimingRules

logger = logging.getLogger(__name__)

START_RULE = "project"


class TjpGrammar(
    GrammarBuilder,
    ProjectRules,
    ScenarioRules,
    TaskRules,
    ResourceRules,
    ReportRules,
    ExpressionRules,
    ExtendRules,
    TimingRules,
):
    """
    Complete TJP grammar built from modular mixins.
    """

    pass


def build_grammar(check: bool = True) -> Registry:
    """
    Build a fresh registry holding the whole TJP grammar.

    Every call returns a new registry; ``extend`` statements mutate the
    registry they are parsed with, so parse sessions must not share one.

    Args:
        check: Verify that the alternatives of every rule are distinguishable
            by their first token.
    """
    registry = TjpGrammar().build()
    if check:
        registry.check_first_sets()
    logger.debug("TJP grammar ready (%d rules)", len(registry))
    return registry


__all__ = ["START_RULE", "TjpGrammar", "build_grammar"]
