# src/bdicore/stdlib.py
"""
Internal actions that drop goals.

``.fail_goal(G)``
    Aborts goals ``G`` as if a plan for them had failed. If ``G`` is a
    subgoal of a plan ``g0 <- !G; ...`` the event ``-!g0`` is generated; if
    ``G`` was not a subgoal (posted with ``!!G`` or by an achieve request)
    the event is ``-!G``. Goals still queued as ``+!G`` events become
    ``-!G``. Suspended intentions are searched as well.

``.succeed_goal(G)``
    Considers goals ``G`` achieved; the plans that posted them continue
    after the ``!G`` step.

Both take exactly one literal argument, resolved against the bindings of
the calling plan, and always succeed (dropping nothing is not a failure).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Dict, Sequence

from .exceptions import MalformedPatternError
from .semantics.drop import FailGoalPolicy, SucceedGoalPolicy
from .syntax.terms import Literal, Term
from .syntax.unifier import Unifier

if TYPE_CHECKING:
    from .agent import Agent

logger = logging.getLogger(__name__)

InternalAction = Callable[["Agent", Sequence[Term], Unifier], bool]


def check_goal_argument(name: str, args: Sequence[Term], unifier: Unifier) -> Literal:
    """Validate the single goal argument and apply the caller's bindings."""
    if len(args) != 1:
        raise MalformedPatternError(
            tuple(str(a) for a in args), f"'.{name}' expects exactly 1 argument, got {len(args)}."
        )
    goal = args[0].capply(unifier)
    if not isinstance(goal, Literal):
        raise MalformedPatternError(goal, f"The argument of '.{name}' must be a literal.")
    return goal


def fail_goal(agent: Agent, args: Sequence[Term], unifier: Unifier) -> bool:
    goal = check_goal_argument("fail_goal", args, unifier)
    agent.drop_goal(goal, FailGoalPolicy(), unifier)
    return True


def succeed_goal(agent: Agent, args: Sequence[Term], unifier: Unifier) -> bool:
    goal = check_goal_argument("succeed_goal", args, unifier)
    agent.drop_goal(goal, SucceedGoalPolicy(), unifier)
    return True


INTERNAL_ACTIONS: Dict[str, InternalAction] = {
    ".fail_goal": fail_goal,
    ".succeed_goal": succeed_goal,
}


def execute_internal_action(agent: Agent, action: Literal, unifier: Unifier) -> bool:
    """
    Run an internal action given as a literal such as ``.fail_goal(go(1,3))``.

    The leading dot may be omitted from the functor.

    Raises:
        KeyError: If no internal action has that name.
    """
    name = action.functor if action.functor.startswith(".") else "." + action.functor
    try:
        handler = INTERNAL_ACTIONS[name]
    except KeyError:
        raise KeyError(f"Unknown internal action: {name}") from None
    logger.debug("Executing internal action %s", action)
    return handler(agent, action.terms, unifier)
