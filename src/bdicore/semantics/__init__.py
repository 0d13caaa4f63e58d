# src/bdicore/semantics/__init__.py
"""
Runtime semantics of the goal-lifecycle core: events, intentions, the
circumstance holding them, goal listeners, and goal dropping.
"""

from .circumstance import ActionExec, Circumstance
from .context import ReasoningContext
from .drop import (
    DropOutcome,
    DropPolicy,
    DropReport,
    FailGoalPolicy,
    GoalDropper,
    SucceedGoalPolicy,
)
from .event import Event
from .intention import BodyStep, GoalFrame, Intention, IntentionState, PlanBody, StepKind
from .listeners import FinishState, GoalListener, GoalListenerRegistry, MetaEventGoalListener
from .locator import GoalLocator, GoalOccurrence, InEventQueue, InIntentionStack
from .plan_library import Plan, PlanLibrary, PlanLibraryProtocol

__all__ = [
    "ActionExec",
    "BodyStep",
    "Circumstance",
    "DropOutcome",
    "DropPolicy",
    "DropReport",
    "Event",
    "FailGoalPolicy",
    "FinishState",
    "GoalDropper",
    "GoalFrame",
    "GoalListener",
    "GoalListenerRegistry",
    "GoalLocator",
    "GoalOccurrence",
    "InEventQueue",
    "InIntentionStack",
    "Intention",
    "IntentionState",
    "MetaEventGoalListener",
    "Plan",
    "PlanBody",
    "PlanLibrary",
    "PlanLibraryProtocol",
    "ReasoningContext",
    "StepKind",
    "SucceedGoalPolicy",
]
