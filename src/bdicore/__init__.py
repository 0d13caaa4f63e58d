# src/bdicore/__init__.py
"""
bdicore - goal lifecycle core of a BDI (Belief-Desire-Intention) agent interpreter.

Agents pursue goals through intentions, stacks of goal frames each running
a plan. This library implements how a goal that is being pursued (queued,
running, or buried inside a suspended intention) is dropped, and which
failure or success signal that produces for the goals depending on it.
"""

from importlib.metadata import PackageNotFoundError, version

from .agent import Agent
from .config import AgentConfig, GoalsConfig, IntentionSet, LoggingConfig, load_agent_config
from .exceptions import (
    BDICoreError,
    ConfigError,
    ListenerRegistryBusyError,
    MalformedPatternError,
    StructuralInconsistencyError,
    SyntaxParseError,
)
from .semantics import (
    DropOutcome,
    DropReport,
    Event,
    FailGoalPolicy,
    FinishState,
    GoalFrame,
    GoalListener,
    Intention,
    PlanBody,
    SucceedGoalPolicy,
)
from .syntax import Literal, Trigger, Unifier, parse_literal

try:
    __version__ = version("bdicore")
except PackageNotFoundError:
    __version__ = "0.0.0"


__all__ = [
    "Agent",
    "AgentConfig",
    "BDICoreError",
    "ConfigError",
    "DropOutcome",
    "DropReport",
    "Event",
    "FailGoalPolicy",
    "FinishState",
    "GoalFrame",
    "GoalListener",
    "GoalsConfig",
    "Intention",
    "IntentionSet",
    "ListenerRegistryBusyError",
    "Literal",
    "LoggingConfig",
    "MalformedPatternError",
    "PlanBody",
    "StructuralInconsistencyError",
    "SucceedGoalPolicy",
    "SyntaxParseError",
    "Trigger",
    "Unifier",
    "load_agent_config",
    "parse_literal",
    "__version__",
]
