# src/bdicore/semantics/context.py
"""State of one agent's reasoning cycle that goal changes operate on."""

from __future__ import annotations

from dataclasses import dataclass, field

from .circumstance import Circumstance
from .listeners import GoalListenerRegistry
from .plan_library import PlanLibrary, PlanLibraryProtocol


@dataclass
class ReasoningContext:
    """
    Everything a goal drop reads or mutates, owned by a single agent.

    Attributes:
        circumstance: Pending events and intentions.
        plan_library: Answers whether a failure trigger can be handled.
        listeners: Goal listeners, notified in registration order.
    """

    circumstance: Circumstance = field(default_factory=Circumstance)
    plan_library: PlanLibraryProtocol = field(default_factory=PlanLibrary)
    listeners: GoalListenerRegistry = field(default_factory=GoalListenerRegistry)
