# src/bdicore/semantics/listeners.py
"""
Goal listeners.

Observers registered with an agent are told, synchronously and in
registration order, when a goal fails, finishes or is resumed by a drop.
The registry is owned by the agent and passed to the code that changes
goals; it is never looked up globally.

Example:
    class Printer(GoalListener):
        def goal_finished(self, trigger, state):
            print(trigger, state.value)

    agent.listeners.add(Printer())
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from typing import TYPE_CHECKING, Iterator, List

from ..exceptions import ListenerRegistryBusyError
from ..syntax.terms import Literal
from ..syntax.trigger import Trigger, TriggerOperator
from .event import Event

if TYPE_CHECKING:
    from .circumstance import Circumstance

logger = logging.getLogger(__name__)


class FinishState(str, Enum):
    """How a goal ended."""

    ACHIEVED = "achieved"
    UNACHIEVED = "unachieved"


class GoalListener:
    """Base class with no-op hooks; override the ones you need."""

    def goal_failed(self, trigger: Trigger) -> None:
        pass

    def goal_finished(self, trigger: Trigger, state: FinishState) -> None:
        pass

    def goal_resumed(self, trigger: Trigger) -> None:
        pass


class GoalListenerRegistry:
    """Ordered set of goal listeners of one agent."""

    def __init__(self) -> None:
        self._listeners: List[GoalListener] = []
        self._busy = 0

    def add(self, listener: GoalListener) -> None:
        self._check_idle()
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove(self, listener: GoalListener) -> None:
        self._check_idle()
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _check_idle(self) -> None:
        if self._busy:
            raise ListenerRegistryBusyError()

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Refuse registration changes while the block runs."""
        self._busy += 1
        try:
            yield
        finally:
            self._busy -= 1

    def notify_failed(self, trigger: Trigger) -> None:
        for listener in tuple(self._listeners):
            listener.goal_failed(trigger)

    def notify_finished(self, trigger: Trigger, state: FinishState) -> None:
        for listener in tuple(self._listeners):
            listener.goal_finished(trigger, state)

    def notify_resumed(self, trigger: Trigger) -> None:
        for listener in tuple(self._listeners):
            listener.goal_resumed(trigger)

    def __iter__(self) -> Iterator[GoalListener]:
        return iter(tuple(self._listeners))

    def __len__(self) -> int:
        return len(self._listeners)

    def __bool__(self) -> bool:
        return bool(self._listeners)


class MetaEventGoalListener(GoalListener):
    """
    Turns goal state changes into ``^!g[state(s)]`` meta events.

    Meta events start new intentions, so they carry no intention.
    """

    def __init__(self, circumstance: Circumstance) -> None:
        self._circumstance = circumstance

    def _post(self, trigger: Trigger, state: str) -> None:
        literal = trigger.literal.with_annots(
            *trigger.literal.annots, Literal("state", (Literal(state),))
        )
        meta = Trigger(TriggerOperator.GOAL_STATE, trigger.type, literal)
        self._circumstance.add_event(Event(meta))
        logger.debug("Generated meta event %s", meta)

    def goal_failed(self, trigger: Trigger) -> None:
        self._post(trigger, "failed")

    def goal_finished(self, trigger: Trigger, state: FinishState) -> None:
        self._post(trigger, "finished")

    def goal_resumed(self, trigger: Trigger) -> None:
        self._post(trigger, "resumed")
