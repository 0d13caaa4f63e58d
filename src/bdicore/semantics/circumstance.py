# src/bdicore/semantics/circumstance.py
"""
The agent's circumstance: its pending events and all of its intentions.

Intentions live in exactly one place at a time:

- ``running_intentions``: ready to execute.
- inside a queued :class:`Event` (its ``intention``): suspended until the
  reasoning cycle handles that event, typically a posted subgoal.
- ``pending_actions``: suspended until an action's result arrives.
- ``pending_intentions``: suspended by the user (``.suspend``) or waiting.

Each agent owns its circumstance; nothing here is shared between agents.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from ..config.agent_config import IntentionSet
from ..syntax.terms import Literal
from .event import Event
from .intention import Intention, IntentionState

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class ActionExec:
    """An action sent to the environment whose result is awaited."""

    action: Literal
    intention: Intention


class Circumstance:
    def __init__(self) -> None:
        self._events: List[Event] = []
        self._running: List[Intention] = []
        self._pending_actions: Dict[int, ActionExec] = {}
        self._pending_intentions: Dict[str, Intention] = {}
        self.selected_intention: Optional[Intention] = None

    # -- events ------------------------------------------------------------

    @property
    def events(self) -> Tuple[Event, ...]:
        """Pending events in insertion order."""
        return tuple(self._events)

    def add_event(self, event: Event) -> None:
        if event.intention is not None:
            event.intention.suspend("event")
        self._events.append(event)
        logger.debug("Added event %s", event)

    def remove_event(self, event: Event) -> bool:
        for index, queued in enumerate(self._events):
            if queued is event:
                del self._events[index]
                return True
        return False

    def has_event(self, event: Event) -> bool:
        return any(queued is event for queued in self._events)

    def clear_events(self) -> None:
        self._events.clear()

    # -- running -----------------------------------------------------------

    @property
    def running_intentions(self) -> Tuple[Intention, ...]:
        return tuple(self._running)

    def add_running_intention(self, intention: Intention) -> None:
        if intention not in self._running:
            intention.resume()
            self._running.append(intention)

    def remove_running_intention(self, intention: Intention) -> bool:
        if intention in self._running:
            self._running.remove(intention)
            if self.selected_intention is intention:
                self.selected_intention = None
            return True
        return False

    # -- pending actions ---------------------------------------------------

    @property
    def pending_actions(self) -> Dict[int, ActionExec]:
        return dict(self._pending_actions)

    def add_pending_action(self, action: ActionExec) -> None:
        action.intention.suspend("action")
        self._pending_actions[action.intention.id] = action

    def remove_pending_action(self, intention_id: int) -> Optional[ActionExec]:
        return self._pending_actions.pop(intention_id, None)

    # -- pending intentions ------------------------------------------------

    @property
    def pending_intentions(self) -> Dict[str, Intention]:
        return dict(self._pending_intentions)

    def add_pending_intention(self, key: str, intention: Intention) -> None:
        intention.suspend(key)
        self._pending_intentions[key] = intention

    def remove_pending_intention(self, key: str) -> Optional[Intention]:
        return self._pending_intentions.pop(key, None)

    def pending_intention_key(self, intention: Intention) -> Optional[str]:
        for key, pending in self._pending_intentions.items():
            if pending is intention:
                return key
        return None

    # -- whole store -------------------------------------------------------

    def intentions_in(self, where: IntentionSet) -> Iterator[Tuple[Intention, Optional[Event]]]:
        """
        Intentions held in ``where``, in insertion order.

        For the event queue, the event that holds each intention is yielded
        along with it; otherwise the second item is None.
        """
        if where == IntentionSet.EVENTS:
            for event in tuple(self._events):
                if event.intention is not None:
                    yield event.intention, event
        elif where == IntentionSet.RUNNING:
            for intention in tuple(self._running):
                yield intention, None
        elif where == IntentionSet.PENDING_ACTIONS:
            for action in tuple(self._pending_actions.values()):
                yield action.intention, None
        else:
            for intention in tuple(self._pending_intentions.values()):
                yield intention, None

    def all_intentions(self) -> Iterator[Intention]:
        seen: set[int] = set()
        for where in IntentionSet:
            for intention, _ in self.intentions_in(where):
                if intention.id not in seen:
                    seen.add(intention.id)
                    yield intention

    def resume_intention(self, intention: Intention) -> None:
        """Move a suspended intention back to the running set."""
        self.remove_pending_action(intention.id)
        key = self.pending_intention_key(intention)
        if key is not None:
            self.remove_pending_intention(key)
        self.add_running_intention(intention)

    def drop_intention(self, intention: Intention) -> None:
        """Remove ``intention`` from every set and release what it holds."""
        self.remove_running_intention(intention)
        if self.remove_pending_action(intention.id) is not None:
            logger.debug("Released pending action of intention %s", intention.id)
        key = self.pending_intention_key(intention)
        if key is not None:
            self.remove_pending_intention(key)
        self._events = [e for e in self._events if e.intention is not intention]
        if intention.state != IntentionState.FINISHED:
            intention.fail()

    def snapshot(self) -> tuple:
        """Structural view of the whole circumstance, for comparisons."""

        def stack(intention: Intention) -> tuple:
            return (
                intention.id,
                intention.state,
                tuple((str(f.trigger), f.plan.position) for f in intention.frames()),
            )

        return (
            tuple(
                (str(e.trigger), None if e.intention is None else stack(e.intention))
                for e in self._events
            ),
            tuple(stack(i) for i in self._running),
            tuple((k, str(a.action), stack(a.intention)) for k, a in self._pending_actions.items()),
            tuple((k, stack(i)) for k, i in self._pending_intentions.items()),
        )

    def __str__(self) -> str:
        return (
            f"<E={len(self._events)}, I={len(self._running)}, "
            f"PA={len(self._pending_actions)}, PI={len(self._pending_intentions)}>"
        )
