# src/bdicore/semantics/locator.py
"""
Goal locator.

Finds every place where an achievement goal matching a pattern is being
pursued: a queued ``+!g`` event not yet adopted by any intention, or a frame
inside an intention's stack, wherever that intention currently lives.

Search order follows ``GoalsConfig.search_order`` (by default the event
queue, then running intentions, then intentions waiting for an action, then
intentions suspended by the user). Inside each set the insertion order is
used. An intention contributes at most one occurrence, its topmost matching
frame, even if it is reachable from more than one set.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from ..config.agent_config import DEFAULT_SEARCH_ORDER, IntentionSet
from ..exceptions import MalformedPatternError, SyntaxParseError
from ..syntax.terms import Literal, Term, parse_term
from ..syntax.unifier import Unifier
from .circumstance import Circumstance
from .event import Event
from .intention import Intention

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class InEventQueue:
    """The goal is a queued event that no intention has adopted yet."""

    event: Event
    unifier: Unifier = field(default_factory=Unifier)


@dataclass(eq=False)
class InIntentionStack:
    """
    The goal is pursued by frame ``frame_index`` of ``intention``.

    Attributes:
        container: Set of the circumstance holding the intention.
        event: For intentions suspended on an event, the event holding them.
        unifier: Bindings produced by matching the pattern.
    """

    intention: Intention
    frame_index: int
    container: IntentionSet
    event: Optional[Event] = None
    unifier: Unifier = field(default_factory=Unifier)


GoalOccurrence = Union[InEventQueue, InIntentionStack]


def as_goal_pattern(pattern: Union[Literal, Term, str]) -> Literal:
    """
    Coerce a drop request argument into a literal pattern.

    Raises:
        MalformedPatternError: If the argument is not (the text of) a literal.
    """
    if isinstance(pattern, str):
        try:
            pattern = parse_term(pattern)
        except SyntaxParseError as e:
            raise MalformedPatternError(pattern, f"Cannot parse goal pattern: {e}") from e
    if not isinstance(pattern, Literal):
        raise MalformedPatternError(pattern)
    return pattern


class GoalLocator:
    def __init__(
        self,
        circumstance: Circumstance,
        search_order: Sequence[IntentionSet] = DEFAULT_SEARCH_ORDER,
    ) -> None:
        self.circumstance = circumstance
        self.search_order = tuple(search_order)

    def locate(self, pattern: Literal, unifier: Optional[Unifier] = None) -> List[GoalOccurrence]:
        """All occurrences of goals unifying with ``pattern``; empty if none."""
        base = unifier or Unifier()
        found: List[GoalOccurrence] = []
        seen: set[int] = set()

        for where in self.search_order:
            if where == IntentionSet.EVENTS:
                self._scan_events(pattern, base, found, seen)
                continue
            for intention, _ in self.circumstance.intentions_in(where):
                if intention.id in seen:
                    continue
                seen.add(intention.id)
                match = base.clone()
                index = intention.find_goal(pattern, match)
                if index is not None:
                    found.append(InIntentionStack(intention, index, where, unifier=match))

        logger.debug("Goal %s located %d time(s)", pattern, len(found))
        return found

    def _scan_events(
        self,
        pattern: Literal,
        base: Unifier,
        found: List[GoalOccurrence],
        seen: set[int],
    ) -> None:
        for event in self.circumstance.events:
            intention = event.intention
            if intention is not None and intention.id not in seen:
                seen.add(intention.id)
                match = base.clone()
                index = intention.find_goal(pattern, match)
                if index is not None:
                    found.append(
                        InIntentionStack(intention, index, IntentionSet.EVENTS, event, match)
                    )
                    continue

            trigger = event.trigger
            if intention is not None and not intention.is_finished():
                trigger = trigger.capply(intention.peek().unifier)
            match = base.clone()
            if trigger.is_achieve() and trigger.is_addition() and match.unifies(pattern, trigger.literal):
                found.append(InEventQueue(event, match))
