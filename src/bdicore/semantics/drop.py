# src/bdicore/semantics/drop.py
"""
Dropping goals that are being pursued.

A drop request names a goal pattern. Every occurrence found by the
:class:`~bdicore.semantics.locator.GoalLocator` is handed once to a drop
policy, which decides what the drop means:

- :class:`FailGoalPolicy` (``.fail_goal``): the goal is aborted as if its
  plan had failed. A queued ``+!g`` becomes ``-!g``. Inside an intention the
  frames from the goal up are excised and a failure event is posted for the
  parent goal (``-!g0``), or for the goal itself when it was the bottom of
  the stack. Without a plan for that failure the intention is finalized.
- :class:`SucceedGoalPolicy` (``.succeed_goal``): the goal is considered
  achieved and the parent's plan continues after its ``!g`` step.

Example:
    dropper = GoalDropper(context)
    report = dropper.drop(parse_literal("go(1,3)"), FailGoalPolicy())
    report.processed
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, Protocol, Sequence, Union

from ..config.agent_config import DEFAULT_SEARCH_ORDER, IntentionSet
from ..exceptions import StructuralInconsistencyError
from ..syntax.terms import Literal, Term
from ..syntax.trigger import Trigger, TriggerOperator
from ..syntax.unifier import Unifier
from .context import ReasoningContext
from .event import Event
from .intention import GoalFrame, Intention
from .listeners import FinishState
from .locator import (
    GoalLocator,
    GoalOccurrence,
    InEventQueue,
    InIntentionStack,
    as_goal_pattern,
)

logger = logging.getLogger(__name__)


class DropOutcome(IntEnum):
    """What happened to an intention holding a dropped goal."""

    NO_MATCH = 0
    CONTINUE = 1
    FAILURE_EVENT_GENERATED = 2
    SILENTLY_FINISHED = 3


class DropPolicy(Protocol):
    """Decides the effect of dropping one located goal occurrence."""

    name: str

    def on_intention_match(
        self, context: ReasoningContext, occurrence: InIntentionStack, pattern: Literal
    ) -> DropOutcome:
        ...

    def on_event_match(self, context: ReasoningContext, occurrence: InEventQueue) -> None:
        ...


def excise(intention: Intention, index: int, pattern: Literal, unifier: Unifier) -> GoalFrame:
    """
    Remove the frames ``index..top`` after checking frame ``index`` still
    pursues ``pattern``.

    Raises:
        StructuralInconsistencyError: If it does not; nothing is removed.
    """
    if 0 <= index < len(intention):
        trigger = intention.frame_at(index).goal_trigger()
        if trigger.is_achieve() and trigger.is_addition() and unifier.clone().unifies(pattern, trigger.literal):
            return intention.pop_to(index)
    raise StructuralInconsistencyError(
        intention.id, f"No frame pursuing {pattern} at position {index}."
    )


class FailGoalPolicy:
    name = "fail_goal"

    def on_intention_match(
        self, context: ReasoningContext, occurrence: InIntentionStack, pattern: Literal
    ) -> DropOutcome:
        intention = occurrence.intention
        dropped = excise(intention, occurrence.frame_index, pattern, occurrence.unifier)
        dropped_trigger = dropped.goal_trigger()
        context.listeners.notify_failed(dropped_trigger)

        if not intention.is_finished():
            # the parent posted !g and has to react to its failure
            fail_trigger = intention.peek().goal_trigger().failure_trigger()
        else:
            # g was the bottom of the stack, e.g. posted with !! or by an achieve request
            fail_trigger = dropped_trigger.failure_trigger()

        if intention.has_failure_plan(fail_trigger, context.plan_library):
            context.circumstance.add_event(Event(fail_trigger, intention))
            logger.debug(
                "'.fail_goal(%s)' is generating a goal deletion event: %s",
                dropped_trigger,
                fail_trigger,
            )
            return DropOutcome.FAILURE_EVENT_GENERATED

        logger.debug(
            "'.fail_goal(%s)' is removing the intention without event:\n%s",
            dropped_trigger,
            intention,
        )
        context.listeners.notify_finished(dropped_trigger, FinishState.UNACHIEVED)
        context.circumstance.drop_intention(intention)
        return DropOutcome.SILENTLY_FINISHED

    def on_event_match(self, context: ReasoningContext, occurrence: InEventQueue) -> None:
        trigger = occurrence.event.trigger
        trigger.operator = TriggerOperator.DEL
        logger.debug("'.fail_goal' turned the pending event into %s", trigger)


class SucceedGoalPolicy:
    name = "succeed_goal"

    def on_intention_match(
        self, context: ReasoningContext, occurrence: InIntentionStack, pattern: Literal
    ) -> DropOutcome:
        intention = occurrence.intention
        dropped = excise(intention, occurrence.frame_index, pattern, occurrence.unifier)
        context.listeners.notify_finished(dropped.goal_trigger(), FinishState.ACHIEVED)
        return self._continue(context, intention, dropped.goal_trigger())

    def on_event_match(self, context: ReasoningContext, occurrence: InEventQueue) -> None:
        event = occurrence.event
        context.circumstance.remove_event(event)
        intention = event.intention
        if intention is None:
            logger.debug("'.succeed_goal' removed the pending event %s", event.trigger)
            return
        context.listeners.notify_finished(event.trigger, FinishState.ACHIEVED)
        if self._continue(context, intention, event.trigger) == DropOutcome.CONTINUE:
            context.circumstance.add_running_intention(intention)
            context.listeners.notify_resumed(intention.peek().goal_trigger())

    def _continue(
        self, context: ReasoningContext, intention: Intention, achieved: Trigger
    ) -> DropOutcome:
        """Resume the parent plan after its subgoal step, popping plans that end."""
        while not intention.is_finished():
            parent = intention.peek()
            step = parent.plan.current_step
            if step is not None and step.is_subgoal() and context.circumstance.selected_intention is not intention:
                parent.unifier.unifies(_subgoal_literal(step.term), achieved.literal)
                parent.plan.remove_current_step()
            if not parent.plan.is_finished():
                return DropOutcome.CONTINUE
            intention.pop()
            achieved = parent.goal_trigger()
            context.listeners.notify_finished(achieved, FinishState.ACHIEVED)

        logger.debug("'.succeed_goal' finished intention %s", intention.id)
        context.circumstance.drop_intention(intention)
        return DropOutcome.SILENTLY_FINISHED


def _subgoal_literal(term: Term) -> Term:
    return term.without_annots() if isinstance(term, Literal) else term


@dataclass
class DropEntry:
    occurrence: GoalOccurrence
    outcome: Optional[DropOutcome] = None
    error: Optional[Exception] = None


@dataclass
class DropReport:
    """Result of one drop request."""

    pattern: Literal
    policy: str
    entries: List[DropEntry] = field(default_factory=list)

    @property
    def processed(self) -> int:
        """Occurrences handled without error."""
        return sum(1 for entry in self.entries if entry.error is None)

    @property
    def errors(self) -> List[Exception]:
        return [entry.error for entry in self.entries if entry.error is not None]

    def count(self, outcome: DropOutcome) -> int:
        return sum(1 for entry in self.entries if entry.outcome == outcome)


class GoalDropper:
    """Entry point for dropping goals of one agent."""

    def __init__(
        self,
        context: ReasoningContext,
        search_order: Sequence[IntentionSet] = DEFAULT_SEARCH_ORDER,
    ) -> None:
        self.context = context
        self.locator = GoalLocator(context.circumstance, search_order)

    def drop(
        self,
        pattern: Union[Literal, Term, str],
        policy: DropPolicy,
        unifier: Optional[Unifier] = None,
    ) -> DropReport:
        """
        Drop every occurrence of ``pattern``.

        Occurrences are all located before any of them is changed, then each
        is processed on its own: an error is logged and recorded in the
        report without stopping the others.

        Raises:
            MalformedPatternError: If ``pattern`` is not a literal. Nothing
                is changed.
        """
        goal = as_goal_pattern(pattern)
        report = DropReport(goal, policy.name)
        occurrences = self.locator.locate(goal, unifier)

        with self.context.listeners.locked():
            for occurrence in occurrences:
                entry = DropEntry(occurrence)
                try:
                    entry.outcome = self._process(occurrence, goal, policy)
                except Exception as e:
                    logger.error(
                        "'.%s(%s)' failed for one occurrence: %s", policy.name, goal, e, exc_info=True
                    )
                    entry.error = e
                report.entries.append(entry)

        if report.entries:
            logger.info(
                "'.%s(%s)' processed %d of %d occurrence(s)",
                policy.name,
                goal,
                report.processed,
                len(report.entries),
            )
        return report

    def drop_in_intention(
        self,
        intention: Intention,
        pattern: Union[Literal, Term, str],
        policy: DropPolicy,
        unifier: Optional[Unifier] = None,
    ) -> DropOutcome:
        """Drop ``pattern`` from one known intention, e.g. the current one."""
        goal = as_goal_pattern(pattern)
        match = (unifier or Unifier()).clone()
        index = intention.find_goal(goal, match)
        if index is None:
            return DropOutcome.NO_MATCH
        occurrence = InIntentionStack(intention, index, self._container_of(intention), unifier=match)
        with self.context.listeners.locked():
            return self._process(occurrence, goal, policy)

    def _process(self, occurrence: GoalOccurrence, goal: Literal, policy: DropPolicy) -> Optional[DropOutcome]:
        if isinstance(occurrence, InEventQueue):
            policy.on_event_match(self.context, occurrence)
            return None

        outcome = policy.on_intention_match(self.context, occurrence, goal)
        if outcome == DropOutcome.CONTINUE:
            if occurrence.container != IntentionSet.RUNNING:
                intention = occurrence.intention
                self._release(occurrence)
                self.context.circumstance.add_running_intention(intention)
                self.context.listeners.notify_resumed(intention.peek().goal_trigger())
        elif outcome > DropOutcome.CONTINUE:
            self._release(occurrence)
        return outcome

    def _release(self, occurrence: InIntentionStack) -> None:
        """Take the intention out of the set it was found in."""
        circumstance = self.context.circumstance
        intention = occurrence.intention
        if occurrence.container == IntentionSet.EVENTS and occurrence.event is not None:
            circumstance.remove_event(occurrence.event)
        elif occurrence.container == IntentionSet.RUNNING:
            circumstance.remove_running_intention(intention)
        elif occurrence.container == IntentionSet.PENDING_ACTIONS:
            circumstance.remove_pending_action(intention.id)
        elif occurrence.container == IntentionSet.PENDING_INTENTIONS:
            key = circumstance.pending_intention_key(intention)
            if key is not None:
                circumstance.remove_pending_intention(key)

    def _container_of(self, intention: Intention) -> IntentionSet:
        circumstance = self.context.circumstance
        if intention.id in circumstance.pending_actions:
            return IntentionSet.PENDING_ACTIONS
        if circumstance.pending_intention_key(intention) is not None:
            return IntentionSet.PENDING_INTENTIONS
        return IntentionSet.RUNNING
