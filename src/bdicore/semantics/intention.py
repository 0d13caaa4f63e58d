# src/bdicore/semantics/intention.py
"""
Intentions and their stacks of goal frames.

An intention is one thread of the agent's reasoning. It owns an ordered
stack of :class:`GoalFrame` objects (index 0 is the bottom); frame ``k`` was
pushed to achieve a subgoal posted by the plan of frame ``k - 1``, and the
top frame is the one currently executing.

Dropping a goal truncates the stack at the topmost frame pursuing it: the
frames above exist only to serve that goal, so they go too.

Example:
    >>> i = Intention()
    >>> i.push(GoalFrame(Trigger.parse("+!get_gold(1,3)"), PlanBody.of("!go(1,3)", "pick")))
    >>> i.push(GoalFrame(Trigger.parse("+!go(1,3)"), PlanBody.of("move")))
    >>> dropped = i.drop_goal(parse_literal("go(1,3)"), Unifier())
    >>> str(dropped.trigger), len(i)
    ('+!go(1,3)', 1)
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterator, List, Optional, Sequence

from ..exceptions import StructuralInconsistencyError
from ..syntax.terms import Literal, Term, parse_term
from ..syntax.trigger import Trigger
from ..syntax.unifier import Unifier

if TYPE_CHECKING:
    from .plan_library import PlanLibraryProtocol

logger = logging.getLogger(__name__)

_intention_ids = itertools.count(1)


class StepKind(str, Enum):
    """Kinds of plan body steps, by their AgentSpeak prefix."""

    ACHIEVE = "!"
    ACHIEVE_NEW_FOCUS = "!!"
    TEST = "?"
    ADD_BELIEF = "+"
    DEL_BELIEF = "-"
    ACTION = ""


@dataclass(frozen=True)
class BodyStep:
    kind: StepKind
    term: Term

    @classmethod
    def parse(cls, text: str) -> BodyStep:
        text = text.strip()
        for kind in (StepKind.ACHIEVE_NEW_FOCUS, StepKind.ACHIEVE, StepKind.TEST,
                     StepKind.ADD_BELIEF, StepKind.DEL_BELIEF):
            if text.startswith(kind.value):
                return cls(kind, parse_term(text[len(kind.value):]))
        return cls(StepKind.ACTION, parse_term(text))

    def is_subgoal(self) -> bool:
        return self.kind == StepKind.ACHIEVE

    def __str__(self) -> str:
        return f"{self.kind.value}{self.term}"


@dataclass
class PlanBody:
    """
    Steps of a plan together with the cursor of the next step to execute.

    Steps before the cursor have already run. For a frame below the top of
    the stack the current step is the subgoal it is waiting on.
    """

    steps: tuple[BodyStep, ...] = ()
    position: int = 0

    @classmethod
    def of(cls, *steps: str) -> PlanBody:
        return cls(tuple(BodyStep.parse(s) for s in steps))

    @property
    def current_step(self) -> Optional[BodyStep]:
        if self.position < len(self.steps):
            return self.steps[self.position]
        return None

    def remove_current_step(self) -> Optional[BodyStep]:
        """Advance the cursor past the current step and return it."""
        step = self.current_step
        if step is not None:
            self.position += 1
        return step

    def remaining(self) -> tuple[BodyStep, ...]:
        return self.steps[self.position:]

    def is_finished(self) -> bool:
        return self.position >= len(self.steps)

    def __str__(self) -> str:
        return "; ".join(str(s) for s in self.remaining()) or "{}"


@dataclass
class GoalFrame:
    """
    One entry of an intention's stack (an "intended means").

    Attributes:
        trigger: The event this frame is handling, e.g. ``+!go(1,3)``.
        plan: Body of the chosen plan and its cursor.
        unifier: Bindings of the plan's variables.
        plan_label: Label of the chosen plan, for diagnostics.
    """

    trigger: Trigger
    plan: PlanBody = field(default_factory=PlanBody)
    unifier: Unifier = field(default_factory=Unifier)
    plan_label: Optional[str] = None

    def goal_trigger(self) -> Trigger:
        """The trigger with this frame's bindings applied."""
        return self.trigger.capply(self.unifier)

    def __str__(self) -> str:
        label = f"@{self.plan_label} " if self.plan_label else ""
        return f"{label}{self.goal_trigger()} <- {self.plan}"


class IntentionState(str, Enum):
    RUNNING = "running"
    SUSPENDED = "suspended"
    FINISHED = "finished"


class Intention:
    """An ordered stack of goal frames plus its lifecycle state."""

    def __init__(self, frames: Sequence[GoalFrame] = ()) -> None:
        self.id: int = next(_intention_ids)
        self._frames: List[GoalFrame] = list(frames)
        self.state: IntentionState = IntentionState.RUNNING
        self.suspend_reason: Optional[str] = None

    # -- stack -------------------------------------------------------------

    def push(self, frame: GoalFrame) -> None:
        self._frames.append(frame)

    def pop(self) -> GoalFrame:
        return self._frames.pop()

    def peek(self) -> Optional[GoalFrame]:
        """Top frame, or None when the intention is finished."""
        return self._frames[-1] if self._frames else None

    def frame_at(self, index: int) -> GoalFrame:
        return self._frames[index]

    def frames(self) -> tuple[GoalFrame, ...]:
        """Frames from bottom to top."""
        return tuple(self._frames)

    def is_finished(self) -> bool:
        return not self._frames

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[GoalFrame]:
        """Iterate from the top of the stack down."""
        return reversed(self._frames)

    # -- goals -------------------------------------------------------------

    def find_goal(self, pattern: Literal, unifier: Unifier) -> Optional[int]:
        """
        Index of the topmost frame pursuing an achievement goal that unifies
        with ``pattern``, or None. On a match the bindings are added to
        ``unifier``.
        """
        for index in range(len(self._frames) - 1, -1, -1):
            trigger = self._frames[index].goal_trigger()
            if trigger.is_achieve() and trigger.is_addition() and unifier.unifies(pattern, trigger.literal):
                return index
        return None

    def pop_to(self, index: int) -> GoalFrame:
        """
        Remove frame ``index`` and every frame above it.

        Returns:
            The frame at ``index``, i.e. the means pursuing the dropped goal.

        Raises:
            StructuralInconsistencyError: If ``index`` is not a position of the
                stack. The stack is left untouched.
        """
        if not 0 <= index < len(self._frames):
            raise StructuralInconsistencyError(
                self.id, f"Frame {index} does not exist in a stack of {len(self._frames)}."
            )
        dropped = self._frames[index]
        del self._frames[index:]
        return dropped

    def drop_goal(self, pattern: Literal, unifier: Unifier) -> Optional[GoalFrame]:
        """Excise the topmost frame pursuing ``pattern``; None if there is none."""
        index = self.find_goal(pattern, unifier)
        if index is None:
            return None
        return self.pop_to(index)

    def has_failure_plan(self, trigger: Trigger, plan_library: PlanLibraryProtocol) -> bool:
        """Whether some plan of the agent handles the failure ``trigger``."""
        return plan_library.has_candidate_plan(trigger)

    # -- lifecycle ---------------------------------------------------------

    def suspend(self, reason: str) -> None:
        self.state = IntentionState.SUSPENDED
        self.suspend_reason = reason

    def resume(self) -> None:
        self.state = IntentionState.RUNNING
        self.suspend_reason = None

    def fail(self) -> None:
        """Finalize the intention without achieving its goals."""
        logger.debug("Intention %s finalized with %d frame(s) left", self.id, len(self._frames))
        self._frames.clear()
        self.state = IntentionState.FINISHED
        self.suspend_reason = None

    def __str__(self) -> str:
        lines = [f"intention {self.id} ({self.state.value}):"]
        lines.extend(f"    {frame}" for frame in self)
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Intention(id={self.id}, frames={len(self._frames)}, state={self.state.value})"
