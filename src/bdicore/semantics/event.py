# src/bdicore/semantics/event.py
"""Events queued in the agent's circumstance."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..syntax.trigger import Trigger

if TYPE_CHECKING:
    from .intention import Intention


@dataclass(eq=False)
class Event:
    """
    A trigger waiting to be handled by the reasoning cycle.

    Attributes:
        trigger: What happened.
        intention: The intention that resumes on this event, or None when
            handling the event starts a new intention. Events compare by
            identity: two queued ``+!g`` events are different events.
    """

    trigger: Trigger
    intention: Optional[Intention] = None

    def __str__(self) -> str:
        origin = "" if self.intention is None else f" (intention {self.intention.id})"
        return f"{self.trigger}{origin}"
