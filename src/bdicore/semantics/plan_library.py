# src/bdicore/semantics/plan_library.py
"""
Plan library as seen by the goal-lifecycle core.

Plan selection happens elsewhere; dropping a goal only needs to know whether
some plan is relevant for a failure trigger such as ``-!get_gold(1,3)``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, runtime_checkable

from ..syntax.trigger import Trigger
from ..syntax.unifier import Unifier
from .intention import PlanBody


@runtime_checkable
class PlanLibraryProtocol(Protocol):
    """Minimal interface needed to decide whether a failure can be handled."""

    def has_candidate_plan(self, trigger: Trigger) -> bool:
        ...


@dataclass
class Plan:
    trigger: Trigger
    body: PlanBody = field(default_factory=PlanBody)
    label: Optional[str] = None

    def __str__(self) -> str:
        label = f"@{self.label} " if self.label else ""
        return f"{label}{self.trigger} <- {self.body}."


class PlanLibrary:
    """
    Plans indexed by the functor of their triggering literal.

    Example:
        >>> pl = PlanLibrary()
        >>> pl.add(Plan(Trigger.parse("-!get_gold(X,Y)")))
        >>> pl.has_candidate_plan(Trigger.parse("-!get_gold(1,3)"))
        True
    """

    def __init__(self, plans: Optional[List[Plan]] = None) -> None:
        self._plans: dict[tuple[str, str, str, int], List[Plan]] = {}
        for plan in plans or []:
            self.add(plan)

    @staticmethod
    def _key(trigger: Trigger) -> tuple[str, str, str, int]:
        return (
            trigger.operator.value,
            trigger.type.value,
            trigger.literal.functor,
            trigger.literal.arity,
        )

    def add(self, plan: Plan) -> None:
        self._plans.setdefault(self._key(plan.trigger), []).append(plan)

    def relevant_plans(self, trigger: Trigger) -> List[Plan]:
        """Plans whose trigger unifies with ``trigger``."""
        return [
            plan
            for plan in self._plans.get(self._key(trigger), [])
            if Unifier().unifies(plan.trigger.literal, trigger.literal)
        ]

    def has_candidate_plan(self, trigger: Trigger) -> bool:
        return bool(self.relevant_plans(trigger))

    def __len__(self) -> int:
        return sum(len(plans) for plans in self._plans.values())
