# src/bdicore/agent.py
"""
Agent facade over the goal-lifecycle core.

An :class:`Agent` owns one reasoning context (circumstance, plan library,
goal listeners) and exposes the drop operations used by internal actions,
goal-timeout logic and desire/intention management.

Example:
    agent = Agent.from_config(load_agent_config(config_path=Path("agent.toml")))
    agent.plan_library.add(Plan(Trigger.parse("-!get_gold(X,Y)")))
    ...
    agent.fail_goal("go(1,3)")
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from .config.agent_config import AgentConfig
from .logging_config import configure_logging
from .semantics.circumstance import Circumstance
from .semantics.context import ReasoningContext
from .semantics.drop import (
    DropPolicy,
    DropReport,
    FailGoalPolicy,
    GoalDropper,
    SucceedGoalPolicy,
)
from .semantics.listeners import GoalListenerRegistry, MetaEventGoalListener
from .semantics.plan_library import PlanLibrary, PlanLibraryProtocol
from .syntax.terms import Literal, Term
from .syntax.unifier import Unifier

logger = logging.getLogger(__name__)


class Agent:
    def __init__(
        self,
        config: Optional[AgentConfig] = None,
        plan_library: Optional[PlanLibraryProtocol] = None,
    ) -> None:
        self.config = config or AgentConfig()
        self.context = ReasoningContext(
            circumstance=Circumstance(),
            plan_library=plan_library if plan_library is not None else PlanLibrary(),
            listeners=GoalListenerRegistry(),
        )
        if self.config.goals.generate_meta_events:
            self.context.listeners.add(MetaEventGoalListener(self.context.circumstance))
        self._dropper = GoalDropper(self.context, self.config.goals.search_order)
        logger.debug("Agent %s created", self.config.name)

    @classmethod
    def from_config(cls, config: AgentConfig, plan_library: Optional[PlanLibraryProtocol] = None) -> Agent:
        """Build an agent and apply the configuration's logging section.

        Logging is process-wide and configured once; later agents keep the
        first configuration.
        """
        configure_logging(app_name=config.name, config=config.logging.model_dump())
        return cls(config, plan_library)

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def circumstance(self) -> Circumstance:
        return self.context.circumstance

    @property
    def plan_library(self) -> PlanLibraryProtocol:
        return self.context.plan_library

    @property
    def listeners(self) -> GoalListenerRegistry:
        return self.context.listeners

    def drop_goal_report(
        self,
        pattern: Union[Literal, Term, str],
        policy: Optional[DropPolicy] = None,
        unifier: Optional[Unifier] = None,
    ) -> DropReport:
        """Drop ``pattern`` and return the detailed report."""
        return self._dropper.drop(pattern, policy or FailGoalPolicy(), unifier)

    def drop_goal(
        self,
        pattern: Union[Literal, Term, str],
        policy: Optional[DropPolicy] = None,
        unifier: Optional[Unifier] = None,
    ) -> int:
        """
        Drop every occurrence of ``pattern`` (failure semantics by default).

        Returns:
            Number of occurrences processed; 0 when the goal is not pursued.
        """
        return self.drop_goal_report(pattern, policy, unifier).processed

    def fail_goal(self, pattern: Union[Literal, Term, str], unifier: Optional[Unifier] = None) -> int:
        """Abort goals matching ``pattern`` as if their plans had failed."""
        return self.drop_goal(pattern, FailGoalPolicy(), unifier)

    def succeed_goal(self, pattern: Union[Literal, Term, str], unifier: Optional[Unifier] = None) -> int:
        """Consider goals matching ``pattern`` achieved."""
        return self.drop_goal(pattern, SucceedGoalPolicy(), unifier)

    @property
    def dropper(self) -> GoalDropper:
        return self._dropper

    def __repr__(self) -> str:
        return f"Agent(name={self.name!r}, circumstance={self.circumstance})"
