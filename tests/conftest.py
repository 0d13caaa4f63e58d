# tests/conftest.py
"""
Shared fixtures for bdicore tests.

Provides goal-frame builders, a recording goal listener and pre-built
agents with and without failure plans.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add source to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bdicore.agent import Agent
from bdicore.logging_config import LoggingManager
from bdicore.semantics.intention import GoalFrame, Intention, PlanBody
from bdicore.semantics.listeners import GoalListener
from bdicore.semantics.plan_library import Plan
from bdicore.syntax.trigger import Trigger


def frame(trigger: str, *steps: str) -> GoalFrame:
    """Build a goal frame from AgentSpeak text, e.g. frame("+!g0", "!g", "b")."""
    return GoalFrame(Trigger.parse(trigger), PlanBody.of(*steps))


def intention(*frames: GoalFrame) -> Intention:
    return Intention(frames)


class RecordingListener(GoalListener):
    """Records every notification together with the queue size at that moment."""

    def __init__(self, agent=None):
        self.agent = agent
        self.calls = []

    def _queued(self):
        return None if self.agent is None else len(self.agent.circumstance.events)

    def goal_failed(self, trigger):
        self.calls.append(("failed", str(trigger), self._queued()))

    def goal_finished(self, trigger, state):
        self.calls.append(("finished", str(trigger), state, self._queued()))


@pytest.fixture
def agent():
    """Agent with an empty plan library."""
    return Agent()


@pytest.fixture
def recorder(agent):
    listener = RecordingListener(agent)
    agent.listeners.add(listener)
    return listener


def add_failure_plan(agent: Agent, trigger: str) -> None:
    agent.plan_library.add(Plan(Trigger.parse(trigger)))


def _reset_logging():
    LoggingManager._instance = None
    LoggingManager._configured = False
    LoggingManager._log_file_path = None
    LoggingManager._console_handler = None
    LoggingManager._file_handler = None
    LoggingManager._display_filter = None

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()


@pytest.fixture
def reset_logging_manager():
    """Reset the logging manager singleton between tests."""
    _reset_logging()
    yield
    _reset_logging()
