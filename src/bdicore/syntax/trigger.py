# src/bdicore/syntax/trigger.py
"""
Triggering events.

A trigger says what kind of change an event reports: a belief or goal being
added (``+``), deleted (``-``), or a goal changing state (``^``, meta
events). Deleting an achievement goal (``-!g``) is the failure signal plans
react to.
"""

from __future__ import annotations

from enum import Enum

from ..exceptions import SyntaxParseError
from .terms import Literal, parse_literal
from .unifier import Unifier


class TriggerOperator(str, Enum):
    ADD = "+"
    DEL = "-"
    GOAL_STATE = "^"


class TriggerType(str, Enum):
    BELIEF = ""
    ACHIEVE = "!"
    TEST = "?"


class Trigger:
    """
    Operator, type and literal of an event.

    The operator is mutable: a queued ``+!g`` that is dropped before being
    adopted is rewritten in place to ``-!g``.
    """

    __slots__ = ("operator", "type", "literal")

    def __init__(self, operator: TriggerOperator, type: TriggerType, literal: Literal) -> None:
        self.operator = operator
        self.type = type
        self.literal = literal

    @classmethod
    def parse(cls, text: str) -> Trigger:
        """Parse AgentSpeak notation such as ``+!go(1,3)`` or ``-?pos(X)``."""
        text = text.strip()
        if not text or text[0] not in "+-^":
            raise SyntaxParseError(text, "Trigger must start with '+', '-' or '^'.")
        operator = TriggerOperator(text[0])
        rest = text[1:]
        trigger_type = TriggerType.BELIEF
        if rest[:1] in ("!", "?"):
            trigger_type = TriggerType(rest[0])
            rest = rest[1:]
        return cls(operator, trigger_type, parse_literal(rest))

    @classmethod
    def achieve(cls, literal: Literal) -> Trigger:
        return cls(TriggerOperator.ADD, TriggerType.ACHIEVE, literal)

    def is_goal(self) -> bool:
        return self.type != TriggerType.BELIEF

    def is_achieve(self) -> bool:
        return self.type == TriggerType.ACHIEVE

    def is_addition(self) -> bool:
        return self.operator == TriggerOperator.ADD

    def is_failure(self) -> bool:
        return self.operator == TriggerOperator.DEL and self.is_goal()

    def failure_trigger(self) -> Trigger:
        """The ``-!g`` counterpart of this goal trigger."""
        return Trigger(TriggerOperator.DEL, self.type, self.literal)

    def capply(self, unifier: Unifier) -> Trigger:
        return Trigger(self.operator, self.type, self.literal.capply(unifier))

    def clone(self) -> Trigger:
        return Trigger(self.operator, self.type, self.literal)

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Trigger)
            and self.operator == other.operator
            and self.type == other.type
            and self.literal == other.literal
        )

    def __hash__(self) -> int:
        return hash((self.operator, self.type, self.literal))

    def __str__(self) -> str:
        return f"{self.operator.value}{self.type.value}{self.literal}"

    def __repr__(self) -> str:
        return f"Trigger({self})"
