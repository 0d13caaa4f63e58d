# src/bdicore/syntax/__init__.py
"""
Syntax of the agent language needed by the goal-lifecycle core: terms,
literals, unification and triggers.
"""

from .terms import (
    Literal,
    NumberTerm,
    StringTerm,
    Term,
    Var,
    atom,
    lit,
    parse_literal,
    parse_term,
)
from .trigger import Trigger, TriggerOperator, TriggerType
from .unifier import Unifier

__all__ = [
    "Literal",
    "NumberTerm",
    "StringTerm",
    "Term",
    "Trigger",
    "TriggerOperator",
    "TriggerType",
    "Unifier",
    "Var",
    "atom",
    "lit",
    "parse_literal",
    "parse_term",
]
