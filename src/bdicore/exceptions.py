# src/bdicore/exceptions.py
"""
Custom exceptions for the bdicore library.

This module defines a hierarchy of custom exception classes so that callers
of the goal-lifecycle core (internal actions, goal-timeout logic, desire
management) can tell a rejected request apart from an aborted single drop.

Note that "no matching goal" is never an error: dropping a goal that is not
being pursued is a silent no-op.
"""


class BDICoreError(Exception):
    """Base class for all bdicore specific errors."""
    def __init__(self, message: str = "An unspecified error occurred in bdicore."):
        super().__init__(message)

class ConfigError(BDICoreError):
    """Raised for errors related to configuration loading or validation."""
    def __init__(self, message: str = "Configuration error."):
        super().__init__(message)

class SyntaxParseError(BDICoreError):
    """Raised when AgentSpeak text (a literal or a trigger) cannot be parsed."""
    def __init__(self, text: str = "", message: str = "Cannot parse text."):
        self.text = text
        super().__init__(f"{message} Input: '{text}'")

class MalformedPatternError(BDICoreError):
    """
    Raised when a goal pattern cannot be used to search for goals.

    The request is rejected as a whole; no occurrence is processed.
    """
    def __init__(self, pattern: object = None, message: str = "Goal pattern must be a literal."):
        self.pattern = pattern
        super().__init__(f"{message} Pattern: '{pattern}'")

class StructuralInconsistencyError(BDICoreError):
    """
    Raised when a located goal occurrence is not where the locator reported it.

    Only the affected drop is aborted and the intention is left untouched.
    """
    def __init__(self, intention_id: int = -1, message: str = "Goal frame not found in intention."):
        self.intention_id = intention_id
        super().__init__(f"{message} Intention: {intention_id}")

class ListenerRegistryBusyError(BDICoreError):
    """Raised when goal listeners are (un)registered while a drop is in progress."""
    def __init__(self, message: str = "Goal listeners cannot change during a goal drop."):
        super().__init__(message)
