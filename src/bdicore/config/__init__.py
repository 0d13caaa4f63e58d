# src/bdicore/config/__init__.py
"""
Configuration module for bdicore agents.

Configuration is read from a TOML file (an optional ``[agent]`` table with
``[agent.goals]`` and ``[agent.logging]`` sub-tables, or the same keys at the
top level) and validated with Pydantic models.
"""

from .agent_config import (
    AgentConfig,
    GoalsConfig,
    IntentionSet,
    LoggingConfig,
    load_agent_config,
)

__all__ = [
    "AgentConfig",
    "GoalsConfig",
    "IntentionSet",
    "LoggingConfig",
    "load_agent_config",
]
