# src/bdicore/config/agent_config.py
"""
Agent configuration models.

The configuration hierarchy:
    AgentConfig (root)
    ├── GoalsConfig     - Goal drop behaviour (search order, meta events)
    └── LoggingConfig   - Handlers and levels, fed to configure_logging()

Usage:
    >>> from bdicore.config.agent_config import AgentConfig
    >>> config = AgentConfig()
    >>> config.goals.generate_meta_events
    False
"""

from __future__ import annotations

import tomllib
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..exceptions import ConfigError


class IntentionSet(str, Enum):
    """Places of the circumstance where a pursued goal can live."""

    EVENTS = "events"  # pending-event queue, and intentions suspended for an event
    RUNNING = "running"
    PENDING_ACTIONS = "pending_actions"  # suspended waiting for an action result
    PENDING_INTENTIONS = "pending_intentions"  # suspended by the user or waiting


DEFAULT_SEARCH_ORDER = [
    IntentionSet.EVENTS,
    IntentionSet.RUNNING,
    IntentionSet.PENDING_ACTIONS,
    IntentionSet.PENDING_INTENTIONS,
]


class GoalsConfig(BaseModel):
    """
    Configuration for goal dropping.

    Examples:
        >>> GoalsConfig().search_order[0]
        <IntentionSet.EVENTS: 'events'>
    """

    generate_meta_events: bool = Field(
        default=False,
        description="Queue ^!g[state(...)] meta events when a goal fails or finishes",
    )
    search_order: list[IntentionSet] = Field(
        default_factory=lambda: list(DEFAULT_SEARCH_ORDER),
        description="Order in which the circumstance is scanned for goal occurrences",
    )

    @field_validator("search_order")
    @classmethod
    def complete_permutation(cls, v: list[IntentionSet]) -> list[IntentionSet]:
        """Every set must be searched exactly once."""
        if len(set(v)) != len(v):
            raise ValueError("search_order contains duplicates")
        missing = set(DEFAULT_SEARCH_ORDER) - set(v)
        if missing:
            names = ", ".join(sorted(s.value for s in missing))
            raise ValueError(f"search_order is missing: {names}")
        return v


class LoggingConfig(BaseModel):
    """Logging section; keys match ``bdicore.logging_config.DEFAULT_LOGGING_CONFIG``."""

    console_enabled: bool = False
    console_level: str = "WARNING"
    console_format: str = "%(levelname)s - %(message)s"
    display_min_level: str = "INFO"
    file_enabled: bool = False
    file_level: str = "DEBUG"
    file_directory: str = "~/.local/share/bdicore/logs"
    file_mode: str = Field(default="per_run", pattern="^(per_run|single)$")
    file_name_pattern: str = "{app}_{timestamp:%Y%m%d_%H%M%S}.log"
    file_single_name: str = "{app}.log"
    file_format: str = (
        "%(asctime)s [%(levelname)-8s] %(name)-30s - %(message)s (%(filename)s:%(lineno)d)"
    )
    rotation_max_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    rotation_backup_count: int = Field(default=5, ge=0)
    components: dict[str, str] = Field(
        default_factory=lambda: {"bdicore": "INFO", "bdicore.semantics": "INFO"}
    )


class AgentConfig(BaseModel):
    """Root configuration of one agent."""

    name: str = Field(default="agent", min_length=1)
    goals: GoalsConfig = Field(default_factory=GoalsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_agent_config(
    config_dict: dict[str, Any] | None = None,
    config_path: Path | None = None,
) -> AgentConfig:
    """
    Load agent configuration from a dictionary or TOML file.

    Args:
        config_dict: Pre-parsed configuration. An ``"agent"`` key is
            unwrapped if present. Takes precedence over ``config_path``.
        config_path: Path to a TOML file.

    Returns:
        Validated AgentConfig with defaults for unspecified settings.

    Raises:
        FileNotFoundError: If config_path does not exist.
        ConfigError: If the file is not valid TOML or validation fails.
    """
    data: dict[str, Any] = {}

    if config_path is not None:
        path = Path(config_path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    if config_dict is not None:
        data = config_dict

    if "agent" in data:
        data = data["agent"]

    try:
        return AgentConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid agent configuration: {e}") from e
