# src/bdicore/logging_config.py
"""
Logging configuration for bdicore agents.

Every module logs through ``logging.getLogger(__name__)``; this module wires
those loggers to handlers once per process. Configuration comes from the
``[logging]`` section of the agent TOML file (see
:mod:`bdicore.config.agent_config`) or from a dictionary passed directly.

Key concepts:

    **Display filter**: When ``console_enabled=False`` (the default), the
    console handler still exists but only passes through log records that
    carry ``extra={"display": True}``. Goal-drop diagnostics stay file-only
    while operator-facing messages still reach the terminal.

    **File modes**: ``file_mode="per_run"`` creates a new timestamped file
    each run; ``file_mode="single"`` appends to one file rotated by size.

Usage:
    from bdicore.logging_config import configure_logging, log_display

    configure_logging(app_name="gold_miner")

    logger = logging.getLogger("gold_miner.setup")
    log_display(logger, logging.INFO, "Agent %s ready", name)
"""

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

DEFAULT_LOGGING_CONFIG: dict[str, Any] = {
    "console_enabled": False,
    "console_level": "WARNING",
    "console_format": "%(levelname)s - %(message)s",
    "file_enabled": False,
    "file_level": "DEBUG",
    "file_directory": "~/.local/share/bdicore/logs",
    "file_mode": "per_run",
    "file_name_pattern": "{app}_{timestamp:%Y%m%d_%H%M%S}.log",
    "file_single_name": "{app}.log",
    "file_format": "%(asctime)s [%(levelname)-8s] %(name)-30s - %(message)s (%(filename)s:%(lineno)d)",
    "rotation_max_bytes": 10 * 1024 * 1024,  # 10 MB
    "rotation_backup_count": 5,
    "display_min_level": "INFO",
    "components": {
        "bdicore": "INFO",
        "bdicore.semantics": "INFO",
    },
}


def _level(value: str | int, default: int) -> int:
    """Resolve a level name or number, falling back to ``default``."""
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).upper())
    return level if isinstance(level, int) else default


class DisplayFilter(logging.Filter):
    """Controls which log records pass through to the console handler.

    With the console globally enabled every record passes and the handler
    level does the filtering. Otherwise only records flagged
    ``display=True`` at or above ``display_min_level`` pass.
    """

    def __init__(
        self,
        console_globally_enabled: bool = False,
        display_min_level: int = logging.INFO,
    ) -> None:
        super().__init__()
        self.console_globally_enabled = console_globally_enabled
        self.display_min_level = display_min_level

    def filter(self, record: logging.LogRecord) -> bool:
        if self.console_globally_enabled:
            return True

        if getattr(record, "display", False):
            return record.levelno >= self.display_min_level

        return False


class LoggingManager:
    """
    Singleton that configures the root logger once per process.

    Handlers can be adjusted afterwards through the ``set_*`` methods.
    """

    _instance: Optional["LoggingManager"] = None
    _configured: bool = False
    _log_file_path: Path | None = None
    _console_handler: logging.Handler | None = None
    _file_handler: logging.Handler | None = None
    _display_filter: DisplayFilter | None = None

    def __new__(cls) -> "LoggingManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def get_instance(cls) -> "LoggingManager":
        """Get the singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def is_configured(cls) -> bool:
        return cls._configured

    @classmethod
    def get_log_file_path(cls) -> Path | None:
        return cls._log_file_path

    def configure(
        self,
        app_name: str = "bdicore",
        config: dict[str, Any] | None = None,
        config_file_path: str | Path | None = None,
        force_reconfigure: bool = False,
    ) -> Path | None:
        """
        Configure logging for the application.

        Args:
            app_name: Name of the application (used in log filenames).
            config: Logging section as a dictionary; merged over defaults.
            config_file_path: Agent TOML file to read ``[logging]`` from when
                ``config`` is not given.
            force_reconfigure: Reconfigure even if already configured.

        Returns:
            Path of the log file, or None when file logging is disabled.
        """
        if self._configured and not force_reconfigure:
            return self._log_file_path

        log_config = self._load_config(config, config_file_path)

        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()
        root_logger.setLevel(logging.DEBUG)

        console_globally_enabled = bool(log_config.get("console_enabled", False))
        self._display_filter = DisplayFilter(
            console_globally_enabled=console_globally_enabled,
            display_min_level=_level(log_config.get("display_min_level", "INFO"), logging.INFO),
        )

        self._console_handler = self._create_console_handler(log_config)
        if not console_globally_enabled:
            # the filter is the only gate in quiet mode
            self._console_handler.setLevel(logging.DEBUG)
        self._console_handler.addFilter(self._display_filter)
        root_logger.addHandler(self._console_handler)

        self._file_handler, self._log_file_path = None, None
        if log_config.get("file_enabled", False):
            self._file_handler, self._log_file_path = self._create_file_handler(
                log_config, app_name
            )
            if self._file_handler:
                root_logger.addHandler(self._file_handler)

        components = log_config.get("components", DEFAULT_LOGGING_CONFIG["components"])
        for component_name, level_str in components.items():
            logging.getLogger(component_name).setLevel(_level(level_str, logging.INFO))

        LoggingManager._configured = True
        LoggingManager._log_file_path = self._log_file_path

        logging.getLogger(__name__).debug(
            "Logging configured for %s (log file: %s)", app_name, self._log_file_path
        )
        return self._log_file_path

    def _load_config(
        self, config: dict[str, Any] | None, config_file_path: str | Path | None
    ) -> dict[str, Any]:
        if config is not None:
            return {**DEFAULT_LOGGING_CONFIG, **config}

        if config_file_path is not None:
            from .config.agent_config import load_agent_config

            agent_config = load_agent_config(config_path=Path(config_file_path))
            return {**DEFAULT_LOGGING_CONFIG, **agent_config.logging.model_dump()}

        return DEFAULT_LOGGING_CONFIG.copy()

    def _create_console_handler(self, config: dict[str, Any]) -> logging.Handler:
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(_level(config.get("console_level", "WARNING"), logging.WARNING))
        fmt = config.get("console_format", DEFAULT_LOGGING_CONFIG["console_format"])
        handler.setFormatter(logging.Formatter(fmt))
        return handler

    def _create_file_handler(
        self, config: dict[str, Any], app_name: str
    ) -> tuple[logging.Handler | None, Path | None]:
        dir_str = config.get("file_directory", DEFAULT_LOGGING_CONFIG["file_directory"])
        log_dir = Path(os.path.expanduser(dir_str))

        try:
            log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            sys.stderr.write(f"Warning: Cannot create log directory {log_dir}: {e}\n")
            return None, None

        if config.get("file_mode", "per_run") == "single":
            name_pattern = config.get("file_single_name", "{app}.log")
            try:
                filename = name_pattern.format(app=app_name)
            except (KeyError, ValueError):
                filename = f"{app_name}.log"
            log_file_path = log_dir / filename
            try:
                handler: logging.Handler = RotatingFileHandler(
                    log_file_path,
                    maxBytes=config.get("rotation_max_bytes", 10 * 1024 * 1024),
                    backupCount=config.get("rotation_backup_count", 5),
                    encoding="utf-8",
                )
            except OSError as e:
                sys.stderr.write(f"Warning: Cannot create log file {log_file_path}: {e}\n")
                return None, None
        else:
            pattern = config.get("file_name_pattern", DEFAULT_LOGGING_CONFIG["file_name_pattern"])
            timestamp = datetime.now()
            try:
                filename = pattern.format(app=app_name, timestamp=timestamp)
            except (KeyError, ValueError):
                filename = f"{app_name}_{timestamp.strftime('%Y%m%d_%H%M%S')}.log"
            log_file_path = log_dir / filename
            try:
                handler = logging.FileHandler(log_file_path, encoding="utf-8")
            except OSError as e:
                sys.stderr.write(f"Warning: Cannot create log file {log_file_path}: {e}\n")
                return None, None

        handler.setLevel(_level(config.get("file_level", "DEBUG"), logging.DEBUG))
        handler.setFormatter(
            logging.Formatter(config.get("file_format", DEFAULT_LOGGING_CONFIG["file_format"]))
        )
        return handler, log_file_path

    def set_console_level(self, level: str | int) -> None:
        """Change the console handler's log level at runtime."""
        if self._console_handler is not None:
            self._console_handler.setLevel(_level(level, self._console_handler.level))

    def set_file_level(self, level: str | int) -> None:
        """Change the file handler's log level at runtime."""
        if self._file_handler is not None:
            self._file_handler.setLevel(_level(level, self._file_handler.level))

    def set_component_level(self, component: str, level: str | int) -> None:
        """Change a specific component's log level at runtime."""
        logger = logging.getLogger(component)
        logger.setLevel(_level(level, logger.level))


def configure_logging(
    app_name: str = "bdicore",
    config: dict[str, Any] | None = None,
    config_file_path: str | Path | None = None,
    force_reconfigure: bool = False,
) -> Path | None:
    """
    Configure logging for the application.

    Example:
        configure_logging(
            app_name="gold_miner",
            config={"console_enabled": True, "console_level": "DEBUG"},
        )
    """
    return LoggingManager.get_instance().configure(
        app_name=app_name,
        config=config,
        config_file_path=config_file_path,
        force_reconfigure=force_reconfigure,
    )


def log_display(
    logger: logging.Logger,
    level: int,
    msg: str,
    *args: Any,
    **kwargs: Any,
) -> None:
    """Log a message that also reaches the console in quiet mode.

    The caller's ``extra`` mapping is merged, not replaced.
    """
    extra = kwargs.pop("extra", None) or {}
    extra["display"] = True
    kwargs["extra"] = extra
    logger.log(level, msg, *args, **kwargs)


def get_log_file_path() -> Path | None:
    return LoggingManager.get_log_file_path()


def set_console_level(level: str | int) -> None:
    LoggingManager.get_instance().set_console_level(level)


def set_file_level(level: str | int) -> None:
    LoggingManager.get_instance().set_file_level(level)


def set_component_level(component: str, level: str | int) -> None:
    LoggingManager.get_instance().set_component_level(component, level)
