"""
Logging configuration for the rabin_cdc library.

One place to decide where log records go and how they look:
- user-facing status messages for the CLI
- developer debug logs with module names
- optional rotating log file
- optional JSON output for machine consumption
"""

import json
import logging
import logging.handlers
import sys
from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union


class LogLevel(Enum):
    """Logging levels with user-friendly names."""
    SILENT = "silent"      # Only critical errors
    MINIMAL = "minimal"    # Bare messages, no timestamps
    NORMAL = "normal"      # Standard logging for users
    VERBOSE = "verbose"    # Adds performance lines
    DEBUG = "debug"        # Full debugging information


_PYTHON_LEVELS = {
    LogLevel.SILENT: logging.CRITICAL,
    LogLevel.MINIMAL: logging.INFO,
    LogLevel.NORMAL: logging.INFO,
    LogLevel.VERBOSE: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}

MAX_PERFORMANCE_LOGS = 1000

_RECORD_ATTRS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'stack_info',
    'exc_info', 'exc_text', 'taskName', 'message', 'asctime',
}


@dataclass
class LogConfig:
    """Configuration for logging behavior."""
    level: LogLevel = LogLevel.NORMAL
    console_output: bool = True
    file_output: bool = False
    log_file: Optional[Path] = None
    format_json: bool = False
    include_module_names: bool = True
    max_file_size: int = 10 * 1024 * 1024
    backup_count: int = 3

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        result = asdict(self)
        result['level'] = self.level.value
        if self.log_file:
            result['log_file'] = str(self.log_file)
        return result


class ChunkingLogger:
    """Process-wide logging setup shared by the library and the CLI."""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._initialized = True
        self.config = LogConfig()
        self.performance_logs = deque(maxlen=MAX_PERFORMANCE_LOGS)

    def configure(self, config: Optional[LogConfig] = None, **kwargs) -> None:
        """
        Configure logging behavior.

        Args:
            config: LogConfig object with settings
            **kwargs: Individual config parameters overriding ``config``
        """
        settings = asdict(config or self.config)

        for key, value in kwargs.items():
            if key not in settings:
                continue
            if key == 'level' and isinstance(value, str):
                value = LogLevel(value.lower())
            elif key == 'log_file' and value:
                value = Path(value)
            settings[key] = value

        self.config = LogConfig(**settings)
        self._configure_logging()

    def _configure_logging(self) -> None:
        """Set up the root logger from the current configuration."""
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        level = _PYTHON_LEVELS[self.config.level]
        root_logger.setLevel(level)

        formatter = JsonFormatter() if self.config.format_json else self._create_text_formatter()

        if self.config.console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            console_handler.setLevel(level)
            root_logger.addHandler(console_handler)

        if self.config.file_output and self.config.log_file:
            try:
                self.config.log_file.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.handlers.RotatingFileHandler(
                    self.config.log_file,
                    maxBytes=self.config.max_file_size,
                    backupCount=self.config.backup_count,
                    encoding='utf-8'
                )
                file_handler.setFormatter(formatter)
                file_handler.setLevel(level)
                root_logger.addHandler(file_handler)
            except OSError as e:
                logging.warning(f"Failed to set up file logging: {e}")

    def _create_text_formatter(self) -> logging.Formatter:
        if self.config.level == LogLevel.MINIMAL:
            fmt = '%(message)s'
        elif self.config.include_module_names and self.config.level == LogLevel.DEBUG:
            fmt = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        else:
            fmt = '%(asctime)s - %(levelname)s - %(message)s'
        return logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S')

    def user_info(self, message: str) -> None:
        if self.config.level != LogLevel.SILENT:
            logging.getLogger('rabin_cdc.user').info(message)

    def user_success(self, message: str) -> None:
        if self.config.level != LogLevel.SILENT:
            logging.getLogger('rabin_cdc.user').info(f"OK: {message}")

    def user_warning(self, message: str) -> None:
        logging.getLogger('rabin_cdc.user').warning(message)

    def user_error(self, message: str) -> None:
        logging.getLogger('rabin_cdc.user').error(message)

    def debug_operation(self, operation: str, details: Dict[str, Any]) -> None:
        if self.config.level == LogLevel.DEBUG:
            logging.getLogger('rabin_cdc.debug').debug(
                f"{operation}: {details}", extra={'operation': operation}
            )

    def performance_log(self, operation: str, duration: float, **kwargs) -> None:
        """Record a timing and, at verbose levels, log it."""
        perf_data = {
            'timestamp': datetime.now().isoformat(),
            'operation': operation,
            'duration_seconds': duration,
            **kwargs
        }
        self.performance_logs.append(perf_data)

        if self.config.level in (LogLevel.VERBOSE, LogLevel.DEBUG):
            logging.getLogger('rabin_cdc.performance').info(
                f"{operation}: {duration:.3f}s", extra=perf_data
            )


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging output."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'module': record.name,
            'message': record.getMessage(),
            'line_number': record.lineno,
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        log_data.update({k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS})

        return json.dumps(log_data, default=str)


_logger = ChunkingLogger()


def get_logger(name: str = 'rabin_cdc') -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(level: Union[str, LogLevel] = LogLevel.NORMAL, **kwargs) -> None:
    """
    Configure library-wide logging.

    Args:
        level: Logging level
        **kwargs: Additional LogConfig fields
    """
    if isinstance(level, str):
        level = LogLevel(level.lower())

    _logger.configure(level=level, **kwargs)


def user_info(message: str) -> None:
    _logger.user_info(message)


def user_success(message: str) -> None:
    _logger.user_success(message)


def user_warning(message: str) -> None:
    _logger.user_warning(message)


def user_error(message: str) -> None:
    _logger.user_error(message)


def debug_operation(operation: str, details: Dict[str, Any]) -> None:
    _logger.debug_operation(operation, details)


def performance_log(operation: str, duration: float, **kwargs) -> None:
    _logger.performance_log(operation, duration, **kwargs)
