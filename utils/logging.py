"""
Structured Logging Utilities

Contextual logging for draft operations: human-readable console output plus
structured JSON files. Draft context (league, pick, team, job) set with
set_draft_context() is attached to every record emitted in the same task.
"""
import contextvars
import json
import logging
import os
import time
import uuid
from datetime import datetime, UTC
from logging.handlers import RotatingFileHandler
from typing import Dict, Any, Optional, Union

# Context variable for request tracking across async calls
log_context: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar('log_context', default={})

logger = logging.getLogger(f'{__name__}.logging_utils')

JSONValue = Union[
    str,
    int,
    float,
    bool,
    None,
    dict[str, Any],
    list[Any]
]

# Attributes every LogRecord carries; anything else came in through `extra`
_RECORD_ATTRIBUTES = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'getMessage', 'exc_info',
    'exc_text', 'stack_info', 'taskName'
}


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured file logging."""

    def format(self, record) -> str:
        """Format log record as JSON with draft context information."""
        log_obj: dict[str, JSONValue] = {
            'timestamp': datetime.now(UTC).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage()
        }

        if record.funcName:
            log_obj['function'] = record.funcName
        if record.lineno:
            log_obj['line'] = record.lineno

        if record.exc_info:
            log_obj['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else 'Unknown',
                'message': str(record.exc_info[1]) if record.exc_info[1] else 'No message',
                'traceback': self.formatException(record.exc_info)
            }

        context = log_context.get({})
        if context:
            log_obj['context'] = dict(context)

            # Promote correlation keys so log queries don't need to dig into context
            for key in ('trace_id', 'league_id'):
                if key in context:
                    log_obj[key] = context[key]

        extra_data = {}
        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRIBUTES:
                continue
            try:
                json.dumps(value)
                extra_data[key] = value
            except (TypeError, ValueError):
                extra_data[key] = str(value)

        if extra_data:
            log_obj['extra'] = extra_data

        return json.dumps(log_obj, ensure_ascii=False)


class ContextualLogger:
    """
    Logger wrapper that provides contextual information and structured logging.

    Keyword arguments passed to the level methods travel as structured fields
    (`extra`), so callers write `logger.info("Pick applied", pick=5)` rather
    than formatting values into the message.
    """

    def __init__(self, logger_name: str):
        """
        Initialize contextual logger.

        Args:
            logger_name: Name for the underlying logger
        """
        self.logger = logging.getLogger(logger_name)
        self._start_time: Optional[float] = None

    def start_operation(self, operation_name: Optional[str] = None) -> str:
        """
        Start timing an operation and generate a trace ID.

        Args:
            operation_name: Optional name for the operation being tracked

        Returns:
            Generated trace ID for this operation
        """
        self._start_time = time.time()
        trace_id = str(uuid.uuid4())[:8]

        current_context = dict(log_context.get({}))
        current_context['trace_id'] = trace_id
        if operation_name:
            current_context['operation'] = operation_name
        log_context.set(current_context)

        return trace_id

    def end_operation(self, trace_id: str, operation_result: str = "completed") -> None:
        """
        End an operation and log the final duration.

        Args:
            trace_id: The trace ID returned by start_operation
            operation_result: Result status (e.g., "completed", "failed", "skipped")
        """
        if self._start_time is None:
            self.warning("end_operation called without corresponding start_operation")
            return

        duration_ms = int((time.time() - self._start_time) * 1000)

        self.info(f"Operation {operation_result}",
                  trace_id=trace_id,
                  final_duration_ms=duration_ms,
                  operation_result=operation_result)

        current_context = dict(log_context.get({}))
        current_context.pop('operation', None)
        if current_context.get('trace_id') == trace_id:
            current_context.pop('trace_id', None)
        log_context.set(current_context)

        self._start_time = None

    def _get_duration_ms(self) -> Optional[int]:
        """Get operation duration in milliseconds if start_operation was called."""
        if self._start_time:
            return int((time.time() - self._start_time) * 1000)
        return None

    def _with_duration(self, kwargs: Dict[str, Any]) -> Dict[str, Any]:
        duration = self._get_duration_ms()
        if duration is not None:
            kwargs['duration_ms'] = duration
        return kwargs

    def debug(self, message: str, **kwargs):
        """Log debug message with context."""
        self.logger.debug(message, extra=self._with_duration(kwargs))

    def info(self, message: str, **kwargs):
        """Log info message with context."""
        self.logger.info(message, extra=self._with_duration(kwargs))

    def warning(self, message: str, **kwargs):
        """Log warning message with context."""
        self.logger.warning(message, extra=self._with_duration(kwargs))

    def error(self, message: str, error: Optional[Exception] = None, **kwargs):
        """
        Log error message with context and exception information.

        Args:
            message: Error message
            error: Optional exception object
            **kwargs: Additional context
        """
        kwargs = self._with_duration(kwargs)

        if error:
            kwargs['error'] = {
                'type': type(error).__name__,
                'message': str(error)
            }
            self.logger.error(message, exc_info=error, extra=kwargs)
        else:
            self.logger.error(message, extra=kwargs)

    def exception(self, message: str, **kwargs):
        """Log exception with full traceback and context."""
        self.logger.exception(message, extra=self._with_duration(kwargs))


def set_draft_context(
    league_id: Optional[int] = None,
    pick: Optional[int] = None,
    team_id: Optional[int] = None,
    user_id: Optional[int] = None,
    job_id: Optional[str] = None,
    **additional_context
):
    """
    Set draft-specific context for logging.

    Args:
        league_id: Fantasy league being drafted
        pick: Overall pick number the operation concerns
        team_id: Fantasy team on the clock or making the pick
        user_id: User that triggered the operation (None for the system)
        job_id: Queue job identifier for scheduled work
        **additional_context: Any additional context to include
    """
    context = dict(log_context.get({}))

    if league_id is not None:
        context['league_id'] = league_id
    if pick is not None:
        context['pick'] = pick
    if team_id is not None:
        context['team_id'] = team_id
    if user_id is not None:
        context['user_id'] = user_id
    if job_id:
        context['job_id'] = job_id

    context.update(additional_context)

    log_context.set(context)


def clear_context():
    """Clear the current logging context."""
    log_context.set({})


def get_contextual_logger(logger_name: str) -> ContextualLogger:
    """
    Get a contextual logger instance.

    Args:
        logger_name: Name for the logger (typically __name__)

    Returns:
        ContextualLogger instance
    """
    return ContextualLogger(logger_name)


def setup_logging(level: str = "INFO", log_dir: str = "logs") -> logging.Logger:
    """Configure hybrid logging: human-readable console + structured JSON files."""
    os.makedirs(log_dir, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Avoid duplicate handlers when a worker re-runs setup
    if root_logger.handlers:
        return root_logger

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    ))
    root_logger.addHandler(console_handler)

    json_handler = RotatingFileHandler(
        os.path.join(log_dir, 'draft_clock.json'),
        maxBytes=5 * 1024 * 1024,  # 5MB
        backupCount=5
    )
    json_handler.setFormatter(JSONFormatter())
    root_logger.addHandler(json_handler)

    return root_logger
