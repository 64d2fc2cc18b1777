"""Unified logger providing technical instrumentation and activity logging."""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional, Tuple

import logfire

from harness.settings import get_harness_settings


_activity_logger: Optional[logging.Logger] = None
_activity_log_path: Optional[Path] = None
_activity_logger_lock = Lock()
_logfire_config_state: Optional[Tuple[bool, bool]] = None
_logfire_instrumented = False
_logger_internal = logging.getLogger(__name__)


def refresh_logfire_configuration(force: bool = False) -> None:
    """
    Reconfigure the global Logfire client based on current settings.

    Args:
        force: When True, always reapply configuration even if nothing changed.
    """
    global _logfire_config_state

    try:
        settings = get_harness_settings()
        enabled = settings.logfire_enabled
        console = settings.log_console
    except Exception as exc:  # pragma: no cover
        _logger_internal.error("Failed to read logfire settings, defaulting to disabled: %s", exc)
        enabled = False
        console = False

    desired_state = (enabled, console)
    if not force and _logfire_config_state == desired_state:
        return

    send_option: str | bool = "if-token-present" if enabled else False

    logfire.configure(
        send_to_logfire=send_option,
        console=None if console else False,
        scrubbing=False,
    )

    _logfire_config_state = desired_state


# Initialize configuration eagerly so early logging honors current settings.
refresh_logfire_configuration(force=True)


def _ensure_activity_logger() -> logging.Logger:
    """Create or return the process-wide activity logger."""

    global _activity_logger
    global _activity_log_path

    desired_path = get_harness_settings().activity_log_path

    if _activity_logger and _activity_log_path == desired_path:
        return _activity_logger

    with _activity_logger_lock:
        if _activity_logger and _activity_log_path == desired_path:
            return _activity_logger

        # Tear down existing handlers if the target path changes between runs
        if _activity_logger and _activity_log_path != desired_path:
            for handler in list(_activity_logger.handlers):
                _activity_logger.removeHandler(handler)
                handler.close()
            _activity_logger = None

        desired_path.parent.mkdir(parents=True, exist_ok=True)

        handler = RotatingFileHandler(desired_path, maxBytes=1_048_576, backupCount=5)
        handler.setFormatter(logging.Formatter("%(message)s"))

        logger = logging.getLogger("harness.activity")
        logger.setLevel(logging.INFO)
        logger.propagate = False

        if not logger.handlers:
            logger.addHandler(handler)

        _activity_logger = logger
        _activity_log_path = desired_path
        return logger


class UnifiedLogger:
    """Unified logger providing instrumentation and persistent activity logging."""

    def __init__(self, tag: str, scope: Optional[str] = None):
        """
        Initialize unified logger for a module or component.

        Args:
            tag: Module or component identifier
            scope: Optional default scope recorded with activity entries
        """
        self.tag = tag
        self.scope = scope
        self._logfire_instance = None  # Lazy initialization

    @property
    def _logfire(self):
        """Lazy-loaded Logfire instance."""
        if self._logfire_instance is None:
            self._logfire_instance = self._setup_logfire()
        return self._logfire_instance

    def _setup_logfire(self):
        """Set up Logfire client."""
        refresh_logfire_configuration()
        global _logfire_instrumented
        if not _logfire_instrumented:
            # Profile models are pydantic; validation spans come for free
            logfire.instrument_pydantic()
            _logfire_instrumented = True
        return logfire

    # Technical Instrumentation Methods

    def info(self, message: str, **extra: Any) -> None:
        """Technical info logging."""
        self._logfire.info(message, **extra)

    def warning(self, message: str, **extra: Any) -> None:
        """Technical warning logging."""
        self._logfire.warning(message, **extra)

    def error(self, message: str, **extra: Any) -> None:
        """Technical error logging."""
        self._logfire.error(message, **extra)

    def debug(self, message: str, **extra: Any) -> None:
        """Technical debug logging."""
        self._logfire.debug(message, **extra)

    @contextmanager
    def span(self, operation: str, **span_data: Any):
        """
        Manual instrumentation span for critical code paths.

        Usage:
            with logger.span("composition_setup", composition=short_name):
                # critical operation
                pass
        """
        with self._logfire.span(f"{self.tag}:{operation}", **span_data):
            yield

    def trace(self, func_name_template: Optional[str] = None):
        """
        Decorator for function instrumentation with sensible defaults.

        Args:
            func_name_template: Optional template for span name

        Usage:
            @logger.trace()  # Full instrumentation with function name
            def critical_function(profile: str): pass
        """
        def decorator(func):
            span_name = func_name_template or f"{self.tag}:{func.__name__}"
            return self._logfire.instrument(
                span_name,
                extract_args=True,
                record_return=True
            )(func)
        return decorator

    # Activity Logging

    def activity(
        self,
        message: str,
        *,
        scope: Optional[str] = None,
        level: str = "info",
        metadata: Optional[Dict[str, Any]] = None,
        **context: Any,
    ) -> None:
        """Record an operational activity entry and mirror it to Logfire.

        Args:
            message: Human-readable description of the activity.
            scope: Identifier of what the activity concerns (e.g. a composition
                short name). Falls back to the logger's scope, then its tag.
            level: Activity level; used for Logfire mirroring and stored payload.
            metadata: Optional structured payload persisted alongside the message.
            **context: Additional context persisted with the entry.
        """

        resolved_scope = scope or self.scope or self.tag

        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "level": level,
            "tag": self.tag,
            "scope": resolved_scope,
            "message": message,
        }

        if metadata:
            payload["metadata"] = metadata

        if context:
            payload["context"] = context

        activity_logger = _ensure_activity_logger()
        activity_logger.info(json.dumps(payload, ensure_ascii=False, default=str))

        log_method = getattr(self._logfire, level, None)
        if callable(log_method):
            log_method(message, tag=self.tag, scope=resolved_scope, metadata=metadata, **context)
        else:
            self._logfire.info(message, tag=self.tag, scope=resolved_scope, metadata=metadata, level=level, **context)
