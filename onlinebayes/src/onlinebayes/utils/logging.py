"""Structured JSON logging with a process-wide threshold and value redaction.

What:
  Offer a small facade over Python streams so every onlinebayes component can
  emit JSON log lines with consistent fields while never echoing the raw
  observations it classifies.

Why:
  Models are trained on user text and identifiers. Logging batch sizes and
  feature names is useful when diagnosing a model; logging the values
  themselves is not, and would leak them into shared log storage.

How:
  Provide a :class:`JsonLogger` dataclass bound to a component name. Each call
  is compared against the threshold set through :func:`set_log_level`; extras
  are scrubbed by a recursive redaction helper before being serialised with
  ``json.dump``.

Interfaces:
  :class:`JsonLogger`, :func:`get_logger`, :func:`set_log_level`,
  :func:`get_log_level`.

Invariants & Safety:
  - Every emitted payload holds ``ts``, ``lvl``, ``msg`` and ``component``.
  - Keys in :data:`SENSITIVE_KEYS` are replaced with ``[redacted]`` at any
    nesting depth.
  - Streams are flushed after every write.
"""
from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


REDACTED = "[redacted]"
SENSITIVE_KEYS = frozenset({"text", "value", "inputs", "tokens"})
LEVELS: Dict[str, int] = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}

_THRESHOLD = LEVELS["WARN"]


def set_log_level(level: str) -> None:
    """Set the minimum severity emitted by every :class:`JsonLogger`.

    Raises:
      ValueError: If ``level`` is not one of :data:`LEVELS`.
    """

    global _THRESHOLD
    name = level.upper()
    if name == "WARNING":
        name = "WARN"
    if name not in LEVELS:
        raise ValueError(f"unknown log level '{level}'")
    _THRESHOLD = LEVELS[name]


def get_log_level() -> str:
    """Return the name of the current threshold."""

    for name, value in LEVELS.items():
        if value == _THRESHOLD:
            return name
    return "WARN"


@dataclass
class JsonLogger:
    """Structured JSON logger with automatic redaction.

    What:
      Emit single-line JSON entries that include a timestamp, severity, a
      component tag and optional supplemental fields.

    Why:
      Centralising the format avoids duplicating the redaction logic and keeps
      the schema uniform for tests and log tooling.

    How:
      Store the destination stream and component label, then expose
      :meth:`debug`, :meth:`info`, :meth:`warning` and :meth:`error` which all
      go through :meth:`log`. The stream defaults to whatever ``sys.stdout`` is
      at the time of the call so test capture works.
    """

    stream: Any = None
    component: str = "onlinebayes"
    _extra_defaults: Dict[str, Any] = field(default_factory=dict)

    def enabled(self, level: str) -> bool:
        """Return ``True`` when ``level`` passes the process-wide threshold."""

        return LEVELS.get(level.upper(), LEVELS["ERROR"]) >= _THRESHOLD

    def log(self, level: str, message: str, *, extra: Optional[Dict[str, Any]] = None) -> None:
        """Serialise ``message`` and ``extra`` metadata as one JSON line.

        Args:
          level: Severity (``"DEBUG"``, ``"INFO"``, ``"WARN"`` or ``"ERROR"``).
          message: Short event name.
          extra: Optional context dictionary, redacted recursively.
        """

        if not self.enabled(level):
            return
        payload: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "lvl": level.upper(),
            "msg": message,
            "component": self.component,
        }
        if self._extra_defaults:
            payload.update(self._redact(self._extra_defaults))
        if extra:
            payload.update(self._redact(extra))
        stream = self.stream if self.stream is not None else sys.stdout
        json.dump(payload, stream, separators=(",", ":"), default=str)
        stream.write("\n")
        stream.flush()

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log("DEBUG", message, extra=kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log("INFO", message, extra=kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log("WARN", message, extra=kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log("ERROR", message, extra=kwargs)

    def bind(self, **kwargs: Any) -> "JsonLogger":
        """Return a logger that adds ``kwargs`` to every entry."""

        merged = dict(self._extra_defaults)
        merged.update(kwargs)
        return JsonLogger(stream=self.stream, component=self.component, _extra_defaults=merged)

    @staticmethod
    def _redact(data: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of ``data`` with :data:`SENSITIVE_KEYS` masked."""

        result: Dict[str, Any] = {}
        for key, value in data.items():
            if key in SENSITIVE_KEYS:
                result[key] = REDACTED
            elif isinstance(value, dict):
                result[key] = JsonLogger._redact(value)
            else:
                result[key] = value
        return result


def get_logger(component: str) -> JsonLogger:
    """Construct a :class:`JsonLogger` for the requested component."""

    return JsonLogger(component=component)
