"""Message channel from script contexts to host logging.

Scripts emit ``(text, code)`` pairs; the bridge classifies each code into a
host severity, prefixes every line with the plugin identity and hands the
resulting LogEvent to a sink. The default sink is the
``clipscript.scripts`` logger.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, IntEnum

logger = logging.getLogger(__name__)

SCRIPTS_LOGGER_NAME = "clipscript.scripts"


class Severity(str, Enum):
    """Host log severity of a script message."""

    NOTE = "note"
    WARNING = "warning"
    ERROR = "error"

    @property
    def level(self) -> int:
        """Matching :mod:`logging` level."""
        return _LEVELS[self]


_LEVELS = {
    Severity.NOTE: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


class MessageCode(IntEnum):
    """Status codes a script context attaches to its messages."""

    FINISHED = 0
    ERROR = 1
    BAD_SYNTAX = 2
    EXCEPTION = 4
    PRINT = 5


_ESCALATED_CODES = frozenset({MessageCode.ERROR, MessageCode.BAD_SYNTAX, MessageCode.EXCEPTION})


def classify(code: int) -> Severity:
    """Map a message code to a host severity.

    Error, bad-syntax and exception codes become warnings; anything else,
    including unknown codes, is a note.
    """
    return Severity.WARNING if code in _ESCALATED_CODES else Severity.NOTE


@dataclass(frozen=True)
class LogEvent:
    """A single diagnostic line produced on behalf of a plugin."""

    text: str
    severity: Severity
    source: str

    @property
    def label(self) -> str:
        return f"scripts::{self.source}: "

    def format(self) -> str:
        """Text with the identity label before the first and every following line."""
        label = self.label
        return label + self.text.replace("\n", "\n" + label)


LogSink = Callable[[LogEvent], None]


def log_to_logger(event: LogEvent) -> None:
    """Default sink: write the event to the scripts logger."""
    logging.getLogger(SCRIPTS_LOGGER_NAME).log(event.severity.level, "%s", event.format())


class MessageBridge:
    """Fire-and-forget channel from one plugin's script contexts to a log sink.

    The same bridge is shared by every context a plugin owns, so output from
    the plugin-level sandbox and from per-item instances stays attributable.
    """

    def __init__(self, identity: str, sink: LogSink | None = None) -> None:
        self.identity = identity
        self._sink = sink or log_to_logger
        self._lock = threading.Lock()

    def send_message(self, message: bytes | str, code: int = MessageCode.PRINT) -> None:
        """Accept a raw message from a script context."""
        if not message:
            return

        if isinstance(message, (bytes, bytearray)):
            text = bytes(message).decode("utf-8", errors="replace")
        else:
            text = str(message)

        self.log(text, classify(code))

    def log(self, text: str, severity: Severity = Severity.NOTE) -> LogEvent:
        """Deliver a host-side diagnostic for this plugin."""
        event = LogEvent(text=text, severity=severity, source=self.identity)
        with self._lock:
            try:
                self._sink(event)
            except Exception:
                # A broken sink must not reach the script that emitted the message
                logger.exception("Log sink failed for plugin '%s'", self.identity)
        return event

    def warning(self, text: str) -> LogEvent:
        return self.log(text, Severity.WARNING)

    def error(self, text: str) -> LogEvent:
        return self.log(text, Severity.ERROR)
