# from __future__ import annotations

"""
Shared logging helpers for the tracker nodes.
Repeated identical events (e.g. waiting for the first pose every tick)
are collapsed into a single line with a running multiplier.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class LogLevel(Enum):
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


@dataclass
class LogEvent:
    message: str
    source: str
    level: LogLevel
    counter: int = 0
    exception: Optional[Exception] = None

    def same_identity(self, other: "LogEvent") -> bool:
        return (
            self.level == other.level and
            self.source == other.source and
            self.message == other.message
        )

    def render(self) -> str:
        if self.exception is not None:
            return f"Error in {self.source}: {self.exception}. {self.message}".strip()
        if self.source:
            return f"{self.source}: {self.message}".strip()
        return self.message

#--------------------------------------------------------------------------------
def log_event(
    logger,
    event: LogEvent,
    last_event: Optional[LogEvent] = None,
) -> LogEvent:
    """
    Emit an event through a ROS style logger, skipping repeats.

    Keep the returned event and pass it back as last_event on the next call:
    - same event as last_event: counter is incremented, a "x N" marker is
      written to stdout and the logger is not called
    - otherwise: the logger is called and the counter starts again at 0
    """
    if last_event is not None and last_event.same_identity(event):
        event.counter = last_event.counter + 1
        print(f"\r x {event.counter}\t", end="", flush=True)
        return event

    if last_event is not None and last_event.counter > 0:
        # Terminate the multiplier line
        print("")

    text = event.render()
    if event.level == LogLevel.ERROR:
        logger.error(text)
    elif event.level == LogLevel.WARN:
        logger.warn(text)
    elif event.level == LogLevel.DEBUG:
        logger.debug(text)
    else:
        logger.info(text)

    event.counter = 0
    return event

#--------------------------------------------------------------------------------
# Convenience wrappers
def log_info(logger, message: str, source: str = "", last_event: Optional[LogEvent] = None) -> LogEvent:
    return log_event(logger, LogEvent(message=message, source=source, level=LogLevel.INFO), last_event)

#--------------------------------------------------------------------------------
def log_warn(logger, message: str, source: str = "", last_event: Optional[LogEvent] = None) -> LogEvent:
    return log_event(logger, LogEvent(message=message, source=source, level=LogLevel.WARN), last_event)

#--------------------------------------------------------------------------------
def log_debug(logger, message: str, source: str = "", last_event: Optional[LogEvent] = None) -> LogEvent:
    return log_event(logger, LogEvent(message=message, source=source, level=LogLevel.DEBUG), last_event)

#--------------------------------------------------------------------------------
def log_error(logger, error: Exception, source: str, message: str = "", last_event: Optional[LogEvent] = None) -> LogEvent:
    return log_event(logger, LogEvent(message=message, source=source, level=LogLevel.ERROR, exception=error), last_event)
