r"""Temporary log suppression for catalog initialization output.

A population pass logs every resolved source and loaded batch at DEBUG/INFO.
The CLI ``--quiet`` flag and tests use these helpers to hide that chatter for
the duration of a ``with`` block while warnings stay visible.

Examples:
    >>> with quiet_logger(["CATALOG_INIT", "CONFIG"]):
    ...     initialization.populate_catalog(context)

    >>> with suppress_logger("CATALOG_INIT", message_patterns=[r"Loaded"]):
    ...     initialization.populate_catalog(context)
"""

import logging
import re
from collections.abc import Iterator
from contextlib import contextmanager


def _as_names(logger_name: str | list[str]) -> list[str]:
    return [logger_name] if isinstance(logger_name, str) else list(logger_name)


class LoggerFilter(logging.Filter):
    """Drop records that match every given criterion.

    An empty criterion matches everything. Records from loggers or at levels
    outside the criteria always pass. With ``invert=True`` only records whose
    message matches a pattern pass.
    """

    def __init__(
        self,
        logger_names: list[str] | None = None,
        message_patterns: list[str] | None = None,
        levels: list[int] | None = None,
        invert: bool = False,
        name: str = "",
    ):
        super().__init__(name=name)
        self.logger_names = set(logger_names or ())
        self.levels = set(levels or ())
        self.message_patterns = [re.compile(pattern) for pattern in message_patterns or ()]
        self.invert = invert

    def _in_scope(self, record: logging.LogRecord) -> bool:
        if self.logger_names and record.name not in self.logger_names:
            return False
        return not self.levels or record.levelno in self.levels

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._in_scope(record):
            return True
        if not self.message_patterns:
            return self.invert
        matched = any(pattern.search(record.getMessage()) for pattern in self.message_patterns)
        return matched == self.invert

    def __repr__(self) -> str:
        criteria = []
        if self.logger_names:
            criteria.append(f"loggers={sorted(self.logger_names)}")
        if self.levels:
            criteria.append(f"levels={[logging.getLevelName(level) for level in sorted(self.levels)]}")
        if self.message_patterns:
            criteria.append(f"patterns={[pattern.pattern for pattern in self.message_patterns]}")
        if self.invert:
            criteria.append("inverted=True")
        return f"LoggerFilter({', '.join(criteria) or 'no criteria'})"


@contextmanager
def suppress_logger(
    logger_name: str | list[str],
    levels: list[int] | None = None,
    message_patterns: list[str] | None = None,
) -> Iterator[LoggerFilter]:
    """Attach a :class:`LoggerFilter` to the named loggers for the block."""
    names = _as_names(logger_name)
    log_filter = LoggerFilter(logger_names=names, levels=levels, message_patterns=message_patterns)
    loggers = [logging.getLogger(name) for name in names]

    for logger in loggers:
        logger.addFilter(log_filter)
    try:
        yield log_filter
    finally:
        for logger in loggers:
            logger.removeFilter(log_filter)


@contextmanager
def suppress_logger_level(logger_name: str | list[str], level: int) -> Iterator[dict[str, int]]:
    """Set the named loggers to ``level`` for the block.

    Yields:
        The levels the loggers had before, by name
    """
    names = _as_names(logger_name)
    previous = {name: logging.getLogger(name).level for name in names}

    for name in names:
        logging.getLogger(name).setLevel(level)
    try:
        yield previous
    finally:
        for name, original in previous.items():
            logging.getLogger(name).setLevel(original)


@contextmanager
def quiet_logger(logger_name: str | list[str]) -> Iterator[dict[str, int]]:
    """Hide INFO and DEBUG from the named loggers; WARNING and above still show."""
    with suppress_logger_level(logger_name, logging.WARNING) as previous:
        yield previous


__all__ = ["LoggerFilter", "suppress_logger", "suppress_logger_level", "quiet_logger"]
