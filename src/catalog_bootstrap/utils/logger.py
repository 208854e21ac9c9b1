"""
Rich component loggers for catalog bootstrap.

Every module logs through a :class:`ComponentLogger`, a thin wrapper around a
stdlib logger that prefixes messages with the component name and styles them
with Rich markup. The first :func:`get_logger` call installs a single
``RichHandler`` on the root logger.

Usage:
    # Colour from ``logging.logging_colors.resources`` in config.yml
    logger = get_logger("resources")

    # Fixed identity, as used by the initialization modules
    logger = get_logger(name="CATALOG_INIT", color="sky_blue2")
    logger.debug("Loading initial catalog from file:///srv/catalog.bom")
    logger.warning("Error importing catalog from file:///srv/catalog.bom")
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from catalog_bootstrap.utils.config import get_config_value

_ERROR_STYLE = ("bold red", "❌ ")


class ComponentLogger:
    """Component-prefixed, Rich-styled facade over a stdlib logger."""

    def __init__(self, base_logger: logging.Logger, component_name: str, color: str = "white"):
        self.base_logger = base_logger
        self.component_name = component_name
        self.color = color

    def _format_message(self, message: str, style: str, emoji: str = "") -> str:
        text = f"{emoji}{self.component_name.title()}: {message}"
        return f"[{style}]{text}[/{style}]" if style else text

    def _shade(self, modifier: str) -> str:
        return f"{modifier} {self.color}"

    def debug(self, message: str) -> None:
        self.base_logger.debug(self._format_message(message, self._shade("dim"), "🔍 "))

    def info(self, message: str) -> None:
        self.base_logger.info(self._format_message(message, self.color))

    def key_info(self, message: str) -> None:
        """Info that should stand out, e.g. the final catalog summary."""
        self.base_logger.info(self._format_message(message, self._shade("bold")))

    def success(self, message: str) -> None:
        self.base_logger.info(self._format_message(message, "bold green", "✅ "))

    def warning(self, message: str, exc_info: bool | BaseException = False) -> None:
        """Log a warning, optionally with the traceback of ``exc_info``."""
        self.base_logger.warning(self._format_message(message, "bold yellow", "⚠️  "), exc_info=exc_info)

    def error(self, message: str, exc_info: bool | BaseException = False) -> None:
        self.base_logger.error(self._format_message(message, *_ERROR_STYLE), exc_info=exc_info)

    def critical(self, message: str, *args, **kwargs) -> None:
        self.base_logger.critical(self._format_message(message, *_ERROR_STYLE), *args, **kwargs)

    def exception(self, message: str, *args, **kwargs) -> None:
        self.base_logger.exception(self._format_message(message, *_ERROR_STYLE), *args, **kwargs)

    def log(self, level: int, message: str, *args, **kwargs) -> None:
        self.base_logger.log(level, message, *args, **kwargs)

    @property
    def level(self) -> int:
        return self.base_logger.level

    @property
    def name(self) -> str:
        return self.base_logger.name

    def setLevel(self, level: int) -> None:
        self.base_logger.setLevel(level)

    def isEnabledFor(self, level: int) -> bool:
        return self.base_logger.isEnabledFor(level)


def _handler_options() -> dict:
    try:
        return {
            "rich_tracebacks": get_config_value("logging.rich_tracebacks", True),
            "tracebacks_show_locals": get_config_value("logging.show_traceback_locals", False),
            "show_path": get_config_value("logging.show_full_paths", False),
        }
    except Exception:
        # No config.yml: locals stay hidden in tracebacks
        return {"rich_tracebacks": True, "tracebacks_show_locals": False, "show_path": False}


def _setup_rich_logging(level: int = logging.INFO) -> None:
    """Install the Rich handler on the root logger unless one is already there."""
    root_logger = logging.getLogger()
    if any(isinstance(handler, RichHandler) for handler in root_logger.handlers):
        return

    root_logger.setLevel(level)
    root_logger.addHandler(
        RichHandler(
            console=Console(stderr=True, width=120),
            markup=True,
            show_time=True,
            show_level=True,
            **_handler_options(),
        )
    )

    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(
    component_name: str = None,
    level: int = logging.INFO,
    *,
    name: str = None,
    color: str = None,
) -> ComponentLogger:
    """
    Get a component logger.

    Args:
        component_name: Component name; colour is read from
            ``logging.logging_colors.<component_name>``
        level: Root logger level applied when the handler is first installed
        name: Explicit logger name (keyword-only), bypasses the colour lookup
        color: Explicit Rich colour for ``name`` (keyword-only)

    Examples:
        logger = get_logger("parsers")
        logger = get_logger(name="CATALOG_INIT", color="sky_blue2")
    """
    _setup_rich_logging(level)

    if name is not None:
        return ComponentLogger(logging.getLogger(name), name, color or "white")

    if component_name is None:
        raise ValueError(
            "Component name is required. Usage: get_logger('component_name') or "
            "get_logger(name='custom_name', color='blue')"
        )

    try:
        color = get_config_value(f"logging.logging_colors.{component_name}") or "white"
    except Exception:
        color = "white"

    return ComponentLogger(logging.getLogger(component_name), component_name, color)
