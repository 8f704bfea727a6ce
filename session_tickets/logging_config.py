"""Library logging hooks.

session-tickets never configures the root logger. Importing the package
installs a ``NullHandler`` on the ``session_tickets`` logger so nothing is
printed unless the host configures logging. Hosts that want the
``[op:token]`` prefix attach ``ContextFilter`` to their own handlers with
``attach_context()``; hosts without any logging setup can route just this
library's records to stderr with ``enable_logging()``.
"""

from __future__ import annotations

import logging
import sys

from session_tickets.log_context import ContextFilter

LIBRARY_LOGGER = "session_tickets"
CONTEXT_FMT = "%(asctime)s %(levelname)s %(name)s: %(ctx)s%(message)s"
DATE_FMT = "%H:%M:%S"

logger = logging.getLogger(__name__)

_enabled_handler: logging.Handler | None = None


def install_null_handler() -> None:
    """Attach a single ``NullHandler`` to the library logger."""
    lib = logging.getLogger(LIBRARY_LOGGER)
    if not any(isinstance(h, logging.NullHandler) for h in lib.handlers):
        lib.addHandler(logging.NullHandler())


def attach_context(handler: logging.Handler, *, fmt: str | None = CONTEXT_FMT) -> logging.Handler:
    """Make *handler* render ``%(ctx)s`` for session-tickets records.

    Adds ``ContextFilter`` once and, unless *fmt* is None, installs a
    formatter using it. Returns the handler for chaining.
    """
    if not any(isinstance(f, ContextFilter) for f in handler.filters):
        handler.addFilter(ContextFilter())
    if fmt is not None:
        handler.setFormatter(logging.Formatter(fmt, datefmt=DATE_FMT))
    return handler


def enable_logging(level: int = logging.INFO, handler: logging.Handler | None = None) -> None:
    """Send library records to *handler* (stderr by default) at *level*.

    Propagation to the root logger is switched off so records are not
    emitted twice. Calling again replaces the previously enabled handler.
    """
    global _enabled_handler  # noqa: PLW0603
    lib = logging.getLogger(LIBRARY_LOGGER)
    disable_logging()
    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
    _enabled_handler = attach_context(handler)
    lib.addHandler(_enabled_handler)
    lib.setLevel(level)
    lib.propagate = False
    logger.debug("Library logging enabled (level=%s)", logging.getLevelName(level))


def disable_logging() -> None:
    """Remove handlers added by ``enable_logging`` and restore propagation."""
    global _enabled_handler  # noqa: PLW0603
    lib = logging.getLogger(LIBRARY_LOGGER)
    if _enabled_handler is not None:
        lib.removeHandler(_enabled_handler)
        _enabled_handler = None
    lib.setLevel(logging.NOTSET)
    lib.propagate = True
