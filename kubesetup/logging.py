"""Logging configuration for the kubesetup package.

Every record emitted under the ``kubesetup`` logger goes to two sinks: the
invoking terminal and the local syslog facility, tagged with a fixed
identifier. Command output is fed through the same logger line by line, so
nothing reaches one sink without the other.
"""
import logging
import logging.handlers
import sys
from typing import Optional

from kubesetup.config import Config

LOGGER_NAME = "kubesetup"


def build_syslog_handler(tag: str, address: str) -> logging.Handler:
    """Create a syslog handler that prefixes every line with ``tag``.

    Raises:
        OSError: If the syslog socket cannot be opened
    """
    handler = logging.handlers.SysLogHandler(address=address)
    # Python 3.11+ swallows the connect error and leaves the socket unset
    if getattr(handler, "socket", None) is None:
        handler.close()
        raise OSError(f"cannot connect to syslog socket {address}")
    handler.ident = f"{tag}: "
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def setup_logging(
    debug_mode: bool = False,
    tag: str = Config.LOG_TAG,
    syslog_address: Optional[str] = Config.SYSLOG_ADDRESS,
    syslog_handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """
    Configure the kubesetup logger with a console handler and a syslog handler.

    Args:
        debug_mode: Enable debug logging
        tag: Identifier prepended to syslog lines
        syslog_address: Unix socket path of the syslog daemon, or None to skip it
        syslog_handler: Pre-built handler used instead of opening ``syslog_address``

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if debug_mode else logging.INFO
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Remove existing handlers to avoid duplicates
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console)

    if syslog_handler is None and syslog_address:
        try:
            syslog_handler = build_syslog_handler(tag, syslog_address)
        except OSError as e:
            logger.warning(f"WARNING: syslog unavailable at {syslog_address} ({e}); logging to terminal only")
    if syslog_handler is not None:
        logger.addHandler(syslog_handler)

    # Disable debug logging for noisy libraries
    if not debug_mode:
        logging.getLogger("urllib3").setLevel(logging.WARNING)
        logging.getLogger("kubernetes").setLevel(logging.WARNING)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child of the kubesetup logger."""
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
