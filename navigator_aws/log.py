"""
Logging facade: the narrow leveled logger used across navigator_aws.

Any object exposing ``debug``, ``info``, ``warn`` and ``error`` with the
signature ``(msg, **attrs)`` can be used as a logger. ``StdLogger`` adapts
the standard ``logging`` module to that shape.

Security Note:
    Never pass key material or secret payloads as attributes.
    Only log identifiers (role ARNs, secret names, regions).
"""
import logging
from typing import Any, Optional, Protocol, Union, runtime_checkable

DEFAULT_LOGGER_NAME = "navigator.aws"


@runtime_checkable
class Logger(Protocol):
    """Leveled, structured logger."""

    def debug(self, msg: str, **attrs: Any) -> None: ...

    def info(self, msg: str, **attrs: Any) -> None: ...

    def warn(self, msg: str, **attrs: Any) -> None: ...

    def error(self, msg: str, **attrs: Any) -> None: ...


def format_attrs(attrs: dict[str, Any]) -> str:
    """Render attributes as `` key=value`` pairs, in insertion order."""
    if not attrs:
        return ""
    return "".join(f" {key}={value!r}" for key, value in attrs.items())


class StdLogger:
    """Logger backed by a stdlib ``logging.Logger``.

    Attributes are appended to the message as ``key=value`` pairs and are
    also available to handlers as ``record.attrs``.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _log(self, level: int, msg: str, attrs: dict[str, Any]) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(
                level, "%s%s", msg, format_attrs(attrs),
                extra={"attrs": attrs},
                stacklevel=3,
            )

    def debug(self, msg: str, **attrs: Any) -> None:
        self._log(logging.DEBUG, msg, attrs)

    def info(self, msg: str, **attrs: Any) -> None:
        self._log(logging.INFO, msg, attrs)

    def warn(self, msg: str, **attrs: Any) -> None:
        self._log(logging.WARNING, msg, attrs)

    def error(self, msg: str, **attrs: Any) -> None:
        self._log(logging.ERROR, msg, attrs)


def get_logger(logger: Union[Logger, logging.Logger, None] = None) -> Logger:
    """Coerce ``logger`` into a ``Logger``.

    Args:
        logger: ``None`` for the default ``navigator.aws`` logger, a stdlib
            ``logging.Logger`` to wrap, or any ``Logger`` implementation.

    Returns:
        A ``Logger`` instance.

    Raises:
        TypeError: If ``logger`` is neither a stdlib logger nor implements
            the ``Logger`` protocol.
    """
    if logger is None:
        return StdLogger()
    if isinstance(logger, logging.Logger):
        return StdLogger(logger)
    if isinstance(logger, Logger):
        return logger
    raise TypeError(
        f"logger must implement debug/info/warn/error, got {type(logger).__name__}"
    )
