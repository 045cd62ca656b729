import logging
from typing import IO, Any, Optional

# Parent of every logger this package emits on.
LIBRARY_LOGGER = "rest_navigator"

LOG_EXTRA_FIELDS = (
    "request_id",
    "method",
    "uri",
    "status",
    "duration_ms",
    "attempt",
    "error_type",
)

_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


def parse_level(level: str) -> int:
    """Map a level name (any case) to its numeric value; unknown names raise ValueError."""
    name = level.strip().upper()
    if name not in _LEVELS:
        raise ValueError(f"Unknown log level {level!r}; expected one of {', '.join(_LEVELS)}.")
    return logging.getLevelName(name)


def apply_log_level(level: str) -> None:
    """Set the threshold of the package loggers without touching handlers."""
    logging.getLogger(LIBRARY_LOGGER).setLevel(parse_level(level))


class LogfmtFormatter(logging.Formatter):
    """
    One `key=value` line per record.
    - `event` is the record message
    - known extras print in LOG_EXTRA_FIELDS order, missing ones are skipped
    """

    def format(self, record: logging.LogRecord) -> str:
        pairs = [("level", record.levelname.lower()), ("logger", record.name)]

        msg = record.getMessage()
        if msg:
            pairs.append(("event", msg))

        pairs.extend(
            (key, getattr(record, key))
            for key in LOG_EXTRA_FIELDS
            if getattr(record, key, None) is not None
        )

        if record.exc_info and record.exc_info[0] is not None:
            pairs.append(("exc_type", record.exc_info[0].__name__))

        return " ".join(f"{key}={self._fmt_val(val)}" for key, val in pairs)

    @staticmethod
    def _fmt_val(val: Any) -> str:
        if isinstance(val, (int, float, bool)):
            return str(val)
        s = str(val)
        if not s or any(ch in s for ch in ' ="'):
            s = '"' + s.replace('"', '\\"') + '"'
        return s


def setup_logging(level: str = "INFO", *, stream: Optional[IO[str]] = None) -> None:
    """Install a single logfmt handler on the root logger and apply `level` to it and the package."""
    numeric = parse_level(level)
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(LogfmtFormatter())
    root.addHandler(handler)
    root.setLevel(numeric)
    logging.getLogger(LIBRARY_LOGGER).setLevel(numeric)


__all__ = [
    "LIBRARY_LOGGER",
    "LOG_EXTRA_FIELDS",
    "LogfmtFormatter",
    "apply_log_level",
    "parse_level",
    "setup_logging",
]
