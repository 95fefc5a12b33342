from __future__ import annotations

import logging
from typing import Final


_DEFAULT_FORMAT: Final[str] = "%(levelname)s %(asctime)s %(name)s %(message)s"

_NOISY_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore")


def configure_logging(*, level: str = "INFO") -> None:
    """Configure Python logging once.

    Host applications often install their own handlers; in that case only the
    level is applied.
    """

    level = level.upper()

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
    else:
        logging.basicConfig(level=level, format=_DEFAULT_FORMAT)

    # httpx logs every request at INFO; the client already does that.
    for noisy in _NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)
