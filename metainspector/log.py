"""Debug-trace logging for the ``metainspector`` namespace."""

from __future__ import annotations

import logging
import os

DEBUG_ENV_VAR = "METAINSPECTOR_DEBUG"
_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def debug_requested(environ: dict[str, str] | None = None) -> bool:
    value = (os.environ if environ is None else environ).get(DEBUG_ENV_VAR, "")
    return value.strip() not in ("", "0")


def configure_logging(level: int | str = logging.DEBUG) -> logging.Logger:
    """Send ``metainspector`` logs to stderr at *level*.

    Configures the package namespace directly with ``propagate = False`` so
    the output does not depend on how the host application set up the root
    logger.  Calling it again only changes the level.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    pkg_log = logging.getLogger("metainspector")
    pkg_log.setLevel(level)
    if not pkg_log.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        pkg_log.addHandler(handler)
    pkg_log.propagate = False
    return pkg_log
