"""Plain-text logging setup for the ``wren.*`` loggers.

Library code only ever calls ``logging.getLogger("wren.<area>")``; this
module is what ``App.run()`` uses to make those records visible on
stderr when nothing else configured logging first.
"""

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)-5s %(name)s: %(message)s"


def configure_logging(level: str | int = "info") -> logging.Logger:
    """Attach one stderr handler to the ``wren`` logger and set its level.

    Calling it again only updates the level; handlers are not stacked.
    """
    root = logging.getLogger("wren")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            msg = f"Unknown log level {level!r}"
            raise ValueError(msg)
        level = resolved
    root.setLevel(level)

    if not any(getattr(h, "_wren_handler", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._wren_handler = True  # type: ignore[attr-defined]
        root.addHandler(handler)
    return root
