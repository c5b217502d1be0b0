from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_HANDLER_NAME = "todo_api"


# PUBLIC_INTERFACE
def configure_logging(level: str = "INFO") -> None:
    """
    Install a single stream handler on the root logger. Calling it again only
    adjusts the level; unknown level names fall back to INFO.
    """
    root = logging.getLogger()
    if not any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    resolved = logging.getLevelName(level.strip().upper())
    root.setLevel(resolved if isinstance(resolved, int) else logging.INFO)
