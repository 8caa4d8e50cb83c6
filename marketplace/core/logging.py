# marketplace/core/logging.py
import logging

LOG_FORMAT = "%(asctime)s %(levelname)-5s %(name)s %(message)s"

_CONFIGURED_FLAG = "_marketplace_configured"


def configure_logging(level: str = "INFO") -> None:
    """Install a single console handler on the root logger.

    Calling it again only adjusts the level, so app factories and test
    fixtures can call it freely.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())
    if getattr(root, _CONFIGURED_FLAG, False):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    setattr(root, _CONFIGURED_FLAG, True)

    # uvicorn installs its own handlers; keep its access log from doubling up
    logging.getLogger("uvicorn.access").propagate = False
