"""stderr logging for the CLI and MCP entry points."""

from __future__ import annotations

import logging
import sys

_HANDLER: logging.Handler | None = None


def setup_logging(level: int = logging.WARNING) -> logging.Logger:
    """Attach one stderr handler to the ``portlens`` logger.

    Repeat calls only adjust the level, so ``--verbose`` can be applied
    after an earlier default setup.
    """
    global _HANDLER  # noqa: PLW0603
    logger = logging.getLogger("portlens")
    logger.setLevel(level)

    if _HANDLER is None:
        _HANDLER = logging.StreamHandler(sys.stderr)
        _HANDLER.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        logger.addHandler(_HANDLER)
        # stdout carries tables/JSON; keep log lines off the root logger
        logger.propagate = False

    return logger
