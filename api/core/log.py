"""
Process-wide logging setup.

Modules log through `logging.getLogger(__name__)`; this only configures the
root handler once.
"""

from __future__ import annotations

import logging

from .config import env_str

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_configured = False


def configure_logging() -> None:
    global _configured
    if _configured:
        return None

    level_name = env_str("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)

    # botocore and aiosmtplib are chatty at DEBUG.
    logging.getLogger("botocore").setLevel(max(level, logging.WARNING))
    logging.getLogger("aiosmtplib").setLevel(max(level, logging.WARNING))
    _configured = True
