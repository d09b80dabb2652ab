"""Logging setup for the application and its Uvicorn integration."""
from __future__ import annotations

import logging


# PUBLIC_INTERFACE
def setup_logging(level: str = "INFO") -> None:
    """Configure root logging once and align the uvicorn loggers to the same level."""
    resolved = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(resolved)
