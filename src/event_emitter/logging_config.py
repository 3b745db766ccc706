from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover
    from .config import EmitterSettings


def configure_logging(default_level: int = logging.WARNING, settings: Optional["EmitterSettings"] = None) -> None:
    """Configure root logger with a sane default format.

    The level comes from ``settings.log_level`` when given, otherwise
    ``default_level``. Respects EMITTER_LOG_LEVEL env var if present.
    """
    level = default_level
    if settings is not None:
        level = getattr(logging, settings.log_level.upper(), default_level)
    level_name = os.getenv("EMITTER_LOG_LEVEL")
    if level_name:
        level = getattr(logging, level_name.upper(), level)
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )
