# backend/app/core/logging_config.py
"""
Configuración centralizada del logging a partir de LOG_LEVEL y LOG_FORMAT.
"""

import logging
import sys

from app.core.config import Settings


def setup_logging(settings: Settings) -> None:
    """
    Configura el logger raíz con un único handler a stdout.
    Si ya hay handlers (p. ej. los de uvicorn o pytest) solo ajusta el nivel.
    """
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(settings.LOG_FORMAT))
    root.addHandler(handler)
