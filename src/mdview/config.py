"""Configuration for the mdview viewer."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from mdview.highlight import DEFAULT_CODE_THEME

logger = logging.getLogger(__name__)

LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass
class Config:
    """Viewer configuration.

    ``width`` of ``None`` means "use the terminal width".
    """

    width: int | None = None
    code_theme: str = DEFAULT_CODE_THEME
    watch: bool = True
    log_level: str = "warning"
    scroll_step: int = 1

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Config:
        """Build a config from ``MDVIEW_*`` environment variables."""
        env = os.environ if environ is None else environ
        config = cls()

        raw_width = env.get("MDVIEW_WIDTH")
        if raw_width:
            try:
                width = int(raw_width)
            except ValueError:
                logger.warning("Ignoring non-numeric MDVIEW_WIDTH=%r", raw_width)
            else:
                if width > 0:
                    config.width = width
                else:
                    logger.warning("Ignoring non-positive MDVIEW_WIDTH=%r", raw_width)

        code_theme = env.get("MDVIEW_CODE_THEME")
        if code_theme:
            config.code_theme = code_theme

        log_level = env.get("MDVIEW_LOG_LEVEL", "").lower()
        if log_level in LOG_LEVELS:
            config.log_level = log_level
        elif log_level:
            logger.warning("Ignoring unknown MDVIEW_LOG_LEVEL=%r", log_level)

        return config
