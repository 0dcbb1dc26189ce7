# config.py
#
# Runtime settings for kalc. Values come from the process environment, optionally
# populated from a .env file in the working directory.

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_PROMPT = "> "

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    """Settings read from KALC_* environment variables."""
    log_level: str = DEFAULT_LOG_LEVEL
    prompt: str = DEFAULT_PROMPT

    @property
    def log_level_value(self) -> int:
        # Unknown level names fall back to the default rather than failing startup.
        level = logging.getLevelName(self.log_level.upper())
        if isinstance(level, int):
            return level
        return logging.getLevelName(DEFAULT_LOG_LEVEL)


def load_settings(use_dotenv: bool = True) -> Settings:
    """Build Settings from the environment, loading .env first unless disabled."""
    if use_dotenv:
        # Only the working directory is searched, not its parents.
        load_dotenv(Path.cwd() / ".env")
    return Settings(
        log_level=os.getenv("KALC_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        prompt=os.getenv("KALC_PROMPT", DEFAULT_PROMPT),
    )


def configure_logging(settings: Settings) -> None:
    # Logs go to stderr; stdout is reserved for the result.
    logging.basicConfig(level=settings.log_level_value, format=LOG_FORMAT)
