"""Runtime settings read from the environment (.env supported)."""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

_TRUTHY = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    # Live analysis of raw provider payloads; off until API keys are configured
    api_enabled: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            api_enabled=os.getenv("SEO_SNAPSHOT_API_ENABLED", "true").strip().lower() in _TRUTHY,
            log_level=os.getenv("SEO_SNAPSHOT_LOG_LEVEL", "INFO").strip().upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
