import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

LOG_FORMAT = "%(levelname)-5s %(name)s: %(message)s"


@dataclass
class Settings:
    step_limit: Optional[int] = None
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Settings":
        """Read BF_STEP_LIMIT and BF_LOG_LEVEL, after loading a .env file if present.

        A step limit of 0 (the default) means unlimited.
        """
        load_dotenv()
        raw_limit = os.environ.get("BF_STEP_LIMIT", "0")
        try:
            step_limit = int(raw_limit)
        except ValueError:
            raise ValueError(f"BF_STEP_LIMIT must be an integer, got {raw_limit!r}") from None
        if step_limit < 0:
            raise ValueError("BF_STEP_LIMIT must not be negative")
        return cls(
            step_limit=step_limit or None,
            log_level=os.environ.get("BF_LOG_LEVEL", "WARNING").upper(),
        )


def init_logging(level: str = "WARNING") -> None:
    """Send log records to stderr; stdout belongs to the running program."""
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
