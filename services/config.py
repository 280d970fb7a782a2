# services/config.py
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from constants import DEFAULT_POLL_INTERVAL

DEFAULT_BACKEND_URL = "http://localhost:8001"


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    return float(value)


@dataclass(frozen=True)
class ClientConfig:
    """Configuration for the backend client and job polling."""

    backend_url: str = DEFAULT_BACKEND_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    # None means no per-request timeout (a hung request stalls that job's polling)
    request_timeout: Optional[float] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Build config from environment variables (loads .env once, safe no-op)."""
        load_dotenv()
        backend_url = (
            os.getenv("MCQ_BACKEND_URL")
            or os.getenv("REACT_APP_BACKEND_URL")
            or DEFAULT_BACKEND_URL
        )
        return cls(
            backend_url=backend_url.rstrip("/"),
            poll_interval=float(
                os.getenv("MCQ_POLL_INTERVAL", str(DEFAULT_POLL_INTERVAL))
            ),
            request_timeout=_optional_float(os.getenv("MCQ_REQUEST_TIMEOUT")),
            log_level=os.getenv("MCQ_LOG_LEVEL", "INFO").upper(),
        )


def setup_logging(level: str = "INFO"):
    """Configure logging for the application.

    This function should be called at application startup.
    It configures the logging format and level.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
