"""
Process-wide configuration.

Settings are read from the environment (and a ``.env`` file) once at
startup and then passed explicitly to the executors and servers.
"""

import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = Path("logs") / "app.log"

_TRUE_STRINGS = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_STRINGS


def _env_list(name: str) -> List[str]:
    value = os.getenv(name) or ""
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseModel):
    """Configuration of the NetSuite gateway."""

    model_config = ConfigDict(frozen=True)

    rest_url: Optional[str] = Field(default=None, description="SuiteQL REST base URL")
    access_token: Optional[str] = Field(default=None, description="Bearer token")
    search_restlet_url: Optional[str] = Field(default=None, description="Search RESTlet URL")
    account_types: List[str] = Field(default_factory=list)
    request_timeout: float = 60.0
    page_delay_ms: int = 100
    max_pages: int = 1000
    log_level: str = "INFO"
    log_to_file: bool = False
    api_host: str = "0.0.0.0"
    api_port: int = 3000

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            dotenv: Load a ``.env`` file first

        Returns:
            Settings instance
        """
        if dotenv:
            load_dotenv()

        return cls(
            rest_url=os.getenv("NETSUITE_REST_URL") or None,
            access_token=os.getenv("NETSUITE_ACCESS_TOKEN") or None,
            search_restlet_url=os.getenv("NETSUITE_SEARCH_REST_LET") or None,
            account_types=_env_list("NETSUITE_ACCOUNT_TYPES"),
            request_timeout=float(os.getenv("NETSUITE_REQUEST_TIMEOUT", "60")),
            page_delay_ms=int(os.getenv("NETSUITE_PAGE_DELAY_MS", "100")),
            max_pages=int(os.getenv("NETSUITE_MAX_PAGES", "1000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_to_file=_env_flag("LOG_TO_FILE"),
            api_host=os.getenv("API_HOST", "0.0.0.0"),
            api_port=int(os.getenv("API_PORT", "3000")),
        )

    @property
    def page_delay(self) -> float:
        """Delay between page requests, in seconds."""
        return self.page_delay_ms / 1000.0

    def missing_required(self) -> List[str]:
        """Names of required environment variables that are not set."""
        required = {
            "NETSUITE_REST_URL": self.rest_url,
            "NETSUITE_ACCESS_TOKEN": self.access_token,
            "NETSUITE_SEARCH_REST_LET": self.search_restlet_url,
        }
        return [name for name, value in required.items() if not value]


def configure_logging(settings: Settings) -> None:
    """
    Configure root logging.

    Logs go to stderr because stdout carries the stdio protocol.
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.log_to_file:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(LOG_FILE, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )

    missing = settings.missing_required()
    if missing:
        logging.getLogger(__name__).error(
            "Missing required environment variables: %s", ", ".join(missing)
        )
