"""
Runtime configuration read from environment variables.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional
from dotenv import load_dotenv
from via.database import DEFAULT_CACHE_URL
from via.supervia_client import CONTENT_URL, SITE_URL

STATIONS_TTL_SECONDS = 48 * 60 * 60
HTTP_TIMEOUT_SECONDS = 5.0


@dataclass(frozen=True)
class Settings:
    """Planner settings."""
    content_url: str = CONTENT_URL
    site_url: str = SITE_URL
    cache_url: str = DEFAULT_CACHE_URL
    stations_ttl: int = STATIONS_TTL_SECONDS
    http_timeout: float = HTTP_TIMEOUT_SECONDS
    log_level: str = "WARNING"
    color: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from the environment.

        Loads .dev.env first when it exists and no explicit mapping is given.
        """
        if environ is None:
            if os.path.exists('.dev.env'):
                load_dotenv('.dev.env')
            environ = os.environ

        return cls(
            content_url=environ.get("VIA_CONTENT_URL", CONTENT_URL),
            site_url=environ.get("VIA_SITE_URL", SITE_URL),
            cache_url=environ.get("VIA_CACHE_URL", DEFAULT_CACHE_URL),
            stations_ttl=int(environ.get("VIA_STATIONS_TTL_SECONDS", STATIONS_TTL_SECONDS)),
            http_timeout=float(environ.get("VIA_HTTP_TIMEOUT") or HTTP_TIMEOUT_SECONDS),
            log_level=environ.get("VIA_LOG_LEVEL", "WARNING").upper(),
            # https://no-color.org: any non-empty value disables color
            color=not environ.get("NO_COLOR"),
        )
