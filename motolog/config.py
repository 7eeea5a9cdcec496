"""Environment-driven settings."""

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from .advisor import LocalTripAdvisor, RemoteTripAdvisor, TripAdvisor

DEFAULT_VEHICLES_DIR = Path(__file__).parent.parent / "vehicles"


class Settings:
    """Runtime configuration read from ``MOTOLOG_*`` environment variables."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        env = os.environ if environ is None else environ
        self.vehicles_dir = Path(env.get("MOTOLOG_VEHICLES_DIR") or DEFAULT_VEHICLES_DIR)
        self.advisor_url = env.get("MOTOLOG_ADVISOR_URL") or None
        self.advisor_key = env.get("MOTOLOG_ADVISOR_KEY") or None
        self.advisor_timeout = float(env.get("MOTOLOG_ADVISOR_TIMEOUT") or 30)
        self.log_level = (env.get("MOTOLOG_LOG_LEVEL") or "WARNING").upper()
        self.secret_key = env.get("SECRET_KEY", "dev-secret-key-change-in-prod")


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def get_trip_advisor(settings: Settings) -> TripAdvisor:
    """Remote advisor when an endpoint is configured, local rules otherwise."""
    if settings.advisor_url:
        return RemoteTripAdvisor(
            settings.advisor_url,
            api_key=settings.advisor_key,
            timeout=settings.advisor_timeout,
        )
    return LocalTripAdvisor()
