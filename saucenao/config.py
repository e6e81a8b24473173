"""Environment configuration for the SauceNAO client and service."""

import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    api_key: str = ""
    testmode: Optional[bool] = None
    db: Optional[int] = None
    num_results: Optional[int] = None
    min_similarity: Optional[float] = None
    empty_filter_enabled: Optional[bool] = None
    timeout: float = 30.0


def _get_bool(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip().lower() in TRUTHY


def _get_number(name: str, cast):
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    try:
        return cast(value.strip())
    except ValueError:
        logger.warning(f"Ignoring {name}={value!r}: not a valid {cast.__name__}")
        return None


def load_settings() -> Settings:
    """
    Build Settings from SAUCENAO_* environment variables.
    Unset variables leave the server defaults in place.
    """
    settings = Settings(
        api_key=os.getenv("SAUCENAO_API_KEY", ""),
        testmode=_get_bool("SAUCENAO_TESTMODE"),
        db=_get_number("SAUCENAO_DB", int),
        num_results=_get_number("SAUCENAO_NUM_RESULTS", int),
        min_similarity=_get_number("SAUCENAO_MIN_SIMILARITY", float),
        empty_filter_enabled=_get_bool("SAUCENAO_EMPTY_FILTER"),
    )
    timeout = _get_number("SAUCENAO_TIMEOUT", float)
    if timeout is not None:
        settings.timeout = timeout

    if not settings.api_key:
        logger.warning("SAUCENAO_API_KEY not set - searches will use anonymous limits")
    return settings
