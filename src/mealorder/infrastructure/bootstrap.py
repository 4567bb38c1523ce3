"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.

Settings are read from the environment, after loading a ``.env`` file
from the working directory if there is one:

- ``MEALORDER_DATA_DIR``: directory holding the JSON files
- ``MEALORDER_LOCK_TIMEOUT``: seconds to wait for an order's lock
- ``MEALORDER_PROFILE_REFRESH_INTERVAL``: minimum seconds between profile fetches
- ``MEALORDER_LOG_LEVEL``: logging level name when not ``--verbose``
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable

from dotenv import load_dotenv

from mealorder.domain.exceptions import InvalidConfigurationError
from mealorder.domain.repository.order_repository import DEFAULT_LOCK_TIMEOUT
from mealorder.infrastructure.persistence.json_company_repository import (
    JsonCompanyRepository,
)
from mealorder.infrastructure.persistence.json_lunch_option_repository import (
    JsonLunchOptionRepository,
)
from mealorder.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from mealorder.infrastructure.session import (
    DEFAULT_MIN_INTERVAL,
    ProfileRefresher,
    UserProfile,
)

load_dotenv()

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

_data_dir_override: Path | None = None

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def set_data_dir(path: Path | str | None) -> None:
    """Point every repository factory at *path* (None restores the default)."""
    global _data_dir_override
    _data_dir_override = Path(path) if path is not None else None


def data_dir() -> Path:
    if _data_dir_override is not None:
        return _data_dir_override
    env = os.environ.get("MEALORDER_DATA_DIR")
    return Path(env) if env else _DEFAULT_DATA_DIR


def lock_timeout() -> float:
    raw = os.environ.get("MEALORDER_LOCK_TIMEOUT")
    if not raw:
        return DEFAULT_LOCK_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        raise InvalidConfigurationError(
            "MEALORDER_LOCK_TIMEOUT", raw, "Lock timeout must be a number of seconds"
        )
    if value <= 0:
        raise InvalidConfigurationError(
            "MEALORDER_LOCK_TIMEOUT", raw, "Lock timeout must be positive"
        )
    return value


def profile_refresh_interval() -> float:
    raw = os.environ.get("MEALORDER_PROFILE_REFRESH_INTERVAL")
    if not raw:
        return DEFAULT_MIN_INTERVAL
    try:
        value = float(raw)
    except ValueError:
        raise InvalidConfigurationError(
            "MEALORDER_PROFILE_REFRESH_INTERVAL", raw,
            "Refresh interval must be a number of seconds",
        )
    if value < 0:
        raise InvalidConfigurationError(
            "MEALORDER_PROFILE_REFRESH_INTERVAL", raw,
            "Refresh interval cannot be negative",
        )
    return value


def configure_logging(verbose: bool = False) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        name = os.environ.get("MEALORDER_LOG_LEVEL", "WARNING").upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise InvalidConfigurationError(
                "MEALORDER_LOG_LEVEL", name, f"Unknown log level '{name}'"
            )
    logging.basicConfig(level=level, format=LOG_FORMAT)


def lunch_option_repository() -> JsonLunchOptionRepository:
    return JsonLunchOptionRepository(data_dir() / "lunch_options.json")


def company_repository() -> JsonCompanyRepository:
    return JsonCompanyRepository(data_dir() / "companies.json")


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(data_dir() / "orders.json", lock_timeout=lock_timeout())


def profile_refresher(fetch: Callable[[], UserProfile]) -> ProfileRefresher[UserProfile]:
    """Wrap an auth backend's profile lookup in a single-flight, rate-limited refresher.

    Embedding applications call ``refresh()`` on sign-in and on token
    refresh; the CLI itself takes the acting user from its options.
    """
    return ProfileRefresher(fetch, min_interval=profile_refresh_interval())
