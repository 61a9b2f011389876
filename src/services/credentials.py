import itertools
import json
import random
import re

import structlog

from src.config import settings
from src.core.exceptions import NoCredentials

logger = structlog.get_logger()

STRATEGIES = ("random", "round-robin")

_KEY_SEPARATORS_RE = re.compile(r"[,;\s]+")


def get_configured_keys() -> list[str]:
    raw = ",".join(value for value in (settings.google_api_keys, settings.google_api_key) if value)
    return [key for key in _KEY_SEPARATORS_RE.split(raw) if key]


def parse_client_keys(raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        parsed = json.loads(raw)
    except ValueError:
        logger.debug("client_keys_unparseable")
        return []
    if not isinstance(parsed, list):
        return []
    return [key.strip() for key in parsed if isinstance(key, str) and key.strip()]


def build_credential_pool(client_keys_raw: str | None) -> tuple[str, ...]:
    pool = tuple(dict.fromkeys([*get_configured_keys(), *parse_client_keys(client_keys_raw)]))
    if not pool:
        raise NoCredentials()
    return pool


class CredentialSelector:
    """Hands out one key per image from a request-scoped pool."""

    def __init__(self, pool: tuple[str, ...], strategy: str = "random") -> None:
        if not pool:
            raise NoCredentials()
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown credential strategy: {strategy}")
        self.pool = pool
        self.strategy = strategy
        self._cycle = itertools.cycle(pool)

    def pick(self) -> str:
        if self.strategy == "round-robin":
            return next(self._cycle)
        return random.choice(self.pool)
