"""String-keyed persistent store backed by Redis.

Mirrors a browser's local storage: get/set/remove by key, string values,
no transactions and no expiry. JSON helpers sit on top for the aggregates.
"""

import json
import logging
from typing import Any

from redis import Redis

from recipebox.infra.redis_client import get_sync_redis
from recipebox.settings import settings

logger = logging.getLogger("recipebox.store")

USER_KEY = "user"


def recipes_key(email: str) -> str:
    return f"recipes-{email}"


def history_key(email: str) -> str:
    return f"previousVersions-{email}"


def draft_key(email: str) -> str:
    return f"draft-{email}"


def expanded_key(email: str) -> str:
    return f"expanded-{email}"


class MalformedValue(ValueError):
    """Stored value is not valid JSON."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Malformed JSON under {key!r}: {reason}")
        self.key = key


class KeyValueStore:
    def __init__(self, redis: Redis | None = None, prefix: str | None = None):
        self._redis = redis
        self.prefix = settings.key_prefix if prefix is None else prefix

    @property
    def redis(self) -> Redis:
        # Resolved lazily so tests can swap the shared client
        return self._redis if self._redis is not None else get_sync_redis()

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> str | None:
        return self.redis.get(self._key(key))

    def set(self, key: str, value: str) -> None:
        self.redis.set(self._key(key), value)

    def remove(self, key: str) -> None:
        self.redis.delete(self._key(key))

    def get_json(self, key: str) -> Any:
        """Decode the value under key, None when absent.

        Raises MalformedValue when the stored text is not JSON.
        """
        raw = self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise MalformedValue(key, str(e)) from e

    def set_json(self, key: str, value: Any) -> None:
        self.set(key, json.dumps(value, ensure_ascii=False))
