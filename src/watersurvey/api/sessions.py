"""
In-memory registry of survey sessions.

Each session owns an independent FormStateStore; the registry only maps
ids to stores and shares nothing else between them.

Sessions idle longer than ``ttl_seconds`` are swept on every create and
treated as unknown on lookup. When ``max_sessions`` is reached the least
recently used session is dropped to make room.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from typing import Callable

from watersurvey.collector.interface import SurveyCollector
from watersurvey.shared.exceptions import NotFoundError
from watersurvey.shared.logging import get_logger
from watersurvey.survey.store import FormStateStore

logger = get_logger(__name__)

DEFAULT_SESSION_TTL_SECONDS = 3600
DEFAULT_MAX_SESSIONS = 1000


class SessionRegistry:
    def __init__(
        self,
        collector: SurveyCollector,
        ttl_seconds: float = DEFAULT_SESSION_TTL_SECONDS,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._collector = collector
        self._ttl_seconds = ttl_seconds
        self._max_sessions = max_sessions
        self._clock = clock
        # session id -> (store, last access); oldest access first
        self._stores: OrderedDict[str, tuple[FormStateStore, float]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._stores)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._stores

    def create(self) -> FormStateStore:
        now = self._clock()
        self.evict_expired(now)
        while len(self._stores) >= self._max_sessions:
            evicted_id, _ = self._stores.popitem(last=False)
            logger.info("Survey session evicted (capacity)", extra={"session_id": evicted_id})

        store = FormStateStore(self._collector)
        self._stores[store.session_id] = (store, now)
        logger.info("Survey session created", extra={"session_id": store.session_id})
        return store

    def get(self, session_id: str) -> FormStateStore:
        now = self._clock()
        entry = self._stores.get(session_id)
        if entry is not None and self._is_expired(entry[1], now):
            del self._stores[session_id]
            logger.info("Survey session expired", extra={"session_id": session_id})
            entry = None
        if entry is None:
            raise NotFoundError(
                "Survey session not found",
                details={"session_id": session_id},
            )

        store = entry[0]
        self._stores[session_id] = (store, now)
        self._stores.move_to_end(session_id)
        return store

    def discard(self, session_id: str) -> None:
        if self._stores.pop(session_id, None) is None:
            raise NotFoundError(
                "Survey session not found",
                details={"session_id": session_id},
            )
        logger.info("Survey session discarded", extra={"session_id": session_id})

    def evict_expired(self, now: float | None = None) -> int:
        """Drop every session idle past the TTL; return how many were dropped."""
        now = self._clock() if now is None else now
        expired = [sid for sid, (_, seen) in self._stores.items() if self._is_expired(seen, now)]
        for session_id in expired:
            del self._stores[session_id]
        if expired:
            logger.info("Expired survey sessions evicted", extra={"count": len(expired)})
        return len(expired)

    def _is_expired(self, last_seen: float, now: float) -> bool:
        return now - last_seen > self._ttl_seconds
