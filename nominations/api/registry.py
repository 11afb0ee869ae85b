"""Session Registry -- in-memory map of live nomination sessions."""

from __future__ import annotations

import logging
import time
from typing import Callable

from nominations.clients.feedback import FeedbackClient
from nominations.config import NominationsConfig
from nominations.search import TradeLookup
from nominations.session import NominationSession, Submitter

logger = logging.getLogger("nominations.api.registry")


class SessionRegistry:
    """Creates, looks up and tears down sessions that share remote clients.

    Sessions live only in memory; nothing survives a restart. A session
    untouched for ``config.session_ttl`` seconds is closed the next time the
    registry is used, and once ``config.max_sessions`` are open the least
    recently used one makes room for a new session.
    """

    def __init__(
        self,
        trade_client: TradeLookup,
        feedback_client: FeedbackClient,
        config: NominationsConfig,
        submitter: Submitter | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._trade_client = trade_client
        self._feedback_client = feedback_client
        self._config = config
        self._submitter = submitter
        self._clock = clock
        self._sessions: dict[str, NominationSession] = {}
        self._last_seen: dict[str, float] = {}

    async def create(self) -> NominationSession:
        await self.evict_idle()
        while self._sessions and len(self._sessions) >= self._config.max_sessions:
            oldest = min(self._last_seen, key=self._last_seen.__getitem__)
            logger.warning("Session limit (%d) reached, closing %s", self._config.max_sessions, oldest)
            await self.close(oldest)

        session = NominationSession(
            self._trade_client,
            self._feedback_client,
            config=self._config,
            submitter=self._submitter,
        )
        self._sessions[session.session_id] = session
        self._last_seen[session.session_id] = self._clock()
        logger.info("Opened session %s", session.session_id)
        return session

    async def get(self, session_id: str) -> NominationSession | None:
        """Look up a live session and mark it as recently used."""
        await self.evict_idle()
        session = self._sessions.get(session_id)
        if session is not None:
            self._last_seen[session_id] = self._clock()
        return session

    async def evict_idle(self) -> int:
        """Close every session idle for longer than the TTL. Returns how many."""
        cutoff = self._clock() - self._config.session_ttl
        expired = [sid for sid, seen in self._last_seen.items() if seen < cutoff]
        for session_id in expired:
            logger.info("Session %s idle for over %.0fs, closing", session_id, self._config.session_ttl)
            await self.close(session_id)
        return len(expired)

    async def close(self, session_id: str) -> bool:
        """Close and forget a session. Returns False if it was unknown."""
        session = self._sessions.pop(session_id, None)
        self._last_seen.pop(session_id, None)
        if session is None:
            return False
        await session.close()
        logger.info("Closed session %s", session_id)
        return True

    async def close_all(self) -> None:
        for session_id in list(self._sessions):
            await self.close(session_id)

    def count(self) -> int:
        return len(self._sessions)
