"""Once-per-session linkage of the Froggy Phrase identity with the authz service.

State machine::

    UNINITIALIZED --trigger--> PENDING --ok--> LINKED
                                  |
                                  +--failure--> UNINITIALIZED (retry on next trigger)

The coordinator is driven by "dependencies changed" events: whenever an
actor (authz client) becomes available and is not loading, the app calls
``on_dependencies_changed``. A session-scoped marker plus an in-memory guard
keep the remote call to one success per session. Overlapping triggers join
the attempt already in flight instead of issuing a second call.
"""
from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Optional

from .errors import RemoteLinkageFailed, log_swallowed
from .identity import IdentityHasher, get_identity_hash
from .phrase_store import PhraseStore
from .storage import KeyValueStore

log = logging.getLogger("ribbit.phrase.coordinator")

SESSION_INIT_KEY = "ribbit_froggy_phrase_initialized"


class LinkState(str, Enum):
    UNINITIALIZED = "uninitialized"
    PENDING = "pending"
    LINKED = "linked"


class InitializationCoordinator:
    def __init__(
        self,
        session: KeyValueStore,
        phrase_store: PhraseStore,
        hasher: Optional[IdentityHasher] = None,
    ) -> None:
        self._session = session
        self._phrase_store = phrase_store
        self._hasher = hasher
        self._initialized = False
        self._state = LinkState.UNINITIALIZED
        self._in_flight: Optional[asyncio.Future] = None

    @property
    def state(self) -> LinkState:
        return self._state

    def reset(self) -> None:
        """Drop the in-memory guard; the session marker is left alone.

        An attempt still in flight is detached: later triggers start a new one.
        """
        self._initialized = False
        self._state = LinkState.UNINITIALIZED
        self._in_flight = None

    async def on_dependencies_changed(self, actor: Any, is_fetching: bool = False) -> LinkState:
        if actor is None or is_fetching:
            return self._state
        return await self.trigger(actor)

    async def trigger(self, actor: Any) -> LinkState:
        if self._initialized:
            self._state = LinkState.LINKED
            return self._state

        if self._session.get(SESSION_INIT_KEY) == "true":
            self._initialized = True
            self._state = LinkState.LINKED
            return self._state

        if self._in_flight is not None:
            return await asyncio.shield(self._in_flight)

        # Claim before the first await so overlapping triggers join this attempt.
        fut = asyncio.get_running_loop().create_future()
        self._in_flight = fut
        self._state = LinkState.PENDING
        result = LinkState.UNINITIALIZED
        try:
            result = await self._link(actor)
        finally:
            # A reset() mid-attempt detaches it; only the current attempt updates state.
            if self._in_flight is fut:
                self._state = result
                self._in_flight = None
            if not fut.done():
                fut.set_result(result)
        return result

    async def _link(self, actor: Any) -> LinkState:
        try:
            identity_hash = await get_identity_hash(self._phrase_store, self._hasher)
            if not identity_hash:
                log.warning("No Froggy Phrase identity available; skipping linkage")
                return LinkState.UNINITIALIZED
            await actor.link_identity(identity_hash)
        except Exception as e:
            failure = RemoteLinkageFailed()
            failure.__cause__ = e
            log_swallowed(log, failure)
            return LinkState.UNINITIALIZED

        self._session.set(SESSION_INIT_KEY, "true")
        self._initialized = True
        log.info("Froggy Phrase access control initialized successfully")
        return LinkState.LINKED
