"""Principal-scoped linkage cache.

For callers that hold an authenticated principal, the (principal, identity
hash) pair that was last linked is remembered in persistent storage so the
linkage call is skipped across restarts. Cleared on logout.
"""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Optional

from .errors import RemoteLinkageFailed, log_swallowed
from .identity import IdentityHasher, get_identity_hash
from .phrase_store import PhraseStore
from .storage import KeyValueStore

log = logging.getLogger("ribbit.phrase.principal")

INIT_CACHE_KEY = "ribbit_froggy_phrase_initialized"


def is_already_initialized(store: KeyValueStore, principal_id: str, identity_hash: str) -> bool:
    raw = store.get(INIT_CACHE_KEY)
    if not raw:
        return False
    try:
        data = json.loads(raw)
    except ValueError:
        return False
    if not isinstance(data, dict):
        return False
    return data.get("principalId") == principal_id and data.get("userId") == identity_hash


def mark_as_initialized(store: KeyValueStore, principal_id: str, identity_hash: str) -> None:
    data = {"principalId": principal_id, "userId": identity_hash, "timestamp": int(time.time() * 1000)}
    store.set(INIT_CACHE_KEY, json.dumps(data))


def clear_init_cache(store: KeyValueStore) -> None:
    store.remove(INIT_CACHE_KEY)


async def initialize_if_needed(
    actor: Any,
    principal_id: str,
    store: KeyValueStore,
    phrase_store: PhraseStore,
    hasher: Optional[IdentityHasher] = None,
) -> bool:
    """Link the identity hash for ``principal_id`` unless already cached.

    Returns True when the pair is linked (now or previously). Never raises.
    """
    identity_hash = await get_identity_hash(phrase_store, hasher)
    if not identity_hash:
        log.warning("No Froggy Phrase identity available for principal initialization")
        return False

    if is_already_initialized(store, principal_id, identity_hash):
        return True

    try:
        await actor.link_identity(identity_hash)
    except Exception as e:
        failure = RemoteLinkageFailed()
        failure.__cause__ = e
        log_swallowed(log, failure)
        return False

    mark_as_initialized(store, principal_id, identity_hash)
    log.info("Froggy Phrase initialized for principal %s", principal_id)
    return True
