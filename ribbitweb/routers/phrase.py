from __future__ import annotations

from typing import Any, Callable, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ribbitweb.auth.coordinator import InitializationCoordinator
from ribbitweb.auth.errors import AlreadyExists, MalformedPhrase
from ribbitweb.auth.identity import IdentityHasher, get_identity_hash
from ribbitweb.auth.phrase_generator import PHRASE_WORD_COUNT
from ribbitweb.auth.phrase_store import PhraseStore

router = APIRouter(prefix="/api/froggy-phrase", tags=["froggy-phrase"])

# Module-level references (injected via init())
_phrase_store: Optional[PhraseStore] = None
_coordinator: Optional[InitializationCoordinator] = None
_get_actor: Optional[Callable[[], Any]] = None
_hasher: Optional[IdentityHasher] = None


def init(
    phrase_store: PhraseStore,
    coordinator: InitializationCoordinator,
    get_actor: Callable[[], Any],
    hasher: Optional[IdentityHasher] = None,
) -> None:
    global _phrase_store, _coordinator, _get_actor, _hasher
    _phrase_store = phrase_store
    _coordinator = coordinator
    _get_actor = get_actor
    _hasher = hasher


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"status": "error", "message": message}, status_code=status_code)


@router.get("")
async def get_phrase() -> JSONResponse:
    assert _phrase_store
    _phrase_store.ensure_exists()
    phrase = _phrase_store.get()
    if phrase is None:
        return _error("Froggy Phrase is unavailable", 503)
    return JSONResponse({"status": "ok", "phrase": phrase, "word_count": len(phrase.split())})


@router.post("")
async def set_phrase(request: Request) -> JSONResponse:
    assert _phrase_store
    try:
        body = await request.json()
    except ValueError:
        return _error("Invalid request", 400)
    if not isinstance(body, dict):
        return _error("Invalid request", 400)

    phrase = body.get("phrase")
    if not isinstance(phrase, str) or not phrase.strip():
        return _error(f"Froggy Phrase must contain exactly {PHRASE_WORD_COUNT} words", 400)

    try:
        _phrase_store.set_once(phrase)
    except AlreadyExists as e:
        return _error(str(e), 409)
    except MalformedPhrase as e:
        return _error(str(e), 400)
    return JSONResponse({"status": "ok"})


@router.delete("")
async def clear_phrase() -> JSONResponse:
    assert _phrase_store
    _phrase_store.clear()
    return JSONResponse({"status": "ok", "cleared": False})


@router.get("/identity")
async def identity() -> JSONResponse:
    assert _phrase_store
    identity_hash = await get_identity_hash(_phrase_store, _hasher)
    return JSONResponse({"status": "ok", "identity_hash": identity_hash, "anonymous": not identity_hash})


@router.get("/link")
async def link_state() -> JSONResponse:
    assert _coordinator
    return JSONResponse({"status": "ok", "state": _coordinator.state.value})


@router.post("/link")
async def link() -> JSONResponse:
    """Trigger linkage; failures leave the state uninitialized, never an error status."""
    assert _coordinator and _get_actor
    state = await _coordinator.on_dependencies_changed(_get_actor())
    return JSONResponse({"status": "ok", "state": state.value})
