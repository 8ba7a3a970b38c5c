from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from ribbit.authz_client import AuthzClient
from ribbit.db.engine import init_db
from ribbit.settings import APP_NAME, APP_VERSION, Settings
from ribbit.settings_store import load_settings
from ribbitweb.auth.coordinator import InitializationCoordinator
from ribbitweb.auth.local_profile import LocalProfile
from ribbitweb.auth.phrase_store import PhraseStore
from ribbitweb.auth.storage import KeyValueStore, MemoryKeyValueStore, SQLiteKeyValueStore
from ribbitweb.routers import phrase as phrase_router

log = logging.getLogger("ribbit.server")


def create_app(
    settings: Optional[Settings] = None,
    persistent: Optional[KeyValueStore] = None,
    session: Optional[KeyValueStore] = None,
    actor: Any = None,
) -> FastAPI:
    """Build the app. Stores and actor default to SQLite, memory and AuthzClient."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        s = settings or load_settings()
        persistent_store = persistent
        if persistent_store is None:
            init_db()
            persistent_store = SQLiteKeyValueStore("persistent")
        session_store = session if session is not None else MemoryKeyValueStore()
        authz = actor if actor is not None else AuthzClient(s.authz_url, timeout=s.authz_timeout)

        profile = LocalProfile(persistent_store)
        phrase_store = PhraseStore(persistent_store, backup_hook=profile.backup_settings)
        profile.phrase_store = phrase_store
        coordinator = InitializationCoordinator(session_store, phrase_store)

        # Process start: a phrase must always exist
        phrase_store.ensure_exists()

        phrase_router.init(phrase_store, coordinator, get_actor=lambda: authz)
        app.state.phrase_store = phrase_store
        app.state.profile = profile
        app.state.coordinator = coordinator

        link_task: Optional[asyncio.Task] = None
        if s.link_on_startup:
            link_task = asyncio.create_task(coordinator.on_dependencies_changed(authz))
        log.info("%s %s started (authz: %s)", APP_NAME, APP_VERSION, getattr(authz, "base_url", "injected"))
        try:
            yield
        finally:
            if link_task is not None and not link_task.done():
                link_task.cancel()
                try:
                    await link_task
                except asyncio.CancelledError:
                    pass

    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION, lifespan=lifespan)
    app.include_router(phrase_router.router)

    @app.get("/")
    def root() -> JSONResponse:
        return JSONResponse({"app": APP_NAME, "version": APP_VERSION})

    return app


app = create_app()
