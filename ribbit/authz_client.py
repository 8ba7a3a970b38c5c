"""Async HTTP client for the remote authorization / profile service.

The service owns role assignment and phrase-keyed profile lookup; this
module only speaks its REST API. Every phrase-scoped call is keyed by the
identity hash (SHA-256 hex of the Froggy Phrase).

Default base URL: http://127.0.0.1:4943
Override via env: RIBBIT_AUTHZ_URL (or the ``authz_url`` setting)
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import httpx

log = logging.getLogger("ribbit.authz")

USER_ROLES = ("admin", "user", "guest")


class AuthzError(RuntimeError):
    pass


class AuthzClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or os.environ.get("RIBBIT_AUTHZ_URL") or "http://127.0.0.1:4943").rstrip("/")
        self.timeout = timeout
        self._transport = transport

    # ------------- low-level HTTP -------------
    async def _request_json(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.request(method, url, json=payload)
                r.raise_for_status()
                if not r.content.strip():
                    return {}
                data = r.json()
        except httpx.HTTPStatusError as e:
            raise AuthzError(f"Authz HTTP {e.response.status_code}: {e.response.text or e.response.reason_phrase}") from e
        except httpx.HTTPError as e:
            raise AuthzError(f"Authz request failed: {e}") from e
        except ValueError as e:
            raise AuthzError(f"Authz returned invalid JSON: {e}") from e
        return data if isinstance(data, dict) else {"value": data}

    # ------------- linkage -------------
    async def link_identity(self, identity_hash: str) -> None:
        """Link the identity hash to the default ``user`` role (idempotent server-side)."""
        if not identity_hash:
            raise AuthzError("Identity hash is empty")
        await self._request_json("POST", "/api/identity/link", {"identity_hash": identity_hash})
        log.debug("Linked identity %s…", identity_hash[:8])

    # ------------- phrase-keyed consumers -------------
    async def get_user_role(self, identity_hash: str) -> str:
        data = await self._request_json("GET", f"/api/identity/{identity_hash}/role")
        role = str(data.get("role") or "guest")
        return role if role in USER_ROLES else "guest"

    async def is_admin(self, identity_hash: str) -> bool:
        data = await self._request_json("GET", f"/api/identity/{identity_hash}/admin")
        return bool(data.get("is_admin"))

    async def get_profile(self, identity_hash: str) -> Optional[Dict[str, Any]]:
        data = await self._request_json("GET", f"/api/identity/{identity_hash}/profile")
        profile = data.get("profile")
        return profile if isinstance(profile, dict) else None

    async def save_profile(self, identity_hash: str, profile: Dict[str, Any]) -> None:
        await self._request_json("PUT", f"/api/identity/{identity_hash}/profile", {"profile": profile})

    async def is_username_available(self, username: str) -> bool:
        data = await self._request_json("POST", "/api/usernames/available", {"username": username})
        return bool(data.get("available"))

    async def record_username_change(self, identity_hash: str, username: str) -> None:
        await self._request_json(
            "POST",
            f"/api/identity/{identity_hash}/username",
            {"username": username},
        )
