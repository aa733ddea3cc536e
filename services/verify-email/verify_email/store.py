"""
Profile record updates through the backend's REST interface.

PATCH {supabase_url}/rest/v1/{profiles_table}?id=eq.{user_id}
authenticated with the service-role key (apikey + bearer token).
"""
import logging
from datetime import datetime
from typing import Optional

import httpx

from verify_email.config import Settings
from verify_email.errors import PersistenceFailure

logger = logging.getLogger(__name__)


class ProfileStore:
    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "ProfileStore":
        key = self._settings.supabase_service_role_key
        self._http = httpx.AsyncClient(
            base_url=self._settings.supabase_url.rstrip("/") + "/rest/v1",
            headers={
                "apikey": key,
                "Authorization": f"Bearer {key}",
                "Content-Type": "application/json",
                "Prefer": "return=minimal",
            },
            timeout=self._settings.request_timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._http:
            await self._http.aclose()
            self._http = None

    async def mark_verification_sent(
        self,
        user_id: str,
        email: str,
        token: str,
        sent_at: datetime,
    ) -> None:
        """
        Overwrite the profile's email and verification fields.

        Concurrent calls for the same profile are not guarded: the last
        write wins.
        """
        payload = {
            "email": email,
            "email_verified": False,
            "email_verification_token": token,
            "email_verification_sent_at": sent_at.isoformat(),
        }
        try:
            resp = await self._http.patch(
                f"/{self._settings.profiles_table}",
                params={"id": f"eq.{user_id}"},
                json=payload,
            )
        except httpx.HTTPError as exc:
            raise PersistenceFailure(f"{type(exc).__name__}: {exc}") from exc

        if resp.status_code >= 400:
            raise PersistenceFailure(f"HTTP {resp.status_code}: {resp.text}")
