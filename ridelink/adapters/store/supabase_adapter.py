"""Supabase store adapter.

Implements the store ports over Supabase's HTTP interfaces with aiohttp:

- PostgREST RPC (``/rest/v1/rpc/<fn>``) for the match query and the
  atomic payment procedure, executed with the caller's bearer token so
  row-level security applies
- GoTrue (``/auth/v1/user``) to resolve a bearer token to a user
- PostgREST upsert for charging stations, with the service-role key
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence

import aiohttp

from ...config import StoreConfig, get_config
from ...domain.errors import ConfigurationError, StoreError
from ...domain.models import (
    AuthenticatedUser,
    MatchCandidate,
    MatchQuery,
    MoneyTransfer,
    TransactionRecord,
)
from ..http import new_session, read_error_body


def _error_message(body: Any, status: int) -> str:
    if isinstance(body, Mapping):
        for key in ("message", "msg", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    if isinstance(body, str) and body.strip():
        return body.strip()
    return f"Store returned HTTP {status}"


@dataclass
class SupabaseStore:
    """Trip, payment, auth and station store backed by Supabase.

    Attributes:
        config: Store configuration (URL, keys, RPC names)
        session_factory: Builds the aiohttp session; override in tests
    """

    config: StoreConfig = field(default_factory=lambda: get_config().store)
    session_factory: Optional[Callable[[], Any]] = field(default=None, repr=False)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _session(self) -> Any:
        if self.session_factory is not None:
            return self.session_factory()
        return new_session(self.config.timeout_seconds)

    def _base_url(self) -> str:
        if not self.config.url:
            raise ConfigurationError(
                "Store URL not configured", setting_name="RL_STORE_URL"
            )
        return self.config.url.rstrip("/")

    def _headers(self, api_key: Optional[str], bearer: Optional[str]) -> dict[str, str]:
        if not api_key:
            raise ConfigurationError(
                "Store API key not configured", setting_name="RL_STORE_ANON_KEY"
            )
        return {
            "apikey": api_key,
            "Authorization": f"Bearer {bearer or api_key}",
            "Content-Type": "application/json",
        }

    async def _send(
        self,
        method: str,
        url: str,
        operation: str,
        headers: Mapping[str, str],
        **kwargs: Any,
    ) -> tuple[int, Any]:
        """Send one request and return (status, decoded body)."""
        try:
            async with self._session() as session:
                async with session.request(
                    method, url, headers=dict(headers), **kwargs
                ) as response:
                    if 200 <= response.status < 300:
                        if response.status == 204:
                            return response.status, None
                        return response.status, await response.json()
                    return response.status, await read_error_body(response)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._logger.error(
                "Store request error",
                extra={"operation": operation, "error": str(e)},
            )
            raise StoreError("Store unreachable", operation=operation, cause=e)

    async def call_rpc(
        self,
        function: str,
        params: Mapping[str, Any],
        access_token: Optional[str] = None,
    ) -> Any:
        """Invoke a stored procedure.

        Raises:
            StoreError: If the procedure call fails.
        """
        url = f"{self._base_url()}/rest/v1/rpc/{function}"
        headers = self._headers(self.config.anon_key, access_token)
        status, body = await self._send(
            "POST", url, function, headers, json=dict(params)
        )
        if not 200 <= status < 300:
            self._logger.warning(
                "Store RPC failed",
                extra={"operation": function, "status": status, "body": body},
            )
            raise StoreError(
                _error_message(body, status), operation=function, status=status
            )
        return body

    async def find_matching_trips(
        self,
        query: MatchQuery,
        access_token: Optional[str] = None,
    ) -> Sequence[MatchCandidate]:
        rows = await self.call_rpc(
            self.config.match_rpc, query.to_rpc_params(), access_token
        )
        if rows is None:
            return []
        if not isinstance(rows, list):
            raise StoreError(
                "Unexpected match query result", operation=self.config.match_rpc
            )
        return rows

    async def process_payment(
        self,
        transfer: MoneyTransfer,
        access_token: Optional[str] = None,
    ) -> TransactionRecord:
        return await self.call_rpc(
            self.config.payment_rpc, transfer.to_rpc_params(), access_token
        )

    async def get_user(self, access_token: str) -> Optional[AuthenticatedUser]:
        """Resolve a bearer token; None when the token is rejected.

        Raises:
            StoreError: If the auth service itself fails.
        """
        url = f"{self._base_url()}/auth/v1/user"
        headers = self._headers(self.config.anon_key, access_token)
        status, body = await self._send("GET", url, "auth.get_user", headers)

        if 400 <= status < 500:
            self._logger.info("Bearer token rejected", extra={"status": status})
            return None
        if not 200 <= status < 300:
            raise StoreError(
                _error_message(body, status), operation="auth.get_user", status=status
            )
        if not isinstance(body, Mapping) or not body.get("id"):
            return None
        return AuthenticatedUser(id=str(body["id"]), email=body.get("email"))

    async def upsert_charging_station(
        self, row: Mapping[str, Any]
    ) -> Optional[Mapping[str, Any]]:
        table = self.config.charging_stations_table
        url = f"{self._base_url()}/rest/v1/{table}"
        headers = self._headers(self.config.service_role_key, None)
        headers["Prefer"] = "resolution=merge-duplicates,return=representation"
        status, body = await self._send(
            "POST",
            url,
            table,
            headers,
            params={"on_conflict": "google_place_id"},
            json=dict(row),
        )
        if not 200 <= status < 300:
            raise StoreError(_error_message(body, status), operation=table, status=status)
        if isinstance(body, list):
            return body[0] if body else None
        return body
