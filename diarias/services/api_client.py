"""
HTTP/WebSocket client for the Diárias roster store.

Usage pattern:

    from diarias.services.api_client import APIClient

    client = APIClient()
    await client.login(username="ana", password="segredo")
    employees = await client.list_employees()

One client is created per application session and handed to whoever needs
it; there is no module-level instance.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx
import websockets

from ..config import load_base_url

logger = logging.getLogger(__name__)


# -----------------------------
# Error types
# -----------------------------


class APIError(Exception):
    """Generic API error; ``status_code`` is set when the store answered."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthError(APIError):
    """Authentication / authorization error."""


@dataclass
class TokenInfo:
    access_token: str
    expires_at: Optional[str] = None  # ISO8601 string from the store


def _detail(resp: httpx.Response) -> str:
    try:
        detail = resp.json().get("detail")
    except (ValueError, AttributeError):
        detail = None
    if isinstance(detail, list):  # validation errors
        detail = "; ".join(str(item.get("msg", item)) for item in detail)
    return str(detail or resp.text or resp.reason_phrase)


# -----------------------------
# Main API client
# -----------------------------


class APIClient:
    """Reusable client for the store's REST endpoints and snapshot socket."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url: str = (base_url or load_base_url()).rstrip("/")
        self._transport = transport
        self._timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None
        self._token: Optional[TokenInfo] = None

    # ---------- Internal helpers ----------

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    def _auth_header(self) -> Dict[str, str]:
        if not self.has_token():
            raise AuthError("Not logged in - call login() first")
        return {"Authorization": f"Bearer {self._token.access_token}"}

    async def _request(self, method: str, path: str, auth: bool = True, **kwargs: Any) -> httpx.Response:
        """Send one request; transport and status failures become APIError."""
        client = await self._ensure_client()
        if auth:
            kwargs["headers"] = {**self._auth_header(), **kwargs.get("headers", {})}
        try:
            resp = await client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise APIError(f"{method} {path} failed: {exc}") from exc

        if resp.status_code in (401, 403):
            raise AuthError(f"{method} {path} rejected: {_detail(resp)}", resp.status_code)
        if resp.is_error:
            raise APIError(f"{method} {path} failed: {_detail(resp)}", resp.status_code)
        return resp

    def has_token(self) -> bool:
        return bool(self._token and self._token.access_token)

    def set_token(self, access_token: str, expires_at: Optional[str] = None) -> None:
        """Use a JWT obtained elsewhere (saved by ``login`` or set in the environment)."""
        if not access_token:
            raise ValueError("access_token cannot be empty")
        self._token = TokenInfo(access_token=access_token, expires_at=expires_at)

    def clear_token(self) -> None:
        self._token = None

    @property
    def websocket_url(self) -> str:
        for scheme, ws_scheme in (("https://", "wss://"), ("http://", "ws://")):
            if self.base_url.startswith(scheme):
                return ws_scheme + self.base_url[len(scheme):] + "/ws"
        return self.base_url + "/ws"

    # ---------- Public methods ----------

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def health(self) -> Dict[str, Any]:
        return (await self._request("GET", "/health", auth=False)).json()

    # ---- Authentication ----

    async def login(self, username: str, password: str) -> TokenInfo:
        """Exchange credentials for a JWT and keep it for later calls."""
        resp = await self._request(
            "POST", "/auth/login", auth=False, json={"username": username, "password": password}
        )
        data = resp.json()
        token = TokenInfo(access_token=data.get("access_token", ""), expires_at=data.get("expires_at"))
        if not token.access_token:
            raise APIError("Login did not return access_token")

        self._token = token
        logger.info("Signed in as %s", username)
        return token

    async def register_user(self, username: str, password: str, email: str = "") -> Dict[str, Any]:
        payload: Dict[str, Any] = {"username": username, "password": password}
        if email:
            payload["email"] = email
        return (await self._request("POST", "/auth/register", auth=False, json=payload)).json()

    # ---- Employees ----

    async def list_employees(self) -> List[Dict[str, Any]]:
        """
        GET /employees/ using the stored JWT.
        """
        resp = await self._request("GET", "/employees/")
        data = resp.json()
        if not isinstance(data, list):
            raise APIError("Expected a list of employees from /employees/")
        return data

    async def create_employee(self, employee_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST /employees/; the store assigns the id and starts with no work days.
        """
        resp = await self._request("POST", "/employees/", json=employee_data)
        return resp.json()

    async def update_employee(self, employee_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        PATCH /employees/{id}; only the given fields are merged.
        """
        resp = await self._request("PATCH", f"/employees/{employee_id}", json=fields)
        return resp.json()

    async def delete_employee(self, employee_id: str) -> None:
        """
        DELETE /employees/{id}
        """
        await self._request("DELETE", f"/employees/{employee_id}")

    # ---- Snapshots ----

    async def snapshot_stream(self) -> AsyncIterator[List[Dict[str, Any]]]:
        """
        Yield the full roster each time the store pushes one.

        The first message arrives right after connecting. The stream ends when
        the store closes the socket.
        """
        self._auth_header()
        url = f"{self.websocket_url}?token={self._token.access_token}"
        try:
            async with websockets.connect(url) as ws:
                async for raw in ws:
                    message = json.loads(raw)
                    if message.get("channel") != "employees" or message.get("action") != "snapshot":
                        logger.debug("Ignoring store message %r", message.get("action"))
                        continue
                    yield list(message.get("data") or [])
        except websockets.ConnectionClosedError as exc:
            raise APIError(f"Snapshot stream closed: {exc}") from exc
        except OSError as exc:
            raise APIError(f"Unable to reach {self.websocket_url}: {exc}") from exc
