"""
REST (Cosmos LCD) gateway for RetroChain.

Thin async wrapper over ``httpx.AsyncClient`` exposing only the endpoints the
transaction pipeline needs. HTTP and connection failures surface as
``TransportError``; bodies are decoded through the codec's pydantic models.
"""

import base64
import logging
from typing import Any, List, Optional

import httpx

from retrochain_sdk.rpc_client.codec import (
    AccountInfo,
    SessionInfo,
    TxResponse,
    decode_account_response,
    decode_chain_id,
    decode_sessions_response,
    decode_simulate_response,
    decode_tx_response,
)
from retrochain_sdk.rpc_client.errors import EncodingError, TransportError

logger = logging.getLogger("retrochain_sdk")

BROADCAST_MODE_SYNC = "BROADCAST_MODE_SYNC"


class RestGateway:
    def __init__(
        self,
        base_url: str,
        timeout_secs: float = 15.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout_secs,
            headers={"Accept": "application/json"},
        )

    async def aclose(self):
        if self._owns_client:
            await self._client.aclose()

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        url = self.url(path)
        try:
            resp = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        if resp.status_code >= 400:
            body = resp.text
            detail = ""
            try:
                data = resp.json()
                if isinstance(data, dict):
                    detail = str(data.get("message") or data.get("error") or "")
            except ValueError:
                pass
            msg = f"HTTP {resp.status_code} {resp.reason_phrase}"
            if detail:
                msg = f"{msg}: {detail}"
            raise TransportError(msg, status_code=resp.status_code, body=body)

        try:
            return resp.json()
        except ValueError as e:
            raise TransportError(f"{method} {url} returned a non-JSON body", status_code=resp.status_code, body=resp.text) from e

    async def get_json(self, path: str, params: Optional[dict] = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post_json(self, path: str, body: dict) -> Any:
        return await self._request("POST", path, json=body)

    async def account_info(self, address: str) -> AccountInfo:
        data = await self.get_json(f"/cosmos/auth/v1beta1/accounts/{address}")
        return decode_account_response(data)

    async def simulate(self, tx_bytes: bytes) -> int:
        data = await self.post_json(
            "/cosmos/tx/v1beta1/simulate",
            {"tx_bytes": base64.b64encode(tx_bytes).decode()},
        )
        return decode_simulate_response(data)

    async def broadcast_tx(self, tx_bytes: bytes, mode: str = BROADCAST_MODE_SYNC) -> TxResponse:
        data = await self.post_json(
            "/cosmos/tx/v1beta1/txs",
            {"tx_bytes": base64.b64encode(tx_bytes).decode(), "mode": mode},
        )
        try:
            return decode_tx_response(data)
        except EncodingError as e:
            raise TransportError(f"broadcast returned an unreadable body: {e}") from e

    async def get_tx(self, tx_hash: str) -> Optional[TxResponse]:
        """Return the committed tx response, or None while it is not indexed yet."""
        try:
            data = await self.get_json(f"/cosmos/tx/v1beta1/txs/{tx_hash}")
        except TransportError as e:
            details = (e.body or str(e)).lower()
            if e.status_code == 404 or "not found" in details:
                return None
            raise
        try:
            return decode_tx_response(data)
        except EncodingError:
            return None

    async def player_sessions(self, player: str, limit: int = 50) -> List[SessionInfo]:
        data = await self.get_json(f"/arcade/v1/sessions/player/{player}", params={"limit": str(limit)})
        return decode_sessions_response(data)

    async def detect_chain_id(self) -> Optional[str]:
        """Discover the chain id from node_info, then from the latest block header."""
        for path in (
            "/cosmos/base/tendermint/v1beta1/node_info",
            "/cosmos/base/tendermint/v1beta1/blocks/latest",
        ):
            try:
                chain_id = decode_chain_id(await self.get_json(path))
            except TransportError as e:
                logger.debug(f"Chain id lookup via {path} failed: {e}")
                continue
            if chain_id:
                return chain_id
        return None
