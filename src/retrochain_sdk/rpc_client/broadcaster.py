import logging
import re
from dataclasses import dataclass
from typing import Optional

from retrochain_sdk.rpc_client.codec import TxResponse
from retrochain_sdk.rpc_client.errors import ApplicationRejected
from retrochain_sdk.rpc_client.rest import BROADCAST_MODE_SYNC, RestGateway

logger = logging.getLogger("retrochain_sdk")

_MSG_INDEX_PREFIX = re.compile(r"^failed to execute message; message index: \d+:\s*", re.IGNORECASE)


@dataclass(frozen=True)
class BroadcastResult:
    tx_hash: str
    code: int
    raw_log: str
    codespace: str = ""
    height: Optional[int] = None

    @property
    def accepted(self) -> bool:
        return self.code == 0

    @classmethod
    def from_tx_response(cls, resp: TxResponse) -> "BroadcastResult":
        height = int(resp.height) if resp.height not in (None, "", "0", 0) else None
        return cls(
            tx_hash=resp.txhash,
            code=resp.code,
            raw_log=resp.raw_log,
            codespace=resp.codespace,
            height=height,
        )


def describe_raw_log(raw_log: str, code: int = 0) -> str:
    """Turn a chain raw log into a message fit to show a player."""
    text = _MSG_INDEX_PREFIX.sub("", (raw_log or "").strip())
    return text or f"Tx failed with code {code}"


class Broadcaster:
    """Submits signed transactions in SYNC mode (mempool acceptance, not inclusion)."""

    def __init__(self, gateway: RestGateway):
        self.gateway = gateway

    async def broadcast(self, tx_bytes: bytes) -> BroadcastResult:
        """
        Raises:
            TransportError: the gateway could not be reached or answered with an HTTP error
            ApplicationRejected: CheckTx returned a non-zero code
        """
        logger.debug("Broadcasting transaction...")
        resp = await self.gateway.broadcast_tx(tx_bytes, mode=BROADCAST_MODE_SYNC)
        result = BroadcastResult.from_tx_response(resp)
        self._log_result(result)

        if not result.accepted:
            raise ApplicationRejected(describe_raw_log(result.raw_log, result.code), result)
        return result

    def _log_result(self, result: BroadcastResult):
        logger.debug("📋 Broadcast Response Details:")
        logger.debug(f"   - Code: {result.code}")
        logger.debug(f"   - Raw Log: {result.raw_log}")
        logger.debug(f"   - Tx Hash: {result.tx_hash}")
