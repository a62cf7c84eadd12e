import logging
import re
from dataclasses import dataclass
from typing import Dict, Optional

from retrochain_sdk.rpc_client.rest import RestGateway

logger = logging.getLogger("retrochain_sdk")

_MISMATCH_RE = re.compile(
    r"account sequence mismatch[^\d]*expected\s+(\d+)[^\d]*got\s+(\d+)",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class AccountSequence:
    account_number: int
    sequence: int


@dataclass(frozen=True)
class SequenceMismatch:
    expected: int
    got: int


def parse_sequence_mismatch(raw_log: Optional[str]) -> Optional[SequenceMismatch]:
    """Parse ``account sequence mismatch, expected E, got G`` out of a raw log."""
    if not raw_log:
        return None
    m = _MISMATCH_RE.search(str(raw_log))
    if m is None:
        return None
    return SequenceMismatch(expected=int(m.group(1)), got=int(m.group(2)))


class SequenceTracker:
    """
    Process-wide cache of signer address -> (account number, sequence).

    The REST gateway can lag behind the mempool, so a sequence bumped locally
    after an accepted broadcast wins over a lower value read back from the
    chain. The cache only moves from an accepted broadcast (+1), a mismatch
    reported by the chain, or a fresh account query.
    """

    def __init__(self, gateway: RestGateway):
        self.gateway = gateway
        self._cache: Dict[str, AccountSequence] = {}

    async def get(self, address: str) -> AccountSequence:
        info = await self.gateway.account_info(address)
        current = AccountSequence(account_number=info.account_number, sequence=info.sequence)

        cached = self._cache.get(address)
        if cached is not None and cached.account_number == current.account_number and cached.sequence > current.sequence:
            logger.debug(f"Using cached sequence {cached.sequence} for {address} (chain reports {current.sequence})")
            return cached

        logger.debug(f"Account info: seq={current.sequence}, num={current.account_number}")
        return current

    def mark_submitted(self, address: str, account_number: int, sequence_used: int) -> None:
        self._cache[address] = AccountSequence(account_number=account_number, sequence=sequence_used + 1)

    def reconcile(self, address: str, account_number: int, expected: int) -> None:
        logger.debug(f"Reconciling sequence for {address} to {expected}")
        self._cache[address] = AccountSequence(account_number=account_number, sequence=expected)

    def cached(self, address: str) -> Optional[AccountSequence]:
        return self._cache.get(address)

    def forget(self, address: str) -> None:
        self._cache.pop(address, None)
