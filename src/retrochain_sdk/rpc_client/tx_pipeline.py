import asyncio
import logging
from datetime import timedelta
from enum import Enum
from typing import Iterable, Optional, Union

from retrochain_sdk.rpc_client.broadcaster import Broadcaster, BroadcastResult
from retrochain_sdk.rpc_client.config import RetrochainNetworkConfig
from retrochain_sdk.rpc_client.errors import (
    ApplicationRejected,
    EncodingError,
    SequenceMismatchError,
    SigningDeclined,
    TransportError,
    TxInProgressError,
)
from retrochain_sdk.rpc_client.fees import FeeCalculator, TxFee
from retrochain_sdk.rpc_client.gas import GasEstimate, GasEstimator
from retrochain_sdk.rpc_client.messages import ArcadeMessage
from retrochain_sdk.rpc_client.rest import RestGateway
from retrochain_sdk.rpc_client.sequence import SequenceTracker, parse_sequence_mismatch
from retrochain_sdk.rpc_client.signer import TxSigner, Wallet, WalletKey

logger = logging.getLogger("retrochain_sdk")

# The first attempt plus exactly one retry after a sequence mismatch
MAX_ATTEMPTS = 2


class PipelineState(Enum):
    IDLE = "idle"
    BUILDING_ATTEMPT = "building_attempt"
    AWAITING_SIGNATURE = "awaiting_signature"
    BROADCASTING = "broadcasting"
    MISMATCH_DETECTED = "mismatch_detected"
    SUCCESS = "success"
    FAILED = "failed"


class TxPipeline:
    """
    Builds, signs and broadcasts arcade transactions one at a time.

    Each ``submit`` reads the signer's sequence, estimates gas through a
    simulate round-trip, prices the fee, asks the wallet for a signature and
    broadcasts in SYNC mode. When the chain reports an account sequence
    mismatch the tracker is corrected to the expected value and the whole
    attempt is rebuilt and re-signed once; a second mismatch is final.

    Only one submission may be in flight. A concurrent ``submit`` fails with
    ``TxInProgressError`` instead of queueing.
    """

    def __init__(
        self,
        wallet: Wallet,
        gateway: RestGateway,
        config: RetrochainNetworkConfig,
        tracker: Optional[SequenceTracker] = None,
    ):
        self.wallet = wallet
        self.gateway = gateway
        self.config = config
        self.fee_calculator = FeeCalculator(
            denom=config.fee_denom,
            price_numerator=config.gas_price_numerator,
            price_denominator=config.gas_price_denominator,
            gas_adjustment=config.gas_adjustment,
            gas_buffer=config.gas_buffer,
            min_gas_limit=config.min_gas_limit,
        )
        self.estimator = GasEstimator(
            gateway=gateway,
            fee_calculator=self.fee_calculator,
            simulate_gas_limit=config.simulate_gas_limit,
            fallback_gas_base=config.fallback_gas_base,
            fallback_gas_per_msg=config.fallback_gas_per_msg,
        )
        self.tracker = tracker if tracker is not None else SequenceTracker(gateway)
        self.signer = TxSigner(wallet, sign_timeout_secs=config.sign_timeout_secs)
        self.broadcaster = Broadcaster(gateway)

        self.state = PipelineState.IDLE
        self._lock = asyncio.Lock()
        self._chain_id: Optional[str] = config.chain_id
        self._address: Optional[str] = None

    @property
    def in_progress(self) -> bool:
        return self._lock.locked()

    async def chain_id(self) -> str:
        if self._chain_id is None:
            self._chain_id = await self.gateway.detect_chain_id()
            if not self._chain_id:
                raise TransportError(
                    f"Could not detect chain id from {self.gateway.base_url}; "
                    f"set chain_id in the network config"
                )
            logger.debug(f"Detected chain id {self._chain_id}")
        return self._chain_id

    @property
    def known_address(self) -> Optional[str]:
        """Signer address once it has been resolved through the wallet, else None."""
        return self._address

    async def get_address(self) -> str:
        """Resolve the signer address with the wallet's ``get_key`` for the active chain."""
        if self._address is None:
            key = await self._get_key(await self.chain_id())
            logger.debug(f"Resolved signer address {key.address}")
        return self._address

    async def _get_key(self, chain_id: str) -> WalletKey:
        try:
            key = await self.wallet.get_key(chain_id)
        except SigningDeclined:
            raise
        except Exception as e:
            raise SigningDeclined(f"wallet did not provide a key: {e}") from e
        self._address = key.address
        return key

    async def submit(self, messages: Iterable[ArcadeMessage], memo: str = "") -> BroadcastResult:
        """
        Sign and broadcast ``messages`` as one transaction.

        Returns the mempool-accepted ``BroadcastResult``; the transaction is not
        yet included in a block.

        Raises:
            TxInProgressError: another submission is still pending
            EncodingError: the messages cannot be encoded
            SigningDeclined: the wallet rejected or timed out
            ApplicationRejected: the chain refused the transaction
            SequenceMismatchError: the sequence was still wrong after the retry
            TransportError: the gateway failed
        """
        msgs = list(messages)
        if not msgs:
            raise EncodingError("No messages to broadcast.")
        if self._lock.locked():
            raise TxInProgressError()

        async with self._lock:
            try:
                result = await self._submit_locked(msgs, memo)
            except BaseException:
                self.state = PipelineState.FAILED
                raise
            self.state = PipelineState.SUCCESS
            return result

    async def submit_one(self, message: ArcadeMessage, memo: str = "") -> BroadcastResult:
        return await self.submit([message], memo)

    async def _submit_locked(self, messages: list[ArcadeMessage], memo: str) -> BroadcastResult:
        chain_id = await self.chain_id()
        key = await self._get_key(chain_id)

        for attempt in range(MAX_ATTEMPTS):
            self.state = PipelineState.BUILDING_ATTEMPT
            account = await self.tracker.get(key.address)

            estimate = await self.estimator.estimate(messages, memo, key.pub_key, account.sequence)
            fee = self._fee_for(estimate)
            logger.debug(
                f"Attempt {attempt + 1}: seq={account.sequence} gas_limit={fee.gas_limit} "
                f"fee={fee.total}{self.fee_calculator.denom} simulated={estimate.simulated}"
            )

            self.state = PipelineState.AWAITING_SIGNATURE
            signed = await self.signer.sign(messages, memo, key, account, fee, chain_id)

            self.state = PipelineState.BROADCASTING
            try:
                result = await self.broadcaster.broadcast(signed.tx_bytes)
            except ApplicationRejected as e:
                result = e.result
                mismatch = parse_sequence_mismatch(result.raw_log)
                if mismatch is None:
                    logger.debug(f"Transaction rejected: {e}")
                    raise
            else:
                mismatch = parse_sequence_mismatch(result.raw_log)
                if mismatch is None:
                    self.tracker.mark_submitted(key.address, account.account_number, account.sequence)
                    logger.debug(f"✅ Transaction accepted into mempool: {result.tx_hash}")
                    return result

            self.state = PipelineState.MISMATCH_DETECTED
            self.tracker.reconcile(key.address, account.account_number, mismatch.expected)
            if attempt + 1 >= MAX_ATTEMPTS:
                raise SequenceMismatchError(
                    expected=mismatch.expected,
                    got=mismatch.got,
                    raw_log=result.raw_log,
                    tx_hash=result.tx_hash or None,
                )
            logger.debug(f"Account sequence mismatch (expected {mismatch.expected}, got {mismatch.got}), retrying once...")
            await asyncio.sleep(self.config.mismatch_retry_delay_secs)

        raise AssertionError("unreachable")

    def _fee_for(self, estimate: GasEstimate) -> TxFee:
        if estimate.simulated:
            return self.fee_calculator.fee_for(estimate.gas_used)
        return self.fee_calculator.fee_for_limit(estimate.fallback_gas_limit)

    async def wait_for_tx(
        self,
        tx_hash: str,
        timeout: Optional[Union[int, float, timedelta]] = None,
        poll_period: Optional[Union[int, float, timedelta]] = None,
    ) -> Optional[BroadcastResult]:
        """Poll until ``tx_hash`` is committed. Returns None if it is not indexed before the timeout."""
        timeout_secs = _seconds(timeout, self.config.tx_poll_timeout_secs)
        poll_secs = _seconds(poll_period, self.config.tx_poll_interval_secs)

        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout_secs
        while True:
            try:
                resp = await self.gateway.get_tx(tx_hash)
                if resp is not None:
                    return BroadcastResult.from_tx_response(resp)
            except TransportError as e:
                logger.debug(f"Tx {tx_hash} lookup failed, retrying: {e}")

            if loop.time() + poll_secs > deadline:
                return None
            await asyncio.sleep(poll_secs)


def _seconds(value: Optional[Union[int, float, timedelta]], default: float) -> float:
    if value is None:
        return default
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)
