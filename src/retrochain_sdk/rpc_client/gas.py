import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from retrochain_sdk.rpc_client.codec import encode_auth_info, encode_tx_body, encode_tx_raw
from retrochain_sdk.rpc_client.errors import EncodingError, SimulationUnavailable, TransportError
from retrochain_sdk.rpc_client.fees import FeeCalculator, TxFee
from retrochain_sdk.rpc_client.messages import ArcadeMessage
from retrochain_sdk.rpc_client.rest import RestGateway

logger = logging.getLogger("retrochain_sdk")

# Simulation skips signature verification, so a zeroed secp256k1 signature is enough.
PLACEHOLDER_SIGNATURE = bytes(64)


@dataclass(frozen=True)
class GasEstimate:
    gas_used: Optional[int]
    fallback_gas_limit: Optional[int] = None

    @property
    def simulated(self) -> bool:
        return self.gas_used is not None


class GasEstimator:
    def __init__(
        self,
        gateway: RestGateway,
        fee_calculator: FeeCalculator,
        simulate_gas_limit: int = 2_000_000,
        fallback_gas_base: int = 550_000,
        fallback_gas_per_msg: int = 120_000,
    ):
        self.gateway = gateway
        self.fee_calculator = fee_calculator
        self.simulate_gas_limit = simulate_gas_limit
        self.fallback_gas_base = fallback_gas_base
        self.fallback_gas_per_msg = fallback_gas_per_msg

    def fallback_gas_limit(self, message_count: int) -> int:
        return self.fallback_gas_base + max(0, message_count - 1) * self.fallback_gas_per_msg

    async def simulate(
        self,
        messages: Sequence[ArcadeMessage],
        memo: str,
        pub_key: bytes,
        sequence: int,
    ) -> int:
        """
        Dry-run the messages against the chain and return gas used.

        The throwaway transaction carries a generous placeholder gas limit and
        fee, and an all-zero signature. It is never broadcast.

        Raises:
            SimulationUnavailable: the gateway failed or returned no usable gas figure
            EncodingError: the messages themselves cannot be encoded
        """
        body_bytes = encode_tx_body(messages, memo)
        placeholder_fee: TxFee = self.fee_calculator.fee_for_limit(self.simulate_gas_limit)
        auth_info_bytes = encode_auth_info(pub_key, sequence, placeholder_fee)
        tx_bytes = encode_tx_raw(body_bytes, auth_info_bytes, [PLACEHOLDER_SIGNATURE])

        try:
            gas_used = await self.gateway.simulate(tx_bytes)
        except (TransportError, EncodingError) as e:
            raise SimulationUnavailable(f"simulate failed: {e}") from e

        logger.debug(f"Simulation successful: gas used = {gas_used}")
        return gas_used

    async def estimate(
        self,
        messages: Sequence[ArcadeMessage],
        memo: str,
        pub_key: bytes,
        sequence: int,
    ) -> GasEstimate:
        try:
            return GasEstimate(gas_used=await self.simulate(messages, memo, pub_key, sequence))
        except SimulationUnavailable as e:
            limit = self.fallback_gas_limit(len(messages))
            logger.warning(f"Gas simulation unavailable, falling back to static gas limit {limit}: {e}")
            return GasEstimate(gas_used=None, fallback_gas_limit=limit)
