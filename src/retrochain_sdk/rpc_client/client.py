"""
RetroChain Client

This module provides the main RetrochainClient class which wires the REST gateway,
the wallet and the transaction pipeline together and exposes the arcade module.
"""

import logging
from typing import Optional, Union

from retrochain_sdk.logging_config import setup_sdk_logging
from retrochain_sdk.rpc_client.client_arcade import ArcadeClient
from retrochain_sdk.rpc_client.config import RetrochainNetworkConfig, RetrochainWalletConfig
from retrochain_sdk.rpc_client.rest import RestGateway
from retrochain_sdk.rpc_client.sequence import SequenceTracker
from retrochain_sdk.rpc_client.sessions import SessionResolver
from retrochain_sdk.rpc_client.signer import Wallet
from retrochain_sdk.rpc_client.tx_pipeline import TxPipeline

logger = logging.getLogger("retrochain_sdk")


class RetrochainClient:
    """
    Main client for interacting with a RetroChain node.

    Queries go through the REST gateway. Transactions need a wallet; without one
    the client is read-only and the ``arcade.tx`` methods raise.
    """

    wallet: Optional[Wallet] = None
    pipeline: Optional[TxPipeline] = None

    def __init__(
        self,
        network: Optional[RetrochainNetworkConfig] = None,
        wallet: Optional[Union[RetrochainWalletConfig, Wallet]] = None,
        debug: bool = False,
    ):
        """
        Initialize the RetroChain client.

        Args:
            network: Network configuration. If None, uses the local node config.
            wallet: Wallet credentials, or any object implementing the Wallet protocol.
            debug: Enable debug logging.
        """
        if debug:
            setup_sdk_logging(debug=True)

        self.network = network if network is not None else RetrochainNetworkConfig.local()
        self.gateway = RestGateway(self.network.rest_url, timeout_secs=self.network.request_timeout_secs)
        self._initialize_wallet(wallet)

        self.tracker = SequenceTracker(self.gateway)
        if self.wallet is not None:
            self.pipeline = TxPipeline(
                wallet=self.wallet,
                gateway=self.gateway,
                config=self.network,
                tracker=self.tracker,
            )

        self.sessions = SessionResolver(
            self.gateway,
            timeout_secs=self.network.session_poll_timeout_secs,
            interval_secs=self.network.session_poll_interval_secs,
        )
        self.arcade = ArcadeClient(gateway=self.gateway, sessions=self.sessions, pipeline=self.pipeline)

        logger.debug(f"Initialized RetroChain client for {self.network.chain_id or 'auto-detected chain'} at {self.network.rest_url}")

    def _initialize_wallet(self, wallet: Optional[Union[RetrochainWalletConfig, Wallet]]):
        if wallet is None:
            return
        if isinstance(wallet, RetrochainWalletConfig):
            try:
                self.wallet = wallet.get_signer()
            except Exception as e:
                logger.error(f"Failed to initialize wallet: {e}")
                raise ValueError(f"Invalid wallet credentials: {e}") from e
            logger.debug("Wallet initialized from credentials")
        else:
            self.wallet = wallet
            logger.debug("Using external wallet")

    @property
    def address(self) -> Optional[str]:
        """Wallet address once resolved by ``get_address()`` or a submission, else None."""
        if self.pipeline is None:
            return None
        return self.pipeline.known_address

    async def get_address(self) -> Optional[str]:
        """Resolve the wallet address through the wallet's ``get_key``. None for a read-only client."""
        if self.pipeline is None:
            return None
        return await self.pipeline.get_address()

    async def close(self):
        """Close client and cleanup resources."""
        logger.debug("Closing RetroChain client")
        await self.gateway.aclose()

    async def __aenter__(self) -> "RetrochainClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    @classmethod
    def local(
        cls,
        wallet: Optional[Union[RetrochainWalletConfig, Wallet]] = None,
        port: int = 1317,
        debug: bool = False,
    ) -> "RetrochainClient":
        """Create client for a local node."""
        return cls(
            network=RetrochainNetworkConfig.local(port=port),
            wallet=wallet,
            debug=debug,
        )

    @classmethod
    def from_env(cls, env_prefix: Optional[str] = None, debug: bool = False) -> "RetrochainClient":
        """Create client from environment variables (``REST_ENDPOINT``, ``PRIVATE_KEY`` or ``MNEMONIC``...)."""
        network = RetrochainNetworkConfig.from_env(env_prefix)
        try:
            wallet = RetrochainWalletConfig.from_env(env_prefix)
        except ValueError:
            logger.debug("No wallet credentials in environment, client is read-only")
            wallet = None
        return cls(network=network, wallet=wallet, debug=debug)
