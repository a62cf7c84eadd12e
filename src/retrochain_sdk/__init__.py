from .rpc_client import (
    RetrochainClient,
    RetrochainNetworkConfig,
    RetrochainWalletConfig,
    LocalWalletSigner,
    TxPipeline,
)
from .logging_config import setup_sdk_logging
from cosmpy.aerial.wallet import LocalWallet, PrivateKey

__all__ = [
    "RetrochainClient",
    "RetrochainNetworkConfig",
    "RetrochainWalletConfig",
    "LocalWalletSigner",
    "TxPipeline",
    "setup_sdk_logging",
    "LocalWallet",
    "PrivateKey",
]
