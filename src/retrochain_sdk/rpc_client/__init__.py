from .broadcaster import BroadcastResult
from .client import RetrochainClient
from .client_arcade import ArcadeClient, ArcadeTxs
from .config import RetrochainNetworkConfig, RetrochainWalletConfig
from .errors import (
    ApplicationRejected,
    EncodingError,
    RetrochainError,
    SequenceMismatchError,
    SessionNotFound,
    SigningDeclined,
    SimulationUnavailable,
    TransportError,
    TxInProgressError,
)
from .messages import (
    ArcadeGame,
    ClaimAchievement,
    InsertCoin,
    RegisterGame,
    SetHighScoreInitials,
    StartSession,
    SubmitScore,
    UsePowerUp,
)
from .signer import LocalWalletSigner, Wallet
from .tx_pipeline import TxPipeline


__all__ = [
    "RetrochainClient",
    "RetrochainNetworkConfig",
    "RetrochainWalletConfig",
    "ArcadeClient",
    "ArcadeTxs",
    "TxPipeline",
    "BroadcastResult",
    "Wallet",
    "LocalWalletSigner",
    # Messages
    "ArcadeGame",
    "ClaimAchievement",
    "InsertCoin",
    "RegisterGame",
    "SetHighScoreInitials",
    "StartSession",
    "SubmitScore",
    "UsePowerUp",
    # Errors
    "RetrochainError",
    "ApplicationRejected",
    "EncodingError",
    "SequenceMismatchError",
    "SessionNotFound",
    "SigningDeclined",
    "SimulationUnavailable",
    "TransportError",
    "TxInProgressError",
]
