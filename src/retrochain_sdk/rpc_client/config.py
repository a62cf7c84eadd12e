import os
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, TYPE_CHECKING

from cosmpy.aerial.wallet import LocalWallet

if TYPE_CHECKING:
    from retrochain_sdk.rpc_client.signer import LocalWalletSigner


@dataclass
class RetrochainWalletConfig:
    """
    Configuration for local wallet access.

    At least one of the following must be provided:
    - private_key: Hex-encoded private key string.
    - mnemonic: Mnemonic phrase string.
    - mnemonic_file: Path to a file containing the mnemonic phrase.
    - wallet: An existing LocalWallet instance.

    The address prefix can also be specified (default is "cosmos").
    """
    private_key: Optional[str] = None
    mnemonic: Optional[str] = None
    mnemonic_file: Optional[str] = None
    wallet: Optional[LocalWallet] = None
    prefix: str = "cosmos"

    @classmethod
    def from_env(cls, env_prefix: str | None = None) -> 'RetrochainWalletConfig':
        return cls(
            private_key=os.getenv((env_prefix or "") + "PRIVATE_KEY"),
            mnemonic=os.getenv((env_prefix or "") + "MNEMONIC"),
            mnemonic_file=os.getenv((env_prefix or "") + "MNEMONIC_FILE"),
            prefix=os.getenv((env_prefix or "") + "ADDRESS_PREFIX", "cosmos"),
        )

    def __post_init__(self):
        if (
            self.private_key is None and
            self.mnemonic is None and
            self.mnemonic_file is None and
            self.wallet is None
        ):
            raise ValueError("No wallet credentials provided")

    def get_signer(self) -> "LocalWalletSigner":
        from retrochain_sdk.rpc_client.signer import LocalWalletSigner

        if self.wallet is not None:
            return LocalWalletSigner(wallet=self.wallet, prefix=self.prefix)
        if self.private_key is not None:
            return LocalWalletSigner(private_key=self.private_key, prefix=self.prefix)
        if self.mnemonic is not None:
            return LocalWalletSigner(mnemonic=self.mnemonic, prefix=self.prefix)
        with open(self.mnemonic_file) as f:
            mnemonic = f.read().strip()
        return LocalWalletSigner(mnemonic=mnemonic, prefix=self.prefix)


@dataclass
class RetrochainNetworkConfig:
    """Configuration for a RetroChain REST gateway and its fee/gas policy."""

    rest_url: str
    chain_id: Optional[str] = None
    fee_denom: str = "uretro"
    # 0.01 uretro per gas unit, kept as an integer ratio so fees never round down
    gas_price_numerator: int = 1
    gas_price_denominator: int = 100
    gas_adjustment: Decimal = Decimal("1.25")
    gas_buffer: int = 5000
    min_gas_limit: int = 0
    simulate_gas_limit: int = 2_000_000
    fallback_gas_base: int = 550_000
    fallback_gas_per_msg: int = 120_000
    mismatch_retry_delay_secs: float = 0.25
    session_poll_timeout_secs: float = 12.0
    session_poll_interval_secs: float = 0.8
    tx_poll_timeout_secs: float = 12.0
    tx_poll_interval_secs: float = 0.65
    sign_timeout_secs: float = 120.0
    request_timeout_secs: float = 15.0

    @classmethod
    def local(
        cls,
        chain_id="retrochain-arcade-1",
        port: int = 1317,
        url: str | None = None,
        fee_denom="uretro",
    ) -> 'RetrochainNetworkConfig':
        return cls(
            chain_id=chain_id,
            rest_url=url or f"http://localhost:{port}",
            fee_denom=fee_denom,
        )

    @classmethod
    def from_env(cls, env_prefix: str | None = None) -> 'RetrochainNetworkConfig':
        prefix = env_prefix or ""
        return cls(
            rest_url=require_env(prefix + "REST_ENDPOINT"),
            chain_id=os.getenv(prefix + "CHAIN_ID") or None,
            fee_denom=os.getenv(prefix + "FEE_DENOM", "uretro"),
            gas_price_numerator=int(os.getenv(prefix + "GAS_PRICE_NUM", "1")),
            gas_price_denominator=int(os.getenv(prefix + "GAS_PRICE_DEN", "100")),
        )

    def __post_init__(self):
        if self.gas_price_denominator <= 0:
            raise ValueError("gas_price_denominator must be positive")
        if self.gas_price_numerator < 0:
            raise ValueError("gas_price_numerator must not be negative")
        self.gas_adjustment = Decimal(self.gas_adjustment)
        self.rest_url = self.rest_url.rstrip('/')


def require_env(name: str) -> str:
    value = os.getenv(name)
    if value is None:
        raise RuntimeError(f"environment variable {name} is required")
    return value
