"""
Wallet protocol and transaction signing for the RetroChain SDK.

The wallet is an external capability: it is handed a SignDoc and returns the
(possibly adjusted) signed document plus a signature. This module provides:
- Wallet: the protocol any signing backend (browser bridge, vault, local key) satisfies
- LocalWalletSigner: a Wallet backed by a cosmpy LocalWallet (private key or mnemonic)
- TxSigner: builds the SignDoc for one attempt, awaits the wallet and assembles TxRaw

Usage:
    wallet = LocalWalletSigner(private_key="deadbeef...")
    signer = TxSigner(wallet, sign_timeout_secs=120)
    signed = await signer.sign(messages, memo, key, account, fee, chain_id)
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, runtime_checkable

from cosmpy.protos.cosmos.tx.v1beta1.tx_pb2 import SignDoc

from retrochain_sdk.rpc_client.codec import encode_auth_info, encode_sign_doc, encode_tx_body, encode_tx_raw
from retrochain_sdk.rpc_client.errors import EncodingError, SigningDeclined
from retrochain_sdk.rpc_client.fees import TxFee
from retrochain_sdk.rpc_client.messages import ArcadeMessage
from retrochain_sdk.rpc_client.sequence import AccountSequence

logger = logging.getLogger("retrochain_sdk")


@dataclass(frozen=True)
class WalletKey:
    address: str
    pub_key: bytes


@dataclass(frozen=True)
class DirectSignResponse:
    signed: SignDoc
    signature: bytes


@runtime_checkable
class Wallet(Protocol):
    """Signing capability for SIGN_MODE_DIRECT.

    Implementations may prompt a user; ``sign_direct`` should raise when the
    request is rejected.
    """

    async def get_key(self, chain_id: str) -> WalletKey:
        """Return the address and 33-byte compressed public key for ``chain_id``."""
        ...

    async def sign_direct(self, chain_id: str, address: str, sign_doc: SignDoc) -> DirectSignResponse:
        """Sign the serialized SignDoc and return the signed document and signature."""
        ...


class LocalWalletSigner:
    """Wallet wrapping a cosmpy LocalWallet.

    Supports the usual credential options:
    - private_key: Hex-encoded 32-byte private key
    - mnemonic: BIP39 seed phrase
    - wallet: Pre-initialized LocalWallet instance

    Example:
        signer = LocalWalletSigner(private_key="deadbeef...")
        key = await signer.get_key("retrochain-arcade-1")
    """

    def __init__(
        self,
        private_key: Optional[str] = None,
        mnemonic: Optional[str] = None,
        wallet=None,
        prefix: str = "cosmos"
    ):
        from cosmpy.aerial.wallet import LocalWallet, PrivateKey

        if wallet is not None:
            self._wallet = wallet
        elif private_key is not None:
            pk = PrivateKey(bytes.fromhex(private_key))
            self._wallet = LocalWallet(pk, prefix=prefix)
        elif mnemonic is not None:
            self._wallet = LocalWallet.from_mnemonic(mnemonic, prefix=prefix)
        else:
            raise ValueError("Must provide private_key, mnemonic, or wallet")

        self._prefix = prefix

    @property
    def address(self) -> str:
        return str(self._wallet.address())

    @property
    def public_key_bytes(self) -> bytes:
        return self._wallet.public_key().public_key_bytes

    @property
    def wallet(self):
        """Underlying cosmpy LocalWallet."""
        return self._wallet

    async def get_key(self, chain_id: str) -> WalletKey:
        return WalletKey(address=self.address, pub_key=self.public_key_bytes)

    async def sign_direct(self, chain_id: str, address: str, sign_doc: SignDoc) -> DirectSignResponse:
        if address != self.address:
            raise SigningDeclined(f"wallet holds {self.address}, cannot sign for {address}")
        if sign_doc.chain_id != chain_id:
            raise SigningDeclined(f"sign doc is for chain {sign_doc.chain_id!r}, not {chain_id!r}")
        signature = self._wallet.signer().sign(sign_doc.SerializeToString(deterministic=True), deterministic=True)
        return DirectSignResponse(signed=sign_doc, signature=signature)


@dataclass(frozen=True)
class SignedTx:
    tx_bytes: bytes
    sign_doc: SignDoc
    signature: bytes


class TxSigner:
    def __init__(self, wallet: Wallet, sign_timeout_secs: Optional[float] = 120.0):
        self.wallet = wallet
        self.sign_timeout_secs = sign_timeout_secs

    def build_sign_doc(
        self,
        messages: Sequence[ArcadeMessage],
        memo: str,
        pub_key: bytes,
        account: AccountSequence,
        fee: TxFee,
        chain_id: str,
    ) -> SignDoc:
        body_bytes = encode_tx_body(messages, memo)
        auth_info_bytes = encode_auth_info(pub_key, account.sequence, fee)
        return encode_sign_doc(body_bytes, auth_info_bytes, chain_id, account.account_number)

    async def sign(
        self,
        messages: Sequence[ArcadeMessage],
        memo: str,
        key: WalletKey,
        account: AccountSequence,
        fee: TxFee,
        chain_id: str,
    ) -> SignedTx:
        """
        Build a fresh SignDoc, hand it to the wallet and assemble the TxRaw.

        The TxRaw is built from the body/auth-info bytes the wallet returns, since a
        wallet may legitimately adjust the fee before signing.

        Raises:
            SigningDeclined: the wallet rejected the request or did not answer in time
            EncodingError: the inputs or the wallet's answer cannot form a valid TxRaw
        """
        sign_doc = self.build_sign_doc(messages, memo, key.pub_key, account, fee, chain_id)

        logger.debug(f"Requesting signature for {key.address} (seq={account.sequence}, gas_limit={fee.gas_limit})")
        try:
            resp = await asyncio.wait_for(
                self.wallet.sign_direct(chain_id, key.address, sign_doc),
                timeout=self.sign_timeout_secs,
            )
        except SigningDeclined:
            raise
        except asyncio.TimeoutError as e:
            raise SigningDeclined(f"wallet did not sign within {self.sign_timeout_secs:g}s") from e
        except Exception as e:
            raise SigningDeclined(f"wallet rejected the signature request: {e}") from e

        signed = resp.signed if resp.signed is not None else sign_doc
        if not resp.signature:
            raise EncodingError("wallet returned an empty signature")

        tx_bytes = encode_tx_raw(signed.body_bytes, signed.auth_info_bytes, [bytes(resp.signature)])
        return SignedTx(tx_bytes=tx_bytes, sign_doc=signed, signature=bytes(resp.signature))
