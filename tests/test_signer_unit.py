"""
Unit tests for the Wallet protocol, LocalWalletSigner and TxSigner.
"""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest
from cosmpy.protos.cosmos.tx.v1beta1.tx_pb2 import AuthInfo, SignDoc, TxRaw

from retrochain_sdk.rpc_client.config import RetrochainWalletConfig
from retrochain_sdk.rpc_client.errors import EncodingError, SigningDeclined
from retrochain_sdk.rpc_client.fees import FeeCalculator
from retrochain_sdk.rpc_client.messages import InsertCoin
from retrochain_sdk.rpc_client.sequence import AccountSequence
from retrochain_sdk.rpc_client.signer import (
    DirectSignResponse,
    LocalWalletSigner,
    TxSigner,
    Wallet,
    WalletKey,
)
from tests.utils.crypto import DUMMY_PUB_KEY, TEST_MNEMONIC, TEST_PRIVATE_KEY, gen_private_key_hex

CHAIN_ID = "retrochain-arcade-1"
FEE = FeeCalculator().fee_for(100_000)
ACCOUNT = AccountSequence(account_number=7, sequence=5)


class TestLocalWalletSigner:
    def test_init_with_private_key(self):
        signer = LocalWalletSigner(private_key=TEST_PRIVATE_KEY)
        assert signer.address.startswith("cosmos1")
        assert len(signer.public_key_bytes) == 33

    def test_init_with_custom_prefix(self):
        signer = LocalWalletSigner(private_key=TEST_PRIVATE_KEY, prefix="retro")
        assert signer.address.startswith("retro1")

    def test_init_with_mnemonic(self):
        signer = LocalWalletSigner(mnemonic=TEST_MNEMONIC)
        assert signer.address.startswith("cosmos1")

    def test_same_key_same_address(self):
        assert LocalWalletSigner(private_key=TEST_PRIVATE_KEY).address == LocalWalletSigner(private_key=TEST_PRIVATE_KEY).address

    def test_different_keys_differ(self):
        assert LocalWalletSigner(private_key=gen_private_key_hex()).address != LocalWalletSigner(private_key=TEST_PRIVATE_KEY).address

    def test_requires_credentials(self):
        with pytest.raises(ValueError, match="Must provide"):
            LocalWalletSigner()

    def test_satisfies_wallet_protocol(self):
        assert isinstance(LocalWalletSigner(private_key=TEST_PRIVATE_KEY), Wallet)

    @pytest.mark.asyncio
    async def test_sign_direct_produces_verifiable_signature(self):
        signer = LocalWalletSigner(private_key=TEST_PRIVATE_KEY)
        doc = SignDoc(body_bytes=b"body", auth_info_bytes=b"auth", chain_id=CHAIN_ID, account_number=7)

        resp = await signer.sign_direct(CHAIN_ID, signer.address, doc)

        assert len(resp.signature) == 64
        assert resp.signed == doc
        assert signer.wallet.public_key().verify(doc.SerializeToString(deterministic=True), resp.signature)

    @pytest.mark.asyncio
    async def test_sign_direct_rejects_other_address(self):
        signer = LocalWalletSigner(private_key=TEST_PRIVATE_KEY)
        doc = SignDoc(body_bytes=b"b", auth_info_bytes=b"a", chain_id=CHAIN_ID, account_number=1)
        with pytest.raises(SigningDeclined):
            await signer.sign_direct(CHAIN_ID, "cosmos1someoneelse", doc)

    @pytest.mark.asyncio
    async def test_sign_direct_rejects_other_chain(self):
        signer = LocalWalletSigner(private_key=TEST_PRIVATE_KEY)
        doc = SignDoc(body_bytes=b"b", auth_info_bytes=b"a", chain_id="other-chain", account_number=1)
        with pytest.raises(SigningDeclined):
            await signer.sign_direct(CHAIN_ID, signer.address, doc)


class TestWalletConfig:
    def test_requires_some_credential(self):
        with pytest.raises(ValueError, match="No wallet credentials"):
            RetrochainWalletConfig()

    def test_private_key_signer(self):
        signer = RetrochainWalletConfig(private_key=TEST_PRIVATE_KEY).get_signer()
        assert signer.address == LocalWalletSigner(private_key=TEST_PRIVATE_KEY).address

    def test_mnemonic_file_signer(self, tmp_path):
        path = tmp_path / "mnemonic.txt"
        path.write_text(TEST_MNEMONIC + "\n")
        signer = RetrochainWalletConfig(mnemonic_file=str(path)).get_signer()
        assert signer.address == LocalWalletSigner(mnemonic=TEST_MNEMONIC).address

    def test_private_key_preferred_over_mnemonic(self):
        signer = RetrochainWalletConfig(private_key=TEST_PRIVATE_KEY, mnemonic=TEST_MNEMONIC).get_signer()
        assert signer.address == LocalWalletSigner(private_key=TEST_PRIVATE_KEY).address


def _mock_wallet(**sign_kwargs) -> Mock:
    wallet = Mock()
    wallet.sign_direct = AsyncMock(**sign_kwargs)
    return wallet


KEY = WalletKey(address="cosmos1player", pub_key=DUMMY_PUB_KEY)
MSGS = [InsertCoin(creator="cosmos1player", game_id="retronoid")]


class TestTxSigner:
    @pytest.mark.asyncio
    async def test_assembles_tx_raw_from_signed_doc(self):
        async def sign(chain_id, address, sign_doc):
            return DirectSignResponse(signed=sign_doc, signature=b"\x07" * 64)

        signer = TxSigner(_mock_wallet(side_effect=sign))
        signed = await signer.sign(MSGS, "memo", KEY, ACCOUNT, FEE, CHAIN_ID)

        raw = TxRaw.FromString(signed.tx_bytes)
        assert raw.body_bytes == signed.sign_doc.body_bytes
        assert list(raw.signatures) == [b"\x07" * 64]
        assert signed.sign_doc.chain_id == CHAIN_ID
        assert signed.sign_doc.account_number == 7
        assert AuthInfo.FromString(raw.auth_info_bytes).signer_infos[0].sequence == 5

    @pytest.mark.asyncio
    async def test_uses_wallet_adjusted_auth_info(self):
        adjusted = FeeCalculator().fee_for(500_000)
        signer = TxSigner(Mock())
        wallet_doc = signer.build_sign_doc(MSGS, "memo", DUMMY_PUB_KEY, ACCOUNT, adjusted, CHAIN_ID)

        signer.wallet = _mock_wallet(return_value=DirectSignResponse(signed=wallet_doc, signature=b"\x01" * 64))
        signed = await signer.sign(MSGS, "memo", KEY, ACCOUNT, FEE, CHAIN_ID)

        raw = TxRaw.FromString(signed.tx_bytes)
        assert AuthInfo.FromString(raw.auth_info_bytes).fee.gas_limit == adjusted.gas_limit

    @pytest.mark.asyncio
    async def test_wallet_rejection_is_declined(self):
        signer = TxSigner(_mock_wallet(side_effect=RuntimeError("Request rejected")))
        with pytest.raises(SigningDeclined, match="Request rejected"):
            await signer.sign(MSGS, "", KEY, ACCOUNT, FEE, CHAIN_ID)

    @pytest.mark.asyncio
    async def test_wallet_timeout_is_declined(self):
        async def never(chain_id, address, sign_doc):
            await asyncio.sleep(10)

        signer = TxSigner(_mock_wallet(side_effect=never), sign_timeout_secs=0.01)
        with pytest.raises(SigningDeclined, match="did not sign"):
            await signer.sign(MSGS, "", KEY, ACCOUNT, FEE, CHAIN_ID)

    @pytest.mark.asyncio
    async def test_empty_signature_is_encoding_error(self):
        signer = TxSigner(Mock())
        doc = signer.build_sign_doc(MSGS, "", DUMMY_PUB_KEY, ACCOUNT, FEE, CHAIN_ID)
        signer.wallet = _mock_wallet(return_value=DirectSignResponse(signed=doc, signature=b""))
        with pytest.raises(EncodingError):
            await signer.sign(MSGS, "", KEY, ACCOUNT, FEE, CHAIN_ID)

    @pytest.mark.asyncio
    async def test_bad_pub_key_fails_before_wallet_is_asked(self):
        wallet = _mock_wallet()
        signer = TxSigner(wallet)
        with pytest.raises(EncodingError):
            await signer.sign(MSGS, "", WalletKey(address="cosmos1player", pub_key=b"\x02"), ACCOUNT, FEE, CHAIN_ID)
        wallet.sign_direct.assert_not_called()
