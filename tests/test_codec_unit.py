"""
Unit tests for the transaction codec and gateway response decoders.
"""

import pytest
from cosmpy.protos.cosmos.crypto.secp256k1.keys_pb2 import PubKey
from cosmpy.protos.cosmos.tx.signing.v1beta1.signing_pb2 import SignMode
from cosmpy.protos.cosmos.tx.v1beta1.tx_pb2 import AuthInfo, TxRaw

from retrochain_sdk.rpc_client.codec import (
    SECP256K1_PUBKEY_TYPE_URL,
    decode_account_response,
    decode_chain_id,
    decode_sessions_response,
    decode_simulate_response,
    decode_tx_body,
    decode_tx_response,
    encode_auth_info,
    encode_sign_doc,
    encode_tx_body,
    encode_tx_raw,
)
from retrochain_sdk.rpc_client.errors import EncodingError
from retrochain_sdk.rpc_client.fees import CoinAmount, TxFee
from retrochain_sdk.rpc_client.messages import (
    UINT64_MAX,
    ArcadeGame,
    ClaimAchievement,
    InsertCoin,
    RegisterGame,
    SetHighScoreInitials,
    StartSession,
    SubmitScore,
    UsePowerUp,
    decode_message,
    encode_message,
)
from tests.utils.crypto import DUMMY_PUB_KEY

CREATOR = "cosmos1qypqxpq9qcrsszg2pvxq6rs0zqg3yyc5lzv7xu"
FEE = TxFee(amount=(CoinAmount(denom="uretro", amount=1281),), gas_limit=128_050)


class TestMessageEncoding:
    def test_insert_coin_wire_bytes(self):
        msg = InsertCoin(creator="cosmos1abc", game_id="retronoid", credits=2)
        assert encode_message(msg) == b"\x0a\x0acosmos1abc\x10\x02\x1a\x09retronoid"

    def test_submit_score_wire_bytes(self):
        msg = SubmitScore(creator="c", session_id=300, score=1, level=1, game_over=True)
        assert encode_message(msg) == b"\x0a\x01c\x10\xac\x02\x18\x01\x20\x01\x28\x01"

    def test_zero_and_false_fields_are_omitted(self):
        msg = SubmitScore(creator="c", session_id=0, score=0, level=0, game_over=False)
        assert encode_message(msg) == b"\x0a\x01c"

    def test_register_game_nests_game(self):
        game = ArcadeGame(game_id="retronoid", name="RetroNoid")
        encoded = encode_message(RegisterGame(creator="c", game=game))
        assert encoded.startswith(b"\x0a\x01c\x12")
        assert b"retronoid" in encoded and b"RetroNoid" in encoded

    def test_type_urls(self):
        assert InsertCoin.type_url == "/retrochain.arcade.v1.MsgInsertCoin"
        assert ClaimAchievement.type_url == "/retrochain.arcade.v1.MsgClaimAchievement"

    @pytest.mark.parametrize("msg", [
        SubmitScore(creator="c", session_id=1, score=-1),
        SubmitScore(creator="c", session_id=UINT64_MAX + 1, score=1),
        InsertCoin(creator="", game_id="retronoid"),
        InsertCoin(creator="c", game_id="retronoid", credits=True),
        StartSession(creator="c", game_id="retronoid", difficulty="2"),
    ])
    def test_invalid_fields_rejected(self, msg):
        with pytest.raises(EncodingError):
            encode_message(msg)

    def test_unknown_message_type_rejected(self):
        with pytest.raises(EncodingError):
            encode_message(object())


class TestTxBody:
    def test_round_trip_rebuilds_every_message_type(self):
        msgs = [
            InsertCoin(creator=CREATOR, game_id="retronoid", credits=3),
            StartSession(creator=CREATOR, game_id="retronoid", difficulty=2),
            SubmitScore(creator=CREATOR, session_id=UINT64_MAX, score=125_000, level=4, game_over=False),
            UsePowerUp(creator=CREATOR, session_id=31, power_up_id="life"),
            RegisterGame(
                creator=CREATOR,
                game=ArcadeGame(
                    game_id="retronoid",
                    name="RetroNoid",
                    description="Bricks",
                    genre=-2,
                    credits_per_play=2,
                    max_players=4,
                    multiplayer_enabled=True,
                    developer=CREATOR,
                    active=False,
                    base_difficulty=3,
                ),
            ),
            ClaimAchievement(creator=CREATOR, achievement_id="first-blood", game_id="retronoid"),
            SetHighScoreInitials(creator=CREATOR, game_id="retronoid", initials="ABC"),
        ]
        decoded = decode_tx_body(encode_tx_body(msgs, memo="Insert Coin (retronoid)"))

        assert decoded.memo == "Insert Coin (retronoid)"
        assert decoded.messages == msgs

    def test_unknown_type_url_rejected(self):
        with pytest.raises(EncodingError, match="unknown message type"):
            decode_message("/cosmos.bank.v1beta1.MsgSend", b"")

    def test_encoding_is_deterministic(self):
        msgs = [ClaimAchievement(creator=CREATOR, achievement_id="first-blood", game_id="retronoid")]
        assert encode_tx_body(msgs, "m") == encode_tx_body(msgs, "m")

    def test_empty_messages_rejected(self):
        with pytest.raises(EncodingError):
            encode_tx_body([], "")

    def test_non_string_memo_rejected(self):
        with pytest.raises(EncodingError):
            encode_tx_body([InsertCoin(creator=CREATOR, game_id="g")], memo=None)

    def test_garbage_body_rejected(self):
        with pytest.raises(EncodingError):
            decode_tx_body(b"\xff\xff\xff")


class TestAuthInfo:
    def test_direct_mode_signer_and_fee(self):
        auth = AuthInfo.FromString(encode_auth_info(DUMMY_PUB_KEY, 5, FEE))

        assert len(auth.signer_infos) == 1
        signer = auth.signer_infos[0]
        assert signer.sequence == 5
        assert signer.mode_info.single.mode == SignMode.SIGN_MODE_DIRECT
        assert signer.public_key.type_url == SECP256K1_PUBKEY_TYPE_URL
        assert PubKey.FromString(signer.public_key.value).key == DUMMY_PUB_KEY

        assert auth.fee.gas_limit == 128_050
        assert [(c.denom, c.amount) for c in auth.fee.amount] == [("uretro", "1281")]

    def test_wrong_pub_key_length_rejected(self):
        with pytest.raises(EncodingError):
            encode_auth_info(DUMMY_PUB_KEY[:32], 0, FEE)

    def test_sequence_overflow_rejected(self):
        with pytest.raises(EncodingError):
            encode_auth_info(DUMMY_PUB_KEY, UINT64_MAX + 1, FEE)

    def test_fee_without_coins_rejected(self):
        with pytest.raises(EncodingError):
            encode_auth_info(DUMMY_PUB_KEY, 0, TxFee(amount=(), gas_limit=1))


class TestSignDocAndTxRaw:
    def test_sign_doc_fields(self):
        body = encode_tx_body([InsertCoin(creator=CREATOR, game_id="g")])
        auth = encode_auth_info(DUMMY_PUB_KEY, 3, FEE)
        doc = encode_sign_doc(body, auth, "retrochain-arcade-1", 42)

        assert doc.body_bytes == body
        assert doc.auth_info_bytes == auth
        assert doc.chain_id == "retrochain-arcade-1"
        assert doc.account_number == 42

    def test_empty_chain_id_rejected(self):
        with pytest.raises(EncodingError):
            encode_sign_doc(b"body", b"auth", "", 1)

    def test_tx_raw_round_trip(self):
        raw = TxRaw.FromString(encode_tx_raw(b"body", b"auth", [b"\x01" * 64]))
        assert raw.body_bytes == b"body"
        assert raw.auth_info_bytes == b"auth"
        assert list(raw.signatures) == [b"\x01" * 64]

    def test_tx_raw_requires_signature(self):
        with pytest.raises(EncodingError):
            encode_tx_raw(b"body", b"auth", [])
        with pytest.raises(EncodingError):
            encode_tx_raw(b"body", b"auth", [b""])


class TestSimulateResponse:
    def test_gas_used(self):
        assert decode_simulate_response({"gas_info": {"gas_used": "102440"}}) == 102440

    def test_camel_case(self):
        assert decode_simulate_response({"gasInfo": {"gasUsed": 77}}) == 77

    @pytest.mark.parametrize("payload", [
        {},
        {"gas_info": {}},
        {"gas_info": {"gas_used": "lots"}},
        {"gas_info": {"gas_used": "0"}},
    ])
    def test_unusable_gas_rejected(self, payload):
        with pytest.raises(EncodingError):
            decode_simulate_response(payload)


class TestAccountResponse:
    def _base(self, number="12", sequence="9"):
        return {"address": CREATOR, "account_number": number, "sequence": sequence}

    def test_base_account(self):
        info = decode_account_response({"account": {"@type": "/cosmos.auth.v1beta1.BaseAccount", **self._base()}})
        assert (info.account_number, info.sequence) == (12, 9)

    def test_wrapped_base_account(self):
        payload = {"account": {"@type": "/custom.EthAccount", "base_account": self._base()}}
        assert decode_account_response(payload).sequence == 9

    def test_continuous_vesting_account(self):
        payload = {"account": {
            "@type": "/cosmos.vesting.v1beta1.ContinuousVestingAccount",
            "base_vesting_account": {"base_account": self._base("3", "1"), "original_vesting": []},
            "start_time": "0",
        }}
        info = decode_account_response(payload)
        assert (info.account_number, info.sequence) == (3, 1)

    def test_periodic_vesting_wrapper(self):
        payload = {"account": {
            "@type": "/custom.Locked",
            "base_periodic_vesting_account": {"base_vesting_account": {"baseAccount": {"accountNumber": "8", "sequence": "2"}}},
        }}
        info = decode_account_response(payload)
        assert (info.account_number, info.sequence) == (8, 2)

    def test_omitted_zero_fields_default_to_zero(self):
        info = decode_account_response({"account": {"@type": "/cosmos.auth.v1beta1.BaseAccount", "address": CREATOR, "account_number": "4"}})
        assert (info.account_number, info.sequence) == (4, 0)

    def test_unsupported_account_type(self):
        with pytest.raises(EncodingError, match="Unsupported account type"):
            decode_account_response({"account": {"@type": "/cosmos.auth.v1beta1.ModuleAccount", "name": "fee"}})

    def test_missing_account(self):
        with pytest.raises(EncodingError):
            decode_account_response({"code": 5, "message": "not found"})


class TestTxAndSessionResponses:
    def test_tx_response_null_fields(self):
        resp = decode_tx_response({"tx_response": {"txhash": "AB", "code": None, "raw_log": None}})
        assert resp.txhash == "AB"
        assert resp.code == 0
        assert resp.raw_log == ""

    def test_tx_response_camel_case(self):
        resp = decode_tx_response({"txResponse": {"txHash": "CD", "code": 32, "rawLog": "boom"}})
        assert (resp.txhash, resp.code, resp.raw_log) == ("CD", 32, "boom")

    def test_missing_tx_response(self):
        with pytest.raises(EncodingError):
            decode_tx_response({"code": 3})

    def test_sessions_null_list(self):
        assert decode_sessions_response({"sessions": None}) == []

    def test_sessions_numeric_ids(self):
        sessions = decode_sessions_response({"sessions": [{"session_id": 12, "game_id": "retronoid", "status": 1}]})
        assert sessions[0].session_id == "12"
        assert sessions[0].numeric_id == 12


class TestChainId:
    def test_from_node_info(self):
        assert decode_chain_id({"default_node_info": {"network": "retrochain-arcade-1"}}) == "retrochain-arcade-1"

    def test_from_block_header(self):
        assert decode_chain_id({"sdk_block": {"header": {"chain_id": "retrochain-2"}}}) == "retrochain-2"

    def test_unknown_shape(self):
        assert decode_chain_id({"block": {}}) is None
        assert decode_chain_id(None) is None
