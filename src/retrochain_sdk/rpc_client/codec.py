"""
Transaction codec for RetroChain.

Encodes the Cosmos transaction envelope (TxBody, AuthInfo, SignDoc, TxRaw) with
the protobuf bindings that ship with cosmpy, wraps arcade messages into
``google.protobuf.Any``, and validates the JSON bodies returned by the REST
gateway with pydantic models.

Every encoder is total for well-formed input and raises ``EncodingError`` for
anything it cannot encode faithfully; it never emits truncated bytes.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from google.protobuf.any_pb2 import Any as ProtoAny
from google.protobuf.message import DecodeError
from cosmpy.protos.cosmos.base.v1beta1.coin_pb2 import Coin
from cosmpy.protos.cosmos.crypto.secp256k1.keys_pb2 import PubKey
from cosmpy.protos.cosmos.tx.signing.v1beta1.signing_pb2 import SignMode
from cosmpy.protos.cosmos.tx.v1beta1.tx_pb2 import (
    AuthInfo,
    Fee,
    ModeInfo,
    SignDoc,
    SignerInfo,
    TxBody,
    TxRaw,
)
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from retrochain_sdk.rpc_client.errors import EncodingError
from retrochain_sdk.rpc_client.fees import TxFee
from retrochain_sdk.rpc_client.messages import ArcadeMessage, UINT64_MAX, decode_message, encode_message

logger = logging.getLogger("retrochain_sdk")

SECP256K1_PUBKEY_TYPE_URL = "/cosmos.crypto.secp256k1.PubKey"
COMPRESSED_PUBKEY_LEN = 33


def _check_uint64(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0 or value > UINT64_MAX:
        raise EncodingError(f"{name} must be a uint64, got {value!r}")
    return value


def to_any(msg: ArcadeMessage) -> ProtoAny:
    return ProtoAny(type_url=msg.type_url, value=encode_message(msg))


def encode_tx_body(messages: Sequence[ArcadeMessage], memo: str = "") -> bytes:
    if not messages:
        raise EncodingError("transaction must contain at least one message")
    if not isinstance(memo, str):
        raise EncodingError(f"memo must be a string, got {type(memo).__name__}")

    body = TxBody(messages=[to_any(msg) for msg in messages], memo=memo)
    return body.SerializeToString(deterministic=True)


@dataclass(frozen=True)
class DecodedTxBody:
    messages: List[ArcadeMessage]
    memo: str


def decode_tx_body(body_bytes: bytes) -> DecodedTxBody:
    try:
        body = TxBody.FromString(body_bytes)
    except DecodeError as e:
        raise EncodingError(f"malformed TxBody: {e}") from e
    return DecodedTxBody(
        messages=[decode_message(m.type_url, bytes(m.value)) for m in body.messages],
        memo=body.memo,
    )


def encode_pub_key(pub_key: bytes) -> ProtoAny:
    if not isinstance(pub_key, (bytes, bytearray)) or len(pub_key) != COMPRESSED_PUBKEY_LEN:
        size = len(pub_key) if isinstance(pub_key, (bytes, bytearray)) else type(pub_key).__name__
        raise EncodingError(f"public key must be a {COMPRESSED_PUBKEY_LEN}-byte compressed secp256k1 key, got {size}")
    return ProtoAny(
        type_url=SECP256K1_PUBKEY_TYPE_URL,
        value=PubKey(key=bytes(pub_key)).SerializeToString(),
    )


def encode_auth_info(pub_key: bytes, sequence: int, fee: TxFee) -> bytes:
    _check_uint64("sequence", sequence)
    _check_uint64("gas_limit", fee.gas_limit)
    if not fee.amount:
        raise EncodingError("fee must carry at least one coin")

    coins = []
    for coin in fee.amount:
        _check_uint64("fee amount", coin.amount)
        if not coin.denom:
            raise EncodingError("fee denom must not be empty")
        coins.append(Coin(denom=coin.denom, amount=str(coin.amount)))

    auth_info = AuthInfo(
        signer_infos=[
            SignerInfo(
                public_key=encode_pub_key(pub_key),
                mode_info=ModeInfo(single=ModeInfo.Single(mode=SignMode.SIGN_MODE_DIRECT)),
                sequence=sequence,
            )
        ],
        fee=Fee(amount=coins, gas_limit=fee.gas_limit),
    )
    return auth_info.SerializeToString(deterministic=True)


def encode_sign_doc(body_bytes: bytes, auth_info_bytes: bytes, chain_id: str, account_number: int) -> SignDoc:
    if not chain_id:
        raise EncodingError("chain id must not be empty")
    _check_uint64("account_number", account_number)
    return SignDoc(
        body_bytes=body_bytes,
        auth_info_bytes=auth_info_bytes,
        chain_id=chain_id,
        account_number=account_number,
    )


def encode_tx_raw(body_bytes: bytes, auth_info_bytes: bytes, signatures: Sequence[bytes]) -> bytes:
    if not body_bytes or not auth_info_bytes:
        raise EncodingError("TxRaw requires non-empty body and auth info bytes")
    if not signatures or any(not sig for sig in signatures):
        raise EncodingError("TxRaw requires one non-empty signature per signer")
    tx_raw = TxRaw(
        body_bytes=body_bytes,
        auth_info_bytes=auth_info_bytes,
        signatures=list(signatures),
    )
    return tx_raw.SerializeToString(deterministic=True)


# ---------------------------------------------------------------------------
# REST JSON responses
# ---------------------------------------------------------------------------

class _GatewayModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class GasInfo(_GatewayModel):
    gas_wanted: Optional[Union[str, int]] = Field(None, validation_alias=AliasChoices("gas_wanted", "gasWanted"))
    gas_used: Optional[Union[str, int]] = Field(None, validation_alias=AliasChoices("gas_used", "gasUsed"))


class SimulateResponse(_GatewayModel):
    gas_info: Optional[GasInfo] = Field(None, validation_alias=AliasChoices("gas_info", "gasInfo"))


class TxResponse(_GatewayModel):
    txhash: str = Field("", validation_alias=AliasChoices("txhash", "txHash"))
    code: int = 0
    codespace: str = ""
    raw_log: str = Field("", validation_alias=AliasChoices("raw_log", "rawLog"))
    height: Optional[Union[str, int]] = None
    gas_wanted: Optional[Union[str, int]] = Field(None, validation_alias=AliasChoices("gas_wanted", "gasWanted"))
    gas_used: Optional[Union[str, int]] = Field(None, validation_alias=AliasChoices("gas_used", "gasUsed"))

    @field_validator("raw_log", "codespace", "txhash", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else v

    @field_validator("code", mode="before")
    @classmethod
    def _none_to_zero(cls, v):
        return 0 if v is None else v


class BroadcastTxResponse(_GatewayModel):
    tx_response: Optional[TxResponse] = Field(None, validation_alias=AliasChoices("tx_response", "txResponse"))


class SessionInfo(_GatewayModel):
    session_id: str = Field(validation_alias=AliasChoices("session_id", "sessionId"))
    game_id: str = Field("", validation_alias=AliasChoices("game_id", "gameId"))
    player: str = ""
    status: Optional[Union[int, str]] = None
    score: Optional[Union[str, int]] = None

    @field_validator("session_id", mode="before")
    @classmethod
    def _id_to_str(cls, v):
        return "" if v is None else str(v)

    @property
    def numeric_id(self) -> int:
        try:
            return int(self.session_id)
        except ValueError:
            return 0


class SessionsResponse(_GatewayModel):
    sessions: List[SessionInfo] = Field(default_factory=list)

    @field_validator("sessions", mode="before")
    @classmethod
    def _null_sessions(cls, v):
        return [] if v is None else v


@dataclass(frozen=True)
class AccountInfo:
    account_number: int
    sequence: int


def _to_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise EncodingError(f"{name} is not numeric: {value!r}")
    try:
        return int(str(value).strip())
    except (TypeError, ValueError) as e:
        raise EncodingError(f"{name} is not numeric: {value!r}") from e


def decode_simulate_response(payload: Any) -> int:
    """Return gas used from a simulate response. Missing, non-numeric or non-positive values are errors."""
    try:
        resp = SimulateResponse.model_validate(payload)
    except ValidationError as e:
        raise EncodingError(f"malformed simulate response: {e}") from e
    if resp.gas_info is None or resp.gas_info.gas_used is None:
        raise EncodingError("simulate response is missing gas_info.gas_used")
    gas_used = _to_int("gas_used", resp.gas_info.gas_used)
    if gas_used <= 0:
        raise EncodingError(f"simulate returned invalid gas_used: {gas_used}")
    return gas_used


def decode_tx_response(payload: Any) -> TxResponse:
    """Decode a broadcast or get-tx body into its ``tx_response``."""
    try:
        resp = BroadcastTxResponse.model_validate(payload)
    except ValidationError as e:
        raise EncodingError(f"malformed tx response: {e}") from e
    if resp.tx_response is None:
        raise EncodingError("response is missing tx_response")
    return resp.tx_response


decode_broadcast_response = decode_tx_response


def _extract_base_account(account: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    def pick(obj: Optional[Dict[str, Any]], *keys: str) -> Optional[Dict[str, Any]]:
        if not isinstance(obj, dict):
            return None
        for key in keys:
            value = obj.get(key)
            if isinstance(value, dict):
                return value
        return None

    if "account_number" in account or "accountNumber" in account:
        return account

    base = pick(account, "base_account", "baseAccount")
    if base is not None:
        return base

    vesting = pick(account, "base_vesting_account", "baseVestingAccount")
    for wrapper_keys in (
        ("base_permanent_locked_account", "basePermanentLockedAccount"),
        ("base_periodic_vesting_account", "basePeriodicVestingAccount"),
    ):
        if vesting is not None:
            break
        vesting = pick(pick(account, *wrapper_keys), "base_vesting_account", "baseVestingAccount")

    return pick(vesting, "base_account", "baseAccount")


def decode_account_response(payload: Any) -> AccountInfo:
    account = payload.get("account") if isinstance(payload, dict) else None
    if not isinstance(account, dict):
        raise EncodingError("account response is missing 'account'")

    base = _extract_base_account(account)
    if base is None:
        account_type = account.get("@type") or account.get("type") or "unknown"
        raise EncodingError(f"Unsupported account type from auth query ({account_type}).")

    # proto3 JSON may omit zero-valued fields on a freshly funded account
    account_number = _to_int("account_number", base.get("account_number", base.get("accountNumber", 0)))
    sequence = _to_int("sequence", base.get("sequence", 0))
    return AccountInfo(account_number=account_number, sequence=sequence)


def decode_sessions_response(payload: Any) -> List[SessionInfo]:
    try:
        return SessionsResponse.model_validate(payload or {}).sessions
    except ValidationError as e:
        raise EncodingError(f"malformed sessions response: {e}") from e


def decode_chain_id(payload: Any) -> Optional[str]:
    """Pull the network id out of a node_info or latest-block response."""
    if not isinstance(payload, dict):
        return None

    for info_key in ("default_node_info", "defaultNodeInfo", "node_info", "nodeInfo"):
        info = payload.get(info_key)
        if isinstance(info, dict) and info.get("network"):
            return str(info["network"])

    for block_key in ("block", "sdk_block", "sdkBlock"):
        block = payload.get(block_key)
        header = block.get("header") if isinstance(block, dict) else None
        if isinstance(header, dict):
            chain_id = header.get("chain_id") or header.get("chainId")
            if chain_id:
                return str(chain_id)
    return None
