"""
Arcade transaction messages.

Each message is an immutable value carrying the creator address plus the
operation's fields. ``to_proto()`` produces the protobuf binding used for wire
encoding; ``type_url`` is the Any type url the chain routes on.
"""

from dataclasses import dataclass
from typing import ClassVar, Union

import betterproto2

from retrochain_sdk.rpc_client.errors import EncodingError
from retrochain_sdk.rpc_client.protos.retrochain.arcade import v1 as arcade_v1

UINT64_MAX = 2**64 - 1
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def _uint64(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0 or value > UINT64_MAX:
        raise EncodingError(f"{name} out of uint64 range: {value}")
    return value


def _text(name: str, value: str, required: bool = False) -> str:
    if not isinstance(value, str):
        raise EncodingError(f"{name} must be a string, got {type(value).__name__}")
    if required and not value:
        raise EncodingError(f"{name} must not be empty")
    return value


@dataclass(frozen=True)
class ArcadeGame:
    game_id: str
    name: str
    description: str = ""
    genre: int = 0
    credits_per_play: int = 1
    max_players: int = 1
    multiplayer_enabled: bool = False
    developer: str = ""
    active: bool = True
    base_difficulty: int = 1

    def to_proto(self) -> arcade_v1.ArcadeGame:
        if isinstance(self.genre, bool) or not isinstance(self.genre, int) or not INT32_MIN <= self.genre <= INT32_MAX:
            raise EncodingError(f"genre out of int32 range: {self.genre!r}")
        return arcade_v1.ArcadeGame(
            game_id=_text("game_id", self.game_id, required=True),
            name=_text("name", self.name),
            description=_text("description", self.description),
            genre=self.genre,
            credits_per_play=_uint64("credits_per_play", self.credits_per_play),
            max_players=_uint64("max_players", self.max_players),
            multiplayer_enabled=bool(self.multiplayer_enabled),
            developer=_text("developer", self.developer),
            active=bool(self.active),
            base_difficulty=_uint64("base_difficulty", self.base_difficulty),
        )

    @classmethod
    def from_proto(cls, proto: arcade_v1.ArcadeGame) -> "ArcadeGame":
        return cls(
            game_id=proto.game_id,
            name=proto.name,
            description=proto.description,
            genre=proto.genre,
            credits_per_play=proto.credits_per_play,
            max_players=proto.max_players,
            multiplayer_enabled=proto.multiplayer_enabled,
            developer=proto.developer,
            active=proto.active,
            base_difficulty=proto.base_difficulty,
        )


@dataclass(frozen=True)
class InsertCoin:
    type_url: ClassVar[str] = "/retrochain.arcade.v1.MsgInsertCoin"

    creator: str
    game_id: str
    credits: int = 1

    def to_proto(self) -> arcade_v1.MsgInsertCoin:
        return arcade_v1.MsgInsertCoin(
            creator=_text("creator", self.creator, required=True),
            credits=_uint64("credits", self.credits),
            game_id=_text("game_id", self.game_id, required=True),
        )

    @classmethod
    def from_proto(cls, proto: arcade_v1.MsgInsertCoin) -> "InsertCoin":
        return cls(creator=proto.creator, game_id=proto.game_id, credits=proto.credits)


@dataclass(frozen=True)
class StartSession:
    type_url: ClassVar[str] = "/retrochain.arcade.v1.MsgStartSession"

    creator: str
    game_id: str
    difficulty: int = 1

    def to_proto(self) -> arcade_v1.MsgStartSession:
        return arcade_v1.MsgStartSession(
            creator=_text("creator", self.creator, required=True),
            game_id=_text("game_id", self.game_id, required=True),
            difficulty=_uint64("difficulty", self.difficulty),
        )

    @classmethod
    def from_proto(cls, proto: arcade_v1.MsgStartSession) -> "StartSession":
        return cls(creator=proto.creator, game_id=proto.game_id, difficulty=proto.difficulty)


@dataclass(frozen=True)
class SubmitScore:
    type_url: ClassVar[str] = "/retrochain.arcade.v1.MsgSubmitScore"

    creator: str
    session_id: int
    score: int
    level: int = 1
    game_over: bool = True

    def to_proto(self) -> arcade_v1.MsgSubmitScore:
        return arcade_v1.MsgSubmitScore(
            creator=_text("creator", self.creator, required=True),
            session_id=_uint64("session_id", self.session_id),
            score=_uint64("score", self.score),
            level=_uint64("level", self.level),
            game_over=bool(self.game_over),
        )

    @classmethod
    def from_proto(cls, proto: arcade_v1.MsgSubmitScore) -> "SubmitScore":
        return cls(
            creator=proto.creator,
            session_id=proto.session_id,
            score=proto.score,
            level=proto.level,
            game_over=proto.game_over,
        )


@dataclass(frozen=True)
class UsePowerUp:
    type_url: ClassVar[str] = "/retrochain.arcade.v1.MsgUsePowerUp"

    creator: str
    session_id: int
    power_up_id: str

    def to_proto(self) -> arcade_v1.MsgUsePowerUp:
        return arcade_v1.MsgUsePowerUp(
            creator=_text("creator", self.creator, required=True),
            session_id=_uint64("session_id", self.session_id),
            power_up_id=_text("power_up_id", self.power_up_id, required=True),
        )

    @classmethod
    def from_proto(cls, proto: arcade_v1.MsgUsePowerUp) -> "UsePowerUp":
        return cls(creator=proto.creator, session_id=proto.session_id, power_up_id=proto.power_up_id)


@dataclass(frozen=True)
class RegisterGame:
    type_url: ClassVar[str] = "/retrochain.arcade.v1.MsgRegisterGame"

    creator: str
    game: ArcadeGame

    def to_proto(self) -> arcade_v1.MsgRegisterGame:
        if not isinstance(self.game, ArcadeGame):
            raise EncodingError("RegisterGame requires an ArcadeGame")
        return arcade_v1.MsgRegisterGame(
            creator=_text("creator", self.creator, required=True),
            game=self.game.to_proto(),
        )

    @classmethod
    def from_proto(cls, proto: arcade_v1.MsgRegisterGame) -> "RegisterGame":
        if proto.game is None:
            raise EncodingError("MsgRegisterGame carries no game")
        return cls(creator=proto.creator, game=ArcadeGame.from_proto(proto.game))


@dataclass(frozen=True)
class ClaimAchievement:
    type_url: ClassVar[str] = "/retrochain.arcade.v1.MsgClaimAchievement"

    creator: str
    achievement_id: str
    game_id: str

    def to_proto(self) -> arcade_v1.MsgClaimAchievement:
        return arcade_v1.MsgClaimAchievement(
            creator=_text("creator", self.creator, required=True),
            achievement_id=_text("achievement_id", self.achievement_id, required=True),
            game_id=_text("game_id", self.game_id),
        )

    @classmethod
    def from_proto(cls, proto: arcade_v1.MsgClaimAchievement) -> "ClaimAchievement":
        return cls(creator=proto.creator, achievement_id=proto.achievement_id, game_id=proto.game_id)


@dataclass(frozen=True)
class SetHighScoreInitials:
    type_url: ClassVar[str] = "/retrochain.arcade.v1.MsgSetHighScoreInitials"

    creator: str
    game_id: str
    initials: str

    def to_proto(self) -> arcade_v1.MsgSetHighScoreInitials:
        return arcade_v1.MsgSetHighScoreInitials(
            creator=_text("creator", self.creator, required=True),
            game_id=_text("game_id", self.game_id, required=True),
            initials=_text("initials", self.initials, required=True),
        )

    @classmethod
    def from_proto(cls, proto: arcade_v1.MsgSetHighScoreInitials) -> "SetHighScoreInitials":
        return cls(creator=proto.creator, game_id=proto.game_id, initials=proto.initials)


ArcadeMessage = Union[
    InsertCoin,
    StartSession,
    SubmitScore,
    UsePowerUp,
    RegisterGame,
    ClaimAchievement,
    SetHighScoreInitials,
]

MESSAGE_TYPES: dict[str, type] = {
    cls.type_url: cls
    for cls in (InsertCoin, StartSession, SubmitScore, UsePowerUp, RegisterGame, ClaimAchievement, SetHighScoreInitials)
}


def encode_message(msg: ArcadeMessage) -> bytes:
    """Serialize a message's protobuf body (the Any ``value``)."""
    if type(msg) not in MESSAGE_TYPES.values():
        raise EncodingError(f"unsupported message type: {type(msg).__name__}")
    proto: betterproto2.Message = msg.to_proto()
    return bytes(proto)

_BINDINGS: dict[type, type[betterproto2.Message]] = {
    InsertCoin: arcade_v1.MsgInsertCoin,
    StartSession: arcade_v1.MsgStartSession,
    SubmitScore: arcade_v1.MsgSubmitScore,
    UsePowerUp: arcade_v1.MsgUsePowerUp,
    RegisterGame: arcade_v1.MsgRegisterGame,
    ClaimAchievement: arcade_v1.MsgClaimAchievement,
    SetHighScoreInitials: arcade_v1.MsgSetHighScoreInitials,
}


def decode_message(type_url: str, value: bytes) -> ArcadeMessage:
    """Rebuild a message from an Any ``type_url`` and its protobuf body."""
    cls = MESSAGE_TYPES.get(type_url)
    if cls is None:
        raise EncodingError(f"unknown message type url: {type_url}")
    try:
        proto = _BINDINGS[cls]().parse(value)
    except Exception as e:
        raise EncodingError(f"malformed {type_url}: {e}") from e
    return cls.from_proto(proto)
