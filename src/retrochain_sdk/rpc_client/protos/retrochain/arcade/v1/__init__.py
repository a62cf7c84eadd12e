# betterproto2 bindings for proto/retrochain/arcade/v1/tx.proto, maintained by hand.
# Field numbers and types must match the .proto source. gen_proto.py emits the
# full compiler output (with its message pool) into this package instead.

__all__ = (
    "ArcadeGame",
    "MsgClaimAchievement",
    "MsgInsertCoin",
    "MsgRegisterGame",
    "MsgSetHighScoreInitials",
    "MsgStartSession",
    "MsgSubmitScore",
    "MsgUsePowerUp",
)

from dataclasses import dataclass

import betterproto2


@dataclass(eq=False, repr=False)
class ArcadeGame(betterproto2.Message):
    game_id: "str" = betterproto2.field(1, betterproto2.TYPE_STRING)
    name: "str" = betterproto2.field(2, betterproto2.TYPE_STRING)
    description: "str" = betterproto2.field(3, betterproto2.TYPE_STRING)
    genre: "int" = betterproto2.field(4, betterproto2.TYPE_INT32)
    credits_per_play: "int" = betterproto2.field(5, betterproto2.TYPE_UINT64)
    max_players: "int" = betterproto2.field(6, betterproto2.TYPE_UINT64)
    multiplayer_enabled: "bool" = betterproto2.field(7, betterproto2.TYPE_BOOL)
    developer: "str" = betterproto2.field(8, betterproto2.TYPE_STRING)
    active: "bool" = betterproto2.field(10, betterproto2.TYPE_BOOL)
    base_difficulty: "int" = betterproto2.field(12, betterproto2.TYPE_UINT64)


@dataclass(eq=False, repr=False)
class MsgInsertCoin(betterproto2.Message):
    creator: "str" = betterproto2.field(1, betterproto2.TYPE_STRING)
    credits: "int" = betterproto2.field(2, betterproto2.TYPE_UINT64)
    game_id: "str" = betterproto2.field(3, betterproto2.TYPE_STRING)


@dataclass(eq=False, repr=False)
class MsgStartSession(betterproto2.Message):
    creator: "str" = betterproto2.field(1, betterproto2.TYPE_STRING)
    game_id: "str" = betterproto2.field(2, betterproto2.TYPE_STRING)
    difficulty: "int" = betterproto2.field(3, betterproto2.TYPE_UINT64)


@dataclass(eq=False, repr=False)
class MsgSubmitScore(betterproto2.Message):
    creator: "str" = betterproto2.field(1, betterproto2.TYPE_STRING)
    session_id: "int" = betterproto2.field(2, betterproto2.TYPE_UINT64)
    score: "int" = betterproto2.field(3, betterproto2.TYPE_UINT64)
    level: "int" = betterproto2.field(4, betterproto2.TYPE_UINT64)
    game_over: "bool" = betterproto2.field(5, betterproto2.TYPE_BOOL)


@dataclass(eq=False, repr=False)
class MsgRegisterGame(betterproto2.Message):
    creator: "str" = betterproto2.field(1, betterproto2.TYPE_STRING)
    game: "ArcadeGame | None" = betterproto2.field(2, betterproto2.TYPE_MESSAGE, optional=True)


@dataclass(eq=False, repr=False)
class MsgSetHighScoreInitials(betterproto2.Message):
    creator: "str" = betterproto2.field(1, betterproto2.TYPE_STRING)
    game_id: "str" = betterproto2.field(2, betterproto2.TYPE_STRING)
    initials: "str" = betterproto2.field(3, betterproto2.TYPE_STRING)


@dataclass(eq=False, repr=False)
class MsgUsePowerUp(betterproto2.Message):
    creator: "str" = betterproto2.field(1, betterproto2.TYPE_STRING)
    session_id: "int" = betterproto2.field(2, betterproto2.TYPE_UINT64)
    power_up_id: "str" = betterproto2.field(3, betterproto2.TYPE_STRING)


@dataclass(eq=False, repr=False)
class MsgClaimAchievement(betterproto2.Message):
    creator: "str" = betterproto2.field(1, betterproto2.TYPE_STRING)
    achievement_id: "str" = betterproto2.field(2, betterproto2.TYPE_STRING)
    game_id: "str" = betterproto2.field(3, betterproto2.TYPE_STRING)
