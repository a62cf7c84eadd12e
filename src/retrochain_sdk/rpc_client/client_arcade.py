import logging
from typing import Iterable, List, Optional, Union

from retrochain_sdk.rpc_client.broadcaster import BroadcastResult
from retrochain_sdk.rpc_client.codec import SessionInfo
from retrochain_sdk.rpc_client.errors import EncodingError
from retrochain_sdk.rpc_client.messages import (
    ArcadeGame,
    ClaimAchievement,
    InsertCoin,
    RegisterGame,
    SetHighScoreInitials,
    StartSession,
    SubmitScore,
    UsePowerUp,
)
from retrochain_sdk.rpc_client.rest import RestGateway
from retrochain_sdk.rpc_client.sessions import SessionResolver
from retrochain_sdk.rpc_client.tx_pipeline import TxPipeline

logger = logging.getLogger("retrochain_sdk")


def _session_id(value: Union[int, str]) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    text = str(value).strip()
    if not text.isdigit():
        raise EncodingError(f"session id must be a non-negative integer, got {value!r}")
    return int(text)


class ArcadeClient:
    def __init__(self, gateway: RestGateway, sessions: SessionResolver, pipeline: TxPipeline | None = None):
        self.gateway = gateway
        self.sessions = sessions
        self.tx = ArcadeTxs(pipeline=pipeline, sessions=sessions)

    async def player_sessions(self, player: str, limit: int = 50) -> List[SessionInfo]:
        return await self.gateway.player_sessions(player, limit=limit)

    async def resolve_session_id(self, game_id: str, player: Optional[str] = None) -> str:
        """Wait for the chain to index a session for ``game_id`` and return its id."""
        return await self.sessions.resolve_session_id(game_id, await self.tx.get_creator(player))

    async def ensure_active_session_id(
        self,
        game_id: str,
        hint: Optional[str] = None,
        player: Optional[str] = None,
    ) -> str:
        return await self.sessions.ensure_active_session_id(game_id, await self.tx.get_creator(player), hint=hint)


class ArcadeTxs:
    def __init__(self, pipeline: TxPipeline | None, sessions: SessionResolver):
        self._pipeline = pipeline
        self._sessions = sessions

    def _require_pipeline(self) -> TxPipeline:
        if self._pipeline is None:
            raise ValueError("TxPipeline is not initialized for ArcadeTxs (no wallet configured)")
        return self._pipeline

    async def get_creator(self, creator: Optional[str] = None) -> str:
        """Return ``creator`` if given, else the wallet address resolved through ``get_key``."""
        if creator:
            return creator
        return await self._require_pipeline().get_address()

    async def insert_coin(self, game_id: str, credits: int = 1, creator: Optional[str] = None) -> BroadcastResult:
        """
        Buy play credits for a game.

        Args:
            game_id: Game to buy credits for
            credits: Number of credits, default 1
            creator: Optional sender address (defaults to wallet address)

        Returns:
            The mempool-accepted broadcast result
        """
        msg = InsertCoin(creator=await self.get_creator(creator), game_id=game_id, credits=credits)
        return await self._require_pipeline().submit([msg], memo=f"Insert Coin ({game_id})")

    async def start_session(
        self,
        game_id: str,
        difficulty: int = 1,
        creator: Optional[str] = None,
        resolve_session: bool = False,
    ) -> tuple[BroadcastResult, Optional[str]]:
        """
        Start a game session.

        The chain assigns the session id, and it is not part of the SYNC
        broadcast response. With ``resolve_session=True`` the sessions index is
        polled until the new session shows up.

        Returns:
            (broadcast result, session id or None when not resolved)

        Raises:
            SessionNotFound: resolve_session was requested and no session appeared in time
        """
        sender = await self.get_creator(creator)
        msg = StartSession(creator=sender, game_id=game_id, difficulty=difficulty)
        result = await self._require_pipeline().submit([msg], memo=f"Start {game_id}")

        session_id = None
        if resolve_session:
            session_id = await self._sessions.resolve_session_id(game_id, sender)
            logger.debug(f"Session {session_id} started for {game_id} (tx {result.tx_hash})")
        return result, session_id

    async def submit_score(
        self,
        session_id: Union[int, str],
        score: int,
        level: int = 1,
        game_over: bool = True,
        game_id: Optional[str] = None,
        creator: Optional[str] = None,
    ) -> BroadcastResult:
        """
        Submit a score for a session.

        Args:
            session_id: Session the score belongs to
            score: Final (or intermediate) score
            level: Level reached
            game_over: Whether the session ends with this submission
            game_id: Only used for the memo
            creator: Optional sender address (defaults to wallet address)
        """
        msg = SubmitScore(
            creator=await self.get_creator(creator),
            session_id=_session_id(session_id),
            score=score,
            level=level,
            game_over=game_over,
        )
        memo = f"Submit {game_id} Score" if game_id else "Submit Score"
        return await self._require_pipeline().submit([msg], memo=memo)

    async def use_power_up(
        self,
        session_id: Union[int, str],
        power_up_id: str,
        units: int = 1,
        creator: Optional[str] = None,
    ) -> BroadcastResult:
        """Buy ``units`` of a power-up, one message per unit in a single transaction."""
        if units < 1:
            raise EncodingError(f"units must be at least 1, got {units}")
        msg = UsePowerUp(creator=await self.get_creator(creator), session_id=_session_id(session_id), power_up_id=power_up_id)
        return await self._require_pipeline().submit([msg] * units, memo=f"Buy power-up: {power_up_id} x{units}")

    async def register_game(self, game: ArcadeGame, creator: Optional[str] = None) -> BroadcastResult:
        msg = RegisterGame(creator=await self.get_creator(creator), game=game)
        return await self._require_pipeline().submit([msg], memo=f"Register {game.name or game.game_id}")

    async def claim_achievements(
        self,
        game_id: str,
        achievement_ids: Iterable[str],
        creator: Optional[str] = None,
    ) -> Optional[BroadcastResult]:
        """
        Claim several achievements in one transaction.

        Returns None without broadcasting when there is nothing to claim.
        """
        ids = [a for a in achievement_ids if a]
        if not ids:
            return None
        sender = await self.get_creator(creator)
        msgs = [ClaimAchievement(creator=sender, achievement_id=a, game_id=game_id) for a in ids]
        return await self._require_pipeline().submit(msgs, memo=f"Claim achievements ({game_id})")

    async def set_high_score_initials(self, game_id: str, initials: str, creator: Optional[str] = None) -> BroadcastResult:
        msg = SetHighScoreInitials(creator=await self.get_creator(creator), game_id=game_id, initials=initials.strip().upper())
        return await self._require_pipeline().submit([msg], memo="Set High Score Initials")
