import asyncio
import logging
from typing import Iterable, Optional, Union

from retrochain_sdk.rpc_client.codec import SessionInfo
from retrochain_sdk.rpc_client.errors import EncodingError, SessionNotFound, TransportError
from retrochain_sdk.rpc_client.rest import RestGateway

logger = logging.getLogger("retrochain_sdk")


def is_active_session_status(status: Union[int, str, None]) -> bool:
    if status is None:
        return False
    if isinstance(status, int):
        return status == 1
    s = str(status).strip().upper()
    if s.isdigit():
        return int(s) == 1
    return "ACTIVE" in s and "INACTIVE" not in s


def pick_latest_session_id(
    sessions: Iterable[SessionInfo],
    game_id: str,
    require_active: bool,
) -> Optional[str]:
    """Newest session for ``game_id``, preferring active ones."""
    mine = [s for s in sessions if s.game_id == game_id and s.session_id]
    if not mine:
        return None

    active = [s for s in mine if is_active_session_status(s.status)]
    if require_active and not active:
        return None

    pick_from = active or mine
    return max(pick_from, key=lambda s: s.numeric_id).session_id


class SessionResolver:
    """
    Discovers chain-assigned session ids after a StartSession broadcast.

    SYNC broadcast returns before block inclusion, so the new session only shows
    up in the sessions index a block or two later. The resolver polls with a
    fixed interval until an active session appears or the deadline passes. A
    result arriving after the caller has moved on is stale and may be discarded.
    """

    def __init__(
        self,
        gateway: RestGateway,
        timeout_secs: float = 12.0,
        interval_secs: float = 0.8,
        limit: int = 50,
    ):
        self.gateway = gateway
        self.timeout_secs = timeout_secs
        self.interval_secs = interval_secs
        self.limit = limit

    async def resolve_session_id(
        self,
        game_id: str,
        player: str,
        timeout_secs: Optional[float] = None,
        interval_secs: Optional[float] = None,
    ) -> str:
        timeout = self.timeout_secs if timeout_secs is None else timeout_secs
        interval = self.interval_secs if interval_secs is None else interval_secs

        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        newest: Optional[str] = None
        attempt = 0

        while True:
            attempt += 1
            try:
                sessions = await self.gateway.player_sessions(player, limit=self.limit)
            except (TransportError, EncodingError) as e:
                logger.debug(f"Session poll {attempt} failed, retrying: {e}")
            else:
                active_id = pick_latest_session_id(sessions, game_id, require_active=True)
                if active_id is not None:
                    logger.debug(f"Found active session {active_id} for {game_id} after {attempt} poll(s)")
                    return active_id
                newest = pick_latest_session_id(sessions, game_id, require_active=False) or newest

            if loop.time() + interval > deadline:
                break
            await asyncio.sleep(interval)

        if newest is not None:
            logger.debug(f"No active session for {game_id}; using newest session {newest}")
            return newest
        raise SessionNotFound(game_id=game_id, player=player, timeout_secs=timeout)

    async def ensure_active_session_id(self, game_id: str, player: str, hint: Optional[str] = None) -> str:
        """Confirm the hinted session is still active, else return the newest active one."""
        sessions = await self.gateway.player_sessions(player, limit=self.limit)
        if hint:
            for s in sessions:
                if s.session_id == str(hint) and is_active_session_status(s.status):
                    return s.session_id

        session_id = pick_latest_session_id(sessions, game_id, require_active=True)
        if session_id is None:
            raise SessionNotFound(game_id=game_id, player=player, timeout_secs=0)
        return session_id
