from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from retrochain_sdk.rpc_client.broadcaster import BroadcastResult


class RetrochainError(Exception):
    """Base exception for all SDK errors."""
    pass


class EncodingError(RetrochainError):
    """Raised when a message, transaction or gateway response is malformed."""
    pass


class TransportError(RetrochainError):
    """Raised when the REST gateway cannot be reached or answers with an HTTP error."""
    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class SimulationUnavailable(RetrochainError):
    """Raised when gas simulation fails. Callers fall back to static gas limits."""
    pass


class SigningDeclined(RetrochainError):
    """Raised when the wallet rejects or times out on a signature request."""
    pass


class TxInProgressError(RetrochainError):
    """Raised when submit is called while another submission is still pending."""
    def __init__(self, message: str = "On-chain action in progress."):
        super().__init__(message)


class ApplicationRejected(RetrochainError):
    """Raised when a broadcast is answered with a non-zero result code."""
    def __init__(self, message: str, result: "BroadcastResult"):
        super().__init__(message)
        self.result = result

    @property
    def tx_hash(self) -> str:
        return self.result.tx_hash

    @property
    def code(self) -> int:
        return self.result.code

    def __str__(self):
        return f"{self.args[0]} (code={self.result.code} codespace={self.result.codespace or '-'} tx_hash={self.result.tx_hash or '-'})"


class SequenceMismatchError(RetrochainError):
    """Raised when the account sequence is still out of sync after the single retry."""
    def __init__(self, expected: int, got: int, raw_log: str = "", tx_hash: Optional[str] = None):
        super().__init__(f"account sequence mismatch: expected {expected}, got {got}")
        self.expected = expected
        self.got = got
        self.raw_log = raw_log
        self.tx_hash = tx_hash


class SessionNotFound(RetrochainError):
    """Raised when session polling is exhausted without finding a session."""
    def __init__(self, game_id: str, player: str, timeout_secs: float):
        super().__init__(f"no session for game {game_id!r} and player {player} after {timeout_secs:g}s")
        self.game_id = game_id
        self.player = player
        self.timeout_secs = timeout_secs
