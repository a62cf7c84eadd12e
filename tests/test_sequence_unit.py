from unittest.mock import AsyncMock, Mock

import pytest

from retrochain_sdk.rpc_client.codec import AccountInfo
from retrochain_sdk.rpc_client.sequence import (
    AccountSequence,
    SequenceMismatch,
    SequenceTracker,
    parse_sequence_mismatch,
)

ADDRESS = "cosmos1player"


class TestParseSequenceMismatch:
    @pytest.mark.parametrize("raw_log,expected", [
        ("account sequence mismatch, expected 12, got 11: incorrect account sequence", SequenceMismatch(12, 11)),
        ("Account Sequence Mismatch: expected 7 got 5", SequenceMismatch(7, 5)),
        ("failed to execute message; account sequence mismatch, expected 100, got 99", SequenceMismatch(100, 99)),
    ])
    def test_parses(self, raw_log, expected):
        assert parse_sequence_mismatch(raw_log) == expected

    @pytest.mark.parametrize("raw_log", [
        None,
        "",
        "insufficient funds: 10uretro is smaller than 1331uretro",
        "account sequence mismatch",
        "expected 3, got 2",
    ])
    def test_no_match(self, raw_log):
        assert parse_sequence_mismatch(raw_log) is None


def _tracker(account_number: int = 7, sequence: int = 5) -> SequenceTracker:
    gateway = Mock()
    gateway.account_info = AsyncMock(return_value=AccountInfo(account_number=account_number, sequence=sequence))
    return SequenceTracker(gateway)


class TestSequenceTracker:
    @pytest.mark.asyncio
    async def test_uses_chain_value_without_cache(self):
        tracker = _tracker(sequence=5)
        assert await tracker.get(ADDRESS) == AccountSequence(7, 5)

    @pytest.mark.asyncio
    async def test_cached_value_wins_when_chain_lags(self):
        tracker = _tracker(sequence=5)
        tracker.mark_submitted(ADDRESS, 7, 5)
        assert await tracker.get(ADDRESS) == AccountSequence(7, 6)

    @pytest.mark.asyncio
    async def test_chain_value_wins_when_ahead(self):
        tracker = _tracker(sequence=9)
        tracker.mark_submitted(ADDRESS, 7, 5)
        assert await tracker.get(ADDRESS) == AccountSequence(7, 9)

    @pytest.mark.asyncio
    async def test_cache_ignored_for_different_account_number(self):
        tracker = _tracker(account_number=8, sequence=0)
        tracker.mark_submitted(ADDRESS, 7, 5)
        assert await tracker.get(ADDRESS) == AccountSequence(8, 0)

    @pytest.mark.asyncio
    async def test_reconcile_sets_expected(self):
        tracker = _tracker(sequence=3)
        tracker.reconcile(ADDRESS, 7, 4)
        assert tracker.cached(ADDRESS) == AccountSequence(7, 4)
        assert (await tracker.get(ADDRESS)).sequence == 4

    def test_forget(self):
        tracker = _tracker()
        tracker.mark_submitted(ADDRESS, 7, 1)
        tracker.forget(ADDRESS)
        assert tracker.cached(ADDRESS) is None
