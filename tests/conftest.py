"""
Pytest configuration for RetroChain SDK tests.
"""

import pytest
import pytest_asyncio

from retrochain_sdk.rpc_client.config import RetrochainNetworkConfig
from retrochain_sdk.rpc_client.rest import RestGateway
from retrochain_sdk.rpc_client.signer import LocalWalletSigner
from tests.mocks.gateway import BASE_URL, CHAIN_ID
from tests.utils.crypto import TEST_PRIVATE_KEY


@pytest.fixture
def network() -> RetrochainNetworkConfig:
    return RetrochainNetworkConfig(
        rest_url=BASE_URL,
        chain_id=CHAIN_ID,
        mismatch_retry_delay_secs=0,
        session_poll_timeout_secs=0.2,
        session_poll_interval_secs=0.01,
        tx_poll_timeout_secs=0.2,
        tx_poll_interval_secs=0.01,
        sign_timeout_secs=1.0,
    )


@pytest.fixture
def local_signer() -> LocalWalletSigner:
    return LocalWalletSigner(private_key=TEST_PRIVATE_KEY)


@pytest_asyncio.fixture
async def gateway():
    gw = RestGateway(BASE_URL)
    yield gw
    await gw.aclose()
