"""
Shared test fixtures
"""

import copy
import pytest
from loguru import logger

from utils.config_loader import DEFAULT_CONFIG


@pytest.fixture
def config():
    """Default deployment configuration"""
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def log_messages():
    """Capture loguru messages"""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record['message']), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's .env out of the tests"""
    for name in (
        'DEPLOYER_PRIVATE_KEYS', 'DEPLOYER_MNEMONIC', 'RPC_URL', 'CONTRACT_NAME',
        'ARTIFACTS_DIR', 'CHAIN_ID', 'CONFIRMATION_TIMEOUT', 'CONFIRMATIONS', 'LOG_LEVEL'
    ):
        monkeypatch.delenv(name, raising=False)
