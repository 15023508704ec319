"""
Shared fixtures
"""

import pytest
from loguru import logger

# Hardhat / anvil development account #0
DEV_PRIVATE_KEY = '0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80'
DEV_ADDRESS = '0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266'

DEPLOYER = '0x' + 'ab' * 20
CONTRACT = '0x' + 'cd' * 20
RECIPIENT = '0x' + '12' * 20


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test"""
    messages = []
    handler_id = logger.add(lambda message: messages.append(message.record['message']), level="DEBUG")
    yield messages
    logger.remove(handler_id)
