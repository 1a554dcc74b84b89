"""
Shared fixtures for deployer tests
"""

import pytest
from loguru import logger

from deployer.config import NetworkConfig

from .mocks import make_contract, make_factory_loader, make_provider


@pytest.fixture
def log_messages():
    """Capture loguru messages"""
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record['message']), level='DEBUG')
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def network():
    """Core Testnet 2 config"""
    return NetworkConfig(
        name='core_testnet2',
        display_name='Core Testnet 2',
        rpc_url='https://rpc.test2.btcs.network',
        chain_id=1114,
        currency_symbol='CORE',
        explorer_url='https://scan.test2.btcs.network'
    )


@pytest.fixture
def provider():
    return make_provider()


@pytest.fixture
def contract():
    return make_contract()


@pytest.fixture
def factory_loader(contract):
    return make_factory_loader(contract)
