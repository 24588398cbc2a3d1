import copy
import os
from unittest.mock import Mock

import pytest
from eth_utils import to_checksum_address

# Common constants
ONE_TOKEN = 10**18


# Utility functions
def random_address():
    return to_checksum_address("0x" + os.urandom(20).hex())


GOVERNOR = random_address()
TOKEN = random_address()
VESTER_FACTORY = random_address()
PROXY_ADMIN = random_address()
TREASURY = random_address()
IMPLEMENTATION = random_address()
RECIPIENT = random_address()
PROPOSER = random_address()
VOTER = random_address()
PROXIES = [random_address(), random_address()]

BASE_CONFIG = {
    "proposal": {"title": "IIP-X Upgrade", "description": "Upgrade and fund"},
    "contracts": {
        "governor": GOVERNOR,
        "token": TOKEN,
        "vester_factory": VESTER_FACTORY,
        "proxy_admin": PROXY_ADMIN,
        "treasury": TREASURY,
    },
    "upgrade": {"implementation": IMPLEMENTATION, "proxies": PROXIES},
    "transfer": {"recipient": RECIPIENT, "amount": 5000},
    "proposer": PROPOSER,
    "simulation": {"proposer": PROPOSER, "voter": VOTER},
}


# Fixtures
@pytest.fixture
def raw_config():
    return copy.deepcopy(BASE_CONFIG)


@pytest.fixture
def manager():
    """Parent mock; its mock_calls record the order of calls across all driver collaborators."""
    parent = Mock()
    parent.clock.simulated = True
    return parent
