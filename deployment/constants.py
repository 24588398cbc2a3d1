from enum import IntEnum
from pathlib import Path

import deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(deployment.__file__).parent
PROPOSAL_PARAMS_DIR = DEPLOYMENT_DIR / "proposal_params"
ABI_DIR = DEPLOYMENT_DIR / "abi"

#
# Networks
#

LOCAL_BLOCKCHAIN_ENVIRONMENTS = ["local"]
FORK_NETWORK_SUFFIX = "-fork"

#
# Governance (GovernorAlpha / Timelock parameters of the deployed contracts)
#

VOTING_DELAY_BLOCKS = 1
VOTING_PERIOD_BLOCKS = 17280  # ~3 days of blocks
TIMELOCK_DELAY = 172800  # 2 days, in seconds
TIMELOCK_DELAY_MARGIN = 100

UPGRADE_SIGNATURE = "upgrade(address,address)"
TRANSFER_SIGNATURE = "transfer(address,address,uint256)"

TOKEN_DECIMALS = 18

#
# Simulation
#

SIMULATION_ACCOUNT_BALANCE = "5 ether"


#
# Proposal states as defined in the GovernorAlpha contract
#


class ProposalState(IntEnum):
    PENDING = 0
    ACTIVE = 1
    CANCELED = 2
    DEFEATED = 3
    SUCCEEDED = 4
    QUEUED = 5
    EXPIRED = 6
    EXECUTED = 7
