from typing import List, Optional

from ape import accounts, chain
from ape.contracts import ContractInstance
from ape.utils import ZERO_ADDRESS
from eth_typing import ChecksumAddress

from deployment.clock import ChainClock
from deployment.constants import (
    SIMULATION_ACCOUNT_BALANCE,
    TIMELOCK_DELAY,
    TIMELOCK_DELAY_MARGIN,
    VOTING_DELAY_BLOCKS,
    VOTING_PERIOD_BLOCKS,
    ProposalState,
)
from deployment.contracts import VESTER, contract_at
from deployment.proposal import ProposalSet
from deployment.transactor import Transactor


class ProposalDriver:
    """
    Submits a proposal to a GovernorAlpha contract and, on simulated chains,
    walks it through voting, queueing and execution.

    The governor enforces every state transition; rejections are not handled here.
    """

    class SubmissionError(Exception):
        """Raised when a propose transaction did not create a proposal"""

    def __init__(
        self,
        governor: ContractInstance,
        clock: ChainClock,
        proposer: Transactor,
        voter: Transactor,
        executor: Optional[Transactor] = None,
    ):
        self.governor = governor
        self.clock = clock
        self.proposer = proposer
        self.voter = voter
        self.executor = executor or proposer

    def submit(self, proposal_set: ProposalSet) -> int:
        receipt = self.proposer.transact(self.governor.propose, *proposal_set.as_propose_args())
        events = self.governor.ProposalCreated.from_receipt(receipt)
        if not events:
            raise self.SubmissionError("No ProposalCreated event found in propose receipt")
        proposal_id = int(events[0]["id"])
        print(f"proposed (id={proposal_id})")
        return proposal_id

    def run_lifecycle(self, proposal_id: int) -> None:
        if not self.clock.simulated:
            print(f"Live network; proposal {proposal_id} is now up to token holders.")
            return

        # voting opens once the voting delay has passed
        self.clock.advance_blocks(VOTING_DELAY_BLOCKS + 1)
        self.voter.transact(self.governor.castVote, proposal_id, True)
        print("voted")

        self.clock.advance_blocks(VOTING_PERIOD_BLOCKS + 1)
        self.executor.transact(self.governor.queue, proposal_id)
        print("queued")

        self.clock.advance_time(TIMELOCK_DELAY + TIMELOCK_DELAY_MARGIN)
        self.clock.advance_blocks(1)
        self.executor.transact(self.governor.execute, proposal_id)
        print("executed")

    def state(self, proposal_id: int) -> ProposalState:
        return get_proposal_state(self.governor, proposal_id)


def get_proposal_state(governor: ContractInstance, proposal_id: int) -> ProposalState:
    return ProposalState(governor.state(proposal_id))


def check_upgraded_proxies(
    proxy_admin: ContractInstance,
    proxies: List[ChecksumAddress],
    implementation: ChecksumAddress,
) -> List[ChecksumAddress]:
    """Returns the proxies that still point somewhere other than the new implementation."""
    stale = list()
    for proxy in proxies:
        current = proxy_admin.getProxyImplementation(proxy)
        if current != implementation:
            print(f"\t(!) {proxy} -> {current}")
            stale.append(proxy)
        else:
            print(f"\t{proxy} -> {current}")
    return stale


def simulation_transactor(address: ChecksumAddress, autosign: bool = False) -> Transactor:
    """Impersonates and funds an account on a fork so it can send proposal transactions."""
    account = accounts.test_accounts.impersonate_account(address)
    chain.set_balance(account.address, SIMULATION_ACCOUNT_BALANCE)
    return Transactor(account, autosign=autosign)


def prepare_fork_votes(
    token: ContractInstance,
    vester_factory: Optional[ContractInstance],
    voter: Transactor,
    delegate_vesting: bool = True,
    decimals: int = 18,
) -> None:
    """Self-delegates the voter's tokens, and its vested tokens, so the simulated vote counts."""
    vesting_address = ZERO_ADDRESS
    if vester_factory is not None:
        vesting_address = vester_factory.vestingContracts(voter.address)

    if vesting_address != ZERO_ADDRESS:
        vested = token.balanceOf(vesting_address) // 10**decimals
        print(f"Vested balance of {voter.address}: {vested}")

    voter.transact(token.delegate, voter.address)
    print(f"delegates {voter.address} to {voter.address}")

    if delegate_vesting and vesting_address != ZERO_ADDRESS:
        vester = contract_at(VESTER, vesting_address)
        voter.transact(vester.setDelegate, voter.address)
        print(f"delegates vester {vesting_address} to {voter.address}")

    votes = token.getCurrentVotes(voter.address) // 10**decimals
    print(f"Current votes of {voter.address}: {votes}")
