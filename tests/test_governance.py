from unittest.mock import Mock, call

import pytest
from ape.utils import ZERO_ADDRESS

from deployment.clock import LiveClock
from deployment.constants import ProposalState
from deployment.governance import (
    ProposalDriver,
    check_upgraded_proxies,
    get_proposal_state,
    prepare_fork_votes,
)
from deployment.proposal import build_actions
from tests.conftest import (
    IMPLEMENTATION,
    ONE_TOKEN,
    PROXIES,
    PROXY_ADMIN,
    RECIPIENT,
    TOKEN,
    TREASURY,
    VOTER,
    random_address,
)


class Rejected(Exception):
    """Stands in for a revert raised by the governor."""


@pytest.fixture
def proposal_set():
    return build_actions(
        managed_addresses=PROXIES,
        new_implementation=IMPLEMENTATION,
        proxy_admin=PROXY_ADMIN,
        treasury=TREASURY,
        token=TOKEN,
        recipient=RECIPIENT,
        amount=5000 * ONE_TOKEN,
        description="#IIP-X \n test",
    )


@pytest.fixture
def driver(manager):
    return ProposalDriver(
        governor=manager.governor,
        clock=manager.clock,
        proposer=manager.proposer,
        voter=manager.voter,
        executor=manager.executor,
    )


def test_submit_returns_created_proposal_id(driver, manager, proposal_set):
    receipt = Mock()
    manager.proposer.transact.return_value = receipt
    manager.governor.ProposalCreated.from_receipt.return_value = [{"id": 42}]

    proposal_id = driver.submit(proposal_set)

    assert proposal_id == 42
    manager.proposer.transact.assert_called_once_with(
        manager.governor.propose,
        proposal_set.targets,
        proposal_set.values,
        proposal_set.signatures,
        proposal_set.calldatas,
        proposal_set.description,
    )
    manager.governor.ProposalCreated.from_receipt.assert_called_once_with(receipt)


def test_submit_without_event(driver, manager, proposal_set):
    manager.governor.ProposalCreated.from_receipt.return_value = []
    with pytest.raises(ProposalDriver.SubmissionError):
        driver.submit(proposal_set)


def test_submit_rejection_is_not_retried(driver, manager, proposal_set):
    manager.proposer.transact.side_effect = Rejected("proposer votes below proposal threshold")
    with pytest.raises(Rejected):
        driver.submit(proposal_set)
    assert manager.proposer.transact.call_count == 1


def test_lifecycle_order_on_simulated_chain(driver, manager):
    governor = manager.governor

    driver.run_lifecycle(7)

    assert manager.mock_calls == [
        call.clock.advance_blocks(2),
        call.voter.transact(governor.castVote, 7, True),
        call.clock.advance_blocks(17281),
        call.executor.transact(governor.queue, 7),
        call.clock.advance_time(172800 + 100),
        call.clock.advance_blocks(1),
        call.executor.transact(governor.execute, 7),
    ]


def test_lifecycle_uses_the_captured_proposal_id(driver, manager):
    driver.run_lifecycle(3)
    transacted_ids = [c.args[1] for c in manager.mock_calls if c[0].endswith("transact")]
    assert transacted_ids == [3, 3, 3]


@pytest.mark.parametrize("proposal_id", [1, 2, 99])
def test_lifecycle_is_noop_on_production(manager, proposal_id):
    clock = Mock(wraps=LiveClock())
    clock.simulated = False
    driver = ProposalDriver(
        governor=manager.governor,
        clock=clock,
        proposer=manager.proposer,
        voter=manager.voter,
        executor=manager.executor,
    )

    driver.run_lifecycle(proposal_id)

    assert clock.mock_calls == []
    assert manager.mock_calls == []


def test_rejected_vote_stops_lifecycle(driver, manager):
    manager.voter.transact.side_effect = Rejected("voting is closed")

    with pytest.raises(Rejected):
        driver.run_lifecycle(1)

    manager.executor.transact.assert_not_called()
    assert manager.mock_calls[-1] == call.voter.transact(manager.governor.castVote, 1, True)


def test_rejected_queue_stops_lifecycle(driver, manager):
    manager.executor.transact.side_effect = Rejected("proposal can only be queued if succeeded")

    with pytest.raises(Rejected):
        driver.run_lifecycle(1)

    assert manager.executor.transact.call_count == 1
    manager.clock.advance_time.assert_not_called()


def test_executor_defaults_to_proposer(manager):
    driver = ProposalDriver(
        governor=manager.governor,
        clock=manager.clock,
        proposer=manager.proposer,
        voter=manager.voter,
    )
    driver.run_lifecycle(1)
    manager.proposer.transact.assert_any_call(manager.governor.execute, 1)


def test_proposal_state(manager):
    manager.governor.state.return_value = 5
    assert get_proposal_state(manager.governor, 1) == ProposalState.QUEUED


def test_driver_reports_state_after_lifecycle(driver, manager):
    manager.governor.state.return_value = 7
    driver.run_lifecycle(3)

    state = driver.state(3)

    assert state == ProposalState.EXECUTED
    assert state.name == "EXECUTED"
    manager.governor.state.assert_called_once_with(3)


def test_check_upgraded_proxies(manager):
    stale_proxy = PROXIES[1]
    manager.proxy_admin.getProxyImplementation.side_effect = [IMPLEMENTATION, random_address()]

    stale = check_upgraded_proxies(manager.proxy_admin, PROXIES, IMPLEMENTATION)

    assert stale == [stale_proxy]


def test_prepare_fork_votes_without_vesting(manager):
    voter = manager.voter
    voter.address = VOTER
    manager.vester_factory.vestingContracts.return_value = ZERO_ADDRESS
    manager.token.getCurrentVotes.return_value = 10 * ONE_TOKEN

    prepare_fork_votes(token=manager.token, vester_factory=manager.vester_factory, voter=voter)

    voter.transact.assert_called_once_with(manager.token.delegate, VOTER)
    manager.token.balanceOf.assert_not_called()


def test_prepare_fork_votes_delegates_vester(manager, monkeypatch):
    vesting_address = random_address()
    vester = Mock()
    monkeypatch.setattr(
        "deployment.governance.contract_at", lambda name, address: vester
    )
    voter = manager.voter
    voter.address = VOTER
    manager.vester_factory.vestingContracts.return_value = vesting_address
    manager.token.balanceOf.return_value = 100 * ONE_TOKEN
    manager.token.getCurrentVotes.return_value = 110 * ONE_TOKEN

    prepare_fork_votes(token=manager.token, vester_factory=manager.vester_factory, voter=voter)

    assert voter.transact.call_args_list == [
        call(manager.token.delegate, VOTER),
        call(vester.setDelegate, VOTER),
    ]
    manager.token.balanceOf.assert_called_once_with(vesting_address)


def test_prepare_fork_votes_skips_vester_delegation(manager, monkeypatch):
    monkeypatch.setattr("deployment.governance.contract_at", Mock())
    voter = manager.voter
    voter.address = VOTER
    manager.vester_factory.vestingContracts.return_value = random_address()
    manager.token.balanceOf.return_value = 0
    manager.token.getCurrentVotes.return_value = 0

    prepare_fork_votes(
        token=manager.token,
        vester_factory=manager.vester_factory,
        voter=voter,
        delegate_vesting=False,
    )

    voter.transact.assert_called_once_with(manager.token.delegate, VOTER)


def test_prepare_fork_votes_reports_whole_tokens(manager, monkeypatch, capsys):
    monkeypatch.setattr("deployment.governance.contract_at", Mock())
    voter = manager.voter
    voter.address = VOTER
    manager.vester_factory.vestingContracts.return_value = random_address()
    manager.token.balanceOf.return_value = 250 * 10**6
    manager.token.getCurrentVotes.return_value = 300 * 10**6

    prepare_fork_votes(
        token=manager.token,
        vester_factory=manager.vester_factory,
        voter=voter,
        decimals=6,
    )

    output = capsys.readouterr().out
    assert f"Vested balance of {VOTER}: 250" in output
    assert f"Current votes of {VOTER}: 300" in output
