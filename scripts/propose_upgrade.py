#!/usr/bin/python3

# Usage:
#  > ape run propose_upgrade --network ethereum:mainnet-fork:foundry -p iip-4 --autosign
#  > ape run propose_upgrade --network ethereum:mainnet:infura -p iip-4 --account <alias>

from pathlib import Path

import click
from ape import chain
from ape.cli import ConnectedProviderCommand, account_option, network_option

from deployment.clock import clock_for_network
from deployment.confirm import _confirm_proposal
from deployment.contracts import GOVERNOR_ALPHA, IDLE, PROXY_ADMIN, VESTER_FACTORY, contract_at
from deployment.governance import (
    ProposalDriver,
    check_upgraded_proxies,
    prepare_fork_votes,
    simulation_transactor,
)
from deployment.options import autosign_option, params_file_option, voter_option
from deployment.proposal import ProposalConfig
from deployment.transactor import Transactor
from deployment.utils import check_plugins, print_network_info


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@params_file_option
@autosign_option
@voter_option
def cli(network, account, params_file, autosign, voter):
    """Submits the upgrade proposal; on forks, also votes, queues and executes it."""

    # validate everything before touching any contract
    try:
        config = ProposalConfig.from_yaml(Path(params_file))
        proposal_set = config.build_proposal()
    except ProposalConfig.Invalid as e:
        raise click.ClickException(f"IDLE: {e}")

    check_plugins()
    operator = Transactor(account, autosign=autosign)
    print_network_info(operator.address)
    print(f"Config: {config.path}")
    clock = clock_for_network(chain)

    governor = contract_at(GOVERNOR_ALPHA, config.governor)
    token = contract_at(IDLE, config.token)

    if clock.simulated:
        if config.simulation is None:
            raise click.ClickException("'simulation' is not set in params file.")
        proposer = simulation_transactor(config.simulation.proposer, autosign=autosign)
        voter_address = voter or config.simulation.voter
        if voter_address == proposer.address:
            simulated_voter = proposer
        else:
            simulated_voter = simulation_transactor(voter_address, autosign=autosign)

        vester_factory = None
        if config.vester_factory:
            vester_factory = contract_at(VESTER_FACTORY, config.vester_factory)
        prepare_fork_votes(
            token=token,
            vester_factory=vester_factory,
            voter=simulated_voter,
            delegate_vesting=config.simulation.delegate_vesting,
            decimals=config.decimals,
        )
    else:
        if voter:
            raise click.ClickException("--voter only applies to local and fork networks.")
        if operator.address != config.proposer:
            raise click.ClickException(
                f"Account {operator.address} is not the configured proposer {config.proposer}."
            )
        proposer = simulated_voter = operator

    if not autosign:
        _confirm_proposal(proposal_set)

    driver = ProposalDriver(
        governor=governor,
        clock=clock,
        proposer=proposer,
        voter=simulated_voter,
        executor=operator,
    )
    recipient_balance = token.balanceOf(config.recipient)
    proposal_id = driver.submit(proposal_set)
    driver.run_lifecycle(proposal_id)

    state = driver.state(proposal_id)
    print(f"Proposal {proposal_id} state: {state.name}")
    if not clock.simulated:
        return

    print("Checking proxy implementations...")
    proxy_admin = contract_at(PROXY_ADMIN, config.proxy_admin)
    stale = check_upgraded_proxies(proxy_admin, config.proxies, config.implementation)
    if stale:
        raise click.ClickException(f"{len(stale)} proxies were not upgraded.")

    received = token.balanceOf(config.recipient) - recipient_balance
    if received != config.amount:
        raise click.ClickException(
            f"Recipient received {received} tokens, expected {config.amount}."
        )
    print(f"Recipient {config.recipient} received {received} tokens")


if __name__ == "__main__":
    cli()
