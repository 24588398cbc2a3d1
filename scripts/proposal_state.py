from pathlib import Path

import click
from ape.cli import ConnectedProviderCommand, network_option

from deployment.constants import ProposalState
from deployment.contracts import GOVERNOR_ALPHA, contract_at
from deployment.governance import get_proposal_state
from deployment.options import params_file_option, proposal_id_option
from deployment.proposal import ProposalConfig

# a proposal in one of these states can no longer change
END_STATES = [
    ProposalState.CANCELED,
    ProposalState.DEFEATED,
    ProposalState.EXPIRED,
    ProposalState.EXECUTED,
]


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@params_file_option
@proposal_id_option
def cli(network, params_file, proposal_id):
    try:
        config = ProposalConfig.from_yaml(Path(params_file))
    except ProposalConfig.Invalid as e:
        raise click.ClickException(str(e))

    governor = contract_at(GOVERNOR_ALPHA, config.governor)
    proposal_count = governor.proposalCount()
    if proposal_id > proposal_count:
        raise click.ClickException(
            f"Proposal {proposal_id} does not exist; governor has {proposal_count} proposal(s)."
        )

    state = get_proposal_state(governor, proposal_id)
    print()
    print("Proposal State")
    print("==============")
    print(f"\tGovernor         : {governor.address}")
    print(f"\tProposal         : {proposal_id}")
    print(f"\tState            : {state.name}")
    print(f"\tFinal            : {state in END_STATES}")


if __name__ == "__main__":
    cli()
