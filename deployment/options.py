import click

from deployment.types import ChecksumAddress, MinInt, ProposalParamsFile

params_file_option = click.option(
    "--params-file",
    "-p",
    help="Proposal parameters YAML, as a path or a name in deployment/proposal_params.",
    type=ProposalParamsFile(),
    required=True,
)

proposal_id_option = click.option(
    "--proposal-id",
    "-i",
    help="ID of the proposal",
    required=True,
    type=MinInt(1),
)

autosign_option = click.option(
    "--autosign",
    help="Sign transactions without asking for confirmation.",
    is_flag=True,
    default=False,
)

voter_option = click.option(
    "--voter",
    "-v",
    help="Override the simulated voter address; rejected on production networks.",
    type=ChecksumAddress(),
    required=False,
)
