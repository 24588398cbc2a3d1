import click
from eth_utils import to_checksum_address

from deployment.constants import PROPOSAL_PARAMS_DIR


class MinInt(click.ParamType):
    name = "minint"

    def __init__(self, min_value):
        self.min_value = min_value

    def convert(self, value, param, ctx):
        try:
            ivalue = int(value)
        except ValueError:
            self.fail(f"{value} is not a valid integer", param, ctx)
        if ivalue < self.min_value:
            self.fail(
                f"{value} is less than the minimum allowed value of {self.min_value}", param, ctx
            )
        return ivalue


class ChecksumAddress(click.ParamType):
    name = "checksum_address"

    def convert(self, value, param, ctx):
        try:
            value = to_checksum_address(value=value)
        except ValueError:
            self.fail("Invalid ethereum address", param, ctx)
        else:
            return value


class ProposalParamsFile(click.Path):
    """Accepts a path, or the bare name of a file in deployment/proposal_params."""

    name = "proposal_params_file"

    def __init__(self):
        super().__init__(exists=True, dir_okay=False, path_type=None)

    def convert(self, value, param, ctx):
        candidate = PROPOSAL_PARAMS_DIR / value
        if not candidate.suffix:
            candidate = candidate.with_suffix(".yml")
        if candidate.exists():
            value = str(candidate)
        return super().convert(value, param, ctx)
