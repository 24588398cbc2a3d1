import typing
from pathlib import Path
from typing import Any, List, NamedTuple, Optional

from ape.utils import ZERO_ADDRESS
from eth_abi import encode
from eth_typing import ChecksumAddress
from eth_utils import is_address, to_checksum_address

from deployment.constants import TOKEN_DECIMALS, TRANSFER_SIGNATURE, UPGRADE_SIGNATURE
from deployment.utils import _load_yaml


class ProposalAction(NamedTuple):
    """A single call executed by the timelock once the proposal passes."""

    target: ChecksumAddress
    value: int
    signature: str
    calldata: bytes


class ProposalSet:
    """Ordered proposal actions plus the description, submitted as one proposal."""

    def __init__(self, actions: List[ProposalAction], description: str):
        self.actions = list(actions)
        self.description = description

    def __len__(self) -> int:
        return len(self.actions)

    @property
    def targets(self) -> List[ChecksumAddress]:
        return [action.target for action in self.actions]

    @property
    def values(self) -> List[int]:
        return [action.value for action in self.actions]

    @property
    def signatures(self) -> List[str]:
        return [action.signature for action in self.actions]

    @property
    def calldatas(self) -> List[bytes]:
        return [action.calldata for action in self.actions]

    def as_propose_args(self) -> typing.Tuple[list, list, list, list, str]:
        """Returns the arguments of GovernorAlpha.propose, in order."""
        return self.targets, self.values, self.signatures, self.calldatas, self.description

    def summary(self) -> str:
        lines = [f"Proposal: {self.description}", f"Actions ({len(self.actions)}):"]
        for index, action in enumerate(self.actions):
            lines.append(
                f"\t[{index}] {action.target}.{action.signature} "
                f"value={action.value} calldata=0x{action.calldata.hex()}"
            )
        return "\n".join(lines)


def upgrade_action(
    proxy_admin: ChecksumAddress, proxy: ChecksumAddress, implementation: ChecksumAddress
) -> ProposalAction:
    calldata = encode(["address", "address"], [proxy, implementation])
    return ProposalAction(proxy_admin, 0, UPGRADE_SIGNATURE, calldata)


def transfer_action(
    treasury: ChecksumAddress, token: ChecksumAddress, recipient: ChecksumAddress, amount: int
) -> ProposalAction:
    calldata = encode(["address", "address", "uint256"], [token, recipient, amount])
    return ProposalAction(treasury, 0, TRANSFER_SIGNATURE, calldata)


def build_actions(
    managed_addresses: typing.Sequence[ChecksumAddress],
    new_implementation: ChecksumAddress,
    proxy_admin: ChecksumAddress,
    treasury: ChecksumAddress,
    token: ChecksumAddress,
    recipient: ChecksumAddress,
    amount: int,
    description: str,
) -> ProposalSet:
    """
    Builds one upgrade action per managed proxy, routed through the proxy admin,
    followed by a single token transfer out of the treasury.
    """
    required = {
        "implementation": new_implementation,
        "proxy_admin": proxy_admin,
        "treasury": treasury,
    }
    for name, address in required.items():
        if not address:
            raise ProposalConfig.Invalid(f"Undefined address: {name}")

    actions = [
        upgrade_action(proxy_admin=proxy_admin, proxy=proxy, implementation=new_implementation)
        for proxy in managed_addresses
    ]
    actions.append(
        transfer_action(treasury=treasury, token=token, recipient=recipient, amount=amount)
    )
    return ProposalSet(actions=actions, description=description)


def _get_section(config: typing.Dict, name: str) -> typing.Dict:
    section = config.get(name)
    if not isinstance(section, dict):
        raise ProposalConfig.Invalid(f"'{name}' is not set in params file.")
    return section


def _checksum(value: Any, name: str) -> ChecksumAddress:
    if not value:
        raise ProposalConfig.Invalid(f"Undefined address: {name}")
    if not is_address(value):
        raise ProposalConfig.Invalid(f"Invalid address for {name}: {value}")
    address = to_checksum_address(value)
    if address == ZERO_ADDRESS:
        raise ProposalConfig.Invalid(f"Undefined address: {name} is the zero address")
    return address


class ProposalConfig:
    """Validated parameters of a single upgrade proposal."""

    class Invalid(ValueError):
        """Raised when the proposal parameters are missing or malformed"""

    class Simulation(NamedTuple):
        proposer: ChecksumAddress
        voter: ChecksumAddress
        delegate_vesting: bool

    def __init__(self, config: typing.Dict, path: Optional[Path] = None):
        self.path = path
        if not isinstance(config, dict):
            raise self.Invalid("Malformed proposal parameters YAML.")

        proposal = _get_section(config, "proposal")
        title = proposal.get("title")
        if not title:
            raise self.Invalid("proposal title is not set in params file.")
        self.description = f"#{title} \n {proposal.get('description') or ''}"

        contracts = _get_section(config, "contracts")
        self.governor = _checksum(contracts.get("governor"), "governor")
        self.token = _checksum(contracts.get("token"), "token")
        self.proxy_admin = _checksum(contracts.get("proxy_admin"), "proxy_admin")
        self.treasury = _checksum(contracts.get("treasury"), "treasury")
        vester_factory = contracts.get("vester_factory")
        self.vester_factory = None
        if vester_factory:
            self.vester_factory = _checksum(vester_factory, "vester_factory")

        upgrade = _get_section(config, "upgrade")
        self.implementation = _checksum(upgrade.get("implementation"), "implementation")
        proxies = upgrade.get("proxies") or list()
        if not isinstance(proxies, list):
            raise self.Invalid("upgrade proxies must be a list of addresses.")
        self.proxies = [
            _checksum(proxy, f"proxies[{index}]") for index, proxy in enumerate(proxies)
        ]

        transfer = _get_section(config, "transfer")
        self.recipient = _checksum(transfer.get("recipient"), "recipient")
        amount = transfer.get("amount")
        decimals = transfer.get("decimals", TOKEN_DECIMALS)
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise self.Invalid(f"transfer amount must be a positive integer, got {amount!r}")
        if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
            raise self.Invalid(f"transfer decimals must be a non-negative integer: {decimals!r}")
        self.decimals = decimals
        self.amount = amount * 10**decimals

        self.proposer = _checksum(config.get("proposer"), "proposer")

        simulation = config.get("simulation")
        if simulation is None:
            self.simulation = None
        elif isinstance(simulation, dict):
            self.simulation = self.Simulation(
                proposer=_checksum(simulation.get("proposer"), "simulation.proposer"),
                voter=_checksum(simulation.get("voter"), "simulation.voter"),
                delegate_vesting=bool(simulation.get("delegate_vesting", True)),
            )
        else:
            raise self.Invalid("'simulation' must be a mapping in params file.")

    @classmethod
    def from_yaml(cls, filepath: Path) -> "ProposalConfig":
        config = _load_yaml(filepath)
        return cls(config=config, path=filepath)

    def build_proposal(self) -> ProposalSet:
        return build_actions(
            managed_addresses=self.proxies,
            new_implementation=self.implementation,
            proxy_admin=self.proxy_admin,
            treasury=self.treasury,
            token=self.token,
            recipient=self.recipient,
            amount=self.amount,
            description=self.description,
        )
