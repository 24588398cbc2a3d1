from ape.contracts import ContractContainer, ContractInstance
from eth_typing import ChecksumAddress
from ethpm_types import ContractType

from deployment.constants import ABI_DIR
from deployment.utils import _load_json

GOVERNOR_ALPHA = "GovernorAlpha"
PROXY_ADMIN = "ProxyAdmin"
IDLE = "Idle"
VESTER_FACTORY = "VesterFactory"
VESTER = "Vester"


def get_contract_container(contract: str) -> ContractContainer:
    """Returns a contract container for one of the ABIs shipped in deployment/abi."""
    abi_filepath = ABI_DIR / f"{contract}.json"
    if not abi_filepath.exists():
        raise ValueError(f"No contract found with name '{contract}'.")

    contract_type = ContractType.model_validate(
        {"contractName": contract, "abi": _load_json(abi_filepath)}
    )
    return ContractContainer(contract_type)


def contract_at(contract: str, address: ChecksumAddress) -> ContractInstance:
    return get_contract_container(contract).at(address)
