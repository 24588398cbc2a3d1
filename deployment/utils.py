import json
import os
from pathlib import Path

import yaml
from ape import networks

from deployment.networks import is_local_network


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file."""
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def _load_json(filepath: Path) -> dict:
    """Loads a JSON file."""
    with open(filepath, "r") as file:
        return json.load(file)


def check_infura_plugin() -> None:
    """Checks that the ape-infura plugin is installed."""
    if is_local_network():
        return  # unnecessary for local deployment
    if networks.provider.name != "infura":
        return  # unnecessary when using a provider different than infura
    try:
        import ape_infura  # noqa: F401
        from ape_infura.provider import _ENVIRONMENT_VARIABLE_NAMES  # noqa: F401
    except ImportError:
        raise ImportError("Please install the ape-infura plugin to use this script.")
    for envvar in _ENVIRONMENT_VARIABLE_NAMES:
        api_key = os.environ.get(envvar)
        if api_key:
            break
    else:
        raise ValueError(
            f"No Infura API key found in "
            f"environment variables: {', '.join(_ENVIRONMENT_VARIABLE_NAMES)}"
        )


def check_plugins() -> None:
    print("Checking plugins...")
    check_infura_plugin()


def print_network_info(account_address: str) -> None:
    print(
        f"Account: {account_address}",
        f"Ecosystem: {networks.provider.network.ecosystem.name}",
        f"Network: {networks.provider.network.name}",
        f"Chain ID: {networks.provider.network.chain_id}",
        f"Simulated: {is_local_network()}",
        sep="\n",
    )
