from ape import networks

from deployment.constants import FORK_NETWORK_SUFFIX, LOCAL_BLOCKCHAIN_ENVIRONMENTS


def is_local_network() -> bool:
    """Returns True when connected to a dev chain or a fork, whose clock can be advanced."""
    network_name = networks.provider.network.name
    return network_name in LOCAL_BLOCKCHAIN_ENVIRONMENTS or network_name.endswith(
        FORK_NETWORK_SUFFIX
    )


def is_production_network() -> bool:
    return not is_local_network()
