from abc import ABC, abstractmethod

from deployment.networks import is_production_network


class ChainClock(ABC):
    """Moves the chain through governance delays; only dev chains and forks can do so."""

    simulated: bool = False

    @abstractmethod
    def advance_blocks(self, num_blocks: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def advance_time(self, seconds: int) -> None:
        raise NotImplementedError


class LiveClock(ChainClock):
    """Production chains move on their own."""

    simulated = False

    def advance_blocks(self, num_blocks: int) -> None:
        return

    def advance_time(self, seconds: int) -> None:
        return


class SimulatedClock(ChainClock):
    simulated = True

    def __init__(self, chain):
        self.chain = chain

    def advance_blocks(self, num_blocks: int) -> None:
        if num_blocks <= 0:
            return
        self.chain.mine(num_blocks=num_blocks)

    def advance_time(self, seconds: int) -> None:
        """Mines a single block timestamped `seconds` after the latest block."""
        timestamp = self.chain.blocks.head.timestamp + seconds
        self.chain.pending_timestamp = timestamp
        # some providers (e.g. eth-tester) time travel by mining the block themselves
        if self.chain.blocks.head.timestamp < timestamp:
            self.chain.mine(num_blocks=1)


def clock_for_network(chain) -> ChainClock:
    if is_production_network():
        return LiveClock()
    return SimulatedClock(chain)
