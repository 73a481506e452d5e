"""Allocation algorithms and the registry used by the configuration layer"""

from typing import Dict, List, Type

from ..interfaces.allocation_strategy import IAllocationStrategy
from .nearest_car import NearestCarStrategy


STRATEGIES: Dict[str, Type[IAllocationStrategy]] = {
    'NearestCar': NearestCarStrategy,
}


def available_strategies() -> List[str]:
    return sorted(STRATEGIES)


def create_allocation_strategy(config) -> IAllocationStrategy:
    """
    Build the strategy named in an AllocationStrategyConfig

    Raises:
        ValueError: If the strategy is unknown or rejects its parameters
    """
    strategy_class = STRATEGIES.get(config.name)
    if strategy_class is None:
        raise ValueError(f"Unknown allocation strategy: {config.name}")
    try:
        return strategy_class(**config.parameters)
    except TypeError as e:
        raise ValueError(f"Invalid parameters for {config.name}: {e}") from e


__all__ = [
    'NearestCarStrategy',
    'STRATEGIES',
    'available_strategies',
    'create_allocation_strategy',
]
