"""
Group Control System Configuration

Selects the allocation strategy used by the building's closest-elevator
search and its candidate-exclusion switches.
"""

from dataclasses import dataclass, field
from typing import Dict, Any


@dataclass
class AllocationStrategyConfig:
    """Configuration for call allocation strategy"""
    name: str = "NearestCar"
    parameters: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.name:
            raise ValueError("allocation_strategy.name cannot be empty")


@dataclass
class GroupControlConfig:
    """
    Group Control System configuration

    Contains only control logic settings, not physical specifications.
    """
    allocation_strategy: AllocationStrategyConfig = field(default_factory=AllocationStrategyConfig)

    @classmethod
    def from_dict(cls, data: dict) -> 'GroupControlConfig':
        """Create GroupControlConfig from dictionary"""
        gc_data = data.get('group_control', data)

        alloc_data = gc_data.get('allocation_strategy', {})
        allocation_strategy = AllocationStrategyConfig(
            name=alloc_data.get('name', 'NearestCar'),
            parameters=alloc_data.get('parameters', {}) or {}
        )

        return cls(allocation_strategy=allocation_strategy)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {
            'group_control': {
                'allocation_strategy': {
                    'name': self.allocation_strategy.name,
                    'parameters': self.allocation_strategy.parameters
                }
            }
        }

    def validate(self):
        """Validate configuration consistency"""
        # Imported here: the strategy registry lives with the algorithms
        from group_control.algorithms import available_strategies

        if self.allocation_strategy.name not in available_strategies():
            raise ValueError(
                f"Unknown allocation strategy: {self.allocation_strategy.name} "
                f"(available: {', '.join(available_strategies())})"
            )

        for key, value in self.allocation_strategy.parameters.items():
            if key.startswith('exclude_') and not isinstance(value, bool):
                raise ValueError(f"allocation_strategy.parameters.{key} must be true or false")

        return True
