"""
Allocation Strategy Interface

Defines how elevators are selected for hall calls.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from simulator.core.elevator import Elevator
from simulator.core.states import Direction


class IAllocationStrategy(ABC):
    """
    Interface for elevator allocation strategies

    Defines how to select the best elevator for a given hall call.
    A strategy only chooses; it never changes elevator state.
    """

    @abstractmethod
    def select_elevator(self, floor: int, direction: Direction,
                        elevators: List[Elevator]) -> Optional[Elevator]:
        """
        Select the best elevator for a hall call

        Args:
            floor: Call floor
            direction: Requested direction
            elevators: All elevators of the building, in registration order

        Returns:
            Elevator: Selected elevator, or None if no elevator can take calls
        """
        pass

    @abstractmethod
    def is_aligned(self, elevator: Elevator, direction: Direction) -> bool:
        """
        Whether the elevator can pick up a call in ``direction`` without
        first finishing a trip the other way.
        """
        pass

    @abstractmethod
    def get_strategy_name(self) -> str:
        """
        Get the name of this strategy

        Returns:
            str: Strategy name (for logging and debugging)
        """
        pass
