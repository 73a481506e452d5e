"""
Nearest Car Strategy

Simple distance-based elevator allocation algorithm.
"""

from typing import List, Optional

from simulator.core.elevator import Elevator
from simulator.core.states import Direction
from ..interfaces.allocation_strategy import IAllocationStrategy


class NearestCarStrategy(IAllocationStrategy):
    """
    Nearest car allocation strategy

    Selection Logic:
    - Candidates: every elevator that is not in emergency and not stopped.
      Elevators in maintenance or overloaded are excluded as well unless
      the corresponding switch is turned off.
    - Aligned elevators (idle, without direction, or already heading the
      requested way) are preferred over misaligned ones.
    - Within the preferred group: smallest floor distance wins; equal
      distances go to the elevator on the lower floor.

    Usage:
        strategy = NearestCarStrategy()
        selected = strategy.select_elevator(3, Direction.UP, elevators)
    """

    def __init__(self, exclude_maintenance: bool = True, exclude_overloaded: bool = True):
        """
        Initialize strategy

        Args:
            exclude_maintenance: Never select elevators in maintenance
            exclude_overloaded: Never select overloaded elevators
        """
        self.exclude_maintenance = exclude_maintenance
        self.exclude_overloaded = exclude_overloaded

    def is_candidate(self, elevator: Elevator) -> bool:
        if elevator.is_in_emergency or elevator.is_stopped():
            return False
        if self.exclude_maintenance and elevator.is_in_maintenance:
            return False
        if self.exclude_overloaded and elevator.is_overloaded:
            return False
        return True

    def is_aligned(self, elevator: Elevator, direction: Direction) -> bool:
        current_direction = elevator.get_direction()
        return elevator.is_idle() or current_direction is None or current_direction == direction

    def select_elevator(self, floor: int, direction: Direction,
                        elevators: List[Elevator]) -> Optional[Elevator]:
        """
        Select the nearest available elevator

        Returns:
            Selected elevator, or None if there is no candidate
        """
        candidates = [elevator for elevator in elevators if self.is_candidate(elevator)]
        if not candidates:
            return None

        aligned = [elevator for elevator in candidates if self.is_aligned(elevator, direction)]
        pool = aligned or candidates

        # Distance first, then the lower floor; min() keeps registration order for exact ties
        best = min(pool, key=lambda elevator: (abs(elevator.current_floor - floor), elevator.current_floor))

        for elevator in candidates:
            print(f"[GCS] {elevator.id}: Floor={elevator.current_floor}, State={elevator.state.value}, "
                  f"Direction={elevator.direction.value if elevator.direction else 'none'}, "
                  f"Distance={abs(elevator.current_floor - floor)}, Aligned={elevator in aligned}")
        print(f"[GCS] Selected {best.id} for floor {floor} ({direction.value})")

        return best

    def get_strategy_name(self) -> str:
        """Return strategy name"""
        return "Nearest Car (Distance-based, direction-aligned first)"
