"""
Building - owns floors and elevators, accepts hall calls

This module provides the Building class which manages:
- The fixed set of floors (0 .. num_floors-1) and elevators (keyed by id)
- Hall call intake (``call_elevator``)
- The closest-elevator search, delegated to an allocation strategy
- Re-broadcasting of every elevator's events on the building broker
"""

import simpy
from typing import Dict, List, Optional, Sequence

from config.simulation import spread_floors
from .elevator import Elevator
from .floor import Floor
from .states import Direction
from ..infrastructure.message_broker import MessageBroker
from ..infrastructure.timers import TimerRegistry


class Building:
    """
    Represents a building with its floors and elevator fleet.
    """

    # Topics published on the building broker
    ELEVATOR_STATE_CHANGED = "elevator_state_changed"
    ELEVATOR_FLOOR_CHANGED = "elevator_floor_changed"
    ELEVATOR_DOORS_OPENED = "elevator_doors_opened"
    ELEVATOR_DOORS_CLOSED = "elevator_doors_closed"
    ELEVATOR_CALLED = "elevator_called"
    BUILDING_RESET = "building_reset"

    # Elevator topic -> building topic
    _RELAYED_TOPICS = {
        Elevator.STATE_CHANGED: ELEVATOR_STATE_CHANGED,
        Elevator.FLOOR_CHANGED: ELEVATOR_FLOOR_CHANGED,
        Elevator.DOORS_OPENED: ELEVATOR_DOORS_OPENED,
        Elevator.DOORS_CLOSED: ELEVATOR_DOORS_CLOSED,
    }

    def __init__(self, env: simpy.Environment, num_floors: int = 7,
                 elevator_ids: Sequence[str] = ('A', 'B'), start_floors: Optional[Sequence[int]] = None,
                 settings=None, timers: Optional[TimerRegistry] = None, allocation_strategy=None):
        """
        Initialize building with its floors and elevators.

        Args:
            env: SimPy environment
            num_floors: Number of floors (floors are numbered from 0)
            elevator_ids: Elevator ids in registration order
            start_floors: Start floor per elevator (default: first at ground, last at top)
            settings: Settings object shared with the elevators
            timers: Timer registry shared with the elevators
            allocation_strategy: IAllocationStrategy used by find_closest_elevator
        """
        if num_floors < 2:
            raise ValueError("Building must have at least two floors")
        if not elevator_ids:
            raise ValueError("Building must have at least one elevator")
        if len(set(elevator_ids)) != len(elevator_ids):
            raise ValueError("Elevator ids must be unique")
        if start_floors is None:
            start_floors = spread_floors(len(elevator_ids), num_floors)
        if len(start_floors) != len(elevator_ids):
            raise ValueError("start_floors must give one floor per elevator")

        self.env = env
        self.num_floors = num_floors
        self.min_floor = 0
        self.max_floor = num_floors - 1
        self.settings = settings
        self.timers = timers if timers is not None else TimerRegistry(env, name="Building timers")
        self.events = MessageBroker(env, name="Building", broadcast=True)

        if allocation_strategy is None:
            # Default strategy; imported here to keep the core free of group control at import time
            from group_control.algorithms.nearest_car import NearestCarStrategy
            allocation_strategy = NearestCarStrategy()
        self.allocation_strategy = allocation_strategy

        self.floors: List[Floor] = [
            Floor(env, number, self.min_floor, self.max_floor) for number in range(num_floors)
        ]

        self.start_floors: Dict[str, int] = {}
        self.elevators: Dict[str, Elevator] = {}
        for elevator_id, start_floor in zip(elevator_ids, start_floors):
            self.elevators[elevator_id] = Elevator(
                env, elevator_id, current_floor=start_floor,
                min_floor=self.min_floor, max_floor=self.max_floor,
                settings=settings, timers=self.timers
            )
            self.start_floors[elevator_id] = start_floor

        self._setup_elevator_events()

        self._log(f"Building initialized with {self.num_floors} floors and {len(self.elevators)} elevators")

    @classmethod
    def from_config(cls, env: simpy.Environment, sim_config, settings=None,
                    timers: Optional[TimerRegistry] = None, allocation_strategy=None) -> 'Building':
        num_floors = sim_config.building.num_floors
        return cls(
            env, num_floors=num_floors,
            elevator_ids=sim_config.elevator.elevator_ids(),
            start_floors=sim_config.elevator.initial_floors(num_floors),
            settings=settings, timers=timers, allocation_strategy=allocation_strategy
        )

    def _log(self, message: str):
        print(f"{self.env.now:.2f} [Building] {message}")

    def _setup_elevator_events(self):
        """Re-broadcast elevator events on the building broker"""
        for elevator in self.elevators.values():
            for elevator_topic, building_topic in self._RELAYED_TOPICS.items():
                elevator.on(elevator_topic, self._relay(building_topic))

    def _relay(self, building_topic: str):
        def handler(message: dict):
            self.events.publish(building_topic, message)
        return handler

    def on(self, topic: str, callback):
        """Register an event handler on the building broker"""
        self.events.subscribe(topic, callback)

    # Getter methods
    def get_floors(self) -> List[Floor]:
        return self.floors

    def get_floor(self, number: int) -> Optional[Floor]:
        if isinstance(number, int) and self.min_floor <= number <= self.max_floor:
            return self.floors[number]
        return None

    def get_elevators(self) -> Dict[str, Elevator]:
        return self.elevators

    def get_elevator(self, elevator_id: str) -> Optional[Elevator]:
        return self.elevators.get(elevator_id)

    def is_valid_floor(self, number: int) -> bool:
        return self.get_floor(number) is not None

    def call_elevator(self, floor_number: int, direction) -> bool:
        """
        Register a hall call.

        The building only lights the button and announces the call; choosing
        an elevator is left to whoever listens for ``elevator_called``.

        Args:
            floor_number: Floor the call was made on
            direction: 'up' or 'down'

        Returns:
            True if the call was accepted (or is already being served)
        """
        floor = self.get_floor(floor_number)
        if floor is None:
            self._log(f"ERROR: Invalid floor number: {floor_number}")
            return False

        parsed = Direction.parse(direction)
        if parsed is None:
            self._log(f"ERROR: Invalid direction: {direction}")
            return False
        if not floor.has_button(parsed):
            self._log(f"ERROR: Floor {floor_number} has no {parsed.value} button")
            return False

        elevators_at_floor = [
            elevator for elevator in self.elevators.values()
            if elevator.current_floor == floor_number and elevator.doors_open
        ]
        if elevators_at_floor:
            self._log(f"Elevator {elevators_at_floor[0].id} already at floor {floor_number} with doors open")
            return True

        floor.set_button_state(parsed, True)
        self.events.publish(self.ELEVATOR_CALLED, {'floor': floor_number, 'direction': parsed})
        return True

    def find_closest_elevator(self, floor_number: int, direction) -> Optional[Elevator]:
        """
        Find the best elevator to answer a call

        Returns:
            Elevator, or None if no elevator can take calls
        """
        parsed = Direction.parse(direction)
        if parsed is None or not self.is_valid_floor(floor_number):
            return None
        elevator = self.allocation_strategy.select_elevator(floor_number, parsed, list(self.elevators.values()))
        if elevator is None:
            self._log("WARNING: No available elevators")
        return elevator

    def reset(self):
        """Reset the building state"""
        for floor in self.floors:
            floor.reset()
        for elevator_id, elevator in self.elevators.items():
            elevator.reset(self.start_floors[elevator_id])
        self._log("Building reset to initial state")
        self.events.publish(self.BUILDING_RESET, {})

    def __repr__(self) -> str:
        return f"Building(floors={self.num_floors}, elevators={list(self.elevators)})"
