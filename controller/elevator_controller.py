"""
Elevator Controller

Reacts to elevator events on the building broker: arms the door timers,
keeps the floor direction indicators up to date and lets the scheduler
retry pending calls whenever a car becomes idle. Also the entry point for
hall and car panel commands.
"""

from typing import Dict, Optional, Set

from config.settings import DEFAULT_ARRIVAL_DELAY, DEFAULT_DOOR_OPEN_TIME
from group_control.scheduler import ElevatorScheduler
from simulator.core.building import Building
from simulator.core.elevator import Elevator
from simulator.core.states import ElevatorState
from simulator.infrastructure.timers import TimerRegistry


class ElevatorController:
    """
    Controller for the elevator fleet of a building.

    This is a controller, not a simulated entity: it owns no state machine
    of its own and only drives the elevators through their public commands.
    """

    # Timer classes, keyed per elevator as (elevator_id, timer_class)
    DOOR_CLOSE_TIMER = "door_close"
    DOOR_OPEN_TIMER = "door_open"

    def __init__(self, building: Building, scheduler: Optional[ElevatorScheduler] = None,
                 settings=None, timers: Optional[TimerRegistry] = None, name: str = "Controller"):
        self.building = building
        self.scheduler = scheduler
        self.settings = settings
        self.env = building.env
        self.timers = timers if timers is not None else building.timers
        self.name = name

        # Lit car panel buttons per elevator
        self.car_buttons: Dict[str, Set[int]] = {elevator_id: set() for elevator_id in building.get_elevators()}

        self._setup_event_listeners()

    def _log(self, message: str):
        print(f"{self.env.now:.2f} [{self.name}] {message}")

    def _setup_event_listeners(self):
        self.building.on(Building.ELEVATOR_STATE_CHANGED,
                         lambda data: self._handle_elevator_state_change(
                             data['elevator'], data['old_state'], data['new_state']))
        self.building.on(Building.ELEVATOR_FLOOR_CHANGED,
                         lambda data: self._handle_elevator_floor_change(
                             data['elevator'], data['old_floor'], data['new_floor']))

    def _door_open_time(self) -> float:
        return self.settings.get_door_open_time() if self.settings is not None else DEFAULT_DOOR_OPEN_TIME

    def _arrival_delay(self) -> float:
        return self.settings.get_arrival_delay() if self.settings is not None else DEFAULT_ARRIVAL_DELAY

    def _get_elevator(self, elevator_id: str) -> Optional[Elevator]:
        elevator = self.building.get_elevator(elevator_id)
        if elevator is None:
            self._log(f"ERROR: Elevator {elevator_id} not found")
        return elevator

    # --- Commands ---

    def call_elevator(self, floor: int, direction) -> bool:
        """Hall call from a floor panel"""
        return self.building.call_elevator(floor, direction)

    def select_destination(self, elevator_id: str, floor: int) -> bool:
        """
        Car panel button: add a destination and start the car if it is idle

        Returns:
            True if the destination was accepted
        """
        elevator = self._get_elevator(elevator_id)
        if elevator is None:
            return False
        if elevator.is_in_emergency or elevator.is_overloaded:
            self._log(f"WARNING: Elevator {elevator_id} cannot accept destination in {elevator.state.value} state")
            return False

        if not elevator.add_destination(floor):
            return False
        if floor != elevator.current_floor:
            self.car_buttons[elevator_id].add(floor)

        if elevator.is_idle():
            elevator.process_next_destination()
        return True

    def open_door(self, elevator_id: str) -> bool:
        """Door open button"""
        elevator = self._get_elevator(elevator_id)
        if elevator is None:
            return False
        if (elevator.is_moving() or elevator.are_doors_open() or elevator.is_in_emergency
                or elevator.state is ElevatorState.DOOR_OPENING):
            return False
        return elevator.open_doors()

    def close_door(self, elevator_id: str) -> bool:
        """Door close button; skips the remaining door hold time"""
        elevator = self._get_elevator(elevator_id)
        if elevator is None:
            return False
        if (elevator.is_moving() or not elevator.are_doors_open() or elevator.is_in_emergency
                or elevator.state is ElevatorState.DOOR_CLOSING):
            return False
        if not elevator.close_doors():
            return False
        self.timers.cancel((elevator.id, self.DOOR_CLOSE_TIMER))
        return True

    # --- Event handlers ---

    def _handle_elevator_state_change(self, elevator: Elevator, old_state, new_state):
        if new_state.is_moving:
            self._update_floor_direction_indicators(elevator)
        elif new_state is ElevatorState.IDLE:
            self._clear_floor_direction_indicators(elevator)
            if self.scheduler is not None:
                self.scheduler.check_pending_calls()
        elif new_state is ElevatorState.LOADING:
            self._set_door_close_timer(elevator)

    def _handle_elevator_floor_change(self, elevator: Elevator, old_floor: int, new_floor: int):
        self.car_buttons[elevator.id].discard(new_floor)

        floor = self.building.get_floor(new_floor)
        if floor is not None:
            floor.clear_buttons()

        if elevator.current_destination == new_floor:
            self.timers.schedule((elevator.id, self.DOOR_OPEN_TIMER), self._arrival_delay(), elevator.open_doors)

        self._update_floor_direction_indicators(elevator)

    def _update_floor_direction_indicators(self, elevator: Elevator):
        self._clear_floor_direction_indicators(elevator)
        direction = elevator.get_direction()
        if direction is not None:
            floor = self.building.get_floor(elevator.get_current_floor())
            if floor is not None:
                floor.set_elevator_indicator(elevator.id, direction)

    def _clear_floor_direction_indicators(self, elevator: Elevator):
        for floor in self.building.get_floors():
            floor.set_elevator_indicator(elevator.id, None)

    def _set_door_close_timer(self, elevator: Elevator):
        self.timers.schedule((elevator.id, self.DOOR_CLOSE_TIMER), self._door_open_time(), elevator.close_doors)

    def get_active_car_buttons(self, elevator_id: str) -> Set[int]:
        return set(self.car_buttons.get(elevator_id, ()))

    def reset(self):
        """Cancel every outstanding timer and turn off the car panels"""
        cancelled = self.timers.cancel_all()
        for buttons in self.car_buttons.values():
            buttons.clear()
        self._log(f"Elevator controller reset ({cancelled} timers cancelled)")
