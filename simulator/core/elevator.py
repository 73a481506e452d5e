import simpy
from typing import List, Optional

from config.settings import DEFAULT_DOOR_ANIMATION_TIME
from .entity import Entity
from .states import Direction, ElevatorState, OperationalMode
from ..infrastructure.timers import TimerRegistry


class Elevator(Entity):
    """
    Elevator car: motion/door state machine, destination queue and
    operational mode.

    Floor changes are modelled as a direct jump to the target floor; a trip
    through several destinations is driven one hop at a time by the
    destination queue (``process_next_destination``). Door animations are
    delayed transitions on the shared timer registry.

    All commands return True/False instead of raising: a refused command
    leaves the elevator untouched.
    """

    # Topics published on the elevator's own broker
    STATE_CHANGED = "state_changed"
    FLOOR_CHANGED = "floor_changed"
    DOORS_OPENED = "doors_opened"
    DOORS_CLOSED = "doors_closed"
    DESTINATION_ADDED = "destination_added"
    DESTINATIONS_CLEARED = "destinations_cleared"
    MODE_CHANGED = "mode_changed"
    RESET = "reset"

    # Timer class for door opening / closing animations
    DOOR_ANIMATION_TIMER = "door_animation"

    def __init__(self, env: simpy.Environment, elevator_id: str, current_floor: int = 0,
                 min_floor: int = 0, max_floor: int = 6, settings=None, timers: TimerRegistry = None):
        """
        Args:
            env: SimPy environment
            elevator_id: Unique elevator id (e.g. 'A')
            current_floor: Starting floor
            min_floor: Lowest served floor
            max_floor: Highest served floor
            settings: Settings object polled for door timing (optional)
            timers: Shared timer registry (a private one is created if omitted)
        """
        super().__init__(env, f"Elevator {elevator_id}", initial_state=ElevatorState.IDLE)
        if min_floor > max_floor:
            raise ValueError(f"min_floor ({min_floor}) must not exceed max_floor ({max_floor})")
        if not (min_floor <= current_floor <= max_floor):
            raise ValueError(f"Elevator {elevator_id}: start floor {current_floor} outside {min_floor}-{max_floor}")

        self.id = elevator_id
        self.min_floor = min_floor
        self.max_floor = max_floor
        self.current_floor = current_floor
        self.direction: Optional[Direction] = None
        self.doors_open = False
        self.destinations: List[int] = []
        self.current_destination: Optional[int] = None  # Floor of the trip in progress
        self.mode = OperationalMode.NORMAL
        self.settings = settings
        self.timers = timers if timers is not None else TimerRegistry(env, name=f"{self.name} timers")

        # Debug information
        self.move_count = 0
        self.state_history = []  # (time, old_state, new_state)

    # --- Getter methods ---

    @property
    def next_destination(self) -> Optional[int]:
        return self.destinations[0] if self.destinations else None

    @property
    def is_in_emergency(self) -> bool:
        return self.mode is OperationalMode.EMERGENCY

    @property
    def is_in_maintenance(self) -> bool:
        return self.mode is OperationalMode.MAINTENANCE

    @property
    def is_overloaded(self) -> bool:
        return self.mode is OperationalMode.OVERLOADED

    def get_current_floor(self) -> int:
        return self.current_floor

    def get_direction(self) -> Optional[Direction]:
        return self.direction

    def is_idle(self) -> bool:
        return self.state is ElevatorState.IDLE

    def is_moving(self) -> bool:
        return self.state.is_moving

    def is_stopped(self) -> bool:
        return self.state is ElevatorState.STOPPED

    def are_doors_open(self) -> bool:
        return self.doors_open

    def serves_floor(self, floor: int) -> bool:
        return isinstance(floor, int) and self.min_floor <= floor <= self.max_floor

    def _door_animation_time(self) -> float:
        if self.settings is not None:
            return self.settings.get_door_animation_time()
        return DEFAULT_DOOR_ANIMATION_TIME

    def _animation_key(self):
        return (self.id, self.DOOR_ANIMATION_TIMER)

    def _publish(self, topic: str, **data):
        self.events.publish(topic, {'elevator': self, **data})

    # --- State handling ---

    def _on_state_changed(self, old_state, new_state):
        super()._on_state_changed(old_state, new_state)
        self.state_history.append((self.env.now, old_state, new_state))

        if new_state is ElevatorState.IDLE:
            self.direction = None
            self.current_destination = None
        elif new_state is ElevatorState.MOVING_UP:
            self.direction = Direction.UP
            self.move_count += 1
        elif new_state is ElevatorState.MOVING_DOWN:
            self.direction = Direction.DOWN
            self.move_count += 1

        self._publish(self.STATE_CHANGED, old_state=old_state, new_state=new_state, floor=self.current_floor)

    def _set_mode(self, new_mode: OperationalMode):
        if self.mode is new_mode:
            return
        old_mode = self.mode
        self.mode = new_mode
        self.log(f"Mode: {old_mode.value} -> {new_mode.value}")
        self._publish(self.MODE_CHANGED, old_mode=old_mode, new_mode=new_mode)

    # --- Destination queue ---

    def add_destination(self, floor: int) -> bool:
        """
        Add a destination floor

        A destination equal to the current floor opens the doors instead
        of being queued.

        Returns:
            True if the floor was accepted (or is being served right here)
        """
        if not self.serves_floor(floor):
            self.log(f"Invalid destination floor: {floor}")
            return False
        if floor in self.destinations:
            self.log(f"Floor {floor} already in destinations")
            return False
        if not self.mode.accepts_destinations:
            self.log(f"WARNING: cannot accept new destinations in {self.state.value} state")
            return False

        if floor == self.current_floor:
            if self.doors_open or self.state is ElevatorState.DOOR_OPENING:
                self.log(f"Already serving floor {floor}")
                return True
            return self.open_doors()

        self.destinations.append(floor)
        self._sort_destinations(hint=floor)

        self.log(f"Floor {floor} added to destinations {self.destinations}")
        self._publish(self.DESTINATION_ADDED, floor=floor)
        return True

    def _sort_destinations(self, hint: Optional[int] = None):
        """
        Order destinations for the current direction of travel.

        Going up: floors above ascending, then floors below ascending.
        Going down: floors below descending, then floors above descending.
        The elevator does not reverse mid-run; the second group is simply
        visited in the same order afterwards. A directionless car takes its
        direction from ``hint`` (the newly added floor) or the queue head.
        """
        floor = self.current_floor
        if self.direction is None and self.destinations:
            reference = hint if hint is not None else self.destinations[0]
            self.direction = Direction.between(floor, reference)

        above = sorted(f for f in self.destinations if f > floor)
        below = sorted(f for f in self.destinations if f < floor)

        if self.direction is Direction.UP:
            self.destinations = above + below
        elif self.direction is Direction.DOWN:
            self.destinations = below[::-1] + above[::-1]
        else:
            self.destinations = [f for f in self.destinations if f != floor]

    def clear_destinations(self):
        """Clear all destinations"""
        self.destinations = []
        self.direction = None
        self.log("Destinations cleared")
        self._publish(self.DESTINATIONS_CLEARED)

    def process_next_destination(self) -> bool:
        """
        Start the trip to the head of the destination queue.

        With an empty queue the elevator goes IDLE.

        Returns:
            True if a trip was started
        """
        if not self.destinations:
            self.current_destination = None
            self.set_state(ElevatorState.IDLE)
            return False

        target = self.destinations.pop(0)
        self.current_destination = target
        if not self.move_to_floor(target):
            # Refused: put the floor back and leave the state untouched
            self.destinations.insert(0, target)
            self.current_destination = None
            return False
        return True

    # --- Motion ---

    def move_to_floor(self, floor: int) -> bool:
        """
        Move directly to a floor

        Returns:
            True if the elevator is now at ``floor``
        """
        if not self.serves_floor(floor):
            self.log(f"Invalid floor: {floor}")
            return False
        if floor == self.current_floor:
            self.log(f"Already at floor {floor}")
            return True
        if self.mode is not OperationalMode.NORMAL or self.state is ElevatorState.STOPPED:
            self.log(f"WARNING: cannot move in {self.state.value} state")
            return False
        if self.doors_open or self.state in (ElevatorState.DOOR_OPENING, ElevatorState.LOADING):
            self.log(f"WARNING: cannot move while doors are open ({self.state.value})")
            return False

        direction = Direction.between(self.current_floor, floor)
        self.set_state(ElevatorState.moving(direction))
        self.direction = direction

        old_floor = self.current_floor
        self.current_floor = floor
        self._sort_destinations()

        self.log(f"Moving from floor {old_floor} to {floor}")
        self._publish(self.FLOOR_CHANGED, old_floor=old_floor, new_floor=floor, direction=direction)
        return True

    # --- Doors ---

    def open_doors(self) -> bool:
        """
        Open elevator doors

        Doors reach LOADING after the door animation time.
        """
        if self.doors_open or self.state is ElevatorState.DOOR_OPENING:
            return False
        if self.mode is not OperationalMode.NORMAL or self.state is ElevatorState.STOPPED:
            self.log(f"WARNING: cannot open doors in {self.state.value} state")
            return False

        self.set_state(ElevatorState.DOOR_OPENING)
        self.timers.schedule(self._animation_key(), self._door_animation_time(), self._finish_opening)
        return True

    def _finish_opening(self):
        # Interrupted while opening (emergency, maintenance, reset): nothing to finish
        if self.state is not ElevatorState.DOOR_OPENING or self.mode is not OperationalMode.NORMAL:
            self.log(f"Door opening abandoned in {self.state.value} state")
            return

        self.doors_open = True
        self.current_destination = None
        self.set_state(ElevatorState.LOADING)
        self.log(f"Doors opened at floor {self.current_floor}")
        self._publish(self.DOORS_OPENED, floor=self.current_floor)

    def close_doors(self) -> bool:
        """
        Close elevator doors

        When closed the elevator continues with its next destination or
        goes IDLE.
        """
        if not self.doors_open or self.state is ElevatorState.DOOR_CLOSING:
            return False
        if self.mode is not OperationalMode.NORMAL:
            self.log(f"WARNING: cannot close doors in {self.state.value} state")
            return False

        self.set_state(ElevatorState.DOOR_CLOSING)
        self.timers.schedule(self._animation_key(), self._door_animation_time(), self._finish_closing)
        return True

    def _finish_closing(self):
        if self.state is not ElevatorState.DOOR_CLOSING or self.mode is not OperationalMode.NORMAL:
            self.log(f"Door closing abandoned in {self.state.value} state")
            return

        floor = self.current_floor
        self.doors_open = False
        self.log(f"Doors closed at floor {floor}")

        if self.destinations:
            self.process_next_destination()
        else:
            self.set_state(ElevatorState.IDLE)

        self._publish(self.DOORS_CLOSED, floor=floor)

    # --- Interrupt modes ---

    def _take_out_of_service(self, mode: OperationalMode, state: ElevatorState):
        self.clear_destinations()
        self.current_destination = None
        self.doors_open = False
        self._set_mode(mode)
        self.set_state(state)

    def set_emergency(self, active: bool) -> bool:
        """
        Enter or leave emergency state

        Entering clears all destinations; leaving returns the car to IDLE
        without restoring them.
        """
        if active:
            if self.mode.is_out_of_service:
                self.log(f"WARNING: cannot enter emergency from {self.state.value} state")
                return False
            self._take_out_of_service(OperationalMode.EMERGENCY, ElevatorState.EMERGENCY)
        else:
            if self.mode is not OperationalMode.EMERGENCY:
                return False
            self._set_mode(OperationalMode.NORMAL)
            self.set_state(ElevatorState.IDLE)
        return True

    def set_maintenance(self, active: bool) -> bool:
        """Enter or leave maintenance state (same rules as emergency)"""
        if active:
            if self.mode.is_out_of_service:
                self.log(f"WARNING: cannot enter maintenance from {self.state.value} state")
                return False
            self._take_out_of_service(OperationalMode.MAINTENANCE, ElevatorState.MAINTENANCE)
        else:
            if self.mode is not OperationalMode.MAINTENANCE:
                return False
            self._set_mode(OperationalMode.NORMAL)
            self.set_state(ElevatorState.IDLE)
        return True

    def set_overloaded(self, active: bool) -> bool:
        """
        Set or clear the overload condition

        Only a stationary car with open doors can become overloaded. The
        destination queue is kept, but no new destinations are accepted and
        the doors stay open until the overload is cleared.
        """
        if active:
            if self.mode is not OperationalMode.NORMAL or self.state is not ElevatorState.LOADING:
                self.log(f"WARNING: cannot set overload in {self.state.value} state")
                return False
            self._set_mode(OperationalMode.OVERLOADED)
            self.set_state(ElevatorState.OVERLOADED)
        else:
            if self.mode is not OperationalMode.OVERLOADED:
                return False
            self._set_mode(OperationalMode.NORMAL)
            self.set_state(ElevatorState.LOADING)
        return True

    def force_stop(self) -> bool:
        """
        Halt a moving car (power outage). The destination queue is kept and
        nothing resumes until ``release_stop`` is called.
        """
        if not self.state.is_moving:
            return False
        self.set_state(ElevatorState.STOPPED)
        return True

    def release_stop(self) -> bool:
        if self.state is not ElevatorState.STOPPED:
            return False
        self.set_state(ElevatorState.IDLE)
        return True

    def clear_interrupts(self):
        """Force NORMAL mode and drop every destination"""
        self.clear_destinations()
        self._set_mode(OperationalMode.NORMAL)
        if self.state in (ElevatorState.EMERGENCY, ElevatorState.MAINTENANCE, ElevatorState.STOPPED):
            self.set_state(ElevatorState.IDLE)
        elif self.state is ElevatorState.OVERLOADED:
            self.set_state(ElevatorState.LOADING)

    # --- Lifecycle ---

    def reset(self, initial_floor: Optional[int] = None) -> bool:
        """
        Reset elevator to initial state

        Args:
            initial_floor: Floor to place the car on (defaults to the current floor)
        """
        if initial_floor is not None and not self.serves_floor(initial_floor):
            self.log(f"Invalid reset floor: {initial_floor}")
            return False

        self.timers.cancel(self._animation_key())
        self.clear_destinations()
        self.current_destination = None
        self.state = ElevatorState.IDLE
        self.direction = None
        self.doors_open = False
        self.mode = OperationalMode.NORMAL

        if initial_floor is not None:
            self.current_floor = initial_floor

        self.log(f"Reset to floor {self.current_floor}")
        self._publish(self.RESET, floor=self.current_floor)
        return True

    def get_status(self) -> dict:
        """Snapshot of the elevator for reporting"""
        return {
            "id": self.id,
            "floor": self.current_floor,
            "state": self.state.value,
            "mode": self.mode.value,
            "direction": self.direction.value if self.direction else None,
            "doors_open": self.doors_open,
            "destinations": list(self.destinations),
            "moves": self.move_count,
        }

    def __repr__(self) -> str:
        return f"Elevator({self.id!r}, floor={self.current_floor}, state={self.state.value})"
