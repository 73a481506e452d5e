"""
Elevator Scheduler

Binds hall calls to elevators and keeps the calls that could not be bound
yet in a pending queue, retried whenever an elevator becomes available.
"""

from dataclasses import dataclass
from typing import List, Optional

from simulator.core.building import Building
from simulator.core.elevator import Elevator
from simulator.core.states import Direction, ElevatorState


@dataclass(frozen=True)
class PendingCall:
    """A hall call waiting for an elevator"""
    floor: int
    direction: Direction

    def __str__(self) -> str:
        return f"floor {self.floor} ({self.direction.value})"


class ElevatorScheduler:
    """
    Scheduling decisions for hall calls.

    A call is bound to the elevator returned by the building's closest
    elevator search when that elevator is idle or already heading the
    requested way. Otherwise the call waits in the pending list; no call is
    ever dropped. The pending list is retried on every IDLE transition
    (``check_pending_calls`` is called by the elevator controller) and every
    time an elevator finishes closing its doors.
    """

    def __init__(self, building: Building, name: str = "Scheduler"):
        self.building = building
        self.env = building.env
        self.name = name
        self.pending_calls: List[PendingCall] = []
        self.assigned_count = 0
        self._setup_event_listeners()

    def _log(self, message: str):
        print(f"{self.env.now:.2f} [{self.name}] {message}")

    def _setup_event_listeners(self):
        self.building.on(Building.ELEVATOR_CALLED,
                         lambda data: self.schedule_elevator(data['floor'], data['direction']))
        self.building.on(Building.ELEVATOR_FLOOR_CHANGED,
                         lambda data: self._handle_elevator_floor_change(data['elevator'], data['new_floor']))
        self.building.on(Building.ELEVATOR_DOORS_CLOSED,
                         lambda data: self.check_pending_calls())

    def get_pending_calls(self) -> List[PendingCall]:
        return list(self.pending_calls)

    def has_pending_call(self, floor: int, direction) -> bool:
        parsed = Direction.parse(direction)
        return PendingCall(floor, parsed) in self.pending_calls if parsed else False

    def _enqueue(self, call: PendingCall):
        if call not in self.pending_calls:
            self.pending_calls.append(call)

    def schedule_elevator(self, floor: int, direction) -> Optional[Elevator]:
        """
        Schedule an elevator for a floor call

        Returns:
            The elevator the call was bound to, or None if it is pending
        """
        parsed = Direction.parse(direction)
        if parsed is None or not self.building.is_valid_floor(floor):
            self._log(f"ERROR: Cannot schedule floor {floor}, direction {direction}")
            return None

        call = PendingCall(floor, parsed)
        self._log(f"Scheduling elevator for {call}")

        if call in self.pending_calls:
            self._log(f"Call for {call} already pending")
            return None

        elevator = self.building.find_closest_elevator(floor, parsed)
        if elevator is None:
            self._enqueue(call)
            self._log(f"WARNING: No available elevator, added to pending calls: {call}")
            return None

        strategy = self.building.allocation_strategy
        at_floor = elevator.current_floor == floor
        if not at_floor and not elevator.is_idle() and not strategy.is_aligned(elevator, parsed):
            self._enqueue(call)
            self._log(f"Closest elevator {elevator.id} is busy the other way, added to pending calls: {call}")
            return None

        if not self._assign(elevator, call):
            self._enqueue(call)
            self._log(f"WARNING: Elevator {elevator.id} refused {call}, added to pending calls")
            return None

        return elevator

    def _assign(self, elevator: Elevator, call: PendingCall) -> bool:
        """Bind a call to an elevator; returns False if the elevator refused it"""
        if elevator.current_floor == call.floor and not elevator.are_doors_open():
            if not elevator.open_doors() and elevator.state is not ElevatorState.DOOR_OPENING:
                return False
            self.building.get_floor(call.floor).set_button_state(call.direction, False)
            self._log(f"Elevator {elevator.id} already at floor {call.floor}, opening doors")
            self.assigned_count += 1
            return True

        if call.floor in elevator.destinations or call.floor == elevator.current_destination:
            self._log(f"Elevator {elevator.id} already heading to floor {call.floor}")
            self.assigned_count += 1
            return True

        if not elevator.add_destination(call.floor):
            return False

        if elevator.is_idle():
            elevator.process_next_destination()

        self.assigned_count += 1
        self._log(f"Scheduled elevator {elevator.id} for {call}")
        return True

    def _handle_elevator_floor_change(self, elevator: Elevator, new_floor: int):
        """Drop pending calls for a floor an elevator has just reached"""
        calls_for_floor = [call for call in self.pending_calls if call.floor == new_floor]
        if not calls_for_floor:
            return

        floor = self.building.get_floor(new_floor)
        for call in calls_for_floor:
            floor.set_button_state(call.direction, False)

        self.pending_calls = [call for call in self.pending_calls if call.floor != new_floor]
        self._log(f"Removed calls for floor {new_floor} from pending calls (reached by elevator {elevator.id})")

    def check_pending_calls(self) -> List[PendingCall]:
        """
        Try to assign every pending call to an idle elevator

        Safe to call at any time; calls that still cannot be assigned stay
        queued for the next attempt.

        Returns:
            Calls assigned during this pass
        """
        if not self.pending_calls:
            return []

        self._log(f"Checking {len(self.pending_calls)} pending calls")

        assigned = []
        for call in list(self.pending_calls):
            # Dropped meanwhile by a floor arrival
            if call not in self.pending_calls:
                continue

            elevator = self.building.find_closest_elevator(call.floor, call.direction)
            if elevator is None or not elevator.is_idle():
                continue

            if self._assign(elevator, call):
                assigned.append(call)
                self._log(f"Assigned pending call: {call} to elevator {elevator.id}")

        self.pending_calls = [call for call in self.pending_calls if call not in assigned]
        return assigned

    def reset(self):
        """Reset the scheduler"""
        self.pending_calls = []
        self.assigned_count = 0
        self._log("Elevator scheduler reset")
