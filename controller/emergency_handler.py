"""
Emergency Handler

Coordinates the interrupt modes of the fleet: per-car emergency,
maintenance and overload, plus the building-wide recall and power outage.
"""

from typing import List, Optional

from simulator.core.building import Building
from simulator.core.elevator import Elevator


class EmergencyHandler:
    """
    Emergency and maintenance coordinator.

    Every command returns True/False; an unknown elevator id is reported
    and refused.
    """

    def __init__(self, building: Building, elevator_controller=None, name: str = "Emergency"):
        self.building = building
        self.elevator_controller = elevator_controller
        self.env = building.env
        self.name = name

    def _log(self, message: str):
        print(f"{self.env.now:.2f} [{self.name}] {message}")

    def _get_elevator(self, elevator_id: str) -> Optional[Elevator]:
        elevator = self.building.get_elevator(elevator_id)
        if elevator is None:
            self._log(f"ERROR: Elevator {elevator_id} not found")
        return elevator

    # --- Emergency ---

    def trigger_emergency(self, elevator_id: str) -> bool:
        """Emergency button; pressing it again cancels the emergency"""
        elevator = self._get_elevator(elevator_id)
        if elevator is None:
            return False
        if elevator.is_in_emergency:
            return self.cancel_emergency(elevator_id)

        if not elevator.set_emergency(True):
            return False
        self._log(f"WARNING: Emergency triggered for elevator {elevator_id}")
        return True

    def cancel_emergency(self, elevator_id: str) -> bool:
        elevator = self._get_elevator(elevator_id)
        if elevator is None:
            return False
        if not elevator.set_emergency(False):
            return False
        self._log(f"Emergency canceled for elevator {elevator_id}")
        return True

    # --- Maintenance ---

    def trigger_maintenance(self, elevator_id: str) -> bool:
        """Maintenance key switch; toggles like the emergency button"""
        elevator = self._get_elevator(elevator_id)
        if elevator is None:
            return False
        if elevator.is_in_maintenance:
            return self.cancel_maintenance(elevator_id)

        if not elevator.set_maintenance(True):
            return False
        self._log(f"Maintenance started for elevator {elevator_id}")
        return True

    def cancel_maintenance(self, elevator_id: str) -> bool:
        elevator = self._get_elevator(elevator_id)
        if elevator is None:
            return False
        if not elevator.set_maintenance(False):
            return False
        self._log(f"Maintenance finished for elevator {elevator_id}")
        return True

    # --- Overload ---

    def set_overload(self, elevator_id: str, overloaded: bool) -> bool:
        elevator = self._get_elevator(elevator_id)
        if elevator is None:
            return False
        if not elevator.set_overloaded(overloaded):
            return False
        self._log(f"Elevator {elevator_id} {'overloaded' if overloaded else 'load back to normal'}")
        return True

    # --- Building-wide ---

    def emergency_recall(self, floor: Optional[int] = None) -> bool:
        """
        Send every elevator to the recall floor (ground floor by default).

        All interrupt modes are cleared first, so cars in emergency or
        maintenance join the recall as well.
        """
        if floor is None:
            floor = self.building.min_floor
        if not self.building.is_valid_floor(floor):
            self._log(f"ERROR: Invalid recall floor: {floor}")
            return False

        self._log(f"WARNING: Emergency recall to floor {floor}")
        for elevator in self.building.get_elevators().values():
            elevator.clear_interrupts()
            elevator.add_destination(floor)
            if elevator.is_idle():
                elevator.process_next_destination()
        return True

    def power_outage(self) -> List[str]:
        """
        Halt every moving car where it is. Queues are kept.

        Returns:
            Ids of the cars that were stopped
        """
        stopped = [elevator.id for elevator in self.building.get_elevators().values() if elevator.force_stop()]
        self._log(f"WARNING: Power outage, stopped elevators: {stopped}")
        return stopped

    def restore_power(self) -> List[str]:
        """Release every stopped car to IDLE"""
        released = [elevator.id for elevator in self.building.get_elevators().values() if elevator.release_stop()]
        self._log(f"Power restored, released elevators: {released}")
        return released

    def reset(self) -> bool:
        """Clear every interrupt mode on every elevator"""
        for elevator in self.building.get_elevators().values():
            elevator.set_emergency(False)
            elevator.set_maintenance(False)
            elevator.set_overloaded(False)
            elevator.release_stop()
        self._log("All emergency states reset")
        return True
