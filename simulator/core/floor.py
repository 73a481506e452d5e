import simpy
from typing import Dict, Optional

from .states import Direction


class Floor:
    """
    Landing of a building: hall call buttons and per-elevator direction
    indicators (with state management functionality)
    """
    def __init__(self, env: simpy.Environment, number: int, min_floor: int, max_floor: int,
                 has_up_button: Optional[bool] = None, has_down_button: Optional[bool] = None):
        """
        Args:
            env (simpy.Environment): SimPy environment (used for log timestamps)
            number (int): Floor number
            min_floor (int): Lowest floor of the building
            max_floor (int): Highest floor of the building
            has_up_button (bool): Override; by default every floor but the top has one
            has_down_button (bool): Override; by default every floor but the ground has one
        """
        self.env = env
        self.number = number
        self.has_up_button = has_up_button if has_up_button is not None else number < max_floor
        self.has_down_button = has_down_button if has_down_button is not None else number > min_floor
        self.up_button_pressed = False
        self.down_button_pressed = False
        self.elevator_indicators: Dict[str, Optional[Direction]] = {}

    def _log(self, message: str):
        print(f"{self.env.now:.2f} [Floor {self.number}] {message}")

    def has_button(self, direction: Direction) -> bool:
        return self.has_up_button if direction is Direction.UP else self.has_down_button

    def is_button_pressed(self, direction: Direction) -> bool:
        return self.up_button_pressed if direction is Direction.UP else self.down_button_pressed

    def set_up_button_state(self, pressed: bool):
        """Set "up" button state"""
        if self.up_button_pressed != pressed:
            self.up_button_pressed = pressed
            self._log(f"Up button {'pressed' if pressed else 'released'}")

    def set_down_button_state(self, pressed: bool):
        """Set "down" button state"""
        if self.down_button_pressed != pressed:
            self.down_button_pressed = pressed
            self._log(f"Down button {'pressed' if pressed else 'released'}")

    def set_button_state(self, direction: Direction, pressed: bool):
        if direction is Direction.UP:
            self.set_up_button_state(pressed)
        else:
            self.set_down_button_state(pressed)

    def clear_buttons(self):
        self.set_up_button_state(False)
        self.set_down_button_state(False)

    def set_elevator_indicator(self, elevator_id: str, direction: Optional[Direction]):
        """Set the arrival direction shown for an elevator (None turns it off)"""
        if self.elevator_indicators.get(elevator_id) != direction:
            self.elevator_indicators[elevator_id] = direction
            self._log(f"Elevator {elevator_id} indicator set to {direction.value if direction else 'none'}")

    def get_elevator_indicator(self, elevator_id: str) -> Optional[Direction]:
        return self.elevator_indicators.get(elevator_id)

    def reset(self):
        """Clear all transient state"""
        self.up_button_pressed = False
        self.down_button_pressed = False
        self.elevator_indicators = {}

    def __repr__(self) -> str:
        return (f"Floor({self.number}, up={self.up_button_pressed}, "
                f"down={self.down_button_pressed})")
