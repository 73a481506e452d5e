"""
Runtime settings

Read-only view of timing and layout values for the simulation components.
Components poll the getters every time they need a value, so a change made
with ``update_setting`` takes effect at the next door cycle.
"""

from typing import Any, Dict, Optional

from .simulation import SimulationConfig


# Fallbacks used by components constructed without a Settings object
DEFAULT_DOOR_ANIMATION_TIME = 0.7
DEFAULT_DOOR_OPEN_TIME = 3.0
DEFAULT_ARRIVAL_DELAY = 0.2


class Settings:
    """Mutable runtime settings derived from a SimulationConfig"""

    _POSITIVE_KEYS = ('door_animation_time', 'door_open_time')
    _NON_NEGATIVE_KEYS = ('arrival_delay',)

    def __init__(self, config: Optional[SimulationConfig] = None):
        config = config or SimulationConfig.default()
        self.defaults: Dict[str, Any] = {
            'floor_count': config.building.num_floors,
            'elevator_count': config.elevator.num_elevators,
            'door_animation_time': config.door.animation_time,
            'door_open_time': config.door.open_time,
            'arrival_delay': config.door.arrival_delay,
        }
        self.current: Dict[str, Any] = dict(self.defaults)

    def update_setting(self, key: str, value: Any) -> bool:
        """
        Change a timing setting at run time.

        Floor and elevator counts are fixed at construction and cannot be
        changed here.

        Returns:
            True if the value was accepted
        """
        if key in self._POSITIVE_KEYS:
            valid = isinstance(value, (int, float)) and value > 0
        elif key in self._NON_NEGATIVE_KEYS:
            valid = isinstance(value, (int, float)) and value >= 0
        else:
            print(f"[Settings] Setting '{key}' cannot be changed at run time")
            return False

        if not valid:
            print(f"[Settings] Invalid value for '{key}': {value}")
            return False

        self.current[key] = float(value)
        print(f"[Settings] {key} = {value}")
        return True

    def reset_to_defaults(self):
        self.current = dict(self.defaults)
        print("[Settings] Settings reset to defaults")

    # Getter methods
    def get_floor_count(self) -> int:
        return self.current['floor_count']

    def get_elevator_count(self) -> int:
        return self.current['elevator_count']

    def get_door_animation_time(self) -> float:
        return self.current['door_animation_time']

    def get_door_open_time(self) -> float:
        return self.current['door_open_time']

    def get_arrival_delay(self) -> float:
        return self.current['arrival_delay']
