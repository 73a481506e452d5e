"""
Elevator state vocabulary

``ElevatorState`` is the motion/door state of a car, ``OperationalMode`` the
service mode layered on top of it. Both are ``str`` enums so they compare
equal to their plain string values.
"""

from enum import Enum
from typing import Optional, Union


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"

    @classmethod
    def parse(cls, value: Union[str, 'Direction', None]) -> Optional['Direction']:
        """
        Convert a direction token ('up' / 'down', any case) to a Direction.

        Returns:
            Direction, or None if the token is not a valid direction
        """
        if isinstance(value, Direction):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.lower())
        except ValueError:
            return None

    @classmethod
    def between(cls, from_floor: int, to_floor: int) -> Optional['Direction']:
        """Direction of travel from one floor to another (None if equal)"""
        if to_floor > from_floor:
            return cls.UP
        if to_floor < from_floor:
            return cls.DOWN
        return None


class ElevatorState(str, Enum):
    IDLE = "IDLE"
    MOVING_UP = "MOVING_UP"
    MOVING_DOWN = "MOVING_DOWN"
    DOOR_OPENING = "DOOR_OPENING"
    LOADING = "LOADING"
    DOOR_CLOSING = "DOOR_CLOSING"
    EMERGENCY = "EMERGENCY"
    MAINTENANCE = "MAINTENANCE"
    OVERLOADED = "OVERLOADED"
    STOPPED = "STOPPED"

    @property
    def is_moving(self) -> bool:
        return self in (ElevatorState.MOVING_UP, ElevatorState.MOVING_DOWN)

    @classmethod
    def moving(cls, direction: Direction) -> 'ElevatorState':
        return cls.MOVING_UP if direction is Direction.UP else cls.MOVING_DOWN


class OperationalMode(str, Enum):
    NORMAL = "NORMAL"
    EMERGENCY = "EMERGENCY"
    MAINTENANCE = "MAINTENANCE"
    OVERLOADED = "OVERLOADED"

    @property
    def accepts_destinations(self) -> bool:
        return self is OperationalMode.NORMAL

    @property
    def is_out_of_service(self) -> bool:
        # Emergency and maintenance take the car out of service entirely
        return self in (OperationalMode.EMERGENCY, OperationalMode.MAINTENANCE)
