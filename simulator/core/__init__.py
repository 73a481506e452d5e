"""Core simulation entities"""

from .entity import Entity
from .states import Direction, ElevatorState, OperationalMode
from .floor import Floor
from .elevator import Elevator
from .building import Building

__all__ = [
    'Entity',
    'Direction',
    'ElevatorState',
    'OperationalMode',
    'Floor',
    'Elevator',
    'Building',
]
