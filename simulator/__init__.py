"""
Elevator Simulator - Core simulation engine

This package provides the building, floor and elevator entities and the
event/timer infrastructure they run on.
"""

__version__ = "0.1.0"

from .core.entity import Entity
from .core.states import Direction, ElevatorState, OperationalMode
from .core.floor import Floor
from .core.elevator import Elevator
from .core.building import Building

from .infrastructure.message_broker import MessageBroker
from .infrastructure.timers import TimerRegistry

__all__ = [
    'Entity',
    'Direction',
    'ElevatorState',
    'OperationalMode',
    'Floor',
    'Elevator',
    'Building',
    'MessageBroker',
    'TimerRegistry',
]
