"""
Elevator Controllers

This package drives the simulated building: door timers and panel
commands, interrupt modes, and the wiring of a complete system.
"""

__version__ = "0.1.0"

from .elevator_controller import ElevatorController
from .emergency_handler import EmergencyHandler
from .system import ElevatorSystem

__all__ = ['ElevatorController', 'EmergencyHandler', 'ElevatorSystem']
