"""
Elevator Group Control

This package provides hall call allocation and scheduling for a fleet
of elevators.
"""

__version__ = "0.1.0"

from .scheduler import ElevatorScheduler, PendingCall
from .algorithms import NearestCarStrategy, create_allocation_strategy

__all__ = ['ElevatorScheduler', 'PendingCall', 'NearestCarStrategy', 'create_allocation_strategy']
