"""
Elevator System Analyzer

This package provides event recording and reporting tools
for elevator system runs.

Components:
- EventRecorder: Records building broadcasts, trajectories and hall call service times
"""

__version__ = "0.1.0"

from .event_recorder import EventRecorder

__all__ = ['EventRecorder']
