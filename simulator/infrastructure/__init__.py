"""Infrastructure components for simulation"""

from .message_broker import MessageBroker
from .timers import ScheduledTask, TimerRegistry

__all__ = [
    'MessageBroker',
    'ScheduledTask',
    'TimerRegistry',
]
