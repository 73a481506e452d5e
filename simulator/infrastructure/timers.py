"""
Timers - deferred, cancelable actions on the SimPy clock

Every delayed transition in the system (door animation, door hold, arrival
to door opening) is a callback that runs after a fixed delay. Each task is
keyed, typically ``(elevator_id, timer_class)``, and scheduling a key that
already has an outstanding task replaces it.
"""

import simpy
from typing import Any, Callable, Dict, Hashable, Optional


class ScheduledTask:
    """Handle for a callback waiting on the simulation clock"""

    def __init__(self, key: Hashable, due_time: float, callback: Callable, args: tuple):
        self.key = key
        self.due_time = due_time
        self.callback = callback
        self.args = args
        self.cancelled = False
        self.fired = False
        self.process: Optional[simpy.Process] = None

    def cancel(self):
        self.cancelled = True

    @property
    def is_pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def __repr__(self) -> str:
        return f"ScheduledTask(key={self.key!r}, due={self.due_time:.2f}, pending={self.is_pending})"


class TimerRegistry:
    """
    Keyed registry of delayed callbacks.

    A cancelled task still wakes up at its due time but does nothing, so no
    SimPy process is ever interrupted.
    """

    def __init__(self, env: simpy.Environment, name: str = "Timers"):
        self.env = env
        self.name = name
        self._tasks: Dict[Hashable, ScheduledTask] = {}

    def schedule(self, key: Hashable, delay: float, callback: Callable, *args: Any) -> ScheduledTask:
        """
        Run ``callback(*args)`` after ``delay`` simulated seconds.

        Args:
            key: Task key; an outstanding task with the same key is cancelled
            delay: Delay in simulated seconds (must not be negative)
            callback: Function to call when the delay expires

        Returns:
            ScheduledTask handle
        """
        if delay < 0:
            raise ValueError(f"delay cannot be negative, got {delay}")
        self.cancel(key)
        task = ScheduledTask(key, self.env.now + delay, callback, args)
        self._tasks[key] = task
        task.process = self.env.process(self._run(task, delay))
        return task

    def _run(self, task: ScheduledTask, delay: float):
        yield self.env.timeout(delay)
        if task.cancelled:
            return
        if self._tasks.get(task.key) is task:
            del self._tasks[task.key]
        task.fired = True
        task.callback(*task.args)

    def cancel(self, key: Hashable) -> bool:
        """
        Cancel the outstanding task for ``key``

        Returns:
            True if a pending task was cancelled
        """
        task = self._tasks.pop(key, None)
        if task is None or not task.is_pending:
            return False
        task.cancel()
        return True

    def cancel_matching(self, predicate: Callable[[Hashable], bool]) -> int:
        """Cancel every task whose key satisfies ``predicate``"""
        keys = [key for key in self._tasks if predicate(key)]
        return sum(1 for key in keys if self.cancel(key))

    def cancel_all(self) -> int:
        return self.cancel_matching(lambda key: True)

    def is_scheduled(self, key: Hashable) -> bool:
        task = self._tasks.get(key)
        return task is not None and task.is_pending

    def __len__(self) -> int:
        return sum(1 for task in self._tasks.values() if task.is_pending)
