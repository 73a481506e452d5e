import simpy
from typing import Any, Callable, Dict, List, Optional


class MessageBroker:
    """
    Mediates communication between components within the simulation.
    Implements a topic-based publish-subscribe model.

    Delivery is synchronous: ``publish`` invokes every subscriber of the topic
    in registration order and returns only after all of them have run.
    Optionally every published message is also copied to a broadcast pipe
    (``simpy.Store``) so that recorders can consume the event stream as a
    SimPy process.
    """
    def __init__(self, env: simpy.Environment, name: str = "Broker", broadcast: bool = False):
        """
        Initialize the message broker

        Args:
            env (simpy.Environment): SimPy environment
            name (str): Owner name used in log lines
            broadcast (bool): Copy every message to the broadcast pipe
        """
        self.env = env
        self.name = name
        self.topics: Dict[str, List[Callable[[dict], Any]]] = {}  # Subscribers per topic
        self.broadcast_pipe: Optional[simpy.Store] = simpy.Store(self.env) if broadcast else None

    def subscribe(self, topic: str, callback: Callable[[dict], Any]):
        """
        Register a callback for the specified topic
        """
        self.topics.setdefault(topic, []).append(callback)

    def unsubscribe(self, topic: str, callback: Callable[[dict], Any]) -> bool:
        """
        Remove a previously registered callback

        Returns:
            True if the callback was registered, False otherwise
        """
        subscribers = self.topics.get(topic, [])
        if callback in subscribers:
            subscribers.remove(callback)
            return True
        return False

    def publish(self, topic: str, message: dict) -> dict:
        """
        Publish a message to the specified topic

        The message is stamped with the current simulation time.
        """
        message = dict(message)
        message.setdefault('timestamp', self.env.now)
        if self.broadcast_pipe is not None:
            self.broadcast_pipe.put({'topic': topic, 'message': message})
        # Iterate over a snapshot: handlers may subscribe while being notified
        for callback in list(self.topics.get(topic, [])):
            callback(message)
        return message

    def subscriber_count(self, topic: str) -> int:
        return len(self.topics.get(topic, []))

    def get_broadcast_pipe(self) -> Optional[simpy.Store]:
        """
        Method for EventRecorder class to access this pipe
        Returns the broadcast pipe (None if broadcasting is disabled)
        """
        return self.broadcast_pipe
