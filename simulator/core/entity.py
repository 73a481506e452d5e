# File: entity.py
import simpy
import itertools  # Helper for entity ID counter

from ..infrastructure.message_broker import MessageBroker


class Entity:
    """
    Base class for stateful simulation entities.

    Provides the common state attribute, state transition logging and a
    per-entity message broker on which the entity publishes its events.
    Entities are purely reactive: they do not run a main loop of their own,
    every timed behaviour goes through the environment's timers.
    """
    # Entity ID counter shared across all class instances
    _entity_id_counter = itertools.count()

    def __init__(self, env: simpy.Environment, name: str = None, initial_state: str = "initial_state"):
        """
        Initialize the entity.

        Args:
            env: The SimPy simulation environment this entity belongs to.
            name: Entity name. Optional. If not specified, auto-generated from class name and ID.
            initial_state: State the entity starts in (no transition is logged for it).
        """
        self.env = env
        # Generate unique entity ID
        self.entity_id: int = next(self._entity_id_counter)
        # Set entity name
        self.name: str = name if name is not None else f"{self.__class__.__name__}_{self.entity_id}"
        self.state = initial_state
        self.events = MessageBroker(env, name=self.name)

    def on(self, topic: str, callback):
        """Register an event handler for one of this entity's topics"""
        self.events.subscribe(topic, callback)

    def log(self, message: str):
        print(f"{self.env.now:.2f} [{self.name}] {message}")

    # --- Common utility methods ---

    def set_state(self, new_state):
        """
        Transition the entity's state.

        Args:
            new_state: Target state for transition.

        Returns:
            True if the state actually changed.
        """
        if self.state == new_state:
            return False
        old_state = self.state
        self.state = new_state
        self._on_state_changed(old_state, new_state)
        return True

    def get_state(self):
        """
        Get the current state of the entity.
        """
        return self.state

    def _on_state_changed(self, old_state, new_state):
        """
        Hook method called after every state change.
        Subclasses extend it to publish their own notifications.
        """
        self._log_state_change(old_state, new_state)

    def _log_state_change(self, old_state, new_state):
        self.log(f"State transition: {_label(old_state)} -> {_label(new_state)}")


def _label(state) -> str:
    return getattr(state, 'value', state)
