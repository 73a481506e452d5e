"""
Elevator System

Wires the building, the scheduler, the controllers and the event recorder
together from configuration, and offers the command surface of the whole
installation.
"""

import simpy
from typing import Iterable, List, Optional

from analyzer.event_recorder import EventRecorder
from config.group_control import GroupControlConfig
from config.settings import Settings
from config.simulation import ScriptStep, SimulationConfig
from group_control.algorithms import create_allocation_strategy
from group_control.scheduler import ElevatorScheduler, PendingCall
from simulator.core.building import Building
from simulator.infrastructure.timers import TimerRegistry
from .elevator_controller import ElevatorController
from .emergency_handler import EmergencyHandler


class ElevatorSystem:
    """
    A complete elevator installation on its own SimPy environment.

    Usage:
        system = ElevatorSystem(sim_config, gc_config)
        system.call_elevator(3, 'up')
        system.run(until=10)
    """

    def __init__(self, sim_config: Optional[SimulationConfig] = None,
                 gc_config: Optional[GroupControlConfig] = None,
                 env: Optional[simpy.Environment] = None, record_events: bool = True):
        """
        Args:
            sim_config: Building, fleet, door timing and script (defaults if omitted)
            gc_config: Allocation strategy selection (defaults if omitted)
            env: SimPy environment to run on (a new one is created if omitted)
            record_events: Attach an EventRecorder to the building broadcasts

        Raises:
            ValueError: If either configuration is inconsistent
        """
        self.sim_config = sim_config or SimulationConfig.default()
        self.gc_config = gc_config or GroupControlConfig()
        self.sim_config.validate()
        self.gc_config.validate()

        self.env = env or simpy.Environment()
        self.settings = Settings(self.sim_config)
        self.timers = TimerRegistry(self.env, name="System timers")
        self.allocation_strategy = create_allocation_strategy(self.gc_config.allocation_strategy)

        self.building = Building.from_config(self.env, self.sim_config, settings=self.settings,
                                             timers=self.timers, allocation_strategy=self.allocation_strategy)
        self.scheduler = ElevatorScheduler(self.building)
        self.controller = ElevatorController(self.building, self.scheduler,
                                             settings=self.settings, timers=self.timers)
        self.emergency_handler = EmergencyHandler(self.building, self.controller)

        self.recorder: Optional[EventRecorder] = None
        if record_events:
            self.recorder = EventRecorder(self.env, self.building.events.get_broadcast_pipe())
            self.recorder.set_simulation_metadata({
                'num_floors': self.sim_config.building.num_floors,
                'elevators': self.sim_config.elevator.elevator_ids(),
                'start_floors': self.sim_config.elevator.initial_floors(self.sim_config.building.num_floors),
                'allocation_strategy': self.allocation_strategy.get_strategy_name(),
                'sim_duration': self.sim_config.simulation_duration,
            })
            self.recorder.register_elevators(self.building.get_elevators().values())
            self.env.process(self.recorder.start_listening())

        print(f"{self.env.now:.2f} [System] Using strategy: {self.allocation_strategy.get_strategy_name()}")

    # --- Hall and car panels ---

    def call_elevator(self, floor: int, direction) -> bool:
        return self.controller.call_elevator(floor, direction)

    def select_destination(self, elevator_id: str, floor: int) -> bool:
        return self.controller.select_destination(elevator_id, floor)

    def open_door(self, elevator_id: str) -> bool:
        return self.controller.open_door(elevator_id)

    def close_door(self, elevator_id: str) -> bool:
        return self.controller.close_door(elevator_id)

    # --- Interrupts ---

    def trigger_emergency(self, elevator_id: str) -> bool:
        return self.emergency_handler.trigger_emergency(elevator_id)

    def cancel_emergency(self, elevator_id: str) -> bool:
        return self.emergency_handler.cancel_emergency(elevator_id)

    def trigger_maintenance(self, elevator_id: str) -> bool:
        return self.emergency_handler.trigger_maintenance(elevator_id)

    def cancel_maintenance(self, elevator_id: str) -> bool:
        return self.emergency_handler.cancel_maintenance(elevator_id)

    def set_overload(self, elevator_id: str, overloaded: bool) -> bool:
        return self.emergency_handler.set_overload(elevator_id, overloaded)

    def emergency_recall(self, floor: Optional[int] = None) -> bool:
        if floor is None:
            floor = self.sim_config.building.lobby_floor
        return self.emergency_handler.emergency_recall(floor)

    def power_outage(self) -> List[str]:
        return self.emergency_handler.power_outage()

    def restore_power(self) -> List[str]:
        return self.emergency_handler.restore_power()

    def reset(self):
        """Return the whole installation to its initial state"""
        self.building.reset()
        self.controller.reset()
        self.scheduler.reset()
        self.emergency_handler.reset()
        self.settings.reset_to_defaults()
        print(f"{self.env.now:.2f} [System] System reset")

    # --- Scripted runs ---

    def execute(self, step: ScriptStep):
        """Run one script command now"""
        args = step.args
        print(f"{self.env.now:.2f} [Script] {step.command} {args}")

        if step.command == 'call':
            return self.call_elevator(args['floor'], args['direction'])
        if step.command == 'select':
            return self.select_destination(args['elevator'], args['floor'])
        if step.command == 'open_door':
            return self.open_door(args['elevator'])
        if step.command == 'close_door':
            return self.close_door(args['elevator'])
        if step.command == 'emergency':
            return self.trigger_emergency(args['elevator'])
        if step.command == 'cancel_emergency':
            return self.cancel_emergency(args['elevator'])
        if step.command == 'maintenance':
            return self.trigger_maintenance(args['elevator'])
        if step.command == 'cancel_maintenance':
            return self.cancel_maintenance(args['elevator'])
        if step.command == 'overload':
            return self.set_overload(args['elevator'], True)
        if step.command == 'clear_overload':
            return self.set_overload(args['elevator'], False)
        if step.command == 'recall':
            return self.emergency_recall(args.get('floor'))
        if step.command == 'power_outage':
            return self.power_outage()
        if step.command == 'restore_power':
            return self.restore_power()
        if step.command == 'reset':
            self.reset()
            return True
        raise ValueError(f"Unknown script command: {step.command}")

    def _script_process(self, steps: List[ScriptStep]):
        for step in steps:
            if step.time > self.env.now:
                yield self.env.timeout(step.time - self.env.now)
            self.execute(step)

    def schedule_script(self, steps: Optional[Iterable[ScriptStep]] = None) -> simpy.Process:
        """
        Start a process that issues the script commands at their times.

        Args:
            steps: Script steps (defaults to the configured script)
        """
        if steps is None:
            steps = self.sim_config.script
        ordered = sorted(steps, key=lambda step: step.time)
        return self.env.process(self._script_process(ordered))

    def run(self, until: Optional[float] = None):
        """Advance the simulation clock (to the configured duration by default)"""
        self.env.run(until=until if until is not None else self.sim_config.simulation_duration)

    # --- Reporting ---

    def get_pending_calls(self) -> List[PendingCall]:
        return self.scheduler.get_pending_calls()

    def get_status(self) -> dict:
        return {
            'time': self.env.now,
            'elevators': [elevator.get_status() for elevator in self.building.get_elevators().values()],
            'pending_calls': [str(call) for call in self.scheduler.get_pending_calls()],
        }
