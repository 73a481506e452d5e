"""
Simulation Configuration

Building layout, elevator fleet, door timing and the scripted command
sequence used to drive a simulation run.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional
import string


# Commands accepted in a scenario script, mapped to the argument names they require
SCRIPT_COMMANDS: Dict[str, List[str]] = {
    'call': ['floor', 'direction'],
    'select': ['elevator', 'floor'],
    'open_door': ['elevator'],
    'close_door': ['elevator'],
    'emergency': ['elevator'],
    'cancel_emergency': ['elevator'],
    'maintenance': ['elevator'],
    'cancel_maintenance': ['elevator'],
    'overload': ['elevator'],
    'clear_overload': ['elevator'],
    'recall': [],
    'power_outage': [],
    'restore_power': [],
    'reset': [],
}


def spread_floors(count: int, num_floors: int) -> List[int]:
    """First car at the ground floor, last at the top, the rest evenly in between"""
    if count == 1:
        return [0]
    top = num_floors - 1
    return [round(i * top / (count - 1)) for i in range(count)]


@dataclass
class BuildingConfig:
    """Building specifications"""
    num_floors: int = 7  # floors 0 .. num_floors-1
    lobby_floor: int = 0  # floor used by the emergency recall

    def __post_init__(self):
        if self.num_floors < 2:
            raise ValueError("num_floors must be at least 2")
        if not (0 <= self.lobby_floor < self.num_floors):
            raise ValueError(f"lobby_floor must be between 0 and {self.num_floors - 1}")


@dataclass
class ElevatorConfig:
    """Elevator fleet specifications"""
    num_elevators: int = 2
    ids: Optional[List[str]] = None  # None = 'A', 'B', 'C', ...
    start_floors: Optional[List[int]] = None  # None = spread from ground to top floor

    def __post_init__(self):
        if self.num_elevators < 1:
            raise ValueError("num_elevators must be at least 1")
        if self.ids is not None:
            if len(self.ids) != self.num_elevators:
                raise ValueError(f"ids list length ({len(self.ids)}) must match num_elevators ({self.num_elevators})")
            if len(set(self.ids)) != len(self.ids):
                raise ValueError("elevator ids must be unique")
        elif self.num_elevators > len(string.ascii_uppercase):
            raise ValueError("explicit ids are required for more than 26 elevators")
        if self.start_floors is not None and len(self.start_floors) != self.num_elevators:
            raise ValueError(f"start_floors list length ({len(self.start_floors)}) must match num_elevators ({self.num_elevators})")

    def elevator_ids(self) -> List[str]:
        if self.ids is not None:
            return list(self.ids)
        return list(string.ascii_uppercase[:self.num_elevators])

    def initial_floors(self, num_floors: int) -> List[int]:
        """
        Starting floor of each elevator.

        Without explicit start floors the first car starts at the ground floor,
        the last at the top floor and the rest are spread evenly in between.
        """
        if self.start_floors is not None:
            return list(self.start_floors)
        return spread_floors(self.num_elevators, num_floors)


@dataclass
class DoorConfig:
    """Door timing (simulated seconds)"""
    animation_time: float = 0.7  # opening / closing
    open_time: float = 3.0  # hold time while loading
    arrival_delay: float = 0.2  # arrival at a destination until doors start opening

    def __post_init__(self):
        if self.animation_time <= 0:
            raise ValueError("animation_time must be positive")
        if self.open_time <= 0:
            raise ValueError("open_time must be positive")
        if self.arrival_delay < 0:
            raise ValueError("arrival_delay cannot be negative")


@dataclass
class ScriptStep:
    """A single timed command of a scenario script"""
    time: float
    command: str
    args: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.time < 0:
            raise ValueError("script time cannot be negative")
        if self.command not in SCRIPT_COMMANDS:
            raise ValueError(f"Unknown script command: {self.command}")
        missing = [name for name in SCRIPT_COMMANDS[self.command] if name not in self.args]
        if missing:
            raise ValueError(f"Script command '{self.command}' is missing arguments: {', '.join(missing)}")
        if 'floor' in self.args:
            floor = self.args['floor']
            # recall without a floor goes to the lobby
            if floor is None and self.command != 'recall':
                raise ValueError(f"Script command '{self.command}' needs a floor")
            if floor is not None and (isinstance(floor, bool) or not isinstance(floor, int)):
                raise ValueError(f"Script floor must be an integer, got {floor!r}")

    @classmethod
    def from_dict(cls, data: dict) -> 'ScriptStep':
        data = dict(data)
        time = data.pop('time', 0.0)
        command = data.pop('command', '')
        return cls(time=float(time), command=command, args=data)

    def to_dict(self) -> dict:
        return {'time': self.time, 'command': self.command, **self.args}


@dataclass
class SimulationConfig:
    """
    Complete simulation configuration

    Combines building, elevator, door and script settings.
    """
    building: BuildingConfig
    elevator: ElevatorConfig
    door: DoorConfig
    script: List[ScriptStep] = field(default_factory=list)

    # Simulation control
    simulation_duration: float = 60.0  # seconds
    event_log_path: Optional[str] = None  # JSON Lines event log written after the run

    def __post_init__(self):
        if self.simulation_duration <= 0:
            raise ValueError("simulation_duration must be positive")

    @classmethod
    def default(cls) -> 'SimulationConfig':
        return cls(building=BuildingConfig(), elevator=ElevatorConfig(), door=DoorConfig())

    @classmethod
    def from_dict(cls, data: dict) -> 'SimulationConfig':
        """Create SimulationConfig from dictionary"""
        sim_data = data.get('simulation', data)

        building_data = sim_data.get('building', {})
        building = BuildingConfig(
            num_floors=building_data.get('num_floors', 7),
            lobby_floor=building_data.get('lobby_floor', 0)
        )

        elevator_data = sim_data.get('elevator', {})
        elevator = ElevatorConfig(
            num_elevators=elevator_data.get('num_elevators', 2),
            ids=elevator_data.get('ids'),
            start_floors=elevator_data.get('start_floors')
        )

        door_data = sim_data.get('door', {})
        door = DoorConfig(
            animation_time=door_data.get('animation_time', 0.7),
            open_time=door_data.get('open_time', 3.0),
            arrival_delay=door_data.get('arrival_delay', 0.2)
        )

        script = [ScriptStep.from_dict(step) for step in sim_data.get('script', []) or []]

        return cls(
            building=building,
            elevator=elevator,
            door=door,
            script=script,
            simulation_duration=sim_data.get('simulation_duration', 60.0),
            event_log_path=sim_data.get('event_log_path')
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        result = {
            'simulation': {
                'building': {
                    'num_floors': self.building.num_floors,
                    'lobby_floor': self.building.lobby_floor
                },
                'elevator': {
                    'num_elevators': self.elevator.num_elevators
                },
                'door': {
                    'animation_time': self.door.animation_time,
                    'open_time': self.door.open_time,
                    'arrival_delay': self.door.arrival_delay
                },
                'script': [step.to_dict() for step in self.script],
                'simulation_duration': self.simulation_duration
            }
        }

        # Add optional fields
        if self.elevator.ids is not None:
            result['simulation']['elevator']['ids'] = list(self.elevator.ids)
        if self.elevator.start_floors is not None:
            result['simulation']['elevator']['start_floors'] = list(self.elevator.start_floors)
        if self.event_log_path is not None:
            result['simulation']['event_log_path'] = self.event_log_path

        return result

    def validate(self):
        """Validate configuration consistency"""
        num_floors = self.building.num_floors

        for floor in self.elevator.initial_floors(num_floors):
            if not (0 <= floor < num_floors):
                raise ValueError(f"start floor {floor} is outside the building (0-{num_floors - 1})")

        elevator_ids = set(self.elevator.elevator_ids())
        for step in self.script:
            if step.time > self.simulation_duration:
                raise ValueError(f"script step at {step.time}s is beyond simulation_duration ({self.simulation_duration}s)")
            if step.args.get('floor') is not None and not (0 <= step.args['floor'] < num_floors):
                raise ValueError(f"script step '{step.command}' refers to floor {step.args['floor']} outside the building")
            if 'elevator' in step.args and step.args['elevator'] not in elevator_ids:
                raise ValueError(f"script step '{step.command}' refers to unknown elevator {step.args['elevator']}")

        return True
