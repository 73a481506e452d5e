"""
ElevatorSystem tests: complete installations built from configuration
"""

import pytest

from config.group_control import AllocationStrategyConfig, GroupControlConfig
from config.simulation import (
    BuildingConfig, DoorConfig, ElevatorConfig, ScriptStep, SimulationConfig
)
from controller.system import ElevatorSystem
from group_control.scheduler import PendingCall
from simulator.core.states import Direction, ElevatorState, OperationalMode


def make_config(start_floors=(0, 6), script=None, **door):
    return SimulationConfig(
        building=BuildingConfig(num_floors=7),
        elevator=ElevatorConfig(num_elevators=2, ids=['A', 'B'], start_floors=list(start_floors)),
        door=DoorConfig(**door),
        script=script or [],
        simulation_duration=30.0,
    )


def test_default_system():
    system = ElevatorSystem()

    assert list(system.building.get_elevators()) == ['A', 'B']
    assert system.building.get_elevator('B').current_floor == 6
    assert system.recorder is not None


def test_call_served_by_nearest_elevator():
    system = ElevatorSystem(make_config())
    elevator_a = system.building.get_elevator('A')

    assert system.call_elevator(3, 'up')
    system.run(until=0.5)
    assert elevator_a.state is ElevatorState.DOOR_OPENING
    system.run(until=1.0)
    assert elevator_a.state is ElevatorState.LOADING
    assert elevator_a.current_floor == 3
    assert system.building.get_elevator('B').current_floor == 6


def test_busy_elevators_then_pending_call_served():
    system = ElevatorSystem(make_config(start_floors=(0, 3)))
    system.select_destination('A', 5)
    system.select_destination('B', 6)

    system.call_elevator(2, 'down')
    assert system.get_pending_calls() == [PendingCall(2, Direction.DOWN)]

    system.run(until=10.0)
    assert system.get_pending_calls() == []
    assert system.building.get_elevator('A').current_floor == 2


def test_custom_door_timing():
    system = ElevatorSystem(make_config(animation_time=1.0, open_time=2.0, arrival_delay=0.5))
    elevator_a = system.building.get_elevator('A')

    system.call_elevator(3, 'up')
    system.run(until=1.4)
    assert elevator_a.state is ElevatorState.DOOR_OPENING
    system.run(until=1.6)
    assert elevator_a.state is ElevatorState.LOADING
    system.run(until=3.6)
    assert elevator_a.state is ElevatorState.DOOR_CLOSING


def test_scripted_run():
    script = [
        ScriptStep(time=0.0, command='call', args={'floor': 3, 'direction': 'up'}),
        ScriptStep(time=1.5, command='select', args={'elevator': 'A', 'floor': 5}),
        ScriptStep(time=2.0, command='emergency', args={'elevator': 'B'}),
    ]
    system = ElevatorSystem(make_config(script=script))

    system.schedule_script()
    system.run(until=10.0)

    assert system.building.get_elevator('A').current_floor == 5
    assert system.building.get_elevator('B').is_in_emergency


def test_script_steps_run_in_time_order():
    system = ElevatorSystem(make_config())
    steps = [
        ScriptStep(time=5.0, command='cancel_maintenance', args={'elevator': 'B'}),
        ScriptStep(time=1.0, command='maintenance', args={'elevator': 'B'}),
    ]

    system.schedule_script(steps)
    system.run(until=3.0)
    assert system.building.get_elevator('B').is_in_maintenance
    system.run(until=6.0)
    assert system.building.get_elevator('B').mode is OperationalMode.NORMAL


@pytest.mark.parametrize("command, args", [
    ('open_door', {'elevator': 'A'}),
    ('close_door', {'elevator': 'A'}),
    ('overload', {'elevator': 'A'}),
    ('clear_overload', {'elevator': 'A'}),
    ('cancel_emergency', {'elevator': 'A'}),
    ('recall', {}),
    ('power_outage', {}),
    ('restore_power', {}),
    ('reset', {}),
])
def test_every_script_command_executes(command, args):
    system = ElevatorSystem(make_config())
    system.execute(ScriptStep(time=0.0, command=command, args=args))


def test_emergency_recall_uses_lobby_floor():
    config = make_config(start_floors=(4, 6))
    config.building = BuildingConfig(num_floors=7, lobby_floor=2)
    system = ElevatorSystem(config)

    system.emergency_recall()

    assert all(e.current_floor == 2 for e in system.building.get_elevators().values())


def test_reset_restores_initial_state():
    system = ElevatorSystem(make_config())
    system.call_elevator(3, 'up')
    system.trigger_maintenance('B')
    system.call_elevator(5, 'down')
    system.settings.update_setting('door_open_time', 10.0)
    system.run(until=1.0)

    system.reset()

    for elevator_id, floor in (('A', 0), ('B', 6)):
        elevator = system.building.get_elevator(elevator_id)
        assert elevator.current_floor == floor
        assert elevator.state is ElevatorState.IDLE
        assert not elevator.doors_open
        assert elevator.destinations == []
        assert elevator.mode is OperationalMode.NORMAL
    assert system.get_pending_calls() == []
    assert len(system.timers) == 0
    assert system.settings.get_door_open_time() == 3.0

    system.run(until=10.0)
    assert system.building.get_elevator('A').state is ElevatorState.IDLE


def test_recorder_collects_events():
    system = ElevatorSystem(make_config())
    system.call_elevator(3, 'up')
    system.run(until=5.0)

    recorder = system.recorder
    types = [event['type'] for event in recorder.event_log]
    assert types[0] == 'elevator_called'
    assert 'elevator_doors_opened' in types
    assert 'elevator_doors_closed' in types
    assert recorder.elevator_trajectories['A'] == [(0, 0), (0, 3)]
    assert recorder.hall_call_service_times == [(3, 'up', pytest.approx(0.9))]


def test_system_without_recorder():
    system = ElevatorSystem(make_config(), record_events=False)
    system.call_elevator(3, 'up')
    system.run(until=5.0)

    assert system.recorder is None


def test_invalid_configuration_raises():
    script = [ScriptStep(time=0.0, command='select', args={'elevator': 'Z', 'floor': 2})]
    with pytest.raises(ValueError):
        ElevatorSystem(make_config(script=script))

    with pytest.raises(ValueError):
        ElevatorSystem(make_config(), GroupControlConfig(AllocationStrategyConfig(name='Random')))


def test_get_status():
    system = ElevatorSystem(make_config())
    system.trigger_emergency('B')

    status = system.get_status()

    assert status['time'] == 0
    assert [e['id'] for e in status['elevators']] == ['A', 'B']
    assert status['elevators'][1]['mode'] == 'EMERGENCY'


def test_scripted_recall_with_null_floor_goes_to_lobby():
    config = make_config(start_floors=(4, 6))
    config.building = BuildingConfig(num_floors=7, lobby_floor=1)
    system = ElevatorSystem(config)

    system.execute(ScriptStep(time=0.0, command='recall', args={'floor': None}))

    assert all(e.current_floor == 1 for e in system.building.get_elevators().values())
