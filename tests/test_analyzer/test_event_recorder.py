"""
EventRecorder tests
"""

import json

import pytest

from analyzer.event_recorder import EventRecorder
from simulator.core.building import Building


@pytest.fixture
def recorded_building(env):
    building = Building(env, num_floors=7, elevator_ids=('A', 'B'), start_floors=[0, 6])
    recorder = EventRecorder(env, building.events.get_broadcast_pipe())
    recorder.register_elevators(building.get_elevators().values())
    env.process(recorder.start_listening())
    return building, recorder


def test_records_trajectory_and_service_time(env, recorded_building):
    building, recorder = recorded_building
    building.call_elevator(4, 'down')

    def serve():
        yield env.timeout(2.0)
        elevator_b = building.get_elevator('B')
        elevator_b.move_to_floor(4)
        elevator_b.open_doors()

    env.process(serve())
    env.run(until=5.0)

    assert recorder.elevator_trajectories['B'] == [(0, 6), (2.0, 4)]
    assert recorder.hall_call_service_times == [(4, 'down', pytest.approx(2.7))]
    assert recorder.open_hall_calls == {}
    assert recorder.get_average_service_time() == pytest.approx(2.7)


def test_event_log_is_json_serializable(env, recorded_building, tmp_path):
    building, recorder = recorded_building
    recorder.set_simulation_metadata({'num_floors': 7})
    building.call_elevator(2, 'up')
    building.get_elevator('A').move_to_floor(2)
    env.run(until=1.0)

    path = recorder.save_event_log(str(tmp_path / "log.jsonl"))

    lines = [json.loads(line) for line in open(path, encoding='utf-8')]
    assert lines[0]['type'] == 'metadata'
    assert lines[1] == {'time': 0, 'type': 'elevator_called', 'data': {'floor': 2, 'direction': 'up'}}
    floor_event = next(line for line in lines if line['type'] == 'elevator_floor_changed')
    assert floor_event['data']['elevator'] == 'A'
    assert floor_event['data']['direction'] == 'up'


def test_save_event_log_failure_is_reported(env, recorded_building, tmp_path):
    building, recorder = recorded_building
    assert recorder.save_event_log(str(tmp_path / "missing" / "log.jsonl")) is None


def test_building_reset_forgets_open_calls(env, recorded_building):
    building, recorder = recorded_building
    building.call_elevator(3, 'up')
    building.reset()
    env.run(until=1.0)

    assert recorder.open_hall_calls == {}


def test_malformed_message_does_not_stop_recording(env, recorded_building):
    building, recorder = recorded_building
    pipe = building.events.get_broadcast_pipe()
    pipe.put({'topic': 'elevator_floor_changed', 'message': {'new_floor': 3}})
    building.call_elevator(3, 'up')
    env.run(until=1.0)

    assert [event['type'] for event in recorder.event_log] == ['elevator_floor_changed', 'elevator_called']
    assert (3, 'up') in recorder.open_hall_calls


def test_plot_trajectories(env, recorded_building, tmp_path):
    building, recorder = recorded_building
    building.get_elevator('A').move_to_floor(5)
    env.run(until=3.0)

    output = tmp_path / "diagram.png"
    figure = recorder.plot_trajectories(str(output))

    assert figure is not None
    assert output.exists()


def test_print_summary(env, recorded_building, capsys):
    building, recorder = recorded_building
    building.call_elevator(3, 'up')
    env.run(until=1.0)

    recorder.print_summary()

    out = capsys.readouterr().out
    assert 'elevator_called' in out
    assert 'Hall calls still open: 1' in out
