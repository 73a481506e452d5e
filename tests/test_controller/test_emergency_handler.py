"""
EmergencyHandler tests
"""

from controller.elevator_controller import ElevatorController
from controller.emergency_handler import EmergencyHandler
from group_control.scheduler import ElevatorScheduler
from simulator.core.building import Building
from simulator.core.states import ElevatorState, OperationalMode


def make_handler(env, start_floors=(0, 6)):
    building = Building(env, num_floors=7, elevator_ids=('A', 'B'), start_floors=list(start_floors))
    scheduler = ElevatorScheduler(building)
    controller = ElevatorController(building, scheduler)
    return building, scheduler, EmergencyHandler(building, controller)


def test_trigger_emergency_toggles(env):
    building, scheduler, handler = make_handler(env)
    elevator_a = building.get_elevator('A')
    elevator_a.add_destination(4)

    assert handler.trigger_emergency('A')
    assert elevator_a.is_in_emergency
    assert elevator_a.destinations == []

    assert handler.trigger_emergency('A')
    assert not elevator_a.is_in_emergency
    assert elevator_a.state is ElevatorState.IDLE


def test_cancel_emergency(env):
    building, scheduler, handler = make_handler(env)

    assert not handler.cancel_emergency('A')
    handler.trigger_emergency('A')
    assert handler.cancel_emergency('A')
    assert building.get_elevator('A').mode is OperationalMode.NORMAL


def test_unknown_elevator_is_refused(env):
    building, scheduler, handler = make_handler(env)

    assert not handler.trigger_emergency('Z')
    assert not handler.cancel_emergency('Z')
    assert not handler.trigger_maintenance('Z')
    assert not handler.cancel_maintenance('Z')
    assert not handler.set_overload('Z', True)


def test_trigger_maintenance_toggles(env):
    building, scheduler, handler = make_handler(env)
    elevator_b = building.get_elevator('B')

    assert handler.trigger_maintenance('B')
    assert elevator_b.state is ElevatorState.MAINTENANCE
    assert not handler.trigger_emergency('B')

    assert handler.trigger_maintenance('B')
    assert elevator_b.state is ElevatorState.IDLE
    assert not handler.cancel_maintenance('B')


def test_emergency_car_is_not_dispatched(env):
    building, scheduler, handler = make_handler(env, start_floors=(2, 6))
    handler.trigger_emergency('A')

    building.call_elevator(2, 'up')

    assert building.get_elevator('A').current_floor == 2
    assert building.get_elevator('B').current_floor == 2


def test_cancelled_emergency_picks_up_pending_calls(env):
    building, scheduler, handler = make_handler(env)
    handler.trigger_emergency('A')
    handler.trigger_maintenance('B')
    building.call_elevator(3, 'down')
    assert scheduler.get_pending_calls()

    # Leaving emergency makes A idle, which retries the pending calls
    handler.cancel_emergency('A')

    assert scheduler.get_pending_calls() == []
    assert building.get_elevator('A').current_floor == 3


def test_set_overload(env):
    building, scheduler, handler = make_handler(env)
    assert not handler.set_overload('A', True)

    building.get_elevator('A').open_doors()
    env.run(until=1.0)

    assert handler.set_overload('A', True)
    assert building.get_elevator('A').is_overloaded
    assert handler.set_overload('A', False)
    assert not handler.set_overload('A', False)


def test_emergency_recall(env):
    building, scheduler, handler = make_handler(env, start_floors=(3, 6))
    handler.trigger_emergency('A')

    assert handler.emergency_recall()

    for elevator in building.get_elevators().values():
        assert elevator.mode is OperationalMode.NORMAL
        assert elevator.current_floor == 0
    env.run(until=2.0)
    assert all(elevator.state is ElevatorState.LOADING for elevator in building.get_elevators().values())


def test_emergency_recall_with_car_at_lobby(env):
    building, scheduler, handler = make_handler(env, start_floors=(0, 6))

    handler.emergency_recall(0)

    assert building.get_elevator('A').state is ElevatorState.DOOR_OPENING
    assert building.get_elevator('B').current_floor == 0


def test_emergency_recall_invalid_floor(env):
    building, scheduler, handler = make_handler(env)
    assert not handler.emergency_recall(12)


def test_power_outage_and_restore(env):
    building, scheduler, handler = make_handler(env)
    building.call_elevator(3, 'up')

    assert handler.power_outage() == ['A']
    elevator_a = building.get_elevator('A')
    assert elevator_a.state is ElevatorState.STOPPED

    # Arrival door opening is refused while stopped
    env.run(until=2.0)
    assert elevator_a.state is ElevatorState.STOPPED
    assert not elevator_a.doors_open

    assert handler.restore_power() == ['A']
    assert elevator_a.state is ElevatorState.IDLE
    assert handler.restore_power() == []


def test_power_outage_keeps_queue(env):
    building, scheduler, handler = make_handler(env)
    elevator_a = building.get_elevator('A')
    elevator_a.add_destination(2)
    elevator_a.add_destination(5)
    elevator_a.process_next_destination()

    handler.power_outage()

    assert elevator_a.destinations == [5]


def test_reset_clears_all_interrupts(env):
    building, scheduler, handler = make_handler(env)
    handler.trigger_emergency('A')
    handler.trigger_maintenance('B')

    assert handler.reset()

    for elevator in building.get_elevators().values():
        assert elevator.mode is OperationalMode.NORMAL
        assert elevator.state is ElevatorState.IDLE
