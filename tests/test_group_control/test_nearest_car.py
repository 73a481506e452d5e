"""
NearestCarStrategy tests
"""

import pytest

from config.group_control import AllocationStrategyConfig
from group_control.algorithms import available_strategies, create_allocation_strategy
from group_control.algorithms.nearest_car import NearestCarStrategy
from simulator.core.elevator import Elevator
from simulator.core.states import Direction


def make_fleet(env, *floors):
    return [Elevator(env, elevator_id, current_floor=floor, min_floor=0, max_floor=9)
            for elevator_id, floor in zip('ABCD', floors)]


def loading_elevator(env, elevator):
    elevator.open_doors()
    env.run(until=env.now + 1.0)
    return elevator


def test_selects_nearest(env):
    fleet = make_fleet(env, 0, 5, 9)
    strategy = NearestCarStrategy()

    assert strategy.select_elevator(6, Direction.UP, fleet).id == 'B'
    assert strategy.select_elevator(1, Direction.DOWN, fleet).id == 'A'


@pytest.mark.parametrize("order", [(0, 1), (1, 0)])
def test_equal_distance_prefers_lower_floor(env, order):
    fleet = make_fleet(env, 2, 6)
    fleet = [fleet[i] for i in order]

    assert NearestCarStrategy().select_elevator(4, Direction.UP, fleet).current_floor == 2


def test_aligned_elevator_preferred_over_closer_misaligned(env):
    fleet = make_fleet(env, 5, 9)
    fleet[0].add_destination(4)
    fleet[0].process_next_destination()  # at 4, moving down

    assert NearestCarStrategy().select_elevator(4, Direction.UP, fleet).id == 'B'


def test_misaligned_used_when_nothing_is_aligned(env):
    fleet = make_fleet(env, 5)
    fleet[0].add_destination(4)
    fleet[0].process_next_destination()

    assert NearestCarStrategy().select_elevator(8, Direction.UP, fleet).id == 'A'


def test_emergency_and_stopped_never_selected(env):
    fleet = make_fleet(env, 0, 5)
    fleet[0].set_emergency(True)
    fleet[1].add_destination(7)
    fleet[1].process_next_destination()
    fleet[1].force_stop()

    assert NearestCarStrategy().select_elevator(3, Direction.UP, fleet) is None


def test_maintenance_exclusion_is_configurable(env):
    fleet = make_fleet(env, 0)
    fleet[0].set_maintenance(True)

    assert NearestCarStrategy().select_elevator(3, Direction.UP, fleet) is None
    assert NearestCarStrategy(exclude_maintenance=False).select_elevator(3, Direction.UP, fleet) is fleet[0]


def test_overload_exclusion_is_configurable(env):
    fleet = make_fleet(env, 0)
    loading_elevator(env, fleet[0]).set_overloaded(True)

    assert NearestCarStrategy().select_elevator(3, Direction.UP, fleet) is None
    assert NearestCarStrategy(exclude_overloaded=False).select_elevator(3, Direction.UP, fleet) is fleet[0]


def test_is_aligned(env):
    elevator = make_fleet(env, 0)[0]
    strategy = NearestCarStrategy()
    assert strategy.is_aligned(elevator, Direction.DOWN)

    elevator.add_destination(5)
    elevator.process_next_destination()
    assert strategy.is_aligned(elevator, Direction.UP)
    assert not strategy.is_aligned(elevator, Direction.DOWN)


def test_empty_fleet(env):
    assert NearestCarStrategy().select_elevator(3, Direction.UP, []) is None


def test_strategy_registry():
    assert 'NearestCar' in available_strategies()

    strategy = create_allocation_strategy(
        AllocationStrategyConfig(name='NearestCar', parameters={'exclude_maintenance': False}))
    assert isinstance(strategy, NearestCarStrategy)
    assert strategy.exclude_maintenance is False

    with pytest.raises(ValueError):
        create_allocation_strategy(AllocationStrategyConfig(name='Unknown'))
    with pytest.raises(ValueError):
        create_allocation_strategy(AllocationStrategyConfig(name='NearestCar', parameters={'speed': 1}))
