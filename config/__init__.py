"""
Configuration management package

Provides configuration classes for the building simulation and the
group control (dispatch) layer, plus the runtime settings view.
"""

from .group_control import (
    GroupControlConfig,
    AllocationStrategyConfig
)

from .simulation import (
    SimulationConfig,
    BuildingConfig,
    ElevatorConfig,
    DoorConfig,
    ScriptStep,
    SCRIPT_COMMANDS
)

from .settings import Settings

from .config_loader import (
    ConfigLoader,
    load_group_control_config,
    load_simulation_config,
    save_group_control_config,
    save_simulation_config
)

__all__ = [
    # Group control
    'GroupControlConfig',
    'AllocationStrategyConfig',

    # Simulation
    'SimulationConfig',
    'BuildingConfig',
    'ElevatorConfig',
    'DoorConfig',
    'ScriptStep',
    'SCRIPT_COMMANDS',

    # Runtime settings
    'Settings',

    # Loader
    'ConfigLoader',
    'load_group_control_config',
    'load_simulation_config',
    'save_group_control_config',
    'save_simulation_config',
]
