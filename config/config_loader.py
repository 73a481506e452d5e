"""
Configuration loader utility

Loads SimulationConfig and GroupControlConfig from YAML files.
"""

import yaml
from pathlib import Path
from typing import Union

from .group_control import GroupControlConfig
from .simulation import SimulationConfig


PathLike = Union[str, Path]


class ConfigLoader:
    """Utility class for loading and saving configuration files"""

    @staticmethod
    def _read_yaml(file_path: PathLike) -> dict:
        """
        Read a YAML mapping

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the document is not a mapping
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {file_path}")

        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        # An empty file means "all defaults"
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {file_path} must contain a mapping, got {type(data).__name__}")
        return data

    @staticmethod
    def _write_yaml(data: dict, file_path: PathLike):
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    @staticmethod
    def load_simulation(file_path: PathLike) -> SimulationConfig:
        """
        Load SimulationConfig from YAML file

        Args:
            file_path: Path to YAML file

        Returns:
            SimulationConfig instance

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If validation fails
        """
        config = SimulationConfig.from_dict(ConfigLoader._read_yaml(file_path))
        config.validate()
        return config

    @staticmethod
    def load_group_control(file_path: PathLike) -> GroupControlConfig:
        """
        Load GroupControlConfig from YAML file

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If validation fails
        """
        config = GroupControlConfig.from_dict(ConfigLoader._read_yaml(file_path))
        config.validate()
        return config

    @staticmethod
    def save_simulation(config: SimulationConfig, file_path: PathLike):
        ConfigLoader._write_yaml(config.to_dict(), file_path)

    @staticmethod
    def save_group_control(config: GroupControlConfig, file_path: PathLike):
        ConfigLoader._write_yaml(config.to_dict(), file_path)


# Convenience functions
def load_simulation_config(file_path: PathLike) -> SimulationConfig:
    """Load SimulationConfig from YAML file"""
    return ConfigLoader.load_simulation(file_path)


def load_group_control_config(file_path: PathLike) -> GroupControlConfig:
    """Load GroupControlConfig from YAML file"""
    return ConfigLoader.load_group_control(file_path)


def save_simulation_config(config: SimulationConfig, file_path: PathLike):
    """Save SimulationConfig to YAML file"""
    ConfigLoader.save_simulation(config, file_path)


def save_group_control_config(config: GroupControlConfig, file_path: PathLike):
    """Save GroupControlConfig to YAML file"""
    ConfigLoader.save_group_control(config, file_path)
