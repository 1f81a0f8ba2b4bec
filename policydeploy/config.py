"""Robot deployment configuration loaded from YAML."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import yaml


class ConfigError(ValueError):
    """A configuration entry is missing or has the wrong type."""


_MISSING = object()


def _lookup(data: dict, key: str):
    value = data.get(key, _MISSING)
    if value is _MISSING:
        raise ConfigError(f"missing configuration key: {key!r}")
    return value


def _as_int(value, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key!r} must be an integer, got {value!r}")
    return value


def _as_float(value, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key!r} must be a number, got {value!r}")
    return float(value)


def _as_bool(value, key: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{key!r} must be a boolean, got {value!r}")
    return value


def _as_str(value, key: str) -> str:
    if value is None or isinstance(value, (list, dict)):
        raise ConfigError(f"{key!r} must be a scalar, got {value!r}")
    return str(value)


def _as_vector(value, key: str, size: int | None = None) -> np.ndarray:
    if not isinstance(value, list):
        raise ConfigError(f"{key!r} must be a list of numbers, got {value!r}")
    numbers = [_as_float(item, key) for item in value]
    if size is not None:
        if len(numbers) < size:
            raise ConfigError(f"{key!r} needs {size} elements, got {len(numbers)}")
        numbers = numbers[:size]
    return np.array(numbers, dtype=np.float32)


class RobotConfig:
    """Controller, policy and simulation settings for one robot.

    Relative paths in the file are joined to ``root_dir``, which defaults to
    the parent of the directory holding the YAML file.
    """

    def __init__(self, yaml_path, root_dir=None):
        path = Path(yaml_path)
        with path.open(encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
        if not isinstance(data, dict):
            raise ConfigError(f"{path} does not hold a mapping")
        self._root = data
        if root_dir is None:
            root_dir = path.resolve().parent.parent
        root = str(root_dir)

        def get(key):
            return _lookup(data, key)

        self.num_actions = _as_int(get("num_actions"), "num_actions")
        self.num_obs = _as_int(get("num_obs"), "num_obs")
        self.simulation_duration = _as_float(get("simulation_duration"), "simulation_duration")
        self.simulation_dt = _as_float(get("simulation_dt"), "simulation_dt")
        self.control_decimation = _as_int(get("control_decimation"), "control_decimation")

        self.kp = _as_vector(get("kps"), "kps")
        self.kd = _as_vector(get("kds"), "kds")
        self.default_angles = _as_vector(get("default_angles"), "default_angles")

        self.cmd_scale = _as_vector(get("cmd_scale"), "cmd_scale", 3)
        self.cmd_init = _as_vector(get("cmd_init"), "cmd_init", 3)

        self.ang_vel_scale = _as_float(get("ang_vel_scale"), "ang_vel_scale")
        self.dof_pos_scale = _as_float(get("dof_pos_scale"), "dof_pos_scale")
        self.dof_vel_scale = _as_float(get("dof_vel_scale"), "dof_vel_scale")
        self.action_scale = _as_float(get("action_scale"), "action_scale")

        self.policy_path = f"{root}/{_as_str(get('policy_path'), 'policy_path')}"
        self.xml_path = f"{root}/{_as_str(get('xml_path'), 'xml_path')}"

        self.robot_name = _as_str(get("robot_name"), "robot_name")
        self.on_rack = _as_bool(data["on_rack"], "on_rack") if "on_rack" in data else False
        self.world_type = _as_str(get("world_type"), "world_type")
        self.urdf_path = _as_str(get("urdf_path"), "urdf_path")
        self.homing_timesteps = _as_int(get("homing_timesteps"), "homing_timesteps")

        empty = np.zeros(0, dtype=np.float32)
        self.homing_pos = empty.copy()
        self.homing_kp = empty.copy()
        self.homing_kd = empty.copy()
        if "homing" in data:
            homing = data["homing"]
            if not isinstance(homing, dict):
                raise ConfigError("'homing' must be a mapping")
            self.homing_pos = _as_vector(_lookup(homing, "pos"), "homing.pos")
            self.homing_kp = _as_vector(_lookup(homing, "kp"), "homing.kp")
            self.homing_kd = _as_vector(_lookup(homing, "kd"), "homing.kd")

        self.init_base_position = _as_vector(get("init_base_position"), "init_base_position", 3)
        self.init_base_orientation = _as_vector(
            get("init_base_orientation"), "init_base_orientation", 4
        )

    def raw(self) -> dict:
        """The parsed YAML document."""
        return self._root

    def policy_dt(self) -> float:
        """Control period: simulation step times control decimation."""
        return float(np.float32(self.simulation_dt) * np.float32(self.control_decimation))