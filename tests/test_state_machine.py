import math

import numpy as np
import pytest
import yaml

from policydeploy import orientation
from policydeploy.config import RobotConfig
from policydeploy.listener import KeyState
from policydeploy.state_machine import StateMachine
from policydeploy.types import Action


def make_config(tmp_path, **overrides):
    data = {
        "num_actions": 2,
        "num_obs": 17,
        "simulation_duration": 1.0,
        "simulation_dt": 0.001,
        "control_decimation": 1,
        "kps": [10.0, 20.0],
        "kds": [1.0, 2.0],
        "default_angles": [0.0, 0.0],
        "cmd_scale": [1.0, 1.0, 1.0],
        "cmd_init": [0.0, 0.0, 0.0],
        "ang_vel_scale": 1.0,
        "dof_pos_scale": 1.0,
        "dof_vel_scale": 1.0,
        "action_scale": 1.0,
        "policy_path": "policy.pt",
        "xml_path": "robot.xml",
        "robot_name": "g1",
        "world_type": "plain",
        "urdf_path": "robot.urdf",
        "homing_timesteps": 10,
        "init_base_position": [0.0, 0.0, 1.0],
        "init_base_orientation": [1.0, 0.0, 0.0, 0.0],
    }
    data.update(overrides)
    cfg_dir = tmp_path / "config"
    cfg_dir.mkdir()
    path = cfg_dir / "robot.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return RobotConfig(path)


@pytest.fixture
def machine(tmp_path):
    sm = StateMachine(make_config(tmp_path))
    sm.set_input(KeyState(), None)
    return sm


def press(sm, key, times=1):
    sm.key_state.set(key)
    for _ in range(times):
        sm.update_commands()


def test_initial_state(machine):
    assert machine.joint_num == 2
    assert machine.robot_state.motor_position.shape == (2,)
    assert np.all(machine.robot_state.target_velocity == 0)


def test_cmd_init_sets_target_velocity(tmp_path):
    sm = StateMachine(make_config(tmp_path, cmd_init=[0.5, 0.0, 0.0]))
    np.testing.assert_allclose(sm.robot_state.target_velocity, [0.5, 0.0, 0.0])


def test_forward_key(machine):
    press(machine, "w")
    np.testing.assert_allclose(machine.robot_state.target_velocity, [0.1, 0.0, 0.0], atol=1e-6)


def test_forward_velocity_is_capped(machine):
    press(machine, "w", 15)
    assert machine.robot_state.target_velocity[0] == pytest.approx(1.0)


def test_lateral_velocity_is_capped(machine):
    press(machine, "a", 6)
    assert machine.robot_state.target_velocity[1] == pytest.approx(0.3)
    press(machine, "d", 12)
    assert machine.robot_state.target_velocity[1] == pytest.approx(-0.3)


def test_opposite_keys_cancel_to_zero(machine):
    press(machine, "w")
    assert machine.robot_state.target_velocity[0] == pytest.approx(0.1)
    press(machine, "s")
    np.testing.assert_array_equal(machine.robot_state.target_velocity, [0.0, 0.0, 0.0])
    assert float(np.linalg.norm(machine.robot_state.target_velocity)) == 0.0


def test_unknown_key_changes_nothing(machine):
    press(machine, "x")
    assert np.all(machine.robot_state.target_velocity == 0)
    assert machine.yaw_target == 0.0


def test_yaw_rate_is_limited(machine):
    press(machine, "q", 10)
    assert machine.robot_state.target_omega[2] == pytest.approx(0.4)
    press(machine, "e", 20)
    assert machine.robot_state.target_omega[2] == pytest.approx(-0.4)


def test_yaw_target_stays_wrapped(machine):
    machine.yaw_target = math.pi - 0.05
    press(machine, "q")
    assert -math.pi <= machine.yaw_target <= math.pi
    assert machine.yaw_target < 0


def test_no_yaw_error_gives_zero_omega(machine):
    machine.yaw_target = 0.2
    machine.update_commands()
    assert machine.robot_state.target_omega[2] == pytest.approx(0.3)
    machine.gyro_states.rpy = [0.0, 0.0, 0.2]
    machine.parse_robot_states()
    machine.update_commands()
    np.testing.assert_array_equal(machine.robot_state.target_omega, [0.0, 0.0, 0.0])
    assert machine.yaw_target == pytest.approx(0.2)


def test_parse_copies_joint_readings(machine):
    machine.motor_states.position[:2] = [0.5, -0.5]
    machine.motor_states.velocity[:2] = [1.0, 2.0]
    machine.motor_states.timestamp = 1234
    machine.parse_robot_states()
    state = machine.robot_state
    np.testing.assert_allclose(state.motor_position, [0.5, -0.5])
    np.testing.assert_allclose(state.motor_velocity, [1.0, 2.0])
    assert state.timestamp == 1234


def test_parse_identity_orientation(machine):
    machine.parse_robot_states()
    np.testing.assert_allclose(machine.robot_state.base_rot_mat, np.eye(3), atol=1e-6)
    np.testing.assert_allclose(machine.robot_state.base_quat, [1.0, 0.0, 0.0, 0.0], atol=1e-6)


def test_parse_orientation_and_world_rate(machine):
    rpy = np.array([0.1, -0.2, 0.7], dtype=np.float32)
    machine.gyro_states.rpy = rpy
    machine.gyro_states.rpy_rate = [0.3, 0.0, -0.4]
    machine.parse_robot_states()
    state = machine.robot_state
    np.testing.assert_allclose(state.base_rot_mat, orientation.rpy_to_rot_mat(rpy), atol=1e-6)
    np.testing.assert_allclose(
        np.linalg.norm(state.base_rpy_rate_w), np.linalg.norm(state.base_rpy_rate), atol=1e-6
    )


def test_pack_robot_action(machine):
    machine.robot_action = Action(
        motor_position=np.array([0.1, 0.2], dtype=np.float32),
        motor_velocity=np.array([0.3, 0.4], dtype=np.float32),
        motor_torque=np.array([0.5, 0.6], dtype=np.float32),
        kp=np.array([10.0, 20.0], dtype=np.float32),
        kd=np.array([1.0, 2.0], dtype=np.float32),
        timestamp=77,
    )
    machine.pack_robot_action()
    targets = machine.motor_targets
    np.testing.assert_allclose(targets.position[:2], [0.1, 0.2])
    np.testing.assert_allclose(targets.kd[:2], [1.0, 2.0])
    assert targets.timestamp == 77
    assert np.all(targets.position[2:] == 0)


class CountingMachine(StateMachine):
    def __init__(self, cfg):
        super().__init__(cfg)
        self.steps = 0

    def step(self):
        self.steps += 1
        if self.steps == 3:
            self.stop()


def test_run_steps_until_stopped(tmp_path):
    sm = CountingMachine(make_config(tmp_path))
    sm.run()
    assert sm.steps == 3
    assert sm.is_running is False