"""Policy-driven controller that builds observations and maps network output to joint targets."""

from __future__ import annotations

import math
from typing import Callable

import numpy as np

from . import logger
from .config import RobotConfig
from .types import Action, State, zero_action

PHASE_PERIOD = 0.8
WARMUP_RUNS = 10

Policy = Callable[[np.ndarray], np.ndarray]


def gravity_orientation(quat) -> np.ndarray:
    """Gravity direction in the body frame for a WXYZ base quaternion."""
    q = np.asarray(quat, dtype=np.float32).ravel()
    if q.size != 4:
        raise ValueError(f"quaternion must have 4 elements, got {q.size}")
    qw, qx, qy, qz = q
    return np.array(
        [
            2.0 * (-qz * qx + qw * qy),
            -2.0 * (qz * qy + qw * qx),
            1.0 - 2.0 * (qw * qw + qz * qz),
        ],
        dtype=np.float32,
    )


def _f32(values) -> np.ndarray:
    return np.array(values, dtype=np.float32)


class NeuralController:
    """Holds the latest robot state and the buffers a policy needs."""

    def __init__(self, cfg: RobotConfig):
        self.cfg = cfg
        self.obs_dim = cfg.num_obs
        self.act_dim = cfg.num_actions
        self.num_motors = cfg.num_actions
        self.simulation_time = 0

        self.base_vel_w = np.zeros(3, dtype=np.float32)
        self.base_omega_w = np.zeros(3, dtype=np.float32)
        self.base_rpy = np.zeros(3, dtype=np.float32)
        self.base_rot_mat = np.zeros((3, 3), dtype=np.float32)
        self.base_quat = np.zeros(4, dtype=np.float32)
        self.foot_force = np.zeros((3, 2), dtype=np.float32)

        self.joint_torque = np.zeros(self.num_motors, dtype=np.float32)
        self.joint_pos = np.zeros(self.num_motors, dtype=np.float32)
        self.joint_vel = np.zeros(self.num_motors, dtype=np.float32)

        self.base_lin_vel_target = np.zeros(3, dtype=np.float32)
        self.base_ang_vel_target = np.zeros(3, dtype=np.float32)
        self.cur_vel_targ = np.zeros(3, dtype=np.float32)
        self.cur_omega_targ = np.zeros(3, dtype=np.float32)

        self.observation = np.zeros(self.obs_dim, dtype=np.float32)
        self.action = np.zeros(self.act_dim, dtype=np.float32)
        self.action_prev = np.zeros(self.act_dim, dtype=np.float32)

        self.kp = _f32(cfg.kp)
        self.kd = _f32(cfg.kd)

    def load_robot_state(self, robot_state: State) -> None:
        """Copy the parts of the state the policy uses and rotate the command targets."""
        self.simulation_time = robot_state.timestamp
        self.base_vel_w = _f32(robot_state.base_velocity_w)
        self.base_omega_w = _f32(robot_state.base_rpy_rate_w)
        self.base_rpy = _f32(robot_state.base_rpy)
        self.base_rot_mat = _f32(robot_state.base_rot_mat)
        self.base_quat = _f32(robot_state.base_quat)
        self.foot_force = _f32(robot_state.foot_force)
        self.joint_torque = _f32(robot_state.motor_torque)
        self.joint_pos = _f32(robot_state.motor_position)
        self.joint_vel = _f32(robot_state.motor_velocity)
        self.base_lin_vel_target = _f32(robot_state.target_velocity)
        self.base_ang_vel_target = _f32(robot_state.target_omega)
        self.cur_vel_targ = self.base_rot_mat @ self.base_lin_vel_target
        self.cur_omega_targ = self.base_rot_mat @ self.base_ang_vel_target

    def construct_action(self, joint_pos_target) -> Action:
        """Wrap joint position targets with the configured gains."""
        action = zero_action(self.num_motors)
        action.timestamp = self.simulation_time
        action.motor_position = _f32(joint_pos_target)
        action.kp = self.kp.copy()
        action.kd = self.kd.copy()
        return action


class PolicyWrapper(NeuralController):
    """Runs a policy callable on observations built from the robot state.

    The policy receives a float32 array of shape (1, num_obs) and returns
    at least num_actions values.
    """

    def __init__(self, cfg: RobotConfig, policy: Policy):
        super().__init__(cfg)
        self.policy = policy
        warmup_input = np.ones((1, self.obs_dim), dtype=np.float32)
        for i in range(WARMUP_RUNS):
            raw = np.asarray(self.policy(warmup_input.copy()), dtype=np.float32)
            flat = self._check_output(raw)
            if i < 3:
                sample = flat[1] if flat.size > 1 else flat[0]
                logger.info(f"Warm up {i}th Action({list(raw.shape)}): {sample}")
        logger.info(f"[PolicyWrapper] jointNum: {self.num_motors}")
        self.joint_pos_target = np.zeros(self.num_motors, dtype=np.float32)
        self.action_prev = np.zeros(self.act_dim, dtype=np.float32)
        logger.info("[PolicyWrapper] Constructor Finished.")

    def _check_output(self, raw: np.ndarray) -> np.ndarray:
        flat = raw.ravel()
        if flat.size < self.act_dim:
            raise ValueError(
                f"policy returned {flat.size} values, expected at least {self.act_dim}"
            )
        return flat

    def update_observation(self, robot_state: State) -> None:
        """Build the observation vector from the state, previous action and gait phase."""
        required = 9 + 3 * self.act_dim + 2
        if self.obs_dim < required:
            raise ValueError(f"num_obs is {self.obs_dim}, observation needs {required}")
        self.load_robot_state(robot_state)

        t_sec = np.float32(self.simulation_time) / np.float32(1e6)
        period = np.float32(PHASE_PERIOD)
        phase = float(np.fmod(t_sec, period) / period)
        sin_phase = math.sin(2 * math.pi * phase)
        cos_phase = math.cos(2 * math.pi * phase)

        cfg = self.cfg
        a = self.act_dim
        obs = np.zeros(self.obs_dim, dtype=np.float32)
        obs[0:3] = self.base_omega_w * np.float32(cfg.ang_vel_scale)
        obs[3:6] = gravity_orientation(self.base_quat)
        obs[6:9] = self.base_lin_vel_target * cfg.cmd_scale
        obs[9 : 9 + a] = (self.joint_pos - cfg.default_angles) * np.float32(cfg.dof_pos_scale)
        obs[9 + a : 9 + 2 * a] = self.joint_vel * np.float32(cfg.dof_vel_scale)
        obs[9 + 2 * a : 9 + 3 * a] = self.action_prev
        obs[9 + 3 * a] = sin_phase
        obs[9 + 3 * a + 1] = cos_phase
        self.observation = obs

    def get_control_action(self, robot_state: State) -> Action:
        """Run the policy and turn its output into joint position targets."""
        self.update_observation(robot_state)
        policy_input = self.observation.reshape(1, self.obs_dim).copy()
        raw = np.asarray(self.policy(policy_input), dtype=np.float32)
        self.action = self._check_output(raw)[: self.act_dim].copy()
        self.joint_pos_target = (
            self.action * np.float32(self.cfg.action_scale) + self.cfg.default_angles
        ).astype(np.float32)
        result = self.construct_action(self.joint_pos_target)
        self.action_prev = self.action.copy()
        return result