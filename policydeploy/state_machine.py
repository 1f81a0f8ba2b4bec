"""Fixed-rate control loop turning sensor buffers and key commands into joint targets."""

from __future__ import annotations

import math

import numpy as np

from . import logger
from .config import RobotConfig
from .listener import KeyState
from .mathutil import clip
from .orientation import rpy_to_quat, rpy_to_rot_mat
from .timer import Timer
from .types import (
    GyroData,
    JointStateData,
    JointTargetData,
    JoystickData,
    zero_action,
    zero_state,
)

MAX_VEL_CMD = np.array([1.0, 0.3, 0.0], dtype=np.float32)
YAW_GAIN = 1.5
MAX_YAW_RATE = 0.4
DEADBAND = 1e-2

# key -> (linear velocity increment, yaw increment, description)
_KEY_COMMANDS = {
    "w": ((0.1, 0.0, 0.0), 0.0, "Forward +0.1"),
    "s": ((-0.1, 0.0, 0.0), 0.0, "Backward -0.1"),
    "a": ((0.0, 0.1, 0.0), 0.0, "Left +0.1"),
    "d": ((0.0, -0.1, 0.0), 0.0, "Right -0.1"),
    "q": ((0.0, 0.0, 0.0), 0.1, "Turn left +0.1 rad"),
    "e": ((0.0, 0.0, 0.0), -0.1, "Turn right -0.1 rad"),
}


class StateMachine:
    """Reads shared sensor buffers, updates commands and writes joint targets each step."""

    def __init__(self, cfg: RobotConfig):
        self.cfg = cfg
        self.motor_targets = JointTargetData()
        self.motor_states = JointStateData()
        self.gyro_states = GyroData()
        self.key_state: KeyState | None = None
        self.joystick: JoystickData | None = None

        self.filters_enabled = False
        self.is_running = True
        self.policy_dt = cfg.policy_dt()
        self.joint_num = cfg.num_actions
        self.yaw_target = 0.0

        self.robot_state = zero_state(self.joint_num)
        self.robot_action = zero_action(self.joint_num)

        cmd_init = np.asarray(cfg.cmd_init, dtype=np.float32)
        if np.any(cmd_init != 0):
            self.robot_state.target_velocity = cmd_init.copy()
            logger.info(f"Initial target velocity: {self.robot_state.target_velocity}")

    def run(self) -> None:
        """Call step() once per policy period until stopped."""
        timer = Timer(self.policy_dt)
        while self.is_running:
            self.step()
            timer.wait()

    def step(self) -> None:
        """One control cycle; the base machine does nothing."""

    def stop(self) -> None:
        self.is_running = False

    def set_input(self, key: KeyState | None, joy: JoystickData | None) -> None:
        """Attach the keyboard and joystick inputs."""
        self.key_state = key
        self.joystick = joy

    def parse_robot_states(self) -> None:
        """Copy joint and IMU readings into robot_state and derive the base orientation."""
        n = self.joint_num
        state = self.robot_state
        motors = self.motor_states
        gyro = self.gyro_states
        state.timestamp = motors.timestamp
        state.motor_position = motors.position[:n].astype(np.float32)
        state.motor_velocity = motors.velocity[:n].astype(np.float32)
        state.motor_torque = motors.ampere[:n].astype(np.float32)

        state.base_rpy = gyro.rpy.astype(np.float32)
        state.base_rpy_rate = gyro.rpy_rate.astype(np.float32)
        state.base_acc = gyro.acc.astype(np.float32)

        state.base_rot_mat = rpy_to_rot_mat(state.base_rpy).astype(np.float32)
        state.base_quat = rpy_to_quat(state.base_rpy).astype(np.float32)
        state.base_rpy_rate_w = (state.base_rot_mat.T @ state.base_rpy_rate).astype(np.float32)

    def _current_key(self) -> str:
        return self.key_state.get() if self.key_state is not None else ""

    def update_commands(self) -> None:
        """Adjust target velocity and yaw from the pressed key and steer yaw rate toward the target."""
        state = self.robot_state
        key = self._current_key()
        if key:
            lin, yaw_step, label = _KEY_COMMANDS.get(key, ((0.0, 0.0, 0.0), 0.0, ""))
            delta_lin = np.array(lin, dtype=np.float32)
            if label:
                logger.info(f"[KEYBOARD] Pressed '{key}' → {label}")

            if np.linalg.norm(delta_lin) > DEADBAND:
                target = np.asarray(state.target_velocity, dtype=np.float32) + delta_lin
                target = np.maximum(np.minimum(target, MAX_VEL_CMD), -MAX_VEL_CMD)
                if np.linalg.norm(target) < DEADBAND:
                    target = np.zeros(3, dtype=np.float32)
                state.target_velocity = target.astype(np.float32)
                logger.info(f"[KEYBOARD] Updated target velocity: {state.target_velocity}")

            if abs(yaw_step) > DEADBAND:
                self.yaw_target += yaw_step
                self.yaw_target = math.fmod(self.yaw_target + math.pi, 2 * math.pi) - math.pi
                logger.info(f"[KEYBOARD] Updated yawTarg: {self.yaw_target}")

            if self.yaw_target > math.pi:
                self.yaw_target -= 2 * math.pi
            elif self.yaw_target < -math.pi:
                self.yaw_target += 2 * math.pi

        omega = np.asarray(state.target_omega, dtype=np.float32).copy()
        delta_yaw = self.yaw_target - float(state.base_rpy[2])
        omega[2] = clip(YAW_GAIN * delta_yaw, MAX_YAW_RATE, -MAX_YAW_RATE)
        if np.linalg.norm(omega) < DEADBAND:
            omega[:] = 0.0
        state.target_omega = omega

    def pack_robot_action(self) -> None:
        """Write robot_action into the shared joint target buffer."""
        n = self.joint_num
        action = self.robot_action
        targets = self.motor_targets
        targets.timestamp = action.timestamp
        targets.position[:n] = np.asarray(action.motor_position, dtype=np.float32)[:n]
        targets.velocity[:n] = np.asarray(action.motor_velocity, dtype=np.float32)[:n]
        targets.ampere[:n] = np.asarray(action.motor_torque, dtype=np.float32)[:n]
        targets.kp[:n] = np.asarray(action.kp, dtype=np.float32)[:n]
        targets.kd[:n] = np.asarray(action.kd, dtype=np.float32)[:n]