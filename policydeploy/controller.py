"""Controller interface and a homing controller that eases joints to a pose."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from . import logger
from .cubic import CubicInterp
from .types import Action, State, zero_state


def _float_vector(values) -> np.ndarray:
    return np.array(values, dtype=np.float32).ravel()


class Controller(ABC):
    """Common state and PD gains shared by every controller."""

    def __init__(self, num_motors: int = 28):
        self.num_motors = int(num_motors)
        self.is_logging = False
        self.is_stopped = False
        self.curr_idx = 0
        self.simulation_time = 0
        self.kp = np.full(self.num_motors, 100, dtype=np.float32)
        self.kd = np.full(self.num_motors, 2, dtype=np.float32)
        self.base_lin_vel_target = np.zeros(3, dtype=np.float32)
        self.base_ang_vel_target = np.zeros(3, dtype=np.float32)
        self._robot_state = zero_state(self.num_motors)

    @abstractmethod
    def reset(self) -> None:
        """Return the controller to its starting condition."""

    @abstractmethod
    def is_complete(self) -> bool:
        """True once the controller has finished its task."""

    def stop(self) -> None:
        """Mark the controller as stopped."""
        self.is_stopped = True

    @abstractmethod
    def get_control_action(self, robot_state: State) -> Action:
        """Compute the action for the given robot state."""

    def start_logging(self) -> None:
        self.is_logging = True

    def stop_logging(self) -> None:
        self.is_logging = False

    def set_base_vel_target(self, lin, ang) -> None:
        """Set the commanded base linear and angular velocity."""
        self.base_lin_vel_target = _float_vector(lin)
        self.base_ang_vel_target = _float_vector(ang)

    def set_pd_gains(self, kp, kd) -> None:
        """Replace the proportional and derivative gains."""
        self.kp = _float_vector(kp)
        self.kd = _float_vector(kd)

    def send_time(self, t) -> None:
        """Record the current simulation time."""
        self.simulation_time = int(t)


class ResetController(Controller):
    """Moves the joints from their current position to a final pose along a cubic trajectory."""

    def __init__(self, final_motor_position, max_timesteps: int, dt: float):
        final = _float_vector(final_motor_position)
        super().__init__(final.size)
        self._max_timesteps = self._check_timesteps(max_timesteps)
        self._final_position = final
        self._dt = np.float32(dt)
        self._timestep = 0
        self._first_visit = True
        self._trajectory = CubicInterp(self.num_motors, dtype=np.float32)

    @staticmethod
    def _check_timesteps(max_timesteps) -> int:
        steps = int(max_timesteps)
        if steps < 0:
            raise ValueError("max_timesteps must be non-negative")
        return steps

    def reset(self, final_motor_position=None, max_timesteps=None) -> None:
        """Restart the trajectory, optionally with a new final pose and duration."""
        if max_timesteps is not None:
            self._max_timesteps = self._check_timesteps(max_timesteps)
        if final_motor_position is not None:
            final = _float_vector(final_motor_position)
            if final.size != self.num_motors:
                raise ValueError(
                    f"final position has {final.size} joints, expected {self.num_motors}"
                )
            self._final_position = final
        self._timestep = 0
        self._first_visit = True

    def is_complete(self) -> bool:
        return self._timestep >= self._max_timesteps

    def _initialize_trajectory(self, robot_state: State) -> None:
        logger.info("Initializing Standup Traj: ")
        logger.info(f"ini:{np.asarray(robot_state.motor_position)}")
        logger.info(f"fin:{self._final_position}")
        self._trajectory.set_param(
            robot_state.motor_position,
            robot_state.motor_velocity,
            self._final_position,
            np.zeros(self.num_motors, dtype=np.float32),
            np.float32(self._max_timesteps) * self._dt,
        )

    def get_control_action(self, robot_state: State) -> Action:
        if self._first_visit:
            logger.debug(
                "[ResetCtrl] Initializing trajectory. with Pos: "
                f"{np.asarray(robot_state.motor_position)}"
            )
            self._initialize_trajectory(robot_state)
            self._first_visit = False

        step = min(self._timestep, self._max_timesteps)
        current_time = np.float32(step) * self._dt
        target_position = np.asarray(self._trajectory.curve_point(current_time), dtype=np.float32)
        self._timestep += 1
        return Action(
            motor_position=target_position,
            motor_velocity=np.zeros(self.num_motors, dtype=np.float32),
            motor_torque=np.zeros(self.num_motors, dtype=np.float32),
            kp=self.kp.copy(),
            kd=self.kd.copy(),
            timestamp=robot_state.timestamp,
        )