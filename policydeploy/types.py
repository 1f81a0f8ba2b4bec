"""Robot state, action and shared sensor/command buffers."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

SLAVE_NUMBER = 64
SLAVE_NUMBER_TRIPLE = SLAVE_NUMBER * 3
SCOPE_SIZE = 200

XBOX_TYPE_BUTTON = 0x01
XBOX_TYPE_AXIS = 0x02
XBOX_BUTTON_A = 0x00
XBOX_BUTTON_B = 0x01
XBOX_BUTTON_X = 0x02
XBOX_BUTTON_Y = 0x03
XBOX_BUTTON_LB = 0x04
XBOX_BUTTON_RB = 0x05
XBOX_BUTTON_START = 0x06
XBOX_BUTTON_BACK = 0x07
XBOX_BUTTON_HOME = 0x08
XBOX_BUTTON_LO = 0x09
XBOX_BUTTON_RO = 0x0A
XBOX_BUTTON_ON = 0x01
XBOX_BUTTON_OFF = 0x00
XBOX_AXIS_LX = 0x00
XBOX_AXIS_LY = 0x01
XBOX_AXIS_RX = 0x03
XBOX_AXIS_RY = 0x04
XBOX_AXIS_LT = 0x02
XBOX_AXIS_RT = 0x05
XBOX_AXIS_XX = 0x06
XBOX_AXIS_YY = 0x07
XBOX_AXIS_VAL_MIN = -32767
XBOX_AXIS_VAL_MAX = 32767
XBOX_AXIS_VAL_MID = 0x00
XBOX_AXIS_VAL_UP = XBOX_AXIS_VAL_MIN
XBOX_AXIS_VAL_DOWN = XBOX_AXIS_VAL_MAX
XBOX_AXIS_VAL_LEFT = XBOX_AXIS_VAL_MIN
XBOX_AXIS_VAL_RIGHT = XBOX_AXIS_VAL_MAX


def _zeros(*shape: int) -> np.ndarray:
    return np.zeros(shape, dtype=np.float32)


def _vec(values: np.ndarray) -> str:
    return " ".join(f"{float(x):g}" for x in np.ravel(values))


@dataclass
class State:
    """Current robot state: base pose and rates, joint readings and command targets."""

    base_position: np.ndarray = field(default_factory=lambda: _zeros(3))
    base_velocity: np.ndarray = field(default_factory=lambda: _zeros(3))
    base_rot_mat: np.ndarray = field(default_factory=lambda: _zeros(3, 3))
    base_acc: np.ndarray = field(default_factory=lambda: _zeros(3))
    base_rpy: np.ndarray = field(default_factory=lambda: _zeros(3))
    base_quat: np.ndarray = field(default_factory=lambda: _zeros(4))
    base_rpy_rate: np.ndarray = field(default_factory=lambda: _zeros(3))
    foot_force: np.ndarray = field(default_factory=lambda: _zeros(3, 2))
    motor_position: np.ndarray = field(default_factory=lambda: _zeros(0))
    motor_velocity: np.ndarray = field(default_factory=lambda: _zeros(0))
    motor_torque: np.ndarray = field(default_factory=lambda: _zeros(0))
    base_velocity_w: np.ndarray = field(default_factory=lambda: _zeros(3))
    base_rpy_rate_w: np.ndarray = field(default_factory=lambda: _zeros(3))
    target_velocity: np.ndarray = field(default_factory=lambda: _zeros(3))
    target_omega: np.ndarray = field(default_factory=lambda: _zeros(3))
    timestamp: int = 0
    phase_value: float = 0.0

    def __str__(self) -> str:
        return (
            f"[State] t={self.timestamp}, phase={self.phase_value:g}\n"
            f"  pos={_vec(self.base_position)}, vel={_vec(self.base_velocity)}\n"
            f"  rpy={_vec(self.base_rpy)}, quat={_vec(self.base_quat)}\n"
            f"  target_vel={_vec(self.target_velocity)}, "
            f"target_omega={_vec(self.target_omega)}"
        )


@dataclass
class Action:
    """Joint targets and PD gains sent to the robot."""

    motor_position: np.ndarray = field(default_factory=lambda: _zeros(0))
    motor_velocity: np.ndarray = field(default_factory=lambda: _zeros(0))
    motor_torque: np.ndarray = field(default_factory=lambda: _zeros(0))
    kp: np.ndarray = field(default_factory=lambda: _zeros(0))
    kd: np.ndarray = field(default_factory=lambda: _zeros(0))
    timestamp: int = 0

    def __str__(self) -> str:
        return (
            f"[Action] t={self.timestamp}\n"
            f"  pos={_vec(self.motor_position)}, vel={_vec(self.motor_velocity)}, "
            f"torque={_vec(self.motor_torque)}"
        )


def _row(index: int, doc: str) -> property:
    def getter(self) -> np.ndarray:
        return self.buffer[index]

    def setter(self, value) -> None:
        self.buffer[index] = value

    return property(getter, setter, doc=doc)


@dataclass
class GyroData:
    """IMU reading; rpy, acc and rpy_rate are rows of one 3x3 buffer."""

    buffer: np.ndarray = field(default_factory=lambda: _zeros(3, 3))
    timestamp: int = 0

    rpy = _row(0, "Roll, pitch and yaw angles.")
    acc = _row(1, "Linear acceleration.")
    rpy_rate = _row(2, "Angular rate.")


@dataclass
class JointStateData:
    """Joint readings for up to SLAVE_NUMBER joints, backed by one 3xN buffer."""

    buffer: np.ndarray = field(default_factory=lambda: _zeros(3, SLAVE_NUMBER))
    timestamp: int = 0

    position = _row(0, "Joint positions.")
    velocity = _row(1, "Joint velocities.")
    ampere = _row(2, "Joint currents or torque estimates.")


@dataclass
class JointTargetData:
    """Joint targets and gains for up to SLAVE_NUMBER joints, backed by one 5xN buffer."""

    buffer: np.ndarray = field(default_factory=lambda: _zeros(5, SLAVE_NUMBER))
    timestamp: int = 0

    position = _row(0, "Target positions.")
    velocity = _row(1, "Target velocities.")
    ampere = _row(2, "Feed-forward torques.")
    kp = _row(3, "Proportional gains.")
    kd = _row(4, "Derivative gains.")


@dataclass
class JoystickData:
    """Joystick sticks, triggers and buttons."""

    is_alive: bool = False
    joy_left: np.ndarray = field(default_factory=lambda: _zeros(2))
    joy_right: np.ndarray = field(default_factory=lambda: _zeros(2))
    pad: np.ndarray = field(default_factory=lambda: _zeros(2))
    trigger_left: float = 0.0
    trigger_right: float = 0.0
    button_a: bool = False
    button_b: bool = False
    button_x: bool = False
    button_y: bool = False
    button_start: bool = False
    shoulder_left: bool = False
    shoulder_right: bool = False


def zero_state(joint_num: int, leg_num: int = 2) -> State:
    """Return a state with every quantity zero for the given joint and leg counts."""
    return State(
        foot_force=_zeros(3, leg_num),
        motor_position=_zeros(joint_num),
        motor_velocity=_zeros(joint_num),
        motor_torque=_zeros(joint_num),
    )


def zero_action(joint_num: int) -> Action:
    """Return an action with zero targets and gains."""
    return Action(
        motor_position=_zeros(joint_num),
        motor_velocity=_zeros(joint_num),
        motor_torque=_zeros(joint_num),
        kp=_zeros(joint_num),
        kd=_zeros(joint_num),
    )


def zero_joystick() -> JoystickData:
    """Return an idle joystick reading."""
    return JoystickData()