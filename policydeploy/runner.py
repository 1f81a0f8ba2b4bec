"""Control loop that homes the robot and then hands control to a policy."""

from __future__ import annotations

import numpy as np

from . import logger
from .config import RobotConfig
from .controller import ResetController
from .neural import Policy, PolicyWrapper
from .state_machine import StateMachine

ACTIVATE_KEY = " "


class NeuralRunner(StateMachine):
    """Runs the homing controller until a space key press switches to the policy."""

    def __init__(self, cfg: RobotConfig, policy: Policy, policy_active: bool = True):
        super().__init__(cfg)
        logger.info("NeuralRunner init")
        logger.info(f"[FSM.init] KP_home = {cfg.homing_kp}")
        logger.info(f"[FSM.init] KD_home = {cfg.homing_kd}")
        logger.info(f"[FSM.init] Pos_home = {cfg.homing_pos}")

        self.homing_controller = ResetController(
            cfg.homing_pos, cfg.homing_timesteps, cfg.policy_dt()
        )
        self.homing_controller.set_pd_gains(cfg.homing_kp, cfg.homing_kd)
        self.neural_controller = PolicyWrapper(cfg, policy)
        self.policy_active = policy_active

    def _activation_requested(self) -> bool:
        return (
            self.homing_controller.is_complete()
            and not self.policy_active
            and self._current_key() == ACTIVATE_KEY
        )

    def step(self) -> None:
        """Read sensors, pick the active controller, and publish its joint targets."""
        self.parse_robot_states()

        if self._activation_requested():
            self.policy_active = True
            self.yaw_target = float(self.robot_state.base_rpy[2])
            self.robot_state.target_velocity = np.zeros(3, dtype=np.float32)

        self.update_commands()

        if self.policy_active:
            self.robot_action = self.neural_controller.get_control_action(self.robot_state)
        else:
            self.robot_action = self.homing_controller.get_control_action(self.robot_state)

        self.pack_robot_action()

        if self.key_state is not None and self.key_state.get():
            self.key_state.clear()

    def stop(self) -> None:
        self.is_running = False