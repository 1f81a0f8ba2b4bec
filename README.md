# policydeploy

Building blocks for running a learned locomotion policy on a legged robot.

The package reads a robot description from a YAML file. It can bring the
joints to a home pose along a smooth cubic trajectory and then hand control to
a policy. The policy's observation is made from the base angular velocity, the
gravity direction, the scaled velocity command, the joint positions and
velocities, the previous action and a gait phase. A fixed-rate state machine
joins these parts, and keyboard input steers the robot while it runs.

## What is inside

| Module | Purpose |
| --- | --- |
| `policydeploy.types` | `State`, `Action`, `GyroData`, `JointStateData`, `JointTargetData`, `JoystickData`, and the `zero_state`, `zero_action` and `zero_joystick` helpers |
| `policydeploy.mathutil` | `square`, `clip`, `almost_equal`, `read_csv` |
| `policydeploy.cubic` | `CubicInterp`: a cubic curve for each joint, between two positions and two velocities |
| `policydeploy.orientation` | Rotation helpers: RPY, rotation matrices, quaternions (w, x, y, z), so(3) |
| `policydeploy.config` | `RobotConfig`, loaded from YAML; `ConfigError` for missing or mistyped entries |
| `policydeploy.controller` | `Controller` base class and `ResetController` for homing |
| `policydeploy.neural` | `NeuralController`, `PolicyWrapper` and `gravity_orientation` |
| `policydeploy.terminal` | `Console` and `Color`: ANSI cursor and colour output, single-key input |
| `policydeploy.listener` | `KeyState` and `Listener`, which poll the keyboard |
| `policydeploy.state_machine` | `StateMachine`, a fixed-rate loop between the sensor buffers and the joint target buffer |
| `policydeploy.runner` | `NeuralRunner`: the homing controller and the policy, chosen each step |
| `policydeploy.logger` | `info`, `warn`, `error`, `debug` with coloured, time-stamped prefixes |
| `policydeploy.timer` | `Timer` and `time_since_epoch_us` |

## Configuration

`RobotConfig` reads a YAML file with these keys:

```yaml
num_actions: 12
num_obs: 47
simulation_duration: 60.0
simulation_dt: 0.002
control_decimation: 10
kps: [100, 100, 100, 150, 40, 40, 100, 100, 100, 150, 40, 40]
kds: [2, 2, 2, 4, 2, 2, 2, 2, 2, 4, 2, 2]
default_angles: [-0.1, 0, 0, 0.3, -0.2, 0, -0.1, 0, 0, 0.3, -0.2, 0]
cmd_scale: [2.0, 2.0, 0.25]
cmd_init: [0.0, 0.0, 0.0]
ang_vel_scale: 0.25
dof_pos_scale: 1.0
dof_vel_scale: 0.05
action_scale: 0.25
policy_path: policy/motion.pt
xml_path: scene/scene.xml
robot_name: g1
on_rack: false            # optional, false if absent
world_type: plain
urdf_path: urdf/g1.urdf
homing_timesteps: 500
homing:                   # optional; empty vectors if absent
  pos: [-0.1, 0, 0, 0.3, -0.2, 0, -0.1, 0, 0, 0.3, -0.2, 0]
  kp:  [100, 100, 100, 150, 40, 40, 100, 100, 100, 150, 40, 40]
  kd:  [2, 2, 2, 4, 2, 2, 2, 2, 2, 4, 2, 2]
init_base_position: [0, 0, 0.79]
init_base_orientation: [1, 0, 0, 0]
```

A missing key or a value of the wrong type raises `ConfigError`.
`policy_path` and `xml_path` are joined to a root directory. This is the
`root_dir` argument if it is given, and otherwise the parent of the directory
that holds the YAML file.

The policy period is `simulation_dt * control_decimation`, computed in single
precision:

```python
from policydeploy.config import RobotConfig

cfg = RobotConfig("config/g1.yaml")
print(cfg.policy_dt())          # ≈ 0.02 for the file above
print(cfg.raw()["robot_name"])  # the parsed YAML document
```

## Smooth homing

`CubicInterp` fits `x(t) = a t³ + b t² + c t + d` for each joint. The curve
meets the given positions and velocities at `t = 0` and at the final time:

```python
from policydeploy.cubic import CubicInterp

curve = CubicInterp()
curve.set_dimension(2)
curve.set_param([0.0, 1.0], [0.0, 0.0], [1.0, 0.0], [0.0, 0.0], 2.0)
curve.curve_point(1.0)        # halfway: [0.5, 0.5]
curve.curve_derivative(2.0)   # at rest again: [0.0, 0.0]
```

`ResetController(final_position, max_timesteps, dt)` fits such a curve from
the joint positions and velocities of the first state it receives, ending at
rest. Each call to `get_control_action` returns the next point, and after the
last timestep it holds the final point. `is_complete()` turns true once
`max_timesteps` actions have been produced. `reset()` starts over, and it can
take a new final pose and a new number of timesteps.

## Policies

`PolicyWrapper(cfg, policy)` accepts any callable. The callable receives a
float32 array of shape `(1, num_obs)` and returns at least `num_actions`
values. The wrapper calls it ten times on an all-ones input as a warm-up. The
observation is laid out as follows, where `n` is `num_actions`:

| Slice | Content |
| --- | --- |
| `0:3` | base angular velocity × `ang_vel_scale` |
| `3:6` | gravity direction in the body frame (`gravity_orientation`) |
| `6:9` | target velocity × `cmd_scale` |
| `9:9+n` | (joint position − `default_angles`) × `dof_pos_scale` |
| `9+n:9+2n` | joint velocity × `dof_vel_scale` |
| `9+2n:9+3n` | previous action |
| `9+3n`, `9+3n+1` | sine and cosine of a 0.8 s gait phase |

`num_obs` must be at least `9 + 3n + 2`. The joint targets are
`action * action_scale + default_angles`, sent with the configured `kps` and
`kds`.

## Putting it together

`NeuralRunner` reads `motor_states` and `gyro_states` on each step. It then
updates the commands, runs either the homing controller or the policy, writes
the result into `motor_targets` and clears the pressed key. `policy_active`
defaults to `True`. To home first, pass `policy_active=False`. Once homing is
complete, a space key press switches to the policy, sets the yaw target to the
current yaw and sets the target velocity to zero.

```python
import threading
import numpy as np

from policydeploy.config import RobotConfig
from policydeploy.listener import KeyState, Listener
from policydeploy.runner import NeuralRunner

cfg = RobotConfig("config/g1.yaml")

def policy(obs):
    return np.zeros((1, cfg.num_actions), dtype=np.float32)

keys = KeyState()
runner = NeuralRunner(cfg, policy, policy_active=False)
runner.set_input(keys, None)

listener = Listener(keys)
threading.Thread(target=listener.listen_keyboard, daemon=True).start()

# Fill the sensor buffers from your robot or simulator, then step:
runner.motor_states.position[: cfg.num_actions] = cfg.default_angles
runner.step()
targets = runner.motor_targets.position[: cfg.num_actions]
```

`runner.run()` calls `step()` in a loop and sleeps one policy period between
steps, until `stop()` is called.

## Keyboard commands

`Listener` lowercases the letters `B` to `Y`, ignores newlines and stores every
other key in its `KeyState`. The state machine reacts to these keys:

| Key | Effect |
| --- | --- |
| space | switch from homing to the policy (`NeuralRunner`, once homing is complete) |
| `w` / `s` | forward velocity +0.1 / −0.1 (clamped to ±1.0) |
| `a` / `d` | lateral velocity +0.1 / −0.1 (clamped to ±0.3) |
| `q` / `e` | yaw target +0.1 / −0.1 rad, wrapped to [−π, π] |
| `z` | stop the listener |

On every step the yaw-rate command is `1.5 × (yaw target − current yaw)`,
limited to ±0.4 rad/s. Velocity and yaw-rate commands with a norm below 0.01
are set to zero. A non-zero `cmd_init` is used as the starting target
velocity.

## Logging

`policydeploy.logger` prints lines such as `[INFO 12:34:56] message` in
colour. `error` writes to standard error. `debug` prints only when the
`PRINT_INFO` environment variable is set.

## What this package does not do

- It has no physics simulator and no robot driver. Something outside the
  package must fill `motor_states` and `gyro_states` and must act on
  `motor_targets`.
- It loads no network files. The policy is any Python callable you supply,
  and `policy_path` and `xml_path` are only read from the configuration.
- It installs no command-line program. You start the loop from your own code,
  as in the example above.
- Joystick input is stored by `set_input`, but no command reacts to it.

## Running the tests

Install the `test` extra and run `pytest`.