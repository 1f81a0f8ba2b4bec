[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "policydeploy"
version = "0.1.0"
description = "Run a learned locomotion policy on a legged robot: homing, observation building, keyboard commands and a fixed-rate control loop."
requires-python = ">=3.10"
keywords = [
    "robotics",
    "locomotion",
    "reinforcement-learning",
    "policy",
    "controller",
    "quaternion",
    "state-machine",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "numpy",
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["policydeploy"]

[tool.hatch.build.targets.sdist]
include = [
    "policydeploy",
    "tests",
    "README.md",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
ignore_missing_imports = true
