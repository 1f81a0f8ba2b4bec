"""Rotation utilities using coordinate-transformation matrices and WXYZ quaternions.

A rotation matrix here maps world coordinates into body coordinates, which is
the transpose of the matrix that would rotate the body into its orientation.
"""

from __future__ import annotations

import math
from enum import Enum

import numpy as np

QUATERNION_DERIVATIVE_STABILIZATION = 0.1


class CoordinateAxis(Enum):
    """Principal axis for an elementary coordinate rotation."""

    X = "x"
    Y = "y"
    Z = "z"


def _vector(values, size: int, label: str) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    if arr.shape != (size,):
        raise ValueError(f"{label} must have shape ({size},), got {arr.shape}")
    return arr


def _matrix3(values, label: str = "matrix") -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    if arr.shape != (3, 3):
        raise ValueError(f"{label} must have shape (3, 3), got {arr.shape}")
    return arr


def rad2deg(rad):
    """Convert radians to degrees."""
    return rad * 180.0 / math.pi


def deg2rad(deg):
    """Convert degrees to radians."""
    return deg * math.pi / 180.0


def coordinate_rotation(axis: CoordinateAxis, theta: float) -> np.ndarray:
    """Matrix transforming into a frame rotated by theta about the given axis."""
    s = math.sin(theta)
    c = math.cos(theta)
    if axis is CoordinateAxis.X:
        rows = [[1, 0, 0], [0, c, s], [0, -s, c]]
    elif axis is CoordinateAxis.Y:
        rows = [[c, 0, -s], [0, 1, 0], [s, 0, c]]
    elif axis is CoordinateAxis.Z:
        rows = [[c, s, 0], [-s, c, 0], [0, 0, 1]]
    else:
        raise ValueError(f"unknown axis: {axis!r}")
    return np.array(rows, dtype=np.float64)


def cross_matrix(v) -> np.ndarray:
    """Skew-symmetric matrix m such that m @ w equals cross(v, w)."""
    return vector_to_skew_mat(v)


def rpy_to_rot_mat(rpy) -> np.ndarray:
    """ZYX roll-pitch-yaw to coordinate-transformation matrix."""
    rpy = _vector(rpy, 3, "rpy")
    return (
        coordinate_rotation(CoordinateAxis.X, rpy[0])
        @ coordinate_rotation(CoordinateAxis.Y, rpy[1])
        @ coordinate_rotation(CoordinateAxis.Z, rpy[2])
    )


def _active_rotation(axis: CoordinateAxis, theta: float) -> np.ndarray:
    return coordinate_rotation(axis, theta).T


def rpy_to_rot_mat_jy(rpy) -> np.ndarray:
    """Roll-pitch-yaw to coordinate matrix via composed yaw, pitch and roll rotations."""
    rpy = _vector(rpy, 3, "rpy")
    body_rotation = (
        _active_rotation(CoordinateAxis.Z, rpy[2])
        @ _active_rotation(CoordinateAxis.Y, rpy[1])
        @ _active_rotation(CoordinateAxis.X, rpy[0])
    )
    return body_rotation.T


def rpy_xyz_to_rot_mat(rpy) -> np.ndarray:
    """XYZ roll-pitch-yaw to coordinate-transformation matrix."""
    rpy = _vector(rpy, 3, "rpy")
    return (
        coordinate_rotation(CoordinateAxis.Z, rpy[2])
        @ coordinate_rotation(CoordinateAxis.Y, rpy[1])
        @ coordinate_rotation(CoordinateAxis.X, rpy[0])
    )


def vector_to_skew_mat(v) -> np.ndarray:
    """Convert a 3-vector to a skew-symmetric 3x3 matrix."""
    v = _vector(v, 3, "vector")
    return np.array(
        [[0.0, -v[2], v[1]], [v[2], 0.0, -v[0]], [-v[1], v[0], 0.0]],
        dtype=np.float64,
    )


def mat_to_skew_vec(m) -> np.ndarray:
    """Extract the skew-symmetric part of a 3x3 matrix as a 3-vector."""
    m = _matrix3(m)
    return 0.5 * np.array(
        [m[2, 1] - m[1, 2], m[0, 2] - m[2, 0], m[1, 0] - m[0, 1]],
        dtype=np.float64,
    )


def rotation_matrix_to_quaternion(r) -> np.ndarray:
    """Coordinate-transformation matrix to WXYZ quaternion."""
    r = _matrix3(r, "rotation matrix").T
    tr = r[0, 0] + r[1, 1] + r[2, 2]
    q = np.empty(4, dtype=np.float64)
    if tr > 0.0:
        s = math.sqrt(tr + 1.0) * 2.0
        q[0] = 0.25 * s
        q[1] = (r[2, 1] - r[1, 2]) / s
        q[2] = (r[0, 2] - r[2, 0]) / s
        q[3] = (r[1, 0] - r[0, 1]) / s
    elif r[0, 0] > r[1, 1] and r[0, 0] > r[2, 2]:
        s = math.sqrt(1.0 + r[0, 0] - r[1, 1] - r[2, 2]) * 2.0
        q[0] = (r[2, 1] - r[1, 2]) / s
        q[1] = 0.25 * s
        q[2] = (r[0, 1] + r[1, 0]) / s
        q[3] = (r[0, 2] + r[2, 0]) / s
    elif r[1, 1] > r[2, 2]:
        s = math.sqrt(1.0 + r[1, 1] - r[0, 0] - r[2, 2]) * 2.0
        q[0] = (r[0, 2] - r[2, 0]) / s
        q[1] = (r[0, 1] + r[1, 0]) / s
        q[2] = 0.25 * s
        q[3] = (r[1, 2] + r[2, 1]) / s
    else:
        s = math.sqrt(1.0 + r[2, 2] - r[0, 0] - r[1, 1]) * 2.0
        q[0] = (r[1, 0] - r[0, 1]) / s
        q[1] = (r[0, 2] + r[2, 0]) / s
        q[2] = (r[1, 2] + r[2, 1]) / s
        q[3] = 0.25 * s
    return q


def quaternion_to_rotation_matrix_rsm(q) -> np.ndarray:
    """WXYZ quaternion to the body-to-world rotation matrix."""
    e0, e1, e2, e3 = _vector(q, 4, "quaternion")
    return np.array(
        [
            [1 - 2 * (e2 * e2 + e3 * e3), 2 * (e1 * e2 - e0 * e3), 2 * (e1 * e3 + e0 * e2)],
            [2 * (e1 * e2 + e0 * e3), 1 - 2 * (e1 * e1 + e3 * e3), 2 * (e2 * e3 - e0 * e1)],
            [2 * (e1 * e3 - e0 * e2), 2 * (e2 * e3 + e0 * e1), 1 - 2 * (e1 * e1 + e2 * e2)],
        ],
        dtype=np.float64,
    )


def quaternion_to_rotation_matrix(q) -> np.ndarray:
    """WXYZ quaternion to coordinate-transformation matrix (world to body)."""
    return quaternion_to_rotation_matrix_rsm(q).T


def quat_to_rpy(q) -> np.ndarray:
    """WXYZ quaternion to (roll, pitch, yaw) using the ZYX order."""
    q = _vector(q, 4, "quaternion")
    sin_pitch = min(-2.0 * (q[1] * q[3] - q[0] * q[2]), 0.99999)
    with np.errstate(invalid="ignore"):
        pitch = float(np.arcsin(sin_pitch))
    yaw = math.atan2(
        2 * (q[1] * q[2] + q[0] * q[3]),
        q[0] ** 2 + q[1] ** 2 - q[2] ** 2 - q[3] ** 2,
    )
    roll = math.atan2(
        2 * (q[2] * q[3] + q[0] * q[1]),
        q[0] ** 2 - q[1] ** 2 - q[2] ** 2 + q[3] ** 2,
    )
    return np.array([roll, pitch, yaw], dtype=np.float64)


def rpy_to_quat(rpy) -> np.ndarray:
    """ZYX roll-pitch-yaw to WXYZ quaternion."""
    return rotation_matrix_to_quaternion(rpy_to_rot_mat(rpy))


def quat_to_so3(q) -> np.ndarray:
    """WXYZ quaternion to axis-angle vector (undefined for the identity)."""
    q = _vector(q, 4, "quaternion")
    with np.errstate(divide="ignore", invalid="ignore"):
        theta = 2.0 * np.arccos(q[0])
        return theta * q[1:] / np.sin(theta / 2.0)


def rotation_matrix_to_rpy(r) -> np.ndarray:
    """Coordinate-transformation matrix to (roll, pitch, yaw)."""
    return quat_to_rpy(rotation_matrix_to_quaternion(r))


def quat_derivative(q, omega) -> np.ndarray:
    """Quaternion rate for body-frame angular velocity omega, with norm stabilisation."""
    q = _vector(q, 4, "quaternion")
    omega = _vector(omega, 3, "omega")
    big_q = np.array(
        [
            [q[0], -q[1], -q[2], -q[3]],
            [q[1], q[0], -q[3], q[2]],
            [q[2], q[3], q[0], -q[1]],
            [q[3], -q[2], q[1], q[0]],
        ],
        dtype=np.float64,
    )
    stab = QUATERNION_DERIVATIVE_STABILIZATION * np.linalg.norm(omega) * (1 - np.linalg.norm(q))
    qq = np.concatenate(([stab], omega))
    return 0.5 * big_q @ qq


def quat_product(q1, q2) -> np.ndarray:
    """Hamilton product of two WXYZ quaternions."""
    q1 = _vector(q1, 4, "q1")
    q2 = _vector(q2, 4, "q2")
    r1, v1 = q1[0], q1[1:]
    r2, v2 = q2[0], q2[1:]
    r = r1 * r2 - np.dot(v1, v2)
    v = r1 * v2 + r2 * v1 + np.cross(v1, v2)
    return np.concatenate(([r], v))


def _delta_quat(omega, dt) -> np.ndarray:
    omega = _vector(omega, 3, "omega")
    ang = float(np.linalg.norm(omega))
    axis = omega / ang if ang > 0 else np.array([1.0, 0.0, 0.0])
    ang *= dt
    return np.concatenate(([math.cos(ang / 2)], math.sin(ang / 2) * axis))


def integrate_quat(quat, omega, dt) -> np.ndarray:
    """Advance a quaternion by inertial-frame angular velocity omega over dt."""
    quat = _vector(quat, 4, "quaternion")
    new = quat_product(_delta_quat(omega, dt), quat)
    return new / np.linalg.norm(new)


def integrate_quat_implicit(quat, omega, dt) -> np.ndarray:
    """Advance a quaternion by right-multiplying the incremental rotation."""
    quat = _vector(quat, 4, "quaternion")
    new = quat_product(quat, _delta_quat(omega, dt))
    return new / np.linalg.norm(new)


def quaternion_to_so3(quat) -> np.ndarray:
    """WXYZ quaternion to axis-angle vector; zero for (near) identity."""
    quat = _vector(quat, 4, "quaternion")
    so3 = quat[1:].copy()
    with np.errstate(invalid="ignore"):
        theta = 2.0 * float(np.arcsin(np.sqrt(np.dot(so3, so3))))
    if abs(theta) < 1e-7:
        return np.zeros(3, dtype=np.float64)
    return so3 / math.sin(theta / 2.0) * theta


def so3_to_quat(so3) -> np.ndarray:
    """Axis-angle vector to WXYZ quaternion."""
    so3 = _vector(so3, 3, "so3")
    theta = float(np.linalg.norm(so3))
    if abs(theta) < 1e-6:
        return np.array([1.0, 0.0, 0.0, 0.0], dtype=np.float64)
    half = math.sin(theta / 2.0)
    return np.concatenate(([math.cos(theta / 2.0)], so3 / theta * half))