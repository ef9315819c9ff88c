"""坐标变换工具：4x4 齐次矩阵 + 平面角度/向量。

约定：
- 用 4x4 矩阵表示刚体变换，记作 T_dst_from_src。
- 平面角度统一用弧度，归一到 (-pi, pi]。
"""

from __future__ import annotations

import math

import numpy as np


def make_T(*, R: np.ndarray, t: np.ndarray) -> np.ndarray:
    """由 R,t 构造 4x4 齐次矩阵。"""

    R = np.asarray(R, dtype=np.float64).reshape(3, 3)
    t = np.asarray(t, dtype=np.float64).reshape(3)
    T = np.eye(4, dtype=np.float64)
    T[:3, :3] = R
    T[:3, 3] = t
    return T


def wrap_angle_rad(angle: float) -> float:
    """把角度归一到 (-pi, pi]。"""

    a = float(angle)
    w = math.atan2(math.sin(a), math.cos(a))
    # atan2 在 -pi 处可能返回 -pi；统一到 +pi。
    if w <= -math.pi:
        w += 2.0 * math.pi
    return float(w)


def polar_angle_rad(x: float, y: float) -> float:
    """平面向量 (x, y) 的极角。

    退化约定：零向量的极角定义为 0.0（显式处理，不依赖 atan2(0, 0) 的实现细节）。
    """

    if float(x) == 0.0 and float(y) == 0.0:
        return 0.0
    return float(math.atan2(float(y), float(x)))


def vec_from_polar(radius: float, angle: float) -> np.ndarray:
    """由长度与极角构造平面向量 (2,)。"""

    r = float(radius)
    a = float(angle)
    return np.array([r * math.cos(a), r * math.sin(a)], dtype=np.float64)


def rotate_xy(v: np.ndarray, angle: float) -> np.ndarray:
    """把平面向量逆时针旋转 angle（弧度）。"""

    v = np.asarray(v, dtype=np.float64).reshape(2)
    c = math.cos(float(angle))
    s = math.sin(float(angle))
    R = np.array([[c, -s], [s, c]], dtype=np.float64)
    return (R @ v).astype(np.float64)
