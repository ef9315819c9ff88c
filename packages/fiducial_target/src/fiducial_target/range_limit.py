"""朝向角限幅策略（可注入）。

契约：
    把一个角度映射到允许范围内最近的值；角度已在范围内时原样返回。

说明：
    - 具体的允许范围由感知/机构侧决定（例如相机视场或机构行程），本包不假设其来源。
    - 停靠位姿推导只依赖该契约，因此调用方可以注入任意满足契约的 callable。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol

from fiducial_target.config import TargetConfig
from fiducial_target.transforms import wrap_angle_rad


class RangeLimiter(Protocol):
    def __call__(self, angle_rad: float) -> float: ...


def identity_range_limiter(angle_rad: float) -> float:
    """恒等限幅：不裁剪。"""

    return float(angle_rad)


@dataclass(frozen=True)
class ClampRangeLimiter:
    """把角度裁剪到 [min_rad, max_rad]（先归一到 (-pi, pi]）。"""

    min_rad: float = -math.pi
    max_rad: float = math.pi

    def __post_init__(self) -> None:
        if float(self.min_rad) > float(self.max_rad):
            raise ValueError(f"min_rad({self.min_rad}) 不能大于 max_rad({self.max_rad})")

    def __call__(self, angle_rad: float) -> float:
        a = wrap_angle_rad(float(angle_rad))
        return float(min(max(a, float(self.min_rad)), float(self.max_rad)))


def range_limiter_from_config(cfg: TargetConfig) -> RangeLimiter:
    """由 TargetConfig 的 range_min_deg/range_max_deg 构造限幅策略。"""

    if cfg.range_min_deg is None and cfg.range_max_deg is None:
        return identity_range_limiter

    lo = -math.pi if cfg.range_min_deg is None else math.radians(float(cfg.range_min_deg))
    hi = math.pi if cfg.range_max_deg is None else math.radians(float(cfg.range_max_deg))
    return ClampRangeLimiter(min_rad=float(lo), max_rad=float(hi))
