"""fiducial_target 对外稳定入口（public API）。

本包目标：
- 输入：单帧 Tag 检测列表（+ 感知模块的 best 检测）+ 朝向角限幅策略。
- 输出：选中的 Tag，以及机器人平面坐标系下的停靠位姿 (x, y, heading)。

说明：
- 本包不负责图像采集与 Tag 检测，也不做全局定位/融合。
- 选择与推导都是纯函数：不读时钟、不保留跨帧状态。
"""

from __future__ import annotations

from fiducial_target.config import DEFAULT_PRIORITY_IDS, TargetConfig
from fiducial_target.range_limit import (
    ClampRangeLimiter,
    RangeLimiter,
    identity_range_limiter,
    range_limiter_from_config,
)
from fiducial_target.resolver import (
    MalformedDetectionError,
    is_detection_finite,
    resolve_standoff,
    resolve_standoff_pose,
)
from fiducial_target.selector import select_target
from fiducial_target.transforms import wrap_angle_rad
from fiducial_target.types import Detection, StandoffPose, StandoffResolution, TargetSelection

__all__ = [
    "DEFAULT_PRIORITY_IDS",
    "ClampRangeLimiter",
    "Detection",
    "MalformedDetectionError",
    "RangeLimiter",
    "StandoffPose",
    "StandoffResolution",
    "TargetConfig",
    "TargetSelection",
    "identity_range_limiter",
    "is_detection_finite",
    "range_limiter_from_config",
    "resolve_standoff",
    "resolve_standoff_pose",
    "select_target",
    "wrap_angle_rad",
]
