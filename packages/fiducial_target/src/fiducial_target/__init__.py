"""fiducial_target：多 Tag 目标选择 + 停靠位姿推导。

说明：
- 对外 API 仅从 `fiducial_target.api` 暴露，避免下游耦合内部模块结构。
"""

from fiducial_target.api import (
    DEFAULT_PRIORITY_IDS,
    ClampRangeLimiter,
    Detection,
    MalformedDetectionError,
    RangeLimiter,
    StandoffPose,
    StandoffResolution,
    TargetConfig,
    TargetSelection,
    identity_range_limiter,
    is_detection_finite,
    range_limiter_from_config,
    resolve_standoff,
    resolve_standoff_pose,
    select_target,
    wrap_angle_rad,
)

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
