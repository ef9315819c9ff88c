"""停靠位姿推导：由选中的 Tag 检测计算机器人平面坐标系下的停靠目标。

算法（平面近似，heading=0 为正前方）：
    1) 取相机 -> Tag 的平面平移 (tx, ty)；facing = -yaw（转为机器人旋转口径）。
    2) translation_angle = (tx, ty) 的极角。
    3) clamped = range_limiter(facing)。
    4) extra = facing - clamped（角度已在范围内时为 0）。
    5) gap = 长度 radius、方向 (translation_angle - extra) 的向量。
    6) 停靠平移 = (tx, ty) - gap。
    7) heading = translation_angle + gap 的极角。
    8) 诊断：停靠平移按 -facing 旋转后分解为前向/横向分量（仅日志用）。

退化约定：
    - 平移为零向量时 translation_angle 定义为 0.0。
    - 平移或 yaw 含 NaN/Inf 时直接报错（MalformedDetectionError），不让坏数据流入位姿。
"""

from __future__ import annotations

import math

import numpy as np

from fiducial_target.config import TargetConfig
from fiducial_target.range_limit import RangeLimiter, identity_range_limiter
from fiducial_target.transforms import polar_angle_rad, rotate_xy, vec_from_polar, wrap_angle_rad
from fiducial_target.types import Detection, StandoffPose, StandoffResolution


class MalformedDetectionError(ValueError):
    """检测结果含非有限值（NaN/Inf），无法推导位姿。"""


def is_detection_finite(det: Detection) -> bool:
    """检测的平面平移与 yaw 是否均为有限值。"""

    tx, ty = det.translation_xy()
    return bool(np.isfinite([tx, ty, float(det.yaw_deg)]).all())


def resolve_standoff(
    det: Detection,
    *,
    range_limiter: RangeLimiter = identity_range_limiter,
    cfg: TargetConfig | None = None,
) -> StandoffResolution:
    """由单个 Tag 检测推导停靠位姿（含诊断字段）。

    Args:
        det: 选中的检测。
        range_limiter: 朝向角限幅策略（由感知/机构侧注入）。
        cfg: TargetConfig；None 时使用默认值（radius=2.25）。

    Returns:
        StandoffResolution。

    Raises:
        TypeError: det 为 None（调用方契约错误）。
        MalformedDetectionError: 平移或 yaw 非有限。
    """

    if det is None:
        raise TypeError("resolve_standoff 需要一个 Detection，实际为 None")

    cfg = cfg or TargetConfig()

    if not is_detection_finite(det):
        raise MalformedDetectionError(
            f"tag {int(det.tag_id)} 的平移/yaw 含非有限值："
            f"t={det.translation_xy()}, yaw_deg={float(det.yaw_deg)}"
        )

    tx, ty = det.translation_xy()
    t_xy = np.array([tx, ty], dtype=np.float64)

    facing = math.radians(-float(det.yaw_deg))
    translation_angle = polar_angle_rad(tx, ty)

    clamped = float(range_limiter(facing))
    if not math.isfinite(clamped):
        raise MalformedDetectionError(f"range_limiter 返回非有限值：{clamped}")
    extra = facing - clamped

    gap = vec_from_polar(cfg.radius_m, translation_angle - extra)
    standoff_xy = t_xy - gap

    heading = wrap_angle_rad(translation_angle + polar_angle_rad(float(gap[0]), float(gap[1])))

    # 诊断分解：不参与下游控制。
    decomposed = rotate_xy(standoff_xy, -facing)

    pose = StandoffPose(
        x_m=float(standoff_xy[0]),
        y_m=float(standoff_xy[1]),
        heading_rad=float(heading),
    )
    return StandoffResolution(
        pose=pose,
        tag_id=int(det.tag_id),
        translation_angle_rad=float(translation_angle),
        facing_angle_rad=float(facing),
        clamped_facing_rad=float(clamped),
        extra_angle_rad=float(extra),
        gap_xy=(float(gap[0]), float(gap[1])),
        forward_m=float(decomposed[0]),
        lateral_m=float(decomposed[1]),
    )


def resolve_standoff_pose(
    det: Detection,
    *,
    range_limiter: RangeLimiter = identity_range_limiter,
    cfg: TargetConfig | None = None,
) -> StandoffPose:
    """只返回停靠位姿（不含诊断）。"""

    return resolve_standoff(det, range_limiter=range_limiter, cfg=cfg).pose
