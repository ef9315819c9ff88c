"""目标选择与停靠位姿推导的配置。

约定：
    - 坐标/角度口径见 `fiducial_target.types`。
    - 停靠半径 radius = camera_to_robot_front_m + marker_gap_m + safety_margin_m。
      默认 0.5 + 1.0 + 0.75 = 2.25（米）。
"""

from __future__ import annotations

import math
from dataclasses import dataclass

DEFAULT_PRIORITY_IDS: tuple[int, ...] = (4, 7)


def _as_id_tuple(raw: object) -> tuple[int, ...]:
    """把 priority_ids 归一为 tuple[int, ...]；单个数字或字符串直接报错。"""

    if isinstance(raw, (str, bytes)):
        raise ValueError(f"priority_ids 必须是整数序列，实际是：{raw!r}")
    try:
        return tuple(int(x) for x in raw)  # type: ignore[union-attr]
    except (TypeError, ValueError) as e:
        raise ValueError(f"priority_ids 必须是整数序列，实际是：{raw!r}") from e


@dataclass(frozen=True)
class TargetConfig:
    """目标选择 + 停靠位姿配置。

    属性说明：
        priority_ids: 多个 Tag 同时可见时优先选择的编号（按输入顺序取第一个命中者）。
            默认 (4, 7)：同一得分 Tag 从两侧半场看到的两个物理位置。

        camera_to_robot_front_m: 相机安装位置到车体前沿的距离（米）。
        marker_gap_m: 期望车体前沿到 Tag 的停靠距离（米）。
        safety_margin_m: 额外安全余量（米）。

        range_min_deg: 朝向角允许范围下界（度）；None 表示不限。
        range_max_deg: 朝向角允许范围上界（度）；None 表示不限。
            两者都为 None 时使用恒等限幅（不做任何裁剪）。
    """

    priority_ids: tuple[int, ...] = DEFAULT_PRIORITY_IDS

    camera_to_robot_front_m: float = 0.5
    marker_gap_m: float = 1.0
    safety_margin_m: float = 0.75

    range_min_deg: float | None = None
    range_max_deg: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "priority_ids", _as_id_tuple(self.priority_ids))

        for name in ("camera_to_robot_front_m", "marker_gap_m", "safety_margin_m"):
            v = float(getattr(self, name))
            if not math.isfinite(v) or v < 0.0:
                raise ValueError(f"{name} 必须是非负有限值，实际为 {v}")

        lo = self.range_min_deg
        hi = self.range_max_deg
        if lo is not None and hi is not None and float(lo) > float(hi):
            raise ValueError(f"range_min_deg({lo}) 不能大于 range_max_deg({hi})")

    @property
    def radius_m(self) -> float:
        """停靠半径（米）。"""

        return float(self.camera_to_robot_front_m) + float(self.marker_gap_m) + float(self.safety_margin_m)
