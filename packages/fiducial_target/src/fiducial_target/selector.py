"""单帧目标选择：多个 Tag 同时可见时，确定性地选出一个。

规则（按顺序）：
    1) 空输入 -> 无目标。
    2) 只有一个检测 -> 直接使用（不看编号/二义性）。
    3) 多个检测 -> 按输入顺序扫描，返回第一个编号属于 priority_ids 的检测；
       若没有命中，回退到感知模块给出的 best；
       若调用方也没给 best，则按 ambiguity 最小回退（并列取输入顺序靠前者）。

说明：
    - 纯函数，不保留跨帧状态。
    - 多个优先编号同时出现时“输入顺序第一个”胜出；该顺序由感知模块决定，
      这里保持原样，不做额外排序。
"""

from __future__ import annotations

from typing import Sequence

from fiducial_target.config import DEFAULT_PRIORITY_IDS
from fiducial_target.types import Detection, TargetSelection


def select_target(
    detections: Sequence[Detection],
    *,
    best: Detection | None = None,
    priority_ids: Sequence[int] = DEFAULT_PRIORITY_IDS,
) -> TargetSelection:
    """从本帧检测中选择要对准的 Tag。

    Args:
        detections: 本帧检测列表（顺序由感知模块决定）。
        best: 感知模块自己的“最佳”检测（通常是 ambiguity 最小者），用作回退。
        priority_ids: 优先 Tag 编号集合。

    Returns:
        TargetSelection。
    """

    dets = list(detections)
    if not dets:
        return TargetSelection.absent("no_detections")

    if len(dets) == 1:
        return TargetSelection.present(dets[0], "single")

    wanted = {int(x) for x in priority_ids}
    for det in dets:
        if int(det.tag_id) in wanted:
            return TargetSelection.present(det, "priority_id")

    if best is not None:
        return TargetSelection.present(best, "best_fallback")

    # min() 在并列时返回第一个，满足“输入顺序靠前者优先”。
    fallback = min(dets, key=lambda d: float(d.ambiguity))
    return TargetSelection.present(fallback, "lowest_ambiguity")
