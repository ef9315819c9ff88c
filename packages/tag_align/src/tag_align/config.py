"""对准轮询的配置。

说明：
    超时按 tick 周期数计数，而不是按墙钟时间：实际超时时长取决于外部调度器的 tick 频率。
    例如 50 Hz 调度、max_empty_cycles=10 时，第 11 个连续空帧（约 220 ms）判定超时。
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fiducial_target import TargetConfig


@dataclass(frozen=True)
class AlignmentConfig:
    """对准轮询配置。

    属性说明：
        max_empty_cycles: 允许的连续无检测周期数；计数超过该值（即第 max_empty_cycles+1
            个空帧）时判定超时。
        target: 目标选择 + 停靠位姿推导配置。
    """

    max_empty_cycles: int = 10
    target: TargetConfig = field(default_factory=TargetConfig)

    def __post_init__(self) -> None:
        if int(self.max_empty_cycles) < 0:
            raise ValueError(f"max_empty_cycles 必须 >= 0，实际为 {self.max_empty_cycles}")
