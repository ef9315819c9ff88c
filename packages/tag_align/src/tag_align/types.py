"""对准轮询（alignment poller）的类型定义。"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from fiducial_target import Detection, StandoffPose

# 轮询状态：
# - "idle"：未启动。
# - "polling"：每个 tick 取一帧检测，直到成功或超时。
# - "succeeded" / "timed_out" / "cancelled"：终止态，直到下一次 start()。
PollPhase = Literal["idle", "polling", "succeeded", "timed_out", "cancelled"]

TERMINAL_PHASES: frozenset[str] = frozenset({"succeeded", "timed_out", "cancelled"})

# tick() 的返回状态：
# - "idle"：尚未 start()，什么也不做。
# - "pending"：本帧无可用检测，继续等待。
# - "succeeded"：本帧推导出停靠位姿并已发出（每次运行至多一次）。
# - "timed_out"：连续无检测的周期数超过阈值。
# - "cancelled"：运行被 cancel() 中止（回放驱动在帧用完时汇报）。
# - "noop"：已处于终止态，本次 tick 无副作用。
TickStatus = Literal["idle", "pending", "succeeded", "timed_out", "cancelled", "noop"]


@dataclass(frozen=True)
class Frame:
    """单帧感知输入。

    属性:
        detections: 本帧全部 Tag 检测（顺序由感知模块决定）。
        best: 感知模块自己选出的最佳检测（通常是 ambiguity 最小者），可为 None。
    """

    detections: tuple[Detection, ...] = ()
    best: Detection | None = None


@dataclass(frozen=True)
class PollState:
    """轮询状态（只由状态迁移函数产生新值）。

    属性:
        phase: 当前阶段。
        cycles: 本次运行中连续无检测的周期数；运行内只增不减。
        pose_computed: 是否已推导并发出停靠位姿。
        running: 是否处于轮询阶段。
    """

    phase: PollPhase = "idle"
    cycles: int = 0
    pose_computed: bool = False
    running: bool = False

    @property
    def is_terminal(self) -> bool:
        return self.phase in TERMINAL_PHASES


@dataclass(frozen=True)
class TickOutcome:
    """一次 tick 的结果（同步返回值；与 consumer 回调等价）。"""

    status: TickStatus
    state: PollState = field(default_factory=PollState)
    pose: StandoffPose | None = None
    tag_id: int | None = None

    @property
    def cycles(self) -> int:
        return int(self.state.cycles)
