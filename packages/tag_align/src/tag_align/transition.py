"""对准轮询的纯状态迁移。

动机：
    `AlignmentPoller` 的职责收敛到“取帧 + 推导 + 发出 + 资源释放”的编排；
    Idle -> Polling -> {Succeeded, TimedOut} 的判定是可独立理解、可独立单测的纯逻辑，
    不依赖调度器、相机或回调。

约定：
    - 迁移函数只产生新的 PollState，不修改入参。
    - 终止态与 idle 下的 step() 原样返回（emit=False），保证至多一次发出。
"""

from __future__ import annotations

from dataclasses import replace

from fiducial_target import TargetSelection

from tag_align.types import PollState


def start_state() -> PollState:
    """(重新)开始一次运行：计数清零、清除已发出标记、进入 polling。"""

    return PollState(phase="polling", cycles=0, pose_computed=False, running=True)


def cancel_state(state: PollState) -> PollState:
    """外部取消：停止运行，不发出位姿。

    说明：
        已成功/已超时的运行保持原终止态（取消不改写结果）。
    """

    if state.phase in ("succeeded", "timed_out"):
        return replace(state, running=False)
    return replace(state, phase="cancelled", running=False)


def step(state: PollState, selection: TargetSelection, *, max_empty_cycles: int) -> tuple[PollState, bool]:
    """单个 tick 的状态迁移。

    Args:
        state: 当前状态。
        selection: 本帧目标选择结果。
        max_empty_cycles: 连续空帧计数超过该值即超时。

    Returns:
        (new_state, emit)。emit=True 表示调用方应当推导并发出停靠位姿（每次运行至多一次）。
    """

    if state.phase != "polling" or state.pose_computed:
        return state, False

    if not selection.valid:
        cycles = int(state.cycles) + 1
        if cycles > int(max_empty_cycles):
            return replace(state, phase="timed_out", cycles=cycles, running=False), False
        return replace(state, cycles=cycles), False

    return replace(state, phase="succeeded", pose_computed=True, running=False), True
