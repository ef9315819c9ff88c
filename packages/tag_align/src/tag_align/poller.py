"""对准轮询器：跨帧重复取检测，成功时只发出一次停靠位姿。

每个 tick：
    1) 终止态/已发出：直接返回（无副作用）。
    2) 取一帧检测 -> select_target。
    3) 无可用检测：连续空帧计数 +1；超过阈值判定超时（不发出，释放相机令牌）。
    4) 有检测：推导停靠位姿 -> 回调 consumer 恰好一次 -> 释放相机令牌。

约束：
    - 单线程、协作式：tick 内不阻塞、不等待；“挂起”只体现在状态跨多个 tick。
    - 超时按周期计数，与外部 tick 频率耦合（见 `AlignmentConfig`）。
    - 相机令牌在 start() 获取，在任何终止（成功/超时/取消）时释放。
    - 含 NaN/Inf 的检测按“本帧缺失”处理，不让坏数据流入位姿。
"""

from __future__ import annotations

import logging
import math
from typing import Callable

from fiducial_target import (
    RangeLimiter,
    StandoffPose,
    StandoffResolution,
    TargetSelection,
    is_detection_finite,
    range_limiter_from_config,
    resolve_standoff,
    select_target,
)

from tag_align.config import AlignmentConfig
from tag_align.logging_utils import default_logger, log_frame_summary
from tag_align.ownership import SensorOwnership
from tag_align.sources import FrameSource
from tag_align.transition import cancel_state, start_state, step
from tag_align.types import Frame, PollState, TickOutcome

StandoffConsumer = Callable[[StandoffPose], None]


class AlignmentPoller:
    """Tag 停靠对准的轮询状态机。

    用法：
        poller = AlignmentPoller(source=camera_frames, consumer=drive.set_target_pose)
        poller.start()
        while poller.is_running():
            poller.tick()   # 由外部固定频率调度器调用

    说明：
        - tick() 同时返回 TickOutcome；不传 consumer 时可只用返回值。
        - start() 可重复调用：每次都会重置全部状态，开始新的一次运行。
    """

    def __init__(
        self,
        *,
        source: FrameSource | None = None,
        consumer: StandoffConsumer | None = None,
        cfg: AlignmentConfig | None = None,
        range_limiter: RangeLimiter | None = None,
        ownership: SensorOwnership | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._source = source
        self._consumer = consumer
        self._cfg = cfg or AlignmentConfig()
        self._range_limiter = range_limiter or range_limiter_from_config(self._cfg.target)
        self._ownership = ownership or SensorOwnership()
        self._logger = logger or default_logger()

        self._state = PollState()
        self._last_resolution: StandoffResolution | None = None

    @property
    def state(self) -> PollState:
        return self._state

    @property
    def ownership(self) -> SensorOwnership:
        return self._ownership

    @property
    def last_resolution(self) -> StandoffResolution | None:
        """最近一次运行推导出的结果（含诊断）；未成功时为 None。"""

        return self._last_resolution

    @property
    def last_pose(self) -> StandoffPose | None:
        r = self._last_resolution
        return None if r is None else r.pose

    def is_running(self) -> bool:
        return bool(self._state.running)

    def is_finished(self) -> bool:
        return bool(self._state.pose_computed)

    def start(self) -> None:
        """开始（或重新开始）一次运行。

        Raises:
            SensorBusyError: 相机令牌已被其他持有者占用。
        """

        self._ownership.acquire(self)
        self._state = start_state()
        self._last_resolution = None
        self._logger.info("alignment started (max_empty_cycles=%d)", int(self._cfg.max_empty_cycles))

    def cancel(self) -> None:
        """外部取消：立即释放相机令牌，之后不会再发出位姿。"""

        prev = self._state
        self._state = cancel_state(prev)
        self._release()
        if prev.phase == "polling":
            self._logger.info("alignment cancelled after %d empty cycles", int(prev.cycles))

    def tick(self, frame: Frame | None = None) -> TickOutcome:
        """推进一个周期。

        Args:
            frame: 本周期的感知输入；None 时从 source.latest_frame() 获取。

        Returns:
            TickOutcome。
        """

        st = self._state
        if st.phase == "idle":
            return TickOutcome(status="idle", state=st)
        if st.phase != "polling" or st.pose_computed:
            return TickOutcome(status="noop", state=st)

        if frame is None:
            if self._source is None:
                raise RuntimeError("AlignmentPoller 未配置 source，tick() 必须显式传入 frame")
            frame = self._source.latest_frame()

        log_frame_summary(self._logger, detections=frame.detections, best=frame.best)

        selection = select_target(
            frame.detections,
            best=frame.best,
            priority_ids=self._cfg.target.priority_ids,
        )
        if selection.valid and selection.detection is not None and not is_detection_finite(selection.detection):
            self._logger.warning(
                "rejecting tag %d with non-finite geometry; treating frame as empty",
                int(selection.detection.tag_id),
            )
            selection = TargetSelection.absent("malformed")

        resolution: StandoffResolution | None = None
        if selection.valid and selection.detection is not None:
            # 先推导再提交状态：推导失败（契约错误）时状态保持不变。
            resolution = resolve_standoff(
                selection.detection,
                range_limiter=self._range_limiter,
                cfg=self._cfg.target,
            )

        new_state, emit = step(st, selection, max_empty_cycles=int(self._cfg.max_empty_cycles))
        self._state = new_state

        if not emit or resolution is None:
            if new_state.phase == "timed_out":
                self._release()
                self._logger.warning(
                    "alignment timed out: no usable tag for %d consecutive cycles",
                    int(new_state.cycles),
                )
                return TickOutcome(status="timed_out", state=new_state)

            self._logger.debug("cycle: %d (%s)", int(new_state.cycles), selection.reason)
            return TickOutcome(status="pending", state=new_state)

        self._last_resolution = resolution
        pose = resolution.pose
        self._logger.info(
            "standoff pose from tag %d (%s): x=%.3f y=%.3f heading_deg=%.2f",
            int(resolution.tag_id),
            selection.reason,
            float(pose.x_m),
            float(pose.y_m),
            math.degrees(float(pose.heading_rad)),
        )
        self._logger.debug(
            "translation component: forward=%.3f lateral=%.3f (extra_deg=%.2f)",
            float(resolution.forward_m),
            float(resolution.lateral_m),
            math.degrees(float(resolution.extra_angle_rad)),
        )

        try:
            if self._consumer is not None:
                self._consumer(pose)
        finally:
            self._release()

        return TickOutcome(status="succeeded", state=new_state, pose=pose, tag_id=int(resolution.tag_id))

    def _release(self) -> None:
        self._ownership.release(self)
