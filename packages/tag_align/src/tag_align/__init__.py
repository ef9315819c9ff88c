"""tag_align：基于 Tag 的停靠对准轮询。

对外入口：
    - `AlignmentPoller`: 跨帧轮询，成功时恰好发出一次停靠位姿，持续无检测时超时。
    - `step` / `start_state` / `cancel_state`: 纯状态迁移（可脱离调度器单测）。
"""

from tag_align.config import AlignmentConfig
from tag_align.logging_utils import default_logger
from tag_align.ownership import SensorBusyError, SensorOwnership
from tag_align.poller import AlignmentPoller, StandoffConsumer
from tag_align.sources import (
    FrameSource,
    ScriptedFrameSource,
    detection_from_dict,
    frame_from_dict,
    load_frames_jsonl,
)
from tag_align.transition import cancel_state, start_state, step
from tag_align.types import Frame, PollPhase, PollState, TickOutcome, TickStatus

__all__ = [
    "AlignmentConfig",
    "AlignmentPoller",
    "Frame",
    "FrameSource",
    "PollPhase",
    "PollState",
    "ScriptedFrameSource",
    "SensorBusyError",
    "SensorOwnership",
    "StandoffConsumer",
    "TickOutcome",
    "TickStatus",
    "cancel_state",
    "default_logger",
    "detection_from_dict",
    "frame_from_dict",
    "load_frames_jsonl",
    "start_state",
    "step",
]
