"""感知输入源：每个 tick 提供一帧 Tag 检测。

说明：
- 真实部署时由相机/估计器适配层实现 `FrameSource`（本仓库不包含相机驱动）。
- `ScriptedFrameSource` 用于回放与测试：按顺序逐帧返回，用完后返回空帧。
- JSONL 回放格式（每行一帧）：
    {"detections": [{"id": 7, "ambiguity": 0.1, "translation": [x, y, z], "yaw_deg": 0.0}],
     "best": 0}
  其中 best 为 detections 的下标（可省略或为 null）。
"""

from __future__ import annotations

import json
from collections import deque
from pathlib import Path
from typing import Any, Iterable, Mapping, Protocol

from fiducial_target import Detection

from tag_align.types import Frame

__all__ = [
    "FrameSource",
    "ScriptedFrameSource",
    "detection_from_dict",
    "frame_from_dict",
    "load_frames_jsonl",
]


class FrameSource(Protocol):
    def latest_frame(self) -> Frame: ...


class ScriptedFrameSource:
    """按顺序回放预先给定的帧；用完后一直返回空帧。"""

    def __init__(self, frames: Iterable[Frame]) -> None:
        self._frames: deque[Frame] = deque(frames)
        self._served = 0

    @property
    def served(self) -> int:
        return int(self._served)

    @property
    def remaining(self) -> int:
        return len(self._frames)

    def latest_frame(self) -> Frame:
        self._served += 1
        if not self._frames:
            return Frame()
        return self._frames.popleft()


def detection_from_dict(data: Mapping[str, Any]) -> Detection:
    """由 JSON 对象构造 Detection。"""

    if "id" not in data or "translation" not in data:
        raise ValueError(f"detection 缺少 id/translation 字段：{dict(data)}")

    translation = list(data["translation"])
    if len(translation) == 2:
        translation.append(0.0)
    if len(translation) != 3:
        raise ValueError(f"translation 长度应为 2 或 3，实际为 {len(translation)}")

    return Detection.from_translation(
        tag_id=int(data["id"]),
        translation=[float(x) for x in translation],
        ambiguity=float(data.get("ambiguity", 0.0)),
        yaw_deg=float(data.get("yaw_deg", 0.0)),
    )


def frame_from_dict(data: Mapping[str, Any]) -> Frame:
    """由 JSON 对象构造 Frame。"""

    dets = tuple(detection_from_dict(d) for d in (data.get("detections") or []))

    best: Detection | None = None
    best_idx = data.get("best")
    if best_idx is not None:
        i = int(best_idx)
        if not 0 <= i < len(dets):
            raise ValueError(f"best 下标越界：{i}（共 {len(dets)} 个检测）")
        best = dets[i]

    return Frame(detections=dets, best=best)


def load_frames_jsonl(path: str | Path) -> list[Frame]:
    """读取 JSONL 回放文件（空行忽略）。

    Raises:
        RuntimeError: 文件缺失或某行无法解析。
    """

    p = Path(path)
    if not p.exists():
        raise RuntimeError(f"找不到回放文件: {p}")

    frames: list[Frame] = []
    for lineno, raw in enumerate(p.read_text(encoding="utf-8").splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        try:
            obj = json.loads(line)
            if not isinstance(obj, dict):
                raise ValueError("每行必须是 JSON 对象")
            frames.append(frame_from_dict(obj))
        except ValueError as exc:
            raise RuntimeError(f"{p}:{lineno} 解析失败：{exc}") from exc

    return frames
