"""回放入口（CLI / python -m tag_align.entry）。

该模块是“薄入口层”，只负责：
- 解析 CLI 参数
- （Optional）加载 YAML 配置并应用 CLI 覆盖
- 把 JSONL 回放帧逐帧喂给 `AlignmentPoller`
- 输出一行 JSON 结果

退出码：
- 0：成功推导出停靠位姿。
- 1：超时或回放帧用完仍未成功。
- 2：输入/配置错误。
"""

from __future__ import annotations

import json
import logging
import math
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional, Sequence

import yaml

from tag_align.cli import build_arg_parser
from tag_align.config import AlignmentConfig
from tag_align.config_yaml import load_alignment_config_yaml
from tag_align.logging_utils import default_logger
from tag_align.poller import AlignmentPoller
from tag_align.sources import ScriptedFrameSource, load_frames_jsonl
from tag_align.types import TickOutcome


def _build_config(args: Any) -> AlignmentConfig:
    config_raw = str(getattr(args, "config", "") or "").strip()
    cfg = load_alignment_config_yaml(Path(config_raw).resolve()) if config_raw else AlignmentConfig()

    target = cfg.target
    if args.range_min_deg is not None:
        target = replace(target, range_min_deg=float(args.range_min_deg))
    if args.range_max_deg is not None:
        target = replace(target, range_max_deg=float(args.range_max_deg))

    max_empty = cfg.max_empty_cycles if args.max_empty_cycles is None else int(args.max_empty_cycles)
    return replace(cfg, max_empty_cycles=max_empty, target=target)


def outcome_to_record(outcome: TickOutcome, *, frames_used: int) -> dict[str, Any]:
    """把最终 TickOutcome 转为可 JSON 序列化的 dict。"""

    rec: dict[str, Any] = {
        "status": str(outcome.status),
        "phase": str(outcome.state.phase),
        "cycles": int(outcome.cycles),
        "frames_used": int(frames_used),
        "pose": None,
        "tag_id": outcome.tag_id,
    }
    if outcome.pose is not None:
        rec["pose"] = {
            "x_m": float(outcome.pose.x_m),
            "y_m": float(outcome.pose.y_m),
            "heading_deg": float(math.degrees(outcome.pose.heading_rad)),
        }
    return rec


def run_replay(poller: AlignmentPoller, source: ScriptedFrameSource) -> TickOutcome:
    """start() 后逐帧 tick，直到终止或回放帧用完。"""

    poller.start()
    outcome = TickOutcome(status="pending", state=poller.state)
    while poller.is_running():
        if source.remaining == 0:
            # 回放帧不足以走到终止态：视为外部取消。
            poller.cancel()
            break
        outcome = poller.tick()
    status = "cancelled" if poller.state.phase == "cancelled" else outcome.status
    return TickOutcome(status=status, state=poller.state, pose=outcome.pose, tag_id=outcome.tag_id)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """回放模式主入口。"""

    # 尽量固定 UTF-8 输出，避免在重定向到文件时出现乱码。
    try:
        sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[attr-defined]
        sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[attr-defined]
    except Exception:
        pass

    args = build_arg_parser().parse_args(list(argv) if argv is not None else None)

    logger = default_logger()
    logger.setLevel(getattr(logging, str(args.log_level)))

    try:
        cfg = _build_config(args)
        frames = load_frames_jsonl(Path(args.frames))
    except (KeyError, TypeError, ValueError, RuntimeError, OSError, yaml.YAMLError) as exc:
        print(str(exc))
        return 2

    source = ScriptedFrameSource(frames)
    poller = AlignmentPoller(source=source, cfg=cfg, logger=logger)
    outcome = run_replay(poller, source)

    print(json.dumps(outcome_to_record(outcome, frames_used=source.served), ensure_ascii=False))
    return 0 if outcome.status == "succeeded" else 1


if __name__ == "__main__":
    raise SystemExit(main())
