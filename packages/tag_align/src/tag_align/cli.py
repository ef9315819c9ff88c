"""回放模式 CLI 参数解析。"""

from __future__ import annotations

import argparse


def build_arg_parser() -> argparse.ArgumentParser:
    # 说明：Windows 终端编码差异较大，这里尽量使用 ASCII，避免 --help 乱码。
    p = argparse.ArgumentParser(description="Replay recorded tag detections through the alignment poller")
    p.add_argument(
        "--frames",
        required=True,
        help="JSONL file, one frame per line: {\"detections\": [...], \"best\": <index|null>}",
    )
    p.add_argument(
        "--config",
        default="",
        help="Optional alignment config (.yaml/.yml). Missing fields use defaults.",
    )
    p.add_argument(
        "--max-empty-cycles",
        type=int,
        default=None,
        help="override max_empty_cycles (timeout after this many consecutive empty frames)",
    )
    p.add_argument(
        "--range-min-deg",
        type=float,
        default=None,
        help="override target.range_min_deg (facing angle clamp lower bound)",
    )
    p.add_argument(
        "--range-max-deg",
        type=float,
        default=None,
        help="override target.range_max_deg (facing angle clamp upper bound)",
    )
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level (DEBUG prints every detection per frame)",
    )
    return p
