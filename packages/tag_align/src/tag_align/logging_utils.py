"""tag_align 的日志工具。

说明：
    tag_align 不强制要求外部提供特定的日志框架。
    这里提供一个“可用即可”的默认 logger，避免在脚本/单测环境中出现
    无 handler 导致的静默。
"""

from __future__ import annotations

import logging
from typing import Sequence

from fiducial_target import Detection


def default_logger() -> logging.Logger:
    """获取 tag_align 的默认 logger。"""

    logger = logging.getLogger("tag_align")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def log_frame_summary(
    logger: logging.Logger,
    *,
    detections: Sequence[Detection],
    best: Detection | None,
) -> None:
    """DEBUG 级别输出本帧全部检测（排障用）。"""

    if not logger.isEnabledFor(logging.DEBUG):
        return

    if not detections:
        logger.debug("vision: no targets")
        return

    for d in detections:
        tx, ty = d.translation_xy()
        logger.debug(
            "vision: tag=%d ambiguity=%.3f t=(%.3f, %.3f) yaw_deg=%.2f%s",
            int(d.tag_id),
            float(d.ambiguity),
            tx,
            ty,
            float(d.yaw_deg),
            " [best]" if d is best else "",
        )
