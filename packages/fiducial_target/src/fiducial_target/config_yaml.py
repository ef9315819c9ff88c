"""fiducial_target 的 YAML 配置加载入口。

约定：
    - YAML 顶层为 mapping，字段名与 `TargetConfig` 一致。
    - 未提供的字段使用 dataclass 的默认值。
    - 未知字段会报错，避免拼写错误静默失效。

依赖：
    - 本模块依赖 PyYAML（`pyyaml`）。
"""

from __future__ import annotations

from dataclasses import fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from fiducial_target.config import TargetConfig


def _as_mapping(x: Any) -> Mapping[str, Any]:
    if x is None:
        return {}
    if isinstance(x, Mapping):
        return x
    raise TypeError(f"YAML 根节点必须是 mapping，实际是：{type(x).__name__}")


def target_config_from_dict(data: Mapping[str, Any]) -> TargetConfig:
    """从 dict（通常来自 YAML）构造 `TargetConfig`。"""

    allowed = {f.name for f in fields(TargetConfig)}
    unknown = sorted(set(data.keys()) - allowed)
    if unknown:
        raise KeyError(f"TargetConfig 出现未知字段：{unknown}")

    # priority_ids 的 list -> tuple 归一与校验由 TargetConfig 自身完成。
    try:
        return TargetConfig(**dict(data))
    except TypeError as e:
        raise ValueError(f"TargetConfig 构造失败：{e}") from e


def load_target_config_yaml(path: str | Path) -> TargetConfig:
    """从 YAML 文件加载 `TargetConfig`。"""

    p = Path(path)
    text = p.read_text(encoding="utf-8")
    payload = yaml.safe_load(text)
    return target_config_from_dict(_as_mapping(payload))
