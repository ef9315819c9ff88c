"""tag_align 的 YAML 配置加载入口。

约定：
    - YAML 顶层为一个 mapping，字段为 max_empty_cycles / target。
    - `target` 子节点交给 `fiducial_target.config_yaml.target_config_from_dict`，
      与单独加载 TargetConfig 时的校验完全一致。
    - 未提供的字段使用 dataclass 的默认值。
    - 未知字段会报错，避免“拼写错了但静默无效”。

依赖：
    - 本模块依赖 PyYAML（`pyyaml`）。
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml

from fiducial_target.config_yaml import target_config_from_dict
from tag_align.config import AlignmentConfig

_ALLOWED_KEYS = frozenset({"max_empty_cycles", "target"})


def _as_mapping(x: Any) -> Mapping[str, Any]:
    if x is None:
        return {}
    if isinstance(x, Mapping):
        return x
    raise TypeError(f"YAML 节点必须是 mapping，实际是：{type(x).__name__}")


def alignment_config_from_dict(data: Mapping[str, Any]) -> AlignmentConfig:
    """从 dict（通常来自 YAML）构造 `AlignmentConfig`。"""

    unknown = sorted(set(data.keys()) - _ALLOWED_KEYS)
    if unknown:
        raise KeyError(f"AlignmentConfig 出现未知字段：{unknown}")

    kwargs: dict[str, Any] = {}
    if "max_empty_cycles" in data:
        try:
            kwargs["max_empty_cycles"] = int(data["max_empty_cycles"])
        except (TypeError, ValueError) as e:
            raise ValueError(f"max_empty_cycles 必须是整数：{data['max_empty_cycles']!r}") from e
    if "target" in data:
        kwargs["target"] = target_config_from_dict(_as_mapping(data["target"]))

    return AlignmentConfig(**kwargs)


def load_alignment_config_yaml(path: str | Path) -> AlignmentConfig:
    """从 YAML 文件加载 `AlignmentConfig`。"""

    p = Path(path)
    text = p.read_text(encoding="utf-8")
    payload = yaml.safe_load(text)
    return alignment_config_from_dict(_as_mapping(payload))
