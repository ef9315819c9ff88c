"""数据结构：Tag 检测 / 目标选择结果 / 停靠位姿。

说明：
- 本包只负责“选哪个 Tag”与“相对位姿推导”的核心算法，不依赖相机采集与检测器实现。
- Detection 由上游感知模块每帧新建；本包只读不改。

坐标约定（机器人平面坐标系）：
- x 向前为正，y 向左为正。
- heading 为 0 表示朝正前方，逆时针为正，统一归一到 (-pi, pi]。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np

from fiducial_target.transforms import make_T


def as_np_f64(x: np.ndarray | Iterable[float], shape: tuple[int, ...]) -> np.ndarray:
    """把输入转为 float64 ndarray 并校验形状。"""

    a = np.asarray(x, dtype=np.float64)
    a = a.reshape(shape)
    return a


@dataclass(frozen=True, slots=True, eq=False)
class Detection:
    """单个 Tag 在当前帧的观测。

    Attributes:
        tag_id: Tag 编号。
        ambiguity: 位姿二义性评分，越小越可信。
        camera_to_target: 相机 -> Tag 的刚体变换 T_cam_from_tag (4,4)。
            只使用其平移部分（前向/横向投影）。
        yaw_deg: 感知模块给出的 Tag 水平偏角（度，相机口径：向右为正）。

    说明：
        含 ndarray 字段，按对象身份比较（eq=False），避免数组逐元素比较的歧义。
    """

    tag_id: int
    ambiguity: float
    camera_to_target: np.ndarray  # (4,4)
    yaw_deg: float = 0.0

    def __post_init__(self) -> None:
        T = np.array(self.camera_to_target, dtype=np.float64).reshape(4, 4)
        # 每帧新建、只读：冻结数组，避免下游误改上游数据。
        T.flags.writeable = False
        object.__setattr__(self, "camera_to_target", T)
        object.__setattr__(self, "tag_id", int(self.tag_id))
        object.__setattr__(self, "ambiguity", float(self.ambiguity))
        object.__setattr__(self, "yaw_deg", float(self.yaw_deg))

    @classmethod
    def from_translation(
        cls,
        *,
        tag_id: int,
        translation: np.ndarray | Iterable[float],
        ambiguity: float = 0.0,
        yaw_deg: float = 0.0,
        rotation: np.ndarray | None = None,
    ) -> "Detection":
        """由平移向量（以及可选的旋转矩阵）构造 Detection。"""

        R = np.eye(3, dtype=np.float64) if rotation is None else rotation
        return cls(
            tag_id=int(tag_id),
            ambiguity=float(ambiguity),
            camera_to_target=make_T(R=R, t=as_np_f64(translation, (3,))),
            yaw_deg=float(yaw_deg),
        )

    def translation_xy(self) -> tuple[float, float]:
        """相机 -> Tag 平移在平面上的投影 (前向, 横向)。"""

        return float(self.camera_to_target[0, 3]), float(self.camera_to_target[1, 3])


@dataclass(frozen=True, slots=True)
class TargetSelection:
    """单帧目标选择结果（显式的有/无标签，而不是裸 None）。

    Attributes:
        valid: 是否选中了某个 Detection。
        reason: 选择/未选择的原因，便于日志与排障：
            - "single"：本帧只有一个检测。
            - "priority_id"：命中优先 Tag 编号。
            - "best_fallback"：未命中优先编号，回退到感知模块给出的 best。
            - "lowest_ambiguity"：未提供 best，按 ambiguity 最小回退。
            - "no_detections"：本帧没有检测。
            - "malformed"：选中的检测含非有限值，按“本帧缺失”处理。
        detection: 选中的检测；valid=False 时为 None。
    """

    valid: bool
    reason: str | None
    detection: Detection | None

    @classmethod
    def present(cls, detection: Detection, reason: str) -> "TargetSelection":
        return cls(valid=True, reason=str(reason), detection=detection)

    @classmethod
    def absent(cls, reason: str = "no_detections") -> "TargetSelection":
        return cls(valid=False, reason=str(reason), detection=None)


@dataclass(frozen=True, slots=True)
class StandoffPose:
    """停靠目标位姿（机器人平面坐标系）。

    Attributes:
        x_m: 前向（米）。
        y_m: 横向（米），向左为正。
        heading_rad: 朝向（弧度），(-pi, pi]。
    """

    x_m: float
    y_m: float
    heading_rad: float


@dataclass(frozen=True, slots=True)
class StandoffResolution:
    """一次停靠位姿推导的输出（包含诊断字段）。

    说明：
        forward_m/lateral_m 是把停靠平移按 -facing 旋转后的分解，仅用于日志排障，
        不参与下游控制。
    """

    pose: StandoffPose
    tag_id: int
    translation_angle_rad: float
    facing_angle_rad: float
    clamped_facing_rad: float
    extra_angle_rad: float
    gap_xy: tuple[float, float]
    forward_m: float
    lateral_m: float
