"""感知资源（相机）独占令牌。

说明：
    - 同一时刻只允许一个轮询器向同一个相机发请求；令牌在 start() 时获取，
      在任何终止（成功/超时/取消）时释放。
    - 令牌跨多个 tick 持有，因此不能用 with 语句包住；释放点由调用方在 finally 中保证。
    - 非阻塞：获取失败立即返回 False，不在 tick 内等待。
"""

from __future__ import annotations

import threading
from typing import Hashable


class SensorBusyError(RuntimeError):
    """感知资源已被其他持有者占用。"""


class SensorOwnership:
    """非阻塞独占令牌。"""

    def __init__(self, name: str = "camera") -> None:
        self._name = str(name)
        self._lock = threading.Lock()
        self._owner: Hashable | None = None

    @property
    def owner(self) -> Hashable | None:
        return self._owner

    @property
    def is_held(self) -> bool:
        return self._owner is not None

    def try_acquire(self, owner: Hashable) -> bool:
        """尝试获取令牌；同一持有者重复获取视为成功。"""

        with self._lock:
            if self._owner is None:
                self._owner = owner
                return True
            return self._owner == owner

    def acquire(self, owner: Hashable) -> None:
        """获取令牌；被他人占用时抛 SensorBusyError。"""

        if not self.try_acquire(owner):
            raise SensorBusyError(f"{self._name} 已被 {self._owner!r} 占用")

    def release(self, owner: Hashable) -> bool:
        """释放令牌；非持有者释放为 no-op（返回 False）。"""

        with self._lock:
            if self._owner is None or self._owner != owner:
                return False
            self._owner = None
            return True
