"""
运行模式模块
"""
import logging
from enum import Enum
from threading import Lock
from typing import Union

logger = logging.getLogger(__name__)


class Mode(Enum):
    NORMAL = "normal"
    CHAOS = "chaos"


class ModeController:
    """全局运行模式，任意请求线程都可读写"""

    def __init__(self, initial: Mode = Mode.NORMAL):
        self.lock = Lock()
        self._mode = initial

    def get(self) -> Mode:
        with self.lock:
            return self._mode

    def set(self, mode: Union[Mode, str]):
        """设置模式（幂等），接受 Mode 或其字符串值"""
        mode = Mode(mode)
        with self.lock:
            previous = self._mode
            self._mode = mode
        if previous != mode:
            logger.info(f"运行模式切换: {previous.value} -> {mode.value}")
