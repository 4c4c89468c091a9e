"""
混沌控制模块 - 模拟降级与进程崩溃，用于验证 K8s 自愈
"""
import os
import time
import logging
from dataclasses import dataclass
from threading import Thread
from typing import Callable

from .mode import Mode, ModeController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChaosResult:
    """混沌指令的处理结果"""
    status_code: int
    message: str
    crash: bool = False


class CrashScheduler:
    """
    延迟终止进程

    schedule() 启动独立线程，sleep 后直接调用 terminate(exit_code)。
    一旦调度无法取消。子线程中 sys.exit 只会结束线程本身，因此默认用 os._exit。
    生产环境应由外部监管者发送信号终止进程，而不是服务自行退出。
    """

    def __init__(
        self,
        delay_seconds: float = 2.0,
        exit_code: int = 1,
        terminate: Callable[[int], None] = os._exit
    ):
        self.delay_seconds = delay_seconds
        self.exit_code = exit_code
        self.terminate = terminate

    def schedule(self):
        logger.warning(f"进程将在 {self.delay_seconds}s 后退出 (exit_code={self.exit_code})")
        thread = Thread(target=self._run, name="CrashScheduler", daemon=True)
        thread.start()

    def _run(self):
        time.sleep(self.delay_seconds)
        logger.critical("模拟崩溃: 进程退出")
        self.terminate(self.exit_code)


def _format_delay(delay_seconds: float) -> str:
    if float(delay_seconds).is_integer():
        return str(int(delay_seconds))
    return str(delay_seconds)


class ChaosController:
    """解析 action 指令并修改运行模式"""

    def __init__(self, mode: ModeController, crash_delay_seconds: float = 2.0):
        self.mode = mode
        self.crash_delay_seconds = crash_delay_seconds

    def apply(self, action: str) -> ChaosResult:
        if action == "enable":
            self.mode.set(Mode.CHAOS)
            return ChaosResult(200, "Chaos mode enabled\n")

        if action == "disable":
            self.mode.set(Mode.NORMAL)
            return ChaosResult(200, "Chaos mode disabled\n")

        if action == "crash":
            delay = _format_delay(self.crash_delay_seconds)
            return ChaosResult(200, f"Crashing in {delay} seconds...\n", crash=True)

        # 未知指令：返回 503 模拟依赖降级，不改变状态
        logger.warning(f"未知混沌指令: {action!r}，返回 503")
        return ChaosResult(503, "Service degraded (chaos mode)\n")
