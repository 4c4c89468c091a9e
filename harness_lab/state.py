"""
服务状态容器 - 所有请求处理器共享的可变状态，通过依赖注入传入
"""
from dataclasses import dataclass
from typing import Callable

from .config import Config, get_config
from .identity import ServiceIdentity, create_identity
from .metrics import MetricsRegistry
from .mode import ModeController
from .chaos import ChaosController, CrashScheduler


@dataclass
class ServiceState:
    identity: ServiceIdentity
    metrics: MetricsRegistry
    mode: ModeController
    chaos: ChaosController
    crash_scheduler: CrashScheduler


def create_state(config: Config = None, terminate: Callable[[int], None] = None) -> ServiceState:
    """根据配置组装服务状态；terminate 可替换进程退出函数（测试用）"""
    if config is None:
        config = get_config()

    mode = ModeController()
    scheduler = CrashScheduler(
        delay_seconds=config.chaos.crash_delay_seconds,
        exit_code=config.chaos.crash_exit_code,
    )
    if terminate is not None:
        scheduler.terminate = terminate

    return ServiceState(
        identity=create_identity(config),
        metrics=MetricsRegistry(),
        mode=mode,
        chaos=ChaosController(mode, crash_delay_seconds=config.chaos.crash_delay_seconds),
        crash_scheduler=scheduler,
    )
