"""
配置加载模块

加载顺序: 默认值 -> config/config.yml (可选) -> 环境变量
"""
import os
import math
import logging
import yaml
from pathlib import Path
from dataclasses import dataclass

logger = logging.getLogger(__name__)


def _valid_delay(delay: float) -> bool:
    """崩溃延迟必须是有限的非负数，否则退出线程无法 sleep"""
    return math.isfinite(delay) and delay >= 0


@dataclass
class ServiceConfig:
    """服务元数据（通常由 CI/CD 注入）"""
    name: str = "harness-ci-lab"
    version: str = "dev"
    git_sha: str = "unknown"
    pod_name: str = "local"  # K8s 中 HOSTNAME 即 Pod 名


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8080


@dataclass
class ChaosConfig:
    crash_delay_seconds: float = 2.0
    crash_exit_code: int = 1


@dataclass
class SystemConfig:
    log_level: str = "INFO"
    log_file: str = ""


# 环境变量 -> (配置段, 字段)
ENV_OVERRIDES = {
    "SERVICE_NAME": ("service", "name"),
    "APP_VERSION": ("service", "version"),
    "GIT_SHA": ("service", "git_sha"),
    "HOSTNAME": ("service", "pod_name"),
    "PORT": ("server", "port"),
    "LOG_LEVEL": ("system", "log_level"),
    "CRASH_DELAY_SECONDS": ("chaos", "crash_delay_seconds"),
}


class Config:
    """全局配置类"""

    def __init__(self, config_dir: str = None):
        if config_dir is None:
            config_dir = Path(__file__).parent.parent / "config"

        self.config_dir = Path(config_dir)
        self.service = ServiceConfig()
        self.server = ServerConfig()
        self.chaos = ChaosConfig()
        self.system = SystemConfig()

        self._load_config()
        self._apply_env()

    def _load_config(self):
        """加载主配置文件（不存在时只使用默认值）"""
        config_file = self.config_dir / "config.yml"
        if not config_file.exists():
            logger.info(f"配置文件不存在，使用默认值: {config_file}")
            return

        with open(config_file, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        svc_cfg = data.get('service', {})
        self.service.name = self._resolve_env(str(svc_cfg.get('name', self.service.name)))
        self.service.version = self._resolve_env(str(svc_cfg.get('version', self.service.version)))
        self.service.git_sha = self._resolve_env(str(svc_cfg.get('git_sha', self.service.git_sha)))
        self.service.pod_name = self._resolve_env(str(svc_cfg.get('pod_name', self.service.pod_name)))

        server_cfg = data.get('server', {})
        self.server.host = server_cfg.get('host', self.server.host)
        self.server.port = int(server_cfg.get('port', self.server.port))

        chaos_cfg = data.get('chaos', {})
        delay = float(chaos_cfg.get('crash_delay_seconds', self.chaos.crash_delay_seconds))
        if _valid_delay(delay):
            self.chaos.crash_delay_seconds = delay
        else:
            logger.warning(f"crash_delay_seconds={delay!r} 无效，保留 {self.chaos.crash_delay_seconds!r}")
        self.chaos.crash_exit_code = int(chaos_cfg.get('crash_exit_code', self.chaos.crash_exit_code))

        sys_cfg = data.get('system', {})
        self.system.log_level = sys_cfg.get('log_level', self.system.log_level)
        self.system.log_file = sys_cfg.get('log_file', self.system.log_file) or ""

    def _apply_env(self):
        """环境变量覆盖（空值视为未设置）"""
        for env_name, (section, attr) in ENV_OVERRIDES.items():
            value = os.environ.get(env_name, '')
            if not value:
                continue

            target = getattr(self, section)
            current = getattr(target, attr)
            try:
                # 按默认值类型转换
                converted = type(current)(value)
            except ValueError:
                converted = None

            if converted is None or (attr == 'crash_delay_seconds' and not _valid_delay(converted)):
                logger.warning(f"环境变量 {env_name}={value!r} 无效，保留 {current!r}")
                continue
            setattr(target, attr, converted)

    def _resolve_env(self, value: str) -> str:
        """解析环境变量 ${VAR_NAME}"""
        if not value or not isinstance(value, str):
            return value

        if value.startswith('${') and value.endswith('}'):
            env_name = value[2:-1]
            return os.environ.get(env_name, '')

        return value


# 全局配置实例
_config: Config = None


def get_config() -> Config:
    """获取全局配置"""
    global _config
    if _config is None:
        _config = Config()
    return _config


def init_config(config_dir: str = None):
    """初始化配置"""
    global _config
    _config = Config(config_dir)
    return _config
