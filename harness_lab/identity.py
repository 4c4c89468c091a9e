"""
服务身份模块 - 启动时间与实例 ID
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .config import Config


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ServiceIdentity:
    """进程生命周期内不变的服务元数据"""
    service_name: str
    version: str
    git_sha: str
    pod_name: str
    instance_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    started_at: datetime = field(default_factory=_utcnow)

    @property
    def short_instance_id(self) -> str:
        return self.instance_id[:8]

    def uptime_seconds(self, now: datetime = None) -> int:
        """启动至今的整秒数"""
        if now is None:
            now = _utcnow()
        return int((now - self.started_at).total_seconds())


def create_identity(config: Config) -> ServiceIdentity:
    """根据配置创建服务身份（每个进程一次）"""
    return ServiceIdentity(
        service_name=config.service.name,
        version=config.service.version,
        git_sha=config.service.git_sha,
        pod_name=config.service.pod_name,
    )
