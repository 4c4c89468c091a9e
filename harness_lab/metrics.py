"""
请求计数模块

计数器在多个请求线程间共享，所有读写都在锁内完成，
保证不丢失任何一次自增。
"""
from dataclasses import dataclass, field
from threading import Lock
from typing import Dict

# 浏览器自动请求的图标，不出现在 /metrics 输出中（仍计入总数）
SUPPRESSED_PATHS = {"/favicon.ico"}


@dataclass(frozen=True)
class MetricsSnapshot:
    """某一时刻的计数器快照"""
    requests_total: int = 0
    greet_visitors: int = 0
    requests_by_path: Dict[str, int] = field(default_factory=dict)


class MetricsRegistry:
    """线程安全的请求计数器"""

    def __init__(self):
        self.lock = Lock()
        self._requests_total = 0
        self._greet_visitors = 0
        self._requests_by_path: Dict[str, int] = {}

    def record(self, path: str):
        """记录一次请求：总数和该路径计数各加一"""
        with self.lock:
            self._requests_total += 1
            self._requests_by_path[path] = self._requests_by_path.get(path, 0) + 1

    def next_visitor(self) -> int:
        """/greet 访客计数加一，返回本次访客序号"""
        with self.lock:
            self._greet_visitors += 1
            return self._greet_visitors

    def snapshot(self) -> MetricsSnapshot:
        with self.lock:
            return MetricsSnapshot(
                requests_total=self._requests_total,
                greet_visitors=self._greet_visitors,
                requests_by_path=dict(self._requests_by_path),
            )


def render_metrics(snapshot: MetricsSnapshot, uptime_seconds: int) -> str:
    """
    生成类 Prometheus 文本格式

    路径按首次出现顺序输出，SUPPRESSED_PATHS 中的路径被跳过
    """
    lines = [
        f"service_uptime_seconds {uptime_seconds}",
        f"requests_total {snapshot.requests_total}",
        f"greet_visitors_total {snapshot.greet_visitors}",
    ]
    for path, count in snapshot.requests_by_path.items():
        if path in SUPPRESSED_PATHS:
            continue
        lines.append(f'requests_by_path{{path="{path}"}} {count}')
    return "\n".join(lines) + "\n"
