"""
问候语生成模块
"""
from datetime import datetime

from .identity import ServiceIdentity
from .mode import Mode


def generate_greeting(
    name: str,
    visitor_number: int,
    requested_mode: str,
    current_mode: Mode,
    identity: ServiceIdentity,
    now: datetime = None
) -> str:
    """
    生成多行问候语（纯函数，不修改任何共享状态）

    requested_mode 原样回显，仅在判断 pirate 时忽略大小写；
    name 和 requested_mode 可以是任意字符串，直接插入输出。
    """
    if requested_mode.lower() == "pirate":
        opening = f"Ahoy, {name}! 🏴‍☠️"
    else:
        opening = f"Hello, {name}! 👋"

    lines = [
        opening,
        f"You are visitor #{visitor_number}",
        f"Service: {identity.service_name}",
        f"Greeting Mode: {requested_mode}",
        f"App Mode: {current_mode.value}",
        f"Version: {identity.version}",
        f"Git SHA: {identity.git_sha}",
        f"Pod: {identity.pod_name}",
        f"Instance: {identity.short_instance_id}",
        f"Uptime: {identity.uptime_seconds(now)}s",
    ]
    return "\n".join(lines) + "\n"
