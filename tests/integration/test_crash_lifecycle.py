#!/usr/bin/env python3
"""
集成测试 - 启动真实服务进程

测试内容：
- 进程启动后探针可用
- 环境变量注入的元数据
- crash 指令后进程以退出码 1 结束
"""
import os
import sys
import time
import socket
import subprocess
import pytest
import requests
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from harness_lab.probe import wait_until_ready, fetch_version


def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def service_process():
    """
    启动 harness_lab 服务子进程，测试结束后确保进程已退出
    """
    port = free_port()
    env = dict(os.environ)
    env.update({
        "APP_VERSION": "9.9.9",
        "GIT_SHA": "feedface",
        "HOSTNAME": "integration-pod",
        "PORT": str(port),
        "CRASH_DELAY_SECONDS": "1",
    })
    process = subprocess.Popen(
        [sys.executable, "-m", "harness_lab.main", "--host", "127.0.0.1", "--log-level", "warning"],
        cwd=str(PROJECT_ROOT),
        env=env,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL
    )
    base_url = f"http://127.0.0.1:{port}"

    if not wait_until_ready(base_url, timeout_seconds=15, interval_seconds=0.2):
        process.kill()
        process.wait()
        pytest.fail("服务未在 15 秒内就绪")

    yield process, base_url

    if process.poll() is None:
        process.kill()
        process.wait()


@pytest.mark.slow
def test_metadata_from_env(service_process):
    """测试环境变量注入的元数据"""
    _, base_url = service_process
    info = fetch_version(base_url)
    assert info["version"] == "9.9.9"
    assert info["gitSha"] == "feedface"
    assert info["podName"] == "integration-pod"


@pytest.mark.slow
def test_crash_terminates_process(service_process):
    """测试 crash 返回 200 后进程在数秒内退出"""
    process, base_url = service_process

    response = requests.get(f"{base_url}/chaos?action=crash", timeout=5)
    assert response.status_code == 200
    assert response.text == "Crashing in 1 seconds...\n"

    start = time.time()
    exit_code = process.wait(timeout=10)
    assert exit_code == 1
    assert time.time() - start < 10

    with pytest.raises(requests.ConnectionError):
        requests.get(f"{base_url}/healthz", timeout=2)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
