#!/usr/bin/env python3
"""
pytest 配置文件

提供共享的 fixtures 和配置
"""
import sys
import threading
import pytest
from pathlib import Path

# 添加项目路径
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

# 会被 Config 读取的环境变量，测试前统一清除
CONFIG_ENV_VARS = [
    "SERVICE_NAME", "APP_VERSION", "GIT_SHA", "HOSTNAME",
    "PORT", "LOG_LEVEL", "CRASH_DELAY_SECONDS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """每个测试前清除配置相关环境变量"""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(autouse=True)
def reset_config():
    """每个测试前重置配置"""
    import harness_lab.config as config_module
    config_module._config = None
    yield
    config_module._config = None


class FakeTerminator:
    """替代 os._exit，记录退出码"""

    def __init__(self):
        self.exit_codes = []
        self.called = threading.Event()

    def __call__(self, exit_code):
        self.exit_codes.append(exit_code)
        self.called.set()


@pytest.fixture
def terminator():
    return FakeTerminator()


@pytest.fixture
def service_state(terminator):
    """使用默认配置、crash 延迟缩短的服务状态"""
    from harness_lab.config import init_config
    from harness_lab.state import create_state

    config = init_config()
    config.chaos.crash_delay_seconds = 0.05
    return create_state(config, terminate=terminator)


@pytest.fixture
def client(service_state):
    """FastAPI 测试客户端"""
    from fastapi.testclient import TestClient
    from harness_lab.api import create_app

    with TestClient(create_app(service_state)) as test_client:
        yield test_client
