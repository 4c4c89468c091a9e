"""
Harness CI Lab - 主入口
"""
import sys
import signal
import logging
import argparse
from pathlib import Path

import uvicorn

from .config import init_config
from .state import create_state
from .api import create_app


def setup_logging(log_level: str = "INFO", log_file: str = None):
    """配置日志"""
    level = getattr(logging, log_level.upper(), logging.INFO)

    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def main():
    """主入口函数"""
    parser = argparse.ArgumentParser(description='Harness CI Lab - 容器编排演练服务')
    parser.add_argument('--config-dir', type=str, help='配置文件目录')
    parser.add_argument('--host', type=str, help='监听地址（默认取配置）')
    parser.add_argument('--port', type=int, help='监听端口（默认取 PORT 环境变量或配置）')
    parser.add_argument('--log-level', type=str, help='日志级别')

    args = parser.parse_args()

    config = init_config(args.config_dir)
    if args.host:
        config.server.host = args.host
    if args.port:
        config.server.port = args.port
    log_level = args.log_level or config.system.log_level

    setup_logging(log_level=log_level, log_file=config.system.log_file or None)

    logger = logging.getLogger(__name__)
    state = create_state(config)
    identity = state.identity

    logger.info("=" * 50)
    logger.info(f"{identity.service_name} 启动中...")
    logger.info("=" * 50)
    logger.info(f"版本: {identity.version} ({identity.git_sha})")
    logger.info(f"Pod: {identity.pod_name}  实例: {identity.instance_id}")
    logger.info(f"服务地址: http://{config.server.host}:{config.server.port}")

    def signal_handler(signum, frame):
        logger.info("收到退出信号，正在关闭...")
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    app = create_app(state)
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=log_level.lower()
    )


if __name__ == "__main__":
    main()
