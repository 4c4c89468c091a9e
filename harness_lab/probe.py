"""
部署探测模块 - CI 流水线中验证运行中的实例

用法:
    harness-lab-probe --url http://localhost:8080 --expect-version 1.2.0 --wait 30
"""
import sys
import time
import logging
import argparse
from dataclasses import dataclass
from typing import Dict, Any, Optional, List

import requests

logger = logging.getLogger(__name__)


@dataclass
class ProbeResult:
    path: str
    healthy: bool
    status_code: Optional[int] = None
    message: str = ""
    elapsed_ms: float = 0.0


def probe_endpoint(base_url: str, path: str, expected_status: int = 200, timeout: float = 5) -> ProbeResult:
    """HTTP 探测单个接口"""
    url = base_url.rstrip("/") + path
    start_time = time.monotonic()
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        return ProbeResult(path=path, healthy=False, message=f"连接失败: {e}")

    elapsed_ms = round((time.monotonic() - start_time) * 1000, 2)
    if response.status_code == expected_status:
        message = f"HTTP {response.status_code}"
    else:
        message = f"HTTP {response.status_code}, 期望 {expected_status}"
    return ProbeResult(
        path=path,
        healthy=response.status_code == expected_status,
        status_code=response.status_code,
        message=message,
        elapsed_ms=elapsed_ms
    )


def fetch_version(base_url: str, timeout: float = 5) -> Optional[Dict[str, Any]]:
    """读取 /version，失败返回 None"""
    try:
        response = requests.get(base_url.rstrip("/") + "/version", timeout=timeout)
        response.raise_for_status()
        return response.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f"获取版本信息失败: {e}")
        return None


def wait_until_ready(base_url: str, timeout_seconds: float = 30, interval_seconds: float = 1, sleep=time.sleep) -> bool:
    """轮询 /readyz 直到就绪或超时"""
    deadline = time.monotonic() + timeout_seconds
    attempt = 0
    while True:
        attempt += 1
        result = probe_endpoint(base_url, "/readyz")
        if result.healthy:
            logger.info(f"实例已就绪 (第 {attempt} 次探测)")
            return True
        if time.monotonic() >= deadline:
            logger.warning(f"等待就绪超时: {result.message}")
            return False
        sleep(interval_seconds)


def verify_deployment(base_url: str, expected_version: str = None, expected_sha: str = None) -> Dict[str, Any]:
    """
    验证部署：存活/就绪探针 + 版本元数据比对

    返回 {"success", "checks", "version", "errors"}
    """
    checks: List[ProbeResult] = [
        probe_endpoint(base_url, "/healthz"),
        probe_endpoint(base_url, "/readyz"),
    ]
    errors = [f"{c.path}: {c.message}" for c in checks if not c.healthy]

    info = fetch_version(base_url)
    if info is None:
        errors.append("/version: 无法读取")
    else:
        if expected_version and info.get("version") != expected_version:
            errors.append(f"版本不匹配: {info.get('version')} != {expected_version}")
        if expected_sha and info.get("gitSha") != expected_sha:
            errors.append(f"Git SHA 不匹配: {info.get('gitSha')} != {expected_sha}")

    return {
        "success": not errors,
        "checks": checks,
        "version": info,
        "errors": errors,
    }


def main(argv: List[str] = None) -> int:
    parser = argparse.ArgumentParser(description='Harness CI Lab 部署探测')
    parser.add_argument('--url', type=str, default='http://localhost:8080', help='服务地址')
    parser.add_argument('--expect-version', type=str, help='期望的版本号')
    parser.add_argument('--expect-sha', type=str, help='期望的 Git SHA')
    parser.add_argument('--wait', type=float, default=0, help='先等待就绪的秒数')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    if args.wait > 0 and not wait_until_ready(args.url, timeout_seconds=args.wait):
        return 1

    report = verify_deployment(args.url, args.expect_version, args.expect_sha)
    for check in report["checks"]:
        logger.info(f"{check.path}: {check.message} ({check.elapsed_ms}ms)")
    if report["version"]:
        logger.info(f"版本: {report['version'].get('version')} ({report['version'].get('gitSha')}), "
                    f"Pod: {report['version'].get('podName')}, 模式: {report['version'].get('mode')}")

    if not report["success"]:
        for error in report["errors"]:
            logger.error(error)
        return 1

    logger.info("部署验证通过")
    return 0


if __name__ == "__main__":
    sys.exit(main())
