#!/usr/bin/env python3
"""
测试运行脚本参数构建测试
"""
import sys
import pytest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from run_tests import build_args, UNIT_DIR, INTEGRATION_DIR


class TestBuildArgs:
    """run_tests.build_args 测试"""

    def test_default_runs_unit_dir(self):
        assert build_args([]) == [str(UNIT_DIR), '--tb=short', '-q']

    def test_selected_modules(self):
        args = build_args(["chaos", "api"], verbose=True)
        assert args[:2] == [str(UNIT_DIR / "test_chaos.py"), str(UNIT_DIR / "test_api.py")]
        assert '-v' in args

    def test_integration_dir_added(self):
        assert str(INTEGRATION_DIR) in build_args([], integration=True)

    def test_coverage_flags(self):
        """测试覆盖率参数（依赖 test extra 中的 pytest-cov）"""
        args = build_args([], coverage=True)
        assert '--cov=harness_lab' in args
        assert '--cov-report=term-missing' in args


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
