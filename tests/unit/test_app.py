"""
项目启动程序单元测试
"""

import os
import sys
from unittest.mock import patch

import pytest

# 添加项目根目录到Python路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../.."))

APP_PATH = os.path.join(os.path.dirname(__file__), "../../app.py")


def read_app():
    with open(APP_PATH, "r", encoding="utf-8") as f:
        return f.read()


def test_app_exists():
    """测试app.py文件存在"""
    assert os.path.exists(APP_PATH)


def test_app_import():
    """测试app.py可以正确导入"""
    try:
        import app

        assert hasattr(app, "main")
    except ImportError:
        pytest.fail("无法导入app模块")


def test_app_has_main_function():
    """测试app.py包含main函数"""
    assert "def main():" in read_app()


def test_app_imports_required_modules():
    """测试app.py导入必要的模块"""
    content = read_app()

    assert "import streamlit as st" in content
    assert "import pandas as pd" in content
    assert "import plotly.graph_objects as go" in content


def test_check_dependencies():
    import app

    assert app.check_dependencies() == []


def test_load_config_falls_back_to_default():
    """测试无效的环境变量配置回退到默认配置"""
    import app

    with patch.dict(os.environ, {"HEALTH_DASHBOARD_DEFAULT_ATTRIBUTE": "unknown"}):
        config = app.load_config()

    assert config.default_attribute == "poverty_perc"


def test_load_config_from_env():
    import app

    with patch.dict(os.environ, {"HEALTH_DASHBOARD_N_BINS": "20"}):
        config = app.load_config()

    assert config.n_bins == 20


def test_setup_environment_creates_directories():
    """测试运行环境设置创建data和logs目录"""
    import app

    with patch("app.create_directories") as create_directories:
        app.setup_environment()

    directories = create_directories.call_args.args[0]
    assert [os.path.basename(d) for d in directories] == ["data", "logs"]
