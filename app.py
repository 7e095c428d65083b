#!/usr/bin/env python3
"""
美国县级健康数据联动仪表盘 - 项目启动程序

在等值区域图、直方图和散点图三个联动视图中展示县级贫困率、吸烟率、
家庭收入中位数和中风率。在任一视图中点击或框选县，其余视图同步高亮。

使用方法:
    streamlit run app.py

数据文件默认位于 data/ 目录：
    data/counties-10m.json              县界TopoJSON
    data/national_health_data_2024.csv  县级健康统计
"""

import sys
import warnings
from pathlib import Path

# 添加src目录到Python路径，未安装包时也能直接运行
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir / "src"))

warnings.filterwarnings("ignore", category=FutureWarning)

from health_dashboard.utils.logger import global_logger

try:
    import streamlit as st
    import pandas as pd
    import numpy as np
    import plotly.graph_objects as go
    import yaml
except ImportError as e:
    print(f"错误: 缺少必要的依赖包 - {e}")
    print("\n请安装以下依赖包:")
    print("pip install streamlit pandas numpy plotly pyyaml")
    sys.exit(1)

from health_dashboard.config.config import DashboardConfig
from health_dashboard.utils.helpers import check_required_packages, create_directories
from health_dashboard.visualization.streamlit_app import StreamlitApp


def check_dependencies():
    """检查依赖包是否已安装"""
    return check_required_packages()


def setup_environment():
    """设置运行环境"""
    directories = [str(current_dir / "data"), str(current_dir / "logs")]
    create_directories(directories)
    for directory in directories:
        global_logger.info(f"已创建或确认目录: {directory}")


def load_config() -> DashboardConfig:
    """加载配置：环境变量优先，无效配置回退到默认值"""
    config = DashboardConfig.from_env()
    if not config.validate():
        for message in config.validation_errors:
            global_logger.warning(f"配置无效: {message}")
        global_logger.warning("使用默认配置")
        config = DashboardConfig.get_default()
    return config


def main():
    """主函数"""
    setup_environment()
    app = StreamlitApp(load_config())
    app.run()


if __name__ == "__main__":
    # 检查依赖
    missing_packages = check_dependencies()

    if missing_packages:
        print("错误: 缺少以下依赖包:")
        for package in missing_packages:
            print(f"  - {package}")
        print("\n请运行以下命令安装:")
        print("pip install", " ".join(missing_packages))
        sys.exit(1)

    main()
