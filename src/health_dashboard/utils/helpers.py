"""
工具函数模块
提供通用的工具函数和日志设置
"""

import logging
import math
import os
import sys
import pandas as pd
from typing import Any, List, Optional, Tuple


# 缺失值的统一显示文本
MISSING_TEXT = "N/A"


# 日志相关函数
def setup_logging(
    log_level: int = logging.INFO, log_file: Optional[str] = None
) -> logging.Logger:
    """
    设置日志配置

    Args:
        log_level: 日志级别
        log_file: 日志文件路径（可选）

    Returns:
        logging.Logger: 配置好的日志记录器
    """
    logger = logging.getLogger("health_dashboard")
    logger.setLevel(log_level)

    # 清除现有的处理器（Streamlit每次重跑都会调用）
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


# 目录和文件相关函数
def create_directories(directories: Optional[List[str]] = None) -> None:
    """
    创建必要的目录结构

    Args:
        directories: 要创建的目录列表，如果为None则使用默认目录
    """
    default_dirs = ["data", "logs"]
    dirs_to_create = directories or default_dirs

    for directory in dirs_to_create:
        os.makedirs(directory, exist_ok=True)


# 包和依赖相关函数
def check_required_packages() -> List[str]:
    """
    检查必要的Python包是否已安装

    Returns:
        List[str]: 缺失的包列表
    """
    required_packages = [
        "pandas",
        "numpy",
        "plotly",
        "streamlit",
        "yaml",
    ]

    missing_packages = []

    for package in required_packages:
        try:
            __import__(package)
        except ImportError:
            missing_packages.append(package)

    return missing_packages


# 数据格式化函数
def is_missing(value: Any) -> bool:
    """判断数值是否缺失（None、NaN或无法转换为数字）"""
    if value is None:
        return True
    try:
        return math.isnan(float(value))
    except (TypeError, ValueError):
        return True


def format_value(value: Any, decimals: int = 2) -> str:
    """
    格式化提示框中的属性值

    Args:
        value: 属性值，缺失值显示为 N/A
        decimals: 最多保留的小数位数

    Returns:
        str: 格式化后的字符串，去除多余的尾随零
    """
    if is_missing(value):
        return MISSING_TEXT

    text = f"{float(value):.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


def clean_display_name(name: Any) -> str:
    """去除县名中的双引号和首尾空白，缺失时返回空字符串"""
    if name is None or (isinstance(name, float) and math.isnan(name)):
        return ""
    return str(name).replace('"', "").strip()


# 数据验证函数
def validate_dataframe(
    df: Optional[pd.DataFrame],
    required_columns: Optional[List[str]] = None,
    max_null_ratio: float = 1.0,
) -> Tuple[bool, str]:
    """
    验证DataFrame的完整性

    Args:
        df: 要验证的DataFrame
        required_columns: 必须包含的列列表
        max_null_ratio: 允许的最大缺失值比例（0-1之间）

    Returns:
        Tuple[bool, str]: (验证结果, 验证消息)
    """
    if df is None:
        return False, "DataFrame为None"

    if df.empty:
        return False, "DataFrame为空"

    if required_columns:
        missing_columns = [col for col in required_columns if col not in df.columns]
        if missing_columns:
            return False, f"缺少列: {', '.join(missing_columns)}"

    # 检查是否有过多的缺失值
    total_cells = len(df) * len(df.columns)
    null_count = df.isnull().sum().sum()
    null_ratio = null_count / total_cells

    if null_ratio > max_null_ratio:
        return False, f"缺失值比例过高: {null_ratio:.2%}"

    return True, "数据验证通过"
