"""
配置模块
"""

from .config import DashboardConfig, create_config_from_dict, get_default_config

__all__ = ["DashboardConfig", "create_config_from_dict", "get_default_config"]
