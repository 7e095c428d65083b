"""
数据加载模块
负责读取县级健康统计CSV和县界拓扑文件
"""

from .attributes import ATTRIBUTE_DISPLAY_NAMES, NUMERIC_ATTRIBUTES, get_display_name
from .loader import CountyDataLoader, DataLoadError

__all__ = [
    "ATTRIBUTE_DISPLAY_NAMES",
    "NUMERIC_ATTRIBUTES",
    "get_display_name",
    "CountyDataLoader",
    "DataLoadError",
]
