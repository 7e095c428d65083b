"""
联动选择模块
负责点击、刷选和直方图分箱切换在三个视图之间的同步
"""

from .state import SelectionState
from .events import ChartEventHandler, default_resolver

__all__ = ["SelectionState", "ChartEventHandler", "default_resolver"]
