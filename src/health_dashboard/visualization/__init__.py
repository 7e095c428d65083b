"""
可视化模块
负责比例尺、图表生成和Streamlit界面
"""

from .chart_generator import ChartGenerator
from .streamlit_app import StreamlitApp

__all__ = ["ChartGenerator", "StreamlitApp"]
