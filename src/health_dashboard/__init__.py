"""
美国县级健康数据联动仪表盘
"""

__version__ = "1.0.0"
