"""
日志系统模块
负责记录数据加载、属性切换和选择状态变化
"""

import logging
from logging.handlers import RotatingFileHandler
import os
from enum import Enum
from typing import Optional, Any, Iterable
from datetime import datetime


class LogLevel(Enum):
    """日志级别枚举"""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL
    OFF = 100  # 高于CRITICAL，用于关闭日志


class Logger:
    """日志记录器类

    提供专门的方法记录数据加载、属性切换和联动选择事件
    """

    def __init__(
        self,
        name: str = "health_dashboard",
        log_file: Optional[str] = None,
        log_level: LogLevel = LogLevel.INFO,
        file_log_level: Optional[LogLevel] = None,
        console_log_level: Optional[LogLevel] = None,
        max_bytes: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
        log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ):
        """
        初始化日志记录器

        Args:
            name: 日志记录器名称
            log_file: 日志文件路径，None表示不输出到文件
            log_level: 全局日志级别
            file_log_level: 文件日志级别，None表示使用全局级别
            console_log_level: 控制台日志级别，None表示使用全局级别
            max_bytes: 日志文件最大字节数，超过则滚动
            backup_count: 保留的备份日志文件数量
            log_format: 日志格式字符串
        """
        if not isinstance(log_level, LogLevel):
            raise ValueError(f"Invalid log_level: {log_level}")

        # 每个实例使用独立的logging记录器和处理器
        self.logger = logging.getLogger(f"{name}_{id(self)}")
        self.logger.setLevel(log_level.value)
        self.logger.handlers.clear()
        self.logger.propagate = False

        formatter = logging.Formatter(log_format)

        if log_file:
            log_dir = os.path.dirname(log_file)
            if log_dir and not os.path.exists(log_dir):
                os.makedirs(log_dir)

            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding='utf-8'
            )
            file_level = file_log_level or log_level
            file_handler.setLevel(file_level.value)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

        if console_log_level != LogLevel.OFF:
            console_handler = logging.StreamHandler()
            console_level = console_log_level or log_level
            console_handler.setLevel(console_level.value)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

    def log_data_load(
        self,
        source: str,
        rows: int,
        success: bool = True,
        **kwargs: Any
    ):
        """
        记录数据加载

        Args:
            source: 数据来源（文件路径）
            rows: 加载的记录数（要素数）
            success: 是否加载成功
            **kwargs: 其他相关信息
        """
        log_data = {
            "event_type": "DATA_LOAD",
            "timestamp": datetime.now().isoformat(),
            "source": source,
            "rows": rows,
            "success": success
        }

        log_data.update(kwargs)

        self._log(LogLevel.INFO if success else LogLevel.ERROR, log_data)

    def log_attribute_change(self, attribute: str, y_attribute: str, **kwargs: Any):
        """
        记录属性下拉框切换

        Args:
            attribute: 当前选中的属性
            y_attribute: 散点图Y轴属性
            **kwargs: 其他相关信息
        """
        log_data = {
            "event_type": "ATTRIBUTE",
            "timestamp": datetime.now().isoformat(),
            "attribute": attribute,
            "y_attribute": y_attribute
        }

        log_data.update(kwargs)

        self._log(LogLevel.INFO, log_data)

    def log_selection_change(
        self,
        action: str,  # CLICK, BRUSH, BIN, CLEAR
        view: str,
        clicked: Iterable[str],
        brushed: Iterable[str],
        **kwargs: Any
    ):
        """
        记录选择状态变化

        Args:
            action: 触发动作（CLICK, BRUSH, BIN, CLEAR）
            view: 触发的视图（map, histogram, scatter, sidebar）
            clicked: 当前点击集合
            brushed: 当前刷选集合
            **kwargs: 其他相关信息
        """
        log_data = {
            "event_type": "SELECTION",
            "timestamp": datetime.now().isoformat(),
            "action": action,
            "view": view,
            "clicked": len(list(clicked)),
            "brushed": len(list(brushed))
        }

        log_data.update(kwargs)

        self._log(LogLevel.DEBUG, log_data)

    def _log(self, level: LogLevel, message: Any):
        """
        内部日志记录方法

        Args:
            level: 日志级别
            message: 日志消息，可以是字符串或字典
        """
        if isinstance(message, dict):
            log_msg = " ".join([f"{k}={v}" for k, v in message.items()])
        else:
            log_msg = str(message)

        if level == LogLevel.DEBUG:
            self.logger.debug(log_msg)
        elif level == LogLevel.INFO:
            self.logger.info(log_msg)
        elif level == LogLevel.WARNING:
            self.logger.warning(log_msg)
        elif level == LogLevel.ERROR:
            self.logger.error(log_msg)
        elif level == LogLevel.CRITICAL:
            self.logger.critical(log_msg)

    def debug(self, message: Any):
        """记录DEBUG级别日志"""
        self._log(LogLevel.DEBUG, message)

    def info(self, message: Any):
        """记录INFO级别日志"""
        self._log(LogLevel.INFO, message)

    def warning(self, message: Any):
        """记录WARNING级别日志"""
        self._log(LogLevel.WARNING, message)

    def error(self, message: Any):
        """记录ERROR级别日志"""
        self._log(LogLevel.ERROR, message)

    def critical(self, message: Any):
        """记录CRITICAL级别日志"""
        self._log(LogLevel.CRITICAL, message)


def get_default_logger() -> Logger:
    """获取默认日志记录器"""
    logs_dir = os.path.join(
        os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(__file__)))),
        "logs",
    )
    log_file = os.path.join(
        logs_dir, f"health_dashboard_{datetime.now().strftime('%Y%m%d')}.log"
    )

    return Logger(
        log_file=log_file,
        log_level=LogLevel.INFO,
        file_log_level=LogLevel.INFO,
        console_log_level=LogLevel.INFO
    )


# 全局日志记录器实例
global_logger = get_default_logger()
