"""
日志系统测试用例
"""

import os

import pytest

from health_dashboard.utils.logger import Logger, LogLevel, global_logger


class TestLogger:
    """日志系统测试类"""

    def setup_method(self):
        """测试前置方法"""
        self.temp_log_file = "/tmp/test_health_dashboard_log.log"
        if os.path.exists(self.temp_log_file):
            os.remove(self.temp_log_file)

    def teardown_method(self):
        """测试后置方法"""
        if os.path.exists(self.temp_log_file):
            os.remove(self.temp_log_file)

    def _read_log(self):
        with open(self.temp_log_file, "r", encoding="utf-8") as f:
            return f.read()

    def test_logger_initialization(self):
        """测试日志记录器初始化"""
        logger = Logger()
        assert logger is not None

        logger = Logger(
            log_file=self.temp_log_file,
            log_level=LogLevel.DEBUG,
            file_log_level=LogLevel.INFO,
            console_log_level=LogLevel.WARNING,
        )
        assert logger is not None
        assert os.path.exists(self.temp_log_file)

    def test_invalid_log_level(self):
        """测试无效日志级别"""
        with pytest.raises(ValueError):
            Logger(log_level="INFO")

    def test_log_data_load(self):
        """测试数据加载日志记录"""
        logger = Logger(log_file=self.temp_log_file, console_log_level=LogLevel.OFF)

        logger.log_data_load("data/health.csv", 3143, missing_values=12)

        content = self._read_log()
        assert "event_type=DATA_LOAD" in content
        assert "source=data/health.csv" in content
        assert "rows=3143" in content
        assert "missing_values=12" in content

    def test_log_data_load_failure_is_error(self):
        """测试加载失败记录为ERROR级别"""
        logger = Logger(log_file=self.temp_log_file, console_log_level=LogLevel.OFF)

        logger.log_data_load("data/missing.csv", 0, success=False, error="not found")

        content = self._read_log()
        assert "ERROR" in content
        assert "success=False" in content

    def test_log_attribute_change(self):
        """测试属性切换日志记录"""
        logger = Logger(log_file=self.temp_log_file, console_log_level=LogLevel.OFF)

        logger.log_attribute_change("percent_stroke", "median_household_income")

        content = self._read_log()
        assert "event_type=ATTRIBUTE" in content
        assert "attribute=percent_stroke" in content

    def test_log_selection_change_debug_level(self):
        """测试选择变化在DEBUG级别记录"""
        logger = Logger(
            log_file=self.temp_log_file,
            log_level=LogLevel.DEBUG,
            console_log_level=LogLevel.OFF,
        )

        logger.log_selection_change("CLICK", "map", {"01001"}, set())

        content = self._read_log()
        assert "event_type=SELECTION" in content
        assert "clicked=1" in content
        assert "brushed=0" in content

    def test_log_selection_change_hidden_at_info(self):
        """测试INFO级别不记录选择变化"""
        logger = Logger(log_file=self.temp_log_file, console_log_level=LogLevel.OFF)

        logger.log_selection_change("BRUSH", "scatter", set(), {"01001", "01003"})

        assert "SELECTION" not in self._read_log()

    def test_plain_messages(self):
        """测试普通字符串日志"""
        logger = Logger(
            log_file=self.temp_log_file,
            log_level=LogLevel.DEBUG,
            console_log_level=LogLevel.OFF,
        )

        logger.debug("debug message")
        logger.info("info message")
        logger.warning("warning message")
        logger.error("error message")
        logger.critical("critical message")

        content = self._read_log()
        for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            assert level in content

    def test_global_logger_exists(self):
        """测试全局日志记录器"""
        assert isinstance(global_logger, Logger)
