"""
工具函数单元测试
"""

import logging

import numpy as np
import pandas as pd

from health_dashboard.utils.helpers import (
    MISSING_TEXT,
    check_required_packages,
    clean_display_name,
    create_directories,
    format_value,
    is_missing,
    setup_logging,
    validate_dataframe,
)


class TestFormatting:
    """格式化函数测试类"""

    def test_format_value_numbers(self):
        """测试数值格式化去除尾随零"""
        assert format_value(13.2) == "13.2"
        assert format_value(58233.0) == "58233"
        assert format_value(3.456) == "3.46"
        assert format_value(0) == "0"

    def test_format_value_missing(self):
        """测试缺失值显示为N/A"""
        assert format_value(np.nan) == MISSING_TEXT
        assert format_value(None) == "N/A"
        assert format_value("abc") == "N/A"

    def test_is_missing(self):
        assert is_missing(float("nan"))
        assert is_missing(None)
        assert not is_missing(0.0)
        assert not is_missing("12.5")

    def test_clean_display_name(self):
        """测试去除县名中的引号"""
        assert clean_display_name('"Autauga County, AL"') == "Autauga County, AL"
        assert clean_display_name("  Plain  ") == "Plain"
        assert clean_display_name(None) == ""
        assert clean_display_name(float("nan")) == ""


class TestValidateDataFrame:
    """DataFrame验证测试类"""

    def test_none_and_empty(self):
        assert validate_dataframe(None)[0] is False
        assert validate_dataframe(pd.DataFrame())[0] is False

    def test_missing_columns(self):
        df = pd.DataFrame({"a": [1]})

        valid, message = validate_dataframe(df, required_columns=["a", "cnty_fips"])

        assert valid is False
        assert "cnty_fips" in message

    def test_null_ratio(self):
        df = pd.DataFrame({"a": [1, None, None, None]})

        assert validate_dataframe(df)[0] is True
        assert validate_dataframe(df, max_null_ratio=0.5)[0] is False


class TestEnvironmentHelpers:
    """环境相关函数测试类"""

    def test_setup_logging(self):
        logger = setup_logging(logging.DEBUG)

        assert logger.name == "health_dashboard"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

        # 重复调用不会叠加处理器
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_setup_logging_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "app.log"

        logger = setup_logging(log_file=str(log_file))
        logger.info("hello")

        assert log_file.exists()
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    def test_create_directories(self, tmp_path):
        target = tmp_path / "a" / "b"

        create_directories([str(target)])

        assert target.is_dir()

    def test_check_required_packages(self):
        assert check_required_packages() == []
