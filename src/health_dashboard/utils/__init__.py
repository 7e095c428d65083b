"""
工具函数模块
包含通用的辅助函数
"""

from .helpers import (
    setup_logging,
    create_directories,
    check_required_packages,
    format_value,
    is_missing,
    MISSING_TEXT,
    clean_display_name,
    validate_dataframe,
)

__all__ = [
    "setup_logging",
    "create_directories",
    "check_required_packages",
    "format_value",
    "is_missing",
    "MISSING_TEXT",
    "clean_display_name",
    "validate_dataframe",
]
