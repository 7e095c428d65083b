"""
仪表盘配置模块
集中管理所有应用参数，提供参数验证和默认值设置
支持从环境变量、JSON/YAML配置文件等多种方式加载配置
"""

from typing import Dict, List, Any
import os
import json
import re
import yaml


class DashboardConfig:
    """仪表盘配置类"""

    # 默认配置值
    DEFAULT_CONFIG = {
        "topology_path": "data/counties-10m.json",
        "data_path": "data/national_health_data_2024.csv",
        "default_attribute": "poverty_perc",
        "default_y_attribute": "median_household_income",
        "n_bins": 10,
        "n_colors": 9,
        "map_width": 800,
        "map_height": 500,
        "histogram_width": 600,
        "histogram_height": 400,
        "scatter_width": 600,
        "scatter_height": 400,
        "highlight_opacity": 1.0,
        "dimmed_opacity": 0.25,
        "base_bar_color": "steelblue",
        "base_point_color": "orange",
        "highlight_color": "#d62728",
        "missing_color": "#ccc",
        "log_level": "INFO",
        "log_dir": "logs",
    }

    INT_FIELDS = [
        "n_bins",
        "n_colors",
        "map_width",
        "map_height",
        "histogram_width",
        "histogram_height",
        "scatter_width",
        "scatter_height",
    ]
    FLOAT_FIELDS = ["highlight_opacity", "dimmed_opacity"]

    def __init__(self, **kwargs):
        """
        初始化配置参数

        Args:
            **kwargs: 配置参数，支持覆盖默认值
        """
        # 数据文件
        self.topology_path = kwargs.get(
            "topology_path", self.DEFAULT_CONFIG["topology_path"]
        )
        self.data_path = kwargs.get("data_path", self.DEFAULT_CONFIG["data_path"])

        # 默认属性
        self.default_attribute = kwargs.get(
            "default_attribute", self.DEFAULT_CONFIG["default_attribute"]
        )
        self.default_y_attribute = kwargs.get(
            "default_y_attribute", self.DEFAULT_CONFIG["default_y_attribute"]
        )

        # 比例尺参数
        self.n_bins = kwargs.get("n_bins", self.DEFAULT_CONFIG["n_bins"])
        self.n_colors = kwargs.get("n_colors", self.DEFAULT_CONFIG["n_colors"])

        # 图表尺寸
        self.map_width = kwargs.get("map_width", self.DEFAULT_CONFIG["map_width"])
        self.map_height = kwargs.get("map_height", self.DEFAULT_CONFIG["map_height"])
        self.histogram_width = kwargs.get(
            "histogram_width", self.DEFAULT_CONFIG["histogram_width"]
        )
        self.histogram_height = kwargs.get(
            "histogram_height", self.DEFAULT_CONFIG["histogram_height"]
        )
        self.scatter_width = kwargs.get(
            "scatter_width", self.DEFAULT_CONFIG["scatter_width"]
        )
        self.scatter_height = kwargs.get(
            "scatter_height", self.DEFAULT_CONFIG["scatter_height"]
        )

        # 高亮样式
        self.highlight_opacity = kwargs.get(
            "highlight_opacity", self.DEFAULT_CONFIG["highlight_opacity"]
        )
        self.dimmed_opacity = kwargs.get(
            "dimmed_opacity", self.DEFAULT_CONFIG["dimmed_opacity"]
        )
        self.base_bar_color = kwargs.get(
            "base_bar_color", self.DEFAULT_CONFIG["base_bar_color"]
        )
        self.base_point_color = kwargs.get(
            "base_point_color", self.DEFAULT_CONFIG["base_point_color"]
        )
        self.highlight_color = kwargs.get(
            "highlight_color", self.DEFAULT_CONFIG["highlight_color"]
        )
        self.missing_color = kwargs.get(
            "missing_color", self.DEFAULT_CONFIG["missing_color"]
        )

        # 日志配置
        self.log_level = kwargs.get("log_level", self.DEFAULT_CONFIG["log_level"])
        self.log_dir = kwargs.get("log_dir", self.DEFAULT_CONFIG["log_dir"])

        # 验证错误信息
        self.validation_errors: List[str] = []

    def validate(self) -> bool:
        """
        验证配置参数的有效性

        Returns:
            bool: 验证是否通过
        """
        self.validation_errors = []

        if not self._validate_attribute(self.default_attribute):
            self.validation_errors.append(f"无效的默认属性: {self.default_attribute}")

        if not self._validate_attribute(self.default_y_attribute):
            self.validation_errors.append(
                f"无效的散点图Y轴属性: {self.default_y_attribute}"
            )

        if not self._validate_positive_int(self.n_bins):
            self.validation_errors.append(f"无效的分箱数量: {self.n_bins}")

        if not self._validate_n_colors(self.n_colors):
            self.validation_errors.append(f"无效的颜色数量: {self.n_colors}")

        for field in self.INT_FIELDS[2:]:
            value = getattr(self, field)
            if not self._validate_positive_int(value):
                self.validation_errors.append(f"无效的图表尺寸 {field}: {value}")

        for field in self.FLOAT_FIELDS:
            value = getattr(self, field)
            if not self._validate_opacity(value):
                self.validation_errors.append(f"无效的透明度 {field}: {value}")

        if not self._validate_log_level(self.log_level):
            self.validation_errors.append(f"无效的日志级别: {self.log_level}")

        return len(self.validation_errors) == 0

    def to_dict(self) -> Dict[str, Any]:
        """
        将配置转换为字典

        Returns:
            Dict[str, Any]: 配置参数字典
        """
        return {key: getattr(self, key) for key in self.DEFAULT_CONFIG}

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "DashboardConfig":
        """从字典创建配置实例"""
        return cls(**config_dict)

    @classmethod
    def get_default(cls) -> "DashboardConfig":
        """获取默认配置"""
        return cls()

    @classmethod
    def from_env(cls) -> "DashboardConfig":
        """
        从环境变量创建配置

        环境变量名为 HEALTH_DASHBOARD_ 加上大写的参数名，
        例如 HEALTH_DASHBOARD_DATA_PATH。

        Returns:
            DashboardConfig: 配置实例
        """
        config_dict = {}

        for config_key in cls.DEFAULT_CONFIG:
            env_value = os.getenv(f"HEALTH_DASHBOARD_{config_key.upper()}")
            if env_value is None:
                continue

            # 类型转换，无法转换时保留默认值
            if config_key in cls.INT_FIELDS:
                try:
                    config_dict[config_key] = int(env_value)
                except ValueError:
                    pass
            elif config_key in cls.FLOAT_FIELDS:
                try:
                    config_dict[config_key] = float(env_value)
                except ValueError:
                    pass
            else:
                config_dict[config_key] = env_value

        return cls(**config_dict)

    @classmethod
    def from_json_file(cls, filepath: str) -> "DashboardConfig":
        """
        从JSON文件加载配置

        Args:
            filepath: JSON文件路径

        Returns:
            DashboardConfig: 配置实例
        """
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                config_dict = json.load(f)
            return cls(**config_dict)
        except (FileNotFoundError, json.JSONDecodeError) as e:
            raise ValueError(f"无法加载配置文件 {filepath}: {e}")

    @classmethod
    def from_yaml_file(cls, filepath: str) -> "DashboardConfig":
        """
        从YAML文件加载配置

        Args:
            filepath: YAML文件路径

        Returns:
            DashboardConfig: 配置实例
        """
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                config_dict = yaml.safe_load(f) or {}
            return cls(**config_dict)
        except (FileNotFoundError, yaml.YAMLError) as e:
            raise ValueError(f"无法加载配置文件 {filepath}: {e}")

    def save_to_json(self, filepath: str) -> None:
        """保存配置到JSON文件"""
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    def save_to_yaml(self, filepath: str) -> None:
        """保存配置到YAML文件"""
        with open(filepath, "w", encoding="utf-8") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, allow_unicode=True)

    def __str__(self) -> str:
        return (
            f"DashboardConfig(data_path={self.data_path}, "
            f"default_attribute={self.default_attribute})"
        )

    def __repr__(self) -> str:
        return f"DashboardConfig({self.to_dict()})"

    # 静态验证方法
    @staticmethod
    def _validate_attribute(attr: str) -> bool:
        """验证属性名是否在属性表中"""
        # 延迟导入，避免与data包循环导入
        from health_dashboard.data.attributes import ATTRIBUTE_DISPLAY_NAMES

        return attr in ATTRIBUTE_DISPLAY_NAMES

    @staticmethod
    def _validate_positive_int(value: int) -> bool:
        """验证正整数"""
        return isinstance(value, int) and not isinstance(value, bool) and value > 0

    @staticmethod
    def _validate_n_colors(n_colors: int) -> bool:
        """验证颜色数量，Blues色板最多9级"""
        return isinstance(n_colors, int) and 2 <= n_colors <= 9

    @staticmethod
    def _validate_opacity(value: float) -> bool:
        """验证透明度取值范围"""
        return isinstance(value, (int, float)) and 0.0 <= value <= 1.0

    @staticmethod
    def _validate_log_level(level: str) -> bool:
        """验证日志级别"""
        return bool(re.match(r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$", str(level)))


# 配置工厂函数
def create_config_from_dict(config_dict: Dict[str, Any]) -> DashboardConfig:
    """从字典创建配置"""
    return DashboardConfig.from_dict(config_dict)


def get_default_config() -> DashboardConfig:
    """获取默认配置"""
    return DashboardConfig.get_default()
