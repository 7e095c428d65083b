"""
数据加载器模块
负责读取县级健康统计CSV和县界拓扑文件，并完成FIPS规范化和数值清洗
"""

import json
import math
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np
import pandas as pd
from pandas.errors import EmptyDataError, ParserError

from health_dashboard.config.config import DashboardConfig
from health_dashboard.data import topojson
from health_dashboard.data.attributes import NUMERIC_ATTRIBUTES
from health_dashboard.utils.helpers import clean_display_name, validate_dataframe
from health_dashboard.utils.logger import global_logger

PathLike = Union[str, Path]

# CSV中的FIPS列和县名列
FIPS_COLUMN = "cnty_fips"
NAME_COLUMN = "display_name"


class DataLoadError(Exception):
    """数据文件缺失、为空或格式不正确"""


def normalize_fips(value: Any) -> Optional[str]:
    """
    将FIPS代码规范化为5位补零字符串

    Args:
        value: 原始FIPS值，可以是整数、浮点数或字符串

    Returns:
        Optional[str]: 例如 1001 -> "01001"；空值或非数字返回None
    """
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return None
    text = str(value).strip().strip('"').strip()
    # pandas可能把整数列读成浮点数，例如 "1001.0"
    if text.endswith(".0"):
        text = text[:-2]
    if not text.isdigit():
        return None
    return text.zfill(5)


class CountyDataLoader:
    """
    县级数据加载器

    功能：
    1. 读取健康统计CSV，负值和非数字转换为NaN
    2. 读取TopoJSON拓扑并解码为GeoJSON县界要素
    """

    def __init__(self, config: Optional[DashboardConfig] = None):
        """
        初始化数据加载器

        Args:
            config: 仪表盘配置对象，None时使用默认配置
        """
        self._config = config or DashboardConfig()

    def load_county_data(self, path: Optional[PathLike] = None) -> pd.DataFrame:
        """
        加载县级健康统计数据

        Args:
            path: CSV文件路径，None时使用配置中的路径

        Returns:
            pd.DataFrame: 包含 fips、display_name 和数值属性列的数据
        """
        csv_path = Path(path or self._config.data_path)

        if not csv_path.exists():
            self._fail(csv_path, f"数据文件不存在: {csv_path}")

        try:
            raw = pd.read_csv(csv_path, dtype=str, low_memory=False)
        except (EmptyDataError, ParserError, UnicodeDecodeError, OSError) as e:
            self._fail(csv_path, f"无法解析数据文件 {csv_path}: {e}")

        valid, message = validate_dataframe(raw, required_columns=[FIPS_COLUMN])
        if not valid:
            self._fail(csv_path, f"数据文件 {csv_path} 验证失败: {message}")

        df = self.clean_county_data(raw)

        global_logger.log_data_load(
            str(csv_path),
            len(df),
            missing_values=int(df[self._attribute_columns(df)].isna().sum().sum()),
        )
        return df

    def clean_county_data(self, raw: pd.DataFrame) -> pd.DataFrame:
        """
        清洗原始健康统计数据

        Args:
            raw: 原始数据（所有列为字符串）

        Returns:
            pd.DataFrame: 清洗后的数据，按FIPS去重
        """
        df = raw.copy()

        df["fips"] = df[FIPS_COLUMN].map(normalize_fips)

        invalid = df["fips"].isna()
        if invalid.any():
            global_logger.warning(f"发现 {int(invalid.sum())} 条FIPS为空或无效的记录，已丢弃")
            df = df[~invalid].copy()

        if NAME_COLUMN in df.columns:
            df[NAME_COLUMN] = df[NAME_COLUMN].map(clean_display_name)
        else:
            df[NAME_COLUMN] = ""

        # 负值表示数据缺失，统一转换为NaN
        for attr in self._attribute_columns(df):
            values = pd.to_numeric(df[attr], errors="coerce")
            df[attr] = values.where(values >= 0, np.nan)

        for attr in NUMERIC_ATTRIBUTES:
            if attr not in df.columns:
                global_logger.warning(f"数据中缺少属性列 {attr}，全部显示为N/A")
                df[attr] = np.nan

        duplicated = df["fips"].duplicated(keep="first")
        if duplicated.any():
            global_logger.warning(f"发现 {int(duplicated.sum())} 条重复FIPS记录，保留首条")
            df = df[~duplicated]

        columns = ["fips", NAME_COLUMN] + self._attribute_columns(df)
        extra = [c for c in df.columns if c not in columns and c != FIPS_COLUMN]
        return df[columns + extra].reset_index(drop=True)

    def load_topology(self, path: Optional[PathLike] = None) -> Dict[str, Any]:
        """
        加载拓扑文件

        Args:
            path: 拓扑JSON文件路径，None时使用配置中的路径

        Returns:
            Dict[str, Any]: 解析后的JSON字典
        """
        topo_path = Path(path or self._config.topology_path)

        if not topo_path.exists():
            self._fail(topo_path, f"拓扑文件不存在: {topo_path}")

        try:
            with open(topo_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            self._fail(topo_path, f"无法解析拓扑文件 {topo_path}: {e}")

    def load_county_features(
        self, path: Optional[PathLike] = None, object_name: str = "counties"
    ) -> Dict[str, Any]:
        """
        加载县界要素

        Args:
            path: 拓扑或GeoJSON文件路径
            object_name: 拓扑中县界对象的名称

        Returns:
            Dict[str, Any]: GeoJSON FeatureCollection，要素id为5位FIPS
        """
        topo_path = str(path or self._config.topology_path)
        data = self.load_topology(path)

        if data.get("type") == "FeatureCollection":
            collection = data
        elif data.get("type") == "Topology":
            if object_name not in data.get("objects", {}):
                self._fail(topo_path, f"拓扑文件中缺少 {object_name} 对象")
            try:
                collection = topojson.feature(data, object_name)
            except (KeyError, IndexError, ValueError, TypeError) as e:
                self._fail(topo_path, f"拓扑解码失败: {e}")
        else:
            self._fail(topo_path, f"不支持的地理数据类型: {data.get('type')}")

        features = []
        for feat in collection.get("features", []):
            if "id" in feat and feat["id"] is not None:
                feat = dict(feat)
                feat["id"] = normalize_fips(feat["id"]) or str(feat["id"])
            features.append(feat)

        global_logger.log_data_load(topo_path, len(features), kind="features")
        return {"type": "FeatureCollection", "features": features}

    def load_all(self) -> Tuple[pd.DataFrame, Dict[str, Any]]:
        """加载健康数据和县界要素"""
        return self.load_county_data(), self.load_county_features()

    @staticmethod
    def _attribute_columns(df: pd.DataFrame):
        return [attr for attr in NUMERIC_ATTRIBUTES if attr in df.columns]

    @staticmethod
    def _fail(path: Any, message: str):
        """记录错误并抛出DataLoadError"""
        global_logger.log_data_load(str(path), 0, success=False, error=message)
        raise DataLoadError(message)
