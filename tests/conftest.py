"""
测试配置和公共fixtures
"""

import sys
from pathlib import Path

import pytest
import pandas as pd

# 添加src目录和项目根目录到Python路径
ROOT_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT_DIR / "src"))
sys.path.insert(0, str(ROOT_DIR))

from health_dashboard.config.config import DashboardConfig
from health_dashboard.data.loader import CountyDataLoader


@pytest.fixture
def raw_county_frame():
    """生成模拟的原始健康统计数据（含负值和缺失值）"""
    return pd.DataFrame(
        {
            "cnty_fips": ["1001", "1003", "1005", "6037", "6059"],
            "display_name": [
                '"Autauga County, AL"',
                '"Baldwin County, AL"',
                '"Barbour County, AL"',
                '"Los Angeles County, CA"',
                '"Orange County, CA"',
            ],
            "poverty_perc": ["15.2", "10.4", "26.8", "13.9", "9.1"],
            "percent_smoking": ["18.1", "16.5", "23.0", "10.2", "8.9"],
            "median_household_income": ["58233", "64346", "33000", "76367", ""],
            "percent_stroke": ["3.8", "3.5", "4.6", "-1", "2.6"],
        }
    )


@pytest.fixture
def county_csv(tmp_path, raw_county_frame):
    """把模拟数据写入临时CSV文件"""
    path = tmp_path / "national_health_data_2024.csv"
    raw_county_frame.to_csv(path, index=False)
    return path


@pytest.fixture
def sample_topology():
    """生成量化的模拟县界拓扑"""
    return {
        "type": "Topology",
        "transform": {"scale": [0.5, 0.5], "translate": [10, 20]},
        "objects": {
            "counties": {
                "type": "GeometryCollection",
                "geometries": [
                    {
                        "type": "Polygon",
                        "arcs": [[0]],
                        "id": "01001",
                        "properties": {"name": "Autauga"},
                    },
                    {
                        "type": "Polygon",
                        "arcs": [[1, -3]],
                        "id": "01003",
                        "properties": {"name": "Baldwin"},
                    },
                    {
                        "type": "MultiPolygon",
                        "arcs": [[[3]]],
                        "id": 6037,
                        "properties": {"name": "Los Angeles"},
                    },
                    {"type": None, "id": "99999"},
                ],
            }
        },
        "arcs": [
            [[0, 0], [2, 0], [0, 2], [-2, 0], [0, -2]],
            [[2, 0], [2, 0], [0, 2]],
            [[2, 0], [0, 2], [2, 0]],
            [[10, 10], [1, 0], [0, 1], [-1, -1]],
        ],
    }


@pytest.fixture
def topology_file(tmp_path, sample_topology):
    """把模拟拓扑写入临时JSON文件"""
    import json

    path = tmp_path / "counties-10m.json"
    path.write_text(json.dumps(sample_topology), encoding="utf-8")
    return path


@pytest.fixture
def dashboard_config(county_csv, topology_file):
    """指向临时数据文件的配置"""
    return DashboardConfig(data_path=str(county_csv), topology_path=str(topology_file))


@pytest.fixture
def county_df(dashboard_config):
    """清洗后的县级数据"""
    return CountyDataLoader(dashboard_config).load_county_data()


@pytest.fixture
def county_geojson(dashboard_config):
    """解码后的县界要素"""
    return CountyDataLoader(dashboard_config).load_county_features()
