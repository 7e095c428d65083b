"""
数据加载器单元测试
"""

import json
import math

import pandas as pd
import pytest

from health_dashboard.config.config import DashboardConfig
from health_dashboard.data.loader import CountyDataLoader, DataLoadError, normalize_fips


class TestNormalizeFips:
    """FIPS规范化测试类"""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (1001, "01001"),
            ("1001", "01001"),
            ("01001", "01001"),
            ("1001.0", "01001"),
            (" 6037 ", "06037"),
            ('"6037"', "06037"),
            (48201, "48201"),
        ],
    )
    def test_normalize_fips(self, raw, expected):
        assert normalize_fips(raw) == expected

    @pytest.mark.parametrize("raw", [None, float("nan"), "", "  ", "abc", "10-01"])
    def test_invalid_fips(self, raw):
        """测试空值和非数字FIPS返回None"""
        assert normalize_fips(raw) is None


class TestLoadCountyData:
    """健康统计数据加载测试类"""

    def test_load_county_data(self, dashboard_config):
        df = CountyDataLoader(dashboard_config).load_county_data()

        assert len(df) == 5
        assert list(df["fips"]) == ["01001", "01003", "01005", "06037", "06059"]
        assert list(df.columns[:2]) == ["fips", "display_name"]

    def test_display_name_quotes_removed(self, county_df):
        assert county_df.loc[0, "display_name"] == "Autauga County, AL"
        assert not county_df["display_name"].str.contains('"').any()

    def test_numeric_coercion(self, county_df):
        assert county_df["poverty_perc"].dtype == float
        assert county_df.loc[0, "median_household_income"] == 58233

    def test_negative_values_become_nan(self, county_df):
        """测试负值转换为NaN而不是删除整行"""
        row = county_df[county_df["fips"] == "06037"].iloc[0]

        assert math.isnan(row["percent_stroke"])
        assert row["poverty_perc"] == 13.9

    def test_missing_values_become_nan(self, county_df):
        row = county_df[county_df["fips"] == "06059"].iloc[0]

        assert math.isnan(row["median_household_income"])

    def test_duplicate_fips_keeps_first(self, tmp_path):
        path = tmp_path / "dup.csv"
        pd.DataFrame(
            {
                "cnty_fips": ["1001", "01001"],
                "display_name": ["First", "Second"],
                "poverty_perc": ["1", "2"],
            }
        ).to_csv(path, index=False)

        df = CountyDataLoader().load_county_data(path)

        assert len(df) == 1
        assert df.loc[0, "display_name"] == "First"

    def test_missing_attribute_column_filled(self, tmp_path):
        """测试缺少属性列时补充为NaN列"""
        path = tmp_path / "partial.csv"
        pd.DataFrame({"cnty_fips": ["1001"], "poverty_perc": ["12"]}).to_csv(
            path, index=False
        )

        df = CountyDataLoader().load_county_data(path)

        assert "percent_stroke" in df.columns
        assert df["percent_stroke"].isna().all()
        assert df.loc[0, "display_name"] == ""

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataLoadError):
            CountyDataLoader().load_county_data(tmp_path / "missing.csv")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.csv"
        path.write_text("", encoding="utf-8")

        with pytest.raises(DataLoadError):
            CountyDataLoader().load_county_data(path)

    def test_blank_fips_rows_dropped(self, tmp_path):
        """测试FIPS为空或非数字的记录被丢弃"""
        path = tmp_path / "blank.csv"
        path.write_text(
            "cnty_fips,display_name,poverty_perc\n,X,1\nabc,Z,3\n1001,Y,2\n",
            encoding="utf-8",
        )

        df = CountyDataLoader().load_county_data(path)

        assert list(df["fips"]) == ["01001"]
        assert df.loc[0, "display_name"] == "Y"

    def test_unreadable_path(self, tmp_path):
        """测试路径为目录时抛出DataLoadError"""
        with pytest.raises(DataLoadError):
            CountyDataLoader().load_county_data(tmp_path)

    def test_missing_fips_column(self, tmp_path):
        path = tmp_path / "nofips.csv"
        pd.DataFrame({"county": ["x"]}).to_csv(path, index=False)

        with pytest.raises(DataLoadError, match="cnty_fips"):
            CountyDataLoader().load_county_data(path)


class TestLoadCountyFeatures:
    """县界要素加载测试类"""

    def test_load_county_features(self, dashboard_config):
        collection = CountyDataLoader(dashboard_config).load_county_features()

        assert collection["type"] == "FeatureCollection"
        assert [f["id"] for f in collection["features"]] == [
            "01001",
            "01003",
            "06037",
            "99999",
        ]

    def test_plain_geojson_accepted(self, tmp_path):
        path = tmp_path / "counties.geojson"
        path.write_text(
            json.dumps(
                {
                    "type": "FeatureCollection",
                    "features": [
                        {"type": "Feature", "id": 1001, "properties": {}, "geometry": None}
                    ],
                }
            ),
            encoding="utf-8",
        )

        collection = CountyDataLoader().load_county_features(path)

        assert collection["features"][0]["id"] == "01001"

    def test_topology_without_counties(self, tmp_path, sample_topology):
        sample_topology["objects"] = {"states": sample_topology["objects"]["counties"]}
        path = tmp_path / "states.json"
        path.write_text(json.dumps(sample_topology), encoding="utf-8")

        with pytest.raises(DataLoadError, match="counties"):
            CountyDataLoader().load_county_features(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{broken", encoding="utf-8")

        with pytest.raises(DataLoadError):
            CountyDataLoader().load_topology(path)

    def test_unsupported_type(self, tmp_path):
        path = tmp_path / "other.json"
        path.write_text(json.dumps({"type": "Feature"}), encoding="utf-8")

        with pytest.raises(DataLoadError):
            CountyDataLoader().load_county_features(path)

    def test_missing_topology_file(self, tmp_path):
        config = DashboardConfig(topology_path=str(tmp_path / "missing.json"))

        with pytest.raises(DataLoadError):
            CountyDataLoader(config).load_county_features()

    def test_unreadable_topology_path(self, tmp_path):
        with pytest.raises(DataLoadError):
            CountyDataLoader().load_topology(tmp_path)

        with pytest.raises(DataLoadError):
            CountyDataLoader().load_county_features(tmp_path)

    def test_load_all(self, dashboard_config):
        df, geojson = CountyDataLoader(dashboard_config).load_all()

        assert len(df) == 5
        assert len(geojson["features"]) == 4
