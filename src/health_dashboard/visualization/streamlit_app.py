"""
Streamlit应用模块
负责创建用户界面，并把三个图表的选择事件同步到同一个选择状态
"""

import logging
import os
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import pandas as pd
import streamlit as st

from health_dashboard.config.config import DashboardConfig
from health_dashboard.data.attributes import NUMERIC_ATTRIBUTES, get_display_name
from health_dashboard.data.loader import CountyDataLoader, DataLoadError
from health_dashboard.selection.events import ChartEventHandler
from health_dashboard.selection.state import SelectionState
from health_dashboard.utils.helpers import setup_logging
from health_dashboard.utils.logger import global_logger
from health_dashboard.visualization.chart_generator import ChartGenerator
from health_dashboard.visualization.scales import HistogramBin

SELECTION_MODES = ("points", "box", "lasso")


@st.cache_data(show_spinner="Loading county data...")
def load_dashboard_data(
    data_path: str, topology_path: str
) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """加载并缓存健康数据和县界要素，整个会话只读取一次"""
    loader = CountyDataLoader(
        DashboardConfig(data_path=data_path, topology_path=topology_path)
    )
    return loader.load_all()


def bin_resolver(bins: List[HistogramBin]) -> Callable[[Mapping[str, Any]], List[str]]:
    """创建直方图选中点解析函数：柱子的customdata为分箱序号"""

    def resolve(point: Mapping[str, Any]) -> List[str]:
        value = point.get("customdata")
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
        if value is None:
            value = point.get("point_index")
        try:
            index = int(value)
        except (TypeError, ValueError):
            return []
        if 0 <= index < len(bins):
            return list(bins[index].fips)
        return []

    return resolve


class StreamlitApp:
    """Streamlit应用类"""

    def __init__(self, config: Optional[DashboardConfig] = None):
        self.config = config or DashboardConfig.from_env()
        self.setup_page_config()
        self.chart_gen = ChartGenerator(self.config)
        self.logger = setup_logging(
            getattr(logging, str(self.config.log_level).upper(), logging.INFO),
            log_file=self.log_file_path(),
        )

    def log_file_path(self) -> str:
        """应用日志文件路径，位于配置的日志目录下，按日期命名"""
        return os.path.join(
            self.config.log_dir,
            f"streamlit_app_{datetime.now().strftime('%Y%m%d')}.log",
        )

    def setup_page_config(self):
        """设置页面配置"""
        st.set_page_config(
            page_title="US County Health Dashboard",
            page_icon="🗺️",
            layout="wide",
            initial_sidebar_state="expanded",
        )

    def init_session_state(self):
        """初始化会话级选择状态"""
        if "selection" not in st.session_state:
            st.session_state["selection"] = SelectionState()
        if "event_handler" not in st.session_state:
            st.session_state["event_handler"] = ChartEventHandler()
        if "chart_generation" not in st.session_state:
            st.session_state["chart_generation"] = 0
        if "last_attributes" not in st.session_state:
            st.session_state["last_attributes"] = None

    @property
    def selection(self) -> SelectionState:
        return st.session_state["selection"]

    def create_sidebar(self) -> Dict[str, Any]:
        """创建侧边栏控件"""
        st.sidebar.title("Settings")

        default_attr = self.config.default_attribute
        default_y = self.config.default_y_attribute

        attribute = st.sidebar.selectbox(
            "Attribute",
            options=NUMERIC_ATTRIBUTES,
            index=NUMERIC_ATTRIBUTES.index(default_attr)
            if default_attr in NUMERIC_ATTRIBUTES
            else 0,
            format_func=get_display_name,
            key="attribute_select",
        )

        y_attribute = st.sidebar.selectbox(
            "Scatterplot Y-Axis",
            options=NUMERIC_ATTRIBUTES,
            index=NUMERIC_ATTRIBUTES.index(default_y)
            if default_y in NUMERIC_ATTRIBUTES
            else 0,
            format_func=get_display_name,
            key="y_attribute_select",
        )

        st.sidebar.button(
            "Clear Selection",
            on_click=self.clear_selection,
            use_container_width=True,
        )

        return {"attribute": attribute, "y_attribute": y_attribute}

    def clear_selection(self):
        """清空点击和刷选集合，并让图表组件丢弃自身的选择框"""
        self.selection.clear()
        st.session_state["event_handler"].reset()
        st.session_state["chart_generation"] += 1
        global_logger.log_selection_change(
            "CLEAR", "sidebar", self.selection.clicked, self.selection.brushed
        )

    def chart_keys(self, attribute: str, y_attribute: str) -> Dict[str, str]:
        """图表组件的key，属性或清空操作变化时生成新组件"""
        generation = st.session_state["chart_generation"]
        return {
            "map": f"map-{generation}",
            "histogram": f"histogram-{attribute}-{generation}",
            "scatter": f"scatter-{attribute}-{y_attribute}-{generation}",
        }

    def process_chart_events(
        self, keys: Dict[str, str], bins: List[HistogramBin]
    ) -> bool:
        """
        在绘图前处理三个图表的选择事件

        Args:
            keys: 视图名到组件key的映射
            bins: 当前属性的直方图分箱

        Returns:
            bool: 选择状态是否发生变化
        """
        handler: ChartEventHandler = st.session_state["event_handler"]
        changed = False

        for view, key in keys.items():
            event = st.session_state.get(key)
            selection = event.get("selection") if event else None
            if view == "histogram":
                changed |= handler.handle(
                    key, view, selection, self.selection,
                    resolver=bin_resolver(bins), bin_mode=True,
                )
            else:
                changed |= handler.handle(key, view, selection, self.selection)

        return changed

    def display_header(self):
        """显示页面头部"""
        st.title("US County Health Dashboard")
        st.markdown(
            "Click counties, points or histogram bars, or drag a box to brush. "
            "Selections are highlighted across all three views."
        )

    def display_selection_summary(self, df: pd.DataFrame):
        """在侧边栏显示选择摘要"""
        st.sidebar.subheader("Selection")

        col1, col2 = st.sidebar.columns(2)
        with col1:
            st.metric("Clicked", len(self.selection.clicked))
        with col2:
            st.metric("Brushed", len(self.selection.brushed))

        highlighted = int(self.selection.highlight_mask(df["fips"]).sum())
        st.sidebar.caption(f"{highlighted:,} of {len(df):,} counties highlighted")

    def display_map(self, df: pd.DataFrame, geojson: Dict[str, Any], attribute: str, key: str):
        """显示等值区域图"""
        fig = self.chart_gen.create_choropleth(df, geojson, attribute, self.selection)
        st.plotly_chart(
            fig,
            use_container_width=True,
            on_select="rerun",
            selection_mode=SELECTION_MODES,
            key=key,
        )

    def display_histogram(
        self, df: pd.DataFrame, attribute: str, bins: List[HistogramBin], key: str
    ):
        """显示直方图"""
        fig = self.chart_gen.create_histogram(df, attribute, self.selection, bins=bins)
        st.plotly_chart(
            fig,
            use_container_width=True,
            on_select="rerun",
            selection_mode=("points", "box"),
            key=key,
        )

    def display_scatterplot(
        self, df: pd.DataFrame, attribute: str, y_attribute: str, key: str
    ):
        """显示散点图"""
        fig = self.chart_gen.create_scatterplot(df, attribute, y_attribute, self.selection)
        st.plotly_chart(
            fig,
            use_container_width=True,
            on_select="rerun",
            selection_mode=SELECTION_MODES,
            key=key,
        )

    def display_error_message(self, error_message: str):
        """显示错误信息"""
        st.error(f"❌ Error: {error_message}")
        st.info(
            """
        Possible fixes:
        - Check that the county topology file exists
        - Check that the health statistics CSV exists and has a cnty_fips column
        - Set HEALTH_DASHBOARD_DATA_PATH / HEALTH_DASHBOARD_TOPOLOGY_PATH
        """
        )

    def log_attribute_change(self, attribute: str, y_attribute: str):
        """下拉框变化时记录日志"""
        current = (attribute, y_attribute)
        if st.session_state["last_attributes"] != current:
            st.session_state["last_attributes"] = current
            global_logger.log_attribute_change(attribute, y_attribute)

    def run(self):
        """运行Streamlit应用"""
        self.init_session_state()

        params = self.create_sidebar()
        attribute = params["attribute"]
        y_attribute = params["y_attribute"]
        self.log_attribute_change(attribute, y_attribute)

        self.display_header()

        try:
            df, geojson = load_dashboard_data(
                self.config.data_path, self.config.topology_path
            )
        except DataLoadError as e:
            self.logger.error(f"数据加载失败: {e}")
            self.display_error_message(str(e))
            st.stop()
            return

        keys = self.chart_keys(attribute, y_attribute)

        # 先处理事件再绘图，保证三个视图使用同一份选择状态
        bins = self.chart_gen.compute_histogram_bins(df, attribute)
        self.process_chart_events(keys, bins)
        bins = self.chart_gen.compute_histogram_bins(df, attribute, self.selection)

        self.display_selection_summary(df)

        self.display_map(df, geojson, attribute, keys["map"])

        col1, col2 = st.columns(2)
        with col1:
            self.display_histogram(df, attribute, bins, keys["histogram"])
        with col2:
            self.display_scatterplot(df, attribute, y_attribute, keys["scatter"])


def main():
    """主函数"""
    app = StreamlitApp()
    app.run()


if __name__ == "__main__":
    main()
